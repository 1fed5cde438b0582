"""Database provisioning lifecycle: REQUESTED -> PROVISIONING -> READY | FAILED."""

from minicloud.db.models.database_instance import DatabaseInstanceRow
from minicloud.errors.exceptions import NotFoundError, ResourceAlreadyExistsError
from minicloud.models.enums import ProvisioningStatus, ResourceKind
from minicloud.orchestration import naming
from minicloud.orchestration.base import DatabaseProvisionSpec
from minicloud.repositories.database_instance_repo import DatabaseInstanceRepository
from minicloud.services.lifecycle import transition
from minicloud.services.provisioning import ProvisioningService


class DatabaseService(ProvisioningService):
    def __init__(self, session, orchestrator, locks):
        super().__init__(session, orchestrator, locks)
        self.repo = DatabaseInstanceRepository(session)

    async def create(self, namespace: str, name: str) -> DatabaseInstanceRow:
        """Provision a database and return its record.

        A generic provisioning failure is returned as a FAILED record; only an
        unreachable kubectl raises (OrchestratorUnavailableError).
        """
        naming.validate_label(namespace, "namespace")
        naming.validate_label(name, "database name")

        async with self._guarded(ResourceKind.DATABASE, namespace, name):
            current = await self.repo.find_current(namespace, name)
            if current is not None and current.status != ProvisioningStatus.DELETED:
                raise ResourceAlreadyExistsError("Database", namespace, name)

            row = await self.repo.create(
                namespace=namespace,
                name=name,
                status=ProvisioningStatus.REQUESTED.value,
            )
            transition(row, ProvisioningStatus.PROVISIONING)
            await self.session.commit()

            outcome = await self._call_orchestrator(
                row,
                self.orchestrator.provision_database,
                DatabaseProvisionSpec(name=name, namespace=namespace),
            )
            if not outcome.ok:
                await self._settle_failure(row, outcome.failure)
                return row

            await self.repo.update(row, secret_name=outcome.value.secret_name)
            transition(row, ProvisioningStatus.READY)
            await self.session.commit()
            return row

    async def get(self, namespace: str, name: str) -> DatabaseInstanceRow:
        row = await self.repo.find_current(namespace, name)
        if row is None:
            raise NotFoundError("Database", namespace, name)
        return row

    async def history(self, namespace: str, name: str) -> list[DatabaseInstanceRow]:
        """Every record for the identity, oldest first."""
        if not await self.repo.exists(namespace, name):
            raise NotFoundError("Database", namespace, name)
        return await self.repo.list_history(namespace, name)
