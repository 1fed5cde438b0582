"""App provisioning lifecycle.

Create: REQUESTED -> PROVISIONING -> READY | FAILED.
Delete: READY | FAILED -> DELETING -> DELETED | FAILED.
"""

import logging

from minicloud.db.models.app_instance import AppInstanceRow
from minicloud.errors.exceptions import NotFoundError, ResourceAlreadyExistsError
from minicloud.models.app import AppCreate
from minicloud.models.enums import ProvisioningStatus, ResourceKind
from minicloud.orchestration import naming
from minicloud.orchestration.base import AppDeleteSpec, AppProvisionSpec
from minicloud.repositories.app_instance_repo import AppInstanceRepository
from minicloud.repositories.database_instance_repo import DatabaseInstanceRepository
from minicloud.services.lifecycle import transition
from minicloud.services.provisioning import ProvisioningService

logger = logging.getLogger(__name__)


class AppService(ProvisioningService):
    def __init__(self, session, orchestrator, locks):
        super().__init__(session, orchestrator, locks)
        self.repo = AppInstanceRepository(session)
        self.database_repo = DatabaseInstanceRepository(session)

    async def create(self, request: AppCreate) -> AppInstanceRow:
        namespace, name = request.namespace, request.name
        naming.validate_label(namespace, "namespace")
        naming.validate_label(name, "app name")
        if request.database_ref is not None:
            naming.validate_label(request.database_ref, "databaseRef")

        async with self._guarded(ResourceKind.APP, namespace, name):
            current = await self.repo.find_current(namespace, name)
            if current is not None and current.status != ProvisioningStatus.DELETED:
                raise ResourceAlreadyExistsError("App", namespace, name)

            database_secret_name = await self._resolve_database_secret(
                namespace, request.database_ref
            )

            row = await self.repo.create(
                namespace=namespace,
                name=name,
                image=request.image,
                port=request.port,
                replicas=request.replicas,
                database_ref=request.database_ref,
                status=ProvisioningStatus.REQUESTED.value,
            )
            transition(row, ProvisioningStatus.PROVISIONING)
            await self.session.commit()

            outcome = await self._call_orchestrator(
                row,
                self.orchestrator.provision_app,
                AppProvisionSpec(
                    name=name,
                    namespace=namespace,
                    image=request.image,
                    port=request.port,
                    replicas=request.replicas,
                    database_secret_name=database_secret_name,
                ),
            )
            if not outcome.ok:
                await self._settle_failure(row, outcome.failure)
                return row

            await self.repo.update(
                row,
                access_url=outcome.value.access_url,
                ready_replicas=outcome.value.ready_replicas,
            )
            transition(row, ProvisioningStatus.READY)
            await self.session.commit()
            return row

    async def get(self, namespace: str, name: str) -> AppInstanceRow:
        row = await self.repo.find_current(namespace, name)
        if row is None:
            raise NotFoundError("App", namespace, name)
        return row

    async def history(self, namespace: str, name: str) -> list[AppInstanceRow]:
        if not await self.repo.exists(namespace, name):
            raise NotFoundError("App", namespace, name)
        return await self.repo.list_history(namespace, name)

    async def delete(self, namespace: str, name: str) -> AppInstanceRow:
        async with self._guarded(ResourceKind.APP, namespace, name):
            row = await self.repo.find_current(namespace, name)
            if row is None or row.status == ProvisioningStatus.DELETED:
                raise NotFoundError("App", namespace, name)

            transition(row, ProvisioningStatus.DELETING)
            await self.session.commit()

            outcome = await self._call_orchestrator(
                row,
                self.orchestrator.delete_app,
                AppDeleteSpec(name=name, namespace=namespace),
            )
            if not outcome.ok:
                await self._settle_failure(row, outcome.failure)
                return row

            transition(row, ProvisioningStatus.DELETED)
            await self.session.commit()
            return row

    async def _resolve_database_secret(self, namespace: str, database_ref: str | None) -> str | None:
        """Secret name of the referenced database, captured by value."""
        if database_ref is None:
            return None
        database = await self.database_repo.find_current(namespace, database_ref)
        if database is None:
            raise NotFoundError("Database", namespace, database_ref)
        if database.secret_name is None:
            logger.warning(
                "Database %s/%s has no connection secret (status=%s)",
                namespace,
                database_ref,
                database.status,
            )
        return database.secret_name
