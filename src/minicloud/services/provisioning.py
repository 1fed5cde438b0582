"""Shared plumbing for the database and app provisioning services."""

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from minicloud.errors.exceptions import OrchestratorUnavailableError
from minicloud.logging_config import resource_context
from minicloud.models.enums import ProvisioningStatus, ResourceKind
from minicloud.orchestration.base import (
    FailureKind,
    KubernetesOrchestrator,
    OrchestrationFailure,
    OrchestrationOutcome,
)
from minicloud.services.lifecycle import transition
from minicloud.services.resource_locks import ResourceLockRegistry, resource_key

logger = logging.getLogger(__name__)

SpecT = TypeVar("SpecT")
ResultT = TypeVar("ResultT")


class ProvisioningService:
    """Base for services driving a record through the provisioning lifecycle.

    Every status change is committed immediately, so a FAILED status written
    before an error propagates is never rolled back.
    """

    def __init__(
        self,
        session: AsyncSession,
        orchestrator: KubernetesOrchestrator,
        locks: ResourceLockRegistry,
    ):
        self.session = session
        self.orchestrator = orchestrator
        self.locks = locks

    @asynccontextmanager
    async def _guarded(self, kind: ResourceKind, namespace: str, name: str) -> AsyncIterator[None]:
        """Hold the identity's lock with its log context bound."""
        async with self.locks.hold(resource_key(kind, namespace, name)):
            with resource_context(kind, namespace, name):
                yield

    async def _call_orchestrator(
        self,
        row,
        operation: Callable[[SpecT], OrchestrationOutcome[ResultT]],
        spec: SpecT,
    ) -> OrchestrationOutcome[ResultT]:
        """Run a blocking orchestrator operation off the event loop.

        The worker thread cannot be interrupted, so a cancelled caller stops
        waiting for it and the record is settled as FAILED before the
        cancellation propagates.
        """
        try:
            return await asyncio.to_thread(operation, spec)
        except asyncio.CancelledError:
            logger.warning("Orchestrator call cancelled for %s/%s", row.namespace, row.name)
            transition(row, ProvisioningStatus.FAILED, message="Operation cancelled before completion")
            await asyncio.shield(self.session.commit())
            raise
        except Exception as exc:
            logger.exception("Orchestrator raised for %s/%s", row.namespace, row.name)
            transition(row, ProvisioningStatus.FAILED, message=str(exc) or type(exc).__name__)
            await self.session.commit()
            raise

    async def _settle_failure(self, row, failure: OrchestrationFailure) -> None:
        """Persist FAILED; raise only when the orchestrator itself was unreachable."""
        transition(row, ProvisioningStatus.FAILED, message=failure.message)
        await self.session.commit()
        if failure.kind is FailureKind.TOOL_UNAVAILABLE:
            raise OrchestratorUnavailableError(failure.message)
        logger.warning(
            "Provisioning failed for %s/%s: %s", row.namespace, row.name, failure.message
        )
