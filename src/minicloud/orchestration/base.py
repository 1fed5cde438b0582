"""Orchestrator contract: provisioning specs, results and outcomes."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class DatabaseProvisionSpec:
    name: str
    namespace: str


@dataclass(frozen=True)
class DatabaseProvisionResult:
    secret_name: str


@dataclass(frozen=True)
class AppProvisionSpec:
    name: str
    namespace: str
    image: str
    port: int
    replicas: int
    database_secret_name: str | None = None


@dataclass(frozen=True)
class AppProvisionResult:
    access_url: str
    ready_replicas: int


@dataclass(frozen=True)
class AppDeleteSpec:
    name: str
    namespace: str


class FailureKind(StrEnum):
    TOOL_UNAVAILABLE = "tool_unavailable"
    COMMAND_FAILED = "command_failed"


@dataclass(frozen=True)
class OrchestrationFailure:
    kind: FailureKind
    message: str


@dataclass(frozen=True)
class OrchestrationOutcome(Generic[T]):
    """Either a success value or a classified failure, never both."""

    value: T | None = None
    failure: OrchestrationFailure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, value: T | None = None) -> OrchestrationOutcome[T]:
        return cls(value=value)

    @classmethod
    def failed(cls, kind: FailureKind, message: str) -> OrchestrationOutcome[T]:
        return cls(failure=OrchestrationFailure(kind=kind, message=message))


class KubernetesOrchestrator(ABC):
    """Applies provisioning requests to a Kubernetes cluster.

    Implementations raise ``ValidationError`` for malformed names before any
    external call; every other problem is reported through the returned
    outcome.
    """

    @abstractmethod
    def provision_database(
        self, spec: DatabaseProvisionSpec
    ) -> OrchestrationOutcome[DatabaseProvisionResult]:
        ...

    @abstractmethod
    def provision_app(self, spec: AppProvisionSpec) -> OrchestrationOutcome[AppProvisionResult]:
        ...

    @abstractmethod
    def delete_app(self, spec: AppDeleteSpec) -> OrchestrationOutcome[None]:
        ...
