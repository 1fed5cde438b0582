"""Kubernetes orchestration: manifest rendering and kubectl execution."""

from minicloud.orchestration.base import (
    AppDeleteSpec,
    AppProvisionResult,
    AppProvisionSpec,
    DatabaseProvisionResult,
    DatabaseProvisionSpec,
    FailureKind,
    KubernetesOrchestrator,
    OrchestrationFailure,
    OrchestrationOutcome,
)
from minicloud.orchestration.kubectl import KubectlOrchestrator

__all__ = [
    "AppDeleteSpec",
    "AppProvisionResult",
    "AppProvisionSpec",
    "DatabaseProvisionResult",
    "DatabaseProvisionSpec",
    "FailureKind",
    "KubectlOrchestrator",
    "KubernetesOrchestrator",
    "OrchestrationFailure",
    "OrchestrationOutcome",
]
