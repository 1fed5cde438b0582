"""Kubernetes orchestrator backed by the kubectl CLI."""

from __future__ import annotations

import logging
import os
import secrets
import tempfile
import textwrap
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from minicloud.config import Settings
from minicloud.orchestration import manifest_renderer, naming
from minicloud.orchestration.base import (
    AppDeleteSpec,
    AppProvisionResult,
    AppProvisionSpec,
    DatabaseProvisionResult,
    DatabaseProvisionSpec,
    FailureKind,
    KubernetesOrchestrator,
    OrchestrationOutcome,
)
from minicloud.orchestration.command_runner import (
    CommandFailedError,
    CommandRunner,
    ToolUnavailableError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

KUBECTL_UNAVAILABLE_MESSAGE = (
    "kubectl is not running or cannot reach the cluster. Start minikube and kubectl first."
)

DATABASE_USER = "appuser"
ENV_BLOCK_INDENT = " " * 10


class KubectlOrchestrator(KubernetesOrchestrator):
    """Provisions Postgres pods and app deployments by shelling out to kubectl."""

    def __init__(
        self,
        kubectl_bin: str = "kubectl",
        postgres_image: str = "postgres:16-alpine",
        postgres_port: int = 5432,
        wait_timeout_seconds: int = 120,
        runner: CommandRunner | None = None,
    ):
        self.kubectl_bin = kubectl_bin
        self.postgres_image = postgres_image
        self.postgres_port = postgres_port
        self.wait_timeout_seconds = wait_timeout_seconds
        self.runner = runner or CommandRunner(unavailable_message=KUBECTL_UNAVAILABLE_MESSAGE)

    @classmethod
    def from_settings(cls, settings: Settings) -> KubectlOrchestrator:
        return cls(
            kubectl_bin=settings.kubectl_bin,
            postgres_image=settings.postgres_image,
            postgres_port=settings.postgres_port,
            wait_timeout_seconds=settings.wait_timeout_seconds,
        )

    # --- Public operations ---

    def provision_database(
        self, spec: DatabaseProvisionSpec
    ) -> OrchestrationOutcome[DatabaseProvisionResult]:
        naming.validate_label(spec.namespace, "namespace")
        naming.validate_label(spec.name, "database name")
        return self._attempt(lambda: self._provision_database(spec))

    def provision_app(self, spec: AppProvisionSpec) -> OrchestrationOutcome[AppProvisionResult]:
        naming.validate_label(spec.namespace, "namespace")
        naming.validate_label(spec.name, "app name")
        return self._attempt(lambda: self._provision_app(spec))

    def delete_app(self, spec: AppDeleteSpec) -> OrchestrationOutcome[None]:
        naming.validate_label(spec.namespace, "namespace")
        naming.validate_label(spec.name, "app name")
        return self._attempt(lambda: self._delete_app(spec))

    # --- Operation bodies (raise classified CommandErrors) ---

    def _provision_database(self, spec: DatabaseProvisionSpec) -> DatabaseProvisionResult:
        self._ensure_ready()

        secret_name = naming.secret_name(spec.name)
        pod_name = naming.database_pod_name(spec.name)
        password = secrets.token_urlsafe(24)

        logger.info(
            "Provision database requested. namespace=%s, name=%s, pod=%s",
            spec.namespace,
            spec.name,
            pod_name,
        )

        self._ensure_namespace(spec.namespace)
        self.runner.run(
            self._kubectl(
                "-n", spec.namespace,
                "create", "secret", "generic", secret_name,
                f"--from-literal=POSTGRES_DB={spec.name.replace('-', '_')}",
                f"--from-literal=POSTGRES_USER={DATABASE_USER}",
                f"--from-literal=POSTGRES_PASSWORD={password}",
                "--dry-run=client", "-o", "yaml",
            ),
            pipe_to=self._kubectl("apply", "-f", "-"),
        )

        manifest = manifest_renderer.render(
            "k8s/database.yaml",
            {
                "POD_NAME": pod_name,
                "NAMESPACE": spec.namespace,
                "INSTANCE_NAME": spec.name,
                "POSTGRES_IMAGE": self.postgres_image,
                "POSTGRES_PORT": str(self.postgres_port),
                "SECRET_NAME": secret_name,
                "SERVICE_NAME": naming.service_name(spec.name),
            },
        )
        self._apply_manifest(manifest)

        self.runner.run(
            self._kubectl(
                "-n", spec.namespace,
                "wait", "--for=condition=Ready", f"pod/{pod_name}",
                f"--timeout={self.wait_timeout_seconds}s",
            )
        )
        return DatabaseProvisionResult(secret_name=secret_name)

    def _provision_app(self, spec: AppProvisionSpec) -> AppProvisionResult:
        self._ensure_ready()

        deployment_name = spec.name
        host = naming.access_host(spec.name, spec.namespace)

        logger.info(
            "Provision app requested. namespace=%s, name=%s, image=%s, replicas=%d",
            spec.namespace,
            spec.name,
            spec.image,
            spec.replicas,
        )

        self._ensure_namespace(spec.namespace)

        manifest = manifest_renderer.render(
            "k8s/app.yaml",
            {
                "DEPLOYMENT_NAME": deployment_name,
                "NAMESPACE": spec.namespace,
                "APP_NAME": spec.name,
                "REPLICAS": str(spec.replicas),
                "APP_IMAGE": spec.image,
                "APP_PORT": str(spec.port),
                "DB_ENV_BLOCK": self._database_env_block(spec.database_secret_name),
                "SERVICE_NAME": naming.service_name(spec.name),
                "INGRESS_NAME": naming.ingress_name(spec.name),
                "ACCESS_HOST": host,
            },
        )
        self._apply_manifest(manifest)

        self.runner.run(
            self._kubectl(
                "-n", spec.namespace,
                "rollout", "status", f"deployment/{deployment_name}",
                f"--timeout={self.wait_timeout_seconds}s",
            )
        )
        output = self.runner.run(
            self._kubectl(
                "-n", spec.namespace,
                "get", "deployment", deployment_name,
                "-o", "jsonpath={.status.readyReplicas}",
            )
        )
        return AppProvisionResult(
            access_url=f"http://{host}",
            ready_replicas=_parse_int(output.stdout),
        )

    def _delete_app(self, spec: AppDeleteSpec) -> None:
        self._ensure_ready()

        logger.info("Delete app requested. namespace=%s, name=%s", spec.namespace, spec.name)

        for kind, object_name in (
            ("ingress", naming.ingress_name(spec.name)),
            ("service", naming.service_name(spec.name)),
            ("deployment", spec.name),
        ):
            self.runner.run(
                self._kubectl(
                    "-n", spec.namespace, "delete", kind, object_name, "--ignore-not-found=true"
                )
            )

    # --- Helpers ---

    def _attempt(self, operation: Callable[[], T]) -> OrchestrationOutcome[T]:
        try:
            return OrchestrationOutcome.success(operation())
        except ToolUnavailableError as exc:
            return OrchestrationOutcome.failed(FailureKind.TOOL_UNAVAILABLE, exc.message)
        except CommandFailedError as exc:
            return OrchestrationOutcome.failed(FailureKind.COMMAND_FAILED, exc.message)

    def _kubectl(self, *args: str) -> list[str]:
        return [self.kubectl_bin, *args]

    def _ensure_ready(self) -> None:
        """Preflight: kubectl is installed and the cluster answers."""
        try:
            self.runner.run(self._kubectl("version", "--client"))
            self.runner.run(self._kubectl("cluster-info"))
        except CommandFailedError as exc:
            raise ToolUnavailableError(KUBECTL_UNAVAILABLE_MESSAGE) from exc

    def _ensure_namespace(self, namespace: str) -> None:
        self.runner.run(
            self._kubectl("create", "namespace", namespace, "--dry-run=client", "-o", "yaml"),
            pipe_to=self._kubectl("apply", "-f", "-"),
        )

    def _database_env_block(self, database_secret_name: str | None) -> str:
        if database_secret_name is None:
            return ""
        env_block = manifest_renderer.render(
            "k8s/app-db-env.yaml",
            {
                "DB_HOST": naming.database_host_for_secret(database_secret_name),
                "DB_SECRET_NAME": database_secret_name,
            },
        )
        return "\n" + textwrap.indent(env_block.rstrip("\n"), ENV_BLOCK_INDENT)

    def _apply_manifest(self, manifest: str) -> None:
        fd, tmp_name = tempfile.mkstemp(prefix="minicloud-", suffix=".yaml")
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(manifest)
            self.runner.run(self._kubectl("apply", "-f", str(tmp_path)))
        finally:
            tmp_path.unlink(missing_ok=True)


def _parse_int(text: str) -> int:
    try:
        return int(text.strip())
    except ValueError:
        return 0
