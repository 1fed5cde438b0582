"""Custom exception classes for the MiniCloud control plane."""


class MiniCloudError(Exception):
    """Base exception for MiniCloud."""

    def __init__(self, code: str, message: str, details=None, status_code: int = 500):
        self.code = code
        self.message = message
        self.details = details
        self.status_code = status_code
        super().__init__(message)


class ValidationError(MiniCloudError):
    """Malformed identity or field, rejected before any side effect."""

    def __init__(self, message: str, details=None):
        super().__init__("VALIDATION_ERROR", message, details, status_code=400)


class NotFoundError(MiniCloudError):
    """Resource not found."""

    def __init__(self, resource: str, namespace: str, name: str):
        super().__init__(
            "NOT_FOUND",
            f"{resource} {namespace}/{name} not found",
            details={"namespace": namespace, "name": name},
            status_code=404,
        )


class ResourceAlreadyExistsError(MiniCloudError):
    """A live record already exists for the (namespace, name) identity."""

    def __init__(self, resource: str, namespace: str, name: str):
        super().__init__(
            "ALREADY_EXISTS",
            f"{resource} {namespace}/{name} already exists",
            details={"namespace": namespace, "name": name},
            status_code=409,
        )


class InvalidStateTransitionError(MiniCloudError):
    """Requested lifecycle transition is not allowed from the current status."""

    def __init__(self, current: str, target: str):
        super().__init__(
            "INVALID_STATE",
            f"Cannot transition from {current} to {target}",
            details={"current": current, "target": target},
            status_code=409,
        )


class OrchestratorUnavailableError(MiniCloudError):
    """kubectl could not be run or could not reach the cluster."""

    def __init__(self, message: str | None = None):
        super().__init__(
            "KUBECTL_UNAVAILABLE",
            message or "kubectl is not running or cannot reach the cluster. Start minikube and kubectl first.",
            status_code=503,
        )
