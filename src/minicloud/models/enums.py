"""String enums for resource lifecycle."""

from enum import StrEnum


class ProvisioningStatus(StrEnum):
    REQUESTED = "REQUESTED"
    PROVISIONING = "PROVISIONING"
    READY = "READY"
    FAILED = "FAILED"
    DELETING = "DELETING"
    DELETED = "DELETED"


class ResourceKind(StrEnum):
    DATABASE = "database"
    APP = "app"
