"""Kubernetes object naming rules and derived resource names."""

import re

from minicloud.errors.exceptions import ValidationError

# DNS-1123 label: lowercase alphanumerics and '-', alphanumeric at both ends.
_DNS_LABEL = re.compile(r"[a-z0-9]([-a-z0-9]*[a-z0-9])?")
_DNS_LABEL_MAX = 63

SECRET_SUFFIX = "-conn"
SERVICE_SUFFIX = "-svc"


def validate_label(value: str, field_name: str) -> str:
    """Return ``value`` unchanged or raise ValidationError."""
    if not value or len(value) > _DNS_LABEL_MAX or not _DNS_LABEL.fullmatch(value):
        raise ValidationError(
            f"{field_name} must follow Kubernetes DNS-1123 label format: {value}",
            details={"field": field_name, "value": value},
        )
    return value


def secret_name(name: str) -> str:
    return f"{name}{SECRET_SUFFIX}"


def database_pod_name(name: str) -> str:
    return f"{name}-pg"


def service_name(name: str) -> str:
    return f"{name}{SERVICE_SUFFIX}"


def ingress_name(name: str) -> str:
    return f"{name}-ing"


def access_host(name: str, namespace: str) -> str:
    return f"{name}.{namespace}.local"


def database_host_for_secret(db_secret_name: str) -> str:
    """Service host of the database owning ``db_secret_name``."""
    base = db_secret_name.removesuffix(SECRET_SUFFIX)
    return service_name(base)
