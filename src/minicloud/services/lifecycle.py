"""Provisioning lifecycle transitions shared by database and app records."""

import logging

from minicloud.errors.exceptions import InvalidStateTransitionError
from minicloud.models.enums import ProvisioningStatus

logger = logging.getLogger(__name__)

S = ProvisioningStatus

ALLOWED_TRANSITIONS: dict[ProvisioningStatus, frozenset[ProvisioningStatus]] = {
    S.REQUESTED: frozenset({S.PROVISIONING, S.FAILED}),
    S.PROVISIONING: frozenset({S.READY, S.FAILED}),
    S.READY: frozenset({S.DELETING}),
    S.FAILED: frozenset({S.DELETING}),
    S.DELETING: frozenset({S.DELETED, S.FAILED}),
    S.DELETED: frozenset(),
}


def can_transition(current: str, target: ProvisioningStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[ProvisioningStatus(current)]


def transition(row, target: ProvisioningStatus, message: str | None = None) -> None:
    """Move ``row`` to ``target``, recording ``message`` when given.

    Raises:
        InvalidStateTransitionError: if the move is not in ALLOWED_TRANSITIONS.
    """
    current = row.status
    if not can_transition(current, target):
        raise InvalidStateTransitionError(current, target.value)
    row.status = target.value
    if message is not None:
        row.message = message
    logger.info(
        "%s %s/%s: %s -> %s",
        row.__tablename__,
        row.namespace,
        row.name,
        current,
        target.value,
    )
