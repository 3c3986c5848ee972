"""Role-scoped status rules.

The status field is treated as a state machine whose reachable targets
depend only on the actor's role. The current status is accepted but not
consulted: an admin may move a resolved case back to pending. Adding
source-state constraints here would change observable behaviour.
"""
import logging
from typing import FrozenSet, Optional

from trafficwatch.utils.enum import Role, ViolationStatus
from trafficwatch.utils.errors import Forbidden, ValidationError

logger = logging.getLogger(__name__)

REACHABLE_STATUSES = {
    Role.ADMIN: frozenset(ViolationStatus),
    Role.SUB_ADMIN: frozenset({ViolationStatus.PENDING, ViolationStatus.UNDER_REVIEW}),
    Role.USER: frozenset(),
}

DENIAL_MESSAGES = {
    Role.SUB_ADMIN: "Sub-admins can only set status to pending or under_review",
    Role.USER: "Users cannot change violation status",
}


def reachable_statuses(role: Role) -> FrozenSet[ViolationStatus]:
    return REACHABLE_STATUSES[Role.parse(role)]


def parse_status(value) -> ViolationStatus:
    try:
        return ViolationStatus(value)
    except (TypeError, ValueError):
        raise ValidationError(
            f"Invalid status: {value}. Must be one of: "
            + ", ".join(status.value for status in ViolationStatus),
            context={"field": "status", "status": value},
        )


def check_transition(role: Role, requested, current=None) -> Optional[str]:
    """Return the denial reason for moving to ``requested``, or None when allowed."""
    role = Role.parse(role)
    target = parse_status(requested)
    if target in REACHABLE_STATUSES[role]:
        return None
    return DENIAL_MESSAGES[role]


def validate_transition(role: Role, requested, current=None) -> ViolationStatus:
    reason = check_transition(role, requested, current)
    if reason is not None:
        logger.warning(f"Status change to {requested} denied for role {Role.parse(role).value}")
        raise Forbidden(reason, context={"field": "status", "status": parse_status(requested).value})
    return parse_status(requested)
