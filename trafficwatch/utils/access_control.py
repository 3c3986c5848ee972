"""Authorization policy for violation records and user administration.

``evaluate`` is the single source of truth for who may list, read, create,
update or delete a violation. It is a pure function of its arguments: it
never reads the store and never mutates the resource. ``authorize`` wraps it
and turns a denial into :class:`Forbidden`.

Field-level update rules (logical field names):

    ============  ===================  ==========  =====
    field         user (owner only)    sub_admin   admin
    ============  ===================  ==========  =====
    evidenceUrls  yes                  no          yes
    status        no                   limited     yes
    adminNotes    no                   yes         yes
    content       no                   no          yes
    ============  ===================  ==========  =====

A patch containing any field outside the actor's set is rejected as a whole.
"""
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field as dataclass_field
from typing import Any, Dict, FrozenSet, Iterable, Optional

from trafficwatch.schema.actor import Actor
from trafficwatch.schema.violation import ViolationRecord
from trafficwatch.utils import status_transition
from trafficwatch.utils.enum import Action, Role, UserAdminAction, ViolationStatus
from trafficwatch.utils.errors import Forbidden, Unauthenticated, ValidationError
from trafficwatch.utils.schema_mapping import VIOLATION_FIELD_MAP

logger = logging.getLogger(__name__)

CONTENT_FIELDS = frozenset({
    "type",
    "description",
    "location",
    "vehiclePlate",
    "vehicleModel",
    "vehicleColor",
    "dateTime",
    "reporterName",
    "reporterEmail",
    "reporterPhone",
})
STAFF_FIELDS = frozenset({"status", "adminNotes"})
IMMUTABLE_FIELDS = frozenset({"id", "ownerId", "createdAt", "updatedAt"})

WRITABLE_FIELDS = {
    Role.USER: frozenset({"evidenceUrls"}),
    Role.SUB_ADMIN: STAFF_FIELDS,
    Role.ADMIN: STAFF_FIELDS | CONTENT_FIELDS | frozenset({"evidenceUrls"}),
}


@dataclass(frozen=True)
class AccessDecision:
    allowed: bool
    action: Action
    reason: Optional[str] = None
    field: Optional[str] = None
    # update: the rejected target status
    status: Optional[str] = None
    # list: restrict the query to this owner id (None means unfiltered)
    owner_filter: Optional[str] = None
    # update: fields that will be applied
    permitted_fields: FrozenSet[str] = frozenset()
    # create: values that override whatever the caller supplied
    forced_fields: Dict[str, Any] = dataclass_field(default_factory=dict)

    def context(self) -> Dict[str, Any]:
        context = {"action": self.action.value}
        if self.field:
            context["field"] = self.field
        if self.status:
            context["status"] = self.status
        return context


def require_actor(actor: Optional[Actor]) -> Actor:
    if actor is None:
        raise Unauthenticated("Unauthorized")
    return actor


def can_view(actor: Actor, resource: ViolationRecord) -> bool:
    return actor.role.is_staff or resource.ownerId == actor.id


def _deny(action: Action, reason: str, field: Optional[str] = None, status: Optional[str] = None) -> AccessDecision:
    return AccessDecision(allowed=False, action=action, reason=reason, field=field, status=status)


def _field_denial_reason(role: Role, field: str) -> str:
    if field in IMMUTABLE_FIELDS:
        return f"{field} cannot be changed"
    if role == Role.USER:
        return "Users can only update evidence"
    if role == Role.SUB_ADMIN:
        return f"Sub-admins cannot update {field}"
    return f"Role {role.value} cannot update {field}"


def _evaluate_update(actor: Actor, resource: ViolationRecord, proposed_fields) -> AccessDecision:
    proposed = list(proposed_fields or ())

    for name in proposed:
        if name not in VIOLATION_FIELD_MAP:
            raise ValidationError(f"Unknown violation field: {name}", context={"field": name})

    writable = WRITABLE_FIELDS[actor.role]
    for name in proposed:
        if name not in writable:
            return _deny(Action.UPDATE, _field_denial_reason(actor.role, name), field=name)

    if isinstance(proposed_fields, Mapping) and "status" in proposed_fields:
        reason = status_transition.check_transition(actor.role, proposed_fields["status"], resource.status)
        if reason is not None:
            requested = status_transition.parse_status(proposed_fields["status"]).value
            return _deny(Action.UPDATE, reason, field="status", status=requested)

    return AccessDecision(allowed=True, action=Action.UPDATE, permitted_fields=frozenset(proposed))


def evaluate(actor: Optional[Actor],
             action,
             resource: Optional[ViolationRecord] = None,
             proposed_fields: Optional[Iterable[str]] = None) -> AccessDecision:
    """Decide whether ``actor`` may perform ``action``.

    ``proposed_fields`` is only used for updates. It may be a plain iterable
    of field names or the patch mapping itself; with a mapping, a ``status``
    value is also checked against the actor's reachable status set.
    """
    actor = require_actor(actor)
    action = Action(action)

    if action == Action.LIST:
        owner_filter = None if actor.role.is_staff else actor.id
        return AccessDecision(allowed=True, action=action, owner_filter=owner_filter)

    if action == Action.CREATE:
        return AccessDecision(
            allowed=True,
            action=action,
            forced_fields={"ownerId": actor.id, "status": ViolationStatus.PENDING.value},
        )

    if action == Action.DELETE:
        if actor.role != Role.ADMIN:
            return _deny(action, "Forbidden - Admin only")
        return AccessDecision(allowed=True, action=action)

    if resource is None:
        raise ValueError(f"{action.value} requires a resource")

    if not can_view(actor, resource):
        return _deny(action, "Forbidden")

    if action == Action.GET:
        return AccessDecision(allowed=True, action=action)

    return _evaluate_update(actor, resource, proposed_fields)


def authorize(actor: Optional[Actor],
              action,
              resource: Optional[ViolationRecord] = None,
              proposed_fields: Optional[Iterable[str]] = None) -> AccessDecision:
    decision = evaluate(actor, action, resource, proposed_fields)
    if not decision.allowed:
        logger.warning(
            f"Denied {decision.action.value} for actor {actor.id} ({actor.role.value})"
            f"{' on field ' + decision.field if decision.field else ''}: {decision.reason}"
        )
        raise Forbidden(decision.reason, context=decision.context())
    return decision


def authorize_user_admin(actor: Optional[Actor],
                         action,
                         target_id: Optional[str] = None,
                         role=None) -> Optional[Role]:
    """Gate the user-administration endpoints. Returns the parsed role for role updates."""
    actor = require_actor(actor)
    action = UserAdminAction(action)

    if actor.role != Role.ADMIN:
        logger.warning(f"Denied user administration ({action.value}) for actor {actor.id}")
        raise Forbidden("Forbidden. Admin access required.", context={"action": action.value})

    if action == UserAdminAction.UPDATE_ROLE:
        new_role = Role.parse(role)
        if target_id == actor.id:
            raise ValidationError("Cannot change your own role", context={"action": action.value})
        return new_role

    if action == UserAdminAction.DELETE and target_id == actor.id:
        raise ValidationError("Cannot delete your own account", context={"action": action.value})

    return None
