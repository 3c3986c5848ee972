import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Optional

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from trafficwatch import schema
from trafficwatch.config import settings
from trafficwatch.models.violation import Violation
from trafficwatch.utils import access_control
from trafficwatch.utils.enum import Action, Role
from trafficwatch.utils.errors import Forbidden, NotFound, ValidationError
from trafficwatch.utils.schema_mapping import SchemaMapping

logger = logging.getLogger(__name__)


def validate_payload(model: type, data: Any) -> BaseModel:
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ()))
        message = f"Invalid {field}: {first['msg']}" if field else first["msg"]
        raise ValidationError(message, context={"field": field} if field else None) from e


class ViolationService:

    @staticmethod
    def _load(db: Session, violation_id: str) -> Violation:
        violation = Violation.get_by_id(db, violation_id)
        if violation is None:
            raise NotFound("Violation not found", context={"id": violation_id})
        return violation

    @staticmethod
    def _authorize_on_record(actor: schema.Actor, action: Action, record: schema.ViolationRecord,
                             patch: Optional[Mapping] = None):
        try:
            return access_control.authorize(actor, action, record, patch)
        except Forbidden:
            if (settings.CONCEAL_FOREIGN_VIOLATIONS and actor.role == Role.USER
                    and record.ownerId != actor.id):
                raise NotFound("Violation not found", context={"id": record.id})
            raise

    @staticmethod
    def list_violations(db: Session,
                        actor: schema.Actor,
                        filters: Optional[schema.ViolationFilters] = None) -> List[schema.ViolationRecord]:
        decision = access_control.authorize(actor, Action.LIST)
        filters = filters or schema.ViolationFilters()

        violations = Violation.list_violations(
            db,
            owner_id=decision.owner_filter,
            status=filters.status.value if filters.status else None,
            violation_type=filters.type.value if filters.type else None,
            search=filters.search,
            date_from=filters.dateFrom,
            date_to=filters.dateTo,
        )
        return [SchemaMapping.violation_to_record(violation) for violation in violations]

    @staticmethod
    def get_violation(db: Session, actor: schema.Actor, violation_id: str) -> schema.ViolationRecord:
        access_control.require_actor(actor)
        record = SchemaMapping.violation_to_record(ViolationService._load(db, violation_id))
        ViolationService._authorize_on_record(actor, Action.GET, record)
        return record

    @staticmethod
    def create_violation(db: Session, actor: schema.Actor, payload: Any) -> schema.ViolationRecord:
        decision = access_control.authorize(actor, Action.CREATE)
        violation_input = validate_payload(schema.CreateViolationInput, payload)

        values: Dict[str, Any] = violation_input.model_dump()
        values.update(decision.forced_fields)

        violation = Violation.create_violation(db, SchemaMapping.to_storage_fields(values))
        logger.info(f"Violation {violation.id} created by {actor.id}")
        return SchemaMapping.violation_to_record(violation)

    @staticmethod
    def update_violation(db: Session, actor: schema.Actor, violation_id: str, patch: Any) -> schema.ViolationRecord:
        access_control.require_actor(actor)
        if not isinstance(patch, Mapping):
            raise ValidationError("Update payload must be an object")

        violation = ViolationService._load(db, violation_id)
        record = SchemaMapping.violation_to_record(violation)
        ViolationService._authorize_on_record(actor, Action.UPDATE, record, patch)

        values = validate_payload(schema.ViolationPatch, dict(patch)).model_dump(exclude_unset=True)
        violation = Violation.update_fields(db, violation, SchemaMapping.to_storage_fields(values))
        logger.info(f"Violation {violation_id} updated by {actor.id} ({actor.role.value}): {sorted(values)}")
        return SchemaMapping.violation_to_record(violation)

    @staticmethod
    def delete_violation(db: Session, actor: schema.Actor, violation_id: str) -> None:
        access_control.authorize(actor, Action.DELETE)
        violation = ViolationService._load(db, violation_id)
        Violation.delete_violation(db, violation)
        logger.info(f"Violation {violation_id} deleted by {actor.id}")
