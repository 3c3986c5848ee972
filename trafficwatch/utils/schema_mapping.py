import logging
from typing import Any, Dict

from trafficwatch.schema.violation import ViolationRecord
from trafficwatch.utils.errors import ValidationError

logger = logging.getLogger(__name__)

# logical (API) field -> storage column
VIOLATION_FIELD_MAP = {
    "id": "id",
    "ownerId": "user_id",
    "type": "type",
    "description": "description",
    "location": "location",
    "vehiclePlate": "vehicle_plate",
    "vehicleModel": "vehicle_model",
    "vehicleColor": "vehicle_color",
    "dateTime": "date_time",
    "reporterName": "reporter_name",
    "reporterEmail": "reporter_email",
    "reporterPhone": "reporter_phone",
    "status": "status",
    "evidenceUrls": "evidence_urls",
    "adminNotes": "admin_notes",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}

STORAGE_FIELD_MAP = {column: field for field, column in VIOLATION_FIELD_MAP.items()}


class SchemaMapping:

    @staticmethod
    def storage_name(field: str) -> str:
        try:
            return VIOLATION_FIELD_MAP[field]
        except KeyError:
            raise ValidationError(f"Unknown violation field: {field}", context={"field": field})

    @staticmethod
    def logical_name(column: str) -> str:
        try:
            return STORAGE_FIELD_MAP[column]
        except KeyError:
            raise ValidationError(f"Unknown violation column: {column}", context={"field": column})

    @staticmethod
    def to_storage_fields(data: Dict[str, Any]) -> Dict[str, Any]:
        return {SchemaMapping.storage_name(key): value for key, value in data.items()}

    @staticmethod
    def to_logical_fields(data: Dict[str, Any]) -> Dict[str, Any]:
        return {SchemaMapping.logical_name(key): value for key, value in data.items()}

    @staticmethod
    def violation_to_record(violation) -> ViolationRecord:
        """Build the logical record from an ORM row (or any object with the storage attributes)."""
        values = {field: getattr(violation, column, None) for field, column in VIOLATION_FIELD_MAP.items()}
        return ViolationRecord(**values)
