from datetime import datetime, timezone
from typing import ClassVar, List, Optional, Tuple
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from trafficwatch.utils.enum import ViolationStatus, ViolationType


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def validate_evidence_urls(urls: Optional[List[str]]) -> Optional[List[str]]:
    if not urls:
        return None
    for url in urls:
        parsed = urlparse(url)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError(f"evidence url is not an absolute URI: {url}")
    return list(urls)


def blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    return value


class ViolationRecord(BaseModel):
    """Logical (camelCase) view of a stored violation."""

    id: str
    ownerId: str
    type: ViolationType
    description: str
    location: str
    vehiclePlate: str
    vehicleModel: Optional[str] = None
    vehicleColor: Optional[str] = None
    dateTime: datetime
    reporterName: str
    reporterEmail: str
    reporterPhone: Optional[str] = None
    status: ViolationStatus
    evidenceUrls: Optional[List[str]] = None
    adminNotes: Optional[str] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class CreateViolationInput(BaseModel):
    # Unknown keys (status, ownerId, ...) are dropped, the server sets them.
    model_config = ConfigDict(extra="ignore", use_enum_values=True)

    type: ViolationType
    description: str
    location: str
    vehiclePlate: str
    vehicleModel: Optional[str] = None
    vehicleColor: Optional[str] = None
    dateTime: datetime
    reporterName: str
    reporterEmail: str
    reporterPhone: Optional[str] = None
    evidenceUrls: Optional[List[str]] = None

    @field_validator("description", "location", "vehiclePlate", "reporterName", "reporterEmail")
    @classmethod
    def required_text(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @field_validator("vehicleModel", "vehicleColor", "reporterPhone")
    @classmethod
    def optional_text(cls, value: Optional[str]) -> Optional[str]:
        return blank_to_none(value)

    @field_validator("dateTime")
    @classmethod
    def normalise_date_time(cls, value: datetime) -> datetime:
        return to_naive_utc(value)

    @field_validator("evidenceUrls")
    @classmethod
    def evidence_urls(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        return validate_evidence_urls(value)


class ViolationPatch(BaseModel):
    """Value validation for an already-authorized partial update.

    Only the keys present in the incoming patch are kept (``exclude_unset``),
    so a patch never resets fields it does not mention.
    """

    model_config = ConfigDict(extra="forbid", use_enum_values=True)

    NON_NULLABLE: ClassVar[Tuple[str, ...]] = (
        "type", "description", "location", "vehiclePlate", "dateTime",
        "reporterName", "reporterEmail", "status",
    )

    type: Optional[ViolationType] = None
    description: Optional[str] = None
    location: Optional[str] = None
    vehiclePlate: Optional[str] = None
    vehicleModel: Optional[str] = None
    vehicleColor: Optional[str] = None
    dateTime: Optional[datetime] = None
    reporterName: Optional[str] = None
    reporterEmail: Optional[str] = None
    reporterPhone: Optional[str] = None
    status: Optional[ViolationStatus] = None
    evidenceUrls: Optional[List[str]] = None
    adminNotes: Optional[str] = None

    @field_validator("dateTime")
    @classmethod
    def normalise_date_time(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value)

    @field_validator("evidenceUrls")
    @classmethod
    def evidence_urls(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        return validate_evidence_urls(value)

    @model_validator(mode="after")
    def required_fields_not_null(self):
        for name in self.NON_NULLABLE:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class ViolationFilters(BaseModel):
    status: Optional[ViolationStatus] = None
    type: Optional[ViolationType] = None
    search: Optional[str] = None
    dateFrom: Optional[datetime] = None
    dateTo: Optional[datetime] = None

    @field_validator("dateFrom", "dateTo")
    @classmethod
    def normalise_bounds(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value)
