from enum import Enum

from trafficwatch.utils.errors import ValidationError


class Role(str, Enum):
    ADMIN = "admin"
    SUB_ADMIN = "sub_admin"
    USER = "user"

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except (TypeError, ValueError):
            raise ValidationError(
                "Invalid role. Must be one of: user, sub_admin, admin",
                context={"role": value},
            )

    @property
    def is_staff(self) -> bool:
        return self in (Role.ADMIN, Role.SUB_ADMIN)


class ViolationType(str, Enum):
    SPEEDING = "speeding"
    RED_LIGHT = "red_light"
    ILLEGAL_PARKING = "illegal_parking"
    RECKLESS_DRIVING = "reckless_driving"
    NO_SEATBELT = "no_seatbelt"
    PHONE_USAGE = "phone_usage"
    DRUNK_DRIVING = "drunk_driving"
    OTHER = "other"


class ViolationStatus(str, Enum):
    PENDING = "pending"
    UNDER_REVIEW = "under_review"
    RESOLVED = "resolved"
    DISMISSED = "dismissed"


class Action(str, Enum):
    LIST = "list"
    GET = "get"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class UserAdminAction(str, Enum):
    LIST = "list"
    UPDATE_ROLE = "update_role"
    DELETE = "delete"
