from datetime import datetime, timezone
from sqlalchemy.orm import declarative_base, declared_attr
from sqlalchemy import Column, DateTime


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class _Base:

    @declared_attr
    def __tablename__(cls) -> str:
        snake_case_name = "".join(
            ["_" + c.lower() if c.isupper() else c for c in cls.__name__]
        ).strip("_")
        return snake_case_name

    @declared_attr
    def created_at(cls):
        return Column(DateTime, default=utc_now, nullable=False, index=True)

    @declared_attr
    def updated_at(cls):
        return Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)


Base = declarative_base(cls=_Base)
