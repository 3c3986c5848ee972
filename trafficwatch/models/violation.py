import logging
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import Column, DateTime, JSON, String, Text, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from trafficwatch.models.base_class import Base, utc_now
from trafficwatch.utils import enum
from trafficwatch.utils.errors import StoreFailure

logger = logging.getLogger(__name__)


class Violation(Base):
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, nullable=False, index=True)
    type = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    location = Column(String, nullable=False)
    vehicle_plate = Column(String, nullable=False)
    vehicle_model = Column(String, nullable=True)
    vehicle_color = Column(String, nullable=True)
    date_time = Column(DateTime, nullable=False)
    reporter_name = Column(String, nullable=False)
    reporter_email = Column(String, nullable=False)
    reporter_phone = Column(String, nullable=True)
    status = Column(String, nullable=False, default=enum.ViolationStatus.PENDING.value)
    evidence_urls = Column(JSON, nullable=True)
    admin_notes = Column(Text, nullable=True)

    @classmethod
    def create_violation(cls, db: Session, values: Dict[str, Any]):
        """Creates a new violation from storage-named values."""
        violation = cls(**values)
        try:
            db.add(violation)
            db.commit()
            db.refresh(violation)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to create violation: {e}")
            raise StoreFailure("Failed to create violation") from e
        return violation

    @classmethod
    def get_by_id(cls, db: Session, violation_id: str):
        try:
            return db.query(cls).filter(cls.id == violation_id).first()
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch violation {violation_id}: {e}")
            raise StoreFailure("Failed to fetch violation") from e

    @classmethod
    def list_violations(cls,
                        db: Session,
                        owner_id: Optional[str] = None,
                        status: Optional[str] = None,
                        violation_type: Optional[str] = None,
                        search: Optional[str] = None,
                        date_from: Optional[datetime] = None,
                        date_to: Optional[datetime] = None) -> List["Violation"]:
        query = db.query(cls)

        if owner_id is not None:
            query = query.filter(cls.user_id == owner_id)
        if status:
            query = query.filter(cls.status == status)
        if violation_type:
            query = query.filter(cls.type == violation_type)
        if search:
            query = query.filter(or_(
                cls.vehicle_plate.icontains(search, autoescape=True),
                cls.location.icontains(search, autoescape=True),
                cls.description.icontains(search, autoescape=True),
                cls.reporter_name.icontains(search, autoescape=True),
            ))
        if date_from is not None:
            query = query.filter(cls.date_time >= date_from)
        if date_to is not None:
            query = query.filter(cls.date_time <= date_to)

        try:
            return query.order_by(cls.created_at.desc()).all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to list violations: {e}")
            raise StoreFailure("Failed to fetch violations") from e

    @classmethod
    def update_fields(cls, db: Session, violation: "Violation", to_update: Dict[str, Any]):
        try:
            for key, value in to_update.items():
                setattr(violation, key, value)
            violation.updated_at = utc_now()
            db.add(violation)
            db.commit()
            db.refresh(violation)
            return violation
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to update violation {violation.id}: {e}")
            raise StoreFailure("Failed to update violation") from e

    @classmethod
    def delete_violation(cls, db: Session, violation: "Violation"):
        try:
            db.delete(violation)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to delete violation {violation.id}: {e}")
            raise StoreFailure("Failed to delete violation") from e
