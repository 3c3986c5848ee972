import logging
from typing import List, Optional

from sqlalchemy import Column, DateTime, String
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from trafficwatch.models.base_class import Base, utc_now
from trafficwatch.utils import enum
from trafficwatch.utils.errors import StoreFailure

logger = logging.getLogger(__name__)


class AppUser(Base):
    """Local directory of identities and their role metadata.

    Rows are never removed: a deleted user keeps a ``deleted_at`` tombstone so
    the identity can no longer authenticate with a stale token.
    """

    id = Column(String, primary_key=True)
    email = Column(String, nullable=True, unique=True)
    name = Column(String, nullable=True)
    role = Column(String, nullable=False, default=enum.Role.USER.value)
    deleted_at = Column(DateTime, nullable=True)

    @classmethod
    def get_by_id(cls, db: Session, user_id: str, include_deleted: bool = False) -> Optional["AppUser"]:
        try:
            query = db.query(cls).filter(cls.id == user_id)
            if not include_deleted:
                query = query.filter(cls.deleted_at.is_(None))
            return query.first()
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch user {user_id}: {e}")
            raise StoreFailure("Failed to fetch user") from e

    @classmethod
    def get_or_create(cls,
                      db: Session,
                      user_id: str,
                      role: str,
                      email: Optional[str] = None,
                      name: Optional[str] = None) -> "AppUser":
        """Returns the directory row for ``user_id``, registering it on first sight.

        ``role`` is only used for a new row; an existing row keeps its role.
        Tombstoned rows are returned as they are.
        """
        user = cls.get_by_id(db, user_id, include_deleted=True)
        if user is not None:
            return user

        user = cls(id=user_id, email=email, name=name, role=role)
        try:
            db.add(user)
            db.commit()
            db.refresh(user)
            logger.info(f"Registered user {user_id} with role {role}")
            return user
        except IntegrityError as e:
            # concurrent first request for the same id, or email already taken
            db.rollback()
            user = cls.get_by_id(db, user_id, include_deleted=True)
            if user is not None:
                return user
            if email is not None:
                logger.warning(f"Email of user {user_id} already registered, storing without it")
                return cls.get_or_create(db, user_id, role, email=None, name=name)
            logger.error(f"Failed to register user {user_id}: {e}")
            raise StoreFailure("Failed to register user") from e
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to register user {user_id}: {e}")
            raise StoreFailure("Failed to register user") from e

    @classmethod
    def list_users(cls, db: Session) -> List["AppUser"]:
        try:
            return db.query(cls).filter(cls.deleted_at.is_(None)).order_by(cls.created_at.desc()).all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to list users: {e}")
            raise StoreFailure("Failed to fetch users") from e

    @classmethod
    def update_role(cls, db: Session, user: "AppUser", role: str) -> "AppUser":
        try:
            user.role = role
            db.add(user)
            db.commit()
            db.refresh(user)
            return user
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to update role of user {user.id}: {e}")
            raise StoreFailure("Failed to update user role") from e

    @classmethod
    def delete_user(cls, db: Session, user: "AppUser"):
        try:
            user.deleted_at = utc_now()
            db.add(user)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to delete user {user.id}: {e}")
            raise StoreFailure("Failed to delete user") from e
