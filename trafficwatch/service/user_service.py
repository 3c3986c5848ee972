import logging
from typing import List

from sqlalchemy.orm import Session

from trafficwatch import schema
from trafficwatch.models.app_user import AppUser
from trafficwatch.utils import access_control
from trafficwatch.utils.enum import UserAdminAction
from trafficwatch.utils.errors import NotFound

logger = logging.getLogger(__name__)


class UserService:

    @staticmethod
    def to_schema(user: AppUser) -> schema.UserSchema:
        return schema.UserSchema(id=user.id,
                                 email=user.email,
                                 name=user.name,
                                 role=user.role,
                                 created_at=user.created_at,
                                 updated_at=user.updated_at)

    @staticmethod
    def _load(db: Session, user_id: str) -> AppUser:
        user = AppUser.get_by_id(db, user_id)
        if user is None:
            raise NotFound("User not found", context={"id": user_id})
        return user

    @staticmethod
    def list_users(db: Session, actor: schema.Actor) -> List[schema.UserSchema]:
        access_control.authorize_user_admin(actor, UserAdminAction.LIST)
        return [UserService.to_schema(user) for user in AppUser.list_users(db)]

    @staticmethod
    def update_role(db: Session, actor: schema.Actor, user_id: str, role) -> schema.UserSchema:
        new_role = access_control.authorize_user_admin(actor, UserAdminAction.UPDATE_ROLE, user_id, role)
        user = UserService._load(db, user_id)
        user = AppUser.update_role(db, user, new_role.value)
        logger.info(f"Role of user {user_id} set to {new_role.value} by {actor.id}")
        return UserService.to_schema(user)

    @staticmethod
    def delete_user(db: Session, actor: schema.Actor, user_id: str) -> None:
        access_control.authorize_user_admin(actor, UserAdminAction.DELETE, user_id)
        user = UserService._load(db, user_id)
        AppUser.delete_user(db, user)
        logger.info(f"User {user_id} deleted by {actor.id}")
