import logging
from typing import Any, Dict

from sqlalchemy.orm import Session

from trafficwatch import schema
from trafficwatch.models.app_user import AppUser
from trafficwatch.utils.enum import Role
from trafficwatch.utils.errors import Unauthenticated

logger = logging.getLogger(__name__)


class AuthService:

    @staticmethod
    def user_metadata(claims: Dict[str, Any]) -> Dict[str, Any]:
        metadata = claims.get("user_metadata")
        return metadata if isinstance(metadata, dict) else {}

    @staticmethod
    def role_from_claims(claims: Dict[str, Any]) -> str:
        # top-level ``role`` is the identity provider's database role
        # ("authenticated"), not an application role
        return AuthService.user_metadata(claims).get("role") or Role.USER.value

    @staticmethod
    def resolve_actor(db: Session, claims: Dict[str, Any]) -> schema.Actor:
        """Turn verified token claims into an actor.

        A first-time caller is registered in the user directory with the role
        from its claims. From then on the directory row wins over token claims,
        and a deleted row rejects the identity.
        """
        user_id = claims.get("sub")
        if not user_id:
            raise Unauthenticated("Unauthorized")
        user_id = str(user_id)

        user = AppUser.get_by_id(db, user_id, include_deleted=True)
        if user is None:
            role = AuthService.parse_role(user_id, AuthService.role_from_claims(claims))
            metadata = AuthService.user_metadata(claims)
            user = AppUser.get_or_create(db,
                                         user_id,
                                         role.value,
                                         email=claims.get("email"),
                                         name=metadata.get("name") or metadata.get("full_name"))

        if user.deleted_at is not None:
            logger.warning(f"Rejected token for deleted user {user_id}")
            raise Unauthenticated("Unauthorized")

        return schema.Actor(id=user_id, role=AuthService.parse_role(user_id, user.role))

    @staticmethod
    def parse_role(user_id: str, role_value: Any) -> Role:
        try:
            return Role(role_value)
        except (TypeError, ValueError):
            logger.warning(f"Rejected token for {user_id} with unknown role {role_value!r}")
            raise Unauthenticated("Unauthorized", context={"role": role_value})
