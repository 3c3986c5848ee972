from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from trafficwatch import schema
from trafficwatch.dependencies.deps import get_current_actor, get_db
from trafficwatch.service import UserService
from trafficwatch.utils.common import api_response, dump_models

users_router = APIRouter()


@users_router.get("/v1/admin/users")
def list_users(actor: schema.Actor = Depends(get_current_actor),
               db: Session = Depends(get_db)):
    """
    List every known user with their role (admin only)
    """
    return api_response(
        message="Successfully fetched.",
        status="success",
        data=dump_models(UserService.list_users(db, actor)),
    )


@users_router.patch("/v1/admin/users/{user_id}/role")
def update_user_role(user_id: str,
                     request_body: schema.UpdateRoleSchema,
                     actor: schema.Actor = Depends(get_current_actor),
                     db: Session = Depends(get_db)):
    user = UserService.update_role(db, actor, user_id, request_body.role)
    return api_response(
        message="Successfully updated.",
        status="success",
        data=dump_models([user]),
    )


@users_router.delete("/v1/admin/users/{user_id}")
def delete_user(user_id: str,
                actor: schema.Actor = Depends(get_current_actor),
                db: Session = Depends(get_db)):
    UserService.delete_user(db, actor, user_id)
    return api_response(
        message="Successfully deleted.",
        status="success",
        data=[{"success": True}],
    )
