import logging
from typing import Generator, Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from trafficwatch import schema
from trafficwatch.models.session import SessionLocal
from trafficwatch.service.auth_service import AuthService
from trafficwatch.utils.security import decode_jwt_token, get_bearer_token

logger = logging.getLogger(__name__)


def get_db() -> Generator:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_actor(authorization: Optional[str] = Header(None),
                      db: Session = Depends(get_db)) -> schema.Actor:
    claims = decode_jwt_token(get_bearer_token(authorization))
    return AuthService.resolve_actor(db, claims)
