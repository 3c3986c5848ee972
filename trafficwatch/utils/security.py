import logging
from datetime import datetime
from typing import Any, Dict, Optional

from jose import JWTError, jwt

from trafficwatch.config import settings
from trafficwatch.utils.errors import Unauthenticated

logger = logging.getLogger(__name__)


def create_jwt_token(data: dict, expire_time: datetime) -> str:
    data = dict(data)
    data['exp'] = expire_time
    return jwt.encode(data, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_jwt_token(token: str) -> Dict[str, Any]:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.error(f"Token decode error: {e}")
        raise Unauthenticated("Unauthorized")


def get_bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise Unauthenticated("Unauthorized")
    scheme, _, token = authorization.partition(' ')
    if scheme.lower() != "bearer" or not token.strip():
        raise Unauthenticated("Unauthorized")
    return token.strip()
