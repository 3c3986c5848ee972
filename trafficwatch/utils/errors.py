"""Error taxonomy shared by the policy engine, the services and the API layer.

Every error carries the HTTP status it maps to plus an optional ``context``
mapping (``field``, ``status``, ``role`` ...) so callers can render a useful
message without parsing the text.
"""
from typing import Any, Dict, Optional

from starlette import status


class TrafficWatchError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = dict(context or {})

    def to_dict(self) -> Dict[str, Any]:
        return {"error": type(self).__name__, **self.context}


class Unauthenticated(TrafficWatchError):
    status_code = status.HTTP_401_UNAUTHORIZED


class Forbidden(TrafficWatchError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFound(TrafficWatchError):
    status_code = status.HTTP_404_NOT_FOUND


class ValidationError(TrafficWatchError):
    status_code = status.HTTP_400_BAD_REQUEST


class StoreFailure(TrafficWatchError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
