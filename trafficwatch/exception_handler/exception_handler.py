import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from trafficwatch.utils.common import api_response
from trafficwatch.utils.errors import StoreFailure, TrafficWatchError

logger = logging.getLogger(__name__)


def trafficwatch_exception_handler(request: Request, exc: TrafficWatchError):
    if isinstance(exc, StoreFailure):
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return api_response(
        message=exc.message,
        status="error",
        data=[exc.to_dict()],
        status_code=exc.status_code,
    )


def custom_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"message": "Internal Server Error"},
    )
