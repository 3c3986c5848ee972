import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from trafficwatch.config import settings
from trafficwatch.dependencies.deps import get_db


logger = logging.getLogger(__name__)


health_check_routes = APIRouter()


@health_check_routes.get("/v1/health")
def health_check(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Health check failed: {e}")
        raise HTTPException(status_code=500, detail={
            "status": "error",
            "database": "unreachable",
            "message": str(e),
        })

    return {
        "status": "healthy",
        "database": "reachable",
        "environment": settings.ENVIRONMENT,
    }
