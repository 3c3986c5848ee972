import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session
from starlette import status

from trafficwatch import schema
from trafficwatch.dependencies.deps import get_current_actor, get_db
from trafficwatch.service import ViolationService
from trafficwatch.service.violation_service import validate_payload
from trafficwatch.utils.common import DateTimeUtils, api_response, dump_models

logger = logging.getLogger(__name__)

violations_router = APIRouter()


@violations_router.get("/v1/violations")
def list_violations(violation_status: Optional[str] = Query(None, alias="status"),
                    violation_type: Optional[str] = Query(None, alias="type"),
                    search: Optional[str] = None,
                    date_from: Optional[str] = Query(None, alias="dateFrom"),
                    date_to: Optional[str] = Query(None, alias="dateTo"),
                    actor: schema.Actor = Depends(get_current_actor),
                    db: Session = Depends(get_db)):
    """
    List violations visible to the caller, newest first
    """
    filters = validate_payload(schema.ViolationFilters, {
        "status": violation_status or None,
        "type": violation_type or None,
        "search": search,
        "dateFrom": DateTimeUtils.parse_query_datetime(date_from, "dateFrom"),
        "dateTo": DateTimeUtils.parse_query_datetime(date_to, "dateTo"),
    })
    violations = ViolationService.list_violations(db, actor, filters)
    return api_response(
        message="Successfully fetched.",
        status="success",
        data=dump_models(violations),
    )


@violations_router.post("/v1/violations")
def create_violation(payload: dict = Body(...),
                     actor: schema.Actor = Depends(get_current_actor),
                     db: Session = Depends(get_db)):
    """
    Report a new violation. Status and owner are set by the server
    """
    violation = ViolationService.create_violation(db, actor, payload)
    return api_response(
        message="Successfully created.",
        status="success",
        data=dump_models([violation]),
        status_code=status.HTTP_201_CREATED,
    )


@violations_router.get("/v1/violations/{violation_id}")
def get_violation(violation_id: str,
                  actor: schema.Actor = Depends(get_current_actor),
                  db: Session = Depends(get_db)):
    violation = ViolationService.get_violation(db, actor, violation_id)
    return api_response(
        message="Successfully fetched.",
        status="success",
        data=dump_models([violation]),
    )


@violations_router.patch("/v1/violations/{violation_id}")
def update_violation(violation_id: str,
                     patch: dict = Body(...),
                     actor: schema.Actor = Depends(get_current_actor),
                     db: Session = Depends(get_db)):
    """
    Partially update a violation; the whole patch is rejected if any field is not allowed
    """
    violation = ViolationService.update_violation(db, actor, violation_id, patch)
    return api_response(
        message="Successfully updated.",
        status="success",
        data=dump_models([violation]),
    )


@violations_router.delete("/v1/violations/{violation_id}")
def delete_violation(violation_id: str,
                     actor: schema.Actor = Depends(get_current_actor),
                     db: Session = Depends(get_db)):
    ViolationService.delete_violation(db, actor, violation_id)
    return api_response(
        message="Successfully deleted.",
        status="success",
        data=[{"success": True}],
    )
