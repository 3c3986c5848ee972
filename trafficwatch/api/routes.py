from fastapi import APIRouter
from trafficwatch.api import users, violations
from trafficwatch.health import health_check_routes


api_router = APIRouter()


api_router.include_router(violations.violations_router, tags=["Violations"])
api_router.include_router(users.users_router, tags=["User administration"])
api_router.include_router(health_check_routes, tags=['Container health'])
