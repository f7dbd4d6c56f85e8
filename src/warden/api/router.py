"""Top-level routing: service health, service info and the /api/v1 tree."""

import structlog
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError

from warden.api.dependencies import AppSettings, DBSession
from warden.core.auth.routes import router as auth_router
from warden.modules import discover_modules
from warden.modules.permissions.models import Permission


logger = structlog.get_logger()


class HealthResponse(BaseModel):
    status: str


class ReadinessResponse(BaseModel):
    """Readiness of the account store and the permission catalog."""

    status: str
    checks: dict[str, str]


class ServiceInfo(BaseModel):
    """Public facts a client needs to hold a session."""

    app: str
    environment: str
    access_token_expire_hours: int
    session_expire_days: int
    grant_cookie: str


api_router = APIRouter()

# Served at the root, outside /api/v1
health_router = APIRouter(tags=["health"])


@health_router.get(
    "/health/live",
    response_model=HealthResponse,
    summary="Process is up",
)
async def liveness() -> HealthResponse:
    return HealthResponse(status="alive")


@health_router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    summary="Store is reachable and migrated",
    description=(
        "Answers 503 while the database cannot be reached or the permission "
        "catalog table is missing."
    ),
)
async def readiness(db: DBSession) -> JSONResponse:
    """Check the connection, then the schema the gate reads from."""
    checks: dict[str, str] = {}

    try:
        await db.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except SQLAlchemyError as exc:
        logger.warning("readiness_database_failed", error=str(exc))
        await db.rollback()
        checks["database"] = "unreachable"
    else:
        try:
            await db.execute(select(func.count()).select_from(Permission))
            checks["catalog"] = "ok"
        except SQLAlchemyError as exc:
            logger.warning("readiness_catalog_failed", error=str(exc))
            await db.rollback()
            checks["catalog"] = "missing"

    ready = all(value == "ok" for value in checks.values())
    return JSONResponse(
        status_code=(
            status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE
        ),
        content={"status": "ready" if ready else "degraded", "checks": checks},
    )


@health_router.get(
    "/info",
    response_model=ServiceInfo,
    summary="Session and grant settings",
)
async def info(settings: AppSettings) -> ServiceInfo:
    return ServiceInfo(
        app=settings.app_name,
        environment=settings.environment,
        access_token_expire_hours=settings.access_token_expire_hours,
        session_expire_days=settings.refresh_token_expire_days,
        grant_cookie=settings.grant_cookie_name,
    )


v1_router = APIRouter(prefix="/api/v1")
v1_router.include_router(auth_router)
for module_router in discover_modules():
    v1_router.include_router(module_router)

api_router.include_router(health_router)
api_router.include_router(v1_router)
