"""Liveness plus reachability of the two backends the deletion workflow depends on."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from purgehub.core.config import settings
from purgehub.core.database import check_db_connected, get_db
from purgehub.schemas.health import HealthResponse
from purgehub.services.auth_admin import AuthAdminClient, get_auth_admin_client

router = APIRouter()


@router.get("/", response_model=HealthResponse)
async def get_health(
    db: Annotated[Session, Depends(get_db)],
    auth_client: Annotated[AuthAdminClient, Depends(get_auth_admin_client)],
) -> HealthResponse:
    db_ok = check_db_connected(db)
    auth_ok = await auth_client.ping()
    return HealthResponse(
        status="ok" if db_ok and auth_ok else "degraded",
        environment=settings.APP_ENV,
        database="connected" if db_ok else "disconnected",
        auth_service="reachable" if auth_ok else "unreachable",
    )
