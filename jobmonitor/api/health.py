"""Health check endpoint with a database connectivity probe."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from jobmonitor.core.config import settings
from jobmonitor.core.database import check_db_connected, get_db
from jobmonitor.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(request: Request, db: Annotated[Session, Depends(get_db)]) -> HealthResponse:
    """
    Service status and database connectivity. Public; used by load balancers and monitoring.
    Always 200: a failed probe is reported as status 'degraded'.
    """
    connected = check_db_connected(db)
    return HealthResponse(
        status="ok" if connected else "degraded",
        version=request.app.version,
        environment=settings.APP_ENV,
        database="connected" if connected else "disconnected",
    )
