"""Health check: database connectivity and whether an administrator exists yet."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from roster.core.config import settings
from roster.core.database import check_db_connected, get_db
from roster.core.permissions import ADMINISTRATOR
from roster.models import UserRole
from roster.schemas.health import HealthResponse

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(db: Session = Depends(get_db)) -> HealthResponse:
    """
    Return service status, database connectivity and, when the database is up,
    whether at least one user holds ADMINISTRATOR (see roster.scripts.create_user).
    """
    if not check_db_connected(db):
        return HealthResponse(environment=settings.APP_ENV, database="disconnected")

    has_admin = (
        db.query(UserRole.id).filter(UserRole.role_id == ADMINISTRATOR).first() is not None
    )
    return HealthResponse(
        environment=settings.APP_ENV,
        database="connected",
        administrator_configured=has_admin,
    )
