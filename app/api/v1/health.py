"""Health check endpoint with database and role-seed checks."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import check_db_connected, get_db
from app.models import ADMIN_ROLE_SLUG, Role
from app.schemas.health import HealthResponse

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(db: Session = Depends(get_db)) -> HealthResponse:
    """
    Return service health status, database connectivity, and whether the
    system admin role has been seeded. Used by load balancers and monitoring.
    """
    connected = check_db_connected(db)
    admin_seeded = None
    if connected:
        admin_seeded = (
            db.query(Role.id).filter(Role.slug == ADMIN_ROLE_SLUG).first() is not None
        )

    return HealthResponse(
        status="ok",
        environment=settings.APP_ENV,
        database="connected" if connected else "disconnected",
        admin_role_seeded=admin_seeded,
    )
