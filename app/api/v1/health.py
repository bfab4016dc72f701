"""Health check endpoint with database connectivity and provisioning checks."""

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import check_db_connected, get_db
from app.schemas.health import HealthResponse
from app.services.permissions import catalog_provisioned

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(db: Session = Depends(get_db)) -> HealthResponse:
    """
    Return service health status, database connectivity and whether the seeder has run.
    Used by load balancers and monitoring.
    """
    if not check_db_connected(db):
        return HealthResponse(status="ok", environment=settings.APP_ENV, database="disconnected")

    try:
        provisioned = catalog_provisioned(db)
    except SQLAlchemyError:
        # Tables missing: migrations have not been applied yet.
        db.rollback()
        provisioned = False

    return HealthResponse(
        status="ok",
        environment=settings.APP_ENV,
        database="connected",
        permissions_provisioned=provisioned,
    )
