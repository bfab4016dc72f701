"""Dashboard widgets for any user allowed into the panel."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user
from app.core.database import get_db
from app.models.user import User
from app.schemas.dashboard import StatsResponse
from app.services.dashboard import get_user_stats

router = APIRouter()


@router.get("/stats", response_model=StatsResponse)
def get_stats(
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[User, Depends(get_current_user)],
) -> StatsResponse:
    """Stats overview: real user count plus placeholder cards (flagged placeholder=true)."""
    return StatsResponse(stats=get_user_stats(db))
