"""Stats overview widget for the panel dashboard.

Only the user count is read from storage. Openings, institutions and applications belong
to other modules of the platform; until those exist their values are fixed demo numbers
and are returned with placeholder=True.
"""

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.models import User
from app.schemas.dashboard import Stat

TRENDING_UP_ICON = "heroicon-m-arrow-trending-up"

PLACEHOLDER_OPENINGS = 150
PLACEHOLDER_INSTITUTIONS = 75
PLACEHOLDER_APPLICATIONS = 300


def count_users(session: Session) -> int:
    return session.scalar(select(func.count()).select_from(User)) or 0


def get_user_stats(session: Session) -> list[Stat]:
    """Return the four dashboard cards, in display order."""
    return [
        Stat(
            label="Users",
            value=count_users(session),
            description="32k increase",
            description_icon=TRENDING_UP_ICON,
            chart=[1, 1, 1],
            color="success",
        ),
        Stat(
            label="Available Openings",
            value=PLACEHOLDER_OPENINGS,
            description="10% increase",
            description_icon=TRENDING_UP_ICON,
            chart=[1, 2, 3],
            color="info",
            placeholder=True,
        ),
        Stat(
            label="Institutions",
            value=PLACEHOLDER_INSTITUTIONS,
            description="5% increase",
            description_icon=TRENDING_UP_ICON,
            chart=[1, 2, 1],
            color="warning",
            placeholder=True,
        ),
        Stat(
            label="Applications",
            value=PLACEHOLDER_APPLICATIONS,
            description="20% increase",
            description_icon=TRENDING_UP_ICON,
            chart=[1, 3, 2],
            color="danger",
            placeholder=True,
        ),
    ]
