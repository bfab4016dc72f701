"""Access policy guard: permission-name checks that fail closed.

Every CRUD predicate and UI gate goes through evaluate_permission. It is the only place
where a fault during evaluation (no actor, detached or malformed actor, database error)
is caught, and every such fault resolves to "denied".
"""

import logging
from typing import Literal

from app.models import User
from app.services.permissions import user_has_permission

logger = logging.getLogger(__name__)

AccessDecision = Literal["granted", "denied"]

GRANTED: AccessDecision = "granted"
DENIED: AccessDecision = "denied"


def evaluate_permission(actor: User | None, permission_name: str) -> AccessDecision:
    """Return "granted" only when an actor is present and holds the permission through a role."""
    if actor is None:
        return DENIED
    try:
        held = user_has_permission(actor, permission_name)
    except Exception:
        logger.warning(
            "Permission check for %r failed; denying access.",
            permission_name,
            exc_info=True,
        )
        return DENIED
    # Anything other than a real True (e.g. None from a malformed actor) is a denial.
    return GRANTED if held is True else DENIED


def check_permission(actor: User | None, permission_name: str) -> bool:
    return evaluate_permission(actor, permission_name) == GRANTED


class AccessGuard:
    """Guard bound to the current actor (None when nobody is authenticated)."""

    def __init__(self, actor: User | None) -> None:
        self.actor = actor

    def check_permission(self, permission_name: str) -> bool:
        return check_permission(self.actor, permission_name)

    def is_actor(self, record: object) -> bool:
        """True when record is the acting user (compared by id; False without an actor)."""
        if self.actor is None or not isinstance(record, User):
            return False
        return record.id == self.actor.id
