"""Provision the permission catalog, built-in roles and the bootstrap admin account.

Idempotent: everything is found-or-created by its unique key (permission/role name,
account email), so re-running never creates duplicates. One commit at the end.
"""

import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.permissions import PERMISSION_CATALOG, ROLE_ADMIN, ROLE_USER
from app.core.security import hash_password
from app.models import User
from app.services.permissions import (
    assign_role,
    find_or_create_permission,
    find_or_create_role,
    give_permission_to,
)

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

# Permissions granted to each built-in role. 'user' gets nothing, not even view_users,
# so regular accounts do not see the user management section.
ROLE_GRANTS: dict[str, tuple[str, ...]] = {
    ROLE_ADMIN: PERMISSION_CATALOG,
    ROLE_USER: (),
}


class SeedResult(BaseModel):
    """What a seeding run changed; everything is empty/False on a re-run."""

    permissions_created: list[str] = Field(default_factory=list)
    roles_created: list[str] = Field(default_factory=list)
    grants_added: dict[str, list[str]] = Field(default_factory=dict)
    admin_created: bool = False
    demo_user_created: bool = False


def find_or_create_user(
    session: Session,
    email: str,
    name: str,
    password: str,
) -> tuple[User, bool]:
    """Return (user, created) keyed by email. Name and password apply only to a new account."""
    user = session.scalar(select(User).where(User.email == email))
    if user is not None:
        return user, False
    user = User(
        name=name,
        email=email,
        password_hash=hash_password(password),
        is_active=True,
    )
    session.add(user)
    session.flush()
    return user, True


def seed_roles_and_permissions(session: Session, settings: "Settings") -> SeedResult:
    """
    Find-or-create the catalog permissions and the 'admin'/'user' roles, grant the catalog to
    'admin', and make sure the bootstrap admin (BOOTSTRAP_ADMIN_EMAIL) exists with role 'admin'.

    With SEED_DEMO_USER, a separate account keyed by DEMO_USER_EMAIL gets role 'user'.
    """
    result = SeedResult()

    for name in PERMISSION_CATALOG:
        _, created = find_or_create_permission(session, name)
        if created:
            result.permissions_created.append(name)

    for role_name, grants in ROLE_GRANTS.items():
        role, created = find_or_create_role(session, role_name)
        if created:
            result.roles_created.append(role_name)
        added = give_permission_to(session, role, grants)
        if added:
            result.grants_added[role_name] = added

    admin, result.admin_created = find_or_create_user(
        session,
        email=settings.BOOTSTRAP_ADMIN_EMAIL,
        name=settings.BOOTSTRAP_ADMIN_NAME,
        password=settings.BOOTSTRAP_ADMIN_PASSWORD.get_secret_value(),
    )
    assign_role(session, admin, ROLE_ADMIN)

    if settings.SEED_DEMO_USER:
        if settings.DEMO_USER_EMAIL == settings.BOOTSTRAP_ADMIN_EMAIL:
            logger.warning(
                "DEMO_USER_EMAIL equals BOOTSTRAP_ADMIN_EMAIL; skipping the demo account."
            )
        else:
            demo, result.demo_user_created = find_or_create_user(
                session,
                email=settings.DEMO_USER_EMAIL,
                name=settings.DEMO_USER_NAME,
                password=settings.DEMO_USER_PASSWORD.get_secret_value(),
            )
            assign_role(session, demo, ROLE_USER)

    session.commit()

    logger.info(
        "Seed completed: permissions_created=%s roles_created=%s grants_added=%s "
        "admin_created=%s demo_user_created=%s",
        result.permissions_created,
        result.roles_created,
        result.grants_added,
        result.admin_created,
        result.demo_user_created,
    )
    return result
