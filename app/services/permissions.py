"""Permission store: roles, permissions and their assignment to users, on top of SQLAlchemy.

Effective permissions are computed on demand from user → roles → permissions; nothing
is cached, so grants made in one request are visible to the next.
"""

import logging
from collections.abc import Iterable

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.core.permissions import BUILTIN_ROLES, PERMISSION_CATALOG
from app.models import Permission, Role, User

logger = logging.getLogger(__name__)


class RoleNotFoundError(Exception):
    """Raised when assigning a role name that does not exist."""

    def __init__(self, role_name: str) -> None:
        self.role_name = role_name
        self.message = f"There is no role named '{role_name}'."
        super().__init__(self.message)


def find_or_create_permission(session: Session, name: str) -> tuple[Permission, bool]:
    """Return (permission, created); a missing permission is added and flushed, not committed."""
    permission = session.scalar(select(Permission).where(Permission.name == name))
    if permission is None:
        permission = Permission(name=name)
        session.add(permission)
        session.flush()
        logger.info("Created permission %s", name)
        return permission, True
    return permission, False


def find_or_create_role(session: Session, name: str) -> tuple[Role, bool]:
    """Return (role, created); a missing role is added and flushed, not committed."""
    role = session.scalar(select(Role).where(Role.name == name))
    if role is None:
        role = Role(name=name)
        session.add(role)
        session.flush()
        logger.info("Created role %s", name)
        return role, True
    return role, False


def give_permission_to(session: Session, role: Role, permission_names: Iterable[str]) -> list[str]:
    """Grant permissions to a role. Already-held permissions are skipped; returns the names added."""
    held = role.permission_names()
    added: list[str] = []
    for name in permission_names:
        if name in held:
            continue
        permission, _ = find_or_create_permission(session, name)
        role.permissions.append(permission)
        held.add(name)
        added.append(name)
    if added:
        session.flush()
    return added


def assign_role(session: Session, user: User, role_name: str) -> bool:
    """
    Attach a role to a user. Returns False when the user already has it.

    Raises RoleNotFoundError when the role does not exist.
    """
    if user.has_role(role_name):
        return False
    role = session.scalar(select(Role).where(Role.name == role_name))
    if role is None:
        raise RoleNotFoundError(role_name)
    user.roles.append(role)
    session.flush()
    return True


def sync_roles(session: Session, user: User, role_names: Iterable[str]) -> None:
    """
    Replace the user's roles with exactly the given names.

    Raises RoleNotFoundError for any unknown name (nothing is changed in that case).
    """
    wanted = sorted(set(role_names))
    roles = list(session.scalars(select(Role).where(Role.name.in_(wanted)))) if wanted else []
    found = {role.name for role in roles}
    for name in wanted:
        if name not in found:
            raise RoleNotFoundError(name)
    user.roles = roles


def effective_permissions(user: User) -> set[str]:
    return user.permission_names()


def user_has_permission(user: User, permission_name: str) -> bool:
    return user.has_permission(permission_name)


def user_has_role(user: User, role_name: str) -> bool:
    return user.has_role(role_name)


def list_role_names(session: Session) -> list[str]:
    return list(session.scalars(select(Role.name).order_by(Role.name)))


def catalog_provisioned(session: Session) -> bool:
    """True when every catalog permission and built-in role exists (i.e. the seeder has run)."""
    permission_count = session.scalar(
        select(func.count()).select_from(Permission).where(Permission.name.in_(PERMISSION_CATALOG))
    )
    role_count = session.scalar(
        select(func.count()).select_from(Role).where(Role.name.in_(BUILTIN_ROLES))
    )
    return permission_count == len(PERMISSION_CATALOG) and role_count == len(BUILTIN_ROLES)
