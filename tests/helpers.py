"""Shared fixtures for tests: in-memory SQLite database and account builders."""

from collections.abc import Iterable

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.security import hash_password
from app.models import Base, User
from app.services.permissions import find_or_create_role, give_permission_to

PASSWORD = "correct-horse-1"
# Hashed once: bcrypt at 12 rounds is slow enough to matter across many tests.
PASSWORD_HASH = hash_password(PASSWORD)


def make_session_factory() -> sessionmaker:
    """Fresh in-memory database shared across threads (TestClient runs sync routes in a pool)."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, autoflush=False)


def make_role(session: Session, name: str, permissions: Iterable[str] = ()) -> None:
    role, _ = find_or_create_role(session, name)
    give_permission_to(session, role, permissions)
    session.commit()


def make_user(
    session: Session,
    email: str,
    name: str = "Test User",
    roles: Iterable[str] = (),
    is_active: bool | None = True,
) -> User:
    """Persist a user with PASSWORD and the given (existing or new) roles."""
    user = User(name=name, email=email, password_hash=PASSWORD_HASH, is_active=is_active)
    for role_name in roles:
        role, _ = find_or_create_role(session, role_name)
        user.roles.append(role)
    session.add(user)
    session.commit()
    session.refresh(user)
    return user
