"""ORM model for back-office user accounts (auth, roles and panel access)."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String, func, true
from sqlalchemy.orm import relationship

from app.core.permissions import ROLE_ADMIN, ROLE_USER, VIEW_USERS
from app.models.base import Base
from app.models.role import user_roles


class User(Base):
    """
    User account managed from the back-office panel.

    password_hash is never serialized; API schemas expose only public fields.
    is_active is nullable: an unset flag counts as active for panel access.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    is_active = Column(Boolean, nullable=True, default=True, server_default=true())
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    roles = relationship(
        "Role",
        secondary=user_roles,
        back_populates="users",
        lazy="selectin",
    )

    def role_names(self) -> list[str]:
        return sorted(role.name for role in self.roles)

    def has_role(self, role_name: str) -> bool:
        return any(role.name == role_name for role in self.roles)

    def permission_names(self) -> set[str]:
        """Effective permissions: union of the permissions of every assigned role."""
        names: set[str] = set()
        for role in self.roles:
            names |= role.permission_names()
        return names

    def has_permission(self, permission_name: str) -> bool:
        return permission_name in self.permission_names()

    def can_access_panel(self) -> bool:
        """Only an explicit is_active=False blocks the panel; None is treated as active."""
        return self.is_active is not False

    def can_manage_users(self) -> bool:
        return self.has_permission(VIEW_USERS)

    def is_admin(self) -> bool:
        return self.has_role(ROLE_ADMIN)

    def is_user(self) -> bool:
        return self.has_role(ROLE_USER)

    @classmethod
    def active(cls, query):
        """Scope a Query/Select to users with is_active = true."""
        return query.filter(cls.is_active.is_(True))

    @classmethod
    def inactive(cls, query):
        """Scope a Query/Select to users with is_active = false."""
        return query.filter(cls.is_active.is_(False))

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"
