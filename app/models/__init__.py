"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.role import Permission, Role, role_permissions, user_roles
from app.models.user import User

__all__ = ["Base", "Permission", "Role", "User", "role_permissions", "user_roles"]
