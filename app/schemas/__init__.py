"""Pydantic request/response schemas."""

from app.schemas.auth import CurrentUserResponse, LoginRequest, TokenResponse
from app.schemas.dashboard import Stat, StatsResponse
from app.schemas.health import HealthResponse
from app.schemas.navigation import NavigationItem, NavigationResponse
from app.schemas.resource import (
    FormContext,
    FormField,
    FormFieldDefinition,
    PageRoute,
    ResourceMeta,
    SelectOption,
    TableColumn,
    TableFilter,
)
from app.schemas.users import (
    BulkDeleteRequest,
    BulkDeleteResponse,
    FieldError,
    RoleBadge,
    UserFormData,
    UserFormResponse,
    UserListQuery,
    UserListResponse,
    UserRead,
    UserRow,
)

__all__ = [
    "BulkDeleteRequest",
    "BulkDeleteResponse",
    "CurrentUserResponse",
    "FieldError",
    "FormContext",
    "FormField",
    "FormFieldDefinition",
    "HealthResponse",
    "LoginRequest",
    "NavigationItem",
    "NavigationResponse",
    "PageRoute",
    "ResourceMeta",
    "RoleBadge",
    "SelectOption",
    "Stat",
    "StatsResponse",
    "TableColumn",
    "TableFilter",
    "TokenResponse",
    "UserFormData",
    "UserFormResponse",
    "UserListQuery",
    "UserListResponse",
    "UserRead",
    "UserRow",
]
