"""Request/response schemas for the user management resource."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from app.schemas.resource import FormContext, FormField, ResourceMeta, TableColumn, TableFilter

RowAction = Literal["view", "edit", "delete"]


class UserFormData(BaseModel):
    """
    Submitted create/edit form. Fields are optional here so that missing or blank values
    are reported per field by the resource's own validation.
    """

    model_config = {"extra": "ignore"}

    name: str | None = None
    email: str | None = None
    password: str | None = None
    is_active: bool | None = None
    roles: list[str] | None = None


class FieldError(BaseModel):
    """Validation message for one form field."""

    field: str
    message: str


class UserRead(BaseModel):
    """Public user representation (no password or hash)."""

    id: int
    name: str
    email: str
    is_active: bool | None
    roles: list[str] = Field(default_factory=list)
    created_at: datetime | None = None


class RoleBadge(BaseModel):
    name: str
    color: str | None


class UserRow(BaseModel):
    """One listing row with the actions the actor may run on it."""

    id: int
    name: str
    email: str
    is_active: bool | None
    roles: list[RoleBadge]
    created_at: datetime | None
    created_at_display: str | None
    actions: list[RowAction]


class UserListQuery(BaseModel):
    """Search, filters, sort and pagination for the listing."""

    search: str | None = Field(default=None, max_length=255)
    is_active: bool | None = None
    roles: list[str] = Field(default_factory=list)
    sort: str | None = None
    direction: Literal["asc", "desc"] = "asc"
    page: int = Field(default=1, ge=1)
    per_page: int = Field(default=25, ge=1, le=100)


class UserListResponse(BaseModel):
    """List page payload: table schema plus the current page of rows."""

    resource: ResourceMeta
    columns: list[TableColumn]
    filters: list[TableFilter]
    bulk_actions: list[Literal["delete"]]
    can_create: bool
    rows: list[UserRow]
    total: int = Field(..., ge=0)
    page: int
    per_page: int


class UserFormResponse(BaseModel):
    """Create/edit page payload: visible form fields and, on edit, current values."""

    resource: ResourceMeta
    context: FormContext
    fields: list[FormField]
    values: UserRead | None = None


class BulkDeleteRequest(BaseModel):
    ids: list[int] = Field(..., min_length=1, max_length=1000)


class BulkDeleteResponse(BaseModel):
    """Result of a bulk delete. The acting user is never deleted and is reported in skipped."""

    deleted: list[int] = Field(default_factory=list)
    skipped: list[int] = Field(default_factory=list)
    missing: list[int] = Field(default_factory=list)
