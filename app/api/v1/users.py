"""User management endpoints: list, create and edit pages plus delete and bulk delete.

Routes mirror the resource pages (index "/", create "/create", edit "/{id}/edit"). There is
no view-by-id page; the "view" row action refers to the row data already in the listing.
Authorization is decided by UserResource; this module only maps its errors to HTTP responses.
"""

from typing import Annotated, Literal

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user
from app.core.database import get_db
from app.models.user import User
from app.schemas.users import (
    BulkDeleteRequest,
    BulkDeleteResponse,
    UserFormData,
    UserFormResponse,
    UserListQuery,
    UserListResponse,
    UserRead,
)
from app.services.user_resource import (
    RESOURCE_META,
    TABLE_COLUMNS,
    AccessDeniedError,
    ListQueryError,
    UserFormError,
    UserNotFoundError,
    UserResource,
    to_user_read,
)

router = APIRouter()


def get_user_resource(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> UserResource:
    """Dependency: the user resource bound to the authenticated actor and request session."""
    return UserResource(current_user, db)


def _forbidden(e: AccessDeniedError | None = None) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail=e.message if e is not None else "Not allowed.",
    )


def _not_found(e: UserNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)


def _invalid_form(e: UserFormError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail=[error.model_dump() for error in e.errors],
    )


@router.get("", response_model=UserListResponse)
def list_users(
    resource: Annotated[UserResource, Depends(get_user_resource)],
    search: Annotated[str | None, Query(max_length=255)] = None,
    is_active: bool | None = None,
    roles: Annotated[list[str] | None, Query()] = None,
    sort: str | None = None,
    direction: Literal["asc", "desc"] = "asc",
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=100)] = 25,
) -> UserListResponse:
    """
    List page: table columns, filters, bulk actions and one page of rows.

    Filters: is_active (true/false, omit for all) and roles (repeatable, any match).
    search matches name or email; sort accepts any sortable column.
    """
    query = UserListQuery(
        search=search,
        is_active=is_active,
        roles=roles or [],
        sort=sort,
        direction=direction,
        page=page,
        per_page=per_page,
    )
    try:
        rows, total = resource.list_users(query)
    except AccessDeniedError as e:
        raise _forbidden(e) from e
    except ListQueryError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message) from e
    return UserListResponse(
        resource=RESOURCE_META,
        columns=list(TABLE_COLUMNS),
        filters=resource.table_filters(),
        bulk_actions=resource.bulk_actions(),
        can_create=resource.can_create(),
        rows=rows,
        total=total,
        page=query.page,
        per_page=query.per_page,
    )


@router.get("/create", response_model=UserFormResponse)
def get_create_form(
    resource: Annotated[UserResource, Depends(get_user_resource)],
) -> UserFormResponse:
    """Create page: the form fields visible to the actor."""
    if not resource.can_create():
        raise _forbidden()
    return UserFormResponse(
        resource=RESOURCE_META,
        context="create",
        fields=resource.form_schema("create"),
    )


@router.post("/create", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserFormData,
    resource: Annotated[UserResource, Depends(get_user_resource)],
) -> UserRead:
    """Create a user. Validation errors are returned as a list of {field, message} with 422."""
    try:
        user = resource.create_user(body)
    except AccessDeniedError as e:
        raise _forbidden(e) from e
    except UserFormError as e:
        raise _invalid_form(e) from e
    return to_user_read(user)


@router.get("/{user_id}/edit", response_model=UserFormResponse)
def get_edit_form(
    user_id: int,
    resource: Annotated[UserResource, Depends(get_user_resource)],
) -> UserFormResponse:
    """Edit page: visible form fields and the record's current values (never the password)."""
    try:
        user = resource.get_user(user_id)
    except UserNotFoundError as e:
        raise _not_found(e) from e
    if not resource.can_edit(user):
        raise _forbidden()
    return UserFormResponse(
        resource=RESOURCE_META,
        context="edit",
        fields=resource.form_schema("edit"),
        values=to_user_read(user),
    )


@router.put("/{user_id}/edit", response_model=UserRead)
def update_user(
    user_id: int,
    body: UserFormData,
    resource: Annotated[UserResource, Depends(get_user_resource)],
) -> UserRead:
    """Update a user. A blank or omitted password keeps the current one."""
    try:
        user = resource.update_user(user_id, body)
    except UserNotFoundError as e:
        raise _not_found(e) from e
    except AccessDeniedError as e:
        raise _forbidden(e) from e
    except UserFormError as e:
        raise _invalid_form(e) from e
    return to_user_read(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    resource: Annotated[UserResource, Depends(get_user_resource)],
) -> Response:
    """Delete one user. Deleting your own account is always refused (403)."""
    try:
        resource.delete_user(user_id)
    except UserNotFoundError as e:
        raise _not_found(e) from e
    except AccessDeniedError as e:
        raise _forbidden(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/bulk-delete", response_model=BulkDeleteResponse)
def bulk_delete_users(
    body: BulkDeleteRequest,
    resource: Annotated[UserResource, Depends(get_user_resource)],
) -> BulkDeleteResponse:
    """Delete the selected users; the acting user is skipped, unknown ids are listed as missing."""
    try:
        return resource.bulk_delete(body.ids)
    except AccessDeniedError as e:
        raise _forbidden(e) from e
