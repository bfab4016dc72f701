"""User management resource: form/table schema, access predicates and CRUD operations.

Every access decision is delegated to the AccessGuard. Form field definitions are the
single source for the rendered form and for validating submissions; validation errors are
collected per field and nothing is written unless the whole submission is valid.
"""

import logging
from typing import Any

from pydantic import EmailStr, TypeAdapter, ValidationError
from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.permissions import (
    CREATE_USERS,
    DELETE_USERS,
    EDIT_USERS,
    MANAGE_PERMISSIONS,
    ROLE_ADMIN,
    ROLE_USER,
    VIEW_USERS,
)
from app.core.security import EMAIL_MAX_LEN, NAME_MAX_LEN, PASSWORD_MAX_LEN, PASSWORD_MIN_LEN, hash_password
from app.models import Role, User
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
    BulkDeleteResponse,
    FieldError,
    RoleBadge,
    RowAction,
    UserFormData,
    UserListQuery,
    UserRead,
    UserRow,
)
from app.services.access import AccessGuard
from app.services.permissions import RoleNotFoundError, list_role_names, sync_roles

logger = logging.getLogger(__name__)

CREATED_AT_FORMAT = "%d/%m/%Y %H:%M"

_email_adapter = TypeAdapter(EmailStr)

FORM_FIELDS: tuple[FormFieldDefinition, ...] = (
    FormFieldDefinition(
        name="name",
        label="Name",
        type="text",
        required_on=frozenset({"create", "edit"}),
        max_length=NAME_MAX_LEN,
    ),
    FormFieldDefinition(
        name="email",
        label="Email",
        type="email",
        required_on=frozenset({"create", "edit"}),
        max_length=EMAIL_MAX_LEN,
        unique=True,
    ),
    FormFieldDefinition(
        name="password",
        label="Password",
        type="password",
        required_on=frozenset({"create"}),
        min_length=PASSWORD_MIN_LEN,
        max_length=PASSWORD_MAX_LEN,
        keep_when_blank=True,
        hashed=True,
    ),
    FormFieldDefinition(
        name="is_active",
        label="Active user",
        type="toggle",
        default=True,
    ),
    FormFieldDefinition(
        name="roles",
        label="Roles",
        type="multiselect",
        multiple=True,
        visible_with=MANAGE_PERMISSIONS,
    ),
)

TABLE_COLUMNS: tuple[TableColumn, ...] = (
    TableColumn(name="name", label="Name", searchable=True, sortable=True),
    TableColumn(name="email", label="Email", searchable=True, sortable=True),
    TableColumn(name="is_active", label="Active", type="boolean", sortable=True),
    TableColumn(
        name="roles.name",
        label="Roles",
        type="badge",
        colors={ROLE_ADMIN: "danger", ROLE_USER: "success"},
        default_color="gray",
    ),
    TableColumn(
        name="created_at",
        label="Created at",
        type="datetime",
        date_format=CREATED_AT_FORMAT,
        sortable=True,
        toggleable=True,
        hidden_by_default=True,
    ),
)

# Listing column name -> ORM attribute used for search/sort.
_COLUMN_ATTRIBUTES = {
    "name": User.name,
    "email": User.email,
    "is_active": User.is_active,
    "created_at": User.created_at,
}

SEARCHABLE_COLUMNS: tuple[str, ...] = tuple(c.name for c in TABLE_COLUMNS if c.searchable)
SORTABLE_COLUMNS: tuple[str, ...] = tuple(c.name for c in TABLE_COLUMNS if c.sortable)

PAGES: tuple[PageRoute, ...] = (
    PageRoute(name="index", path="/"),
    PageRoute(name="create", path="/create"),
    # Declared but not routed. The "view" row action shows the row already in the listing.
    PageRoute(name="view", path="/{record}", mounted=False),
    PageRoute(name="edit", path="/{record}/edit"),
)

RESOURCE_META = ResourceMeta(
    label="User",
    plural_label="Users",
    navigation_label="Users",
    navigation_icon="heroicon-o-users",
    pages=list(PAGES),
)

_ROLE_BADGE_COLUMN = next(c for c in TABLE_COLUMNS if c.name == "roles.name")


class AccessDeniedError(Exception):
    """Raised when the actor may not perform a resource operation."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        self.message = "Not allowed."
        super().__init__(f"{operation}: {self.message}")


class UserNotFoundError(Exception):
    """Raised when a user id does not exist."""

    def __init__(self, user_id: int) -> None:
        self.user_id = user_id
        self.message = f"User {user_id} not found."
        super().__init__(self.message)


class UserFormError(Exception):
    """Raised when a create/edit submission fails validation. Carries one message per field."""

    def __init__(self, errors: list[FieldError]) -> None:
        self.errors = errors
        self.message = "; ".join(f"{e.field}: {e.message}" for e in errors)
        super().__init__(self.message)


class ListQueryError(Exception):
    """Raised for listing parameters the table does not support (e.g. an unsortable column)."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


def role_badge(role_name: str) -> RoleBadge:
    return RoleBadge(name=role_name, color=_ROLE_BADGE_COLUMN.color_for(role_name))


def to_user_read(user: User) -> UserRead:
    return UserRead(
        id=user.id,
        name=user.name,
        email=user.email,
        is_active=user.is_active,
        roles=user.role_names(),
        created_at=user.created_at,
    )


class UserResource:
    """User CRUD resource for one request: the acting user plus the DB session."""

    def __init__(self, actor: User | None, session: Session) -> None:
        self.guard = AccessGuard(actor)
        self.session = session

    # Access predicates

    def should_register_navigation(self) -> bool:
        return self.guard.check_permission(VIEW_USERS)

    def can_view_any(self) -> bool:
        return self.guard.check_permission(VIEW_USERS)

    def can_create(self) -> bool:
        return self.guard.check_permission(CREATE_USERS)

    def can_view(self, record: User) -> bool:
        return self.guard.check_permission(VIEW_USERS)

    def can_edit(self, record: User) -> bool:
        return self.guard.check_permission(EDIT_USERS)

    def can_delete(self, record: object) -> bool:
        """delete_users is required, and nobody may delete their own account."""
        if not self.guard.check_permission(DELETE_USERS):
            return False
        if self.guard.actor is None or not isinstance(record, User):
            return False
        return not self.guard.is_actor(record)

    def can_bulk_delete(self) -> bool:
        return self.guard.check_permission(DELETE_USERS)

    # Schema

    def visible_fields(self) -> list[FormFieldDefinition]:
        return [
            field
            for field in FORM_FIELDS
            if field.visible_with is None or self.guard.check_permission(field.visible_with)
        ]

    def role_options(self) -> list[SelectOption]:
        return [SelectOption(value=name, label=name) for name in list_role_names(self.session)]

    def form_schema(self, context: FormContext) -> list[FormField]:
        fields: list[FormField] = []
        for field in self.visible_fields():
            options = self.role_options() if field.name == "roles" else None
            fields.append(field.render(context, options=options))
        return fields

    def table_filters(self) -> list[TableFilter]:
        return [
            TableFilter(name="is_active", label="Status", type="ternary"),
            TableFilter(
                name="roles",
                label="Roles",
                type="select",
                multiple=True,
                options=self.role_options(),
            ),
        ]

    def row_actions(self, record: User) -> list[RowAction]:
        actions: list[RowAction] = []
        if self.can_view(record):
            actions.append("view")
        if self.can_edit(record):
            actions.append("edit")
        if self.can_delete(record):
            actions.append("delete")
        return actions

    def bulk_actions(self) -> list[str]:
        return ["delete"] if self.can_bulk_delete() else []

    # Validation

    def validate_form(
        self,
        data: UserFormData,
        context: FormContext,
        record: User | None = None,
    ) -> dict[str, Any]:
        """
        Validate a submission against the visible field definitions.

        Returns the attributes to write (password already hashed; omitted when blank on edit;
        roles only when the actor may manage them). Raises UserFormError with every failing field.
        """
        raw = data.model_dump()
        errors: list[FieldError] = []
        cleaned: dict[str, Any] = {}

        for field in self.visible_fields():
            value = raw.get(field.name)

            if field.type == "toggle":
                if value is None:
                    if context == "create":
                        cleaned[field.name] = field.default
                else:
                    cleaned[field.name] = value
                continue

            if field.type == "multiselect":
                if value is None:
                    continue
                known = set(list_role_names(self.session))
                if any(name not in known for name in value):
                    errors.append(FieldError(field=field.name, message=f"The selected {field.label.lower()} are invalid."))
                else:
                    cleaned[field.name] = sorted(set(value))
                continue

            if isinstance(value, str) and field.type != "password":
                value = value.strip()
            # Passwords are stored as typed but a whitespace-only one counts as blank.
            if value is None or (isinstance(value, str) and not value.strip()):
                if field.is_required(context):
                    errors.append(FieldError(field=field.name, message=f"The {field.label.lower()} field is required."))
                continue

            message = self._check_value(field, value, record)
            if message:
                errors.append(FieldError(field=field.name, message=message))
                continue

            if field.hashed:
                cleaned[f"{field.name}_hash"] = hash_password(value)
            else:
                cleaned[field.name] = value

        if errors:
            raise UserFormError(errors)
        return cleaned

    def _check_value(self, field: FormFieldDefinition, value: str, record: User | None) -> str | None:
        label = field.label.lower()
        if field.min_length is not None and len(value) < field.min_length:
            return f"The {label} must be at least {field.min_length} characters."
        if field.max_length is not None and len(value) > field.max_length:
            return f"The {label} may not be greater than {field.max_length} characters."
        if field.type == "email":
            try:
                _email_adapter.validate_python(value)
            except ValidationError:
                return f"The {label} must be a valid email address."
        if field.unique and self._value_taken(field.name, value, record):
            return f"The {label} has already been taken."
        return None

    def _value_taken(self, column: str, value: str, record: User | None) -> bool:
        attribute = _COLUMN_ATTRIBUTES[column]
        if column == "email":
            stmt = select(User.id).where(func.lower(attribute) == value.lower())
        else:
            stmt = select(User.id).where(attribute == value)
        if record is not None:
            stmt = stmt.where(User.id != record.id)
        return self.session.scalar(stmt.limit(1)) is not None

    # Operations

    def get_user(self, user_id: int) -> User:
        user = self.session.get(User, user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    def list_users(self, query: UserListQuery) -> tuple[list[UserRow], int]:
        """Return (rows for the requested page, total matching rows)."""
        if not self.can_view_any():
            raise AccessDeniedError("list")

        stmt = select(User)
        if query.search and query.search.strip():
            term = query.search.strip()
            stmt = stmt.where(
                or_(
                    *(
                        _COLUMN_ATTRIBUTES[name].icontains(term, autoescape=True)
                        for name in SEARCHABLE_COLUMNS
                    )
                )
            )
        if query.is_active is True:
            stmt = User.active(stmt)
        elif query.is_active is False:
            stmt = User.inactive(stmt)
        if query.roles:
            stmt = stmt.where(User.roles.any(Role.name.in_(query.roles)))

        total = self.session.scalar(select(func.count()).select_from(stmt.subquery())) or 0

        if query.sort is not None:
            if query.sort not in SORTABLE_COLUMNS:
                raise ListQueryError(
                    f"Cannot sort by {query.sort!r}; sortable columns are {list(SORTABLE_COLUMNS)}."
                )
            column = _COLUMN_ATTRIBUTES[query.sort]
            stmt = stmt.order_by(column.desc() if query.direction == "desc" else column.asc())
        stmt = stmt.order_by(User.id).offset((query.page - 1) * query.per_page).limit(query.per_page)

        rows = [self._to_row(user) for user in self.session.scalars(stmt)]
        return rows, total

    def _to_row(self, user: User) -> UserRow:
        return UserRow(
            id=user.id,
            name=user.name,
            email=user.email,
            is_active=user.is_active,
            roles=[role_badge(name) for name in user.role_names()],
            created_at=user.created_at,
            created_at_display=user.created_at.strftime(CREATED_AT_FORMAT) if user.created_at else None,
            actions=self.row_actions(user),
        )

    def create_user(self, data: UserFormData) -> User:
        if not self.can_create():
            raise AccessDeniedError("create")
        cleaned = self.validate_form(data, "create")
        role_names = cleaned.pop("roles", None)
        user = User(**cleaned)
        self._apply_roles(user, role_names)
        self.session.add(user)
        self._commit()
        self.session.refresh(user)
        logger.info("Created user id=%s email=%s", user.id, user.email)
        return user

    def update_user(self, user_id: int, data: UserFormData) -> User:
        user = self.get_user(user_id)
        if not self.can_edit(user):
            raise AccessDeniedError("edit")
        cleaned = self.validate_form(data, "edit", record=user)
        role_names = cleaned.pop("roles", None)
        self._apply_roles(user, role_names)
        for attr, value in cleaned.items():
            setattr(user, attr, value)
        self._commit()
        self.session.refresh(user)
        logger.info(
            "Updated user id=%s fields=%s",
            user.id,
            sorted(list(cleaned) + (["roles"] if role_names is not None else [])),
        )
        return user

    def delete_user(self, user_id: int) -> None:
        user = self.get_user(user_id)
        if not self.can_delete(user):
            raise AccessDeniedError("delete")
        self.session.delete(user)
        self.session.commit()
        logger.info("Deleted user id=%s", user_id)

    def bulk_delete(self, user_ids: list[int]) -> BulkDeleteResponse:
        """Delete every listed user except the actor; unknown ids are reported as missing."""
        if not self.can_bulk_delete():
            raise AccessDeniedError("bulk_delete")
        wanted = sorted(set(user_ids))
        users = {u.id: u for u in self.session.scalars(select(User).where(User.id.in_(wanted)))}
        result = BulkDeleteResponse()
        for user_id in wanted:
            user = users.get(user_id)
            if user is None:
                result.missing.append(user_id)
            elif not self.can_delete(user):
                result.skipped.append(user_id)
            else:
                self.session.delete(user)
                result.deleted.append(user_id)
        self.session.commit()
        if result.deleted:
            logger.info("Bulk deleted users ids=%s skipped=%s", result.deleted, result.skipped)
        return result

    def _apply_roles(self, user: User, role_names: list[str] | None) -> None:
        if role_names is None:
            return
        try:
            sync_roles(self.session, user, role_names)
        except RoleNotFoundError as e:
            self.session.rollback()
            raise UserFormError([FieldError(field="roles", message=e.message)]) from e

    def _commit(self) -> None:
        """Commit; a unique violation racing past the form check is reported on email."""
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise UserFormError(
                [FieldError(field="email", message="The email has already been taken.")]
            ) from e
