"""Permission catalog and built-in role names shared by models, guard and seeder."""

VIEW_USERS = "view_users"
CREATE_USERS = "create_users"
EDIT_USERS = "edit_users"
DELETE_USERS = "delete_users"
MANAGE_PERMISSIONS = "manage_permissions"

# Fixed catalog, in provisioning order.
PERMISSION_CATALOG: tuple[str, ...] = (
    VIEW_USERS,
    CREATE_USERS,
    EDIT_USERS,
    DELETE_USERS,
    MANAGE_PERMISSIONS,
)

ROLE_ADMIN = "admin"
ROLE_USER = "user"
BUILTIN_ROLES: tuple[str, ...] = (ROLE_ADMIN, ROLE_USER)
