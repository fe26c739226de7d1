"""
Application permissions, default role names and claim type constants.
Permission values are stored as role claims of type ClaimConstants.PERMISSION.
"""
from dataclasses import dataclass


class ClaimConstants:
    PERMISSION = "permission"


class DefaultRoleNames:
    ADMINISTRATOR = "Administrator"
    USER = "User"


class JwtClaimTypes:
    """Standard OIDC claim names used for user claims."""
    NAME = "name"
    GIVEN_NAME = "given_name"
    FAMILY_NAME = "family_name"
    EMAIL = "email"
    EMAIL_VERIFIED = "email_verified"
    PHONE_NUMBER = "phone_number"
    PHONE_NUMBER_VERIFIED = "phone_number_verified"
    ROLE = "role"
    SUBJECT = "sub"
    PREFERRED_USERNAME = "preferred_username"
    WEBSITE = "website"
    PICTURE = "picture"
    PROFILE = "profile"
    UPDATED_AT = "updated_at"


@dataclass(frozen=True)
class ApplicationPermission:
    name: str
    value: str
    group_name: str
    description: str | None = None

    def __str__(self) -> str:
        return self.value


class ApplicationPermissions:
    USERS_GROUP = "User Permissions"
    USER_CREATE = ApplicationPermission("Create Users", "user.create", USERS_GROUP, "Permission to create users")
    USER_READ = ApplicationPermission("Read Users", "user.read", USERS_GROUP, "Permission to view users")
    USER_UPDATE = ApplicationPermission("Update Users", "user.update", USERS_GROUP, "Permission to edit users")
    USER_DELETE = ApplicationPermission("Delete Users", "user.delete", USERS_GROUP, "Permission to delete users")

    ROLES_GROUP = "Role Permissions"
    ROLE_CREATE = ApplicationPermission("Create Roles", "role.create", ROLES_GROUP, "Permission to create roles")
    ROLE_READ = ApplicationPermission("Read Roles", "role.read", ROLES_GROUP, "Permission to view roles")
    ROLE_UPDATE = ApplicationPermission("Update Roles", "role.update", ROLES_GROUP, "Permission to edit roles")
    ROLE_DELETE = ApplicationPermission("Delete Roles", "role.delete", ROLES_GROUP, "Permission to delete roles")

    TODOS_GROUP = "Todo Permissions"
    TODO_CREATE = ApplicationPermission("Create Todos", "todo.create", TODOS_GROUP, "Permission to create todos")
    TODO_READ = ApplicationPermission("Read Todos", "todo.read", TODOS_GROUP, "Permission to view todos")
    TODO_UPDATE = ApplicationPermission("Update Todos", "todo.update", TODOS_GROUP, "Permission to edit todos")
    TODO_DELETE = ApplicationPermission("Delete Todos", "todo.delete", TODOS_GROUP, "Permission to delete todos")

    API_LOG_GROUP = "API Log Permissions"
    API_LOG_READ = ApplicationPermission("Read API Logs", "apilog.read", API_LOG_GROUP, "Permission to view API logs")

    IDENTITY_SERVER_GROUP = "Identity Server Permissions"
    CLIENT_READ = ApplicationPermission(
        "Read Clients", "client.read", IDENTITY_SERVER_GROUP, "Permission to view OAuth clients"
    )
    CLIENT_UPDATE = ApplicationPermission(
        "Update Clients", "client.update", IDENTITY_SERVER_GROUP, "Permission to edit OAuth clients"
    )
    API_RESOURCE_READ = ApplicationPermission(
        "Read API Resources", "apiresource.read", IDENTITY_SERVER_GROUP, "Permission to view API resources"
    )
    API_RESOURCE_UPDATE = ApplicationPermission(
        "Update API Resources", "apiresource.update", IDENTITY_SERVER_GROUP, "Permission to edit API resources"
    )

    @classmethod
    def all_permissions(cls) -> list[ApplicationPermission]:
        return [v for v in vars(cls).values() if isinstance(v, ApplicationPermission)]

    @classmethod
    def get_permission_by_name(cls, name: str) -> ApplicationPermission | None:
        return next((p for p in cls.all_permissions() if p.name == name), None)

    @classmethod
    def get_permission_by_value(cls, value: str) -> ApplicationPermission | None:
        return next((p for p in cls.all_permissions() if p.value == value), None)

    @classmethod
    def get_all_permission_values(cls) -> list[str]:
        return [p.value for p in cls.all_permissions()]

    @classmethod
    def get_all_permission_names(cls) -> list[str]:
        return [p.name for p in cls.all_permissions()]
