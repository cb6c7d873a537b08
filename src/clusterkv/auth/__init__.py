"""etcd v2 auth API: enable/disable/status, users and roles.

Each function takes a :class:`~clusterkv.client.SyncClient` or
:class:`~clusterkv.client.AsyncClient` and returns the first member's
answer as a :class:`~clusterkv.client.Response` (awaitable with the async
client).
"""

from clusterkv.auth.api import (
    DISABLE,
    ENABLE,
    STATUS,
    create_role,
    create_user,
    delete_role,
    delete_user,
    disable,
    enable,
    get_role,
    get_user,
    list_roles,
    list_users,
    status,
    update_role,
    update_user,
)
from clusterkv.auth.models import (
    NewUser,
    Permission,
    Permissions,
    Role,
    RoleUpdate,
    User,
    UserUpdate,
)
from clusterkv.auth.outcomes import DisableAuth, EnableAuth

__all__ = [
    "DISABLE",
    "ENABLE",
    "STATUS",
    "DisableAuth",
    "EnableAuth",
    "NewUser",
    "Permission",
    "Permissions",
    "Role",
    "RoleUpdate",
    "User",
    "UserUpdate",
    "create_role",
    "create_user",
    "delete_role",
    "delete_user",
    "disable",
    "enable",
    "get_role",
    "get_user",
    "list_roles",
    "list_users",
    "status",
    "update_role",
    "update_user",
]
