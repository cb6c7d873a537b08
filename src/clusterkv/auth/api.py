"""The etcd v2 auth API (``/v2/auth``).

Every call here builds an :class:`~clusterkv.client.operation.Operation` and
hands it to ``client.execute``. With a
:class:`~clusterkv.client.SyncClient` the functions return a
:class:`~clusterkv.client.operation.Response`; with an
:class:`~clusterkv.client.AsyncClient` they return an awaitable of one::

    with SyncClient(profile) as client:
        enable(client).data              # EnableAuth.ENABLED

    async with AsyncClient(profile) as client:
        (await status(client)).data      # True

On total failure both raise :class:`~clusterkv.exceptions.DispatchError`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Union
from urllib.parse import quote

from clusterkv.auth.models import (
    AuthStatus,
    NewUser,
    Role,
    RoleList,
    RoleUpdate,
    User,
    UserList,
    UserUpdate,
)
from clusterkv.auth.outcomes import DISABLE_OUTCOMES, ENABLE_OUTCOMES, DisableAuth, EnableAuth
from clusterkv.client.operation import JsonOperation, StatusOperation

if TYPE_CHECKING:
    from clusterkv.client import AsyncClient, SyncClient

    Client = Union[SyncClient, AsyncClient]


# --- Auth system ---

ENABLE: StatusOperation[EnableAuth] = StatusOperation(
    "enable", "PUT", "/enable", ENABLE_OUTCOMES, content=""
)

DISABLE: StatusOperation[DisableAuth] = StatusOperation(
    "disable", "DELETE", "/enable", DISABLE_OUTCOMES
)


def _parse_status(body: bytes) -> bool:
    return AuthStatus.model_validate_json(body).enabled


STATUS: JsonOperation[bool] = JsonOperation("status", "GET", "/enable", _parse_status)


def enable(client: Client) -> Any:
    """Attempt to enable the auth system."""
    return client.execute(ENABLE)


def disable(client: Client) -> Any:
    """Attempt to disable the auth system. Requires root credentials."""
    return client.execute(DISABLE)


def status(client: Client) -> Any:
    """Determine whether the auth system is enabled."""
    return client.execute(STATUS)


# --- Users ---


def _user_path(name: str) -> str:
    return f"/users/{quote(name, safe='')}"


def _parse_user(body: bytes) -> User:
    return User.model_validate_json(body)


def _parse_users(body: bytes) -> list[User]:
    return UserList.model_validate_json(body).users


def _ignore_body(body: bytes) -> None:
    return None


def list_users(client: Client) -> Any:
    """List every user."""
    return client.execute(JsonOperation("list_users", "GET", "/users", _parse_users))


def get_user(client: Client, name: str) -> Any:
    """Fetch a single user and its roles."""
    return client.execute(JsonOperation("get_user", "GET", _user_path(name), _parse_user))


def create_user(client: Client, user: NewUser) -> Any:
    """Create a user. The member answers with the stored user."""
    operation = JsonOperation(
        "create_user",
        "PUT",
        _user_path(user.name),
        _parse_user,
        success_codes=(200, 201),
        json_body=user.to_body(),
    )
    return client.execute(operation)


def update_user(client: Client, update: UserUpdate) -> Any:
    """Change a user's password or roles. The member answers with the updated user."""
    operation = JsonOperation(
        "update_user",
        "PUT",
        _user_path(update.name),
        _parse_user,
        success_codes=(200, 201),
        json_body=update.to_body(),
    )
    return client.execute(operation)


def delete_user(client: Client, name: str) -> Any:
    """Delete a user."""
    return client.execute(
        JsonOperation("delete_user", "DELETE", _user_path(name), _ignore_body)
    )


# --- Roles ---


def _role_path(name: str) -> str:
    return f"/roles/{quote(name, safe='')}"


def _parse_role(body: bytes) -> Role:
    return Role.model_validate_json(body)


def _parse_roles(body: bytes) -> list[Role]:
    return RoleList.model_validate_json(body).roles


def list_roles(client: Client) -> Any:
    """List every role."""
    return client.execute(JsonOperation("list_roles", "GET", "/roles", _parse_roles))


def get_role(client: Client, name: str) -> Any:
    """Fetch a single role and its permissions."""
    return client.execute(JsonOperation("get_role", "GET", _role_path(name), _parse_role))


def create_role(client: Client, role: Role) -> Any:
    """Create a role. The member answers with the stored role."""
    operation = JsonOperation(
        "create_role",
        "PUT",
        _role_path(role.name),
        _parse_role,
        success_codes=(200, 201),
        json_body=role.to_body(),
    )
    return client.execute(operation)


def update_role(client: Client, update: RoleUpdate) -> Any:
    """Grant or revoke a role's permissions. The member answers with the updated role."""
    operation = JsonOperation(
        "update_role",
        "PUT",
        _role_path(update.name),
        _parse_role,
        success_codes=(200, 201),
        json_body=update.to_body(),
    )
    return client.execute(operation)


def delete_role(client: Client, name: str) -> Any:
    """Delete a role."""
    return client.execute(
        JsonOperation("delete_role", "DELETE", _role_path(name), _ignore_body)
    )
