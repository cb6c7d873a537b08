"""Users, roles and permissions of the etcd v2 auth system.

Field names follow the wire format: a user's name travels as ``user`` and a
role's name as ``role``; grants and revocations travel as ``grant`` and
``revoke``. Build request bodies with :meth:`to_body`, which drops unset
optional fields.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Permission(BaseModel):
    """Keys that may be read and written."""

    read: list[str] = Field(default_factory=list)
    write: list[str] = Field(default_factory=list)

    @field_validator("read", "write", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    def add_read_permission(self, key: str) -> None:
        self.read.append(key)

    def add_write_permission(self, key: str) -> None:
        self.write.append(key)

    def remove_read_permission(self, key: str) -> None:
        if key in self.read:
            self.read.remove(key)

    def remove_write_permission(self, key: str) -> None:
        if key in self.write:
            self.write.remove(key)


class Permissions(BaseModel):
    """Permissions granted to a role, per resource. Only the key space exists in v2."""

    kv: Permission = Field(default_factory=Permission)


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_body(self) -> dict[str, Any]:
        """Serialise for a request body using wire names."""
        return self.model_dump(by_alias=True, exclude_none=True)


class Role(_WireModel):
    """An authorization role and the key-space permissions it grants."""

    name: str = Field(alias="role")
    permissions: Permissions = Field(default_factory=Permissions)

    def add_kv_read_permission(self, key: str) -> None:
        """Grant read access to *key* in the key space."""
        self.permissions.kv.add_read_permission(key)

    def add_kv_write_permission(self, key: str) -> None:
        """Grant write access to *key* in the key space."""
        self.permissions.kv.add_write_permission(key)

    @property
    def kv_read_permissions(self) -> list[str]:
        return list(self.permissions.kv.read)

    @property
    def kv_write_permissions(self) -> list[str]:
        return list(self.permissions.kv.write)


class RoleUpdate(_WireModel):
    """Changes to an existing role's permissions."""

    name: str = Field(alias="role")
    grants: Permissions = Field(default_factory=Permissions, alias="grant")
    revocations: Permissions = Field(default_factory=Permissions, alias="revoke")

    # Granting a key cancels a pending revocation of it, and vice versa.

    def grant_kv_read_permission(self, key: str) -> None:
        self.revocations.kv.remove_read_permission(key)
        self.grants.kv.add_read_permission(key)

    def grant_kv_write_permission(self, key: str) -> None:
        self.revocations.kv.remove_write_permission(key)
        self.grants.kv.add_write_permission(key)

    def revoke_kv_read_permission(self, key: str) -> None:
        self.grants.kv.remove_read_permission(key)
        self.revocations.kv.add_read_permission(key)

    def revoke_kv_write_permission(self, key: str) -> None:
        self.grants.kv.remove_write_permission(key)
        self.revocations.kv.add_write_permission(key)


class User(_WireModel):
    """An existing user and the roles granted to it.

    Older members list roles by name only; those are read as roles without
    permissions.
    """

    name: str = Field(alias="user")
    roles: list[Role] = Field(default_factory=list)

    @field_validator("roles", mode="before")
    @classmethod
    def _roles_by_name(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, list):
            return [{"role": item} if isinstance(item, str) else item for item in value]
        return value

    @property
    def role_names(self) -> list[str]:
        return [role.name for role in self.roles]


class NewUser(_WireModel):
    """Parameters for creating a user."""

    name: str = Field(alias="user")
    password: str
    roles: Optional[list[str]] = None

    def add_role(self, role: str) -> None:
        """Grant *role* to the user being created."""
        if self.roles is None:
            self.roles = []
        self.roles.append(role)


class UserUpdate(_WireModel):
    """Changes to an existing user: new password, granted and revoked roles."""

    name: str = Field(alias="user")
    password: Optional[str] = None
    grants: Optional[list[str]] = Field(default=None, alias="grant")
    revocations: Optional[list[str]] = Field(default=None, alias="revoke")

    def update_password(self, password: str) -> None:
        self.password = password

    def grant_role(self, role: str) -> None:
        if self.grants is None:
            self.grants = []
        self.grants.append(role)

    def revoke_role(self, role: str) -> None:
        if self.revocations is None:
            self.revocations = []
        self.revocations.append(role)


class AuthStatus(BaseModel):
    """Body of ``GET /v2/auth/enable``."""

    enabled: bool = Field(strict=True)


class UserList(BaseModel):
    """Body of ``GET /v2/auth/users``."""

    users: list[User] = Field(default_factory=list)

    @field_validator("users", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class RoleList(BaseModel):
    """Body of ``GET /v2/auth/roles``."""

    roles: list[Role] = Field(default_factory=list)

    @field_validator("roles", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value
