"""Tests for the user, role and permission records."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from clusterkv.auth.models import AuthStatus, NewUser, Role, RoleUpdate, User, UserList, UserUpdate


class TestUser:
    def test_parse_wire_format(self) -> None:
        user = User.model_validate(
            {
                "user": "alice",
                "roles": [{"role": "fleet", "permissions": {"kv": {"read": ["/fleet/"], "write": []}}}],
            }
        )
        assert user.name == "alice"
        assert user.role_names == ["fleet"]
        assert user.roles[0].kv_read_permissions == ["/fleet/"]

    def test_roles_listed_by_name(self) -> None:
        user = User.model_validate({"user": "bob", "roles": ["root", "guest"]})
        assert user.role_names == ["root", "guest"]
        assert user.roles[0].kv_write_permissions == []

    def test_null_roles(self) -> None:
        assert User.model_validate({"user": "bob", "roles": None}).roles == []

    def test_user_list_null(self) -> None:
        assert UserList.model_validate({"users": None}).users == []


class TestNewUser:
    def test_body_without_roles(self) -> None:
        assert NewUser(name="alice", password="pw").to_body() == {"user": "alice", "password": "pw"}

    def test_add_role(self) -> None:
        user = NewUser(name="alice", password="pw")
        user.add_role("reader")
        user.add_role("writer")
        assert user.to_body()["roles"] == ["reader", "writer"]


class TestUserUpdate:
    def test_empty_update(self) -> None:
        assert UserUpdate(name="alice").to_body() == {"user": "alice"}

    def test_full_update(self) -> None:
        update = UserUpdate(name="alice")
        update.update_password("new")
        update.grant_role("writer")
        update.revoke_role("guest")
        assert update.to_body() == {
            "user": "alice",
            "password": "new",
            "grant": ["writer"],
            "revoke": ["guest"],
        }


class TestRole:
    def test_new_role_body(self) -> None:
        role = Role(name="fleet")
        role.add_kv_read_permission("/fleet/*")
        role.add_kv_write_permission("/fleet/machines/*")
        assert role.to_body() == {
            "role": "fleet",
            "permissions": {"kv": {"read": ["/fleet/*"], "write": ["/fleet/machines/*"]}},
        }

    def test_accessors_return_copies(self) -> None:
        role = Role(name="fleet")
        role.kv_read_permissions.append("/x")
        assert role.kv_read_permissions == []


class TestRoleUpdate:
    def test_grant_and_revoke(self) -> None:
        update = RoleUpdate(name="fleet")
        update.grant_kv_read_permission("/a")
        update.revoke_kv_write_permission("/b")
        assert update.to_body() == {
            "role": "fleet",
            "grant": {"kv": {"read": ["/a"], "write": []}},
            "revoke": {"kv": {"read": [], "write": ["/b"]}},
        }

    def test_grant_cancels_revocation(self) -> None:
        update = RoleUpdate(name="fleet")
        update.revoke_kv_read_permission("/a")
        update.grant_kv_read_permission("/a")
        assert update.revocations.kv.read == []
        assert update.grants.kv.read == ["/a"]

    def test_revoking_unknown_key_is_harmless(self) -> None:
        update = RoleUpdate(name="fleet")
        update.revoke_kv_write_permission("/never-granted")
        assert update.grants.kv.write == []


class TestAuthStatus:
    def test_strict_boolean(self) -> None:
        assert AuthStatus.model_validate_json(b'{"enabled": true}').enabled is True
        with pytest.raises(ValidationError):
            AuthStatus.model_validate_json(b'{"enabled": "true"}')
        with pytest.raises(ValidationError):
            AuthStatus.model_validate_json(b"{}")
