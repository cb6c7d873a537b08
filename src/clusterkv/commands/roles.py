"""Role commands -- list, inspect, create, update and delete roles."""

from __future__ import annotations

from typing import Optional

import typer

from clusterkv.auth import Role, RoleUpdate
from clusterkv.auth import api
from clusterkv.commands.common import context_options, run_operation
from clusterkv.output import error, format_response, info, print_table, success


role_app = typer.Typer(no_args_is_help=True)


def _role_record(role: Role) -> dict:
    return role.model_dump(by_alias=True)


@role_app.command("list")
def role_list(ctx: typer.Context) -> None:
    """List all roles and their key-space permissions."""
    roles: list[Role] = run_operation(ctx, api.list_roles).data
    rows = [
        [role.name, ", ".join(role.kv_read_permissions), ", ".join(role.kv_write_permissions)]
        for role in roles
    ]
    print_table(["Role", "Read", "Write"], rows, title="Roles")


@role_app.command("get")
def role_get(
    ctx: typer.Context,
    name: str = typer.Argument(help="Role name."),
) -> None:
    """Show one role."""
    role: Role = run_operation(ctx, lambda client: api.get_role(client, name)).data
    format_response(_role_record(role))


@role_app.command("add")
def role_add(
    ctx: typer.Context,
    name: str = typer.Argument(help="Role name."),
    read: Optional[list[str]] = typer.Option(
        None, "--read", help="Key the role may read (repeatable)."
    ),
    write: Optional[list[str]] = typer.Option(
        None, "--write", help="Key the role may write (repeatable)."
    ),
) -> None:
    """Create a role.

    Example::

        clusterkv role add fleet --read '/fleet/*' --write '/fleet/*'
    """
    new_role = Role(name=name)
    for key in read or []:
        new_role.add_kv_read_permission(key)
    for key in write or []:
        new_role.add_kv_write_permission(key)
    role: Role = run_operation(ctx, lambda client: api.create_role(client, new_role)).data
    success(f"Created role '{role.name}'")
    format_response(_role_record(role))


@role_app.command("update")
def role_update(
    ctx: typer.Context,
    name: str = typer.Argument(help="Role name."),
    grant_read: Optional[list[str]] = typer.Option(None, "--grant-read"),
    grant_write: Optional[list[str]] = typer.Option(None, "--grant-write"),
    revoke_read: Optional[list[str]] = typer.Option(None, "--revoke-read"),
    revoke_write: Optional[list[str]] = typer.Option(None, "--revoke-write"),
) -> None:
    """Grant or revoke key-space permissions on a role."""
    if not (grant_read or grant_write or revoke_read or revoke_write):
        error("Nothing to update: give at least one --grant-* or --revoke-* option.")
        raise typer.Exit(code=2)
    update = RoleUpdate(name=name)
    for key in grant_read or []:
        update.grant_kv_read_permission(key)
    for key in grant_write or []:
        update.grant_kv_write_permission(key)
    for key in revoke_read or []:
        update.revoke_kv_read_permission(key)
    for key in revoke_write or []:
        update.revoke_kv_write_permission(key)
    role: Role = run_operation(ctx, lambda client: api.update_role(client, update)).data
    success(f"Updated role '{role.name}'")
    format_response(_role_record(role))


@role_app.command("remove")
def role_remove(
    ctx: typer.Context,
    name: str = typer.Argument(help="Role name."),
) -> None:
    """Delete a role. Asks for confirmation unless ``--force`` is active."""
    if not context_options(ctx).get("force", False):
        if not typer.confirm(f"Delete role '{name}'?"):
            info("Cancelled.")
            raise typer.Exit()
    run_operation(ctx, lambda client: api.delete_role(client, name))
    success(f"Deleted role '{name}'")
