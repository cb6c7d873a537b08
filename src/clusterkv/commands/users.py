"""User commands -- list, inspect, create, update and delete users."""

from __future__ import annotations

from typing import Optional

import typer

from clusterkv.auth import NewUser, User, UserUpdate
from clusterkv.auth import api
from clusterkv.commands.common import context_options, run_operation
from clusterkv.config import resolve_credential
from clusterkv.exceptions import CredentialError
from clusterkv.output import error, format_response, info, print_table, success


user_app = typer.Typer(no_args_is_help=True)


def _user_record(user: User) -> dict:
    return user.model_dump(by_alias=True)


def _password(source: str) -> str:
    try:
        return resolve_credential(source)
    except CredentialError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


@user_app.command("list")
def user_list(ctx: typer.Context) -> None:
    """List all users and their roles."""
    users: list[User] = run_operation(ctx, api.list_users).data
    rows = [[user.name, ", ".join(user.role_names)] for user in users]
    print_table(["User", "Roles"], rows, title="Users")


@user_app.command("get")
def user_get(
    ctx: typer.Context,
    name: str = typer.Argument(help="User name."),
) -> None:
    """Show one user."""
    user: User = run_operation(ctx, lambda client: api.get_user(client, name)).data
    format_response(_user_record(user))


@user_app.command("add")
def user_add(
    ctx: typer.Context,
    name: str = typer.Argument(help="User name."),
    password_source: str = typer.Option(
        "prompt", "--password-source", help="env:VAR, file:/path or prompt."
    ),
    roles: Optional[list[str]] = typer.Option(
        None, "--role", "-r", help="Role to grant (repeatable)."
    ),
) -> None:
    """Create a user.

    Example::

        clusterkv user add alice --password-source env:ALICE_PW --role reader
    """
    new_user = NewUser(name=name, password=_password(password_source))
    for role in roles or []:
        new_user.add_role(role)
    user: User = run_operation(ctx, lambda client: api.create_user(client, new_user)).data
    success(f"Created user '{user.name}'")
    format_response(_user_record(user))


@user_app.command("update")
def user_update(
    ctx: typer.Context,
    name: str = typer.Argument(help="User name."),
    password_source: Optional[str] = typer.Option(
        None, "--password-source", help="New password: env:VAR, file:/path or prompt."
    ),
    grants: Optional[list[str]] = typer.Option(
        None, "--grant", help="Role to grant (repeatable)."
    ),
    revocations: Optional[list[str]] = typer.Option(
        None, "--revoke", help="Role to revoke (repeatable)."
    ),
) -> None:
    """Change a user's password or roles."""
    update = UserUpdate(name=name)
    if password_source is not None:
        update.update_password(_password(password_source))
    for role in grants or []:
        update.grant_role(role)
    for role in revocations or []:
        update.revoke_role(role)
    if update.password is None and update.grants is None and update.revocations is None:
        error("Nothing to update: give --password-source, --grant or --revoke.")
        raise typer.Exit(code=2)
    user: User = run_operation(ctx, lambda client: api.update_user(client, update)).data
    success(f"Updated user '{user.name}'")
    format_response(_user_record(user))


@user_app.command("remove")
def user_remove(
    ctx: typer.Context,
    name: str = typer.Argument(help="User name."),
) -> None:
    """Delete a user. Asks for confirmation unless ``--force`` is active."""
    if not context_options(ctx).get("force", False):
        if not typer.confirm(f"Delete user '{name}'?"):
            info("Cancelled.")
            raise typer.Exit()
    run_operation(ctx, lambda client: api.delete_user(client, name))
    success(f"Deleted user '{name}'")
