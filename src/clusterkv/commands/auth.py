"""Auth commands -- turn the cluster's auth system on and off.

Provides ``clusterkv auth enable``, ``disable`` and ``status``. Each prints
the outcome to stdout and which member answered to stderr. A refusal
(no root user, not authorised) exits with
:data:`~clusterkv.exit_codes.EXIT_AUTH_FAILURE`.
"""

from __future__ import annotations

import typer

from clusterkv.auth import DisableAuth, EnableAuth
from clusterkv.auth import api
from clusterkv.commands.common import run_operation
from clusterkv.exit_codes import EXIT_AUTH_FAILURE
from clusterkv.output import error, format_response


auth_app = typer.Typer(no_args_is_help=True)


@auth_app.command("enable")
def auth_enable(ctx: typer.Context) -> None:
    """Enable the auth system.

    Example::

        clusterkv auth enable
    """
    outcome: EnableAuth = run_operation(ctx, api.enable).data
    format_response({"outcome": outcome.value, "enabled": outcome.is_enabled})
    if outcome is EnableAuth.ROOT_USER_REQUIRED:
        error("Auth cannot be enabled until a root user exists.")
        raise typer.Exit(code=EXIT_AUTH_FAILURE)


@auth_app.command("disable")
def auth_disable(ctx: typer.Context) -> None:
    """Disable the auth system (root credentials required).

    Example::

        clusterkv -p prod auth disable
    """
    outcome: DisableAuth = run_operation(ctx, api.disable).data
    format_response({"outcome": outcome.value, "disabled": outcome.is_disabled})
    if outcome is DisableAuth.UNAUTHORIZED:
        error("Only the root user can disable auth.")
        raise typer.Exit(code=EXIT_AUTH_FAILURE)


@auth_app.command("status")
def auth_status(ctx: typer.Context) -> None:
    """Show whether the auth system is enabled."""
    enabled: bool = run_operation(ctx, api.status).data
    format_response({"enabled": enabled})
