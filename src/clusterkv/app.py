"""Typer application and CLI entry point for clusterkv.

The root callback sets up output and stores the cluster selection
(``--profile``, ``--endpoint``, ``--concurrent``) in the Typer context for
the sub-command groups. :func:`main` is the console-script entry point: it
maps :class:`~clusterkv.exceptions.ClusterKvError` to its exit code and
writes a crash log for anything else.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from clusterkv import __version__
from clusterkv.commands.auth import auth_app
from clusterkv.commands.config import config_app, profile_app
from clusterkv.commands.roles import role_app
from clusterkv.commands.users import user_app
from clusterkv.exit_codes import EXIT_GENERIC_FAILURE
from clusterkv.output import OutputFormat


app = typer.Typer(
    name="clusterkv",
    help="Failover client for the etcd v2 auth API.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.add_typer(auth_app, name="auth", help="Enable, disable or query the auth system.")
app.add_typer(user_app, name="user", help="Manage users.")
app.add_typer(role_app, name="role", help="Manage roles.")
app.add_typer(config_app, name="config", help="Global configuration.")
app.add_typer(profile_app, name="profile", help="Cluster profiles.")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"clusterkv {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    profile: Optional[str] = typer.Option(
        None, "--profile", "-p", help="Profile name to use."
    ),
    endpoints: Optional[list[str]] = typer.Option(
        None, "--endpoint", "-e", help="Member base URI; repeat for several (overrides the profile)."
    ),
    concurrent: bool = typer.Option(
        False, "--concurrent", help="Query all members at once; first answer wins."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Trace every endpoint attempt."),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmations."),
) -> None:
    """Set up output and remember the cluster selection for sub-commands."""
    from clusterkv.output import OutputManager, set_output

    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    else:
        fmt = _configured_format()

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    ctx.ensure_object(dict)
    ctx.obj["profile"] = profile
    ctx.obj["endpoints"] = list(endpoints or [])
    ctx.obj["concurrent"] = concurrent
    ctx.obj["force"] = force
    ctx.obj["verbose"] = verbose


def _configured_format() -> OutputFormat:
    """Return the stored ``output.format``, or ``AUTO`` when it is unset or unreadable."""
    from clusterkv.config import load_global_config
    from clusterkv.exceptions import ConfigError

    try:
        configured = load_global_config().output.format
    except ConfigError:
        return OutputFormat.AUTO
    try:
        return OutputFormat(configured.lower())
    except ValueError:
        return OutputFormat.AUTO


def _setup_signal_handlers() -> None:
    """Exit cleanly on Ctrl-C."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log() -> str:
    from clusterkv.config import get_config_dir

    logs_dir = get_config_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / f"crash-{datetime.now().strftime('%Y%m%d-%H%M%S')}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """Console-script entry point."""
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from clusterkv.exceptions import ClusterKvError
        from clusterkv.output import error

        if isinstance(exc, ClusterKvError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log()
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
