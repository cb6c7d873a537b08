"""Config and profile commands.

``clusterkv config show|set`` reads and edits the global configuration;
``clusterkv profile add|list|show|remove`` manages the per-cluster profiles
(endpoint lists, credentials, request settings).
"""

from __future__ import annotations

from typing import Optional

import typer
from pydantic import ValidationError

from clusterkv.exceptions import ClusterKvError
from clusterkv.output import error, format_response, info, print_table, success


config_app = typer.Typer(no_args_is_help=True)
profile_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the global configuration."""
    from clusterkv.config import get_config_dir, load_global_config

    config = load_global_config()
    info(f"Config directory: {get_config_dir()}")
    format_response(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Config key (dot notation, e.g. 'output.format')."),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a global configuration value.

    Example::

        clusterkv config set default_profile prod
        clusterkv config set output.format json
    """
    from clusterkv.config import load_global_config, save_global_config
    from clusterkv.models import GlobalConfig

    data = load_global_config().model_dump(mode="json")

    keys = key.split(".")
    target = data
    for part in keys[:-1]:
        if not isinstance(target.get(part), dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=2)
        target = target[part]

    final_key = keys[-1]
    if final_key not in target:
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    current = target[final_key]
    if isinstance(current, bool):
        target[final_key] = value.lower() in ("true", "1", "yes")
    elif current is None and value.lower() in ("", "none", "null"):
        target[final_key] = None
    else:
        target[final_key] = value

    try:
        new_config = GlobalConfig.model_validate(data)
    except ValidationError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_global_config(new_config)
    success(f"Set {key} = {target[final_key]}")


@profile_app.command("add")
def profile_add(
    name: str = typer.Argument(help="Profile name."),
    endpoints: list[str] = typer.Option(
        ..., "--endpoint", "-e", help="Member base URI (repeatable, order is kept)."
    ),
    username: Optional[str] = typer.Option(
        None, "--username", "-u", help="User for basic auth."
    ),
    password_source: Optional[str] = typer.Option(
        None, "--password-source", help="Password source: env:VAR, file:/path or prompt."
    ),
    timeout: float = typer.Option(30.0, "--timeout", help="Request timeout in seconds."),
    no_verify: bool = typer.Option(False, "--no-verify", help="Skip TLS verification."),
    concurrent: bool = typer.Option(
        False, "--concurrent", help="Query all members at once; first answer wins."
    ),
    set_default: bool = typer.Option(False, "--default", help="Make this the default profile."),
) -> None:
    """Create or replace a cluster profile.

    Example::

        clusterkv profile add prod -e http://10.0.0.1:2379 -e http://10.0.0.2:2379 \\
            --username root --password-source env:ETCD_ROOT_PASSWORD --default
    """
    from clusterkv.config import load_global_config, save_global_config, save_profile
    from clusterkv.models import AuthConfig, DispatchStrategy, Profile, RequestConfig

    auth = None
    if password_source is not None:
        auth = AuthConfig(username=username or "root", source=password_source)
    elif username is not None:
        error("--username needs --password-source.")
        raise typer.Exit(code=2)

    try:
        profile = Profile(
            name=name,
            endpoints=endpoints,
            auth=auth,
            request=RequestConfig(
                timeout=timeout,
                verify_ssl=not no_verify,
                strategy=DispatchStrategy.CONCURRENT if concurrent else DispatchStrategy.SEQUENTIAL,
            ),
        )
    except ValidationError as exc:
        error(f"Invalid profile: {exc}")
        raise typer.Exit(code=2) from None

    save_profile(profile)
    if set_default:
        config = load_global_config()
        config.default_profile = name
        save_global_config(config)
    success(f"Saved profile '{name}' ({len(profile.endpoints)} endpoints)")


@profile_app.command("list")
def profile_list() -> None:
    """List stored profiles."""
    from clusterkv.config import list_profiles, load_global_config, load_profile

    default = load_global_config().default_profile
    rows = []
    for name in list_profiles():
        profile = load_profile(name)
        marker = "*" if name == default else ""
        rows.append([name, marker, ", ".join(profile.endpoints), profile.request.strategy.value])
    print_table(["Profile", "Default", "Endpoints", "Strategy"], rows, title="Profiles")


@profile_app.command("show")
def profile_show(name: str = typer.Argument(help="Profile name.")) -> None:
    """Show one profile."""
    from clusterkv.config import load_profile

    try:
        profile = load_profile(name)
    except ClusterKvError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    format_response(profile.model_dump(mode="json"))


@profile_app.command("remove")
def profile_remove(name: str = typer.Argument(help="Profile name.")) -> None:
    """Delete a profile."""
    from clusterkv.config import delete_profile

    try:
        delete_profile(name)
    except ClusterKvError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    success(f"Deleted profile '{name}'")
