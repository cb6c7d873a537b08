"""Configuration storage and resolution.

* **Directory layout** -- ``$XDG_CONFIG_HOME/clusterkv/`` (default
  ``~/.config/clusterkv/``) on Linux/BSD, ``~/.clusterkv/`` elsewhere.
* **Global config** -- ``config.json``, a :class:`~clusterkv.models.GlobalConfig`.
* **Profiles** -- ``profiles/<name>.json``, one
  :class:`~clusterkv.models.Profile` per cluster.
* **Resolution** -- :func:`resolve_profile` picks the active profile and
  endpoint list from CLI flags, environment and stored config.
* **Credentials** -- :func:`resolve_credential` reads passwords from the
  environment, a file, or an interactive prompt.

Writes go to a temporary file in the target directory and are renamed into
place, so a crash never leaves a half-written file.
"""

from __future__ import annotations

import getpass
import json
import os
import platform
import sys
import tempfile
from pathlib import Path
from typing import Optional, Sequence

from pydantic import ValidationError

from clusterkv.exceptions import ConfigError, CredentialError
from clusterkv.models import GlobalConfig, Profile

_APP_NAME = "clusterkv"
_CONFIG_FILENAME = "config.json"

ENV_PROFILE = "CLUSTERKV_PROFILE"
ENV_ENDPOINTS = "CLUSTERKV_ENDPOINTS"

ADHOC_PROFILE_NAME = "adhoc"


# --- Paths ---


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary."""
    system = platform.system()
    if system == "Linux" or system.endswith("BSD"):
        base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
        path = Path(base) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_profiles_dir() -> Path:
    """Return ``<config_dir>/profiles/``, creating it if necessary."""
    path = get_config_dir() / "profiles"
    path.mkdir(parents=True, exist_ok=True)
    return path


def _atomic_write(path: Path, data: str) -> None:
    """Write *data* to *path* via a sibling temp file and :func:`os.replace`."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


def _read_json(path: Path, what: str) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Invalid {what} at {path}: {exc}") from exc


# --- Global config ---


def load_global_config() -> GlobalConfig:
    """Load the global configuration, or defaults if none is stored.

    Raises:
        ConfigError: If the file exists but is not valid.
    """
    path = get_config_dir() / _CONFIG_FILENAME
    if not path.is_file():
        return GlobalConfig()
    data = _read_json(path, "global config")
    try:
        return GlobalConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration."""
    data = config.model_dump(mode="json")
    _atomic_write(get_config_dir() / _CONFIG_FILENAME, json.dumps(data, indent=2) + "\n")


# --- Profiles ---


def _profile_path(name: str) -> Path:
    return get_profiles_dir() / f"{name}.json"


def list_profiles() -> list[str]:
    """Return the names of all stored profiles, sorted."""
    return sorted(p.stem for p in get_profiles_dir().glob("*.json") if p.is_file())


def profile_exists(name: str) -> bool:
    return _profile_path(name).is_file()


def load_profile(name: str) -> Profile:
    """Load a stored profile.

    Raises:
        ConfigError: If it does not exist or is not valid.
    """
    path = _profile_path(name)
    if not path.is_file():
        raise ConfigError(f"Profile '{name}' not found at {path}")
    data = _read_json(path, f"profile '{name}'")
    try:
        return Profile.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid profile '{name}' at {path}: {exc}") from exc


def save_profile(profile: Profile) -> None:
    """Persist *profile* under its own name."""
    data = profile.model_dump(mode="json")
    _atomic_write(_profile_path(profile.name), json.dumps(data, indent=2) + "\n")


def delete_profile(name: str) -> None:
    """Delete a stored profile.

    Raises:
        ConfigError: If it does not exist.
    """
    path = _profile_path(name)
    if not path.is_file():
        raise ConfigError(f"Profile '{name}' not found at {path}")
    path.unlink()


# --- Resolution ---


def parse_endpoints(raw: str) -> list[str]:
    """Split a comma-separated endpoint list, keeping order and dropping blanks."""
    return [item.strip() for item in raw.split(",") if item.strip()]


def resolve_profile(
    cli_profile: Optional[str] = None,
    cli_endpoints: Optional[Sequence[str]] = None,
) -> Profile:
    """Work out which cluster to talk to.

    Profile name precedence (high to low): ``cli_profile``,
    ``$CLUSTERKV_PROFILE``, the global ``default_profile``, then the only
    stored profile when ``auto_select_single_profile`` is on.

    Endpoint precedence: ``cli_endpoints``, ``$CLUSTERKV_ENDPOINTS``, the
    profile's own list. Endpoints given without any profile produce an
    ad-hoc profile with default settings.

    Raises:
        ConfigError: If no profile and no endpoints can be found, or the
            chosen profile cannot be loaded.
    """
    global_cfg = load_global_config()

    name: Optional[str] = global_cfg.default_profile
    env_profile = os.environ.get(ENV_PROFILE)
    if env_profile:
        name = env_profile
    if cli_profile is not None:
        name = cli_profile
    if name is None and global_cfg.auto_select_single_profile:
        profiles = list_profiles()
        if len(profiles) == 1:
            name = profiles[0]

    endpoints: Optional[list[str]] = None
    env_endpoints = os.environ.get(ENV_ENDPOINTS)
    if env_endpoints:
        endpoints = parse_endpoints(env_endpoints)
    if cli_endpoints:
        endpoints = list(cli_endpoints)

    if name is None:
        if not endpoints:
            raise ConfigError(
                "No cluster configured: pass --endpoint, set "
                f"{ENV_ENDPOINTS}, or create a profile with 'clusterkv profile add'"
            )
        return _build_profile(ADHOC_PROFILE_NAME, endpoints)

    profile = load_profile(name)
    if endpoints:
        return _build_profile(name, endpoints, base=profile)
    return profile


def _build_profile(name: str, endpoints: list[str], base: Optional[Profile] = None) -> Profile:
    data = base.model_dump() if base is not None else {}
    try:
        return Profile.model_validate({**data, "name": name, "endpoints": endpoints})
    except ValidationError as exc:
        raise ConfigError(f"Invalid endpoints: {exc}") from exc


# --- Credentials ---


def resolve_credential(source: str) -> str:
    """Resolve a password from its source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``os.environ["VAR_NAME"]``
        - ``"file:/path/to/file"`` -- reads the file, stripped of whitespace
        - ``"prompt"`` -- asks interactively (requires a TTY)

    Raises:
        CredentialError: If the source cannot be resolved.
    """
    if source.startswith("env:"):
        var_name = source[4:]
        value = os.environ.get(var_name)
        if value is None:
            raise CredentialError(f"Environment variable '{var_name}' is not set")
        return value

    if source.startswith("file:"):
        path = Path(source[5:]).expanduser()
        if not path.is_file():
            raise CredentialError(f"Credential file not found: {path}")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise CredentialError(f"Cannot read credential file {path}: {exc}") from exc

    if source == "prompt":
        if not sys.stdin.isatty():
            raise CredentialError("Cannot prompt for a password: stdin is not a TTY")
        return getpass.getpass("Password: ")

    raise CredentialError(f"Unknown credential source format: {source}")
