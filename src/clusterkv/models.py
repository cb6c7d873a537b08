"""Pydantic models shared across clusterkv modules.

**Configuration models** -- serialised as JSON in the user's config
directory: :class:`AuthConfig`, :class:`RequestConfig`,
:class:`OutputConfig`, :class:`GlobalConfig` and :class:`Profile`.

**Wire models** -- decoded from member responses and shared by every
operation: :class:`ApiError`.

The etcd auth records (users, roles, permissions) live in
:mod:`clusterkv.auth.models`; cluster metadata lives in
:mod:`clusterkv.client.cluster_info`.
"""

from __future__ import annotations

import enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# --- Auth Config ---


class AuthConfig(BaseModel):
    """HTTP basic credentials sent to every member.

    ``source`` is a credential descriptor understood by
    :func:`clusterkv.config.resolve_credential` (``env:VAR``,
    ``file:/path`` or ``prompt``) and resolves to the password.

    Example::

        AuthConfig(username="root", source="env:ETCD_ROOT_PASSWORD")
    """

    username: str = Field(default="root", description="User name for basic auth")
    source: str = Field(description="Password source (env:VAR, file:/path, prompt)")


# --- Request Config ---


class DispatchStrategy(str, enum.Enum):
    """How an operation fans out across the configured endpoints."""

    SEQUENTIAL = "sequential"
    CONCURRENT = "concurrent"


class RequestConfig(BaseModel):
    """HTTP request settings for a profile."""

    timeout: float = Field(default=30.0, description="Per-request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    strategy: DispatchStrategy = Field(
        default=DispatchStrategy.SEQUENTIAL,
        description="Try members one at a time, or all at once with first success winning",
    )


# --- Output / global config ---


class OutputConfig(BaseModel):
    """Output formatting defaults."""

    format: str = Field(default="auto", description="auto, json, plain or rich")


class GlobalConfig(BaseModel):
    """User-level settings stored in ``<config_dir>/config.json``."""

    default_profile: Optional[str] = Field(
        default=None, description="Profile used when none is given"
    )
    auto_select_single_profile: bool = Field(
        default=True, description="Use the only profile when exactly one exists"
    )
    output: OutputConfig = Field(default_factory=OutputConfig)


class Profile(BaseModel):
    """A named cluster: its member endpoints, credentials and request settings.

    Endpoint order is preserved exactly as written; the dispatcher tries
    members in this order.
    """

    name: str = Field(description="Profile name (also the file name)")
    endpoints: list[str] = Field(description="Base URIs of the cluster members")
    auth: Optional[AuthConfig] = None
    request: RequestConfig = Field(default_factory=RequestConfig)

    @field_validator("endpoints")
    @classmethod
    def _require_endpoints(cls, value: list[str]) -> list[str]:
        endpoints = [e.strip() for e in value if e.strip()]
        if not endpoints:
            raise ValueError("a profile needs at least one endpoint")
        return endpoints


# --- Wire models ---


class ApiError(BaseModel):
    """Application error payload returned by a member on a failed request.

    The v2 auth endpoints usually send only ``message``; the key-space
    endpoints add ``errorCode``, ``cause`` and ``index``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    message: str
    error_code: Optional[int] = Field(default=None, alias="errorCode")
    cause: Optional[str] = None
    index: Optional[int] = None
