"""Outcomes of enabling and disabling the auth system.

Each operation has a closed set of outcomes and a complete table from status
code to outcome. Codes outside the table are never outcomes: they raise
:class:`~clusterkv.exceptions.UnexpectedStatusError`.
"""

from __future__ import annotations

import enum

from clusterkv.client.operation import map_status


class EnableAuth(enum.Enum):
    """The result of attempting to enable the auth system."""

    ALREADY_ENABLED = "already_enabled"
    ENABLED = "enabled"
    ROOT_USER_REQUIRED = "root_user_required"

    @property
    def is_enabled(self) -> bool:
        """Whether auth is on after the call."""
        return self in (EnableAuth.ALREADY_ENABLED, EnableAuth.ENABLED)


class DisableAuth(enum.Enum):
    """The result of attempting to disable the auth system."""

    ALREADY_DISABLED = "already_disabled"
    DISABLED = "disabled"
    UNAUTHORIZED = "unauthorized"

    @property
    def is_disabled(self) -> bool:
        """Whether auth is off after the call."""
        return self in (DisableAuth.ALREADY_DISABLED, DisableAuth.DISABLED)


ENABLE_OUTCOMES: dict[int, EnableAuth] = {
    200: EnableAuth.ENABLED,
    400: EnableAuth.ROOT_USER_REQUIRED,
    409: EnableAuth.ALREADY_ENABLED,
}

DISABLE_OUTCOMES: dict[int, DisableAuth] = {
    200: DisableAuth.DISABLED,
    401: DisableAuth.UNAUTHORIZED,
    409: DisableAuth.ALREADY_DISABLED,
}


def map_enable_status(status_code: int) -> EnableAuth:
    """Map a ``PUT /v2/auth/enable`` status code to its outcome."""
    return map_status(ENABLE_OUTCOMES, status_code)


def map_disable_status(status_code: int) -> DisableAuth:
    """Map a ``DELETE /v2/auth/enable`` status code to its outcome."""
    return map_status(DISABLE_OUTCOMES, status_code)
