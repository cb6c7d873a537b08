"""Exception hierarchy for clusterkv.

All exceptions inherit from :class:`ClusterKvError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`clusterkv.exit_codes`.
The CLI entry point in :func:`clusterkv.app.main` catches ``ClusterKvError``
and exits with that code.

Per-member failures raised by the prober derive from :class:`EndpointError`
and remember which endpoint produced them. When every member fails, the
dispatcher raises a single :class:`DispatchError` holding all of them in the
order the endpoints were tried.

Subclass hierarchy::

    ClusterKvError              (exit 1)
    +-- InvalidUsageError       (exit 2)
    +-- ConfigError             (exit 1)
    +-- CredentialError         (exit 3)
    +-- EndpointError           (exit 5)
    |   +-- TransportError      (exit 6)
    |   +-- SerializationError  (exit 7)
    |   +-- ApplicationError    (exit 5)
    |   +-- UnexpectedStatusError (exit 5)
    +-- DispatchError           (exit 5, or 6 when nothing was reachable)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Sequence

from clusterkv.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CLUSTER_ERROR,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_SERIALIZATION_ERROR,
)

if TYPE_CHECKING:
    from clusterkv.models import ApiError


class ClusterKvError(Exception):
    """Base exception for all clusterkv errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(ClusterKvError):
    """Raised for invalid CLI arguments or a dispatch with no endpoints."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(ClusterKvError):
    """Raised for configuration problems (missing profiles, invalid JSON)."""

    exit_code = EXIT_GENERIC_FAILURE


class CredentialError(ClusterKvError):
    """Raised when a credential source cannot be resolved."""

    exit_code = EXIT_AUTH_FAILURE


# --- Per-endpoint failures ---


class EndpointError(ClusterKvError):
    """A single member failed to produce a known outcome.

    The prober fills in :attr:`endpoint` before the error reaches the
    dispatcher.
    """

    exit_code = EXIT_CLUSTER_ERROR

    def __init__(self, message: str, endpoint: Optional[str] = None):
        super().__init__(message)
        self.endpoint = endpoint

    def __str__(self) -> str:
        message = super().__str__()
        if self.endpoint:
            return f"{self.endpoint}: {message}"
        return message


class TransportError(EndpointError):
    """The member could not be reached, or its URL could not be composed."""

    exit_code = EXIT_CONNECTION_ERROR


class SerializationError(EndpointError):
    """The response body matched neither the success shape nor the error payload."""

    exit_code = EXIT_SERIALIZATION_ERROR


class ApplicationError(EndpointError):
    """The member answered with a recognised application error payload.

    Args:
        api_error: The decoded error payload.
        status_code: HTTP status the payload arrived with.
        endpoint: The member that answered.
    """

    def __init__(
        self,
        api_error: ApiError,
        status_code: int,
        endpoint: Optional[str] = None,
    ):
        super().__init__(f"HTTP {status_code}: {api_error.message}", endpoint)
        self.api_error = api_error
        self.status_code = status_code


class UnexpectedStatusError(EndpointError):
    """The status code is outside the set the operation knows about."""

    def __init__(self, status_code: int, endpoint: Optional[str] = None):
        super().__init__(f"unexpected status {status_code}", endpoint)
        self.status_code = status_code


# --- Aggregate failure ---


class DispatchError(ClusterKvError):
    """Every endpoint was tried and none produced an outcome.

    ``errors`` holds exactly one entry per endpoint attempted, in the order
    the endpoints were supplied. Nothing is merged or dropped.
    """

    def __init__(self, errors: Sequence[EndpointError]):
        self.errors: tuple[EndpointError, ...] = tuple(errors)
        if self.errors and all(isinstance(e, TransportError) for e in self.errors):
            code = EXIT_CONNECTION_ERROR
        else:
            code = EXIT_CLUSTER_ERROR
        count = len(self.errors)
        noun = "endpoint" if count == 1 else "endpoints"
        details = "; ".join(str(e) for e in self.errors)
        super().__init__(f"All {count} {noun} failed: {details}", exit_code=code)
