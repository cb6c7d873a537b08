"""Logical requests, operations and the status-to-outcome mapping.

An :class:`Operation` is everything the dispatcher needs to know about one
API call, and nothing about where it is sent:

- :meth:`Operation.build_request` describes the call (method, path suffix
  under ``v2/auth``, body).
- :meth:`Operation.map_response` turns a member's status code (and body,
  when :attr:`Operation.reads_body` is set) into a typed outcome, or raises
  an :class:`~clusterkv.exceptions.EndpointError`.

Two shapes cover the whole auth API:

- :class:`StatusOperation` -- the outcome is decided by the status code
  alone via :func:`map_status`; the body is never read.
- :class:`JsonOperation` -- success codes carry a JSON document that is
  parsed into a typed value; other codes carry an :class:`ApiError`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, Mapping, Optional, TypeVar

from pydantic import ValidationError

from clusterkv.client.cluster_info import ClusterInfo
from clusterkv.exceptions import (
    ApplicationError,
    SerializationError,
    UnexpectedStatusError,
)
from clusterkv.models import ApiError

T = TypeVar("T")

API_ROOT = "v2/auth"


@dataclass(frozen=True)
class LogicalRequest:
    """One endpoint-agnostic API call.

    Attributes:
        method: HTTP method.
        path: Suffix appended to ``<endpoint>/v2/auth`` (e.g. ``/enable``).
        json_body: JSON-serialisable body, if any.
        content: Raw string body, used when ``json_body`` is ``None``.
    """

    method: str
    path: str
    json_body: Any = None
    content: Optional[str] = None


@dataclass(frozen=True)
class Response(Generic[T]):
    """A successful outcome together with the metadata of the member that produced it.

    Attributes:
        data: The operation's typed outcome.
        cluster_info: Metadata from the answering member's headers.
        endpoint: Base URI of the answering member.
    """

    data: T
    cluster_info: ClusterInfo
    endpoint: str


def build_url(endpoint: str, path: str) -> str:
    """Join *endpoint*, the API root and *path*.

    Exactly one slash separates the endpoint from ``v2/auth``; an endpoint
    that already ends with ``/`` is used as-is.

    Example::

        >>> build_url("http://10.0.0.1:2379", "/enable")
        'http://10.0.0.1:2379/v2/auth/enable'
    """
    separator = "" if endpoint.endswith("/") else "/"
    return f"{endpoint}{separator}{API_ROOT}{path}"


def map_status(outcomes: Mapping[int, T], status_code: int) -> T:
    """Look up *status_code* in an operation's outcome table.

    Args:
        outcomes: The operation's complete table of expected codes.
        status_code: Status code received from the member.

    Returns:
        The outcome registered for *status_code*.

    Raises:
        UnexpectedStatusError: If the code is not in the table.
    """
    try:
        return outcomes[status_code]
    except KeyError:
        raise UnexpectedStatusError(status_code) from None


class Operation(ABC, Generic[T]):
    """One logical API call: how to build it and how to read the answer."""

    #: Short name used in debug output.
    name: str = "operation"

    #: Whether the prober must buffer the body before :meth:`map_response`.
    reads_body: bool = False

    @abstractmethod
    def build_request(self) -> LogicalRequest:
        """Return the request to send to every candidate endpoint."""

    @abstractmethod
    def map_response(self, status_code: int, body: bytes) -> T:
        """Turn a member's answer into an outcome.

        *body* is empty unless :attr:`reads_body` is set.

        Raises:
            EndpointError: If the answer is not a known outcome.
        """


class StatusOperation(Operation[T]):
    """An operation whose outcome depends only on the status code.

    Args:
        name: Short name for diagnostics.
        method: HTTP method.
        path: Path suffix under the API root.
        outcomes: Complete table of expected status codes.
        content: Optional raw body.
    """

    reads_body = False

    def __init__(
        self,
        name: str,
        method: str,
        path: str,
        outcomes: Mapping[int, T],
        content: Optional[str] = None,
    ) -> None:
        self.name = name
        self._request = LogicalRequest(method=method, path=path, content=content)
        self._outcomes = dict(outcomes)

    @property
    def outcomes(self) -> Mapping[int, T]:
        return dict(self._outcomes)

    def build_request(self) -> LogicalRequest:
        return self._request

    def map_response(self, status_code: int, body: bytes) -> T:
        return map_status(self._outcomes, status_code)


class JsonOperation(Operation[T]):
    """An operation that parses a JSON body on success.

    On a status in *success_codes* the body goes through *parse*; any
    exception from *parse* that signals bad input (pydantic
    ``ValidationError``, ``ValueError``, ``KeyError``, ``TypeError``)
    becomes a :class:`SerializationError`. On any other status the body is
    decoded as an :class:`ApiError` and raised as an
    :class:`ApplicationError`, or as a :class:`SerializationError` when it
    is not one.

    Args:
        name: Short name for diagnostics.
        method: HTTP method.
        path: Path suffix under the API root.
        parse: Converts the raw success body into the outcome.
        success_codes: Status codes that carry a success body.
        json_body: Optional JSON request body.
    """

    reads_body = True

    def __init__(
        self,
        name: str,
        method: str,
        path: str,
        parse: Callable[[bytes], T],
        success_codes: Iterable[int] = (200,),
        json_body: Any = None,
    ) -> None:
        self.name = name
        self._request = LogicalRequest(method=method, path=path, json_body=json_body)
        self._parse = parse
        self._success_codes = frozenset(success_codes)

    def build_request(self) -> LogicalRequest:
        return self._request

    def map_response(self, status_code: int, body: bytes) -> T:
        if status_code in self._success_codes:
            try:
                return self._parse(body)
            except (ValidationError, ValueError, KeyError, TypeError) as exc:
                raise SerializationError(
                    f"cannot decode {self.name} response: {_first_line(exc)}"
                ) from exc

        try:
            api_error = ApiError.model_validate_json(body)
        except ValidationError as exc:
            raise SerializationError(
                f"cannot decode error response (HTTP {status_code}): {_first_line(exc)}"
            ) from exc
        raise ApplicationError(api_error, status_code)


def _first_line(exc: Exception) -> str:
    text = str(exc).strip()
    return text.splitlines()[0] if text else type(exc).__name__
