"""Single-endpoint probe: one request to one member, classified.

:func:`probe` and :func:`probe_async` send an operation's request to a
single member and return a :class:`~clusterkv.client.operation.Response` or
raise an :class:`~clusterkv.exceptions.EndpointError` subclass:

- :class:`~clusterkv.exceptions.TransportError` -- the URL could not be
  composed, or the request never got an answer (refused, timed out,
  protocol error).
- Whatever the operation's mapper raises -- unexpected status,
  undecodable body, application error payload.

Cluster metadata is read from the headers of every answer, but only reaches
the caller when the mapper accepts the status.
"""

from __future__ import annotations

from typing import Any, TypeVar

import httpx

from clusterkv.client.cluster_info import ClusterInfo
from clusterkv.client.operation import LogicalRequest, Operation, Response, build_url
from clusterkv.exceptions import EndpointError, TransportError
from clusterkv.output import get_output

T = TypeVar("T")


def probe(client: httpx.Client, endpoint: str, operation: Operation[T]) -> Response[T]:
    """Send *operation* to *endpoint* and classify the result.

    Args:
        client: Open HTTP client; its timeout bounds the probe.
        endpoint: Base URI of the member.
        operation: The call to make.

    Returns:
        The mapped outcome with the member's cluster metadata.

    Raises:
        EndpointError: Any classified failure, with ``endpoint`` set.
    """
    request = operation.build_request()
    url = compose_url(endpoint, request)
    get_output().debug(f"{operation.name}: {request.method} {url}")

    try:
        with client.stream(request.method, url, **_body_kwargs(request)) as response:
            status_code = response.status_code
            cluster_info = ClusterInfo.from_headers(response.headers)
            body = response.read() if operation.reads_body else b""
    except httpx.RequestError as exc:
        raise TransportError(f"request failed: {exc}", endpoint) from exc

    return _classify(endpoint, operation, status_code, cluster_info, body)


async def probe_async(
    client: httpx.AsyncClient, endpoint: str, operation: Operation[T]
) -> Response[T]:
    """Async counterpart of :func:`probe`."""
    request = operation.build_request()
    url = compose_url(endpoint, request)
    get_output().debug(f"{operation.name}: {request.method} {url}")

    try:
        async with client.stream(request.method, url, **_body_kwargs(request)) as response:
            status_code = response.status_code
            cluster_info = ClusterInfo.from_headers(response.headers)
            body = await response.aread() if operation.reads_body else b""
    except httpx.RequestError as exc:
        raise TransportError(f"request failed: {exc}", endpoint) from exc

    return _classify(endpoint, operation, status_code, cluster_info, body)


def compose_url(endpoint: str, request: LogicalRequest) -> httpx.URL:
    """Build and validate the absolute URL for *request* on *endpoint*.

    Raises:
        TransportError: If the result is not an absolute ``http``/``https``
            URL with a host. No request is made in that case.
    """
    raw = build_url(endpoint, request.path)
    try:
        url = httpx.URL(raw)
    except httpx.InvalidURL as exc:
        raise TransportError(f"malformed URL {raw!r}: {exc}", endpoint) from exc
    if url.scheme not in ("http", "https") or not url.host:
        raise TransportError(f"malformed URL {raw!r}", endpoint)
    return url


def _body_kwargs(request: LogicalRequest) -> dict[str, Any]:
    if request.json_body is not None:
        return {"json": request.json_body}
    if request.content is not None:
        return {"content": request.content}
    return {}


def _classify(
    endpoint: str,
    operation: Operation[T],
    status_code: int,
    cluster_info: ClusterInfo,
    body: bytes,
) -> Response[T]:
    try:
        data = operation.map_response(status_code, body)
    except EndpointError as exc:
        exc.endpoint = endpoint
        raise
    return Response(data=data, cluster_info=cluster_info, endpoint=endpoint)
