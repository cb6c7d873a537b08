"""Multi-endpoint failover.

Both dispatchers take the caller's endpoints exactly as given (no
reordering, deduplication or ranking) and one :class:`Operation`, and
return the first member's :class:`Response` that maps to a known outcome.
When no member does, they raise :class:`DispatchError` with one error per
endpoint, in endpoint order.

- :func:`dispatch` tries members one at a time and stops at the first
  success.
- :func:`dispatch_concurrently` starts every probe at once; the first to
  succeed wins and the rest are cancelled without being waited on.

There is no retry beyond one attempt per endpoint and no timeout besides the
HTTP client's own.

.. note::
   If two members would give different outcomes (a stale replica during a
   partition), whichever resolves first is returned. Answers are not
   cross-checked.
"""

from __future__ import annotations

import asyncio
from typing import MutableSet, Optional, Sequence, TypeVar

import httpx

from clusterkv.client.operation import Operation, Response
from clusterkv.client.prober import probe, probe_async
from clusterkv.exceptions import DispatchError, EndpointError, InvalidUsageError
from clusterkv.output import get_output

T = TypeVar("T")


def dispatch(
    client: httpx.Client,
    endpoints: Sequence[str],
    operation: Operation[T],
) -> Response[T]:
    """Try *operation* on each endpoint in turn until one succeeds.

    Args:
        client: Open HTTP client shared by all probes.
        endpoints: Non-empty, ordered member base URIs.
        operation: The call to make.

    Returns:
        The first successful :class:`Response`.

    Raises:
        InvalidUsageError: If *endpoints* is empty.
        DispatchError: If every endpoint failed.
    """
    _require_endpoints(endpoints)
    output = get_output()
    errors: list[EndpointError] = []

    for attempt, endpoint in enumerate(endpoints, start=1):
        try:
            response = probe(client, endpoint, operation)
        except EndpointError as exc:
            output.debug(
                f"{operation.name}: attempt {attempt}/{len(endpoints)} failed: {exc}"
            )
            errors.append(exc)
            continue
        output.debug(f"{operation.name}: answered by {endpoint}")
        return response

    raise DispatchError(errors)


async def dispatch_concurrently(
    client: httpx.AsyncClient,
    endpoints: Sequence[str],
    operation: Operation[T],
    abandoned: Optional[MutableSet[asyncio.Task]] = None,
) -> Response[T]:
    """Probe every endpoint at once; the first success wins.

    Probes that are still running when a winner is found are cancelled and
    added to *abandoned* (when given) until they finish unwinding, so their
    owner can reap any that are still running when it closes;
    the winner is returned without waiting for them. If several probes
    finish in the same step, the one with the lowest endpoint index wins.

    Args:
        client: Open async HTTP client shared by all probes.
        endpoints: Non-empty, ordered member base URIs.
        operation: The call to make.
        abandoned: Receives the cancelled losing tasks.

    Returns:
        The first successful :class:`Response`.

    Raises:
        InvalidUsageError: If *endpoints* is empty.
        DispatchError: If every endpoint failed; errors are ordered by
            endpoint, not by arrival.
    """
    _require_endpoints(endpoints)
    output = get_output()

    tasks = [
        asyncio.ensure_future(probe_async(client, endpoint, operation))
        for endpoint in endpoints
    ]
    slots: list[Optional[EndpointError]] = [None] * len(tasks)
    position = {task: index for index, task in enumerate(tasks)}
    pending: set[asyncio.Future] = set(tasks)

    try:
        while pending:
            done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
            winner: Optional[asyncio.Future] = None
            for task in sorted(done, key=position.__getitem__):
                index = position[task]
                exc = task.exception()
                if exc is None:
                    if winner is None:
                        winner = task
                    continue
                if not isinstance(exc, EndpointError):
                    raise exc
                output.debug(f"{operation.name}: endpoint {index + 1} failed: {exc}")
                slots[index] = exc
            if winner is not None:
                output.debug(f"{operation.name}: answered by {endpoints[position[winner]]}")
                return winner.result()
    finally:
        for task in pending:
            task.cancel()
            if abandoned is not None:
                abandoned.add(task)
                task.add_done_callback(abandoned.discard)

    raise DispatchError([error for error in slots if error is not None])


def _require_endpoints(endpoints: Sequence[str]) -> None:
    if not endpoints:
        raise InvalidUsageError("No endpoints to dispatch to")
