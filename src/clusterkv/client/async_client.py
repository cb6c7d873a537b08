"""Asynchronous cluster client with concurrent, first-success-wins failover.

:class:`AsyncClient` mirrors :class:`~clusterkv.client.sync_client.SyncClient`
but runs operations through
:func:`~clusterkv.client.dispatcher.dispatch_concurrently`: every member is
probed at once and the first known outcome is returned immediately. Probes
that lost the race are cancelled and reaped when the client closes.
"""

from __future__ import annotations

import asyncio
from typing import Optional, TypeVar

import httpx

from clusterkv.client.dispatcher import dispatch_concurrently
from clusterkv.client.operation import Operation, Response
from clusterkv.client.sync_client import basic_auth_for
from clusterkv.models import Profile

T = TypeVar("T")


class AsyncClient:
    """Non-blocking client for a cluster described by a profile.

    Must be used as an async context manager.

    Args:
        profile: Cluster endpoints, credentials and request settings.
        transport: Optional transport override (used by tests).

    Example::

        async with AsyncClient(profile) as client:
            response = await client.execute(STATUS)
    """

    def __init__(
        self,
        profile: Profile,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._profile = profile
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._abandoned: set[asyncio.Task] = set()

    @property
    def endpoints(self) -> tuple[str, ...]:
        """The profile's endpoints, in dispatch order."""
        return tuple(self._profile.endpoints)

    async def __aenter__(self) -> AsyncClient:
        config = self._profile.request
        self._client = httpx.AsyncClient(
            timeout=config.timeout,
            verify=config.verify_ssl,
            auth=basic_auth_for(self._profile),
            headers={"Accept": "application/json"},
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.reap()
        if self._client:
            await self._client.aclose()
            self._client = None

    async def execute(self, operation: Operation[T]) -> Response[T]:
        """Run *operation* on every member at once and return the first success.

        Raises:
            DispatchError: If no member produced a known outcome.
        """
        assert self._client is not None, "Client not initialised -- use as async context manager"
        return await dispatch_concurrently(
            self._client, self.endpoints, operation, abandoned=self._abandoned
        )

    async def reap(self) -> None:
        """Wait for cancelled losing probes to finish unwinding."""
        if not self._abandoned:
            return
        tasks = list(self._abandoned)
        self._abandoned.clear()
        await asyncio.gather(*tasks, return_exceptions=True)
