"""Blocking cluster client with sequential failover.

:class:`SyncClient` wraps :class:`httpx.Client` with the settings of a
:class:`~clusterkv.models.Profile` (timeout, SSL verification, basic auth)
and runs operations through :func:`~clusterkv.client.dispatcher.dispatch`,
trying the profile's endpoints one at a time.

See Also:
    :class:`~clusterkv.client.async_client.AsyncClient` for the concurrent,
    first-success-wins equivalent.
"""

from __future__ import annotations

from typing import Optional, TypeVar

import httpx

from clusterkv.client.dispatcher import dispatch
from clusterkv.client.operation import Operation, Response
from clusterkv.models import Profile

T = TypeVar("T")


def basic_auth_for(profile: Profile) -> Optional[httpx.BasicAuth]:
    """Resolve the profile's credentials into an :class:`httpx.BasicAuth`.

    Returns ``None`` when the profile has no ``auth`` section.

    Raises:
        CredentialError: If the password source cannot be resolved.
    """
    if profile.auth is None:
        return None
    from clusterkv.config import resolve_credential

    password = resolve_credential(profile.auth.source)
    return httpx.BasicAuth(profile.auth.username, password)


class SyncClient:
    """Synchronous client for a cluster described by a profile.

    Must be used as a context manager so the underlying connection pool is
    opened and closed.

    Args:
        profile: Cluster endpoints, credentials and request settings.
        transport: Optional transport override (used by tests to stand in
            for cluster members).

    Example::

        with SyncClient(profile) as client:
            response = client.execute(STATUS)
    """

    def __init__(
        self,
        profile: Profile,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._profile = profile
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    @property
    def endpoints(self) -> tuple[str, ...]:
        """The profile's endpoints, in dispatch order."""
        return tuple(self._profile.endpoints)

    def __enter__(self) -> SyncClient:
        config = self._profile.request
        self._client = httpx.Client(
            timeout=config.timeout,
            verify=config.verify_ssl,
            auth=basic_auth_for(self._profile),
            headers={"Accept": "application/json"},
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    def execute(self, operation: Operation[T]) -> Response[T]:
        """Run *operation* against the cluster, failing over member by member.

        Raises:
            DispatchError: If no member produced a known outcome.
        """
        assert self._client is not None, "Client not initialised -- use as context manager"
        return dispatch(self._client, self.endpoints, operation)
