"""Failover client core.

- :mod:`~clusterkv.client.operation` -- logical requests, operations and
  the status-to-outcome mapping.
- :mod:`~clusterkv.client.cluster_info` -- metadata from response headers.
- :mod:`~clusterkv.client.prober` -- one request to one member, classified.
- :mod:`~clusterkv.client.dispatcher` -- sequential and concurrent failover.
- :class:`SyncClient` / :class:`AsyncClient` -- profile-aware wrappers
  around :mod:`httpx`.

Example::

    from clusterkv.client import SyncClient

    with SyncClient(profile) as client:
        response = client.execute(operation)
"""

from clusterkv.client.async_client import AsyncClient
from clusterkv.client.cluster_info import ClusterInfo
from clusterkv.client.operation import (
    JsonOperation,
    LogicalRequest,
    Operation,
    Response,
    StatusOperation,
    build_url,
    map_status,
)
from clusterkv.client.sync_client import SyncClient

__all__ = [
    "AsyncClient",
    "ClusterInfo",
    "JsonOperation",
    "LogicalRequest",
    "Operation",
    "Response",
    "StatusOperation",
    "SyncClient",
    "build_url",
    "map_status",
]
