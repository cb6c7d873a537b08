"""Cluster metadata carried in member response headers.

Every etcd member stamps its responses with the cluster id and the current
store and raft positions. :meth:`ClusterInfo.from_headers` reads them on a
best-effort basis: a missing or garbled header just leaves the field empty.
"""

from __future__ import annotations

from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict

CLUSTER_ID_HEADER = "X-Etcd-Cluster-Id"
ETCD_INDEX_HEADER = "X-Etcd-Index"
RAFT_INDEX_HEADER = "X-Raft-Index"
RAFT_TERM_HEADER = "X-Raft-Term"


class ClusterInfo(BaseModel):
    """Identity and position of the cluster as reported by one member.

    ``ClusterInfo()`` is the empty value used when nothing is known.
    """

    model_config = ConfigDict(frozen=True)

    cluster_id: Optional[str] = None
    etcd_index: Optional[int] = None
    raft_index: Optional[int] = None
    raft_term: Optional[int] = None

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> ClusterInfo:
        """Build a :class:`ClusterInfo` from a response's headers.

        Lookups are case-insensitive when *headers* is an
        :class:`httpx.Headers`; plain dicts must use the canonical names.
        Never raises.
        """
        return cls(
            cluster_id=headers.get(CLUSTER_ID_HEADER) or None,
            etcd_index=_header_int(headers, ETCD_INDEX_HEADER),
            raft_index=_header_int(headers, RAFT_INDEX_HEADER),
            raft_term=_header_int(headers, RAFT_TERM_HEADER),
        )


def _header_int(headers: Mapping[str, str], name: str) -> Optional[int]:
    raw = headers.get(name)
    if raw is None:
        return None
    try:
        return int(raw.strip())
    except ValueError:
        return None
