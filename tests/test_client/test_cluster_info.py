"""Tests for cluster metadata extraction."""

from __future__ import annotations

import httpx
import pytest
from pydantic import ValidationError

from clusterkv.client.cluster_info import ClusterInfo


class TestFromHeaders:
    def test_all_headers(self) -> None:
        headers = httpx.Headers(
            {
                "X-Etcd-Cluster-Id": "7e27652122e8b2ae",
                "X-Etcd-Index": "12",
                "X-Raft-Index": "3456",
                "X-Raft-Term": "4",
            }
        )
        info = ClusterInfo.from_headers(headers)
        assert info == ClusterInfo(
            cluster_id="7e27652122e8b2ae", etcd_index=12, raft_index=3456, raft_term=4
        )

    def test_header_names_are_case_insensitive(self) -> None:
        headers = httpx.Headers({"x-etcd-cluster-id": "abc", "x-raft-term": "9"})
        info = ClusterInfo.from_headers(headers)
        assert info.cluster_id == "abc"
        assert info.raft_term == 9

    def test_missing_headers_give_empty_value(self) -> None:
        assert ClusterInfo.from_headers(httpx.Headers()) == ClusterInfo()

    def test_garbled_numbers_are_dropped(self) -> None:
        headers = httpx.Headers({"X-Etcd-Index": "twelve", "X-Raft-Index": "", "X-Raft-Term": " 5 "})
        info = ClusterInfo.from_headers(headers)
        assert info.etcd_index is None
        assert info.raft_index is None
        assert info.raft_term == 5

    def test_empty_cluster_id_is_none(self) -> None:
        assert ClusterInfo.from_headers({"X-Etcd-Cluster-Id": ""}).cluster_id is None

    def test_plain_dict(self) -> None:
        info = ClusterInfo.from_headers({"X-Etcd-Cluster-Id": "abc"})
        assert info.cluster_id == "abc"
        assert info.etcd_index is None

    def test_is_immutable(self) -> None:
        info = ClusterInfo(cluster_id="abc")
        with pytest.raises(ValidationError):
            info.cluster_id = "other"  # type: ignore[misc]
