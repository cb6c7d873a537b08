"""Tests for the profile-aware sync and async clients."""

from __future__ import annotations

import asyncio
import base64

import pytest

from clusterkv.auth.api import ENABLE, STATUS
from clusterkv.auth.outcomes import EnableAuth
from clusterkv.client import AsyncClient, SyncClient
from clusterkv.client.sync_client import basic_auth_for
from clusterkv.exceptions import CredentialError, DispatchError
from clusterkv.models import AuthConfig


class TestSyncClient:
    def test_context_manager_opens_and_closes(self, make_profile) -> None:
        client = SyncClient(make_profile("m1"))
        assert client._client is None
        with client:
            assert client._client is not None
        assert client._client is None

    def test_endpoints_keep_profile_order(self, make_profile) -> None:
        client = SyncClient(make_profile("m3", "m1", "m2"))
        assert client.endpoints == ("http://m3:2379", "http://m1:2379", "http://m2:2379")

    def test_execute_fails_over(self, make_profile, make_cluster, member) -> None:
        cluster = make_cluster({"m2": member(status=200)})
        with SyncClient(make_profile("m1", "m2"), transport=cluster.transport()) as client:
            response = client.execute(ENABLE)
        assert response.data is EnableAuth.ENABLED
        assert cluster.hosts_contacted == ["m1", "m2"]

    def test_execute_raises_dispatch_error(self, make_profile, make_cluster) -> None:
        cluster = make_cluster({})
        with SyncClient(make_profile("m1", "m2"), transport=cluster.transport()) as client:
            with pytest.raises(DispatchError) as exc_info:
                client.execute(STATUS)
        assert len(exc_info.value.errors) == 2

    def test_sends_basic_auth(self, make_profile, make_cluster, member, monkeypatch) -> None:
        monkeypatch.setenv("ROOT_PW", "s3cret")
        profile = make_profile("m1", auth=AuthConfig(username="root", source="env:ROOT_PW"))
        cluster = make_cluster({"m1": member(status=200)})

        with SyncClient(profile, transport=cluster.transport()) as client:
            client.execute(ENABLE)

        expected = base64.b64encode(b"root:s3cret").decode("ascii")
        assert cluster.requests[0].headers["Authorization"] == f"Basic {expected}"
        assert cluster.requests[0].headers["Accept"] == "application/json"

    def test_no_auth_header_without_auth(self, make_profile, make_cluster, member) -> None:
        cluster = make_cluster({"m1": member(status=200)})
        with SyncClient(make_profile("m1"), transport=cluster.transport()) as client:
            client.execute(ENABLE)
        assert "Authorization" not in cluster.requests[0].headers


class TestBasicAuthFor:
    def test_none_without_auth(self, make_profile) -> None:
        assert basic_auth_for(make_profile("m1")) is None

    def test_missing_password_source(self, make_profile, monkeypatch) -> None:
        monkeypatch.delenv("NOT_SET_PW", raising=False)
        profile = make_profile("m1", auth=AuthConfig(source="env:NOT_SET_PW"))
        with pytest.raises(CredentialError):
            basic_auth_for(profile)


class TestAsyncClient:
    def test_execute_concurrently(self, make_profile, make_cluster, member) -> None:
        cluster = make_cluster(
            {"m1": member(status=200, json={"enabled": True}, delay=0.05), "m2": member(refuse=True)}
        )

        async def scenario():
            async with AsyncClient(make_profile("m1", "m2"), transport=cluster.async_transport()) as client:
                return await client.execute(STATUS)

        response = asyncio.run(scenario())
        assert response.data is True
        assert response.endpoint == "http://m1:2379"
        assert sorted(cluster.hosts_contacted) == ["m1", "m2"]

    def test_reaps_losers_on_exit(self, make_profile, make_cluster, member) -> None:
        cluster = make_cluster(
            {"m1": member(status=200, delay=5.0), "m2": member(status=409, delay=0.01)}
        )

        async def scenario():
            client = AsyncClient(make_profile("m1", "m2"), transport=cluster.async_transport())
            async with client:
                response = await client.execute(ENABLE)
                losers = set(client._abandoned)
            return response, losers, client

        response, losers, client = asyncio.run(scenario())
        assert response.data is EnableAuth.ALREADY_ENABLED
        assert len(losers) == 1
        assert all(task.done() for task in losers)
        assert client._abandoned == set()
        assert client._client is None

    def test_finished_losers_are_released_while_open(self, make_profile, make_cluster, member) -> None:
        cluster = make_cluster(
            {"m1": member(status=200, delay=0.05), "m2": member(status=409)}
        )

        async def scenario():
            async with AsyncClient(make_profile("m1", "m2"), transport=cluster.async_transport()) as client:
                for _ in range(50):
                    response = await client.execute(ENABLE)
                    assert response.endpoint == "http://m2:2379"
                await asyncio.sleep(0.1)
                return len(client._abandoned)

        assert asyncio.run(scenario()) == 0
