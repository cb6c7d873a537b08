"""Shared test fixtures for clusterkv.

Cluster members are simulated with :class:`httpx.MockTransport`: a
:class:`FakeCluster` routes each request by host name to a scripted
:class:`Member` answer, records every request it sees, and refuses
connections to hosts it does not know. Both a sync and an async transport
are available so the same cluster can back either client.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional

import httpx
import pytest

from clusterkv.models import Profile, RequestConfig
from clusterkv.output import OutputFormat, OutputManager, reset_output, set_output


CLUSTER_HEADERS = {
    "X-Etcd-Cluster-Id": "7e27652122e8b2ae",
    "X-Etcd-Index": "12",
    "X-Raft-Index": "3456",
    "X-Raft-Term": "4",
}


@dataclass
class Member:
    """Scripted answer of one simulated cluster member."""

    status: int = 200
    json: Any = None
    content: Optional[bytes] = None
    headers: dict[str, str] = field(default_factory=lambda: dict(CLUSTER_HEADERS))
    delay: float = 0.0
    refuse: bool = False


class FakeCluster:
    """Routes requests to :class:`Member` answers by host."""

    def __init__(self, members: dict[str, Member]) -> None:
        self.members = members
        self.requests: list[httpx.Request] = []

    @property
    def hosts_contacted(self) -> list[str]:
        return [request.url.host for request in self.requests]

    def _respond(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        member = self.members.get(request.url.host)
        if member is None or member.refuse:
            raise httpx.ConnectError("connection refused", request=request)
        kwargs: dict[str, Any] = {"headers": member.headers}
        if member.json is not None:
            kwargs["json"] = member.json
        elif member.content is not None:
            kwargs["content"] = member.content
        return httpx.Response(member.status, **kwargs)

    def handler(self, request: httpx.Request) -> httpx.Response:
        return self._respond(request)

    async def async_handler(self, request: httpx.Request) -> httpx.Response:
        member = self.members.get(request.url.host)
        if member is not None and member.delay:
            await asyncio.sleep(member.delay)
        return self._respond(request)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def async_transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.async_handler)


@pytest.fixture
def make_cluster() -> Callable[[dict[str, Member]], FakeCluster]:
    """Factory for :class:`FakeCluster` instances."""
    return FakeCluster


@pytest.fixture
def member() -> type[Member]:
    """The :class:`Member` class, for scripting answers in tests."""
    return Member


@pytest.fixture
def make_profile() -> Callable[..., Profile]:
    """Build a profile from host names (``m1`` -> ``http://m1:2379``)."""

    def _make(*hosts: str, **kwargs: Any) -> Profile:
        return Profile(
            name="test",
            endpoints=[f"http://{host}:2379" for host in hosts],
            request=RequestConfig(timeout=5),
            **kwargs,
        )

    return _make


# ---------------------------------------------------------------------------
# Output state
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Drop the global OutputManager after every test.

    The manager keeps references to sys.stdout/sys.stderr; CliRunner swaps
    those per invocation, so a stale manager would write to closed files.
    """
    yield
    reset_output()


@pytest.fixture
def quiet_output() -> OutputManager:
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# Config isolation
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the config directory at ``tmp_path/config`` and clear CLUSTERKV_* vars."""
    monkeypatch.setattr("clusterkv.config.platform.system", lambda: "Linux")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    for var in ("CLUSTERKV_PROFILE", "CLUSTERKV_ENDPOINTS"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def cli_runner():
    from typer.testing import CliRunner

    return CliRunner()
