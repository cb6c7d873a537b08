"""Helpers shared by the CLI command groups.

:func:`run_operation` resolves the active profile from the Typer context,
opens the right client for its dispatch strategy, runs one API call and
turns failures into exit codes. :func:`get_transport` and
:func:`get_async_transport` return ``None`` (real network); tests replace
them with mock transports.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Optional

import httpx
import typer

from clusterkv.client import AsyncClient, Response, SyncClient
from clusterkv.config import resolve_profile
from clusterkv.exceptions import ClusterKvError, DispatchError
from clusterkv.models import DispatchStrategy, Profile
from clusterkv.output import error, info


def get_transport() -> Optional[httpx.BaseTransport]:
    return None


def get_async_transport() -> Optional[httpx.AsyncBaseTransport]:
    return None


def context_options(ctx: typer.Context) -> dict[str, Any]:
    """Return the options stored by the root callback (empty outside the full app)."""
    root = ctx.find_root()
    return root.obj if isinstance(root.obj, dict) else {}


def active_profile(ctx: typer.Context) -> Profile:
    """Resolve the profile for this invocation, applying ``--concurrent``."""
    options = context_options(ctx)
    profile = resolve_profile(
        cli_profile=options.get("profile"),
        cli_endpoints=options.get("endpoints") or None,
    )
    if options.get("concurrent"):
        request = profile.request.model_copy(update={"strategy": DispatchStrategy.CONCURRENT})
        profile = profile.model_copy(update={"request": request})
    return profile


def run_operation(ctx: typer.Context, call: Callable[[Any], Any]) -> Response:
    """Run one API call against the active cluster.

    *call* receives an open client and returns what the auth API returns
    for it (a response, or an awaitable of one for the async client).

    Raises:
        typer.Exit: On any :class:`ClusterKvError`, after reporting it. A
            dispatch failure lists every endpoint's error in order.
    """
    try:
        profile = active_profile(ctx)
        if profile.request.strategy == DispatchStrategy.CONCURRENT:
            response = asyncio.run(_run_async(profile, call))
        else:
            with SyncClient(profile, transport=get_transport()) as client:
                response = call(client)
    except DispatchError as exc:
        count = len(exc.errors)
        error(f"No member answered ({count} endpoint{'s' if count != 1 else ''} tried):")
        for attempt in exc.errors:
            error(f"  {attempt}")
        raise typer.Exit(code=exc.exit_code) from None
    except ClusterKvError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    report_cluster(response)
    return response


async def _run_async(profile: Profile, call: Callable[[Any], Any]) -> Response:
    async with AsyncClient(profile, transport=get_async_transport()) as client:
        return await call(client)


def report_cluster(response: Response) -> None:
    """Write which member answered, and its cluster metadata, to stderr."""
    cluster = response.cluster_info
    parts = [f"answered by {response.endpoint}"]
    if cluster.cluster_id:
        parts.append(f"cluster {cluster.cluster_id}")
    if cluster.raft_term is not None:
        parts.append(f"raft term {cluster.raft_term}")
    if cluster.raft_index is not None:
        parts.append(f"raft index {cluster.raft_index}")
    info(", ".join(parts))
