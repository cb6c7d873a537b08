"""clusterkv -- failover client for the etcd v2 auth API.

Talks to a replicated key-value cluster over HTTP. Every operation is sent
to the configured members one after another (or all at once, first success
wins) until one of them gives a definitive answer, and the answer comes back
annotated with the cluster metadata found in that member's response headers.

Typical use::

    from clusterkv.auth import enable
    from clusterkv.client import SyncClient

    with SyncClient(profile) as client:
        response = enable(client)
        print(response.data, response.cluster_info.cluster_id)

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic configuration models.
    config: XDG-aware configuration and profile storage.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes.
    output: stdout/stderr formatting with Rich support.
    client: Prober, dispatcher and the sync/async clients.
    auth: Enable/disable/status plus user and role management.
"""

__version__ = "0.1.0"
