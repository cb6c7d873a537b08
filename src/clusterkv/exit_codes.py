"""Numeric process exit codes used by the ``clusterkv`` CLI.

Each :class:`~clusterkv.exceptions.ClusterKvError` subclass points at one of
these, so shell scripts can tell a dead cluster from a rejected request
without parsing stderr.

Example::

    $ clusterkv auth enable
    $ echo $?
    6   # EXIT_CONNECTION_ERROR -- no member could be reached
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or no endpoints."""

EXIT_AUTH_FAILURE = 3
"""The cluster refused the request (no root user, not authorised) or credentials are missing."""

EXIT_CLUSTER_ERROR = 5
"""A member answered with an application error or an unexpected status code."""

EXIT_CONNECTION_ERROR = 6
"""No member could be reached (connection refused, timeout, malformed URL)."""

EXIT_SERIALIZATION_ERROR = 7
"""A member answered with a body that could not be decoded."""
