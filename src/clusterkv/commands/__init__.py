"""CLI sub-command groups for clusterkv.

* :mod:`~clusterkv.commands.auth` -- enable, disable and query auth.
* :mod:`~clusterkv.commands.users` -- manage users.
* :mod:`~clusterkv.commands.roles` -- manage roles.
* :mod:`~clusterkv.commands.config` -- global config and cluster profiles.
* :mod:`~clusterkv.commands.common` -- profile resolution and dispatch
  shared by the groups above.
"""
