"""Built-in CLI sub-commands for specgen.

* :mod:`~specgen.commands.generate` -- the ``generate`` group and its
  ``server`` command.

Each module exports a :class:`typer.Typer` sub-application registered on
the root app in :func:`specgen.app.main`.
"""
