"""Built-in CLI sub-commands for reticule.

* :mod:`~reticule.commands.config` -- create, update, delete and list
  connection profiles.

Each module exports a :class:`typer.Typer` sub-application that
:mod:`reticule.app` registers on the root app.
"""
