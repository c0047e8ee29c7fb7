"""Built-in CLI sub-commands for restactions.

* :mod:`~restactions.commands.actions` -- list the resolved action tables
  of the resources declared in a definition file.
* :mod:`~restactions.commands.call` -- invoke one action over HTTP.
* :mod:`~restactions.commands.config` -- view and modify the global
  configuration.

Single commands export a plain callback registered on the root app;
command groups export a :class:`typer.Typer` sub-application.
"""
