"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~reticule.exceptions.ReticuleError` subclass.
Shell wrappers can inspect the exit code to tell a missing config file
apart from a name collision without parsing stderr.

Example::

    $ reticule config update reticule --name nope --key abc
    $ echo $?
    8   # EXIT_CONFLICT -- the profile does not exist
"""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_NOT_FOUND = 4
"""The config file (or another required resource) does not exist."""

EXIT_CONFLICT = 8
"""The requested change conflicts with the stored profiles (duplicate or missing name)."""

EXIT_FORMAT_ERROR = 9
"""The config file exists but could not be decoded."""

EXIT_IO_ERROR = 74
"""A filesystem operation failed (matches ``EX_IOERR`` from ``sysexits.h``)."""
