"""Exception hierarchy for reticule.

All exceptions inherit from :class:`ReticuleError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`reticule.exit_codes`.
The top-level error handler in :func:`reticule.app.main` catches
``ReticuleError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    ReticuleError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- NotFoundError       (exit 4)
    +-- ConflictError       (exit 8)
    +-- FormatError         (exit 9)
    +-- IOError_            (exit 74)
"""

from reticule.exit_codes import (
    EXIT_CONFLICT,
    EXIT_FORMAT_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_IO_ERROR,
    EXIT_NOT_FOUND,
)


class ReticuleError(Exception):
    """Base exception for all reticule errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`reticule.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(ReticuleError):
    """Raised for invalid arguments that the CLI parser cannot catch (e.g. an empty profile name)."""

    exit_code = EXIT_INVALID_USAGE


class NotFoundError(ReticuleError):
    """Raised when the config file does not exist and the operation needs one."""

    exit_code = EXIT_NOT_FOUND


class ConflictError(ReticuleError):
    """Raised when creating a name that exists, or updating a name that does not."""

    exit_code = EXIT_CONFLICT


class FormatError(ReticuleError):
    """Raised when the stored config cannot be decoded into a ConfigSet."""

    exit_code = EXIT_FORMAT_ERROR


class IOError_(ReticuleError):
    """Raised on filesystem failures (open, read, write, close, home directory lookup).

    Named with a trailing underscore to avoid shadowing the built-in
    ``IOError``.
    """

    exit_code = EXIT_IO_ERROR
