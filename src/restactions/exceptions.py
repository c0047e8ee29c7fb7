"""Exception hierarchy for restactions.

All exceptions inherit from :class:`RestActionsError`, which carries an
``exit_code`` attribute mapped to a constant from
:mod:`restactions.exit_codes`. The CLI entry point in
:func:`restactions.app.main` catches ``RestActionsError`` and exits with
the appropriate code.

The action pipeline itself only raises :class:`ConfigError` (at resource
construction) and :class:`UnknownActionError` (at dispatch). Everything
else -- hook failures, transport failures -- propagates unchanged.

Subclass hierarchy::

    RestActionsError (exit 1)
    +-- ConfigError         (exit 1)
    |   +-- UnknownActionError (exit 2)
    +-- DefinitionError     (exit 7)
    +-- AuthError           (exit 3)
    +-- NotFoundError       (exit 4)
    +-- ServerError         (exit 5)
    +-- ConnectionError_    (exit 6)
"""

from restactions.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_DEFINITION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
)


class RestActionsError(Exception):
    """Base exception for all restactions errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(RestActionsError):
    """Raised for configuration problems (malformed action descriptors, invalid config JSON, bad credential sources)."""

    exit_code = EXIT_GENERIC_FAILURE


class UnknownActionError(ConfigError, AttributeError):
    """Raised when a resource is asked for an action its table does not define.

    Also an :class:`AttributeError` so that ``getattr(resource, name, None)``
    and ``hasattr`` keep working on resource facades.
    """

    exit_code = EXIT_INVALID_USAGE


class DefinitionError(RestActionsError):
    """Raised when a resource definition file cannot be read or parsed."""

    exit_code = EXIT_DEFINITION_ERROR


class AuthError(RestActionsError):
    """Raised by the HTTP transport on HTTP 401 / 403."""

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(RestActionsError):
    """Raised by the HTTP transport on HTTP 404."""

    exit_code = EXIT_NOT_FOUND


class ServerError(RestActionsError):
    """Raised by the HTTP transport on any other error status."""

    exit_code = EXIT_SERVER_ERROR


class ConnectionError_(RestActionsError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR
