"""Exception hierarchy for apitree.

All exceptions inherit from :class:`ApitreeError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`apitree.exit_codes`.
The top-level error handler in :func:`apitree.app.main` catches
``ApitreeError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    ApitreeError (exit 1)
    +-- InvalidUsageError        (exit 2)
    +-- SpecParseError           (exit 7)
    |   +-- MissingResponseError (exit 7)
    +-- ConfigError              (exit 1)
"""

from apitree.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_SPEC_PARSE_ERROR,
)


class ApitreeError(Exception):
    """Base exception for all apitree errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(ApitreeError):
    """Raised for invalid CLI arguments."""

    exit_code = EXIT_INVALID_USAGE


class SpecParseError(ApitreeError):
    """Raised when the OpenAPI document cannot be loaded or processed."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class MissingResponseError(SpecParseError):
    """Raised when an operation declares none of the expected responses.

    The generator needs a response schema reference for every operation, so
    the whole parse is aborted rather than emitting a node without one.

    Args:
        endpoint: The endpoint template the operation belongs to.
        method: The HTTP method of the operation.
    """

    def __init__(self, endpoint: str, method: str):
        super().__init__(
            f"{method.upper()} {endpoint} declares no 200, 201, 202, 204, 205, "
            "302, 501 or default response"
        )
        self.endpoint = endpoint
        self.method = method


class ConfigError(ApitreeError):
    """Raised for configuration problems (missing or invalid config files)."""

    exit_code = EXIT_GENERIC_FAILURE
