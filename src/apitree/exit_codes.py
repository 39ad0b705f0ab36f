"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~apitree.exceptions.ApitreeError` subclass.
Build scripts wrapping ``apitree`` can inspect the exit code to determine the
failure class without parsing stderr.

Example::

    $ apitree parse openapi.yml -o parsed.json
    $ echo $?
    7   # EXIT_SPEC_PARSE_ERROR -- an operation had no usable response
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_SPEC_PARSE_ERROR = 7
"""The OpenAPI document could not be loaded or turned into a path tree."""

EXIT_INTERRUPTED = 130
"""The user pressed Ctrl-C."""
