"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Every fatal :class:`~arielle.exceptions.ArielleError` maps to
:data:`EXIT_GENERIC_FAILURE`; Typer reports bad flags with
:data:`EXIT_INVALID_USAGE` on its own.

Example::

    $ arielle start --spec missing.yaml
    Error: Spec file not found: missing.yaml
    $ echo $?
    1
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""A fatal error aborted the run."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_INTERRUPTED = 130
"""The run was cancelled with Ctrl-C."""
