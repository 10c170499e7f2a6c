"""Typer application and CLI entry point for arielle.

The root :data:`app` carries only the eager ``--version`` option; the real
work lives in the ``start`` sub-command (:mod:`arielle.commands.start`).

:func:`main` is the console-script entry point declared in
``pyproject.toml``. It installs the Ctrl-C handler, invokes the Typer app and
turns anything that escapes a command into an exit code. Unexpected
exceptions are written to a crash log under the data directory.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any

import typer

from arielle import __version__
from arielle.commands.start import start_command
from arielle.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INTERRUPTED

app = typer.Typer(
    name="arielle",
    help="Ask questions about an OpenAPI 3.0 API.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("start")(start_command)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"arielle {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Turn an OpenAPI spec into a searchable knowledge base and ask it questions."""


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write the traceback of *exc* to disk and return the log file path."""
    from arielle.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    )
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``arielle`` console script.

    Unhandled :class:`~arielle.exceptions.ArielleError` instances cause a
    clean exit with the error's ``exit_code``. All other exceptions produce a
    crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)
    except Exception as exc:
        from arielle.exceptions import ArielleError
        from arielle.output import OutputManager

        output = OutputManager()
        if isinstance(exc, ArielleError):
            output.error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        output.error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
