"""Typer application and CLI entry point for apitree.

The root callback resolves the configuration, installs the global
:class:`~apitree.output.OutputManager` and configures logging; the
sub-commands live in :mod:`apitree.commands`.

:func:`main` is the console-script entry point declared in
``pyproject.toml``. It installs a SIGINT handler, invokes the app, maps
:class:`~apitree.exceptions.ApitreeError` to its exit code, and writes a
crash log for anything unexpected.
"""

from __future__ import annotations

import logging
import os
import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from apitree import __version__
from apitree.commands.config import config_app
from apitree.commands.parse import models_command, parse_command, paths_command
from apitree.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INTERRUPTED


app = typer.Typer(
    name="apitree",
    help="Turn OpenAPI 3.x documents into code-generator inputs.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("parse")(parse_command)
app.command("paths")(paths_command)
app.command("models")(models_command)
app.add_typer(config_app, name="config", help="Configuration management.")

_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"apitree {__version__}")
        raise typer.Exit()


def _output_format(name: str) -> "OutputFormat":
    """Map a configured format name to :class:`~apitree.output.OutputFormat`.

    Raises:
        InvalidUsageError: If *name* is not a known format.
    """
    from apitree.exceptions import InvalidUsageError
    from apitree.output import OutputFormat

    try:
        return OutputFormat(name)
    except ValueError:
        raise InvalidUsageError(
            f"Unknown output format: {name} (expected auto, json, plain or rich)"
        ) from None


def configure_logging(verbose: bool) -> None:
    """Send ``apitree.*`` log records to stderr.

    ``--verbose`` or ``APITREE_DEBUG=true`` turn on per-endpoint debug
    records; otherwise only warnings (e.g. dropped duplicate operations) are
    shown.
    """
    debug_env = os.environ.get("APITREE_DEBUG", "").lower() == "true"
    logging.basicConfig(format=_LOG_FORMAT, stream=sys.stderr)
    logging.getLogger("apitree").setLevel(
        logging.DEBUG if verbose or debug_env else logging.WARNING
    )


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    config_file: Optional[str] = typer.Option(
        None, "--config", "-c", help="Config file (overrides APITREE_CONFIG)."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
    output_file: Optional[str] = typer.Option(
        None, "-o", "--output", help="Write data output to this file."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Stores the effective :class:`~apitree.models.GlobalConfig` and the output
    file in ``ctx.obj`` for the sub-commands.
    """
    from apitree.config import resolve_config
    from apitree.exceptions import ApitreeError
    from apitree.output import OutputFormat, OutputManager, error, set_output

    configure_logging(verbose)

    fmt: Optional[str] = None
    if json_output:
        fmt = OutputFormat.JSON.value
    elif plain_output:
        fmt = OutputFormat.PLAIN.value

    try:
        config = resolve_config(cli_config=config_file, cli_format=fmt)
        resolved_format = _output_format(config.output.format)
    except ApitreeError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    set_output(
        OutputManager(
            format=resolved_format,
            no_color=no_color,
            quiet=quiet,
            verbose=verbose,
            output_file=output_file,
            indent=config.output.indent,
        )
    )

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["output_file"] = output_file


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log() -> str:
    """Write the current traceback to the data directory and return its path."""
    from apitree.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``apitree`` console script.

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
        from apitree.exceptions import ApitreeError
        from apitree.output import error

        if isinstance(exc, ApitreeError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log()
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
