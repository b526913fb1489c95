"""Typer application factory and CLI entry point for specgen.

This module wires together the top-level Typer application and registers
the built-in ``generate`` sub-command group.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers, registers commands and
invokes the Typer app. Unhandled exceptions are written to a crash log under
the data directory.

See Also:
    :mod:`specgen.pipeline`: The ``generate server`` flow.
    :mod:`specgen.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any

import typer

from specgen import __version__
from specgen.exit_codes import EXIT_GENERIC_FAILURE, EXIT_SUCCESS


app = typer.Typer(
    name="specgen",
    help="Generate server code from Swagger/OpenAPI specs.",
    no_args_is_help=True,
    add_completion=True,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"specgen {__version__}")
        raise typer.Exit(code=EXIT_SUCCESS)


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~specgen.output.OutputManager` from CLI
    flags.
    """
    from specgen.output import OutputManager, set_output

    set_output(OutputManager(no_color=no_color, quiet=quiet, verbose=verbose))


def register_commands() -> None:
    """Attach the built-in sub-command groups to :data:`app`."""
    from specgen.commands.generate import generate_app

    app.add_typer(generate_app, name="generate", help="Generate code from a spec.")


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from specgen.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    )
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``specgen`` console script.

    Unhandled :class:`~specgen.exceptions.SpecgenError` instances cause a
    clean exit with the error's ``exit_code``. All other exceptions produce
    a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        register_commands()
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from specgen.exceptions import SpecgenError
        from specgen.output import error

        if isinstance(exc, SpecgenError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
