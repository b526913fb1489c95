"""Diagnostic sink with strict stdout/stderr discipline.

Follows `clig.dev <https://clig.dev/>`_ conventions:

* **stdout** -- primary data only (the ``--dump-data`` payload). This is
  what downstream tools pipe and parse.
* **stderr** -- all diagnostics (progress, status, warnings, errors, the
  completion report). Never contaminates the data stream.
* **TTY detection** -- Rich formatting when stdout is an interactive
  terminal, plain text when piped to another process.
* **Colour control** -- respects ``NO_COLOR``, ``TERM=dumb``, and the
  ``--no-color`` CLI flag.

The module exposes two layers:

1. :class:`OutputManager` -- a stateful object holding Rich consoles and
   quiet/verbose flags. Created once in :func:`~specgen.app.main_callback`
   and installed via :func:`set_output`. It satisfies
   :class:`DiagnosticSink`, which is what the pipeline is handed.
2. Module-level convenience functions (:func:`info`, :func:`error`,
   :func:`debug`, etc.) that delegate to the global ``OutputManager``
   instance so callers do not need to pass the manager around.
"""

from __future__ import annotations

import json
import os
import sys
from typing import Any, Optional, Protocol

from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax


class DiagnosticSink(Protocol):
    """The subset of :class:`OutputManager` that the pipeline relies on.

    Library code receives a sink instead of writing to the process streams
    directly, which keeps it testable with a recording fake.
    """

    def info(self, message: str) -> None: ...

    def notice(self, message: str) -> None: ...

    def success(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def debug(self, message: str) -> None: ...

    def print_data(self, text: str) -> None: ...

    def print_json(self, data: Any) -> None: ...


class OutputManager:
    """Central manager for all CLI output with stdout/stderr discipline.

    Maintains two Rich :class:`~rich.console.Console` instances -- one for
    stdout (data) and one for stderr (diagnostics) -- and routes every
    output call to the correct stream with appropriate formatting.

    Args:
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential informational messages on stderr.
        verbose: Enable debug-level messages on stderr.
    """

    def __init__(
        self,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose
        self._rich = _is_tty() and not self._no_color

        # Console for stdout (data output)
        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=self._rich,
        )

        # Console for stderr (diagnostics)
        self._stderr = Console(
            file=sys.stderr,
            no_color=self._no_color,
            stderr=True,
        )

    @property
    def is_quiet(self) -> bool:
        """Whether quiet mode is enabled."""
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        """Whether verbose mode is enabled."""
        return self._verbose

    # ------------------------------------------------------------------ #
    # Data output (stdout)
    # ------------------------------------------------------------------ #

    def print_data(self, text: str) -> None:
        """Print raw text to stdout.

        Args:
            text: The string to write.
        """
        print(text, file=sys.stdout, flush=True)

    def print_json(self, data: Any) -> None:
        """Print *data* as indented JSON to stdout.

        Syntax-highlighted when stdout is an interactive terminal, raw JSON
        otherwise so the output stays pipeable.

        Args:
            data: Any JSON-serialisable value.
        """
        json_str = json.dumps(data, indent=2, ensure_ascii=False, default=str)
        if self._rich:
            self._stdout.print(Syntax(json_str, "json", theme="monokai", word_wrap=True))
        else:
            self.print_data(json_str)

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        """Print an informational message to stderr. Suppressed by ``--quiet``.

        Args:
            message: The message text.
        """
        if not self._quiet:
            if self._no_color:
                print(message, file=sys.stderr, flush=True)
            else:
                self._stderr.print(message, markup=False, highlight=False)

    def notice(self, message: str) -> None:
        """Print a diagnostic the user asked for explicitly. NOT suppressed by ``--quiet``.

        Args:
            message: The message text.
        """
        if self._no_color:
            print(message, file=sys.stderr, flush=True)
        else:
            self._stderr.print(message, markup=False, highlight=False)

    def success(self, message: str) -> None:
        """Print a green success message to stderr. Suppressed by ``--quiet``.

        Args:
            message: The message text.
        """
        if not self._quiet:
            if self._no_color:
                print(message, file=sys.stderr, flush=True)
            else:
                self._stderr.print(message, style="green", markup=False)

    def warning(self, message: str) -> None:
        """Print a yellow warning to stderr. NOT suppressed by ``--quiet``.

        Args:
            message: The warning text.
        """
        if self._no_color:
            print(f"Warning: {message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[yellow]Warning:[/yellow] {escape(message)}")

    def error(self, message: str) -> None:
        """Print a bold-red error to stderr. Never suppressed.

        Args:
            message: The error text.
        """
        if self._no_color:
            print(f"Error: {message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[bold red]Error:[/bold red] {escape(message)}")

    def debug(self, message: str) -> None:
        """Print a debug message to stderr. Only shown when ``--verbose`` is active.

        Args:
            message: The debug text (prefixed with ``[debug]`` on output).
        """
        if self._verbose:
            if self._no_color:
                print(f"[debug] {message}", file=sys.stderr, flush=True)
            else:
                self._stderr.print(f"[debug] {message}", style="dim", markup=False)


# ------------------------------------------------------------------ #
# Module-level helpers
# ------------------------------------------------------------------ #


def _is_tty() -> bool:
    """Check if stdout is a TTY."""
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """Check if color should be disabled per clig.dev.

    Returns True when NO_COLOR env var is set (any value) or TERM=dumb.
    """
    if os.environ.get("NO_COLOR") is not None:
        return True
    if os.environ.get("TERM") == "dumb":
        return True
    return False


# ------------------------------------------------------------------ #
# Global output instance (set during app startup)
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the global :class:`OutputManager` instance.

    If no instance has been installed via :func:`set_output`, a default
    ``OutputManager`` is created lazily.

    Returns:
        The active :class:`OutputManager`.
    """
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    """Install *output* as the global :class:`OutputManager` instance.

    Called once during CLI startup from :func:`~specgen.app.main_callback`.

    Args:
        output: The configured manager to install.
    """
    global _output
    _output = output


def reset_output() -> None:
    """Reset the global :class:`OutputManager` to ``None``.

    Primarily useful in test suites to ensure a clean state between tests.
    """
    global _output
    _output = None


# ------------------------------------------------------------------ #
# Convenience functions that use the global instance
# ------------------------------------------------------------------ #


def error(message: str) -> None:
    """Print error to stderr via the global OutputManager."""
    get_output().error(message)
