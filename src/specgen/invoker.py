"""Invoke the generation engine and report the outcome."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from specgen.engine import GenerationEngine
from specgen.exceptions import PathResolutionError
from specgen.models import GenerationOptions, ServerCommandOptions
from specgen.output import DiagnosticSink


SUPPORT_PACKAGES = (
    "github.com/go-openapi/runtime",
    "github.com/tylerb/graceful",
    "github.com/jessevdk/go-flags",
    "golang.org/x/net/context",
)
"""Runtime libraries the generated server needs in order to compile."""


def relative_target(cwd: Optional[str | Path], target: str | Path) -> str:
    """Return *target* relative to *cwd* (the process working directory if None).

    Pure path arithmetic: neither directory has to exist. A relative
    *target* is taken to be relative to *cwd* already.

    Raises:
        PathResolutionError: If the working directory is gone or no relative
            path exists (e.g. different drives on Windows).
    """
    try:
        base = os.path.normpath(os.fspath(cwd if cwd is not None else Path.cwd()))
        path = os.fspath(target)
        if not os.path.isabs(path):
            path = os.path.join(base, path)
        return os.path.relpath(os.path.normpath(path), base)
    except (OSError, ValueError) as exc:
        raise PathResolutionError(
            f"Cannot express {target} relative to {cwd or 'the working directory'}: {exc}"
        ) from exc


def completion_report(relative: str) -> str:
    """Build the message shown after a successful generation."""
    packages = "\n".join(f"  * {pkg}" for pkg in SUPPORT_PACKAGES)
    return (
        "Generation completed!\n"
        "\n"
        "For this generation to compile you need to have some packages in your GOPATH:\n"
        "\n"
        f"{packages}\n"
        "\n"
        f"You can get these now with: go get -u -f {relative}/...\n"
    )


def invoke(
    engine: GenerationEngine,
    cmd: ServerCommandOptions,
    options: GenerationOptions,
    sink: DiagnosticSink,
    cwd: Optional[str | Path] = None,
) -> str:
    """Run ``generate_server`` once and emit the completion report.

    Engine errors propagate unchanged; nothing is reported in that case.

    Returns:
        The target directory relative to *cwd*.
    """
    engine.generate_server(cmd.name or "", list(cmd.models), list(cmd.operations), options)

    rel = relative_target(cwd, options.target)
    sink.success(completion_report(rel))
    return rel
