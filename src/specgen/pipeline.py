"""End-to-end flow of ``specgen generate server``.

:func:`run_server` wires the stages together in their fixed order::

    config path -> read config -> assemble -> defaults -> overlay -> generate

Every failure is raised as a :class:`~specgen.exceptions.SpecgenError`
subclass (or the engine's own :class:`~specgen.exceptions.GenerationError`)
and nothing calls ``sys.exit``; the CLI layer decides the exit code.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from specgen.assembler import (
    assemble,
    decode_overlay,
    explicit_fields,
    merge,
    overlay_changes,
    resolve_defaults,
    shadowed_overrides,
)
from specgen.config import dump_config, resolve_config_path
from specgen.engine import GenerationEngine
from specgen.invoker import invoke
from specgen.models import GenerationOptions, ServerCommandOptions
from specgen.output import DiagnosticSink


def load_config(
    cmd: ServerCommandOptions,
    engine: GenerationEngine,
    sink: DiagnosticSink,
    cwd: Optional[str | Path] = None,
) -> Optional[dict[str, Any]]:
    """Read the ``--config-file`` document, or return None when none was given."""
    document: Optional[dict[str, Any]] = None
    if cmd.config_file:
        path = resolve_config_path(cmd.config_file, cwd)
        sink.info(f"trying to read config from {path}")
        document = engine.read_config(path)
    dump_config(document, sink)
    return document


def build_options(
    cmd: ServerCommandOptions,
    engine: GenerationEngine,
    sink: DiagnosticSink,
    document: Optional[dict[str, Any]] = None,
) -> GenerationOptions:
    """Assemble, default and overlay the generation options for *cmd*."""
    assembled = assemble(cmd)
    defaults = resolve_defaults(engine, assembled)
    if document is None:
        return merge(assembled, defaults)

    definition = decode_overlay(document)
    changes = overlay_changes(engine, definition, defaults)
    explicit = explicit_fields(cmd)
    for field in shadowed_overrides(assembled, changes, explicit):
        sink.warning(
            f"config file sets '{field}', but the command line already did; "
            "keeping the command-line value"
        )
    return merge(assembled, defaults, changes, explicit)


def run_server(
    cmd: ServerCommandOptions,
    engine: GenerationEngine,
    sink: DiagnosticSink,
    cwd: Optional[str | Path] = None,
) -> GenerationOptions:
    """Generate a server application for *cmd*.

    Returns:
        The final options handed to the engine.
    """
    document = load_config(cmd, engine, sink, cwd)
    options = build_options(cmd, engine, sink, document)
    sink.debug(f"generation options: {options.model_dump_json()}")
    invoke(engine, cmd, options, sink, cwd)
    return options
