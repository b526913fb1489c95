"""Generation engine port and the default engine.

The rest of specgen talks to code generation only through the
:class:`GenerationEngine` protocol, so the assembler and the invoker can be
exercised against fakes. :class:`DefaultEngine` is the implementation wired
into the CLI:

* ``read_config`` loads a JSON/YAML overlay document.
* ``ensure_defaults`` fills empty option fields, deriving the application
  name from the spec's ``info.title``.
* ``configure_opts`` applies a :class:`~specgen.models.LanguageDefinition`.
* ``generate_server`` either dumps the generation payload (``--dump-data``)
  or delegates to a renderer plugin.

Renderers are discovered through the ``specgen.renderers`` entry-point
group. A package registers one in its ``pyproject.toml``::

    [project.entry-points."specgen.renderers"]
    server = "my_package.render:render_server"

A renderer is any callable with the ``generate_server`` signature.
"""

from __future__ import annotations

import importlib.metadata
import logging
import re
from pathlib import Path
from typing import Any, Callable, Optional, Protocol

from specgen.exceptions import (
    ConfigReadError,
    DefaultsResolutionError,
    DocumentLoadError,
    GenerationError,
    OverlayDecodeError,
)
from specgen.loader import load_document, spec_title
from specgen.models import (
    DEFAULT_API_PACKAGE,
    DEFAULT_CLIENT_PACKAGE,
    DEFAULT_MODEL_PACKAGE,
    DEFAULT_SCHEME,
    DEFAULT_SERVER_PACKAGE,
    DEFAULT_SPEC,
    DEFAULT_TARGET,
    GenerationOptions,
    LanguageDefinition,
)
from specgen.output import DiagnosticSink, get_output

logger = logging.getLogger(__name__)

RENDERER_ENTRY_POINT_GROUP = "specgen.renderers"
"""The entry-point group name used for renderer discovery."""

DEFAULT_RENDERER = "server"

FALLBACK_APP_NAME = "swagger"
"""Application name used when the spec has no usable ``info.title``."""

Renderer = Callable[[str, list[str], list[str], GenerationOptions], None]


class GenerationEngine(Protocol):
    """Port to the code-generation engine."""

    def read_config(self, path: Path) -> dict[str, Any]:
        """Load the overlay document at the absolute *path*.

        Raises:
            ConfigReadError: If the file is missing, unreadable or malformed.
        """
        ...

    def ensure_defaults(self, opts: GenerationOptions, minimal: bool) -> GenerationOptions:
        """Return *opts* with every empty field filled in.

        Must be idempotent and must not touch fields that already hold a value.

        Raises:
            DefaultsResolutionError: If a required default cannot be derived.
        """
        ...

    def configure_opts(
        self, definition: LanguageDefinition, opts: GenerationOptions
    ) -> GenerationOptions:
        """Return *opts* rewritten by *definition*.

        Raises:
            OverlayDecodeError: If the definition cannot be applied.
        """
        ...

    def generate_server(
        self,
        name: str,
        models: list[str],
        operations: list[str],
        opts: GenerationOptions,
    ) -> None:
        """Generate the server application.

        Raises:
            GenerationError: On any generation failure.
        """
        ...


class DefaultEngine:
    """Engine used by the ``specgen`` CLI.

    Args:
        sink: Where ``--dump-data`` output goes. Defaults to the global
            :class:`~specgen.output.OutputManager`.
        renderer: Name of the renderer entry point to delegate to.
    """

    def __init__(
        self,
        sink: Optional[DiagnosticSink] = None,
        renderer: str = DEFAULT_RENDERER,
    ) -> None:
        self._sink = sink
        self._renderer_name = renderer

    @property
    def sink(self) -> DiagnosticSink:
        return self._sink if self._sink is not None else get_output()

    def read_config(self, path: Path) -> dict[str, Any]:
        try:
            return load_document(path)
        except DocumentLoadError as exc:
            raise ConfigReadError(f"Cannot read config {path}: {exc}") from exc

    def ensure_defaults(self, opts: GenerationOptions, minimal: bool) -> GenerationOptions:
        update: dict[str, Any] = {}
        for field, default in (
            ("spec", DEFAULT_SPEC),
            ("target", DEFAULT_TARGET),
            ("api_package", DEFAULT_API_PACKAGE),
            ("model_package", DEFAULT_MODEL_PACKAGE),
            ("server_package", DEFAULT_SERVER_PACKAGE),
            ("client_package", DEFAULT_CLIENT_PACKAGE),
            ("default_scheme", DEFAULT_SCHEME),
        ):
            if not getattr(opts, field):
                update[field] = default

        if not minimal and not opts.name:
            update["name"] = self._derive_name(update.get("spec", opts.spec))

        return opts.model_copy(update=update, deep=True)

    def configure_opts(
        self, definition: LanguageDefinition, opts: GenerationOptions
    ) -> GenerationOptions:
        try:
            return definition.configure_opts(opts)
        except ValueError as exc:
            raise OverlayDecodeError(f"Cannot apply config overlay: {exc}") from exc

    def generate_server(
        self,
        name: str,
        models: list[str],
        operations: list[str],
        opts: GenerationOptions,
    ) -> None:
        if opts.dump_data:
            self.sink.print_json(
                {
                    "name": name or opts.name,
                    "models": list(models),
                    "operations": list(operations),
                    "options": opts.model_dump(mode="json"),
                }
            )
            return

        renderer = load_renderer(self._renderer_name)
        logger.debug("Rendering server with '%s'", self._renderer_name)
        try:
            renderer(name, list(models), list(operations), opts)
        except GenerationError:
            raise
        except Exception as exc:
            raise GenerationError(
                f"Renderer '{self._renderer_name}' failed: {exc}"
            ) from exc

    def _derive_name(self, spec: str) -> str:
        try:
            document = load_document(spec)
        except DocumentLoadError as exc:
            raise DefaultsResolutionError(
                f"Cannot derive application name from {spec}: {exc}"
            ) from exc
        return mangle_name(spec_title(document)) or FALLBACK_APP_NAME


def mangle_name(title: str) -> str:
    """Turn a spec title into an identifier-safe application name.

    ``"Swagger Petstore"`` becomes ``"SwaggerPetstore"``; a leading digit is
    prefixed with ``Nr``.
    """
    words = [w for w in re.split(r"[^0-9A-Za-z]+", title) if w]
    name = "".join(w[0].upper() + w[1:] for w in words)
    if name and name[0].isdigit():
        name = "Nr" + name
    return name


def discover_renderers() -> dict[str, importlib.metadata.EntryPoint]:
    """Return the registered renderer entry points keyed by name."""
    eps = importlib.metadata.entry_points(group=RENDERER_ENTRY_POINT_GROUP)
    return {ep.name: ep for ep in eps}


def load_renderer(name: str) -> Renderer:
    """Load the renderer registered under *name*.

    Raises:
        GenerationError: If no such renderer is installed or it fails to import.
    """
    renderers = discover_renderers()
    if name not in renderers:
        available = ", ".join(sorted(renderers)) or "none"
        raise GenerationError(
            f"No renderer named '{name}' is installed (available: {available}). "
            "Install a renderer package or use --dump-data."
        )
    try:
        return renderers[name].load()
    except Exception as exc:
        raise GenerationError(f"Failed to load renderer '{name}': {exc}") from exc
