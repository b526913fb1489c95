"""Shared test fixtures for specgen.

Provides a recording diagnostic sink, a fake generation engine, spec and
overlay files on disk, environment isolation, and a CLI runner. These
fixtures are automatically discovered by pytest and available to all test
modules without explicit imports.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import pytest

from specgen.exceptions import ConfigReadError, DocumentLoadError
from specgen.loader import load_document
from specgen.models import GenerationOptions, LanguageDefinition
from specgen.output import reset_output


PETSTORE_SPEC: dict[str, Any] = {
    "swagger": "2.0",
    "info": {"title": "Swagger Petstore", "version": "1.0.0"},
    "basePath": "/v1",
    "paths": {
        "/pets": {
            "get": {
                "operationId": "listPets",
                "tags": ["pets"],
                "responses": {"200": {"description": "A list of pets"}},
            }
        }
    },
    "definitions": {"Pet": {"type": "object"}},
}


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams during a
    test, the cached references become stale once the test finishes.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class RecordingSink:
    """Diagnostic sink that keeps every message in memory."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []
        self.data: list[Any] = []

    def info(self, message: str) -> None:
        self.messages.append(("info", message))

    def notice(self, message: str) -> None:
        self.messages.append(("notice", message))

    def success(self, message: str) -> None:
        self.messages.append(("success", message))

    def warning(self, message: str) -> None:
        self.messages.append(("warning", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    def debug(self, message: str) -> None:
        self.messages.append(("debug", message))

    def print_data(self, text: str) -> None:
        self.data.append(text)

    def print_json(self, data: Any) -> None:
        self.data.append(data)

    def of(self, level: str) -> list[str]:
        return [msg for lvl, msg in self.messages if lvl == level]


class FakeEngine:
    """In-memory :class:`~specgen.engine.GenerationEngine`.

    ``read_config`` reads real files (so missing-file behaviour matches the
    default engine), ``ensure_defaults`` fills ``name`` and the package
    names, and ``generate_server`` only records its arguments.
    """

    def __init__(self, generate_error: Optional[Exception] = None) -> None:
        self.generate_error = generate_error
        self.calls: list[tuple[str, list[str], list[str], GenerationOptions]] = []
        self.defaults_calls = 0
        self.config_reads: list[Path] = []

    def read_config(self, path: Path) -> dict[str, Any]:
        self.config_reads.append(path)
        try:
            return load_document(path)
        except DocumentLoadError as exc:
            raise ConfigReadError(str(exc)) from exc

    def ensure_defaults(self, opts: GenerationOptions, minimal: bool) -> GenerationOptions:
        self.defaults_calls += 1
        update: dict[str, Any] = {}
        if not opts.api_package:
            update["api_package"] = "operations"
        if not minimal and not opts.name:
            update["name"] = "FakeApp"
        return opts.model_copy(update=update, deep=True)

    def configure_opts(
        self, definition: LanguageDefinition, opts: GenerationOptions
    ) -> GenerationOptions:
        return definition.configure_opts(opts)

    def generate_server(
        self,
        name: str,
        models: list[str],
        operations: list[str],
        opts: GenerationOptions,
    ) -> None:
        self.calls.append((name, models, operations, opts))
        if self.generate_error is not None:
            raise self.generate_error


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def fake_engine() -> FakeEngine:
    return FakeEngine()


# ---------------------------------------------------------------------------
# Files and environment
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test inside tmp_path with debug toggles and XDG dirs isolated.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    for var in ["DEBUG", "SPECGEN_DEBUG"]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def petstore_file(isolated_env: Path) -> Path:
    """Petstore spec written to ``./swagger.json`` in the isolated directory."""
    path = isolated_env / "swagger.json"
    path.write_text(json.dumps(PETSTORE_SPEC), encoding="utf-8")
    return path


@pytest.fixture
def overlay_file(isolated_env: Path):
    """Factory writing an overlay document to ``<tmp>/<name>`` as YAML text."""

    def _write(text: str, name: str = "overlay.yaml") -> Path:
        path = isolated_env / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
