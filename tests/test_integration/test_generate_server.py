"""Integration tests for ``specgen generate server``.

Exercises the command through its own Typer app with the real default
engine. Rendering is replaced by a recording renderer (patched in place of
entry-point discovery) so the tests can inspect the final options.
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest
import typer
from typer.testing import CliRunner

from specgen import app as app_module
from specgen import engine as engine_module
from specgen import pipeline as pipeline_module
from specgen.app import main, main_callback
from specgen.commands.generate import generate_app, supplied_params
from specgen.exceptions import ConfigReadError
from specgen.exit_codes import (
    EXIT_CONFIG_READ,
    EXIT_DEFAULTS_RESOLUTION,
    EXIT_GENERATION_FAILURE,
    EXIT_GENERIC_FAILURE,
    EXIT_OVERLAY_DECODE,
    EXIT_SUCCESS,
)
from specgen.models import ServerCommandOptions


def _build_app() -> typer.Typer:
    """Root app with the real callback and the generate group attached."""
    app = typer.Typer(name="specgen", no_args_is_help=True, add_completion=False)
    app.callback()(main_callback)
    app.add_typer(generate_app, name="generate")
    return app


@pytest.fixture
def app() -> typer.Typer:
    return _build_app()


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def renderer(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    """Recording renderer installed in place of entry-point lookup."""
    mock = MagicMock()
    monkeypatch.setattr(engine_module, "load_renderer", lambda name: mock)
    return mock


def _generate(runner: CliRunner, app: typer.Typer, *args: str):
    return runner.invoke(app, ["--no-color", "generate", "server", *args])


def _options(renderer: MagicMock) -> Any:
    renderer.assert_called_once()
    return renderer.call_args.args[3]


# ---------------------------------------------------------------------------
# Flag surface
# ---------------------------------------------------------------------------


class TestFlags:
    def test_defaults(self, runner, app, renderer, petstore_file: Path) -> None:
        result = _generate(runner, app)
        assert result.exit_code == 0, result.output

        name, models, operations, opts = renderer.call_args.args
        assert (name, models, operations) == ("", [], [])
        assert opts.spec == "./swagger.json"
        assert opts.name == "SwaggerPetstore"
        assert opts.api_package == "operations"
        assert opts.default_scheme == "http"
        assert opts.include_model and opts.include_handler and opts.include_main
        assert "Generation completed!" in result.output

    def test_short_flags(self, runner, app, renderer, petstore_file: Path) -> None:
        result = _generate(
            runner, app,
            "-f", "swagger.json", "-a", "ops", "-m", "defs", "-s", "srv",
            "-c", "cli", "-t", "gen", "-T", "tpl", "-A", "petstore",
            "-P", "models.User", "-M", "Pet", "-M", "Owner",
            "-O", "listPets", "-O", "addPet",
        )
        assert result.exit_code == 0, result.output

        name, models, operations, opts = renderer.call_args.args
        assert name == "petstore"
        assert models == ["Pet", "Owner"]
        assert operations == ["listPets", "addPet"]
        assert (opts.api_package, opts.model_package) == ("ops", "defs")
        assert (opts.server_package, opts.client_package) == ("srv", "cli")
        assert opts.target == "gen"
        assert opts.template_dir == "tpl"
        assert opts.principal == "models.User"
        assert "go get -u -f gen/..." in result.output

    def test_long_flags(self, runner, app, renderer, petstore_file: Path) -> None:
        result = _generate(
            runner, app,
            "--spec", "swagger.json", "--name", "petstore",
            "--tags", "pets", "--tags", "store", "--default-scheme", "https",
            "--skip-models", "--skip-support", "--exclude-main",
            "--exclude-spec", "--with-context",
        )
        assert result.exit_code == 0, result.output

        opts = _options(renderer)
        assert opts.tags == ["pets", "store"]
        assert opts.default_scheme == "https"
        assert opts.include_model is False
        assert opts.include_validator is False
        assert opts.include_support is False
        assert opts.include_main is False
        assert opts.exclude_spec is True
        assert opts.with_context is True
        assert opts.include_handler is True

    def test_version(self, runner, app) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == EXIT_SUCCESS
        assert "specgen" in result.output


# ---------------------------------------------------------------------------
# Typed vs. defaulted flags
# ---------------------------------------------------------------------------


class _Source(enum.Enum):
    """Stand-in for a ParameterSource enum from a different click copy."""

    COMMANDLINE = enum.auto()
    ENVIRONMENT = enum.auto()
    DEFAULT = enum.auto()


class _FakeContext:
    def __init__(self, params: dict[str, Any], sources: dict[str, Any]) -> None:
        self.params = params
        self._sources = sources

    def get_parameter_source(self, name: str) -> Any:
        return self._sources.get(name)


class TestSuppliedFlags:
    @pytest.fixture
    def commands(self, monkeypatch: pytest.MonkeyPatch) -> list[ServerCommandOptions]:
        seen: list[ServerCommandOptions] = []
        monkeypatch.setattr(
            pipeline_module, "run_server", lambda cmd, engine, sink: seen.append(cmd)
        )
        return seen

    def test_untyped_flags_are_not_explicit(self, runner, app, commands, isolated_env: Path) -> None:
        result = _generate(runner, app)
        assert result.exit_code == 0, result.output

        [cmd] = commands
        assert cmd.model_fields_set == set()
        assert cmd.default_scheme == "http"

    def test_only_typed_flags_are_explicit(self, runner, app, commands, isolated_env: Path) -> None:
        result = _generate(runner, app, "--skip-support", "-t", "gen", "-M", "Pet")
        assert result.exit_code == 0, result.output

        [cmd] = commands
        assert cmd.model_fields_set == {"skip_support", "target", "models"}

    def test_sources_compared_by_name(self) -> None:
        ctx = _FakeContext(
            params={"spec": "a.json", "target": "./", "name": None, "tags": ["x"]},
            sources={
                "spec": _Source.COMMANDLINE,
                "target": _Source.DEFAULT,
                "name": _Source.DEFAULT,
                "tags": _Source.ENVIRONMENT,
            },
        )
        assert supplied_params(ctx) == {"spec": "a.json", "tags": ["x"]}

    def test_overlay_without_flags_raises_no_warning(
        self, runner, app, renderer, petstore_file: Path, overlay_file
    ) -> None:
        overlay_file("options:\n  include_support: false\n  default_scheme: https\n")

        result = _generate(runner, app, "-C", "overlay.yaml")
        assert result.exit_code == 0, result.output

        opts = _options(renderer)
        assert opts.include_support is False
        assert opts.default_scheme == "https"
        assert "Warning" not in result.output


# ---------------------------------------------------------------------------
# Overlay precedence
# ---------------------------------------------------------------------------


class TestOverlay:
    def test_overlay_overrides_defaults(self, runner, app, renderer, petstore_file: Path, overlay_file) -> None:
        overlay_file("options:\n  name: FromConfig\n  include_support: false\n")

        result = _generate(runner, app, "-C", "overlay.yaml")
        assert result.exit_code == 0, result.output

        opts = _options(renderer)
        assert opts.name == "FromConfig"
        assert opts.include_support is False
        assert "trying to read config from" in result.output

    def test_flag_wins_over_overlay(self, runner, app, renderer, petstore_file: Path, overlay_file) -> None:
        overlay_file("options:\n  include_handler: true\n  principal: models.Admin\n")

        result = _generate(
            runner, app, "--skip-operations", "-P", "models.User", "-C", "overlay.yaml"
        )
        assert result.exit_code == 0, result.output

        opts = _options(renderer)
        assert opts.include_handler is False
        assert opts.include_parameters is False
        assert opts.include_responses is False
        assert opts.principal == "models.User"
        assert "include_handler" in result.output
        assert "Warning" in result.output

    def test_flag_left_at_default_is_overridable(self, runner, app, renderer, petstore_file: Path, overlay_file) -> None:
        overlay_file("options:\n  default_scheme: https\n")

        result = _generate(runner, app, "-C", "overlay.yaml")
        assert result.exit_code == 0, result.output
        assert _options(renderer).default_scheme == "https"

    def test_quiet_keeps_debug_dump(
        self, runner, app, renderer, petstore_file: Path, overlay_file, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        overlay_file("options:\n  principal: models.Admin\n")
        monkeypatch.setenv("DEBUG", "1")

        result = runner.invoke(
            app, ["--no-color", "-q", "generate", "server", "-C", "overlay.yaml"]
        )
        assert result.exit_code == 0, result.output
        assert "config document:" in result.output
        assert "principal: models.Admin" in result.output
        assert "trying to read config from" not in result.output


# ---------------------------------------------------------------------------
# Dump data
# ---------------------------------------------------------------------------


class TestDumpData:
    def test_dumps_instead_of_rendering(self, runner, app, petstore_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        load = MagicMock()
        monkeypatch.setattr(engine_module, "load_renderer", load)

        result = _generate(runner, app, "--dump-data", "-M", "Pet")
        assert result.exit_code == 0, result.output
        assert '"name": "SwaggerPetstore"' in result.output
        assert '"Pet"' in result.output
        load.assert_not_called()


# ---------------------------------------------------------------------------
# Failures and exit codes
# ---------------------------------------------------------------------------


class TestFailures:
    def test_missing_config(self, runner, app, renderer, petstore_file: Path) -> None:
        result = _generate(runner, app, "-C", "absent.yaml")
        assert result.exit_code == EXIT_CONFIG_READ
        assert "absent.yaml" in result.output
        renderer.assert_not_called()

    def test_bad_overlay(self, runner, app, renderer, petstore_file: Path, overlay_file) -> None:
        overlay_file("templates: []\n")
        result = _generate(runner, app, "-C", "overlay.yaml")
        assert result.exit_code == EXIT_OVERLAY_DECODE
        renderer.assert_not_called()

    def test_missing_spec(self, runner, app, renderer, isolated_env: Path) -> None:
        result = _generate(runner, app, "-f", "nope.json")
        assert result.exit_code == EXIT_DEFAULTS_RESOLUTION
        renderer.assert_not_called()

    def test_missing_spec_with_name_given(self, runner, app, renderer, isolated_env: Path) -> None:
        result = _generate(runner, app, "-f", "nope.json", "-A", "app")
        assert result.exit_code == 0, result.output

    def test_no_renderer(self, runner, app, petstore_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(engine_module, "discover_renderers", lambda: {})
        result = _generate(runner, app)
        assert result.exit_code == EXIT_GENERATION_FAILURE
        assert "No renderer named 'server'" in result.output
        assert "Generation completed!" not in result.output


class TestMain:
    def test_specgen_error_exit_code(self, isolated_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(app_module, "_setup_signal_handlers", lambda: None)
        monkeypatch.setattr(app_module, "register_commands", lambda: None)
        monkeypatch.setattr(app_module, "app", MagicMock(side_effect=ConfigReadError("bad")))

        with pytest.raises(SystemExit) as excinfo:
            main()
        assert excinfo.value.code == EXIT_CONFIG_READ

    def test_unexpected_error_writes_crash_log(self, isolated_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(app_module, "_setup_signal_handlers", lambda: None)
        monkeypatch.setattr(app_module, "register_commands", lambda: None)
        monkeypatch.setattr(app_module, "app", MagicMock(side_effect=RuntimeError("kaboom")))

        with pytest.raises(SystemExit) as excinfo:
            main()
        assert excinfo.value.code == EXIT_GENERIC_FAILURE

        logs = list((isolated_env / "data").rglob("crash-*.log"))
        assert len(logs) == 1
        assert "kaboom" in logs[0].read_text()
