"""specgen -- Drive server code generation from Swagger/OpenAPI specs.

This package turns the flags of ``specgen generate server`` and an optional
configuration overlay into a single :class:`~specgen.models.GenerationOptions`
bundle, then hands it to a generation engine. Parsing the spec, rendering
templates and writing files belong to the engine; this package owns the
option handling around it.

Typical workflow::

    specgen generate server --spec ./swagger.json --target ./gen
    specgen generate server -f api.yaml -C overlay.yaml --skip-models

Modules:
    app: Typer application factory and CLI entry point.
    models: Pydantic models for flags, generation options and overlays.
    config: Config-file path resolution and the debug toggle.
    loader: JSON/YAML document loading from files or URLs.
    assembler: Flag-to-options mapping, defaults and overlay merge.
    engine: The generation engine port and its default implementation.
    invoker: Engine invocation and the completion report.
    pipeline: End-to-end ``generate server`` flow.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr diagnostic sink with Rich support.
"""

__version__ = "0.1.0"
