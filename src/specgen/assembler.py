"""Turn command flags into the final :class:`~specgen.models.GenerationOptions`.

The options go through three stages, each producing a new instance:

1. :func:`assemble` -- a pure mapping from :class:`ServerCommandOptions`.
   Skip/exclude switches are inverted into include switches.
2. :func:`resolve_defaults` -- the engine fills fields left empty.
3. :func:`merge` -- the config overlay (if any) is laid over the defaults,
   except on fields the user set explicitly on the command line.

Precedence is therefore explicit flag > config overlay > engine default.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from pydantic import ValidationError

from specgen.engine import GenerationEngine
from specgen.exceptions import OverlayDecodeError
from specgen.models import GenerationOptions, LanguageDefinition, ServerCommandOptions


FLAG_TARGETS: dict[str, tuple[str, ...]] = {
    "spec": ("spec",),
    "target": ("target",),
    "api_package": ("api_package",),
    "model_package": ("model_package",),
    "server_package": ("server_package",),
    "client_package": ("client_package",),
    "template_dir": ("template_dir",),
    "name": ("name",),
    "operations": ("operations",),
    "tags": ("tags",),
    "principal": ("principal",),
    "default_scheme": ("default_scheme",),
    "models": ("models",),
    "skip_models": ("include_model", "include_validator"),
    "skip_operations": ("include_handler", "include_parameters", "include_responses"),
    "skip_support": ("include_support",),
    "exclude_main": ("include_main",),
    "exclude_spec": ("exclude_spec",),
    "with_context": ("with_context",),
    "dump_data": ("dump_data",),
}
"""Command flag -> the :class:`GenerationOptions` fields it feeds."""


def assemble(cmd: ServerCommandOptions) -> GenerationOptions:
    """Map command flags onto a fresh :class:`GenerationOptions`.

    Performs no I/O and cannot fail.
    """
    return GenerationOptions(
        spec=cmd.spec,
        target=cmd.target,
        api_package=cmd.api_package,
        model_package=cmd.model_package,
        server_package=cmd.server_package,
        client_package=cmd.client_package,
        principal=cmd.principal or "",
        default_scheme=cmd.default_scheme,
        include_model=not cmd.skip_models,
        include_validator=not cmd.skip_models,
        include_handler=not cmd.skip_operations,
        include_parameters=not cmd.skip_operations,
        include_responses=not cmd.skip_operations,
        include_main=not cmd.exclude_main,
        include_support=not cmd.skip_support,
        exclude_spec=cmd.exclude_spec,
        template_dir=cmd.template_dir or "",
        with_context=cmd.with_context,
        dump_data=cmd.dump_data,
        models=list(cmd.models),
        operations=list(cmd.operations),
        tags=list(cmd.tags),
        name=cmd.name or "",
    )


def explicit_fields(cmd: ServerCommandOptions) -> frozenset[str]:
    """Return the option fields fed by flags the user actually supplied."""
    fields: set[str] = set()
    for flag in cmd.model_fields_set:
        fields.update(FLAG_TARGETS.get(flag, ()))
    return frozenset(fields)


def resolve_defaults(
    engine: GenerationEngine,
    assembled: GenerationOptions,
    minimal: bool = False,
) -> GenerationOptions:
    """Let the engine fill the empty fields of a copy of *assembled*."""
    return engine.ensure_defaults(assembled.model_copy(deep=True), minimal)


def decode_overlay(document: Mapping[str, Any]) -> LanguageDefinition:
    """Decode a loaded config document into a :class:`LanguageDefinition`.

    Raises:
        OverlayDecodeError: If the document does not match the structure.
    """
    try:
        return LanguageDefinition.model_validate(dict(document))
    except ValidationError as exc:
        raise OverlayDecodeError(f"Invalid config overlay: {exc}") from exc


def overlay_changes(
    engine: GenerationEngine,
    definition: LanguageDefinition,
    defaults: GenerationOptions,
) -> dict[str, Any]:
    """Return the fields *definition* rewrites, with their new values."""
    configured = engine.configure_opts(definition, defaults.model_copy(deep=True))
    before = defaults.model_dump()
    after = configured.model_dump()
    return {field: value for field, value in after.items() if before[field] != value}


def shadowed_overrides(
    assembled: GenerationOptions,
    overlay: Optional[Mapping[str, Any]],
    explicit: frozenset[str],
) -> list[str]:
    """Overlay fields that :func:`merge` will drop because a flag set them."""
    if not overlay:
        return []
    current = assembled.model_dump()
    return sorted(
        field for field, value in overlay.items()
        if field in explicit and current[field] != value
    )


def merge(
    assembled: GenerationOptions,
    defaults: GenerationOptions,
    overlay: Optional[Mapping[str, Any]] = None,
    explicit: frozenset[str] = frozenset(),
) -> GenerationOptions:
    """Combine the three option stages into the final options.

    Starts from *defaults* and applies *overlay* to every field not listed in
    *explicit*. Explicit fields keep the user's value from *assembled* (or
    the engine default when the user passed an empty value). With no
    overlay the result equals *defaults*.
    """
    data = defaults.model_dump()
    for field, value in (overlay or {}).items():
        if field in explicit:
            data[field] = getattr(assembled, field) or data[field]
        else:
            data[field] = value
    return GenerationOptions.model_validate(data)
