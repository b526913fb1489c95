"""Canonical Pydantic models shared across all specgen modules.

This is the single source of truth for data shapes in the project. The
models fall into three groups:

**Flag models** -- built once from parsed command-line input and frozen:
    :class:`SharedOptions` and :class:`ServerCommandOptions`. Only the flags
    the user actually typed are passed to the constructor, so
    ``model_fields_set`` tells explicit values apart from defaults.

**Generation options** -- :class:`GenerationOptions`, the bundle consumed
by the generation engine. Every change produces a new instance via
``model_copy`` so each pipeline stage can be compared with the previous one.

**Overlay models** -- :class:`LanguageDefinition` and its template layout
(:class:`SectionOpts`, :class:`TemplateOpts`), decoded from the optional
configuration file.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


DEFAULT_SPEC = "./swagger.json"
DEFAULT_API_PACKAGE = "operations"
DEFAULT_MODEL_PACKAGE = "models"
DEFAULT_SERVER_PACKAGE = "restapi"
DEFAULT_CLIENT_PACKAGE = "client"
DEFAULT_TARGET = "./"
DEFAULT_SCHEME = "http"


# --- Flag Models ---


class SharedOptions(BaseModel):
    """Flags shared by every ``generate`` sub-command.

    Paths are held as opaque strings; nothing here touches the filesystem.
    """

    model_config = ConfigDict(frozen=True)

    spec: str = Field(default=DEFAULT_SPEC, description="the spec file to use")
    api_package: str = Field(
        default=DEFAULT_API_PACKAGE, description="the package to save the operations"
    )
    model_package: str = Field(
        default=DEFAULT_MODEL_PACKAGE, description="the package to save the models"
    )
    server_package: str = Field(
        default=DEFAULT_SERVER_PACKAGE,
        description="the package to save the server specific code",
    )
    client_package: str = Field(
        default=DEFAULT_CLIENT_PACKAGE,
        description="the package to save the client specific code",
    )
    target: str = Field(
        default=DEFAULT_TARGET, description="the base directory for generating the files"
    )
    template_dir: Optional[str] = Field(
        default=None, description="alternative template override directory"
    )
    config_file: Optional[str] = Field(
        default=None,
        description="configuration file to use for overriding template options",
    )


class ServerCommandOptions(SharedOptions):
    """Flags of ``specgen generate server``."""

    name: Optional[str] = Field(
        default=None,
        description="the name of the application, defaults to a mangled value of info.title",
    )
    operations: list[str] = Field(
        default_factory=list,
        description="specify an operation to include, repeat for multiple",
    )
    tags: list[str] = Field(
        default_factory=list,
        description="the tags to include, if not specified defaults to all",
    )
    principal: Optional[str] = Field(
        default=None, description="the model to use for the security principal"
    )
    default_scheme: str = Field(
        default=DEFAULT_SCHEME, description="the default scheme for this API"
    )
    models: list[str] = Field(
        default_factory=list,
        description="specify a model to include, repeat for multiple",
    )
    skip_models: bool = False
    skip_operations: bool = False
    skip_support: bool = False
    exclude_main: bool = False
    exclude_spec: bool = False
    with_context: bool = False
    dump_data: bool = False


# --- Generation Options ---


class TemplateOpts(BaseModel):
    """One template entry of a language layout section."""

    model_config = ConfigDict(extra="forbid")

    name: str
    source: str
    target: str = "."
    file_name: str = ""
    skip_exists: bool = False
    skip_format: bool = False


class SectionOpts(BaseModel):
    """Template layout grouped by the kind of artifact it renders."""

    model_config = ConfigDict(extra="forbid")

    application: list[TemplateOpts] = Field(default_factory=list)
    operations: list[TemplateOpts] = Field(default_factory=list)
    operation_groups: list[TemplateOpts] = Field(default_factory=list)
    models: list[TemplateOpts] = Field(default_factory=list)


class GenerationOptions(BaseModel):
    """Canonical option bundle governing which artifacts the engine produces.

    Built by :func:`~specgen.assembler.assemble`, completed by the engine's
    defaults pass and optionally rewritten by a :class:`LanguageDefinition`.
    The final value of each field follows the precedence
    explicit flag > config overlay > engine default, enforced by
    :func:`~specgen.assembler.merge`. Instances are frozen; every stage
    derives a new one with ``model_copy`` or ``model_validate``.
    """

    model_config = ConfigDict(frozen=True)

    spec: str = ""
    target: str = ""
    api_package: str = ""
    model_package: str = ""
    server_package: str = ""
    client_package: str = ""
    principal: str = ""
    default_scheme: str = ""
    include_model: bool = False
    include_validator: bool = False
    include_handler: bool = False
    include_parameters: bool = False
    include_responses: bool = False
    include_main: bool = False
    include_support: bool = False
    exclude_spec: bool = False
    template_dir: str = ""
    with_context: bool = False
    dump_data: bool = False
    models: list[str] = Field(default_factory=list)
    operations: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    name: str = ""
    sections: SectionOpts = Field(default_factory=SectionOpts)
    language_opts: dict[str, Any] = Field(default_factory=dict)


# --- Overlay ---


class LanguageDefinition(BaseModel):
    """Customisation document loaded from ``--config-file``.

    Example (YAML)::

        layout:
          application:
            - name: main
              source: asset:serverMain
              target: "{{ .Target }}/cmd/{{ .Name }}-server"
              file_name: main.go
        options:
          principal: models.User
          include_support: false

    ``layout`` replaces the template sections, ``language_opts`` is merged
    into the engine's free-form language settings, and ``options`` overrides
    individual :class:`GenerationOptions` fields by name.
    """

    model_config = ConfigDict(extra="forbid")

    layout: Optional[SectionOpts] = None
    language_opts: dict[str, Any] = Field(default_factory=dict)
    options: dict[str, Any] = Field(default_factory=dict)

    def configure_opts(self, opts: GenerationOptions) -> GenerationOptions:
        """Return a copy of *opts* with this definition applied.

        Raises:
            ValueError: If ``options`` names an unknown field or carries a
                value of the wrong type (``pydantic.ValidationError``).
        """
        update: dict[str, Any] = dict(self.options)
        if self.layout is not None:
            update["sections"] = self.layout.model_dump()
        if self.language_opts:
            update["language_opts"] = {**opts.language_opts, **self.language_opts}
        unknown = set(update) - set(GenerationOptions.model_fields)
        if unknown:
            raise ValueError(f"unknown generation option(s): {', '.join(sorted(unknown))}")
        data = opts.model_dump()
        data.update(update)
        return GenerationOptions.model_validate(data)
