"""Generate commands -- produce code from a Swagger/OpenAPI spec.

Provides the ``specgen generate`` sub-command group. ``generate server``
collects its flags into a frozen
:class:`~specgen.models.ServerCommandOptions` and runs
:func:`~specgen.pipeline.run_server` against the default engine.

Only flags that were actually supplied (on the command line or through an
environment variable) are passed to the model, so
``model_fields_set`` marks them as explicit and the config overlay cannot
override them.
"""

from __future__ import annotations

from typing import Any, Optional

import typer

from specgen.exceptions import SpecgenError
from specgen.models import (
    DEFAULT_API_PACKAGE,
    DEFAULT_CLIENT_PACKAGE,
    DEFAULT_MODEL_PACKAGE,
    DEFAULT_SCHEME,
    DEFAULT_SERVER_PACKAGE,
    DEFAULT_SPEC,
    DEFAULT_TARGET,
    ServerCommandOptions,
)
from specgen.output import error, get_output


generate_app = typer.Typer(no_args_is_help=True)


def _is_default(source: Any) -> bool:
    # By name: typer can bundle its own click with a separate ParameterSource enum.
    return source is None or source.name == "DEFAULT"


def supplied_params(ctx: typer.Context) -> dict[str, Any]:
    """Return the parameters of *ctx* that did not come from their defaults."""
    return {
        name: value
        for name, value in ctx.params.items()
        if value is not None and not _is_default(ctx.get_parameter_source(name))
    }


@generate_app.command("server")
def server_command(
    ctx: typer.Context,
    spec: str = typer.Option(
        DEFAULT_SPEC, "--spec", "-f", help="the spec file to use"
    ),
    api_package: str = typer.Option(
        DEFAULT_API_PACKAGE, "--api-package", "-a",
        help="the package to save the operations",
    ),
    model_package: str = typer.Option(
        DEFAULT_MODEL_PACKAGE, "--model-package", "-m",
        help="the package to save the models",
    ),
    server_package: str = typer.Option(
        DEFAULT_SERVER_PACKAGE, "--server-package", "-s",
        help="the package to save the server specific code",
    ),
    client_package: str = typer.Option(
        DEFAULT_CLIENT_PACKAGE, "--client-package", "-c",
        help="the package to save the client specific code",
    ),
    target: str = typer.Option(
        DEFAULT_TARGET, "--target", "-t",
        help="the base directory for generating the files",
    ),
    template_dir: Optional[str] = typer.Option(
        None, "--template-dir", "-T", help="alternative template override directory"
    ),
    config_file: Optional[str] = typer.Option(
        None, "--config-file", "-C",
        help="configuration file to use for overriding template options",
    ),
    name: Optional[str] = typer.Option(
        None, "--name", "-A",
        help="the name of the application, defaults to a mangled value of info.title",
    ),
    operations: Optional[list[str]] = typer.Option(
        None, "--operation", "-O",
        help="specify an operation to include, repeat for multiple",
    ),
    tags: Optional[list[str]] = typer.Option(
        None, "--tags", help="the tags to include, if not specified defaults to all"
    ),
    principal: Optional[str] = typer.Option(
        None, "--principal", "-P", help="the model to use for the security principal"
    ),
    default_scheme: str = typer.Option(
        DEFAULT_SCHEME, "--default-scheme", help="the default scheme for this API"
    ),
    models: Optional[list[str]] = typer.Option(
        None, "--model", "-M", help="specify a model to include, repeat for multiple"
    ),
    skip_models: bool = typer.Option(
        False, "--skip-models",
        help="no models will be generated when this flag is specified",
    ),
    skip_operations: bool = typer.Option(
        False, "--skip-operations",
        help="no operations will be generated when this flag is specified",
    ),
    skip_support: bool = typer.Option(
        False, "--skip-support",
        help="no supporting files will be generated when this flag is specified",
    ),
    exclude_main: bool = typer.Option(
        False, "--exclude-main",
        help="exclude main function, so just generate the library",
    ),
    exclude_spec: bool = typer.Option(
        False, "--exclude-spec", help="don't embed the swagger specification"
    ),
    with_context: bool = typer.Option(
        False, "--with-context", help="handlers get a context as first arg"
    ),
    dump_data: bool = typer.Option(
        False, "--dump-data",
        help="when present dumps the json for the template generator instead of generating files",
    ),
) -> None:
    """Generate an entire server application.

    Example::

        specgen generate server -f ./swagger.yaml -t ./gen -A petstore
        specgen generate server --skip-models -C overlay.yaml
        specgen generate server --dump-data > payload.json
    """
    from specgen.engine import DefaultEngine
    from specgen.pipeline import run_server

    cmd = ServerCommandOptions(**supplied_params(ctx))
    sink = get_output()
    try:
        run_server(cmd, DefaultEngine(sink=sink), sink)
    except SpecgenError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
