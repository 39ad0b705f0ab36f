"""Parse commands -- run the parser and show what it produced.

* ``apitree parse SPEC`` -- the full result (models + paths) as JSON, the
  input of the code generator.
* ``apitree paths SPEC`` -- the path tree, one row per node.
* ``apitree models SPEC`` -- the model list, one row per model.

Every command loads *SPEC* (file, URL or ``-``), validates its OpenAPI
version and runs :func:`~apitree.parser.parse` with the parser settings of
the effective configuration.
"""

from __future__ import annotations

import typer

from apitree.exceptions import ApitreeError
from apitree.models import GlobalConfig, ParseResult
from apitree.output import (
    OutputFormat,
    debug,
    error,
    get_output,
    print_json,
    print_table,
    success,
)


def _run_parser(ctx: typer.Context, source: str) -> ParseResult:
    """Load *source* and parse it with the context's configuration.

    Raises:
        typer.Exit: With the error's exit code when loading or parsing fails.
    """
    from apitree.parser import load_spec, parse, validate_openapi_version

    config: GlobalConfig = ctx.obj["config"]
    try:
        raw = load_spec(source)
        version = validate_openapi_version(raw)
        debug(f"OpenAPI {version}, {len(raw.get('paths') or {})} endpoints")
        return parse(raw, config.parser)
    except ApitreeError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


def parse_command(
    ctx: typer.Context,
    spec: str = typer.Argument(help="OpenAPI document: file path, URL, or '-' for stdin."),
) -> None:
    """Parse SPEC and print models and paths as JSON.

    Example::

        apitree parse rc-platform.yml -o parsed.json
    """
    result = _run_parser(ctx, spec)
    print_json(result.to_json_dict())
    output_file = ctx.obj.get("output_file")
    if output_file:
        success(
            f"Wrote {len(result.models)} models and {len(result.paths)} paths to {output_file}"
        )


def paths_command(
    ctx: typer.Context,
    spec: str = typer.Argument(help="OpenAPI document: file path, URL, or '-' for stdin."),
    bridges: bool = typer.Option(
        True, "--bridges/--no-bridges", help="Include operation-less bridge nodes."
    ),
) -> None:
    """Show the path tree built from SPEC.

    Example::

        apitree paths rc-platform.yml --no-bridges
        apitree --json paths rc-platform.yml
    """
    result = _run_parser(ctx, spec)
    nodes = [n for n in result.paths if bridges or not n.is_bridge]

    if get_output().format == OutputFormat.JSON or ctx.obj.get("output_file"):
        print_json([n.model_dump(mode="json", by_alias=True, exclude_none=True) for n in nodes])
        return

    rows = [
        [
            "/".join(node.paths),
            node.parameter or "-",
            node.default_parameter or "-",
            ", ".join(op.role for op in node.operations) or "(bridge)",
        ]
        for node in nodes
    ]
    print_table(
        ["Path", "Parameter", "Default", "Operations"],
        rows,
        title=f"Path tree ({len(rows)} nodes)",
    )


def models_command(
    ctx: typer.Context,
    spec: str = typer.Argument(help="OpenAPI document: file path, URL, or '-' for stdin."),
) -> None:
    """Show the data models extracted from SPEC.

    Example::

        apitree models rc-platform.yml
    """
    result = _run_parser(ctx, spec)

    if get_output().format == OutputFormat.JSON or ctx.obj.get("output_file"):
        print_json(
            [m.model_dump(mode="json", by_alias=True, exclude_none=True) for m in result.models]
        )
        return

    rows = [
        [model.name, str(len(model.fields)), (model.description or "-").splitlines()[0]]
        for model in result.models
    ]
    print_table(["Model", "Fields", "Description"], rows, title=f"Models ({len(rows)})")
