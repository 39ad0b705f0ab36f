"""Config commands -- view and create the user configuration.

The configuration holds the naming conventions the path-tree builder applies
(prefix rules and default-value tables, see
:class:`~apitree.models.ParserConfig`) and output preferences.
"""

from __future__ import annotations

import typer

from apitree.output import error, info, print_json, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Show the effective configuration.

    Example::

        apitree config show
        apitree --config ./glip.json config show
    """
    from apitree.config import get_config_dir

    info(f"Config directory: {get_config_dir()}")
    print_json(ctx.obj["config"].model_dump(mode="json"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file."),
) -> None:
    """Write the default configuration to the user config file.

    Edit the written file to adapt the prefix rules and default tables to
    another API's naming conventions.
    """
    from apitree.config import save_global_config, user_config_path
    from apitree.models import GlobalConfig

    path = user_config_path()
    if path.is_file() and not force:
        error(f"{path} already exists (use --force to overwrite)")
        raise typer.Exit(code=2)
    save_global_config(GlobalConfig())
    success(f"Wrote {path}")
