"""Config file commands."""

import typer

from cli.config import get_config_path, init_config, load_config, validate_config
from cli.output import error_message, format_yaml, success_message
from schemac.introspection import sanitize_connection_string

app = typer.Typer(help="Manage the schemac config file")


@app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite an existing config file"),
) -> None:
    """Create a config file with default values.

    Example:
        schemac config init
    """
    try:
        path = init_config(force=force)
    except FileExistsError as e:
        error_message(str(e), hint="Use --force to overwrite it")
        raise typer.Exit(1) from e

    success_message(f"Config written to {path}")


@app.command("show")
def config_show() -> None:
    """Show the active config with passwords masked, and report problems."""
    try:
        config = load_config()
    except ValueError as e:
        error_message(str(e), hint=f"Fix or recreate {get_config_path()}")
        raise typer.Exit(1) from e

    data = config.model_dump(by_alias=True)
    data["connections"] = {name: sanitize_connection_string(url) for name, url in config.connections.items()}
    typer.echo(f"# {get_config_path()}")
    typer.echo(format_yaml(data))

    errors = validate_config(config)
    for problem in errors:
        error_message(problem)
    if errors:
        raise typer.Exit(1)
