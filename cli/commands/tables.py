"""Catalog listing commands."""

import json

import typer
from sqlalchemy.exc import SQLAlchemyError

from cli.config import get_compile_defaults, resolve_connection
from cli.output import error_message
from schemac.dialects import available_dialects
from schemac.errors import UnsupportedDialectError
from schemac.introspection import list_tables


def tables_command(
    connection: str = typer.Argument(..., help="Database connection string or @name from config"),
    database_schema: str | None = typer.Option(None, "--schema", help="Database schema name (optional)"),
    output_format: str = typer.Option("text", "--format", "-f", help="Output format: text or json"),
) -> None:
    """List the tables schemac can compile.

    Example:
        schemac tables @prod --schema public
    """
    try:
        if database_schema is None:
            database_schema = get_compile_defaults().schema_name
        table_names = list_tables(resolve_connection(connection), schema=database_schema)
    except KeyError as e:
        error_message(e.args[0], hint="Define the connection in the config file or pass a URL")
        raise typer.Exit(1) from e
    except (UnsupportedDialectError, ValueError) as e:
        error_message(str(e))
        raise typer.Exit(1) from e
    except SQLAlchemyError as e:
        error_message(f"Database error: {e}", hint="Check the connection string and permissions")
        raise typer.Exit(1) from e

    if output_format == "json":
        typer.echo(json.dumps(table_names, indent=2))
        return

    if not table_names:
        typer.echo("No tables found.")
        return

    typer.echo(f"Tables ({len(table_names)} total):")
    for name in table_names:
        typer.echo(f"  {name}")


def dialects_command() -> None:
    """List the registered dialects."""
    for name in available_dialects():
        typer.echo(name)
