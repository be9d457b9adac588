"""Read catalogs from live databases and compile them."""

import logging

from sqlalchemy.exc import DatabaseError, NoSuchTableError, OperationalError

from schemac.ast import TableNode
from schemac.compiler import compile_table
from schemac.dialects import get_visitor
from schemac.dialects.base import Options
from schemac.errors import SchemacError, UnsupportedDialectError
from schemac.introspection.base import CatalogReader
from schemac.introspection.engine import create_database_engine, sanitize_connection_string
from schemac.introspection.postgres import PostgresCatalogReader
from schemac.introspection.sqlite import SqliteCatalogReader
from schemac.models import Schema

logger = logging.getLogger(__name__)

_READERS: dict[str, type[CatalogReader]] = {
    PostgresCatalogReader.dialect: PostgresCatalogReader,
    SqliteCatalogReader.dialect: SqliteCatalogReader,
}


def get_reader(dialect: str) -> CatalogReader:
    """Return the catalog reader for a SQLAlchemy dialect name.

    Raises:
        UnsupportedDialectError: If no reader exists for the dialect
    """
    reader_class = _READERS.get(dialect)
    if reader_class is None:
        raise UnsupportedDialectError(
            f"Unsupported database dialect: {dialect}. Must be one of: {', '.join(sorted(_READERS))}"
        )
    return reader_class()


def list_tables(connection_string: str, schema: str | None = None) -> list[str]:
    """List table names in a database or schema, sorted.

    Args:
        connection_string: Database connection string
        schema: Database schema name (optional, defaults to 'public' for PostgreSQL)

    Returns:
        Sorted table names
    """
    engine = create_database_engine(connection_string)

    try:
        reader = get_reader(engine.dialect.name)
        with engine.connect() as conn:
            return reader.list_tables(conn, schema)
    finally:
        engine.dispose()


def introspect_table(connection_string: str, table_name: str, schema: str | None = None) -> TableNode:
    """Read one table's catalog facts.

    Args:
        connection_string: Database connection string
        table_name: Table to read
        schema: Database schema name (optional, defaults to 'public' for PostgreSQL)

    Returns:
        TableNode with raw type names and default expressions

    Raises:
        ValueError: If the table is not found
        UnsupportedDialectError: If the database dialect has no reader
    """
    engine = create_database_engine(connection_string)

    try:
        reader = get_reader(engine.dialect.name)
        with engine.connect() as conn:
            return reader.read_table(conn, table_name, schema)
    finally:
        engine.dispose()


def compile_database_table(
    connection_string: str,
    table_name: str,
    schema: str | None = None,
    options: Options = None,
) -> Schema:
    """Read and compile one table.

    Args:
        connection_string: Database connection string
        table_name: Table to compile
        schema: Database schema name (optional)
        options: Dialect options passed to the visitor

    Returns:
        Compiled Schema
    """
    engine = create_database_engine(connection_string)

    try:
        reader = get_reader(engine.dialect.name)
        visitor = get_visitor(reader.dialect)
        with engine.connect() as conn:
            table = reader.read_table(conn, table_name, schema)
        return compile_table(table, visitor, options)
    finally:
        engine.dispose()


def compile_database(
    connection_string: str,
    schema: str | None = None,
    tables: list[str] | None = None,
    options: Options = None,
) -> tuple[dict[str, Schema], dict[str, str]]:
    """Read and compile several tables, isolating failures per table.

    Args:
        connection_string: Database connection string
        schema: Database schema name (optional)
        tables: Tables to compile (default: every table in the schema)
        options: Dialect options passed to the visitor

    Returns:
        Tuple of (schemas by table name, error messages by table name)
    """
    engine = create_database_engine(connection_string)
    schemas: dict[str, Schema] = {}
    failures: dict[str, str] = {}

    try:
        reader = get_reader(engine.dialect.name)
        visitor = get_visitor(reader.dialect)

        with engine.connect() as conn:
            if tables is None:
                tables = reader.list_tables(conn, schema)

            for table_name in tables:
                try:
                    table = reader.read_table(conn, table_name, schema)
                    schemas[table_name] = compile_table(table, visitor, options)
                except (SchemacError, ValueError) as e:
                    logger.warning(f"Skipping table '{table_name}': {e}")
                    failures[table_name] = str(e)
                except (NoSuchTableError, DatabaseError, OperationalError) as e:
                    # Table may have been dropped, permissions issue, etc.
                    logger.warning(f"Could not read table '{table_name}': {e}")
                    failures[table_name] = str(e)
                except Exception as e:
                    logger.error(f"Unexpected error compiling table '{table_name}': {e}", exc_info=True)
                    failures[table_name] = str(e)
    finally:
        engine.dispose()

    if failures:
        logger.info(
            f"Compiled {len(schemas)}/{len(schemas) + len(failures)} tables from "
            f"{sanitize_connection_string(connection_string)}. Failed tables: {', '.join(failures)}"
        )

    return schemas, failures
