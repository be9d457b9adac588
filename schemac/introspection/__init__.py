"""Catalog readers: the database-facing producer of AST nodes.

This package provides utilities for reading table catalogs through SQLAlchemy
and compiling them with the matching dialect visitor.
"""

from schemac.introspection.base import CatalogReader
from schemac.introspection.catalog import (
    compile_database,
    compile_database_table,
    get_reader,
    introspect_table,
    list_tables,
)
from schemac.introspection.engine import create_database_engine, sanitize_connection_string
from schemac.introspection.postgres import PostgresCatalogReader
from schemac.introspection.sqlite import SqliteCatalogReader

__all__ = [
    # Engine
    "create_database_engine",
    "sanitize_connection_string",
    # Readers
    "CatalogReader",
    "PostgresCatalogReader",
    "SqliteCatalogReader",
    "get_reader",
    # Catalog
    "list_tables",
    "introspect_table",
    "compile_database_table",
    "compile_database",
]
