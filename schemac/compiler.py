"""Compile table AST nodes into normalized schemas.

The compiler never looks at which dialect is active: it resolves a visitor once
per pass and sends every node through it.
"""

import logging
from collections.abc import Iterable

from schemac.ast import ColumnNode, TableNode
from schemac.dialects import DialectVisitor, get_visitor
from schemac.dialects.base import Options
from schemac.errors import StructuralError
from schemac.models import Field, FieldMeta, ForeignKey, Index, PrimaryKey, Schema
from schemac.types import Sentinel, UnmappedDefault, is_unmapped

logger = logging.getLogger(__name__)


def resolve_visitor(dialect: str | DialectVisitor) -> DialectVisitor:
    """Return the visitor for a dialect name, or the visitor itself"""
    if isinstance(dialect, DialectVisitor):
        return dialect
    return get_visitor(dialect)


def compile_table(table: TableNode, dialect: str | DialectVisitor, options: Options = None) -> Schema:
    """Compile one table into a Schema.

    Args:
        table: Catalog facts for the table
        dialect: Dialect name (e.g. 'postgresql') or a visitor instance
        options: Dialect options, passed through to the visitor

    Returns:
        Schema with fields in column order and the primary key in key order

    Raises:
        StructuralError: If the table or one of its nodes is malformed
        UnsupportedDialectError: If the dialect name is not registered
    """
    if not isinstance(table, TableNode):
        raise StructuralError(f"Expected TableNode, got {type(table).__name__}")

    visitor = resolve_visitor(dialect)
    logger.debug(f"Compiling table '{table.name}' with {visitor.name} visitor")

    key_columns = set(table.primary_key)
    foreign_key_columns = {column for fk in table.foreign_keys for column in fk.columns}

    fields = [
        _compile_column(table.name, column, visitor, options, key_columns, foreign_key_columns)
        for column in table.columns
    ]

    return Schema(
        source=table.name,
        primary_key=_build_primary_key(table, fields),
        foreign_keys=tuple(
            ForeignKey(
                columns=fk.columns,
                referenced_table=fk.referenced_table,
                referenced_columns=fk.referenced_columns,
                name=fk.name,
            )
            for fk in table.foreign_keys
        ),
        fields=tuple(fields),
        indices=tuple(Index(name=index.name, columns=index.columns, unique=index.unique) for index in table.indices),
    )


def compile_tables(
    tables: Iterable[TableNode],
    dialect: str | DialectVisitor,
    options: Options = None,
) -> tuple[dict[str, Schema], dict[str, StructuralError]]:
    """Compile several tables, isolating failures per table.

    Args:
        tables: Tables to compile
        dialect: Dialect name or visitor instance
        options: Dialect options

    Returns:
        Tuple of (schemas by table name, errors by table name)
    """
    visitor = resolve_visitor(dialect)
    schemas: dict[str, Schema] = {}
    failures: dict[str, StructuralError] = {}

    for table in tables:
        name = getattr(table, "name", repr(table))
        try:
            schemas[name] = compile_table(table, visitor, options)
        except StructuralError as e:
            logger.warning(f"Skipping table '{name}': {e}")
            failures[name] = e

    if failures:
        logger.info(
            f"Compiled {len(schemas)}/{len(schemas) + len(failures)} tables. Failed tables: {', '.join(failures)}"
        )

    return schemas, failures


def _compile_column(
    table_name: str,
    column: ColumnNode,
    visitor: DialectVisitor,
    options: Options,
    key_columns: set[str],
    foreign_key_columns: set[str],
) -> Field:
    field_type = visitor.visit(column.type, options)
    if is_unmapped(field_type):
        logger.warning(f"Unmapped type for column '{table_name}.{column.name}': {column.type}")

    default = visitor.visit(column.default, options)
    if isinstance(default, UnmappedDefault):
        logger.warning(f"Unparsed default for column '{table_name}.{column.name}': {default.raw!r}")

    meta = FieldMeta(
        source=column.name,
        nullable=column.nullable,
        default=default,
        check_constraints=column.check_constraints,
        primary_key=column.primary_key or column.name in key_columns,
        foreign_key=column.name in foreign_key_columns,
        association=False,
        function_default=default is Sentinel.FUNCTION_DEFAULT,
    )
    return Field(name=column.name, type=field_type, meta=meta)


def _build_primary_key(table: TableNode, fields: list[Field]) -> PrimaryKey:
    by_name = {field.name: field for field in fields}

    if not table.primary_key:
        # No key list from the catalog: fall back to flagged columns in column order
        return PrimaryKey(fields=tuple(field for field in fields if field.meta.primary_key))

    missing = [name for name in table.primary_key if name not in by_name]
    if missing:
        raise StructuralError(f"Primary key of '{table.name}' names unknown columns: {', '.join(missing)}")

    return PrimaryKey(fields=tuple(by_name[name] for name in table.primary_key))
