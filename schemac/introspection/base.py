"""Catalog reader base class.

Readers are the only part of schemac that talks to a database. They turn
catalog rows into AST nodes and leave every interpretation of type names and
default expressions to the dialect visitors.
"""

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import ClassVar

from sqlalchemy import inspect
from sqlalchemy.engine import Connection
from sqlalchemy.engine.reflection import Inspector
from sqlalchemy.exc import DatabaseError, NoSuchTableError

from schemac.ast import ColumnNode, ForeignKeyNode, IndexNode, TableNode

logger = logging.getLogger(__name__)


class CatalogReader(ABC):
    """Reads one table's catalog facts into a TableNode.

    Column rows are dialect-specific; keys, foreign keys, indices and check
    constraints come from the SQLAlchemy inspector.
    """

    # SQLAlchemy dialect name, also the name of the matching visitor
    dialect: ClassVar[str]
    default_schema: ClassVar[str | None] = None

    @abstractmethod
    def read_columns(self, connection: Connection, table_name: str, schema: str | None) -> list[ColumnNode]:
        """Read columns in declaration order with raw type names and defaults"""

    def list_tables(self, connection: Connection, schema: str | None = None) -> list[str]:
        inspector = inspect(connection)
        return sorted(inspector.get_table_names(schema=schema or self.default_schema))

    def read_table(self, connection: Connection, table_name: str, schema: str | None = None) -> TableNode:
        """Read a table.

        Raises:
            ValueError: If the table does not exist
        """
        schema = schema or self.default_schema
        inspector = inspect(connection)

        if not inspector.has_table(table_name, schema=schema):
            raise ValueError(f"Table '{table_name}' not found in schema '{schema}' or database")

        columns = self.read_columns(connection, table_name, schema)
        checks = self._read_check_constraints(inspector, table_name, schema)
        if checks:
            columns = [
                replace(column, check_constraints=_checks_for_column(column.name, checks)) for column in columns
            ]

        pk_constraint = inspector.get_pk_constraint(table_name, schema=schema)
        primary_key = tuple(pk_constraint.get("constrained_columns") or ())

        return TableNode(
            name=table_name,
            columns=tuple(columns),
            primary_key=primary_key,
            foreign_keys=tuple(self._read_foreign_keys(inspector, table_name, schema)),
            indices=tuple(self._read_indices(inspector, table_name, schema)),
        )

    def _read_foreign_keys(self, inspector: Inspector, table_name: str, schema: str | None) -> list[ForeignKeyNode]:
        try:
            fks = inspector.get_foreign_keys(table_name, schema=schema)
        except NotImplementedError:
            logger.debug(f"Foreign key introspection not supported for {self.dialect}")
            return []

        return [
            ForeignKeyNode(
                columns=tuple(fk.get("constrained_columns", [])),
                referenced_table=fk["referred_table"],
                referenced_columns=tuple(fk.get("referred_columns", [])),
                name=fk.get("name"),
            )
            for fk in fks
        ]

    def _read_indices(self, inspector: Inspector, table_name: str, schema: str | None) -> list[IndexNode]:
        try:
            indexes = inspector.get_indexes(table_name, schema=schema)
        except NotImplementedError:
            logger.debug(f"Index introspection not supported for {self.dialect}")
            return []

        result = []
        for index in indexes:
            # Expression indexes report None for their computed columns
            columns = tuple(name for name in index.get("column_names", []) if name is not None)
            result.append(IndexNode(name=index["name"], columns=columns, unique=bool(index.get("unique"))))
        return result

    def _read_check_constraints(self, inspector: Inspector, table_name: str, schema: str | None) -> list[str]:
        try:
            constraints = inspector.get_check_constraints(table_name, schema=schema)
        except NotImplementedError:
            logger.debug(f"Check constraint introspection not supported for {self.dialect}")
            return []
        except (NoSuchTableError, DatabaseError) as e:
            logger.warning(f"Could not inspect check constraints for table '{table_name}': {e}")
            return []

        return [constraint["sqltext"] for constraint in constraints if constraint.get("sqltext")]


def _checks_for_column(column_name: str, checks: list[str]) -> tuple[str, ...]:
    """Check expressions that mention the column as a whole word"""
    pattern = re.compile(rf'(?<![\w"]){re.escape(column_name)}(?![\w"])|"{re.escape(column_name)}"')
    return tuple(check for check in checks if pattern.search(check))
