"""SQLite catalog reader."""

from sqlalchemy import text
from sqlalchemy.engine import Connection

from schemac.ast import ColumnNode, DefaultNode, TypeNode
from schemac.introspection.base import CatalogReader


def _quote(identifier: str) -> str:
    return '"' + identifier.replace('"', '""') + '"'


class SqliteCatalogReader(CatalogReader):
    dialect = "sqlite"

    def read_columns(self, connection: Connection, table_name: str, schema: str | None) -> list[ColumnNode]:
        # PRAGMA does not accept bound parameters
        prefix = f"{_quote(schema)}." if schema else ""
        rows = connection.execute(text(f"PRAGMA {prefix}table_info({_quote(table_name)})"))

        return [
            ColumnNode(
                name=row["name"],
                type=TypeNode(row["type"] or ""),
                default=DefaultNode(row["dflt_value"]),
                nullable=not row["notnull"],
                primary_key=row["pk"] > 0,
            )
            for row in rows.mappings()
        ]
