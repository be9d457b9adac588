"""PostgreSQL catalog reader."""

from sqlalchemy import text
from sqlalchemy.engine import Connection

from schemac.ast import ArrayTypeNode, ColumnNode, DefaultNode, EnumTypeNode, TypeNode
from schemac.introspection.base import CatalogReader

# format_type without a modifier gives 'character varying' rather than
# 'character varying(255)', which is what the visitor tables are keyed on
COLUMNS_QUERY = text(
    """
    SELECT
        a.attname AS name,
        pg_catalog.format_type(a.atttypid, NULL) AS type_name,
        t.typtype AS typtype,
        t.typcategory AS typcategory,
        pg_catalog.pg_get_expr(d.adbin, d.adrelid) AS default_expression,
        NOT a.attnotnull AS nullable,
        CASE WHEN t.typtype = 'e' THEN
            ARRAY(
                SELECT e.enumlabel
                FROM pg_catalog.pg_enum e
                WHERE e.enumtypid = t.oid
                ORDER BY e.enumsortorder
            )
        END AS enum_values
    FROM pg_catalog.pg_attribute a
    JOIN pg_catalog.pg_class c ON c.oid = a.attrelid
    JOIN pg_catalog.pg_namespace n ON n.oid = c.relnamespace
    JOIN pg_catalog.pg_type t ON t.oid = a.atttypid
    -- Generated columns keep their expression in pg_attrdef too; it is not a default
    LEFT JOIN pg_catalog.pg_attrdef d
        ON d.adrelid = a.attrelid AND d.adnum = a.attnum AND a.attgenerated = ''
    WHERE c.relname = :table_name
        AND n.nspname = :schema
        AND a.attnum > 0
        AND NOT a.attisdropped
    ORDER BY a.attnum
    """
)


class PostgresCatalogReader(CatalogReader):
    dialect = "postgresql"
    default_schema = "public"

    def read_columns(self, connection: Connection, table_name: str, schema: str | None) -> list[ColumnNode]:
        rows = connection.execute(COLUMNS_QUERY, {"table_name": table_name, "schema": schema or self.default_schema})

        columns = []
        for row in rows.mappings():
            if row["typtype"] == "e":
                type_node = EnumTypeNode(list(row["enum_values"] or []))
            elif row["typcategory"] == "A":
                type_node = ArrayTypeNode(row["type_name"])
            else:
                type_node = TypeNode(row["type_name"])

            columns.append(
                ColumnNode(
                    name=row["name"],
                    type=type_node,
                    default=DefaultNode(row["default_expression"]),
                    nullable=bool(row["nullable"]),
                )
            )
        return columns
