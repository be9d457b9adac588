"""PostgreSQL dialect visitor.

Type names are the ones ``pg_catalog.format_type`` reports without a type
modifier (``character varying``, ``timestamp with time zone``, ``integer[]``)
and default expressions are the ones ``pg_get_expr`` reports for
``pg_attrdef.adbin``.
"""

import re

from schemac.dialects.base import DefaultRule, TableDrivenVisitor, always, literal_rules, matches, starts_with
from schemac.types import ArrayType, CanonicalType, Sentinel, StringType

INTEGER_TYPES = (
    "integer",
    "int",
    "int4",
    "bigint",
    "int8",
    "smallint",
    "int2",
    "serial",
    "serial4",
    "bigserial",
    "serial8",
    "smallserial",
    "serial2",
)

FLOAT_TYPES = ("real", "float4", "double precision", "float8")

DECIMAL_TYPES = ("numeric", "decimal", "money")

TIME_TYPES = ("time", "time without time zone", "time with time zone", "timetz")

NAIVE_DATETIME_TYPES = ("timestamp without time zone", "timestamp")

UTC_DATETIME_TYPES = ("timestamp with time zone", "timestamptz")

STRING_TYPES = (
    "text",
    "character",
    "character varying",
    "varchar",
    "char",
    "name",
    "xml",
    "inet",
    "cidr",
    "macaddr",
    "point",
    "line",
    "lseg",
    "box",
    "path",
    "polygon",
    "circle",
)

# Identifier followed by an argument list, optionally cast: lower('X'::text)::text
FUNCTION_CALL = r"^[A-Za-z_][\w.]*\s*\(.*\)(::[\w\s.\"\[\]]+)?$"


class PostgresVisitor(TableDrivenVisitor):
    name = "postgresql"
    aliases = ("postgres", "pg")

    type_families = (
        (CanonicalType.STRING, STRING_TYPES),
        (StringType(case_sensitive=False), ("citext",)),
        (CanonicalType.INTEGER, INTEGER_TYPES),
        (CanonicalType.FLOAT, FLOAT_TYPES),
        (CanonicalType.DECIMAL, DECIMAL_TYPES),
        (CanonicalType.TIME, TIME_TYPES),
        (CanonicalType.NAIVE_DATETIME, NAIVE_DATETIME_TYPES),
        (CanonicalType.UTC_DATETIME, UTC_DATETIME_TYPES),
        (CanonicalType.JSON, ("json",)),
        (CanonicalType.JSONB, ("jsonb",)),
        (CanonicalType.UUID, ("uuid",)),
        (CanonicalType.BOOLEAN, ("boolean", "bool")),
        (CanonicalType.DATE, ("date",)),
        (CanonicalType.BINARY, ("bytea",)),
    )

    array_suffix = "[]"

    array_shortcuts = {
        "jsonb[]": ArrayType(element=CanonicalType.JSONB),
        "json[]": ArrayType(element=CanonicalType.JSON),
    }

    # Order is load-bearing: sentinels and function calls are tested before the
    # literal rules because call arguments can look like quoted or numeric
    # literals, and CURRENT_TIMESTAMP is tested before its CURRENT_TIME prefix.
    default_rules = (
        DefaultRule("null", matches(r"^NULL(::[\w\s.\"]+)?$", re.IGNORECASE), always(None)),
        DefaultRule("empty_map", starts_with("'{}'"), lambda _text: {}),
        DefaultRule("empty_json_array", starts_with("'[]'"), lambda _text: []),
        DefaultRule("empty_array", starts_with("ARRAY[]"), lambda _text: []),
        DefaultRule("sequence", starts_with("nextval("), always(Sentinel.AUTO_INCREMENT)),
        DefaultRule(
            "current_timestamp",
            starts_with(
                "now()",
                "CURRENT_TIMESTAMP",
                "LOCALTIMESTAMP",
                "transaction_timestamp()",
                "statement_timestamp()",
                "clock_timestamp()",
            ),
            always(Sentinel.CURRENT_TIMESTAMP),
        ),
        DefaultRule("current_date", starts_with("CURRENT_DATE"), always(Sentinel.CURRENT_DATE)),
        DefaultRule("current_time", starts_with("CURRENT_TIME", "LOCALTIME"), always(Sentinel.CURRENT_TIME)),
        DefaultRule("function_call", matches(FUNCTION_CALL, re.DOTALL), always(Sentinel.FUNCTION_DEFAULT)),
        *literal_rules(),
    )
