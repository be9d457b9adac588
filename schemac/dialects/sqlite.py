"""SQLite dialect visitor.

SQLite keeps the declared column type verbatim (``VARCHAR(255)``,
``unsigned big int``), so names are normalized before lookup. It has no array
types and no sequence defaults.
"""

import re

from schemac.dialects.base import DefaultRule, TableDrivenVisitor, always, literal_rules, matches, starts_with
from schemac.types import CanonicalType, Sentinel

TYPE_MODIFIER = re.compile(r"\s*\(.*\)\s*$")
WHITESPACE = re.compile(r"\s+")

INTEGER_TYPES = (
    "INTEGER",
    "INT",
    "BIGINT",
    "SMALLINT",
    "TINYINT",
    "MEDIUMINT",
    "INT2",
    "INT4",
    "INT8",
    "UNSIGNED BIG INT",
)

FLOAT_TYPES = ("REAL", "DOUBLE", "DOUBLE PRECISION", "FLOAT")

STRING_TYPES = (
    "TEXT",
    "CHAR",
    "CHARACTER",
    "VARCHAR",
    "VARYING CHARACTER",
    "NCHAR",
    "NATIVE CHARACTER",
    "NVARCHAR",
    "CLOB",
    "STRING",
)


def _wrapped(call: str) -> str:
    """Pattern for a call SQLite may report with or without parentheses around it"""
    return rf"^\(?\s*{call}\s*\)?$"


class SqliteVisitor(TableDrivenVisitor):
    name = "sqlite"
    aliases = ("sqlite3",)

    type_families = (
        (CanonicalType.INTEGER, INTEGER_TYPES),
        (CanonicalType.FLOAT, FLOAT_TYPES),
        (CanonicalType.DECIMAL, ("NUMERIC", "DECIMAL")),
        (CanonicalType.BOOLEAN, ("BOOLEAN", "BOOL")),
        (CanonicalType.DATE, ("DATE",)),
        (CanonicalType.TIME, ("TIME",)),
        (CanonicalType.NAIVE_DATETIME, ("DATETIME", "TIMESTAMP")),
        (CanonicalType.UTC_DATETIME, ("TIMESTAMPTZ", "UTC_DATETIME")),
        (CanonicalType.JSON, ("JSON",)),
        (CanonicalType.JSONB, ("JSONB",)),
        (CanonicalType.UUID, ("UUID",)),
        (CanonicalType.BINARY, ("BLOB", "BINARY", "VARBINARY")),
        (CanonicalType.STRING, STRING_TYPES),
    )

    array_suffix = None

    default_rules = (
        DefaultRule("null", matches(r"^NULL$", re.IGNORECASE), always(None)),
        DefaultRule("empty_map", starts_with("'{}'"), lambda _text: {}),
        DefaultRule("empty_list", starts_with("'[]'"), lambda _text: []),
        DefaultRule(
            "current_timestamp",
            matches(r"^CURRENT_TIMESTAMP$|" + _wrapped(r"datetime\(\s*'now'\s*\)"), re.IGNORECASE),
            always(Sentinel.CURRENT_TIMESTAMP),
        ),
        DefaultRule(
            "current_date",
            matches(r"^CURRENT_DATE$|" + _wrapped(r"date\(\s*'now'\s*\)"), re.IGNORECASE),
            always(Sentinel.CURRENT_DATE),
        ),
        DefaultRule(
            "current_time",
            matches(r"^CURRENT_TIME$|" + _wrapped(r"time\(\s*'now'\s*\)"), re.IGNORECASE),
            always(Sentinel.CURRENT_TIME),
        ),
        DefaultRule(
            "function_call",
            matches(r"^\(?\s*[A-Za-z_]\w*\s*\(.*\)\s*\)?$", re.DOTALL),
            always(Sentinel.FUNCTION_DEFAULT),
        ),
        *literal_rules(),
    )

    def normalize_type_name(self, raw_name: str) -> str:
        name = TYPE_MODIFIER.sub("", raw_name.strip())
        return WHITESPACE.sub(" ", name).upper()
