"""Dialect visitors and the registry the compiler looks them up in.

Adding a dialect means subclassing ``DialectVisitor`` (usually through
``TableDrivenVisitor``) and passing the class to ``register_dialect``.
"""

from schemac.dialects.base import DefaultRule, DialectVisitor, TableDrivenVisitor
from schemac.dialects.postgres import PostgresVisitor
from schemac.dialects.sqlite import SqliteVisitor
from schemac.errors import UnsupportedDialectError

_VISITORS: dict[str, type[DialectVisitor]] = {}


def register_dialect(visitor_class: type[DialectVisitor]) -> type[DialectVisitor]:
    """Register a visitor class under its name and aliases.

    Usable as a class decorator.
    """
    for key in (visitor_class.name, *visitor_class.aliases):
        _VISITORS[key.lower()] = visitor_class
    return visitor_class


def get_visitor(dialect: str) -> DialectVisitor:
    """Return a visitor for a dialect name or alias.

    Raises:
        UnsupportedDialectError: If no visitor is registered for the name
    """
    visitor_class = _VISITORS.get(dialect.lower())
    if visitor_class is None:
        raise UnsupportedDialectError(
            f"Unsupported dialect: {dialect}. Must be one of: {', '.join(available_dialects())}"
        )
    return visitor_class()


def available_dialects() -> list[str]:
    """Canonical names of the registered dialects, sorted"""
    return sorted({visitor_class.name for visitor_class in _VISITORS.values()})


register_dialect(PostgresVisitor)
register_dialect(SqliteVisitor)

__all__ = [
    "DefaultRule",
    "DialectVisitor",
    "PostgresVisitor",
    "SqliteVisitor",
    "TableDrivenVisitor",
    "available_dialects",
    "get_visitor",
    "register_dialect",
]
