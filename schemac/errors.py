"""Exceptions raised by the schema compiler."""


class SchemacError(Exception):
    """Base class for schemac errors"""


class StructuralError(SchemacError, TypeError):
    """An AST node violates its own shape contract.

    Raised for bugs in the catalog producer, never for unrecognised but
    well-formed catalog data.
    """


class UnsupportedDialectError(SchemacError, ValueError):
    """No visitor or catalog reader is registered for a dialect name"""
