"""Compile database catalogs into normalized schemas.

The core (AST nodes, dialect visitors and the compiler) is pure and does no I/O.
Catalog readers that query live databases live in ``schemac.introspection``.
"""

from schemac.ast import (
    ArrayTypeNode,
    ColumnNode,
    DefaultNode,
    EnumTypeNode,
    ForeignKeyNode,
    IndexNode,
    TableNode,
    TypeNode,
)
from schemac.compiler import compile_table, compile_tables
from schemac.dialects import DialectVisitor, available_dialects, get_visitor, register_dialect
from schemac.errors import SchemacError, StructuralError, UnsupportedDialectError
from schemac.models import Field, FieldMeta, ForeignKey, Index, PrimaryKey, Schema
from schemac.types import (
    ArrayType,
    CanonicalType,
    EnumType,
    Sentinel,
    StringType,
    UnmappedDefault,
    UnmappedType,
)

__version__ = "0.1.0"

__all__ = [
    # AST
    "TypeNode",
    "ArrayTypeNode",
    "EnumTypeNode",
    "DefaultNode",
    "ColumnNode",
    "ForeignKeyNode",
    "IndexNode",
    "TableNode",
    # Canonical types and defaults
    "CanonicalType",
    "StringType",
    "EnumType",
    "ArrayType",
    "UnmappedType",
    "Sentinel",
    "UnmappedDefault",
    # Dialects
    "DialectVisitor",
    "available_dialects",
    "get_visitor",
    "register_dialect",
    # Compiler
    "compile_table",
    "compile_tables",
    # Schema model
    "Field",
    "FieldMeta",
    "ForeignKey",
    "Index",
    "PrimaryKey",
    "Schema",
    # Errors
    "SchemacError",
    "StructuralError",
    "UnsupportedDialectError",
]
