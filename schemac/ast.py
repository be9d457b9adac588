"""AST nodes describing raw catalog facts.

The catalog readers build these nodes from the rows a database reports and the
compiler hands them to a dialect visitor. Nodes are immutable and validate their
payload on construction, so a malformed node fails where it is built rather than
deep inside a visit.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from schemac.errors import StructuralError


def _require_str(node: str, attribute: str, value: Any) -> None:
    if not isinstance(value, str):
        raise StructuralError(f"{node}.{attribute} must be a string, got {type(value).__name__}: {value!r}")


def _require_str_tuple(node: str, attribute: str, value: Any) -> tuple[str, ...]:
    # A bare string is a Sequence too, but never a valid list of names
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise StructuralError(f"{node}.{attribute} must be a sequence of strings, got {type(value).__name__}: {value!r}")
    for item in value:
        if not isinstance(item, str):
            raise StructuralError(f"{node}.{attribute} must only contain strings, got {type(item).__name__}: {item!r}")
    return tuple(value)


# ============================================================================
# Type and default nodes
# ============================================================================


@dataclass(frozen=True)
class TypeNode:
    """Scalar type name as emitted by the catalog (e.g. 'character varying')"""

    raw_name: str

    def __post_init__(self) -> None:
        _require_str("TypeNode", "raw_name", self.raw_name)


@dataclass(frozen=True)
class ArrayTypeNode:
    """Type name denoting an array of a base type (e.g. 'jsonb[]')"""

    raw_name: str

    def __post_init__(self) -> None:
        _require_str("ArrayTypeNode", "raw_name", self.raw_name)


@dataclass(frozen=True)
class EnumTypeNode:
    """Enumerated type with its members in declaration order"""

    values: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", _require_str_tuple("EnumTypeNode", "values", self.values))


@dataclass(frozen=True)
class DefaultNode:
    """Raw default expression text, or None when the column has no default"""

    raw_expression: str | None = None

    def __post_init__(self) -> None:
        if self.raw_expression is not None:
            _require_str("DefaultNode", "raw_expression", self.raw_expression)


TypeAstNode = TypeNode | ArrayTypeNode | EnumTypeNode
AstNode = TypeNode | ArrayTypeNode | EnumTypeNode | DefaultNode


# ============================================================================
# Table-level containers
# ============================================================================


@dataclass(frozen=True)
class ColumnNode:
    """All catalog facts about one column"""

    name: str
    type: TypeAstNode
    default: DefaultNode = field(default_factory=DefaultNode)
    nullable: bool | None = None
    primary_key: bool = False
    check_constraints: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        _require_str("ColumnNode", "name", self.name)
        if not isinstance(self.type, (TypeNode, ArrayTypeNode, EnumTypeNode)):
            raise StructuralError(f"ColumnNode.type must be a type node, got {type(self.type).__name__}")
        if not isinstance(self.default, DefaultNode):
            raise StructuralError(f"ColumnNode.default must be a DefaultNode, got {type(self.default).__name__}")
        object.__setattr__(
            self,
            "check_constraints",
            _require_str_tuple("ColumnNode", "check_constraints", self.check_constraints),
        )


@dataclass(frozen=True)
class ForeignKeyNode:
    columns: tuple[str, ...]
    referenced_table: str
    referenced_columns: tuple[str, ...] = ()
    name: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "columns", _require_str_tuple("ForeignKeyNode", "columns", self.columns))
        _require_str("ForeignKeyNode", "referenced_table", self.referenced_table)
        object.__setattr__(
            self,
            "referenced_columns",
            _require_str_tuple("ForeignKeyNode", "referenced_columns", self.referenced_columns),
        )


@dataclass(frozen=True)
class IndexNode:
    name: str
    columns: tuple[str, ...]
    unique: bool = False

    def __post_init__(self) -> None:
        _require_str("IndexNode", "name", self.name)
        object.__setattr__(self, "columns", _require_str_tuple("IndexNode", "columns", self.columns))


@dataclass(frozen=True)
class TableNode:
    """One table as read from the catalog.

    ``primary_key`` lists key column names in the order the catalog declares
    them, which may differ from column order.
    """

    name: str
    columns: tuple[ColumnNode, ...]
    primary_key: tuple[str, ...] = ()
    foreign_keys: tuple[ForeignKeyNode, ...] = ()
    indices: tuple[IndexNode, ...] = ()

    def __post_init__(self) -> None:
        _require_str("TableNode", "name", self.name)
        for attribute, node_type in (
            ("columns", ColumnNode),
            ("foreign_keys", ForeignKeyNode),
            ("indices", IndexNode),
        ):
            value = getattr(self, attribute)
            if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
                raise StructuralError(f"TableNode.{attribute} must be a sequence, got {type(value).__name__}")
            for item in value:
                if not isinstance(item, node_type):
                    raise StructuralError(
                        f"TableNode.{attribute} must contain {node_type.__name__}, got {type(item).__name__}"
                    )
            object.__setattr__(self, attribute, tuple(value))
        object.__setattr__(self, "primary_key", _require_str_tuple("TableNode", "primary_key", self.primary_key))
