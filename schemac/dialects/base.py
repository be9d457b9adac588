"""Dialect visitor contract and the table-driven implementation shared by dialects.

A visitor turns one AST node into a canonical type or a canonical default. It
holds no state between calls, so one instance can serve any number of
compilation passes.
"""

import re
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import Any, ClassVar, NamedTuple

from schemac.ast import ArrayTypeNode, AstNode, DefaultNode, EnumTypeNode, TypeNode
from schemac.errors import StructuralError
from schemac.types import ArrayType, DefaultValue, EnumType, FieldType, UnmappedDefault, UnmappedType

Options = Mapping[str, Any] | None


class DialectVisitor(ABC):
    """Interface every dialect implements.

    ``visit`` is total over well-formed nodes: unknown type names and default
    expressions come back as ``UnmappedType`` / ``UnmappedDefault`` instead of
    raising. Only objects that are not AST nodes raise ``StructuralError``.
    """

    name: ClassVar[str]
    aliases: ClassVar[tuple[str, ...]] = ()

    def visit(self, node: AstNode, options: Options = None) -> FieldType | DefaultValue:
        match node:
            case EnumTypeNode():
                return self.visit_enum(node.values, options)
            case ArrayTypeNode():
                return self.visit_array(node.raw_name, options)
            case TypeNode():
                return self.visit_type(node.raw_name, options)
            case DefaultNode():
                return self.visit_default(node.raw_expression, options)
            case _:
                raise StructuralError(f"{self.name} visitor cannot visit {type(node).__name__}: {node!r}")

    def visit_enum(self, values: tuple[str, ...], options: Options = None) -> FieldType:
        return EnumType(values=values)

    @abstractmethod
    def visit_type(self, raw_name: str, options: Options = None) -> FieldType:
        """Map a scalar raw type name to a canonical type"""

    @abstractmethod
    def visit_array(self, raw_name: str, options: Options = None) -> FieldType:
        """Map an array type name to ``ArrayType``"""

    @abstractmethod
    def visit_default(self, raw_expression: str | None, options: Options = None) -> DefaultValue:
        """Parse a raw default expression"""


# ============================================================================
# Default expression rules
# ============================================================================


class DefaultRule(NamedTuple):
    """One step of an ordered default-expression rule chain"""

    name: str
    matches: Callable[[str], bool]
    transform: Callable[[str], DefaultValue]


def starts_with(*prefixes: str) -> Callable[[str], bool]:
    return lambda text: text.startswith(prefixes)


def matches(pattern: str, flags: int = 0) -> Callable[[str], bool]:
    compiled = re.compile(pattern, flags)
    return lambda text: compiled.search(text) is not None


def always(value: DefaultValue) -> Callable[[str], DefaultValue]:
    return lambda _text: value


QUOTED_WITH_CAST = re.compile(r"^'((?:[^']|'')*)'::")
QUOTED = re.compile(r"^'.*'$", re.DOTALL)
INTEGER = re.compile(r"^-?\d+$")
FLOAT = re.compile(r"^-?\d+\.\d+$")


def unquote_cast(text: str) -> str:
    """Return the quoted literal in front of a ``::cast`` annotation"""
    match = QUOTED_WITH_CAST.match(text)
    if match is None:
        return text
    return match.group(1).replace("''", "'")


def unquote(text: str) -> str:
    return text[1:-1].replace("''", "'")


def parse_bool(text: str) -> bool:
    return text.lower() == "true"


def literal_rules() -> tuple[DefaultRule, ...]:
    """Quoted, numeric and boolean literal rules, in chain order.

    Dialects append these after their sentinel and function-call rules.
    """
    return (
        DefaultRule("quoted_with_cast", lambda text: QUOTED_WITH_CAST.match(text) is not None, unquote_cast),
        DefaultRule("quoted", lambda text: QUOTED.match(text) is not None, unquote),
        DefaultRule("integer", lambda text: INTEGER.match(text) is not None, int),
        DefaultRule("float", lambda text: FLOAT.match(text) is not None, float),
        DefaultRule("boolean", lambda text: text.lower() in ("true", "false"), parse_bool),
    )


# ============================================================================
# Table-driven visitor
# ============================================================================


class TableDrivenVisitor(DialectVisitor):
    """Visitor driven by type-name tables and an ordered default rule chain.

    Subclasses declare:

    - ``type_families``: ``(canonical type, raw names)`` pairs; a raw name may
      appear in only one family
    - ``array_suffix``: suffix marking array type names, or None
    - ``array_shortcuts``: array names resolved before the suffix rule
    - ``default_rules``: the rule chain, first match wins
    """

    type_families: ClassVar[tuple[tuple[FieldType, tuple[str, ...]], ...]] = ()
    array_suffix: ClassVar[str | None] = "[]"
    array_shortcuts: ClassVar[dict[str, FieldType]] = {}
    default_rules: ClassVar[tuple[DefaultRule, ...]] = ()

    type_table: ClassVar[dict[str, FieldType]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        table: dict[str, FieldType] = {}
        for field_type, raw_names in cls.type_families:
            for raw_name in raw_names:
                if raw_name in table:
                    raise ValueError(f"{cls.__name__}: type name '{raw_name}' appears in more than one family")
                table[raw_name] = field_type
        cls.type_table = table

    def normalize_type_name(self, raw_name: str) -> str:
        """Hook for dialects whose catalog reports decorated type names"""
        return raw_name

    def visit_type(self, raw_name: str, options: Options = None) -> FieldType:
        element_name = raw_name
        name = self.normalize_type_name(raw_name)
        depth = 0

        # Suffixes are peeled in a loop, nesting depth is unbounded
        while True:
            mapped = self.type_table.get(name)
            if mapped is None:
                mapped = self.array_shortcuts.get(name)
            if mapped is not None:
                break

            base = self._strip_array_suffix(name)
            if base is None:
                mapped = UnmappedType(raw=element_name)
                break

            depth += 1
            element_name = base
            name = self.normalize_type_name(base)

        for _ in range(depth):
            mapped = ArrayType(element=mapped)
        return mapped

    def visit_array(self, raw_name: str, options: Options = None) -> FieldType:
        name = self.normalize_type_name(raw_name)

        if name in self.array_shortcuts:
            return self.array_shortcuts[name]

        base = self._strip_array_suffix(name)
        # Some catalogs name the element type of an array column directly
        return ArrayType(element=self.visit_type(name if base is None else base, options))

    def visit_default(self, raw_expression: str | None, options: Options = None) -> DefaultValue:
        if raw_expression is None:
            return None

        trimmed = raw_expression.strip()
        if trimmed == "":
            return ""

        for rule in self.default_rules:
            if rule.matches(trimmed):
                return rule.transform(trimmed)

        return UnmappedDefault(raw=trimmed)

    def _strip_array_suffix(self, name: str) -> str | None:
        suffix = self.array_suffix
        if suffix and name.endswith(suffix) and len(name) > len(suffix):
            return name[: -len(suffix)]
        return None
