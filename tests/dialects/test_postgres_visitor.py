"""Tests for the PostgreSQL visitor"""

import pytest

from schemac.ast import ArrayTypeNode, DefaultNode, EnumTypeNode, TypeNode
from schemac.dialects import PostgresVisitor
from schemac.dialects.postgres import (
    DECIMAL_TYPES,
    FLOAT_TYPES,
    INTEGER_TYPES,
    NAIVE_DATETIME_TYPES,
    STRING_TYPES,
    TIME_TYPES,
    UTC_DATETIME_TYPES,
)
from schemac.errors import StructuralError
from schemac.types import ArrayType, CanonicalType, EnumType, Sentinel, StringType, UnmappedDefault, UnmappedType


def visit_default(visitor: PostgresVisitor, expression: str | None) -> object:
    return visitor.visit(DefaultNode(expression), {})


class TestTypeMapping:
    """Tests for raw type name mapping"""

    @pytest.mark.parametrize(
        ("family", "expected"),
        [
            (INTEGER_TYPES, CanonicalType.INTEGER),
            (FLOAT_TYPES, CanonicalType.FLOAT),
            (DECIMAL_TYPES, CanonicalType.DECIMAL),
            (TIME_TYPES, CanonicalType.TIME),
            (NAIVE_DATETIME_TYPES, CanonicalType.NAIVE_DATETIME),
            (UTC_DATETIME_TYPES, CanonicalType.UTC_DATETIME),
            (STRING_TYPES, CanonicalType.STRING),
        ],
    )
    def test_type_families(self, postgres_visitor: PostgresVisitor, family: tuple[str, ...], expected: object) -> None:
        for raw_name in family:
            assert postgres_visitor.visit(TypeNode(raw_name), {}) == expected, raw_name

    @pytest.mark.parametrize(
        ("raw_name", "expected"),
        [
            ("json", CanonicalType.JSON),
            ("jsonb", CanonicalType.JSONB),
            ("uuid", CanonicalType.UUID),
            ("boolean", CanonicalType.BOOLEAN),
            ("date", CanonicalType.DATE),
            ("bytea", CanonicalType.BINARY),
        ],
    )
    def test_single_name_types(self, postgres_visitor: PostgresVisitor, raw_name: str, expected: object) -> None:
        assert postgres_visitor.visit(TypeNode(raw_name)) == expected

    def test_citext_is_case_insensitive_string(self, postgres_visitor: PostgresVisitor) -> None:
        assert postgres_visitor.visit(TypeNode("citext")) == StringType(case_sensitive=False)

    def test_mapping_is_stable(self, postgres_visitor: PostgresVisitor) -> None:
        results = {postgres_visitor.visit(TypeNode("timestamptz")) for _ in range(5)}
        assert results == {CanonicalType.UTC_DATETIME}

    def test_families_are_disjoint(self) -> None:
        names = [name for _, family in PostgresVisitor.type_families for name in family]
        assert len(names) == len(set(names))
        assert len(PostgresVisitor.type_table) == len(names)

    def test_unknown_type_is_passed_through(self, postgres_visitor: PostgresVisitor) -> None:
        assert postgres_visitor.visit(TypeNode("tsvector")) == UnmappedType(raw="tsvector")

    def test_type_names_are_case_sensitive(self, postgres_visitor: PostgresVisitor) -> None:
        """format_type reports lower-case names; anything else is not a catalog name"""
        assert postgres_visitor.visit(TypeNode("INTEGER")) == UnmappedType(raw="INTEGER")


class TestArrays:
    """Tests for array and enum types"""

    def test_suffixed_type_node(self, postgres_visitor: PostgresVisitor) -> None:
        assert postgres_visitor.visit(TypeNode("integer[]")) == ArrayType(element=CanonicalType.INTEGER)

    def test_nested_arrays(self, postgres_visitor: PostgresVisitor) -> None:
        assert postgres_visitor.visit(TypeNode("character varying[][]")) == ArrayType(
            element=ArrayType(element=CanonicalType.STRING)
        )

    def test_array_node(self, postgres_visitor: PostgresVisitor) -> None:
        assert postgres_visitor.visit(ArrayTypeNode("uuid[]")) == ArrayType(element=CanonicalType.UUID)

    @pytest.mark.parametrize(
        ("raw_name", "element"),
        [("jsonb[]", CanonicalType.JSONB), ("json[]", CanonicalType.JSON)],
    )
    def test_json_array_shortcuts(self, postgres_visitor: PostgresVisitor, raw_name: str, element: object) -> None:
        assert postgres_visitor.visit(ArrayTypeNode(raw_name)) == ArrayType(element=element)
        assert postgres_visitor.visit(TypeNode(raw_name)) == ArrayType(element=element)

    def test_array_of_citext(self, postgres_visitor: PostgresVisitor) -> None:
        assert postgres_visitor.visit(TypeNode("citext[]")) == ArrayType(element=StringType(case_sensitive=False))

    def test_array_of_unknown_type(self, postgres_visitor: PostgresVisitor) -> None:
        assert postgres_visitor.visit(TypeNode("mood[]")) == ArrayType(element=UnmappedType(raw="mood"))

    @pytest.mark.parametrize(("base", "innermost"), [("text", CanonicalType.STRING), ("mood", UnmappedType(raw="mood"))])
    def test_deeply_nested_arrays(self, postgres_visitor: PostgresVisitor, base: str, innermost: object) -> None:
        """Nesting deeper than the interpreter recursion limit still maps"""
        result = postgres_visitor.visit(TypeNode(base + "[]" * 2000))

        depth = 0
        while isinstance(result, ArrayType):
            result = result.element
            depth += 1
        assert depth == 2000
        assert result == innermost

    def test_bare_suffix_is_unmapped(self, postgres_visitor: PostgresVisitor) -> None:
        assert postgres_visitor.visit(TypeNode("[]")) == UnmappedType(raw="[]")

    def test_array_node_without_suffix_names_element(self, postgres_visitor: PostgresVisitor) -> None:
        assert postgres_visitor.visit(ArrayTypeNode("text")) == ArrayType(element=CanonicalType.STRING)

    def test_enum_preserves_order(self, postgres_visitor: PostgresVisitor) -> None:
        assert postgres_visitor.visit(EnumTypeNode(["a", "b", "c"])) == EnumType(values=("a", "b", "c"))
        assert postgres_visitor.visit(EnumTypeNode(["c", "a", "b"])).values == ("c", "a", "b")


class TestDefaults:
    """Tests for default expression parsing"""

    def test_absent_and_empty_are_distinct(self, postgres_visitor: PostgresVisitor) -> None:
        assert visit_default(postgres_visitor, None) is None
        assert visit_default(postgres_visitor, "") == ""

    @pytest.mark.parametrize("expression", ["NULL", "  NULL ", "NULL::character varying", "null"])
    def test_null_keyword(self, postgres_visitor: PostgresVisitor, expression: str) -> None:
        assert visit_default(postgres_visitor, expression) is None

    @pytest.mark.parametrize(
        ("expression", "expected"),
        [
            ("'{}'", {}),
            ("'{}'::jsonb", {}),
            ("'[]'", []),
            ("'[]'::jsonb", []),
            ("ARRAY[]::text[]", []),
        ],
    )
    def test_empty_composites(self, postgres_visitor: PostgresVisitor, expression: str, expected: object) -> None:
        result = visit_default(postgres_visitor, expression)
        assert result == expected
        assert type(result) is type(expected)

    def test_empty_composites_are_fresh_objects(self, postgres_visitor: PostgresVisitor) -> None:
        first = visit_default(postgres_visitor, "'{}'")
        second = visit_default(postgres_visitor, "'{}'")
        assert first is not second

    @pytest.mark.parametrize(
        ("expression", "expected"),
        [
            ("nextval('users_id_seq'::regclass)", Sentinel.AUTO_INCREMENT),
            ("now()", Sentinel.CURRENT_TIMESTAMP),
            ("  now()  ", Sentinel.CURRENT_TIMESTAMP),
            ("CURRENT_TIMESTAMP", Sentinel.CURRENT_TIMESTAMP),
            ("CURRENT_TIMESTAMP(0)", Sentinel.CURRENT_TIMESTAMP),
            ("LOCALTIMESTAMP", Sentinel.CURRENT_TIMESTAMP),
            ("transaction_timestamp()", Sentinel.CURRENT_TIMESTAMP),
            ("CURRENT_DATE", Sentinel.CURRENT_DATE),
            ("\tCURRENT_DATE\n", Sentinel.CURRENT_DATE),
            ("CURRENT_TIME", Sentinel.CURRENT_TIME),
            ("LOCALTIME", Sentinel.CURRENT_TIME),
        ],
    )
    def test_sentinels(self, postgres_visitor: PostgresVisitor, expression: str, expected: Sentinel) -> None:
        assert visit_default(postgres_visitor, expression) is expected

    def test_current_timestamp_is_not_captured_by_current_time(self, postgres_visitor: PostgresVisitor) -> None:
        assert visit_default(postgres_visitor, "CURRENT_TIMESTAMP") is not Sentinel.CURRENT_TIME
        assert visit_default(postgres_visitor, "LOCALTIMESTAMP") is not Sentinel.CURRENT_TIME

    @pytest.mark.parametrize(
        "expression",
        [
            "gen_random_uuid()",
            "uuid_generate_v4()",
            "lower('ABC'::text)",
            "concat('a'::text, 'b'::text)",
            "public.make_code(8)",
            "md5((random())::text)",
        ],
    )
    def test_function_calls(self, postgres_visitor: PostgresVisitor, expression: str) -> None:
        result = visit_default(postgres_visitor, expression)
        assert result is Sentinel.FUNCTION_DEFAULT
        assert result.resolved_at_write is True

    def test_function_call_with_numeric_argument_is_not_a_number(self, postgres_visitor: PostgresVisitor) -> None:
        assert visit_default(postgres_visitor, "round(42)") is Sentinel.FUNCTION_DEFAULT

    def test_function_call_whose_last_argument_looks_like_a_cast(self, postgres_visitor: PostgresVisitor) -> None:
        """Function detection runs before the quoted-literal-with-cast rule"""
        assert visit_default(postgres_visitor, "format('%s', 'x'::text)") is Sentinel.FUNCTION_DEFAULT

    def test_quoted_literal_followed_by_operator_keeps_first_literal(self, postgres_visitor: PostgresVisitor) -> None:
        """A leading cast literal wins over the rest of the expression"""
        assert visit_default(postgres_visitor, "'a'::text || lower('B'::text)") == "a"

    @pytest.mark.parametrize(
        ("expression", "expected"),
        [
            ("'active'::status", "active"),
            ("'hello world'::character varying", "hello world"),
            ("'2024-01-01'::date", "2024-01-01"),
            ("'it''s'::text", "it's"),
            ("'a::b'::text", "a::b"),
            ("'-1'::integer", "-1"),
        ],
    )
    def test_quoted_literal_with_cast(self, postgres_visitor: PostgresVisitor, expression: str, expected: str) -> None:
        assert visit_default(postgres_visitor, expression) == expected

    @pytest.mark.parametrize(("expression", "expected"), [("'plain'", "plain"), ("''", ""), ("'O''Brien'", "O'Brien")])
    def test_quoted_literal(self, postgres_visitor: PostgresVisitor, expression: str, expected: str) -> None:
        assert visit_default(postgres_visitor, expression) == expected

    def test_numeric_literals(self, postgres_visitor: PostgresVisitor) -> None:
        assert visit_default(postgres_visitor, "42") == 42
        assert isinstance(visit_default(postgres_visitor, "42"), int)
        assert visit_default(postgres_visitor, "3.14") == 3.14
        assert isinstance(visit_default(postgres_visitor, "3.14"), float)
        assert visit_default(postgres_visitor, "-7") == -7
        assert visit_default(postgres_visitor, "0.00") == 0.0

    @pytest.mark.parametrize("expression", ["42abc", "3.14.15", "1e10", "12 34"])
    def test_partial_numbers_are_not_coerced(self, postgres_visitor: PostgresVisitor, expression: str) -> None:
        assert visit_default(postgres_visitor, expression) == UnmappedDefault(raw=expression)

    @pytest.mark.parametrize(("expression", "expected"), [("true", True), ("TRUE", True), ("false", False)])
    def test_boolean_literals(self, postgres_visitor: PostgresVisitor, expression: str, expected: bool) -> None:
        assert visit_default(postgres_visitor, expression) is expected

    def test_unrecognised_expression_is_passed_through_trimmed(self, postgres_visitor: PostgresVisitor) -> None:
        result = visit_default(postgres_visitor, "  (now() + '1 day'::interval)  ")
        assert result == UnmappedDefault(raw="(now() + '1 day'::interval)")


class TestVisitContract:
    """Tests for the visit entry point"""

    def test_options_are_optional(self, postgres_visitor: PostgresVisitor) -> None:
        assert postgres_visitor.visit(TypeNode("text")) == CanonicalType.STRING
        assert postgres_visitor.visit(TypeNode("text"), None) == CanonicalType.STRING
        assert postgres_visitor.visit(TypeNode("text"), {"collation": "C"}) == CanonicalType.STRING

    @pytest.mark.parametrize("node", [("type", "text"), "text", None, {"default": "now()"}])
    def test_non_nodes_raise_structural_error(self, postgres_visitor: PostgresVisitor, node: object) -> None:
        with pytest.raises(StructuralError):
            postgres_visitor.visit(node)
