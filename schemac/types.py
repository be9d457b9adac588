"""Canonical, dialect-independent types and default values"""

from enum import Enum
from typing import Any, Literal, Union

from pydantic import BaseModel, Field

# ============================================================================
# Canonical types
# ============================================================================


class CanonicalType(str, Enum):
    """Scalar semantic types shared by every dialect"""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    DATE = "date"
    TIME = "time"
    NAIVE_DATETIME = "naive_datetime"
    UTC_DATETIME = "utc_datetime"
    UUID = "uuid"
    BINARY = "binary"
    JSON = "json"
    JSONB = "jsonb"


class StringType(BaseModel):
    """String type carrying attributes (e.g. case-insensitive text)"""

    kind: Literal["string"] = "string"
    case_sensitive: bool = Field(default=True, description="Whether comparisons are case sensitive")

    model_config = {"frozen": True}


class EnumType(BaseModel):
    """Enumerated type, members kept in declaration order"""

    kind: Literal["enum"] = "enum"
    values: tuple[str, ...] = Field(description="Enum members in declaration order")

    model_config = {"frozen": True}


class ArrayType(BaseModel):
    """Array of another canonical type"""

    kind: Literal["array"] = "array"
    element: "FieldType" = Field(description="Element type")

    model_config = {"frozen": True}


class UnmappedType(BaseModel):
    """Passthrough for a raw type name no dialect rule recognised"""

    kind: Literal["unmapped"] = "unmapped"
    raw: str = Field(description="Type name exactly as reported by the catalog")

    model_config = {"frozen": True}


FieldType = Union[CanonicalType, StringType, EnumType, ArrayType, UnmappedType]

ArrayType.model_rebuild()


def is_unmapped(field_type: FieldType) -> bool:
    """Return True if the type, or the innermost array element, is unmapped"""
    while isinstance(field_type, ArrayType):
        field_type = field_type.element
    return isinstance(field_type, UnmappedType)


# ============================================================================
# Canonical defaults
# ============================================================================


class Sentinel(Enum):
    """Defaults whose concrete value is only known when a row is written.

    Not a str subclass, so a sentinel never compares equal to a string literal
    with the same text.
    """

    AUTO_INCREMENT = "auto_increment"
    CURRENT_TIMESTAMP = "current_timestamp"
    CURRENT_DATE = "current_date"
    CURRENT_TIME = "current_time"
    FUNCTION_DEFAULT = "function_default"

    @property
    def resolved_at_write(self) -> bool:
        return True


class UnmappedDefault(BaseModel):
    """Passthrough for a default expression no dialect rule recognised"""

    kind: Literal["unmapped_default"] = "unmapped_default"
    raw: str = Field(description="Trimmed default expression")

    model_config = {"frozen": True}


# None (absent), int, float, str, bool, {} and [] are the literal defaults
DefaultValue = Any


def dump_default(value: DefaultValue) -> Any:
    """Serialized form of a canonical default.

    Sentinels become `{"sentinel": name}` and unparsed defaults keep their
    `kind` tag, so neither can be mistaken for a string literal.
    """
    if isinstance(value, Sentinel):
        return {"sentinel": value.value}
    if isinstance(value, UnmappedDefault):
        return value.model_dump()
    return value


def load_default(value: Any) -> DefaultValue:
    """Inverse of `dump_default`"""
    if isinstance(value, dict):
        if set(value) == {"sentinel"}:
            return Sentinel(value["sentinel"])
        if value.get("kind") == "unmapped_default":
            return UnmappedDefault.model_validate(value)
    return value
