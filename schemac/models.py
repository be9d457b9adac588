"""Pydantic models for the normalized, dialect-independent schema"""

from typing import Any

from pydantic import BaseModel, field_serializer, field_validator
from pydantic import Field as ModelField

from schemac.types import DefaultValue, FieldType, dump_default, load_default

# ============================================================================
# Field Models
# ============================================================================


class FieldMeta(BaseModel):
    """Metadata compiled for one column"""

    source: str = ModelField(description="Column name in the database")
    nullable: bool | None = ModelField(default=None, description="Whether the column accepts NULL (None if unknown)")
    default: Any = ModelField(default=None, description="Canonical default: literal, Sentinel, UnmappedDefault or None")
    check_constraints: tuple[str, ...] = ModelField(default=(), description="Check constraint expressions")
    primary_key: bool = ModelField(default=False, description="Whether the column is part of the primary key")
    foreign_key: bool = ModelField(default=False, description="Whether the column is part of a foreign key")
    association: bool = ModelField(default=False, description="Whether the column backs an association")
    function_default: bool = ModelField(
        default=False, description="Whether the default is computed by a function when the row is written"
    )

    model_config = {"frozen": True}

    @field_validator("default", mode="before")
    @classmethod
    def _load_default(cls, value: Any) -> DefaultValue:
        return load_default(value)

    @field_serializer("default")
    def _dump_default(self, value: DefaultValue) -> Any:
        return dump_default(value)


class Field(BaseModel):
    """A compiled column"""

    name: str = ModelField(description="Field name")
    type: FieldType = ModelField(description="Canonical type")
    meta: FieldMeta = ModelField(description="Column metadata")

    model_config = {"frozen": True}


# ============================================================================
# Key and Index Models
# ============================================================================


class PrimaryKey(BaseModel):
    """Primary key fields in catalog-declared key order (empty for keyless tables)"""

    fields: tuple[Field, ...] = ModelField(default=(), description="Key fields in key order")

    model_config = {"frozen": True}

    @property
    def column_names(self) -> list[str]:
        return [field.meta.source for field in self.fields]

    @property
    def is_composite(self) -> bool:
        return len(self.fields) > 1


class ForeignKey(BaseModel):
    """Foreign key constraint"""

    columns: tuple[str, ...] = ModelField(description="Constrained columns")
    referenced_table: str = ModelField(description="Referenced table")
    referenced_columns: tuple[str, ...] = ModelField(default=(), description="Referenced columns")
    name: str | None = ModelField(default=None, description="Constraint name")

    model_config = {"frozen": True}


class Index(BaseModel):
    """Table index"""

    name: str = ModelField(description="Index name")
    columns: tuple[str, ...] = ModelField(description="Indexed columns in index order")
    unique: bool = ModelField(default=False, description="Whether the index is unique")

    model_config = {"frozen": True}


# ============================================================================
# Schema Model
# ============================================================================


class Schema(BaseModel):
    """Normalized schema of one table"""

    source: str = ModelField(description="Table name")
    primary_key: PrimaryKey = ModelField(default_factory=PrimaryKey, description="Primary key")
    foreign_keys: tuple[ForeignKey, ...] = ModelField(default=(), description="Foreign keys")
    fields: tuple[Field, ...] = ModelField(default=(), description="Fields in column order")
    indices: tuple[Index, ...] = ModelField(default=(), description="Indices")

    model_config = {"frozen": True}

    @property
    def field_names(self) -> list[str]:
        return [field.name for field in self.fields]

    def field(self, name: str) -> Field | None:
        """Find a field by name"""
        for field in self.fields:
            if field.name == name:
                return field
        return None
