# ============================================================================
# TABLE DEFINITION MODELS
# ============================================================================
# STATUS: Core model - Table, column, index and foreign key configuration
# PURPOSE: Declarative table description compiled into DDL and a row validator
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: TableSpec, ColumnSpec, IndexSpec, ForeignKeySpec
# DEPENDENCIES: pydantic
# ============================================================================
"""
Table Definition Models

A TableSpec is the single source of truth for one SQLite table:

- columns: name + rule tree (+ UNIQUE / REFERENCES)
- primary_keys: ordered column names (may be empty)
- indexes: CREATE INDEX definitions

Specs are loaded from YAML (see services/table_service.py) or built in
Python, and are read-only once compilation begins.
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from rulesql.contracts import ForeignKeyAction
from rulesql.models.rules import RuleNode


class ForeignKeySpec(BaseModel):
    """
    Column-level foreign key.

    Enforcement requires PRAGMA foreign_keys = ON on the connection.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    table: str = Field(..., min_length=1)
    column: str = Field(..., min_length=1)
    on_delete: Optional[ForeignKeyAction] = None
    on_update: Optional[ForeignKeyAction] = None


class ColumnSpec(BaseModel):
    """A single column: its name, rule tree and column-level constraints."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., min_length=1)
    rule: RuleNode
    unique: bool = False
    references: Optional[ForeignKeySpec] = None


class IndexSpec(BaseModel):
    """
    CREATE INDEX definition.

    ``where`` is a raw SQL predicate for partial indexes and is emitted
    verbatim.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., min_length=1)
    columns: List[str] = Field(..., min_length=1)
    unique: bool = False
    where: Optional[str] = None

    @field_validator("columns", mode="before")
    @classmethod
    def handle_string_input(cls, v):
        """Allow single string as shorthand for single-column index."""
        if isinstance(v, str):
            return [v]
        return v


class TableSpec(BaseModel):
    """
    Complete table definition.

    Column order is DDL column order; the PRIMARY KEY clause is emitted last
    and only when primary_keys is non-empty.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., min_length=1)
    columns: List[ColumnSpec] = Field(..., min_length=1)
    primary_keys: List[str] = Field(default_factory=list)
    indexes: List[IndexSpec] = Field(default_factory=list)
    description: Optional[str] = None

    @field_validator("primary_keys", mode="before")
    @classmethod
    def handle_string_key(cls, v):
        """Allow single string as shorthand for single-column primary key."""
        if isinstance(v, str):
            return [v]
        return v

    @property
    def column_names(self) -> List[str]:
        return [column.name for column in self.columns]

    def get_column(self, name: str) -> Optional[ColumnSpec]:
        for column in self.columns:
            if column.name == name:
                return column
        return None

    def validate_structure(self) -> List[str]:
        """
        Validate references between columns, keys and indexes.

        Returns:
            List of error messages (empty if valid)
        """
        errors = []
        names = self.column_names
        declared = set(names)

        seen = set()
        for name in names:
            if name in seen:
                errors.append(f"Duplicate column '{name}'")
            seen.add(name)

        seen_keys = set()
        for key in self.primary_keys:
            if key not in declared:
                errors.append(f"Primary key references unknown column '{key}'")
            if key in seen_keys:
                errors.append(f"Primary key lists column '{key}' more than once")
            seen_keys.add(key)

        index_names = set()
        for index in self.indexes:
            if index.name in index_names:
                errors.append(f"Duplicate index '{index.name}'")
            index_names.add(index.name)
            for column in index.columns:
                if column not in declared:
                    errors.append(f"Index '{index.name}' references unknown column '{column}'")

        return errors


__all__ = [
    "ForeignKeySpec",
    "ColumnSpec",
    "IndexSpec",
    "TableSpec",
]
