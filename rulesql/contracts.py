# ============================================================================
# BASE CONTRACTS & ENUMS
# ============================================================================
# STATUS: Foundation - Core enums and error types
# PURPOSE: Storage types, rule kinds, formats and configuration errors
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: StorageType, RuleKind, StringFormat, NumberFormat, ForeignKeyAction,
#          TableConfigError
# DEPENDENCIES: enum
# ============================================================================
"""
Base contracts for the rule-to-SQL compiler.

These values cross three boundaries:
- Rule trees (Python / YAML table definitions)
- SQL (SQLite DDL text)
- Validation (pydantic row models)
"""

from enum import Enum
from typing import List, Optional


# ============================================================================
# STORAGE TYPES
# ============================================================================

class StorageType(str, Enum):
    """
    SQLite column types emitted by the compiler.

    TEXT, INTEGER, REAL, BLOB and NULL are native storage classes; the rest
    are accepted type names that SQLite resolves through type affinity.
    """
    TEXT = "TEXT"
    INTEGER = "INTEGER"
    REAL = "REAL"
    FLOAT = "FLOAT"
    BLOB = "BLOB"
    BOOLEAN = "BOOLEAN"      # stored as 0/1
    BIGINT = "BIGINT"
    DATE = "DATE"            # ISO-8601 text
    DATETIME = "DATETIME"    # ISO-8601 text
    NULL = "NULL"

    def is_textual(self) -> bool:
        """Check if default values for this type render as quoted text."""
        return self in (StorageType.TEXT, StorageType.DATE, StorageType.DATETIME)

    def is_numeric(self) -> bool:
        """Check if default values for this type render as bare numbers."""
        return self in (StorageType.INTEGER, StorageType.REAL, StorageType.FLOAT)


# ============================================================================
# RULE KINDS
# ============================================================================

class RuleKind(str, Enum):
    """
    Discriminator values for rule nodes.

    Wrapper kinds wrap exactly one inner rule; every other kind is a leaf.
    """
    # Wrappers
    OPTIONAL = "optional"
    NULLABLE = "nullable"
    DEFAULT = "default"

    # Leaves
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    BIGINT = "bigint"
    ENUM = "enum"
    LITERAL = "literal"
    UNION = "union"
    ARRAY = "array"
    OBJECT = "object"
    NULL = "null"
    UNDEFINED = "undefined"
    BLOB = "blob"
    ANY = "any"


class StringFormat(str, Enum):
    """Sub-formats a string rule can carry."""
    EMAIL = "email"
    URL = "url"
    UUID = "uuid"
    DATE = "date"            # ISO-8601 calendar date
    DATETIME = "datetime"    # ISO-8601 timestamp
    DURATION = "duration"    # stored as whole seconds

    def is_temporal(self) -> bool:
        """Check if this format validates into a date/time object."""
        return self in (StringFormat.DATE, StringFormat.DATETIME, StringFormat.DURATION)


class NumberFormat(str, Enum):
    """Numeric sub-types."""
    NUMBER = "number"        # plain double
    INT32 = "int32"
    UINT32 = "uint32"
    SAFEINT = "safeint"
    FLOAT32 = "float32"
    FLOAT64 = "float64"

    def is_integer(self) -> bool:
        """Check if this format only admits whole numbers."""
        return self in (NumberFormat.INT32, NumberFormat.UINT32, NumberFormat.SAFEINT)


# ============================================================================
# FOREIGN KEYS
# ============================================================================

class ForeignKeyAction(str, Enum):
    """
    Referential actions for ON DELETE / ON UPDATE clauses.

    SQLite applies NO ACTION when none is given.
    """
    NO_ACTION = "NO ACTION"
    RESTRICT = "RESTRICT"
    SET_NULL = "SET NULL"
    SET_DEFAULT = "SET DEFAULT"
    CASCADE = "CASCADE"


# ============================================================================
# ERRORS
# ============================================================================

class TableConfigError(ValueError):
    """Raised when a table definition is structurally invalid."""

    def __init__(self, message: str, table: Optional[str] = None, errors: Optional[List[str]] = None):
        self.table = table
        self.errors = list(errors or [])
        super().__init__(message)


__all__ = [
    "StorageType",
    "RuleKind",
    "StringFormat",
    "NumberFormat",
    "ForeignKeyAction",
    "TableConfigError",
]
