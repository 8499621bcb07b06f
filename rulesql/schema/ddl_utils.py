# ============================================================================
# DDL UTILITIES
# ============================================================================
# STATUS: Core - Shared SQL fragment builders for SQLite DDL
# PURPOSE: Type mapping, literal quoting, DEFAULT/CHECK/INDEX rendering
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: KIND_TYPE_MAP, STRING_FORMAT_TYPE_MAP, NUMBER_FORMAT_TYPE_MAP,
#          get_storage_type, quote_text, format_number, format_default_value,
#          CheckBuilder, IndexBuilder
# DEPENDENCIES: rulesql.models
# ============================================================================
"""
DDL Utilities - Shared SQL Generation Patterns.

All builders return plain SQL text in the SQLite dialect. Identifiers are
trusted and emitted verbatim; only values are quoted.

Usage:
    from rulesql.schema.ddl_utils import CheckBuilder, IndexBuilder

    CheckBuilder.for_rule("age", rules.integer().min(18))
    # 'CHECK(age >= 18)'

    IndexBuilder.create("users", IndexSpec(name="idx_email", columns=["email"]))
    # 'CREATE INDEX idx_email ON users (email);'
"""

import logging
import math
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, List, Optional, Union

from rulesql.contracts import NumberFormat, RuleKind, StorageType, StringFormat
from rulesql.models.rules import (
    EnumRule,
    LiteralRule,
    NumberRule,
    Rule,
    StringRule,
    UnionRule,
)
from rulesql.models.table import IndexSpec
from rulesql.schema.unwrap import leaf_of

logger = logging.getLogger(__name__)


# ============================================================================
# TYPE MAPPING
# ============================================================================

KIND_TYPE_MAP = {
    RuleKind.STRING: StorageType.TEXT,
    RuleKind.ENUM: StorageType.TEXT,
    RuleKind.LITERAL: StorageType.TEXT,
    RuleKind.UNION: StorageType.TEXT,
    RuleKind.ARRAY: StorageType.TEXT,
    RuleKind.OBJECT: StorageType.TEXT,
    RuleKind.BOOLEAN: StorageType.BOOLEAN,
    RuleKind.BIGINT: StorageType.BIGINT,
    RuleKind.NULL: StorageType.NULL,
    RuleKind.UNDEFINED: StorageType.NULL,
    RuleKind.BLOB: StorageType.BLOB,
}

STRING_FORMAT_TYPE_MAP = {
    StringFormat.DATE: StorageType.DATE,
    StringFormat.DATETIME: StorageType.DATETIME,
    StringFormat.DURATION: StorageType.INTEGER,
}

NUMBER_FORMAT_TYPE_MAP = {
    NumberFormat.INT32: StorageType.INTEGER,
    NumberFormat.UINT32: StorageType.INTEGER,
    NumberFormat.SAFEINT: StorageType.INTEGER,
    NumberFormat.FLOAT32: StorageType.FLOAT,
    NumberFormat.FLOAT64: StorageType.FLOAT,
    NumberFormat.NUMBER: StorageType.REAL,
}


def get_storage_type(leaf: Rule) -> StorageType:
    """
    Map a leaf rule to its SQLite storage type.

    Total: kinds missing from the maps fall back to TEXT.

    Args:
        leaf: Unwrapped rule node

    Returns:
        StorageType for the column
    """
    if isinstance(leaf, StringRule) and leaf.format is not None:
        return STRING_FORMAT_TYPE_MAP.get(leaf.format, StorageType.TEXT)

    if isinstance(leaf, NumberRule):
        return NUMBER_FORMAT_TYPE_MAP.get(leaf.format, StorageType.REAL)

    kind = getattr(leaf, "kind", None)
    if kind in KIND_TYPE_MAP:
        return KIND_TYPE_MAP[kind]

    logger.debug(f"No storage mapping for rule kind {kind!r}, using TEXT")
    return StorageType.TEXT


# ============================================================================
# LITERALS
# ============================================================================

def _string_form(value: Any) -> str:
    """String form of a value as stored in a text column."""
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value)


def quote_text(value: Any) -> str:
    """Single-quote a value, doubling embedded quotes."""
    return "'" + _string_form(value).replace("'", "''") + "'"


def format_number(value: Union[int, float]) -> str:
    """Render a bound or literal number (bool as 0/1)."""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, int):
        return str(value)
    return repr(value)


def _coerce_number(value: Any) -> Optional[str]:
    """
    Numeric SQL form of a default value, or None if it has none.
    """
    if isinstance(value, Enum):
        value = value.value

    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return repr(value) if math.isfinite(value) else None
    if isinstance(value, Decimal):
        return str(value) if value.is_finite() else None
    if isinstance(value, timedelta):
        return str(int(value.total_seconds()))

    if isinstance(value, str):
        text = value.strip()
        try:
            return str(int(text))
        except ValueError:
            pass
        try:
            parsed = float(text)
        except ValueError:
            return None
        return repr(parsed) if math.isfinite(parsed) else None

    return None


def format_default_value(value: Any, storage_type: StorageType) -> str:
    """
    Render a DEFAULT clause for a column.

    Values that cannot be expressed in the column's literal form fall back to
    a quoted string; SQLite reports any mismatch when the DDL is executed.

    Args:
        value: Resolved default value
        storage_type: Column storage type

    Returns:
        "DEFAULT <literal>"
    """
    if value is None or storage_type == StorageType.NULL:
        return "DEFAULT NULL"

    if storage_type.is_textual():
        return f"DEFAULT {quote_text(value)}"

    if storage_type.is_numeric():
        numeric = _coerce_number(value)
        if numeric is not None:
            return f"DEFAULT {numeric}"
        logger.debug(f"Default {value!r} is not numeric for {storage_type.value}, quoting")
        return f"DEFAULT {quote_text(value)}"

    if storage_type == StorageType.BOOLEAN:
        return "DEFAULT 1" if value else "DEFAULT 0"

    return f"DEFAULT {quote_text(value)}"


# ============================================================================
# CHECK BUILDER
# ============================================================================

class CheckBuilder:
    """
    Builder for column CHECK constraints derived from rule bounds.

    All methods are static and return "CHECK(...)" text or None.
    """

    @staticmethod
    def sql_literal(value: Any) -> str:
        """Render an enum/literal value for an IN list or equality."""
        if value is None:
            return "NULL"
        if isinstance(value, str):
            return quote_text(value)
        if isinstance(value, (bool, int, float)):
            return format_number(value)
        return quote_text(value)

    @staticmethod
    def _wrap(conditions: List[str]) -> Optional[str]:
        if not conditions:
            return None
        return f"CHECK({' AND '.join(conditions)})"

    @staticmethod
    def in_list(column: str, values: Iterable[Any]) -> str:
        rendered = ", ".join(CheckBuilder.sql_literal(v) for v in values)
        return f"CHECK({column} IN ({rendered}))"

    @staticmethod
    def literal(column: str, values: List[Any]) -> str:
        if len(values) == 1:
            return f"CHECK({column} = {CheckBuilder.sql_literal(values[0])})"
        return CheckBuilder.in_list(column, values)

    @staticmethod
    def number_bounds(column: str, leaf: NumberRule) -> Optional[str]:
        """Inclusive bounds only; exclusive bounds stay validator-side."""
        conditions = []
        if leaf.minimum is not None:
            conditions.append(f"{column} >= {format_number(leaf.minimum)}")
        if leaf.maximum is not None:
            conditions.append(f"{column} <= {format_number(leaf.maximum)}")
        return CheckBuilder._wrap(conditions)

    @staticmethod
    def string_lengths(column: str, leaf: StringRule) -> Optional[str]:
        conditions = []
        if leaf.min_length is not None:
            conditions.append(f"length({column}) >= {leaf.min_length}")
        if leaf.max_length is not None:
            conditions.append(f"length({column}) <= {leaf.max_length}")
        if leaf.exact_length is not None:
            conditions.append(f"length({column}) = {leaf.exact_length}")
        return CheckBuilder._wrap(conditions)

    @staticmethod
    def for_rule(column: str, rule: Rule) -> Optional[str]:
        """
        Derive the CHECK constraint for a column rule.

        Args:
            column: Column name (verbatim)
            rule: Column rule, possibly wrapped

        Returns:
            "CHECK(...)" or None when no bound applies
        """
        leaf = leaf_of(rule)

        if isinstance(leaf, EnumRule):
            return CheckBuilder.in_list(column, leaf.values)

        if isinstance(leaf, LiteralRule):
            return CheckBuilder.literal(column, list(leaf.values))

        if isinstance(leaf, UnionRule):
            # Mixed unions are left to the validator
            if not leaf.is_literal_union:
                return None
            values = [value for option in leaf.options for value in option.values]
            return CheckBuilder.in_list(column, values)

        if isinstance(leaf, NumberRule):
            return CheckBuilder.number_bounds(column, leaf)

        if isinstance(leaf, StringRule):
            return CheckBuilder.string_lengths(column, leaf)

        return None


# ============================================================================
# INDEX BUILDER
# ============================================================================

class IndexBuilder:
    """
    Builder for SQLite index DDL statements.
    """

    @staticmethod
    def create(table: str, index: IndexSpec, if_not_exists: bool = False) -> str:
        """
        Create a (unique / partial) index.

        Args:
            table: Table name
            index: Index definition; ``where`` is appended verbatim
            if_not_exists: Emit IF NOT EXISTS

        Returns:
            CREATE INDEX statement terminated by a semicolon
        """
        unique_clause = "UNIQUE " if index.unique else ""
        exists_clause = "IF NOT EXISTS " if if_not_exists else ""
        where_clause = f" WHERE {index.where}" if index.where else ""
        columns = ", ".join(index.columns)
        return (
            f"CREATE {unique_clause}INDEX {exists_clause}{index.name} "
            f"ON {table} ({columns}){where_clause};"
        )

    @staticmethod
    def create_all(table: str, indexes: Optional[List[IndexSpec]], if_not_exists: bool = False) -> List[str]:
        """Render indexes in declared order (empty list when none)."""
        if not indexes:
            return []
        return [IndexBuilder.create(table, index, if_not_exists) for index in indexes]


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "KIND_TYPE_MAP",
    "STRING_FORMAT_TYPE_MAP",
    "NUMBER_FORMAT_TYPE_MAP",
    "get_storage_type",
    "quote_text",
    "format_number",
    "format_default_value",
    "CheckBuilder",
    "IndexBuilder",
]
