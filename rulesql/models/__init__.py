# ============================================================================
# MODELS MODULE
# ============================================================================
# STATUS: Core - Rule trees and table definitions
# PURPOSE: Export rule node and table configuration models
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================

from rulesql.models import rules
from rulesql.models.rules import (
    Rule,
    RuleNode,
    Refinement,
    OptionalRule,
    NullableRule,
    DefaultRule,
    StringRule,
    NumberRule,
    EnumRule,
    LiteralRule,
    UnionRule,
    ArrayRule,
    ObjectRule,
    BooleanRule,
    BigIntRule,
    NullRule,
    UndefinedRule,
    BlobRule,
    AnyRule,
)
from rulesql.models.table import ForeignKeySpec, ColumnSpec, IndexSpec, TableSpec

__all__ = [
    # Builders
    "rules",
    # Rule nodes
    "Rule",
    "RuleNode",
    "Refinement",
    "OptionalRule",
    "NullableRule",
    "DefaultRule",
    "StringRule",
    "NumberRule",
    "EnumRule",
    "LiteralRule",
    "UnionRule",
    "ArrayRule",
    "ObjectRule",
    "BooleanRule",
    "BigIntRule",
    "NullRule",
    "UndefinedRule",
    "BlobRule",
    "AnyRule",
    # Table configuration
    "ForeignKeySpec",
    "ColumnSpec",
    "IndexSpec",
    "TableSpec",
]
