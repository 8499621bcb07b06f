# ============================================================================
# SCHEMA MODULE
# ============================================================================
# STATUS: Core - Schema generation from rule-tree table definitions
# PURPOSE: Generate SQLite DDL and row validators (single source of truth)
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================

from rulesql.schema.unwrap import UnwrappedRule, unwrap_rule, leaf_of
from rulesql.schema.ddl_utils import (
    CheckBuilder,
    IndexBuilder,
    KIND_TYPE_MAP,
    get_storage_type,
    format_default_value,
)
from rulesql.schema.validator import RowModel, build_row_validator
from rulesql.schema.sql_generator import CompiledTable, TableCompiler, compile_table

__all__ = [
    # Generator
    "TableCompiler",
    "CompiledTable",
    "compile_table",
    # Validation
    "RowModel",
    "build_row_validator",
    # Utilities
    "UnwrappedRule",
    "unwrap_rule",
    "leaf_of",
    "CheckBuilder",
    "IndexBuilder",
    "KIND_TYPE_MAP",
    "get_storage_type",
    "format_default_value",
]
