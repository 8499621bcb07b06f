# ============================================================================
# RULESQL MODULE
# ============================================================================
# STATUS: Package initialization
# PURPOSE: Export rule builders, table models, compiler and errors
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================

from rulesql.__version__ import __version__
from rulesql.contracts import (
    StorageType,
    StringFormat,
    NumberFormat,
    ForeignKeyAction,
    TableConfigError,
)
from rulesql.models import rules, ColumnSpec, ForeignKeySpec, IndexSpec, TableSpec
from rulesql.schema import CompiledTable, TableCompiler, compile_table, build_row_validator

__all__ = [
    "__version__",
    # Enums
    "StorageType",
    "StringFormat",
    "NumberFormat",
    "ForeignKeyAction",
    # Errors
    "TableConfigError",
    # Models
    "rules",
    "ColumnSpec",
    "ForeignKeySpec",
    "IndexSpec",
    "TableSpec",
    # Schema
    "TableCompiler",
    "CompiledTable",
    "compile_table",
    "build_row_validator",
]
