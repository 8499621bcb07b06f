# ============================================================================
# SERVICES MODULE
# ============================================================================
# STATUS: Core - Table definition services
# PURPOSE: Load table definitions and compile them to DDL
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================
"""
Services Module

Usage:
    from services import TableService

    tables = TableService()
    compiled = tables.compile("users")
"""

from .table_service import TableService

__all__ = [
    "TableService",
]
