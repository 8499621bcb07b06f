# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================
"""
Configuration Module

Provides centralized configuration and defaults for table compilation.
"""

from rulesql.config.defaults import (
    CompilerDefaults,
    LoaderDefaults,
    LoggingDefaults,
    Defaults,
    get_defaults,
    reset_defaults,
)

__all__ = [
    "CompilerDefaults",
    "LoaderDefaults",
    "LoggingDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
