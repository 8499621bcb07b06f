# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for compilation, loading and logging
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================
"""
Configuration Defaults

Provides defaults for DDL compilation, table definition loading and logging.
These can be overridden via environment variables or constructor arguments.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides
- Type-safe access
"""

import os
from dataclasses import dataclass, field
from typing import Optional, Tuple


def _env_flag(name: str, default: bool = False) -> bool:
    """Read a boolean flag ("1", "true", "yes", "on") from the environment."""
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class CompilerDefaults:
    """
    Defaults for DDL compilation.

    if_not_exists adds IF NOT EXISTS to CREATE TABLE and CREATE INDEX.
    """
    if_not_exists: bool = False
    row_model_suffix: str = "Row"

    @classmethod
    def from_env(cls) -> "CompilerDefaults":
        """Create from environment variables."""
        return cls(
            if_not_exists=_env_flag("RULESQL_IF_NOT_EXISTS"),
            row_model_suffix=os.getenv("RULESQL_ROW_MODEL_SUFFIX", "Row"),
        )


@dataclass(frozen=True)
class LoaderDefaults:
    """
    Defaults for loading table definitions from YAML.
    """
    tables_dir: str = "tables"
    patterns: Tuple[str, ...] = ("*.yaml", "*.yml")

    @classmethod
    def from_env(cls) -> "LoaderDefaults":
        """Create from environment variables."""
        return cls(
            tables_dir=os.getenv("RULESQL_TABLES_DIR", "tables"),
        )


@dataclass(frozen=True)
class LoggingDefaults:
    """
    Defaults for logging configuration.
    """
    level: str = "INFO"
    json_output: bool = False

    @classmethod
    def from_env(cls) -> "LoggingDefaults":
        """Create from environment variables."""
        return cls(
            level=os.getenv("LOG_LEVEL", "INFO").upper(),
            json_output=os.getenv("LOG_FORMAT", "").lower() == "json",
        )


# ============================================================================
# GLOBAL DEFAULTS INSTANCE
# ============================================================================

@dataclass
class Defaults:
    """Container for all default configurations."""
    compiler: CompilerDefaults = field(default_factory=CompilerDefaults)
    loader: LoaderDefaults = field(default_factory=LoaderDefaults)
    logging: LoggingDefaults = field(default_factory=LoggingDefaults)

    @classmethod
    def from_env(cls) -> "Defaults":
        """Create all defaults from environment variables."""
        return cls(
            compiler=CompilerDefaults.from_env(),
            loader=LoaderDefaults.from_env(),
            logging=LoggingDefaults.from_env(),
        )


_defaults: Optional[Defaults] = None


def get_defaults() -> Defaults:
    """Get global defaults instance."""
    global _defaults
    if _defaults is None:
        _defaults = Defaults.from_env()
    return _defaults


def reset_defaults() -> None:
    """Reset defaults (for testing)."""
    global _defaults
    _defaults = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "CompilerDefaults",
    "LoaderDefaults",
    "LoggingDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
