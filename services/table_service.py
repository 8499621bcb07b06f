# ============================================================================
# TABLE SERVICE
# ============================================================================
# STATUS: Core - Table definition management
# PURPOSE: Load, cache and compile table definitions
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================
"""
Table Service

Loads table definitions from YAML files and provides lookup and
compilation. Caches loaded definitions.

Table files are stored in the tables/ directory. Each file holds one table:

    name: users
    primary_keys: [id]
    columns:
      - name: id
        rule: {kind: number, format: safeint}
      - name: email
        unique: true
        rule: {kind: string, format: email}
"""

from pathlib import Path
from typing import Dict, Optional, List

import yaml

from rulesql.config import CompilerDefaults, get_defaults
from rulesql.contracts import TableConfigError
from rulesql.logging import ComponentType, get_logger, log_context
from rulesql.models import TableSpec
from rulesql.schema import CompiledTable, TableCompiler

logger = get_logger(__name__, ComponentType.LOADER)


class TableService:
    """Service for loading and managing table definitions."""

    def __init__(
        self,
        tables_dir: Optional[str] = None,
        compiler_defaults: Optional[CompilerDefaults] = None,
    ):
        """
        Initialize table service.

        Args:
            tables_dir: Directory containing table YAML files.
                        Defaults to RULESQL_TABLES_DIR, else ./tables/
                        next to the project root.
            compiler_defaults: Settings passed to the TableCompiler.
                               Defaults to the environment-derived settings.
        """
        defaults = get_defaults()
        if tables_dir:
            self.tables_dir = Path(tables_dir)
        else:
            configured = Path(defaults.loader.tables_dir)
            if configured.is_absolute():
                self.tables_dir = configured
            else:
                self.tables_dir = Path(__file__).parent.parent / configured

        self.patterns = defaults.loader.patterns
        if compiler_defaults is None:
            compiler_defaults = defaults.compiler
        self.compiler = TableCompiler(compiler_defaults)
        self._cache: Dict[str, TableSpec] = {}
        self._loaded = False

    def load_all(self) -> int:
        """
        Load all table definitions from the tables directory.

        Files that fail to parse or validate are logged and skipped.

        Returns:
            Number of tables loaded
        """
        if not self.tables_dir.exists():
            logger.warning(f"Tables directory not found: {self.tables_dir}")
            self._loaded = True
            return 0

        count = 0
        for pattern in self.patterns:
            for yaml_file in sorted(self.tables_dir.glob(pattern)):
                try:
                    spec = self._load_yaml(yaml_file)
                except (OSError, yaml.YAMLError, ValueError) as e:
                    logger.error(f"Failed to load {yaml_file}: {e}")
                    continue

                if spec.name in self._cache:
                    logger.warning(f"Table {spec.name} redefined by {yaml_file}")
                self._cache[spec.name] = spec
                count += 1
                logger.info(f"Loaded table: {spec.name} ({len(spec.columns)} columns)")

        self._loaded = True
        logger.info(f"Loaded {count} tables from {self.tables_dir}")
        return count

    def get(self, name: str) -> Optional[TableSpec]:
        """
        Get a table definition by name.

        Args:
            name: Table name

        Returns:
            TableSpec or None if not found
        """
        if not self._loaded:
            self.load_all()

        return self._cache.get(name)

    def get_or_raise(self, name: str) -> TableSpec:
        """
        Get a table definition, raising if not found.

        Raises:
            KeyError if table not found
        """
        spec = self.get(name)
        if spec is None:
            raise KeyError(f"Table not found: {name}")
        return spec

    def list_all(self) -> List[TableSpec]:
        """
        List all loaded tables.

        Returns:
            List of TableSpec instances
        """
        if not self._loaded:
            self.load_all()

        return list(self._cache.values())

    def register(self, spec: TableSpec) -> None:
        """
        Register a table definition (for testing or programmatic use).

        Args:
            spec: TableSpec to register

        Raises:
            TableConfigError: If the definition is structurally invalid
        """
        errors = spec.validate_structure()
        if errors:
            raise TableConfigError(f"Invalid table '{spec.name}': {errors}", table=spec.name, errors=errors)

        self._cache[spec.name] = spec
        logger.info(f"Registered table: {spec.name}")

    def compile(self, name: str) -> CompiledTable:
        """
        Compile a cached table definition.

        Raises:
            KeyError if table not found
        """
        return self.compiler.compile(self.get_or_raise(name))

    def _load_yaml(self, path: Path) -> TableSpec:
        """
        Load a table from YAML file.

        Args:
            path: Path to YAML file

        Returns:
            TableSpec instance
        """
        with log_context(source=str(path), operation="load"):
            with open(path) as f:
                data = yaml.safe_load(f)

            if not isinstance(data, dict):
                raise TableConfigError(f"Expected a mapping in {path}, got {type(data).__name__}")

            spec = TableSpec.model_validate(data)

            errors = spec.validate_structure()
            if errors:
                raise TableConfigError(f"Invalid table in {path}: {errors}", table=spec.name, errors=errors)

            return spec

    def reload(self) -> int:
        """
        Reload all tables from disk.

        Returns:
            Number of tables loaded
        """
        self._cache.clear()
        self._loaded = False
        return self.load_all()
