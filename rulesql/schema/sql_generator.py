# ============================================================================
# TABLE SPEC TO SQL GENERATOR
# ============================================================================
# STATUS: Core - DDL generation from rule-tree table definitions
# PURPOSE: Generate SQLite CREATE statements and row validators from TableSpec
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: TableCompiler, CompiledTable, compile_table
# DEPENDENCIES: pydantic
# ============================================================================
"""
TableSpec to SQLite Schema Generator.

A TableSpec is the SINGLE SOURCE OF TRUTH for a table: the same rule trees
produce the CREATE TABLE text, the CREATE INDEX statements and the runtime
row validator.

Column clause order:
    name TYPE [NOT NULL] [DEFAULT v] [UNIQUE] [CHECK(...)]
        [REFERENCES t(c) [ON DELETE a] [ON UPDATE a]]

Usage:
    compiled = compile_table(spec)
    compiled.ddl                 # CREATE TABLE ...;
    compiled.index_statements    # (CREATE INDEX ...;, ...)
    compiled.validate(row)       # normalized dict or ValidationError
    compiled.execute(conn)       # run everything on a sqlite3 connection
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type

from pydantic import BaseModel

from rulesql.config import CompilerDefaults
from rulesql.contracts import TableConfigError
from rulesql.logging import log_context
from rulesql.models.table import ColumnSpec, TableSpec
from rulesql.schema.ddl_utils import CheckBuilder, IndexBuilder, format_default_value, get_storage_type
from rulesql.schema.unwrap import unwrap_rule
from rulesql.schema.validator import build_row_validator

# Setup logger
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompiledTable:
    """
    Output of a table compile.

    Attributes:
        name: Table name
        ddl: CREATE TABLE statement
        index_statements: CREATE INDEX statements in declared order
        validator: Pydantic row model for the table
    """
    name: str
    ddl: str
    index_statements: Tuple[str, ...]
    validator: Type[BaseModel]

    def validate(self, row: Dict[str, Any]) -> Dict[str, Any]:
        """
        Validate a row against every column rule.

        Raises:
            pydantic.ValidationError: One error per failing column
        """
        return self.validator.model_validate(row).model_dump(by_alias=True)

    def statements(self) -> List[str]:
        """CREATE TABLE first, then indexes."""
        return [self.ddl, *self.index_statements]

    def execute(self, conn, dry_run: bool = False) -> int:
        """
        Execute all DDL statements.

        Args:
            conn: DB-API connection (e.g. sqlite3)
            dry_run: If True, log statements but don't execute

        Returns:
            Number of statements executed
        """
        statements = self.statements()

        if dry_run:
            for stmt in statements:
                logger.info(f"[DRY RUN] {stmt.splitlines()[0][:100]}...")
            return len(statements)

        cursor = conn.cursor()
        try:
            for stmt in statements:
                cursor.execute(stmt)
        finally:
            cursor.close()
        conn.commit()

        logger.info(f"Executed {len(statements)} DDL statements for table {self.name}")
        return len(statements)


class TableCompiler:
    """
    Convert TableSpec definitions to SQLite DDL statements.

    Holds only immutable configuration; safe to share between threads.
    """

    def __init__(self, defaults: Optional[CompilerDefaults] = None):
        """
        Initialize compiler.

        Args:
            defaults: Compiler settings (built-in CompilerDefaults when omitted;
                      the environment is never consulted here)
        """
        self.defaults = defaults if defaults is not None else CompilerDefaults()

    # =========================================================================
    # COLUMN GENERATION
    # =========================================================================

    def column_definition(self, column: ColumnSpec) -> str:
        """
        Render one column definition.

        Args:
            column: Column with rule tree

        Returns:
            Column fragment, e.g. "age INTEGER NOT NULL CHECK(age >= 0)"
        """
        unwrapped = unwrap_rule(column.rule)
        storage_type = get_storage_type(unwrapped.leaf)

        parts = [column.name, storage_type.value]

        if not unwrapped.nullable:
            parts.append("NOT NULL")

        if unwrapped.has_default:
            parts.append(format_default_value(unwrapped.default_value, storage_type))

        if column.unique:
            parts.append("UNIQUE")

        check = CheckBuilder.for_rule(column.name, column.rule)
        if check:
            parts.append(check)

        fk = column.references
        if fk is not None:
            parts.append(f"REFERENCES {fk.table}({fk.column})")
            if fk.on_delete is not None:
                parts.append(f"ON DELETE {fk.on_delete.value}")
            if fk.on_update is not None:
                parts.append(f"ON UPDATE {fk.on_update.value}")

        definition = " ".join(parts)
        logger.debug(f"Column {column.name}: {definition}")
        return definition

    @staticmethod
    def primary_key_constraint(keys: Sequence[str]) -> Optional[str]:
        """PRIMARY KEY clause, or None when no keys are declared."""
        if not keys:
            return None
        return f"PRIMARY KEY ({', '.join(keys)})"

    # =========================================================================
    # TABLE GENERATION
    # =========================================================================

    def check_structure(self, spec: TableSpec) -> None:
        """
        Raise TableConfigError if the table's keys, columns or indexes are inconsistent.
        """
        errors = spec.validate_structure()
        if errors:
            for error in errors:
                logger.error(f"Table {spec.name}: {error}")
            raise TableConfigError(
                f"Invalid table '{spec.name}': {'; '.join(errors)}",
                table=spec.name,
                errors=errors,
            )

    def generate_table(self, spec: TableSpec) -> str:
        """
        Generate CREATE TABLE DDL from a TableSpec.

        Args:
            spec: Table definition

        Returns:
            CREATE TABLE statement terminated by a semicolon

        Raises:
            TableConfigError: Unknown primary key / index column and similar
        """
        self.check_structure(spec)

        fragments = []
        for column in spec.columns:
            with log_context(column=column.name):
                fragments.append(self.column_definition(column))

        pk = self.primary_key_constraint(spec.primary_keys)
        if pk:
            fragments.append(pk)

        exists_clause = "IF NOT EXISTS " if self.defaults.if_not_exists else ""
        body = ",\n  ".join(fragments)
        return f"CREATE TABLE {exists_clause}{spec.name} (\n  {body}\n);"

    # =========================================================================
    # INDEX GENERATION
    # =========================================================================

    def generate_indexes(self, spec: TableSpec) -> List[str]:
        """
        Generate CREATE INDEX statements for a TableSpec.

        Returns:
            List of statements (empty when no indexes are declared)
        """
        self.check_structure(spec)
        return IndexBuilder.create_all(spec.name, spec.indexes, self.defaults.if_not_exists)

    # =========================================================================
    # COMPLETE COMPILATION
    # =========================================================================

    def compile(self, spec: TableSpec) -> CompiledTable:
        """
        Compile DDL, indexes and the row validator for one table.

        Args:
            spec: Table definition

        Returns:
            CompiledTable
        """
        with log_context(table=spec.name, operation="compile"):
            ddl = self.generate_table(spec)
            indexes = IndexBuilder.create_all(spec.name, spec.indexes, self.defaults.if_not_exists)
            validator = build_row_validator(spec.name, spec.columns, suffix=self.defaults.row_model_suffix)

            logger.info(
                f"Compiled table {spec.name}: {len(spec.columns)} columns, "
                f"{len(indexes)} indexes"
            )

        return CompiledTable(
            name=spec.name,
            ddl=ddl,
            index_statements=tuple(indexes),
            validator=validator,
        )


def compile_table(spec: TableSpec, defaults: Optional[CompilerDefaults] = None) -> CompiledTable:
    """Compile a TableSpec with a fresh TableCompiler."""
    return TableCompiler(defaults).compile(spec)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = ["CompiledTable", "TableCompiler", "compile_table"]
