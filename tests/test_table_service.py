# ============================================================================
# TABLE SERVICE TESTS
# ============================================================================
# STATUS: Tests - YAML table definition loading
# PURPOSE: Verify loading, skipping bad files, lookup, register, compile
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================
"""
Table Service Tests

Run with:
    pytest tests/test_table_service.py -v
"""

import sqlite3
from pathlib import Path

import pytest

from rulesql.config import CompilerDefaults
from rulesql.contracts import ForeignKeyAction, TableConfigError
from rulesql.models import rules, ColumnSpec, TableSpec, DefaultRule, EnumRule, NumberRule
from services import TableService


USERS_YAML = """
name: users
primary_keys: [id]
columns:
  - name: id
    rule: {kind: number, format: safeint}
  - name: status
    rule:
      kind: default
      value: active
      inner: {kind: enum, values: [active, inactive]}
indexes:
  - name: idx_status
    columns: status
"""

ORDERS_YAML = """
name: orders
primary_keys: id
columns:
  - name: id
    rule: {kind: number, format: safeint}
  - name: user_id
    rule: {kind: number, format: safeint}
    references: {table: users, column: id, on_delete: CASCADE}
"""

BAD_KEY_YAML = """
name: broken
primary_keys: [missing]
columns:
  - name: id
    rule: {kind: number}
"""

BAD_RULE_YAML = """
name: broken_rule
columns:
  - name: id
    rule: {kind: nonsense}
"""

PROJECT_TABLES = Path(__file__).parent.parent / "tables"


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def tables_dir(tmp_path):
    (tmp_path / "users.yaml").write_text(USERS_YAML)
    (tmp_path / "orders.yml").write_text(ORDERS_YAML)
    return tmp_path


@pytest.fixture
def service(tables_dir):
    return TableService(tables_dir=str(tables_dir), compiler_defaults=CompilerDefaults())


# ============================================================================
# LOADING
# ============================================================================


class TestLoading:
    def test_load_all_reads_yaml_and_yml(self, service):
        assert service.load_all() == 2
        assert sorted(spec.name for spec in service.list_all()) == ["orders", "users"]

    def test_rule_tree_from_yaml(self, service):
        users = service.get_or_raise("users")
        status = users.get_column("status")
        assert isinstance(status.rule, DefaultRule)
        assert isinstance(status.rule.inner, EnumRule)
        assert status.rule.inner.values == ("active", "inactive")
        assert isinstance(users.get_column("id").rule, NumberRule)

    def test_shorthand_fields(self, service):
        orders = service.get_or_raise("orders")
        assert orders.primary_keys == ["id"]
        assert orders.get_column("user_id").references.on_delete == ForeignKeyAction.CASCADE
        assert service.get_or_raise("users").indexes[0].columns == ["status"]

    def test_bad_files_are_skipped(self, tables_dir):
        (tables_dir / "broken.yaml").write_text(BAD_KEY_YAML)
        (tables_dir / "broken_rule.yaml").write_text(BAD_RULE_YAML)
        (tables_dir / "garbage.yaml").write_text("- just\n- a list\n")
        (tables_dir / "unparseable.yaml").write_text("name: [unclosed\n")
        service = TableService(tables_dir=str(tables_dir))
        assert service.load_all() == 2
        assert service.get("broken") is None
        assert service.get("broken_rule") is None

    def test_missing_directory(self, tmp_path):
        service = TableService(tables_dir=str(tmp_path / "nope"))
        assert service.load_all() == 0
        assert service.list_all() == []

    def test_lazy_load_on_get(self, service):
        assert service.get("users") is not None

    def test_reload_picks_up_new_files(self, service, tables_dir):
        service.load_all()
        (tables_dir / "extra.yaml").write_text(USERS_YAML.replace("name: users", "name: extra"))
        assert service.reload() == 3
        assert service.get("extra") is not None


# ============================================================================
# LOOKUP AND REGISTRATION
# ============================================================================


class TestLookup:
    def test_get_or_raise_unknown(self, service):
        with pytest.raises(KeyError, match="Table not found: nope"):
            service.get_or_raise("nope")

    def test_register(self, service):
        spec = TableSpec(name="tags", columns=[ColumnSpec(name="label", rule=rules.string())])
        service.register(spec)
        assert service.get("tags") is spec

    def test_register_rejects_invalid(self, service):
        spec = TableSpec(
            name="bad",
            columns=[ColumnSpec(name="a", rule=rules.string())],
            primary_keys=["b"],
        )
        with pytest.raises(TableConfigError):
            service.register(spec)
        assert service.get("bad") is None


# ============================================================================
# COMPILATION
# ============================================================================


class TestCompile:
    def test_compile_by_name(self, service):
        compiled = service.compile("users")
        assert compiled.ddl == (
            "CREATE TABLE users (\n"
            "  id INTEGER NOT NULL,\n"
            "  status TEXT NOT NULL DEFAULT 'active' CHECK(status IN ('active', 'inactive')),\n"
            "  PRIMARY KEY (id)\n"
            ");"
        )
        assert compiled.index_statements == ("CREATE INDEX idx_status ON users (status);",)

    def test_compile_unknown(self, service):
        with pytest.raises(KeyError):
            service.compile("nope")

    def test_project_tables_deploy(self):
        """The shipped tables/ definitions compile and execute together."""
        service = TableService(tables_dir=str(PROJECT_TABLES), compiler_defaults=CompilerDefaults())
        assert service.load_all() >= 1

        conn = sqlite3.connect(":memory:")
        try:
            conn.execute("PRAGMA foreign_keys = ON")
            for spec in service.list_all():
                service.compile(spec.name).execute(conn)
            names = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")}
        finally:
            conn.close()

        assert {spec.name for spec in service.list_all()} <= names
