# ============================================================================
# TYPE MAPPING TESTS
# ============================================================================
# STATUS: Tests - Leaf rule to SQLite storage type
# PURPOSE: Verify every leaf kind and format maps to one storage type
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================
"""
Type Mapping Tests

Run with:
    pytest tests/test_type_mapping.py -v
"""

from typing import Literal

from rulesql.contracts import StorageType
from rulesql.models import rules, Rule
from rulesql.schema.ddl_utils import get_storage_type


class CustomRule(Rule):
    """Leaf kind the compiler has no mapping for."""
    kind: Literal["custom"] = "custom"


# ============================================================================
# STRING FORMATS
# ============================================================================


class TestStringStorage:
    def test_plain_string_is_text(self):
        assert get_storage_type(rules.string()) == StorageType.TEXT

    def test_length_bounded_string_is_text(self):
        assert get_storage_type(rules.string().min(1).max(10)) == StorageType.TEXT
        assert get_storage_type(rules.string().length(2)) == StorageType.TEXT

    def test_identifier_formats_are_text(self):
        assert get_storage_type(rules.email()) == StorageType.TEXT
        assert get_storage_type(rules.url()) == StorageType.TEXT
        assert get_storage_type(rules.uuid()) == StorageType.TEXT

    def test_date(self):
        assert get_storage_type(rules.iso_date()) == StorageType.DATE

    def test_datetime(self):
        assert get_storage_type(rules.iso_datetime()) == StorageType.DATETIME

    def test_duration_is_integer_seconds(self):
        assert get_storage_type(rules.iso_duration()) == StorageType.INTEGER


# ============================================================================
# NUMBER FORMATS
# ============================================================================


class TestNumberStorage:
    def test_integer_formats(self):
        assert get_storage_type(rules.int32()) == StorageType.INTEGER
        assert get_storage_type(rules.uint32()) == StorageType.INTEGER
        assert get_storage_type(rules.integer()) == StorageType.INTEGER

    def test_float_formats(self):
        assert get_storage_type(rules.float32()) == StorageType.FLOAT
        assert get_storage_type(rules.float64()) == StorageType.FLOAT

    def test_plain_number_is_real(self):
        assert get_storage_type(rules.number()) == StorageType.REAL

    def test_bounds_do_not_change_type(self):
        assert get_storage_type(rules.int32().min(0).max(10)) == StorageType.INTEGER


# ============================================================================
# OTHER KINDS
# ============================================================================


class TestOtherStorage:
    def test_closed_sets_are_text(self):
        assert get_storage_type(rules.enum(["a", "b"])) == StorageType.TEXT
        assert get_storage_type(rules.literal("a")) == StorageType.TEXT
        assert get_storage_type(rules.union([rules.literal("a"), rules.integer()])) == StorageType.TEXT

    def test_structured_values_are_text(self):
        assert get_storage_type(rules.array(rules.string())) == StorageType.TEXT
        assert get_storage_type(rules.object_({"a": rules.integer()})) == StorageType.TEXT

    def test_scalar_kinds(self):
        assert get_storage_type(rules.boolean()) == StorageType.BOOLEAN
        assert get_storage_type(rules.bigint()) == StorageType.BIGINT
        assert get_storage_type(rules.blob()) == StorageType.BLOB

    def test_null_and_undefined(self):
        assert get_storage_type(rules.null()) == StorageType.NULL
        assert get_storage_type(rules.undefined()) == StorageType.NULL

    def test_any_falls_back_to_text(self):
        assert get_storage_type(rules.any_()) == StorageType.TEXT

    def test_unknown_kind_falls_back_to_text(self):
        assert get_storage_type(CustomRule()) == StorageType.TEXT

    def test_storage_type_value_is_sql_keyword(self):
        """Enum .value is what lands in the DDL."""
        assert StorageType.DATETIME.value == "DATETIME"
        assert StorageType.BIGINT.value == "BIGINT"
