# ============================================================================
# RULE UNWRAPPER TESTS
# ============================================================================
# STATUS: Tests - Wrapper peeling and default resolution
# PURPOSE: Verify nullability, innermost-default and factory semantics
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================
"""
Rule Unwrapper Tests

Run with:
    pytest tests/test_unwrap.py -v
"""

import pytest

from rulesql.models import rules, NumberRule, StringRule
from rulesql.schema.unwrap import UnwrappedRule, leaf_of, unwrap_rule


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def counter():
    """Zero-argument factory that records how often it is called."""
    class Counter:
        def __init__(self, value):
            self.calls = 0
            self.value = value

        def __call__(self):
            self.calls += 1
            return self.value

    return Counter


# ============================================================================
# WRAPPER PEELING
# ============================================================================


class TestUnwrapLeaf:
    def test_bare_leaf(self):
        result = unwrap_rule(rules.string())
        assert isinstance(result.leaf, StringRule)
        assert result.nullable is False
        assert result.has_default is False
        assert result.default_value is None

    def test_optional_is_nullable(self):
        result = unwrap_rule(rules.integer().optional())
        assert isinstance(result.leaf, NumberRule)
        assert result.nullable is True
        assert result.has_default is False

    def test_nullable_is_nullable(self):
        assert unwrap_rule(rules.string().nullable()).nullable is True

    def test_wrapper_order_does_not_matter(self):
        a = unwrap_rule(rules.string().nullable().default("x"))
        b = unwrap_rule(rules.string().default("x").nullable())
        assert a == b
        assert a.nullable is True
        assert a.default_value == "x"

    def test_default_alone_keeps_not_null(self):
        result = unwrap_rule(rules.enum(["a", "b"]).default("a"))
        assert result.nullable is False
        assert result.has_default is True
        assert result.default_value == "a"

    def test_none_default_is_recorded(self):
        result = unwrap_rule(rules.string().nullable().default(None))
        assert result.has_default is True
        assert result.default_value is None

    def test_deep_nesting_terminates(self):
        rule = rules.boolean()
        for _ in range(50):
            rule = rule.optional().nullable()
        result = unwrap_rule(rule)
        assert result.leaf == rules.boolean()
        assert result.nullable is True

    def test_result_is_frozen(self):
        result = unwrap_rule(rules.string())
        assert isinstance(result, UnwrappedRule)
        with pytest.raises(AttributeError):
            result.nullable = True

    def test_leaf_of_strips_all_wrappers(self):
        rule = rules.string().max(5).default("abc").optional()
        assert leaf_of(rule) == rules.string().max(5)


# ============================================================================
# DEFAULTS
# ============================================================================


class TestUnwrapDefaults:
    def test_innermost_default_wins(self):
        rule = rules.string().default("inner").default("outer")
        assert unwrap_rule(rule).default_value == "inner"

    def test_innermost_default_wins_across_other_wrappers(self):
        rule = rules.integer().default(1).nullable().default(2).optional()
        assert unwrap_rule(rule).default_value == 1

    def test_factory_called_once(self, counter):
        factory = counter("generated")
        result = unwrap_rule(rules.string().default(factory))
        assert result.default_value == "generated"
        assert factory.calls == 1

    def test_shadowed_factory_never_called(self, counter):
        inner = counter("inner")
        outer = counter("outer")
        result = unwrap_rule(rules.string().default(inner).default(outer))
        assert result.default_value == "inner"
        assert inner.calls == 1
        assert outer.calls == 0

    def test_factory_called_per_unwrap(self, counter):
        factory = counter(7)
        rule = rules.integer().default(factory)
        unwrap_rule(rule)
        unwrap_rule(rule)
        assert factory.calls == 2

    def test_leaf_of_does_not_call_factory(self, counter):
        factory = counter(7)
        leaf_of(rules.integer().default(factory))
        assert factory.calls == 0
