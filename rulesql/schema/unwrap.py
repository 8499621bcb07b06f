# ============================================================================
# RULE UNWRAPPER
# ============================================================================
# STATUS: Core - Wrapper peeling for rule trees
# PURPOSE: Find a column's leaf rule, nullability and default value
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: UnwrappedRule, unwrap_rule, leaf_of
# DEPENDENCIES: rulesql.models
# ============================================================================
"""
Rule Unwrapper.

Peels optional / nullable / default layers, in whatever order they were
stacked, until a leaf rule is reached:

    default(nullable(string))  ->  leaf=string, nullable=True, default=...

The innermost default wins. A default factory is invoked exactly once, after
traversal, so outer (shadowed) factories are never called.
"""

from dataclasses import dataclass
from typing import Any, Optional

from rulesql.models.rules import WRAPPER_TYPES, DefaultRule, NullableRule, OptionalRule, Rule


@dataclass(frozen=True)
class UnwrappedRule:
    """Per-column derivation inputs. Computed per compile call, never stored."""
    leaf: Rule
    nullable: bool = False
    has_default: bool = False
    default_value: Any = None


def leaf_of(rule: Rule) -> Rule:
    """Strip every wrapper layer without evaluating defaults."""
    current = rule
    while isinstance(current, WRAPPER_TYPES):
        current = current.inner
    return current


def unwrap_rule(rule: Rule) -> UnwrappedRule:
    """
    Unwrap a rule tree and collect column metadata.

    Args:
        rule: Column rule, possibly wrapped

    Returns:
        UnwrappedRule with the leaf, nullability and resolved default
    """
    nullable = False
    innermost_default: Optional[DefaultRule] = None
    current = rule

    while True:
        if isinstance(current, (OptionalRule, NullableRule)):
            nullable = True
            current = current.inner
        elif isinstance(current, DefaultRule):
            innermost_default = current
            current = current.inner
        else:
            break

    if innermost_default is None:
        return UnwrappedRule(leaf=current, nullable=nullable)

    if innermost_default.factory is not None:
        value = innermost_default.factory()
    else:
        value = innermost_default.value

    return UnwrappedRule(leaf=current, nullable=nullable, has_default=True, default_value=value)


__all__ = ["UnwrappedRule", "unwrap_rule", "leaf_of"]
