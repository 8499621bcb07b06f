# ============================================================================
# RULE NODE MODELS
# ============================================================================
# STATUS: Core model - Validation rule trees
# PURPOSE: Closed, tagged rule tree describing a column's type and bounds
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: Rule, RuleNode, Refinement, wrapper/leaf rule classes, builders
# DEPENDENCIES: pydantic
# ============================================================================
"""
Rule Node Models

A column's type is described by a rule tree: wrapper nodes (optional,
nullable, default) stacked around exactly one leaf node (string, number,
enum, ...). Nodes are frozen pydantic models discriminated by ``kind``, so
the same tree can be built fluently in Python or loaded from YAML:

    rules.string().min(3).max(20).optional()

    {"kind": "optional", "inner": {"kind": "string", "min_length": 3, "max_length": 20}}

Builder methods never mutate a node; they return a new one.
"""

import math
from typing import Annotated, Any, Callable, Dict, Literal, Optional, Sequence, Tuple, Union
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    field_validator,
    model_validator,
)

from rulesql.contracts import NumberFormat, StringFormat


LiteralValue = Union[StrictBool, StrictInt, StrictFloat, StrictStr, None]


class Refinement(BaseModel):
    """
    A validator-only predicate attached to a rule.

    Refinements run inside the row validator and never produce DDL.
    """
    model_config = ConfigDict(frozen=True)

    predicate: Callable[[Any], bool]
    message: str = "Invalid value"


class Rule(BaseModel):
    """Base class for every rule node."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    refinements: Tuple[Refinement, ...] = ()

    def _fields(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in type(self).model_fields}

    # =========================================================================
    # WRAPPERS
    # =========================================================================

    def optional(self) -> "OptionalRule":
        """Allow the value to be missing (column becomes NULL-able)."""
        return OptionalRule(inner=self)

    def nullable(self) -> "NullableRule":
        """Allow the value to be None (column becomes NULL-able)."""
        return NullableRule(inner=self)

    def default(self, value: Any) -> "DefaultRule":
        """
        Supply a default value.

        A zero-argument callable is treated as a factory and invoked lazily.
        """
        if callable(value):
            return DefaultRule(inner=self, factory=value)
        return DefaultRule(inner=self, value=value)

    # =========================================================================
    # COMPOSITION
    # =========================================================================

    def refine(self, predicate: Callable[[Any], bool], message: str = "Invalid value") -> "Rule":
        """Attach a custom predicate checked only by the row validator."""
        refinement = Refinement(predicate=predicate, message=message)
        return self.model_copy(update={"refinements": self.refinements + (refinement,)})

    def array(self) -> "ArrayRule":
        """Wrap this rule as the item rule of an array."""
        return ArrayRule(items=self)


# ============================================================================
# WRAPPER KINDS
# ============================================================================

class OptionalRule(Rule):
    kind: Literal["optional"] = "optional"
    inner: "RuleNode"


class NullableRule(Rule):
    kind: Literal["nullable"] = "nullable"
    inner: "RuleNode"


class DefaultRule(Rule):
    """
    Default value wrapper.

    Either ``value`` (a concrete default) or ``factory`` (a zero-argument
    callable) is used; ``factory`` wins when both are set.
    """
    kind: Literal["default"] = "default"
    inner: "RuleNode"
    value: Any = None
    factory: Optional[Callable[[], Any]] = None


# ============================================================================
# LEAF KINDS
# ============================================================================

class StringRule(Rule):
    """
    Text value, optionally with a sub-format and length bounds.

    Temporal formats (date, datetime, duration) change the storage type and
    validate into date/time objects, so they carry no length bounds.
    """
    kind: Literal["string"] = "string"
    format: Optional[StringFormat] = None
    min_length: Optional[int] = Field(default=None, ge=0)
    max_length: Optional[int] = Field(default=None, ge=0)
    exact_length: Optional[int] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def check_temporal_bounds(self) -> "StringRule":
        if self.format is not None and self.format.is_temporal() and self.has_length_bounds:
            raise ValueError(f"length bounds are not supported on '{self.format.value}' strings")
        return self

    @property
    def has_length_bounds(self) -> bool:
        return any(b is not None for b in (self.min_length, self.max_length, self.exact_length))

    def min(self, length: int) -> "StringRule":
        return self.model_validate({**self._fields(), "min_length": length})

    def max(self, length: int) -> "StringRule":
        return self.model_validate({**self._fields(), "max_length": length})

    def length(self, length: int) -> "StringRule":
        return self.model_validate({**self._fields(), "exact_length": length})


class NumberRule(Rule):
    """
    Numeric value.

    ``minimum``/``maximum`` are inclusive and rendered into CHECK clauses;
    the exclusive bounds are enforced by the row validator only.
    """
    kind: Literal["number"] = "number"
    format: NumberFormat = NumberFormat.NUMBER
    minimum: Optional[Union[StrictInt, StrictFloat]] = None
    maximum: Optional[Union[StrictInt, StrictFloat]] = None
    exclusive_minimum: Optional[Union[StrictInt, StrictFloat]] = None
    exclusive_maximum: Optional[Union[StrictInt, StrictFloat]] = None

    @field_validator("minimum", "maximum", "exclusive_minimum", "exclusive_maximum")
    @classmethod
    def check_finite(cls, v: Optional[Union[int, float]]) -> Optional[Union[int, float]]:
        if isinstance(v, float) and not math.isfinite(v):
            raise ValueError(f"numeric bounds must be finite, got {v!r}")
        return v

    def min(self, value: Union[int, float]) -> "NumberRule":
        return self.model_validate({**self._fields(), "minimum": value})

    def max(self, value: Union[int, float]) -> "NumberRule":
        return self.model_validate({**self._fields(), "maximum": value})

    def gt(self, value: Union[int, float]) -> "NumberRule":
        return self.model_validate({**self._fields(), "exclusive_minimum": value})

    def lt(self, value: Union[int, float]) -> "NumberRule":
        return self.model_validate({**self._fields(), "exclusive_maximum": value})

    def positive(self) -> "NumberRule":
        return self.gt(0)

    def nonnegative(self) -> "NumberRule":
        return self.min(0)


class EnumRule(Rule):
    """Closed set of string values, in declaration order."""
    kind: Literal["enum"] = "enum"
    values: Tuple[StrictStr, ...]

    @field_validator("values")
    @classmethod
    def check_values(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        if not v:
            raise ValueError("enum requires at least one value")
        if len(set(v)) != len(v):
            raise ValueError(f"enum values must be unique: {list(v)}")
        return v


class LiteralRule(Rule):
    """One or more exact scalar values."""
    kind: Literal["literal"] = "literal"
    values: Tuple[LiteralValue, ...]

    @field_validator("values")
    @classmethod
    def check_values(cls, v: Tuple[Any, ...]) -> Tuple[Any, ...]:
        if not v:
            raise ValueError("literal requires at least one value")
        for value in v:
            if isinstance(value, float) and not math.isfinite(value):
                raise ValueError(f"literal values must be finite, got {value!r}")
        return v


class UnionRule(Rule):
    kind: Literal["union"] = "union"
    options: Tuple["RuleNode", ...] = Field(min_length=1)

    @property
    def is_literal_union(self) -> bool:
        """True when every branch is a bare literal."""
        return all(isinstance(option, LiteralRule) for option in self.options)


class ArrayRule(Rule):
    kind: Literal["array"] = "array"
    items: "RuleNode"


class ObjectRule(Rule):
    kind: Literal["object"] = "object"
    shape: Dict[str, "RuleNode"]


class BooleanRule(Rule):
    kind: Literal["boolean"] = "boolean"


class BigIntRule(Rule):
    kind: Literal["bigint"] = "bigint"


class NullRule(Rule):
    kind: Literal["null"] = "null"


class UndefinedRule(Rule):
    kind: Literal["undefined"] = "undefined"


class BlobRule(Rule):
    kind: Literal["blob"] = "blob"


class AnyRule(Rule):
    """Unconstrained value; stored as TEXT."""
    kind: Literal["any"] = "any"


RuleNode = Annotated[
    Union[
        OptionalRule,
        NullableRule,
        DefaultRule,
        StringRule,
        NumberRule,
        EnumRule,
        LiteralRule,
        UnionRule,
        ArrayRule,
        ObjectRule,
        BooleanRule,
        BigIntRule,
        NullRule,
        UndefinedRule,
        BlobRule,
        AnyRule,
    ],
    Field(discriminator="kind"),
]

WRAPPER_TYPES = (OptionalRule, NullableRule, DefaultRule)

for _model in (OptionalRule, NullableRule, DefaultRule, UnionRule, ArrayRule, ObjectRule):
    _model.model_rebuild()


# ============================================================================
# BUILDERS
# ============================================================================

def string() -> StringRule:
    return StringRule()


def email() -> StringRule:
    return StringRule(format=StringFormat.EMAIL)


def url() -> StringRule:
    return StringRule(format=StringFormat.URL)


def uuid() -> StringRule:
    return StringRule(format=StringFormat.UUID)


def iso_date() -> StringRule:
    """ISO-8601 date, stored as DATE."""
    return StringRule(format=StringFormat.DATE)


def iso_datetime() -> StringRule:
    """ISO-8601 timestamp, stored as DATETIME."""
    return StringRule(format=StringFormat.DATETIME)


def iso_duration() -> StringRule:
    """Duration (ISO-8601 or seconds), stored as INTEGER seconds."""
    return StringRule(format=StringFormat.DURATION)


def number() -> NumberRule:
    return NumberRule()


def integer() -> NumberRule:
    """Safe integer (|n| <= 2**53 - 1)."""
    return NumberRule(format=NumberFormat.SAFEINT)


def int32() -> NumberRule:
    return NumberRule(format=NumberFormat.INT32)


def uint32() -> NumberRule:
    return NumberRule(format=NumberFormat.UINT32)


def float32() -> NumberRule:
    return NumberRule(format=NumberFormat.FLOAT32)


def float64() -> NumberRule:
    return NumberRule(format=NumberFormat.FLOAT64)


def boolean() -> BooleanRule:
    return BooleanRule()


def bigint() -> BigIntRule:
    return BigIntRule()


def enum(values: Sequence[str]) -> EnumRule:
    return EnumRule(values=tuple(values))


def literal(*values: Any) -> LiteralRule:
    return LiteralRule(values=values)


def union(options: Sequence[Rule]) -> UnionRule:
    return UnionRule(options=tuple(options))


def array(items: Rule) -> ArrayRule:
    return ArrayRule(items=items)


def object_(shape: Dict[str, Rule]) -> ObjectRule:
    return ObjectRule(shape=shape)


def null() -> NullRule:
    return NullRule()


def undefined() -> UndefinedRule:
    return UndefinedRule()


def blob() -> BlobRule:
    return BlobRule()


def any_() -> AnyRule:
    return AnyRule()


__all__ = [
    "Rule",
    "RuleNode",
    "Refinement",
    "LiteralValue",
    "WRAPPER_TYPES",
    # Wrappers
    "OptionalRule",
    "NullableRule",
    "DefaultRule",
    # Leaves
    "StringRule",
    "NumberRule",
    "EnumRule",
    "LiteralRule",
    "UnionRule",
    "ArrayRule",
    "ObjectRule",
    "BooleanRule",
    "BigIntRule",
    "NullRule",
    "UndefinedRule",
    "BlobRule",
    "AnyRule",
    # Builders
    "string",
    "email",
    "url",
    "uuid",
    "iso_date",
    "iso_datetime",
    "iso_duration",
    "number",
    "integer",
    "int32",
    "uint32",
    "float32",
    "float64",
    "boolean",
    "bigint",
    "enum",
    "literal",
    "union",
    "array",
    "object_",
    "null",
    "undefined",
    "blob",
    "any_",
]
