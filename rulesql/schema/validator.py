# ============================================================================
# ROW VALIDATOR BUILDER
# ============================================================================
# STATUS: Core - Runtime validation from the same rule trees as the DDL
# PURPOSE: Build a pydantic row model from a table's column rules
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: RowModel, build_row_validator, rule_annotation, rule_field
# DEPENDENCIES: pydantic, annotated_types
# ============================================================================
"""
Row Validator Builder.

The DDL only captures what SQLite can enforce. The row validator is built
from the *unmodified* column rules and enforces everything: formats,
exclusive bounds, refinements, nested arrays/objects. Pydantic aggregates
every column failure into a single ValidationError.

    Users = build_row_validator("users", spec.columns)
    Users.model_validate({"id": 1, "email": "a@b.io"})

Field semantics:
    optional  -> Optional[T], may be missing (None)
    nullable  -> Optional[T], must be present
    default   -> field default / default_factory
"""

import keyword
import logging
from datetime import date, datetime, timedelta
from typing import Annotated, Any, Dict, List, Literal, Optional, Sequence, Tuple, Type, Union

from annotated_types import Ge, Gt, Le, Lt, MaxLen, MinLen
from pydantic import AfterValidator, AllowInfNan, BaseModel, ConfigDict, Field, StringConstraints, create_model
from pydantic.fields import FieldInfo

from rulesql.contracts import NumberFormat, StringFormat
from rulesql.models.rules import (
    WRAPPER_TYPES,
    AnyRule,
    ArrayRule,
    BigIntRule,
    BlobRule,
    BooleanRule,
    DefaultRule,
    EnumRule,
    LiteralRule,
    NullableRule,
    NullRule,
    NumberRule,
    ObjectRule,
    OptionalRule,
    Refinement,
    Rule,
    StringRule,
    UndefinedRule,
    UnionRule,
)
from rulesql.models.table import ColumnSpec

logger = logging.getLogger(__name__)


STRING_PATTERNS = {
    StringFormat.EMAIL: r"^[A-Za-z0-9._%+'-]+@[A-Za-z0-9-]+(\.[A-Za-z0-9-]+)*\.[A-Za-z]{2,}$",
    StringFormat.URL: r"^[A-Za-z][A-Za-z0-9+.-]*://[^\s/?#]+[^\s]*$",
    StringFormat.UUID: r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$",
}

TEMPORAL_TYPES = {
    StringFormat.DATE: date,
    StringFormat.DATETIME: datetime,
    StringFormat.DURATION: timedelta,
}

# (lower, upper) inclusive range implied by each numeric format
NUMBER_FORMAT_RANGES = {
    NumberFormat.INT32: (-(2 ** 31), 2 ** 31 - 1),
    NumberFormat.UINT32: (0, 2 ** 32 - 1),
    NumberFormat.SAFEINT: (-(2 ** 53 - 1), 2 ** 53 - 1),
    NumberFormat.FLOAT32: (-3.4028234663852886e38, 3.4028234663852886e38),
}


class RowModel(BaseModel):
    """Base class for generated row models."""
    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())


# ============================================================================
# ANNOTATIONS
# ============================================================================

def _refinement_validator(refinement: Refinement) -> AfterValidator:
    def check(value: Any) -> Any:
        if not refinement.predicate(value):
            raise ValueError(refinement.message)
        return value
    return AfterValidator(check)


def _with_metadata(annotation: Any, metadata: Sequence[Any]) -> Any:
    if not metadata:
        return annotation
    return Annotated[(annotation, *metadata)]


def _tightest(values: List[Any], pick) -> Optional[Any]:
    present = [v for v in values if v is not None]
    return pick(present) if present else None


def _string_annotation(leaf: StringRule) -> Any:
    if leaf.format in TEMPORAL_TYPES:
        return TEMPORAL_TYPES[leaf.format]

    metadata = []
    lower = _tightest([leaf.min_length, leaf.exact_length], max)
    upper = _tightest([leaf.max_length, leaf.exact_length], min)
    if lower is not None:
        metadata.append(MinLen(lower))
    if upper is not None:
        metadata.append(MaxLen(upper))
    if leaf.format in STRING_PATTERNS:
        metadata.append(StringConstraints(pattern=STRING_PATTERNS[leaf.format]))
    return _with_metadata(str, metadata)


def _number_annotation(leaf: NumberRule) -> Any:
    base = int if leaf.format.is_integer() else float
    format_min, format_max = NUMBER_FORMAT_RANGES.get(leaf.format, (None, None))

    metadata: List[Any] = []
    lower = _tightest([format_min, leaf.minimum], max)
    upper = _tightest([format_max, leaf.maximum], min)
    if lower is not None:
        metadata.append(Ge(lower))
    if upper is not None:
        metadata.append(Le(upper))
    if leaf.exclusive_minimum is not None:
        metadata.append(Gt(leaf.exclusive_minimum))
    if leaf.exclusive_maximum is not None:
        metadata.append(Lt(leaf.exclusive_maximum))
    if base is float:
        metadata.append(AllowInfNan(False))
    return _with_metadata(base, metadata)


def rule_annotation(rule: Rule, model_name: str = "Value") -> Any:
    """
    Translate a rule node (wrappers included) into a type annotation.

    Args:
        rule: Rule node
        model_name: Name used for nested object models

    Returns:
        Annotation usable by pydantic
    """
    if isinstance(rule, (OptionalRule, NullableRule)):
        annotation = Optional[rule_annotation(rule.inner, model_name)]
    elif isinstance(rule, DefaultRule):
        annotation = rule_annotation(rule.inner, model_name)
    elif isinstance(rule, StringRule):
        annotation = _string_annotation(rule)
    elif isinstance(rule, NumberRule):
        annotation = _number_annotation(rule)
    elif isinstance(rule, (EnumRule, LiteralRule)):
        annotation = Literal[tuple(rule.values)]
    elif isinstance(rule, UnionRule):
        annotation = Union[tuple(rule_annotation(option, model_name) for option in rule.options)]
    elif isinstance(rule, ArrayRule):
        annotation = List[rule_annotation(rule.items, f"{model_name}Item")]
    elif isinstance(rule, ObjectRule):
        annotation = _build_model(model_name, list(rule.shape.items()))
    elif isinstance(rule, BooleanRule):
        annotation = bool
    elif isinstance(rule, BigIntRule):
        annotation = int
    elif isinstance(rule, (NullRule, UndefinedRule)):
        annotation = type(None)
    elif isinstance(rule, BlobRule):
        annotation = bytes
    else:
        if not isinstance(rule, AnyRule):
            logger.debug(f"No validator mapping for rule kind {getattr(rule, 'kind', None)!r}, using Any")
        annotation = Any

    return _with_metadata(annotation, [_refinement_validator(r) for r in rule.refinements])


# ============================================================================
# FIELDS
# ============================================================================

def rule_field(rule: Rule, alias: Optional[str] = None) -> FieldInfo:
    """
    Build the FieldInfo (required / default / default_factory) for a rule.

    The innermost default wins, matching the DDL DEFAULT clause; an optional
    layer or an ``undefined`` leaf makes the field not required.
    """
    innermost_default: Optional[DefaultRule] = None
    missing_allowed = False
    current = rule

    while isinstance(current, WRAPPER_TYPES):
        if isinstance(current, OptionalRule):
            missing_allowed = True
        elif isinstance(current, DefaultRule):
            innermost_default = current
        current = current.inner

    if isinstance(current, UndefinedRule):
        missing_allowed = True

    if innermost_default is not None:
        if innermost_default.factory is not None:
            return Field(default_factory=innermost_default.factory, alias=alias)
        return Field(default=innermost_default.value, alias=alias)

    if missing_allowed:
        return Field(default=None, alias=alias)

    return Field(..., alias=alias)


def _usable_name(name: str) -> bool:
    return (
        name.isidentifier()
        and not keyword.iskeyword(name)
        and not name.startswith("_")
        and not hasattr(BaseModel, name)
    )


def _field_names(names: Sequence[str]) -> List[Tuple[str, Optional[str]]]:
    """
    Python attribute name for each column, plus alias when it differs.

    Generated names never collide with a column that keeps its own name.
    """
    taken = {name for name in names if _usable_name(name)}
    result: List[Tuple[str, Optional[str]]] = []
    for position, name in enumerate(names):
        if _usable_name(name):
            result.append((name, None))
            continue
        candidate = f"column_{position}"
        while candidate in taken:
            candidate += "_"
        taken.add(candidate)
        result.append((candidate, name))
    return result


def _pascal(name: str) -> str:
    parts = [p for p in "".join(c if c.isalnum() else "_" for c in name).split("_") if p]
    return "".join(p[:1].upper() + p[1:] for p in parts) or "Row"


def _build_model(model_name: str, items: List[Tuple[str, Rule]]) -> Type[RowModel]:
    fields: Dict[str, Any] = {}
    names = _field_names([name for name, _ in items])
    for (name, rule), (field_name, alias) in zip(items, names):
        annotation = rule_annotation(rule, f"{model_name}{_pascal(name)}")
        fields[field_name] = (annotation, rule_field(rule, alias=alias))

    return create_model(model_name, __base__=RowModel, **fields)


def build_row_validator(table_name: str, columns: Sequence[ColumnSpec], suffix: str = "Row") -> Type[RowModel]:
    """
    Build the composite row validator for a table.

    Args:
        table_name: Table name (used for the model name)
        columns: Column definitions in declared order
        suffix: Model name suffix

    Returns:
        Pydantic model class with one typed field per column
    """
    model_name = f"{_pascal(table_name)}{suffix}"
    model = _build_model(model_name, [(column.name, column.rule) for column in columns])
    logger.debug(f"Built row validator {model_name} with {len(columns)} fields")
    return model


__all__ = [
    "RowModel",
    "STRING_PATTERNS",
    "NUMBER_FORMAT_RANGES",
    "rule_annotation",
    "rule_field",
    "build_row_validator",
]
