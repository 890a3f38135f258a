"""
options-checker — schema normalization and compilation.

File: src/options_checker/schema.py

Purpose
- Turn declarative option definitions into immutable, typed rules.

What is included in this file
- Canonical type vocabulary and case-insensitive type-token aliases.
- Definition-key normalization (camelCase and legacy spellings to snake_case).
- One frozen rule class per canonical type, sharing the ``OptionRule`` base.
- ``OptionSchema``: a read-only mapping of option name to rule.

Functional requirements
- Compilation is pure: caller-supplied mappings are never mutated.
- ``NonEmptyString`` expands to a string rule with ``min_length=1``.
- Authoring mistakes raise ``SchemaDefinitionError`` with the option path.
- Unknown or inapplicable definition fields are ignored with a debug note.

Non-functional requirements
- Compiled schemas are immutable and safe to share between threads.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, fields
from enum import Enum, StrEnum
from numbers import Real
from types import MappingProxyType
from typing import Any, ClassVar, Final, NoReturn

from options_checker.diagnostics import describe_value
from options_checker.errors import IssueKind, OptionsIssue, SchemaDefinitionError

_LOGGER = logging.getLogger(__name__)


class _Missing(Enum):
    MISSING = "MISSING"

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Final = _Missing.MISSING
"""Marker for "no default defined" and "option not given"."""


class OptionType(StrEnum):
    """Closed vocabulary of canonical option types."""

    BOOLEAN = "boolean"
    FUNCTION = "function"
    NUMBER = "number"
    NUMBER_GREATER_THAN_ZERO = "NumberGreaterThanZero"
    NON_ZERO_NUMBER = "NonZeroNumber"
    STRING = "string"
    OBJECT = "object"
    ARRAY = "array"
    CUSTOM = "custom"


NON_EMPTY_STRING: Final[str] = "NonEmptyString"

_TYPE_ALIASES: Final[dict[str, str]] = {
    "bool": OptionType.BOOLEAN.value,
    "func": OptionType.FUNCTION.value,
    "nonemptystring": NON_EMPTY_STRING,
    "numbergreaterthanzero": OptionType.NUMBER_GREATER_THAN_ZERO.value,
    "nonzeronumber": OptionType.NON_ZERO_NUMBER.value,
}

_CAMEL_CASE_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")

_DEFINITION_KEY_ALIASES: Final[dict[str, str]] = {
    "checker": "custom_check",
    "check_description": "custom_check_description",
    "min": "minimum",
    "max": "maximum",
}


def normalize_type_token(token: str) -> str:
    """Map a raw type token to its canonical spelling.

    Matching is case-insensitive. Tokens without a registered alias are returned
    lower-cased, so ``"Array"`` becomes ``"array"``.
    """

    lowered = token.lower()
    return _TYPE_ALIASES.get(lowered, lowered)


def normalize_key(key: str) -> str:
    """Convert a camelCase key to snake_case (``strictDefault`` -> ``strict_default``)."""

    return _CAMEL_CASE_BOUNDARY.sub(r"\1_\2", key).lower()


@dataclass(frozen=True, slots=True)
class OptionRule:
    """Fields shared by every option rule."""

    required: bool = False
    default: Any = MISSING
    strict_default: bool | None = None
    custom_check: Callable[[Any], object] | None = None
    custom_check_description: str | None = None
    transform_function: Callable[[Any], Any] | None = None

    option_type: ClassVar[OptionType | None] = None

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING


@dataclass(frozen=True, slots=True)
class AnyRule(OptionRule):
    """No type check; the given value is accepted as-is."""


@dataclass(frozen=True, slots=True)
class BooleanRule(OptionRule):
    option_type: ClassVar[OptionType | None] = OptionType.BOOLEAN


@dataclass(frozen=True, slots=True)
class FunctionRule(OptionRule):
    option_type: ClassVar[OptionType | None] = OptionType.FUNCTION


@dataclass(frozen=True, slots=True)
class NumberRule(OptionRule):
    """Real number with optional inclusive bounds."""

    minimum: float | None = None
    maximum: float | None = None

    option_type: ClassVar[OptionType | None] = OptionType.NUMBER


@dataclass(frozen=True, slots=True)
class PositiveNumberRule(OptionRule):
    option_type: ClassVar[OptionType | None] = OptionType.NUMBER_GREATER_THAN_ZERO


@dataclass(frozen=True, slots=True)
class NonZeroNumberRule(OptionRule):
    option_type: ClassVar[OptionType | None] = OptionType.NON_ZERO_NUMBER


@dataclass(frozen=True, slots=True)
class StringRule(OptionRule):
    """String with optional bounds on its character count."""

    min_length: int | None = None
    max_length: int | None = None

    option_type: ClassVar[OptionType | None] = OptionType.STRING


@dataclass(frozen=True, slots=True)
class ObjectRule(OptionRule):
    """Any non-primitive value, optionally of a class and with a nested schema."""

    object_class: type | None = None
    object_definition: OptionSchema | None = None

    option_type: ClassVar[OptionType | None] = OptionType.OBJECT

    def __post_init__(self) -> None:
        if self.object_definition is not None and not isinstance(
            self.object_definition, OptionSchema
        ):
            object.__setattr__(self, "object_definition", compile_schema(self.object_definition))


@dataclass(frozen=True, slots=True)
class ArrayRule(OptionRule):
    """List or tuple with optional element-count bounds and a per-element rule."""

    min_length: int | None = None
    max_length: int | None = None
    element_definition: OptionRule | None = None

    option_type: ClassVar[OptionType | None] = OptionType.ARRAY

    def __post_init__(self) -> None:
        if self.element_definition is not None and not isinstance(
            self.element_definition, OptionRule
        ):
            object.__setattr__(
                self,
                "element_definition",
                compile_rule(self.element_definition, name="element"),
            )


@dataclass(frozen=True, slots=True)
class CustomRule(OptionRule):
    """No built-in check; only ``custom_check`` decides."""

    option_type: ClassVar[OptionType | None] = OptionType.CUSTOM


_RULE_CLASSES: Final[dict[str, type[OptionRule]]] = {
    OptionType.BOOLEAN.value: BooleanRule,
    OptionType.FUNCTION.value: FunctionRule,
    OptionType.NUMBER.value: NumberRule,
    OptionType.NUMBER_GREATER_THAN_ZERO.value: PositiveNumberRule,
    OptionType.NON_ZERO_NUMBER.value: NonZeroNumberRule,
    OptionType.STRING.value: StringRule,
    OptionType.OBJECT.value: ObjectRule,
    OptionType.ARRAY.value: ArrayRule,
    OptionType.CUSTOM.value: CustomRule,
}

_DEFINITION_KEYS: Final[frozenset[str]] = frozenset(
    {"type"}
    | {
        item.name
        for rule_class in (AnyRule, *_RULE_CLASSES.values())
        for item in fields(rule_class)
    }
)

_LENGTH_FIELDS: Final[tuple[str, ...]] = ("min_length", "max_length")
_BOUND_FIELDS: Final[tuple[str, ...]] = ("minimum", "maximum")
_HOOK_FIELDS: Final[tuple[str, ...]] = ("custom_check", "transform_function")


class OptionSchema(Mapping[str, OptionRule]):
    """Read-only mapping of option name to compiled rule."""

    __slots__ = ("_rules",)

    def __init__(self, rules: Mapping[str, OptionRule]) -> None:
        self._rules: Mapping[str, OptionRule] = MappingProxyType(dict(rules))

    def __getitem__(self, name: str) -> OptionRule:
        return self._rules[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"OptionSchema({dict(self._rules)!r})"


def compile_schema(definition: object, *, context: str = "") -> OptionSchema:
    """Compile an options definition mapping into an ``OptionSchema``.

    An ``OptionSchema`` is returned unchanged. Values may be plain definition
    mappings or ``OptionRule`` instances.
    """

    return _compile_schema(definition, context, ())


def compile_rule(definition: object, *, name: str, context: str = "") -> OptionRule:
    """Compile a single option definition into its typed rule."""

    return _compile_rule(definition, name, context, (name,))


def _compile_schema(
    definition: object,
    context: str,
    path: tuple[str | int, ...],
) -> OptionSchema:
    if isinstance(definition, OptionSchema):
        return definition
    if not isinstance(definition, Mapping):
        _fail(
            context,
            path,
            f"options definition must be a mapping, got {type(definition).__name__}",
        )
    rules: dict[str, OptionRule] = {}
    for name, item in definition.items():
        if not isinstance(name, str) or not name:
            _fail(context, path, f"option names must be non-empty strings, got {name!r}")
        rules[name] = _compile_rule(item, name, context, (*path, name))
    return OptionSchema(rules)


def _compile_rule(
    definition: object,
    name: str,
    context: str,
    path: tuple[str | int, ...],
) -> OptionRule:
    if isinstance(definition, OptionRule):
        return definition
    if not isinstance(definition, Mapping):
        _fail(
            context,
            path,
            f"definition of option '{name}' must be a mapping, got {type(definition).__name__}",
        )

    values = _normalize_definition_keys(definition, name, context, path)
    rule_class, non_empty = _resolve_rule_class(values.pop("type", None), name, context, path)
    if non_empty:
        values["min_length"] = 1
        values.pop("max_length", None)

    allowed = {item.name for item in fields(rule_class)}
    for key in sorted(values.keys() - allowed):
        type_name = rule_class.option_type or "untyped"
        _LOGGER.debug("ignoring field '%s' of %s option '%s'", key, type_name, name)
        del values[key]

    _check_field_values(values, name, context, path)

    if "object_definition" in values:
        values["object_definition"] = _compile_schema(values["object_definition"], context, path)
    if "element_definition" in values:
        values["element_definition"] = _compile_rule(
            values["element_definition"], "element", context, path
        )
    return rule_class(**values)


def _normalize_definition_keys(
    definition: Mapping[object, object],
    name: str,
    context: str,
    path: tuple[str | int, ...],
) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for raw_key, value in definition.items():
        if not isinstance(raw_key, str):
            _LOGGER.debug("ignoring non-text field %r of option '%s'", raw_key, name)
            continue
        key = normalize_key(raw_key)
        key = _DEFINITION_KEY_ALIASES.get(key, key)
        if key not in _DEFINITION_KEYS:
            _LOGGER.debug("ignoring unknown field %r of option '%s'", raw_key, name)
            continue
        if key in values:
            _fail(context, path, f"field '{key}' given twice in definition of option '{name}'")
        values[key] = value
    return values


def _resolve_rule_class(
    type_value: object,
    name: str,
    context: str,
    path: tuple[str | int, ...],
) -> tuple[type[OptionRule], bool]:
    if type_value is None:
        return AnyRule, False
    if isinstance(type_value, OptionType):
        return _RULE_CLASSES[type_value.value], False
    if not isinstance(type_value, str) or not type_value:
        _fail(
            context,
            path,
            f"Invalid type {describe_value(type_value)} in definition of option '{name}'",
        )
    canonical = normalize_type_token(type_value)
    if canonical == NON_EMPTY_STRING:
        return StringRule, True
    rule_class = _RULE_CLASSES.get(canonical)
    if rule_class is None:
        _fail(context, path, f"Unrecognized type '{type_value}' for option '{name}'")
    return rule_class, False


def _check_field_values(
    values: dict[str, Any],
    name: str,
    context: str,
    path: tuple[str | int, ...],
) -> None:
    if not isinstance(values.get("required", False), bool):
        _fail(context, path, f"field 'required' of option '{name}' must be a boolean")
    strict_default = values.get("strict_default")
    if strict_default is not None and not isinstance(strict_default, bool):
        _fail(context, path, f"field 'strict_default' of option '{name}' must be a boolean")
    for key in _HOOK_FIELDS:
        hook = values.get(key)
        if hook is not None and not callable(hook):
            _fail(context, path, f"field '{key}' of option '{name}' must be callable")
    description = values.get("custom_check_description")
    if description is not None and not isinstance(description, str):
        _fail(context, path, f"field 'custom_check_description' of option '{name}' must be text")
    for key in _LENGTH_FIELDS:
        length = values.get(key)
        if length is None:
            continue
        if isinstance(length, bool) or not isinstance(length, int) or length < 0:
            _fail(context, path, f"field '{key}' of option '{name}' must be an integer >= 0")
    for key in _BOUND_FIELDS:
        bound = values.get(key)
        if bound is None:
            continue
        if isinstance(bound, bool) or not isinstance(bound, Real) or math.isnan(bound):
            _fail(context, path, f"field '{key}' of option '{name}' must be a number")
    object_class = values.get("object_class")
    if object_class is not None and not isinstance(object_class, type):
        _fail(context, path, f"field 'object_class' of option '{name}' must be a class")


def _fail(context: str, path: tuple[str | int, ...], message: str) -> NoReturn:
    raise SchemaDefinitionError(OptionsIssue(context, path, message, IssueKind.SCHEMA))


__all__ = [
    "AnyRule",
    "ArrayRule",
    "BooleanRule",
    "CustomRule",
    "FunctionRule",
    "MISSING",
    "NON_EMPTY_STRING",
    "NonZeroNumberRule",
    "NumberRule",
    "ObjectRule",
    "OptionRule",
    "OptionSchema",
    "OptionType",
    "PositiveNumberRule",
    "StringRule",
    "compile_rule",
    "compile_schema",
    "normalize_key",
    "normalize_type_token",
]
