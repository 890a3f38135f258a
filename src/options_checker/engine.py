"""Recursive validation and cleaning of options against a compiled schema."""

from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from numbers import Real
from typing import Any, Final

from options_checker.diagnostics import DiagnosticSink, default_sink, describe_value
from options_checker.errors import (
    IssueKind,
    OptionsCheckResult,
    OptionsError,
    OptionsIssue,
    error_for_issue,
)
from options_checker.schema import (
    MISSING,
    ArrayRule,
    NumberRule,
    ObjectRule,
    OptionRule,
    OptionSchema,
    OptionType,
    StringRule,
    compile_schema,
)

_PRIMITIVE_TYPES: Final[tuple[type, ...]] = (type(None), bool, int, float, complex, str, bytes)
_KEYLESS_TYPES: Final[tuple[type, ...]] = (*_PRIMITIVE_TYPES, list, tuple, set, frozenset)

_OptionPath = tuple[str | int, ...]


@dataclass(frozen=True, slots=True)
class _Pass:
    """Settings shared by one top-level call and every nested check it spawns."""

    strict_default: bool
    verbose: bool
    debug: bool
    sink: DiagnosticSink

    def warn(self, message: str) -> None:
        if self.verbose:
            self.sink.warning(message)

    def trace(self, message: str) -> None:
        if self.debug:
            self.sink.debug(message)


@dataclass(frozen=True, slots=True)
class _Failure:
    message: str
    nested: OptionsIssue | None = None

    def render(self, context: str) -> str:
        if self.nested is not None:
            return self.message
        return f"{context} : {self.message}"


@dataclass(frozen=True, slots=True)
class _Outcome:
    value: Any = MISSING
    failure: _Failure | None = None


def clean_options(
    raw: object,
    schema: OptionSchema | Mapping[str, Any],
    *,
    context: str,
    strict_default: bool = False,
    verbose: bool = False,
    debug: bool = False,
    sink: DiagnosticSink | None = None,
) -> dict[str, Any]:
    """Validate ``raw`` against ``schema`` and return a new clean dict.

    Raises an ``OptionsError`` subclass whose message reads ``"<context> : <message>"``.
    """

    compiled = compile_schema(schema, context=context)
    run = _Pass(
        strict_default=strict_default,
        verbose=verbose or debug,
        debug=debug,
        sink=default_sink() if sink is None else sink,
    )
    try:
        return _clean(raw, compiled, context, (), run)
    except OptionsError as exc:
        if run.verbose:
            run.sink.error(str(exc))
        raise


def validate_options(
    raw: object,
    schema: OptionSchema | Mapping[str, Any],
    *,
    context: str,
    strict_default: bool = False,
    verbose: bool = False,
    debug: bool = False,
    sink: DiagnosticSink | None = None,
) -> OptionsCheckResult:
    """Like ``clean_options`` but report the failure as a result instead of raising."""

    try:
        options = clean_options(
            raw,
            schema,
            context=context,
            strict_default=strict_default,
            verbose=verbose,
            debug=debug,
            sink=sink,
        )
    except OptionsError as exc:
        return OptionsCheckResult(options=None, issue=exc.issue)
    return OptionsCheckResult(options=options)


def _clean(
    raw: object,
    schema: OptionSchema,
    context: str,
    path: _OptionPath,
    run: _Pass,
) -> dict[str, Any]:
    clean: dict[str, Any] = {}
    for name, rule in schema.items():
        clean[name] = _resolve(name, rule, _lookup(raw, name), context, (*path, name), run)
    return clean


def _lookup(raw: object, name: str) -> Any:
    if isinstance(raw, _KEYLESS_TYPES):
        return MISSING
    if isinstance(raw, Mapping):
        return raw.get(name, MISSING)
    return getattr(raw, name, MISSING)


def _resolve(
    name: str,
    rule: OptionRule,
    value: Any,
    context: str,
    path: _OptionPath,
    run: _Pass,
    *,
    none_is_absent: bool = True,
) -> Any:
    if value is MISSING or (value is None and none_is_absent):
        if rule.required:
            message = f"Required option '{name}' not found"
            raise error_for_issue(OptionsIssue(context, path, message, IssueKind.MISSING))
        if not rule.has_default:
            message = f"No default defined for option '{name}'"
            raise error_for_issue(OptionsIssue(context, path, message, IssueKind.SCHEMA))
        run.trace(f"{context} : {name} not given, using default {describe_value(rule.default)}")
        return rule.default

    outcome = _check_type(name, rule, value, context, path, run)
    if outcome.failure is None and rule.custom_check is not None and not rule.custom_check(value):
        description = rule.custom_check_description or "valid according to its custom check"
        outcome = _Outcome(
            failure=_Failure(f"{name} must be {description}, {describe_value(value)} given")
        )

    if outcome.failure is not None:
        failure = outcome.failure
        strict = run.strict_default if rule.strict_default is None else rule.strict_default
        if strict or not rule.has_default:
            if failure.nested is not None:
                raise error_for_issue(failure.nested)
            issue = OptionsIssue(context, path, failure.message, IssueKind.INVALID_VALUE)
            raise error_for_issue(issue)
        run.warn(f"{failure.render(context)}, will assign default")
        return rule.default

    result = value if outcome.value is MISSING else outcome.value
    if rule.transform_function is not None:
        result = rule.transform_function(result)
        if result is None:
            raise error_for_issue(
                OptionsIssue(
                    context,
                    path,
                    f"Transform function returned None for option '{name}'",
                    IssueKind.TRANSFORM,
                )
            )
    run.trace(f"{context} : {name} accepted as {describe_value(result)}")
    return result


def _check_type(
    name: str,
    rule: OptionRule,
    value: Any,
    context: str,
    path: _OptionPath,
    run: _Pass,
) -> _Outcome:
    if rule.option_type is None:
        return _Outcome()
    check = _TYPE_CHECKS[rule.option_type]
    return check(name, rule, value, context, path, run)


def _mismatch(name: str, expected: str, value: Any) -> _Outcome:
    return _Outcome(failure=_Failure(f"{name} must be {expected}, {describe_value(value)} given"))


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _is_object(value: Any) -> bool:
    if isinstance(value, _PRIMITIVE_TYPES):
        return False
    return not (inspect.isroutine(value) or inspect.isclass(value))


def _check_boolean(name: str, rule: OptionRule, value: Any, *_: Any) -> _Outcome:
    if not isinstance(value, bool):
        return _mismatch(name, "a boolean", value)
    return _Outcome()


def _check_function(name: str, rule: OptionRule, value: Any, *_: Any) -> _Outcome:
    if not callable(value):
        return _mismatch(name, "a function", value)
    return _Outcome()


def _check_number(name: str, rule: OptionRule, value: Any, *_: Any) -> _Outcome:
    assert isinstance(rule, NumberRule)
    if not _is_number(value):
        return _mismatch(name, "a number", value)
    if rule.minimum is not None and value < rule.minimum:
        return _Outcome(failure=_Failure(f"{name} must be >= {rule.minimum}, {value} given"))
    if rule.maximum is not None and value > rule.maximum:
        return _Outcome(failure=_Failure(f"{name} must be <= {rule.maximum}, {value} given"))
    return _Outcome()


def _check_positive_number(name: str, rule: OptionRule, value: Any, *_: Any) -> _Outcome:
    if not _is_number(value) or not value > 0:
        return _mismatch(name, "a number greater than zero", value)
    return _Outcome()


def _check_non_zero_number(name: str, rule: OptionRule, value: Any, *_: Any) -> _Outcome:
    if not _is_number(value) or value == 0:
        return _mismatch(name, "a non-zero number", value)
    return _Outcome()


def _check_string(name: str, rule: OptionRule, value: Any, *_: Any) -> _Outcome:
    assert isinstance(rule, StringRule)
    if not isinstance(value, str):
        return _mismatch(name, "a string", value)
    if rule.min_length is not None and len(value) < rule.min_length:
        return _Outcome(
            failure=_Failure(
                f"{name} must have at least {rule.min_length} characters, {len(value)} given"
            )
        )
    if rule.max_length is not None and len(value) > rule.max_length:
        return _Outcome(
            failure=_Failure(
                f"{name} must have at most {rule.max_length} characters, {len(value)} given"
            )
        )
    return _Outcome()


def _check_object(
    name: str,
    rule: OptionRule,
    value: Any,
    context: str,
    path: _OptionPath,
    run: _Pass,
) -> _Outcome:
    assert isinstance(rule, ObjectRule)
    if not _is_object(value):
        return _mismatch(name, "an object", value)
    if rule.object_class is not None and not isinstance(value, rule.object_class):
        return _Outcome(
            failure=_Failure(
                f"{name} must be an object of class {rule.object_class.__name__}, "
                f"{type(value).__name__} given"
            )
        )
    if rule.object_definition is None:
        return _Outcome()
    try:
        cleaned = _clean(value, rule.object_definition, f"{context} : {name}", path, run)
    except OptionsError as exc:
        return _nested_failure(exc)
    return _Outcome(value=cleaned)


def _check_array(
    name: str,
    rule: OptionRule,
    value: Any,
    context: str,
    path: _OptionPath,
    run: _Pass,
) -> _Outcome:
    assert isinstance(rule, ArrayRule)
    if not isinstance(value, (list, tuple)):
        return _mismatch(name, "an array", value)
    if rule.min_length is not None and len(value) < rule.min_length:
        return _Outcome(
            failure=_Failure(
                f"{name} must have at least {rule.min_length} elements, {len(value)} given"
            )
        )
    if rule.max_length is not None and len(value) > rule.max_length:
        return _Outcome(
            failure=_Failure(
                f"{name} must have at most {rule.max_length} elements, {len(value)} given"
            )
        )
    if rule.element_definition is None:
        return _Outcome()
    mapped: list[Any] = []
    for index, element in enumerate(value):
        try:
            mapped.append(
                _resolve(
                    "element",
                    rule.element_definition,
                    element,
                    f"{context} : {name} : element {index}",
                    (*path, index),
                    run,
                    none_is_absent=False,
                )
            )
        except OptionsError as exc:
            return _nested_failure(exc)
    return _Outcome(value=mapped)


def _check_custom(name: str, rule: OptionRule, value: Any, *_: Any) -> _Outcome:
    return _Outcome()


def _nested_failure(exc: OptionsError) -> _Outcome:
    if exc.kind is IssueKind.TRANSFORM:
        raise exc
    return _Outcome(failure=_Failure(str(exc), nested=exc.issue))


_TypeCheck = Callable[[str, OptionRule, Any, str, _OptionPath, _Pass], _Outcome]

_TYPE_CHECKS: Final[dict[OptionType, _TypeCheck]] = {
    OptionType.BOOLEAN: _check_boolean,
    OptionType.FUNCTION: _check_function,
    OptionType.NUMBER: _check_number,
    OptionType.NUMBER_GREATER_THAN_ZERO: _check_positive_number,
    OptionType.NON_ZERO_NUMBER: _check_non_zero_number,
    OptionType.STRING: _check_string,
    OptionType.OBJECT: _check_object,
    OptionType.ARRAY: _check_array,
    OptionType.CUSTOM: _check_custom,
}


__all__ = ["clean_options", "validate_options"]
