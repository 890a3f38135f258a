"""Property-based checks of the defaults, required, idempotence and bounds contracts."""

from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from options_checker import MissingOptionError, OptionsChecker, OptionValueError

_OPTION_NAMES = st.text(alphabet="abcdefghijklmnopqrstuvwxyz_", min_size=1, max_size=12)
_SCALARS = st.one_of(st.none(), st.booleans(), st.integers(), st.text(max_size=20))


def _checker(definition: dict[str, object], **config: object) -> OptionsChecker:
    return OptionsChecker({"options_definition": definition, "context": "Property Test", **config})


@pytest.mark.unit
@settings(max_examples=60, deadline=None)
@given(defaults=st.dictionaries(_OPTION_NAMES, _SCALARS, max_size=8))
def test_get_defaults_returns_exactly_the_declared_defaults(defaults: dict[str, object]) -> None:
    checker = _checker({name: {"default": value} for name, value in defaults.items()})

    result = checker.get_defaults()

    assert result == defaults
    for name, value in defaults.items():
        assert result[name] is value


@pytest.mark.unit
@settings(max_examples=60, deadline=None)
@given(name=_OPTION_NAMES, others=st.dictionaries(_OPTION_NAMES, st.integers(), max_size=4))
def test_missing_required_option_always_raises(name: str, others: dict[str, int]) -> None:
    definition: dict[str, object] = {other: {"default": 0} for other in others if other != name}
    definition[name] = {"type": "number", "required": True}
    raw = {other: value for other, value in others.items() if other != name}

    with pytest.raises(MissingOptionError):
        _checker(definition).get_clean_options(raw)


@pytest.mark.unit
@settings(max_examples=80, deadline=None)
@given(
    count=st.integers(min_value=1, max_value=10),
    label=st.text(min_size=1, max_size=10),
    flags=st.lists(st.booleans(), max_size=5),
    extra=st.dictionaries(st.sampled_from(["x", "y", "zz"]), _SCALARS, max_size=3),
)
def test_clean_options_drop_extras_and_are_idempotent(
    count: int,
    label: str,
    flags: list[bool],
    extra: dict[str, object],
) -> None:
    checker = _checker(
        {
            "count": {"type": "number", "min": 1, "max": 10},
            "label": {"type": "NonEmptyString", "default": "none"},
            "flags": {"type": "array", "elementDefinition": {"type": "boolean"}},
            "nested": {
                "type": "object",
                "default": {},
                "objectDefinition": {"level": {"type": "number", "default": 0}},
            },
        }
    )
    raw = {**extra, "count": count, "label": label, "flags": flags, "nested": {"level": 2}}

    first = checker.get_clean_options(raw)
    second = checker.get_clean_options(first)

    assert set(first) == {"count", "label", "flags", "nested"}
    assert first == second
    assert first == {"count": count, "label": label, "flags": flags, "nested": {"level": 2}}


@pytest.mark.unit
@settings(max_examples=80, deadline=None)
@given(value=st.integers(min_value=-50, max_value=50))
def test_number_bounds_accept_exactly_the_closed_interval(value: int) -> None:
    checker = _checker({"n": {"type": "number", "min": 1, "max": 10}})

    if 1 <= value <= 10:
        assert checker.get_clean_options({"n": value}) == {"n": value}
    else:
        with pytest.raises(OptionValueError):
            checker.get_clean_options({"n": value})


@pytest.mark.unit
@settings(max_examples=60, deadline=None)
@given(value=st.one_of(st.integers(min_value=21), st.integers(max_value=-1), st.text()))
def test_strict_default_never_falls_back(value: object) -> None:
    lenient = _checker({"option1": {"type": "number", "min": 0, "max": 20, "default": 1}})
    strict = _checker(
        {"option1": {"type": "number", "min": 0, "max": 20, "default": 1}},
        strict_default=True,
    )

    assert lenient.get_clean_options({"option1": value}) == {"option1": 1}
    with pytest.raises(OptionValueError):
        strict.get_clean_options({"option1": value})
