"""
options-checker — checker facade.

File: src/options_checker/checker.py

Purpose
- Own one compiled schema plus its reporting settings and expose clean/defaults calls.

What is included in this file
- ``OptionsChecker`` with ``get_clean_options``, ``get_defaults``, ``validate``, ``set_debug``.
- The in-code meta-schema used to check the checker's own configuration.
- Normalization of the deprecated positional constructor shapes.

Functional requirements
- Configuration is validated by the same engine the checker exposes.
- Legacy positional construction keeps working; with verbose on it emits ``DeprecationWarning``.
"""

from __future__ import annotations

import warnings
from collections.abc import Mapping
from typing import Any, Final

from options_checker.diagnostics import DiagnosticSink
from options_checker.engine import clean_options, validate_options
from options_checker.errors import OptionsCheckResult
from options_checker.schema import OptionSchema, compile_schema, normalize_key

CONFIG_CONTEXT: Final[str] = "OptionsChecker"

_CONFIG_KEY_ALIASES: Final[dict[str, str]] = {"schema": "options_definition"}

CONFIG_SCHEMA: Final[OptionSchema] = compile_schema(
    {
        "options_definition": {
            "type": "object",
            "required": True,
            "custom_check": lambda value: isinstance(value, Mapping),
            "custom_check_description": "a mapping of option definitions",
        },
        "context": {"type": "NonEmptyString", "required": True},
        "strict_default": {"type": "boolean", "default": False},
        "verbose": {"type": "boolean", "default": False},
        "debug": {"type": "boolean", "default": False},
    },
    context=CONFIG_CONTEXT,
)


class OptionsChecker:
    """Checks options objects against one schema.

    ``config`` keys: ``options_definition`` (or ``schema``), ``context``,
    ``strict_default``, ``verbose``, ``debug``. camelCase spellings such as
    ``optionsDefinition`` and ``strictDefault`` are accepted.

    The older ``OptionsChecker(options_definition, context, verbose)`` form is
    still accepted and converted. When that call asks for verbose output it also
    emits a ``DeprecationWarning``.
    """

    def __init__(
        self,
        config: Mapping[str, Any] | None = None,
        context: str | None = None,
        verbose: bool | None = None,
        *,
        sink: DiagnosticSink | None = None,
    ) -> None:
        if context is not None or verbose is not None:
            if verbose:
                warnings.warn(
                    "OptionsChecker(options_definition, context, verbose) is deprecated; "
                    "pass a single configuration mapping instead",
                    DeprecationWarning,
                    stacklevel=2,
                )
            legacy: dict[str, Any] = {"options_definition": config, "context": context}
            if verbose is not None:
                legacy["verbose"] = verbose
            config = legacy

        settings = clean_options(
            _normalize_config(config),
            CONFIG_SCHEMA,
            context=CONFIG_CONTEXT,
            strict_default=True,
            sink=sink,
        )
        self._context: str = settings["context"]
        self._strict_default: bool = settings["strict_default"]
        self._debug: bool = settings["debug"]
        self._verbose: bool = settings["verbose"] or self._debug
        self._sink = sink
        self._schema = compile_schema(settings["options_definition"], context=self._context)

    @property
    def context(self) -> str:
        return self._context

    @property
    def schema(self) -> OptionSchema:
        return self._schema

    @property
    def strict_default(self) -> bool:
        return self._strict_default

    @property
    def verbose(self) -> bool:
        return self._verbose

    @property
    def debug(self) -> bool:
        return self._debug

    def set_debug(self, debug: bool) -> None:
        """Toggle debug output; turning it on also turns verbose on."""

        self._debug = bool(debug)
        if self._debug:
            self._verbose = True

    def get_clean_options(self, options: object) -> dict[str, Any]:
        """Return a clean copy of ``options`` or raise an ``OptionsError``."""

        return clean_options(
            options,
            self._schema,
            context=self._context,
            strict_default=self._strict_default,
            verbose=self._verbose,
            debug=self._debug,
            sink=self._sink,
        )

    def get_defaults(self) -> dict[str, Any]:
        """Return the clean options for an empty input."""

        return self.get_clean_options({})

    def validate(self, options: object) -> OptionsCheckResult:
        return validate_options(
            options,
            self._schema,
            context=self._context,
            strict_default=self._strict_default,
            verbose=self._verbose,
            debug=self._debug,
            sink=self._sink,
        )

    def __repr__(self) -> str:
        return (
            f"OptionsChecker(context={self._context!r}, options={list(self._schema)!r}, "
            f"strict_default={self._strict_default}, verbose={self._verbose}, debug={self._debug})"
        )


def _normalize_config(config: object) -> object:
    if not isinstance(config, Mapping):
        return config
    normalized: dict[str, Any] = {}
    for key, value in config.items():
        if not isinstance(key, str):
            continue
        canonical = normalize_key(key)
        normalized[_CONFIG_KEY_ALIASES.get(canonical, canonical)] = value
    return normalized


__all__ = ["CONFIG_CONTEXT", "CONFIG_SCHEMA", "OptionsChecker"]
