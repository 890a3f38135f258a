"""Diagnostic sink used for verbose/debug reporting, plus value pretty-printing."""

from __future__ import annotations

import logging
from typing import Final, Protocol

DEFAULT_LOGGER_NAME: Final[str] = "options_checker"

_SCALAR_TYPES: Final[tuple[type, ...]] = (bool, int, float, complex)


class DiagnosticSink(Protocol):
    """Anything with logger-style ``debug``/``warning``/``error`` methods.

    ``logging.Logger`` satisfies this protocol, so a caller may inject its own
    logger, or any small adapter that forwards messages elsewhere.
    """

    def debug(self, msg: str, /) -> object: ...

    def warning(self, msg: str, /) -> object: ...

    def error(self, msg: str, /) -> object: ...


class _NullSink:
    __slots__ = ()

    def debug(self, msg: str, /) -> None:
        return None

    def warning(self, msg: str, /) -> None:
        return None

    def error(self, msg: str, /) -> None:
        return None


NULL_SINK: Final[DiagnosticSink] = _NullSink()


def default_sink() -> DiagnosticSink:
    """Return the package logger used when no sink is injected."""

    return logging.getLogger(DEFAULT_LOGGER_NAME)


def describe_value(value: object) -> str:
    """Render ``value`` for warning and error messages."""

    if isinstance(value, str):
        return f"'{value}'"
    if value is None or isinstance(value, _SCALAR_TYPES):
        return f"{value}"
    return f"[{type(value).__name__}]"


__all__ = [
    "DEFAULT_LOGGER_NAME",
    "DiagnosticSink",
    "NULL_SINK",
    "default_sink",
    "describe_value",
]
