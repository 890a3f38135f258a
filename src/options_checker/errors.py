"""Error taxonomy and structured issue/result types for option checking."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class IssueKind(StrEnum):
    """Category of a checking failure."""

    SCHEMA = "schema"
    INVALID_VALUE = "invalid_value"
    MISSING = "missing"
    TRANSFORM = "transform"


@dataclass(frozen=True, slots=True)
class OptionsIssue:
    """Single structured checking failure."""

    context: str
    path: tuple[str | int, ...]
    message: str
    kind: IssueKind

    @property
    def dotted_path(self) -> str:
        return ".".join(str(part) for part in self.path)

    def render(self) -> str:
        if not self.context:
            return self.message
        return f"{self.context} : {self.message}"


@dataclass(frozen=True, slots=True)
class OptionsCheckResult:
    """Check result with clean options when no issue was found."""

    options: dict[str, Any] | None
    issue: OptionsIssue | None = None

    @property
    def is_valid(self) -> bool:
        return self.options is not None and self.issue is None


class OptionsError(ValueError):
    """Base class for every unrecoverable checking failure."""

    def __init__(self, issue: OptionsIssue) -> None:
        self.issue = issue
        super().__init__(issue.render())

    @property
    def context(self) -> str:
        return self.issue.context

    @property
    def path(self) -> tuple[str | int, ...]:
        return self.issue.path

    @property
    def kind(self) -> IssueKind:
        return self.issue.kind


class SchemaDefinitionError(OptionsError):
    """The schema itself is wrong: bad type token, missing default, malformed field."""


class OptionValueError(OptionsError):
    """A given value failed its checks and no default could be used."""


class MissingOptionError(OptionsError):
    """A required option was not given."""


class TransformError(OptionsError):
    """A transform function produced no value."""


_ERROR_CLASSES: dict[IssueKind, type[OptionsError]] = {
    IssueKind.SCHEMA: SchemaDefinitionError,
    IssueKind.INVALID_VALUE: OptionValueError,
    IssueKind.MISSING: MissingOptionError,
    IssueKind.TRANSFORM: TransformError,
}


def error_for_issue(issue: OptionsIssue) -> OptionsError:
    """Return the exception instance matching ``issue.kind``."""

    return _ERROR_CLASSES[issue.kind](issue)


__all__ = [
    "IssueKind",
    "MissingOptionError",
    "OptionValueError",
    "OptionsCheckResult",
    "OptionsError",
    "OptionsIssue",
    "SchemaDefinitionError",
    "TransformError",
    "error_for_issue",
]
