"""
options-checker — package root.

File: src/options_checker/__init__.py

Purpose
- Schema-driven validation and normalization of options objects.

Public surface
- ``OptionsChecker`` facade and the ``clean_options`` / ``validate_options`` engine calls.
- Schema compilation (``compile_schema``) and the typed rule classes.
- Error taxonomy and structured issue/result types.

Functional requirements
- Must not have side effects at import time (no logging configuration).
"""

from options_checker.checker import OptionsChecker
from options_checker.diagnostics import NULL_SINK, DiagnosticSink, describe_value
from options_checker.engine import clean_options, validate_options
from options_checker.errors import (
    IssueKind,
    MissingOptionError,
    OptionsCheckResult,
    OptionsError,
    OptionsIssue,
    OptionValueError,
    SchemaDefinitionError,
    TransformError,
)
from options_checker.schema import (
    MISSING,
    AnyRule,
    ArrayRule,
    BooleanRule,
    CustomRule,
    FunctionRule,
    NonZeroNumberRule,
    NumberRule,
    ObjectRule,
    OptionRule,
    OptionSchema,
    OptionType,
    PositiveNumberRule,
    StringRule,
    compile_rule,
    compile_schema,
    normalize_type_token,
)

__version__ = "1.0.0"

__all__ = [
    "MISSING",
    "NULL_SINK",
    "AnyRule",
    "ArrayRule",
    "BooleanRule",
    "CustomRule",
    "DiagnosticSink",
    "FunctionRule",
    "IssueKind",
    "MissingOptionError",
    "NonZeroNumberRule",
    "NumberRule",
    "ObjectRule",
    "OptionRule",
    "OptionSchema",
    "OptionType",
    "OptionValueError",
    "OptionsCheckResult",
    "OptionsChecker",
    "OptionsError",
    "OptionsIssue",
    "PositiveNumberRule",
    "SchemaDefinitionError",
    "StringRule",
    "TransformError",
    "__version__",
    "clean_options",
    "compile_rule",
    "compile_schema",
    "describe_value",
    "normalize_type_token",
    "validate_options",
]
