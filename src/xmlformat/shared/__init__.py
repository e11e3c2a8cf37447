"""Shared utilities for XML reformatting.

This module provides the configuration objects, result and diagnostic types,
and logging helpers used across all pipeline stages.
"""

from .config import (
    DEFAULT_ELEMENT,
    DOCUMENT_ELEMENT,
    BreakType,
    ConfigError,
    ConfigValidationError,
    ElementOptions,
    FormatConfig,
    FormatType,
    InvalidOptionName,
    InvalidOptionValue,
    check_option,
    load_config_file,
    parse_config_text,
)
from .logging import (
    DocumentContextFilter,
    DocumentLogger,
    configure_logging,
    get_logger,
)
from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    ErrorKind,
    FormatResult,
    InvariantViolation,
    PerformanceMetrics,
)

__all__ = [
    "DEFAULT_ELEMENT",
    "DOCUMENT_ELEMENT",
    "BreakType",
    "ConfigError",
    "ConfigValidationError",
    "ElementOptions",
    "FormatConfig",
    "FormatType",
    "InvalidOptionName",
    "InvalidOptionValue",
    "check_option",
    "load_config_file",
    "parse_config_text",
    "DocumentContextFilter",
    "DocumentLogger",
    "configure_logging",
    "get_logger",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "ErrorKind",
    "FormatResult",
    "InvariantViolation",
    "PerformanceMetrics",
]
