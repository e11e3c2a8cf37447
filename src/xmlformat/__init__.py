"""XML document reformatter.

Reparses an XML document's surface syntax into tokens, rebuilds the element
tree, normalizes inter-element whitespace according to per-element options,
and re-emits the document with controlled indentation, line breaks and line
wrapping.

Progressive API Disclosure:
- Level 1: Simple functions - format_string(), format_file()
- Level 2: Configured formatter - XMLFormatter with a FormatConfig
- Level 3: Per-document control - FormattingSession and ProcessingMode
"""

__version__ = "1.4.0"

from .api import (
    FormattingSession,
    ProcessingMode,
    XMLFormatter,
    format_file,
    format_string,
)
from .shared.config import (
    ConfigError,
    ElementOptions,
    FormatConfig,
    FormatType,
    load_config_file,
)
from .shared.result import DiagnosticEntry, ErrorKind, FormatResult

__all__ = [
    "__version__",

    # Level 1: Simple formatting functions
    "format_string",
    "format_file",

    # Level 2: Configured formatter
    "XMLFormatter",
    "FormatConfig",
    "ElementOptions",
    "FormatType",
    "ConfigError",
    "load_config_file",

    # Level 3: Per-document sessions
    "FormattingSession",
    "ProcessingMode",

    # Result objects
    "FormatResult",
    "DiagnosticEntry",
    "ErrorKind",
]
