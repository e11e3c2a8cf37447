"""Public API for XML reformatting.

Provides progressive disclosure from simple module-level functions to the
reusable XMLFormatter and the per-document FormattingSession.
"""

from .formatter import XMLFormatter, format_file, format_string
from .session import FormattingSession, ProcessingMode

__all__ = [
    "FormattingSession",
    "ProcessingMode",
    "XMLFormatter",
    "format_file",
    "format_string",
]
