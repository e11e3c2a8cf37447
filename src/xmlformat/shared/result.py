"""Result objects and diagnostic types for XML reformatting.

Lexical and structural problems in a document are never raised: each one is
recorded as a DiagnosticEntry so that a single pass can report every problem
it finds. Programming-logic faults are the exception and raise
InvariantViolation immediately.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional, Set


class InvariantViolation(RuntimeError):
    """Raised when an internal invariant of the pipeline does not hold."""


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()
    INFO = auto()
    WARNING = auto()
    ERROR = auto()


class ErrorKind(Enum):
    """Kinds of document errors that stop a document from being formatted."""

    MALFORMED_TOKEN = auto()              # Markup starting with < but lacking >
    UNMATCHED_CLOSE_TAG = auto()          # Close tag with no open element
    TAG_NAME_MISMATCH = auto()            # Close tag names a different element
    UNCLOSED_TAGS_AT_EOF = auto()         # Open elements left at end of input
    UNPROCESSED_CHILDREN_AT_EOF = auto()  # Pending child lists at end of input
    NESTING_TOO_DEEP = auto()             # Deeper than the layout recursion limit


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with position information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    kind: Optional[ErrorKind] = None
    position: Optional[Dict[str, int]] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")

    @property
    def is_error(self) -> bool:
        """Check whether this entry counts against the document."""
        return self.severity == DiagnosticSeverity.ERROR

    def __str__(self) -> str:
        if self.position:
            return (
                f"line {self.position['line']}, token {self.position['token']}: "
                f"{self.message}"
            )
        return self.message


@dataclass
class PerformanceMetrics:
    """Performance metrics for a single document run."""

    processing_time_ms: float = 0.0
    memory_used_bytes: int = 0
    characters_processed: int = 0
    tokens_generated: int = 0
    elements_built: int = 0

    @property
    def characters_per_second(self) -> float:
        """Calculate characters processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.characters_processed * 1000.0) / self.processing_time_ms

    @property
    def memory_per_character(self) -> float:
        """Calculate memory usage per character."""
        if self.characters_processed == 0:
            return 0.0
        return self.memory_used_bytes / self.characters_processed


@dataclass
class FormatResult:
    """Outcome of running one document through the reformatting pipeline.

    ``output`` is None whenever the document had errors, and also for the
    diagnostic-only modes (parser check, unconfigured-element listing) that
    deliberately produce no document.
    """

    success: bool = True
    output: Optional[str] = None
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    unconfigured_elements: Set[str] = field(default_factory=set)
    parser_ok: Optional[bool] = None
    metrics: PerformanceMetrics = field(default_factory=PerformanceMetrics)
    document: Optional[str] = None

    @property
    def error_count(self) -> int:
        """Number of error diagnostics recorded."""
        return sum(1 for diag in self.diagnostics if diag.is_error)

    @property
    def errors(self) -> List[DiagnosticEntry]:
        """Error diagnostics only."""
        return [diag for diag in self.diagnostics if diag.is_error]

    def errors_of_kind(self, kind: ErrorKind) -> List[DiagnosticEntry]:
        """Error diagnostics of a single kind."""
        return [diag for diag in self.diagnostics if diag.kind == kind]

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add a diagnostic entry to the result."""
        self.diagnostics.append(DiagnosticEntry(
            severity=severity,
            message=message,
            component=component,
            details=details,
        ))

    def extend(self, diagnostics: List[DiagnosticEntry]) -> None:
        """Add diagnostics produced by a pipeline stage."""
        self.diagnostics.extend(diagnostics)
        if any(diag.is_error for diag in diagnostics):
            self.success = False
