"""Per-document processing pipeline.

A FormattingSession carries everything whose lifetime is one document: the
option resolver with its record of unconfigured elements, and the
tokenization, tree and canonicalization stages run over that document. A
session is created for each document and discarded afterwards, so nothing
learned from one document leaks into the next.
"""

import sys
import time
from enum import Enum, auto
from typing import List, Optional

import psutil

from xmlformat.formatting import Canonicalizer, OptionResolver, TreeFormatter
from xmlformat.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    ErrorKind,
    FormatConfig,
    FormatResult,
    InvariantViolation,
    get_logger,
)
from xmlformat.tokenization import XMLTokenizer, scan_errors
from xmlformat.tree import Node, XMLTreeBuilder, stringify

MS_PER_SECOND = 1000


class ProcessingMode(Enum):
    """How far a document is taken through the pipeline."""

    FORMAT = auto()              # Full pipeline, formatted output
    CHECK_PARSER = auto()        # Token round-trip self-check only
    CANONIZE_ONLY = auto()       # Output the stringified canonical tree
    SHOW_UNCONFIGURED = auto()   # Canonicalize, report defaulted elements


class FormattingSession:
    """Runs one document through tokenization, tree building,
    canonicalization and layout."""

    def __init__(
        self,
        config: FormatConfig,
        document: Optional[str] = None,
        verify_tree: bool = False
    ) -> None:
        """Initialize a session for one document.

        Args:
            config: Element formatting configuration
            document: Optional document label used in diagnostics and logs
            verify_tree: Check that the freshly built tree stringifies back
                to the input before canonicalization
        """
        self.config = config
        self.document = document
        self.verify_tree = verify_tree
        self.resolver = OptionResolver(config)
        self.logger = get_logger(__name__, document, "session")
        self._finished = False

    def run(self, text: str, mode: ProcessingMode = ProcessingMode.FORMAT) -> FormatResult:
        """Process document text.

        Args:
            text: Complete document text
            mode: How far to take the document

        Returns:
            FormatResult; ``output`` is None when the document had errors
        """
        if self._finished:
            raise InvariantViolation("A formatting session processes one document")
        self._finished = True

        process = psutil.Process()
        memory_before = process.memory_info().rss
        start_time = time.time()
        result = FormatResult(document=self.document)
        result.metrics.characters_processed = len(text)
        try:
            self._run_pipeline(text, mode, result)
        finally:
            result.metrics.processing_time_ms = (
                (time.time() - start_time) * MS_PER_SECOND
            )
            result.metrics.memory_used_bytes = max(
                0, process.memory_info().rss - memory_before
            )
        self.logger.debug(
            "Document processed",
            extra={
                "processing_time_ms": result.metrics.processing_time_ms,
                "memory_used_bytes": result.metrics.memory_used_bytes,
            }
        )
        return result

    def _run_pipeline(self, text: str, mode: ProcessingMode, result: FormatResult) -> None:
        self.logger.info("Parsing document...")
        tokens = XMLTokenizer(self.document).tokenize(text)
        result.metrics.tokens_generated = tokens.token_count

        if mode == ProcessingMode.CHECK_PARSER:
            self.logger.info("Checking parser...")
            result.parser_ok = tokens.round_trips(text)
            if not result.parser_ok:
                result.success = False
                result.add_diagnostic(
                    DiagnosticSeverity.ERROR,
                    "PARSER ERROR: document token concatenation differs from document",
                    "session",
                )
            return

        self.logger.info("Checking document for errors...")
        result.extend(scan_errors(tokens, self.document))
        if not result.success:
            self.logger.warning("Cannot continue processing document.")
            return

        self.logger.info("Convert document tokens to tree...")
        build = XMLTreeBuilder(self.document).build(tokens)
        result.extend(build.diagnostics)
        if not build.success:
            self.logger.warning("Cannot continue processing document.")
            return
        result.metrics.elements_built = build.element_count

        if self.verify_tree and stringify(build.nodes) != text:
            result.add_diagnostic(
                DiagnosticSeverity.WARNING,
                "Mismatch between document and stringified tree",
                "session",
            )

        try:
            self._canonicalize_and_format(build.nodes, mode, result)
        except RecursionError:
            limit = sys.getrecursionlimit()
            result.extend([DiagnosticEntry(
                severity=DiagnosticSeverity.ERROR,
                message=(
                    "Element nesting too deep to format "
                    f"(recursion limit {limit})"
                ),
                component="session",
                kind=ErrorKind.NESTING_TOO_DEEP,
                details={"recursion_limit": limit},
            )])
            result.output = None
            self.logger.warning("Cannot continue processing document.")

    def _canonicalize_and_format(
        self, nodes: List[Node], mode: ProcessingMode, result: FormatResult
    ) -> None:
        self.logger.info("Canonizing document tree...")
        nodes = Canonicalizer(self.resolver, self.document).canonicalize(nodes)
        result.unconfigured_elements = self.resolver.unconfigured_names()

        if mode == ProcessingMode.CANONIZE_ONLY:
            result.output = stringify(nodes)
            return
        if mode == ProcessingMode.SHOW_UNCONFIGURED:
            return

        self.logger.info("Formatting document tree...")
        output = TreeFormatter(self.resolver, self.document).format(nodes)
        if output and not output.endswith("\n"):
            self.logger.error("LOGIC ERROR: trailing newline had to be added")
            output += "\n"
        result.output = output
