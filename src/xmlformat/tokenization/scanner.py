"""Error scanning for shallow-parsed tokens.

A token that starts with ``<`` but does not end with ``>`` is markup the
shallow parser could not complete. The scanner reports every such token
rather than stopping at the first; any report stops the document before tree
construction.
"""

from typing import List, Optional

from xmlformat.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    ErrorKind,
    get_logger,
)

from .tokenizer import TokenizationResult

COMPONENT = "error_scanner"


def scan_errors(
    result: TokenizationResult, document: Optional[str] = None
) -> List[DiagnosticEntry]:
    """Return one MALFORMED_TOKEN diagnostic per unterminated markup token."""
    logger = get_logger(__name__, document, COMPONENT)
    diagnostics = []

    for token in result.tokens:
        if token.is_markup and not token.text.endswith(">"):
            diagnostic = DiagnosticEntry(
                severity=DiagnosticSeverity.ERROR,
                message=f"Malformed token: {token.text}",
                component=COMPONENT,
                kind=ErrorKind.MALFORMED_TOKEN,
                position={"line": token.line, "token": token.number},
                details={"text": token.text},
            )
            logger.warning(str(diagnostic))
            diagnostics.append(diagnostic)

    if diagnostics:
        logger.warning(f"Number of errors found: {len(diagnostics)}")
    return diagnostics
