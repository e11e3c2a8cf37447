"""Public formatting API.

Simple use goes through the module-level functions::

    >>> result = format_string("<a><b>x</b></a>")
    >>> result.output
    '<a>\\n <b>x</b>\\n</a>\\n'

Repeated use with one configuration goes through XMLFormatter, which starts
a fresh FormattingSession for every document it is given.
"""

from pathlib import Path
from typing import Optional, Set, Union

from xmlformat.shared import FormatConfig, FormatResult, get_logger

from .session import FormattingSession, ProcessingMode


class XMLFormatter:
    """Reusable formatter bound to one configuration."""

    def __init__(
        self, config: Optional[FormatConfig] = None, verify_tree: bool = False
    ) -> None:
        """Initialize formatter.

        Args:
            config: Element configuration; built-in defaults when omitted
            verify_tree: Enable the pre-canonicalization stringify check
        """
        self.config = config or FormatConfig()
        self.verify_tree = verify_tree
        self.logger = get_logger(__name__, None, "xml_formatter")

    def process(
        self,
        text: str,
        mode: ProcessingMode = ProcessingMode.FORMAT,
        document: Optional[str] = None
    ) -> FormatResult:
        """Run one document through a new session."""
        session = FormattingSession(self.config, document, self.verify_tree)
        result = session.run(text, mode)
        if not result.success:
            self.logger.info(
                "Document not formatted",
                extra={"document_label": document, "error_count": result.error_count}
            )
        return result

    def format_string(self, text: str, document: Optional[str] = None) -> FormatResult:
        """Format document text."""
        return self.process(text, ProcessingMode.FORMAT, document)

    def format_file(self, path: Union[str, Path]) -> FormatResult:
        """Read and format a document file."""
        file_path = Path(path)
        return self.format_string(file_path.read_text(), document=str(file_path))

    def canonize(self, text: str, document: Optional[str] = None) -> FormatResult:
        """Canonicalize document text; ``output`` holds the canonical text."""
        return self.process(text, ProcessingMode.CANONIZE_ONLY, document)

    def check_parser(self, text: str) -> bool:
        """Check that the tokens of ``text`` concatenate back to ``text``."""
        return bool(self.process(text, ProcessingMode.CHECK_PARSER).parser_ok)

    def unconfigured_elements(self, text: str) -> Set[str]:
        """Names of elements in ``text`` that the configuration does not name."""
        result = self.process(text, ProcessingMode.SHOW_UNCONFIGURED)
        return result.unconfigured_elements


def format_string(text: str, config: Optional[FormatConfig] = None) -> FormatResult:
    """Format XML document text.

    Args:
        text: Complete document text
        config: Element configuration; built-in defaults when omitted

    Returns:
        FormatResult with the formatted document in ``output``, or None and
        diagnostics when the document is malformed
    """
    return XMLFormatter(config).format_string(text)


def format_file(
    path: Union[str, Path], config: Optional[FormatConfig] = None
) -> FormatResult:
    """Read and format an XML document file."""
    return XMLFormatter(config).format_file(path)
