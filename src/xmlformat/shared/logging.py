"""Structured logging utilities for XML reformatting.

This module provides document-aware logging so that every record emitted while
processing a document carries the document label and the pipeline component
that produced it.
"""

import logging
from typing import Any, Dict, Optional


class DocumentLogger:
    """Logger that automatically includes document and component information."""

    def __init__(
        self,
        name: str,
        document: Optional[str] = None,
        component: Optional[str] = None
    ) -> None:
        """Initialize document logger.

        Args:
            name: Logger name (typically __name__)
            document: Optional label of the document being processed
            component: Component name for structured logging
        """
        self.logger = logging.getLogger(name)
        self.document = document
        self.component = component or name.split(".")[-1]

    def _get_extra(self, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        combined_extra = {
            "component": self.component,
            "document": self.document,
        }

        if extra:
            combined_extra.update(extra)

        return combined_extra

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log debug message with document info."""
        self.logger.debug(message, extra=self._get_extra(extra))

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log info message with document info."""
        self.logger.info(message, extra=self._get_extra(extra))

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log warning message with document info."""
        self.logger.warning(message, extra=self._get_extra(extra))

    def error(
        self,
        message: str,
        extra: Optional[Dict[str, Any]] = None,
        exc_info: bool = False
    ) -> None:
        """Log error message with document info."""
        self.logger.error(message, extra=self._get_extra(extra), exc_info=exc_info)


def get_logger(
    name: str,
    document: Optional[str] = None,
    component: Optional[str] = None
) -> DocumentLogger:
    """Get a document-aware logger instance.

    Args:
        name: Logger name (typically __name__)
        document: Optional label of the document being processed
        component: Component name for structured logging

    Returns:
        DocumentLogger instance
    """
    return DocumentLogger(name, document, component)


LOG_FORMAT = "%(message)s"
VERBOSE_LOG_FORMAT = "%(levelname)s %(component)s: %(message)s"


class DocumentContextFilter(logging.Filter):
    """Give records from plain loggers the fields DocumentLogger adds."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "component"):
            record.component = record.name
        if not hasattr(record, "document"):
            record.document = None
        return True


def configure_logging(verbose: bool = False) -> None:
    """Configure root logging for command-line use.

    Verbose runs report every pipeline stage, tagged with its component;
    otherwise only errors reach standard error.
    """
    handler = logging.StreamHandler()
    handler.addFilter(DocumentContextFilter())
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.ERROR,
        format=VERBOSE_LOG_FORMAT if verbose else LOG_FORMAT,
        handlers=[handler],
    )
