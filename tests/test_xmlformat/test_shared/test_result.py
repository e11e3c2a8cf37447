"""Tests for result objects and document-aware logging."""

import logging

import pytest

from xmlformat.shared import (
    DocumentContextFilter,
    DiagnosticEntry,
    DiagnosticSeverity,
    ErrorKind,
    FormatResult,
    PerformanceMetrics,
    get_logger,
)


class TestDiagnosticEntry:
    """Test diagnostic entry behavior."""

    def test_validation(self):
        with pytest.raises(ValueError, match="message cannot be empty"):
            DiagnosticEntry(DiagnosticSeverity.ERROR, "", "builder")
        with pytest.raises(ValueError, match="component cannot be empty"):
            DiagnosticEntry(DiagnosticSeverity.ERROR, "msg", "")

    def test_str_with_position(self):
        entry = DiagnosticEntry(
            DiagnosticSeverity.ERROR, "Malformed token: <b", "scanner",
            kind=ErrorKind.MALFORMED_TOKEN, position={"line": 4, "token": 9},
        )
        assert str(entry) == "line 4, token 9: Malformed token: <b"
        assert entry.is_error

    def test_str_without_position(self):
        entry = DiagnosticEntry(DiagnosticSeverity.WARNING, "note", "session")
        assert str(entry) == "note"
        assert not entry.is_error


class TestFormatResult:
    """Test result aggregation."""

    def test_defaults(self):
        result = FormatResult()
        assert result.success
        assert result.output is None
        assert result.error_count == 0

    def test_extend_with_errors_fails_result(self):
        result = FormatResult()
        result.extend([
            DiagnosticEntry(DiagnosticSeverity.ERROR, "a", "x",
                            kind=ErrorKind.UNMATCHED_CLOSE_TAG),
            DiagnosticEntry(DiagnosticSeverity.WARNING, "b", "x"),
        ])

        assert not result.success
        assert result.error_count == 1
        assert [d.message for d in result.errors] == ["a"]
        assert len(result.errors_of_kind(ErrorKind.UNMATCHED_CLOSE_TAG)) == 1
        assert result.errors_of_kind(ErrorKind.TAG_NAME_MISMATCH) == []

    def test_extend_with_warnings_keeps_success(self):
        result = FormatResult()
        result.add_diagnostic(DiagnosticSeverity.WARNING, "w", "x")
        result.extend([DiagnosticEntry(DiagnosticSeverity.INFO, "i", "x")])
        assert result.success
        assert len(result.diagnostics) == 2

    def test_characters_per_second(self):
        assert PerformanceMetrics().characters_per_second == 0.0
        metrics = PerformanceMetrics(processing_time_ms=500.0, characters_processed=100)
        assert metrics.characters_per_second == 200.0

    def test_memory_per_character(self):
        assert PerformanceMetrics().memory_per_character == 0.0
        metrics = PerformanceMetrics(memory_used_bytes=400, characters_processed=100)
        assert metrics.memory_per_character == 4.0


class TestDocumentLogger:
    """Test document-aware logging."""

    def test_records_carry_document_and_component(self, caplog):
        logger = get_logger("xmlformat.testing", "doc.xml", "tester")
        with caplog.at_level(logging.DEBUG, logger="xmlformat.testing"):
            logger.warning("something odd", extra={"token_count": 3})

        record = caplog.records[-1]
        assert record.getMessage() == "something odd"
        assert record.document == "doc.xml"
        assert record.component == "tester"
        assert record.token_count == 3

    def test_component_defaults_to_module_name(self):
        assert get_logger("xmlformat.tree.builder").component == "builder"

    def test_context_filter_fills_missing_fields(self):
        record = logging.LogRecord("other.lib", logging.ERROR, __file__, 1, "msg", None, None)
        assert DocumentContextFilter().filter(record)
        assert record.component == "other.lib"
        assert record.document is None

    def test_context_filter_keeps_existing_fields(self):
        record = logging.LogRecord("x", logging.ERROR, __file__, 1, "msg", None, None)
        record.component = "tokenizer"
        record.document = "doc.xml"
        DocumentContextFilter().filter(record)
        assert (record.component, record.document) == ("tokenizer", "doc.xml")
