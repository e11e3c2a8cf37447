"""Tests for the public formatting API and per-document sessions."""

import sys
from unittest.mock import Mock, patch

import pytest

from xmlformat import (
    ErrorKind,
    FormatConfig,
    FormattingSession,
    ProcessingMode,
    XMLFormatter,
    format_file,
    format_string,
)
from xmlformat.shared import InvariantViolation

DOCBOOK_CONFIG = FormatConfig.from_text("""
section
  subindent 2
para title
  normalize yes
  wrap-length 40
  subindent 0
  entry-break 0
  exit-break 0
emphasis literal
  format inline
programlisting
  format verbatim
""")

DOCBOOK_TEXT = """<section>
<title>Three   blind mice</title>
<para>See how <emphasis>they</emphasis> run, see how they run.</para>
<programlisting>
  run()
</programlisting>
</section>
"""


class TestFormatString:
    """Test the module-level formatting function."""

    def test_default_format(self):
        result = format_string("<a><b>x</b></a>")

        assert result.success
        assert result.output == "<a>\n <b>x</b>\n</a>\n"
        assert result.diagnostics == []

    def test_configured_document(self):
        result = format_string(DOCBOOK_TEXT, DOCBOOK_CONFIG)

        assert result.success
        assert result.output == (
            "<section>\n"
            "  <title>Three blind mice</title>\n"
            "  <para>See how <emphasis>they</emphasis> run,\n"
            "  see how they run.</para>\n"
            "<programlisting>\n"
            "  run()\n"
            "</programlisting>\n"
            "</section>\n"
        )

    def test_idempotent(self):
        first = format_string(DOCBOOK_TEXT, DOCBOOK_CONFIG).output
        assert format_string(first, DOCBOOK_CONFIG).output == first

    def test_output_ends_with_newline(self):
        assert format_string("<a/>").output == "<a/>\n"

    def test_metrics_recorded(self):
        text = "<a><b/></a>"
        result = format_string(text)
        assert result.metrics.characters_processed == len(text)
        assert result.metrics.tokens_generated == 3
        assert result.metrics.elements_built == 2
        assert result.metrics.processing_time_ms >= 0
        assert result.metrics.memory_used_bytes >= 0


class TestMalformedDocuments:
    """Test documents with errors produce no output."""

    def test_malformed_token(self):
        result = format_string("<a><b</a>")

        assert not result.success
        assert result.output is None
        assert [d.kind for d in result.errors] == [ErrorKind.MALFORMED_TOKEN]

    def test_tag_mismatch(self):
        result = format_string("<a><b></a></b>")

        assert not result.success
        assert result.output is None
        assert len(result.errors_of_kind(ErrorKind.TAG_NAME_MISMATCH)) == 1

    def test_scanner_errors_stop_before_tree_building(self):
        """Test structural problems are not reported alongside token errors."""
        result = format_string("</x><a><b</a>")
        assert [d.kind for d in result.errors] == [ErrorKind.MALFORMED_TOKEN]


class TestXMLFormatter:
    """Test the reusable formatter."""

    def test_format_file(self, tmp_path):
        path = tmp_path / "doc.xml"
        path.write_text("<a><b>x</b></a>")

        result = XMLFormatter().format_file(path)
        assert result.output == "<a>\n <b>x</b>\n</a>\n"
        assert result.document == str(path)
        assert format_file(str(path)).output == result.output

    def test_canonize(self):
        result = XMLFormatter().canonize("<a> <b>  x  </b> </a>")
        assert result.output == "<a><b>  x  </b></a>"

    def test_check_parser(self):
        formatter = XMLFormatter()
        assert formatter.check_parser("<a>text</a>")
        assert formatter.check_parser("<a><b</a> < stray")

    def test_check_parser_produces_no_output(self):
        result = XMLFormatter().process("<a/>", ProcessingMode.CHECK_PARSER)
        assert result.parser_ok is True
        assert result.output is None

    def test_unconfigured_elements(self):
        formatter = XMLFormatter(FormatConfig.from_mapping({"a": {}}))
        assert formatter.unconfigured_elements("<a><b/><c><b/></c></a>") == {"b", "c"}

    def test_unconfigured_elements_not_carried_over(self):
        """Test each document starts with an empty unconfigured record."""
        formatter = XMLFormatter()
        assert formatter.unconfigured_elements("<x/>") == {"x"}
        assert formatter.unconfigured_elements("<y/>") == {"y"}

    def test_unconfigured_reported_by_format(self):
        result = XMLFormatter().format_string("<x><y/></x>")
        assert result.unconfigured_elements == {"x", "y"}

    def test_verbatim_preserved(self):
        formatter = XMLFormatter(FormatConfig({"pre": {"format": "verbatim"}}))
        text = "<pre>\n  a  <b>  c </b>\n</pre>"
        assert formatter.format_string(text).output == text + "\n"


class TestFormattingSession:
    """Test per-document sessions."""

    def test_session_is_single_use(self):
        session = FormattingSession(FormatConfig())
        session.run("<a/>")
        with pytest.raises(InvariantViolation, match="one document"):
            session.run("<b/>")

    def test_verify_tree(self):
        session = FormattingSession(FormatConfig(), "doc", verify_tree=True)
        result = session.run("<a> x </a>\n")
        assert result.success
        assert result.diagnostics == []

    def test_show_unconfigured_mode(self):
        session = FormattingSession(FormatConfig())
        result = session.run("<a><b/></a>", ProcessingMode.SHOW_UNCONFIGURED)
        assert result.output is None
        assert result.unconfigured_elements == {"a", "b"}

    @patch("xmlformat.api.session.psutil.Process")
    def test_memory_recorded(self, mock_process):
        mock_process.return_value.memory_info.side_effect = [
            Mock(rss=1000), Mock(rss=5000)
        ]
        result = FormattingSession(FormatConfig()).run("<a/>")
        assert result.metrics.memory_used_bytes == 4000

    def test_too_deep_nesting_fails_document(self):
        depth = sys.getrecursionlimit() + 100
        text = "<e>" * depth + "</e>" * depth
        result = FormattingSession(FormatConfig()).run(text)

        assert not result.success
        assert result.output is None
        assert len(result.errors_of_kind(ErrorKind.NESTING_TOO_DEEP)) == 1
        assert result.metrics.elements_built == depth
