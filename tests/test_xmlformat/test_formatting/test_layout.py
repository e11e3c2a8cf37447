"""Tests for tree layout."""

import pytest

from xmlformat.formatting import Canonicalizer, OptionResolver, TreeFormatter
from xmlformat.shared import FormatConfig, InvariantViolation
from xmlformat.tokenization import XMLTokenizer
from xmlformat.tree import XMLTreeBuilder


def layout(text, elements=None):
    """Canonicalize and format ``text`` with one shared resolver."""
    resolver = OptionResolver(FormatConfig(elements))
    build = XMLTreeBuilder().build(XMLTokenizer().tokenize(text))
    assert build.success
    nodes = Canonicalizer(resolver).canonicalize(build.nodes)
    return TreeFormatter(resolver).format(nodes)


class TestBlockLayout:
    """Test breaks and indentation of block elements."""

    def test_nested_blocks(self):
        assert layout("<a><b>x</b></a>") == "<a>\n <b>x</b>\n</a>\n"

    def test_self_closed_child(self):
        """Test <b/> has no close tag to indent."""
        assert layout("<a><b/></a>") == "<a>\n <b/>\n</a>\n"

    def test_empty_element(self):
        assert layout("<a></a>") == "<a></a>\n"

    def test_normalized_blocks(self):
        elements = {
            "a": {"normalize": "yes", "subindent": 2},
            "b": {"normalize": "yes", "subindent": 2},
        }
        assert layout("<a><b>  x  </b></a>", elements) == (
            "<a>\n"
            "  <b>\n"
            "    x\n"
            "  </b>\n"
            "</a>\n"
        )

    def test_zero_breaks(self):
        elements = {"a": {"entry-break": 0, "exit-break": 0}}
        assert layout("<a><b>x</b></a>", elements) == "<a><b>x</b></a>\n"

    def test_element_break(self):
        elements = {"a": {"element-break": 2}}
        assert layout("<a><b/><c/></a>", elements) == "<a>\n <b/>\n\n <c/>\n</a>\n"

    def test_mixed_content_preserved(self):
        """Test no breaks are added next to text in a non-normalized block."""
        assert layout("<a>x<b/>y</a>") == "<a>x<b/>y</a>\n"

    def test_top_level_nodes(self):
        text = '<?xml version="1.0"?>\n<!-- c -->\n<a/>\n'
        assert layout(text) == text


class TestInlineAndVerbatimLayout:
    """Test inline flow and verbatim output."""

    def test_inline_stays_in_text_flow(self):
        elements = {"p": {"normalize": "yes"}, "literal": {"format": "inline"}}
        text = "<p>three<literal> blind </literal>mice</p>"
        assert layout(text, elements) == (
            "<p>\n three<literal> blind </literal>mice\n</p>\n"
        )

    def test_verbatim_emitted_unchanged(self):
        elements = {"pre": {"format": "verbatim"}}
        text = "<doc>\n  <pre>  keep\n  this </pre>\n</doc>"
        assert layout(text, elements) == (
            "<doc>\n<pre>  keep\n  this </pre>\n</doc>\n"
        )

    def test_comment_in_block(self):
        assert layout("<a>  <!-- c -->  </a>") == "<a>\n<!-- c -->\n</a>\n"


class TestWrappedLayout:
    """Test wrapping of normalized text."""

    def test_wrap_length(self):
        elements = {"p": {"normalize": "yes", "wrap-length": 20}}
        assert layout("<p>one two three four five six</p>", elements) == (
            "<p>\n"
            " one two three four\n"
            " five six\n"
            "</p>\n"
        )

    def test_inline_tags_wrap_as_units(self):
        elements = {
            "p": {"normalize": "yes", "wrap-length": 12},
            "i": {"format": "inline"},
        }
        assert layout("<p>aaaa <i>bbb</i> ccc</p>", elements) == (
            "<p>\n"
            " aaaa\n"
            " <i>bbb</i>\n"
            " ccc\n"
            "</p>\n"
        )


class TestFormatterState:
    """Test formatter invariants."""

    def test_block_stack_empty_after_format(self):
        resolver = OptionResolver(FormatConfig())
        formatter = TreeFormatter(resolver)
        build = XMLTreeBuilder().build(XMLTokenizer().tokenize("<a><b/></a>"))
        formatter.format(build.nodes)
        formatter._blocks.expect_empty("test")

    def test_pending_output_checked(self):
        formatter = TreeFormatter(OptionResolver(FormatConfig()))
        formatter._blocks.push("x", FormatConfig().default_options)
        with pytest.raises(InvariantViolation):
            formatter.format([])
