"""Tests for whitespace canonicalization."""

import pytest

from xmlformat.formatting import Canonicalizer, OptionResolver
from xmlformat.shared import FormatConfig, InvariantViolation
from xmlformat.tokenization import XMLTokenizer
from xmlformat.tree import ElementNode, TextNode, XMLTreeBuilder, stringify


def canonize(text, elements=None):
    """Canonicalize ``text`` and return the canonical document text."""
    resolver = OptionResolver(FormatConfig(elements))
    build = XMLTreeBuilder().build(XMLTokenizer().tokenize(text))
    assert build.success
    return stringify(Canonicalizer(resolver).canonicalize(build.nodes))


NORMALIZED_P = {"p": {"normalize": "yes"}}


class TestNonNormalizedBlocks:
    """Test canonicalization inside blocks that keep their text."""

    def test_whitespace_only_text_removed(self):
        assert canonize("<a>\n  <b>  x  </b>\n</a>\n") == "<a><b>  x  </b></a>"

    def test_other_text_kept_verbatim(self):
        assert canonize("<a> one\n two </a>") == "<a> one\n two </a>"


class TestNormalizedBlocks:
    """Test whitespace collapsing and trimming in normalized blocks."""

    def test_first_and_last_child_trimmed(self):
        elements = {
            "a": {"normalize": "yes", "subindent": 2},
            "b": {"normalize": "yes", "subindent": 2},
        }
        assert canonize("<a><b>  x  </b></a>", elements) == "<a><b>x</b></a>"

    def test_runs_collapse(self):
        assert canonize("<p>one \n\t two</p>", NORMALIZED_P) == "<p>one two</p>"

    def test_whitespace_only_text_dropped(self):
        assert canonize("<p>  \n </p>", NORMALIZED_P) == "<p></p>"

    def test_space_next_to_block_sibling_kept(self):
        """Test a normalized block sibling does not trim adjacent text."""
        elements = {"p": {"normalize": "yes"}, "q": {"normalize": "yes"}}
        assert canonize("<p>a <q>b</q> c</p>", elements) == "<p>a <q>b</q> c</p>"

    def test_trimmed_next_to_verbatim_sibling(self):
        elements = dict(NORMALIZED_P, pre={"format": "verbatim"})
        assert canonize("<p>a <pre> x </pre> b</p>", elements) == "<p>a<pre> x </pre>b</p>"

    def test_trimmed_next_to_non_normalized_block(self):
        assert canonize("<p>a <q> x </q> b</p>", NORMALIZED_P) == "<p>a<q> x </q>b</p>"

    def test_trimmed_next_to_comment(self):
        assert canonize("<p>a <!-- c --> b</p>", NORMALIZED_P) == "<p>a<!-- c -->b</p>"

    def test_non_breaking_space_is_content(self):
        text = "<p>\u00a0x\u00a0</p>"
        assert canonize(text, NORMALIZED_P) == text


class TestInlineElements:
    """Test inline elements inherit normalization but keep outer spaces."""

    def test_inline_keeps_edge_spaces(self):
        elements = dict(NORMALIZED_P, literal={"format": "inline"})
        text = "<p>three<literal> blind </literal>mice</p>"
        assert canonize(text, elements) == text

    def test_inline_collapses_runs(self):
        elements = dict(NORMALIZED_P, em={"format": "inline"})
        assert canonize("<p> a <em>  b  </em> c </p>", elements) == "<p>a <em> b </em> c</p>"

    def test_inline_in_non_normalized_block(self):
        elements = {"em": {"format": "inline"}}
        assert canonize("<a><em>  </em> x </a>", elements) == "<a><em></em> x </a>"


class TestVerbatimElements:
    """Test verbatim subtrees are left untouched."""

    def test_verbatim_subtree_untouched(self):
        elements = dict(NORMALIZED_P, pre={"format": "verbatim"})
        text = "<p><pre>  a\n\n  <b>  </b> </pre></p>"
        assert canonize(text, elements) == text

    def test_canonicalizing_verbatim_parent_is_an_error(self):
        resolver = OptionResolver(FormatConfig({"pre": {"format": "verbatim"}}))
        canonicalizer = Canonicalizer(resolver)
        with pytest.raises(InvariantViolation, match="verbatim element pre"):
            canonicalizer._canonicalize_children([TextNode(" x ")], "pre")


class TestUnconfiguredElements:
    """Test elements resolved during canonicalization are recorded."""

    def test_unconfigured_names_recorded(self):
        resolver = OptionResolver(FormatConfig(NORMALIZED_P))
        build = XMLTreeBuilder().build(XMLTokenizer().tokenize("<doc><p/><x><y/></x></doc>"))
        Canonicalizer(resolver).canonicalize(build.nodes)
        assert resolver.unconfigured_names() == {"doc", "x", "y"}

    def test_tree_rewritten_in_place(self):
        resolver = OptionResolver(FormatConfig(NORMALIZED_P))
        element = ElementNode("p", "<p>", "</p>", [TextNode("  a  b ")])
        nodes = Canonicalizer(resolver).canonicalize([element])
        assert nodes[0] is element
        assert element.children[0].content == "a b"
