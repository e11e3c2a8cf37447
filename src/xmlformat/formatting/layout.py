"""Layout of a canonical document tree into output text.

The formatter keeps two kinds of output. Finished text goes straight to the
output document. Text nodes and inline tags go to a pending list, which is
held until something forces a break (a block or verbatim element, a comment
or similar node, or the end of a block) and is then flushed, indented and
possibly wrapped as one run of text.

Breaks are written according to the enclosing block's current break type:
``entry-break`` before its first child, ``element-break`` between children
and ``exit-break`` after the last child. A break of zero newlines writes no
indent either, since the following output continues the current line.

Inside a non-normalized block no break or indent is added next to text,
because the text's own whitespace is significant there.
"""

from typing import List, Optional

from xmlformat.shared import (
    DOCUMENT_ELEMENT,
    BreakType,
    InvariantViolation,
    get_logger,
)
from xmlformat.tree import ElementNode, LeafNode, Node, TextNode, stringify

from .blocks import BlockContextStack
from .options import OptionResolver
from .wrap import line_wrap


class TreeFormatter:
    """Produces formatted document text from a canonicalized tree."""

    def __init__(self, resolver: OptionResolver, document: Optional[str] = None) -> None:
        self.resolver = resolver
        self.logger = get_logger(__name__, document, "formatter")
        self._blocks = BlockContextStack()
        self._output: List[str] = []
        self._pending: List[str] = []

    def format(self, nodes: List[Node]) -> str:
        """Format the top-level node list of a canonical document."""
        self._blocks.expect_empty("format")
        self._output = []
        self._pending = []

        self._format_children(DOCUMENT_ELEMENT, nodes, 0)

        self._blocks.expect_empty("format")
        if self._pending:
            raise InvariantViolation("Pending output left after formatting")
        text = "".join(self._output)
        self.logger.debug("Formatted document tree", extra={"output_length": len(text)})
        return text

    def _format_children(self, parent_name: str, children: List[Node], indent: int) -> None:
        parent = self.resolver.resolve(parent_name)
        if parent.is_block:
            self._blocks.push(parent_name, parent)
            indent += parent.subindent

        previous_is_text = False
        current_is_text = False

        for child in children:
            previous_is_text = current_is_text

            if isinstance(child, TextNode):
                current_is_text = True
                self._pending.append(child.content)
                continue

            current_is_text = False
            # Text inside a non-normalized block is laid out by its own
            # whitespace, so no break is written right after it.
            break_allowed = not (previous_is_text and not self._blocks.normalize)

            if isinstance(child, ElementNode):
                options = self.resolver.resolve(child.name)

                if options.is_verbatim:
                    self._flush_pending(indent)
                    if break_allowed:
                        self._emit_break(0)
                    self._blocks.set_break_type(BreakType.ELEMENT)
                    self._write(child.open_tag + stringify(child.children) + child.close_tag)
                    continue

                if options.is_inline:
                    self._pending.append(child.open_tag)
                    self._format_children(child.name, child.children, indent)
                    self._pending.append(child.close_tag)
                    continue

                self._flush_pending(indent)
                if break_allowed:
                    self._emit_break(indent)
                self._blocks.set_break_type(BreakType.ELEMENT)
                self._write(child.open_tag)
                self._format_children(child.name, child.children, indent)
                if self._indents_close_tag(child, options.exit_break, options.normalize):
                    self._write(" " * indent)
                self._write(child.close_tag)
                continue

            if isinstance(child, LeafNode):
                self._flush_pending(indent)
                if break_allowed:
                    self._emit_break(0)
                self._blocks.set_break_type(BreakType.ELEMENT)
                self._write(child.content)
                continue

            raise InvariantViolation(f"Unhandled node type: {type(child).__name__}")

        if parent.is_block:
            if children:
                self._flush_pending(indent)
                self._blocks.set_break_type(BreakType.EXIT)
                if not (current_is_text and not self._blocks.normalize):
                    self._emit_break(0)
            self._blocks.pop()

    @staticmethod
    def _indents_close_tag(element: ElementNode, exit_break: int, normalize: bool) -> bool:
        """Whether a block's close tag starts an indented line.

        It does not when the exit break is zero, when the element was written
        as ``<name/>``, when it has no children (``<name></name>``), or when
        its last child is text in a non-normalized block.
        """
        if exit_break <= 0 or not element.close_tag or not element.children:
            return False
        return not (isinstance(element.children[-1], TextNode) and not normalize)

    def _write(self, text: str) -> None:
        self._output.append(text)

    def _emit_break(self, indent: int) -> None:
        count = self._blocks.break_count
        self._write("\n" * count)
        if indent > 0 and count > 0:
            self._write(" " * indent)

    def _flush_pending(self, indent: int) -> None:
        if not self._pending:
            return

        if not self._blocks.normalize:
            text = "".join(self._pending)
        else:
            self._emit_break(0)
            wrap_length = self._blocks.wrap_length
            broke = self._blocks.break_count > 0
            if wrap_length <= 0:
                text = (" " * indent if broke else "") + "".join(self._pending)
            else:
                first_indent = indent if broke else 0
                text = "\n".join(
                    line_wrap(self._pending, first_indent, indent, wrap_length)
                )

        self._write(text)
        self._pending = []
        self._blocks.set_break_type(BreakType.ELEMENT)
