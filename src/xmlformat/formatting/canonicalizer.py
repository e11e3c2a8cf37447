"""Whitespace canonicalization of the document tree.

Canonicalization removes whitespace that carries no meaning under the
element configuration, rewriting the tree in place:

- Comment, PI, DOCTYPE and CDATA nodes are left untouched.
- Verbatim elements and their descendants are left untouched.
- Inside a non-normalized block, all-whitespace text nodes are deleted and
  other text nodes are kept as they are.
- Inside a normalized block, every whitespace run becomes one space, and a
  leading (trailing) space is trimmed when the text node is the first (last)
  child of the block or follows (precedes) a non-normalized sibling.
- Inline elements are normalized like their enclosing block, except that
  their own first and last text nodes keep a single outer space; otherwise
  ``three<literal> blind </literal>mice`` would lose its word breaks.
"""

import re
from typing import List, Optional

from xmlformat.shared import DOCUMENT_ELEMENT, InvariantViolation, get_logger
from xmlformat.tree import ElementNode, LeafNode, Node, TextNode

from .blocks import BlockContextStack
from .options import OptionResolver

# XML whitespace only; non-breaking spaces are content.
WHITESPACE_RUN = re.compile(r"[ \t\n\r\f\v]+")
ALL_WHITESPACE = re.compile(r"[ \t\n\r\f\v]*\Z")


class Canonicalizer:
    """Rewrites a document tree to its canonical whitespace form."""

    def __init__(self, resolver: OptionResolver, document: Optional[str] = None) -> None:
        self.resolver = resolver
        self.logger = get_logger(__name__, document, "canonicalizer")
        self._blocks = BlockContextStack()

    def canonicalize(self, nodes: List[Node]) -> List[Node]:
        """Canonicalize the top-level node list of a document.

        Returns:
            The rewritten top-level node list
        """
        self._blocks.expect_empty("canonicalize")
        result = self._canonicalize_children(nodes, DOCUMENT_ELEMENT)
        self._blocks.expect_empty("canonicalize")
        self.logger.debug(
            "Canonicalized document tree",
            extra={"unconfigured_count": len(self.resolver.unconfigured_names())}
        )
        return result

    def _canonicalize_children(self, children: List[Node], parent_name: str) -> List[Node]:
        parent = self.resolver.resolve(parent_name)
        if parent.is_verbatim:
            raise InvariantViolation(
                f"Trying to canonize verbatim element {parent_name}"
            )

        if parent.is_block:
            self._blocks.push(parent_name, parent)
        try:
            new_children: List[Node] = []
            for index, child in enumerate(children):
                if isinstance(child, ElementNode):
                    if not self.resolver.resolve(child.name).is_verbatim:
                        child.children = self._canonicalize_children(
                            child.children, child.name
                        )
                elif isinstance(child, TextNode):
                    following = children[index + 1] if index + 1 < len(children) else None
                    preceding = new_children[-1] if new_children else None
                    if not self._canonicalize_text(
                        child, parent.is_block, preceding, following
                    ):
                        continue
                new_children.append(child)
        finally:
            if parent.is_block:
                self._blocks.pop()

        return new_children

    def _canonicalize_text(
        self,
        node: TextNode,
        parent_is_block: bool,
        preceding: Optional[Node],
        following: Optional[Node]
    ) -> bool:
        """Rewrite a text node in place; return False if it should be dropped."""
        if not self._blocks.normalize:
            return ALL_WHITESPACE.match(node.content) is None

        content = WHITESPACE_RUN.sub(" ", node.content)
        if (preceding is None and parent_is_block) or self._is_non_normalized(preceding):
            if content.startswith(" "):
                content = content[1:]
        if (following is None and parent_is_block) or self._is_non_normalized(following):
            if content.endswith(" "):
                content = content[:-1]

        node.content = content
        return bool(content)

    def _is_non_normalized(self, node: Optional[Node]) -> bool:
        """Check whether a sibling of a normalized text node is non-normalized.

        Verbatim elements, non-normalized blocks and the opaque leaf nodes
        are; inline elements never are, since they share the normalization of
        the block being processed.
        """
        if node is None:
            return False
        if isinstance(node, ElementNode):
            options = self.resolver.resolve(node.name)
            if options.is_verbatim:
                return True
            if options.is_block:
                return not options.normalize
            return False
        if isinstance(node, TextNode):
            raise InvariantViolation("Adjacency check called for a text node")
        if isinstance(node, LeafNode):
            return True
        raise InvariantViolation(f"Unhandled node type: {type(node).__name__}")
