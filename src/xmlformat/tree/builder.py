"""Tree building from shallow-parsed tokens.

This module converts the flat token stream into the nested node tree. The
builder is iterative: an explicit stack of open tags and a parallel stack of
the children lists they interrupted replace recursion, so document depth is
not limited by the interpreter's call stack.
"""

import time
from dataclasses import dataclass, field
from typing import List, Optional

from xmlformat.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    ErrorKind,
    get_logger,
)
from xmlformat.tokenization import (
    Token,
    TokenizationResult,
    TokenType,
    extract_tag_name,
)

from .nodes import (
    CdataNode,
    CommentNode,
    DoctypeNode,
    ElementNode,
    Node,
    ProcessingInstructionNode,
    TextNode,
    count_elements,
)

COMPONENT = "tree_builder"

_LEAF_NODE_TYPES = {
    TokenType.TEXT: TextNode,
    TokenType.COMMENT: CommentNode,
    TokenType.PROCESSING_INSTRUCTION: ProcessingInstructionNode,
    TokenType.DOCTYPE: DoctypeNode,
    TokenType.CDATA: CdataNode,
}


@dataclass
class TreeBuildResult:
    """Top-level nodes of a document plus any structural errors found."""

    nodes: List[Node] = field(default_factory=list)
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    processing_time_ms: float = 0.0

    @property
    def error_count(self) -> int:
        return sum(1 for diag in self.diagnostics if diag.is_error)

    @property
    def success(self) -> bool:
        return self.error_count == 0

    @property
    def element_count(self) -> int:
        return count_elements(self.nodes)


class XMLTreeBuilder:
    """Builds a node tree from a token stream.

    Structural errors are collected and scanning continues, so one pass
    reports every mismatch it can find. The tree is usable only when the
    result reports success.
    """

    def __init__(self, document: Optional[str] = None) -> None:
        """Initialize tree builder.

        Args:
            document: Optional document label for log records
        """
        self.document = document
        self.logger = get_logger(__name__, document, COMPONENT)

        self._tag_stack: List[Token] = []
        self._children_stack: List[List[Node]] = []
        self._children: List[Node] = []
        self._diagnostics: List[DiagnosticEntry] = []

    def build(self, tokens: TokenizationResult) -> TreeBuildResult:
        """Build the document tree from tokens.

        Args:
            tokens: Tokenization result that passed the error scanner

        Returns:
            TreeBuildResult with the top-level node list and diagnostics
        """
        start_time = time.time()
        self._reset_state()

        self.logger.debug(
            "Starting tree building", extra={"token_count": tokens.token_count}
        )

        for token in tokens.tokens:
            self._process_token(token)

        self._check_end_of_input()

        result = TreeBuildResult(
            nodes=self._children,
            diagnostics=list(self._diagnostics),
            processing_time_ms=(time.time() - start_time) * 1000,
        )
        self.logger.debug(
            "Tree building completed",
            extra={"error_count": result.error_count}
        )
        return result

    def _reset_state(self) -> None:
        self._tag_stack = []
        self._children_stack = []
        self._children = []
        self._diagnostics = []

    def _process_token(self, token: Token) -> None:
        node_type = _LEAF_NODE_TYPES.get(token.type)
        if node_type is not None:
            self._children.append(node_type(token.text))
        elif token.type == TokenType.CLOSE_TAG:
            self._handle_close_tag(token)
        elif token.is_self_closing:
            self._children.append(
                ElementNode(name=extract_tag_name(token.text), open_tag=token.text)
            )
        else:
            self._tag_stack.append(token)
            self._children_stack.append(self._children)
            self._children = []

    def _handle_close_tag(self, token: Token) -> None:
        if not self._tag_stack:
            self._add_error(
                ErrorKind.UNMATCHED_CLOSE_TAG,
                "Close tag w/o preceding open tag; malformed document?",
                token,
            )
            return

        open_token = self._tag_stack[-1]
        open_name = extract_tag_name(open_token.text)
        close_name = extract_tag_name(token.text)
        if open_name != close_name:
            # The close tag is discarded; its would-be partner stays open.
            self._add_error(
                ErrorKind.TAG_NAME_MISMATCH,
                f"Tag mismatch; malformed document? "
                f"(open tag: {open_token.text}, close tag: {token.text})",
                token,
                details={
                    "open_tag": open_token.text,
                    "close_tag": token.text,
                    "enclosing_tags": [t.text for t in self._tag_stack[:-1]],
                },
            )
            return

        self._tag_stack.pop()
        element = ElementNode(
            name=open_name,
            open_tag=open_token.text,
            close_tag=token.text,
            children=self._children,
        )
        self._children = self._children_stack.pop()
        self._children.append(element)

    def _check_end_of_input(self) -> None:
        if self._tag_stack:
            self._add_error(
                ErrorKind.UNCLOSED_TAGS_AT_EOF,
                "Error at EOF: Unclosed tags; malformed document?",
                details={"unclosed_tags": [t.text for t in self._tag_stack]},
            )
        if self._children_stack:
            self._add_error(
                ErrorKind.UNPROCESSED_CHILDREN_AT_EOF,
                "Error at EOF: Unprocessed child elements; malformed document?",
                details={"pending_lists": len(self._children_stack)},
            )

    def _add_error(
        self,
        kind: ErrorKind,
        message: str,
        token: Optional[Token] = None,
        details: Optional[dict] = None
    ) -> None:
        position = None
        entry_details = dict(details or {})
        if token is not None:
            position = {"line": token.line, "token": token.number}
            entry_details["text"] = token.text

        diagnostic = DiagnosticEntry(
            severity=DiagnosticSeverity.ERROR,
            message=message,
            component=COMPONENT,
            kind=kind,
            position=position,
            details=entry_details,
        )
        self.logger.warning(str(diagnostic), extra={"error_kind": kind.name})
        self._diagnostics.append(diagnostic)
