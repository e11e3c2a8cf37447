"""Shallow XML tokenization.

This module splits document text into markup and text tokens with a single
composed regular expression, without validating the deeper XML grammar. The
expression is derived from the REX shallow parser (Robert D. Cameron, 1998).
Every character of the input belongs to exactly one token, so joining the
tokens reproduces the document; malformed markup still yields a token, which
the error scanner later rejects because it does not end with ``>``.
"""

import re
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional

from xmlformat.shared import InvariantViolation, get_logger

# Building blocks of the shallow parsing expression. Suffix legend:
# _se scanning expression, _ce completion expression.
_TEXT_SE = r"[^<]+"
_UNTIL_HYPHEN = r"[^-]*-"
_UNTIL_2_HYPHENS = _UNTIL_HYPHEN + r"(?:[^-]" + _UNTIL_HYPHEN + r")*-"
_COMMENT_CE = _UNTIL_2_HYPHENS + r">?"
_UNTIL_RSBS = r"[^\]]*\](?:[^\]]+\])*\]+"
_CDATA_CE = _UNTIL_RSBS + r"(?:[^\]>]" + _UNTIL_RSBS + r")*>"
_S = r"[ \n\t\r]+"
_NAME_START = r"[A-Za-z_:]|[^\x00-\x7F]"
_NAME_CHAR = r"[A-Za-z0-9_:.-]|[^\x00-\x7F]"
_NAME = r"(?:" + _NAME_START + r")(?:" + _NAME_CHAR + r")*"
_QUOTE_SE = r'"[^"]*"|' + r"'[^']*'"
_DT_IDENT_SE = _S + _NAME + r"(?:" + _S + r"(?:" + _NAME + r"|" + _QUOTE_SE + r"))*"
_MARKUP_DECL_CE = r"(?:[^\]" + "\"'" + r"><]+|" + _QUOTE_SE + r")*>"
_S1 = r"[\n\r\t ]"
_UNTIL_QMS = r"[^?]*\?+"
_PI_TAIL = r"\?>|" + _S1 + _UNTIL_QMS + r"(?:[^>?]" + _UNTIL_QMS + r")*>"
_DT_ITEM_SE = (
    r"<(?:!(?:--" + _UNTIL_2_HYPHENS + r">|[^-]" + _MARKUP_DECL_CE + r")"
    + r"|\?" + _NAME + r"(?:" + _PI_TAIL + r"))"
    + r"|%" + _NAME + r";|" + _S
)
_DOCTYPE_CE = (
    _DT_IDENT_SE + r"(?:" + _S + r")?"
    + r"(?:\[(?:" + _DT_ITEM_SE + r")*\](?:" + _S + r")?)?>?"
)
_DECL_CE = (
    r"--(?:" + _COMMENT_CE + r")?"
    + r"|\[CDATA\[(?:" + _CDATA_CE + r")?"
    + r"|DOCTYPE(?:" + _DOCTYPE_CE + r")?"
)
_PI_CE = _NAME + r"(?:" + _PI_TAIL + r")?"
_END_TAG_CE = _NAME + r"(?:" + _S + r")?>?"
_ATT_VAL_SE = r'"[^<"]*"|' + r"'[^<']*'"
_ELEM_TAG_SE = (
    _NAME + r"(?:" + _S + _NAME + r"(?:" + _S + r")?=(?:" + _S + r")?"
    + r"(?:" + _ATT_VAL_SE + r"))*(?:" + _S + r")?/?>?"
)
_MARKUP_SPE = (
    r"<(?:!(?:" + _DECL_CE + r")?"
    + r"|\?(?:" + _PI_CE + r")?"
    + r"|/(?:" + _END_TAG_CE + r")?"
    + r"|(?:" + _ELEM_TAG_SE + r")?)"
)

XML_SHALLOW_PATTERN = re.compile(_TEXT_SE + r"|" + _MARKUP_SPE)
TAG_NAME_PATTERN = re.compile(r"</?(" + _NAME + r")")


class TokenType(Enum):
    """Lexical token classes produced by the shallow parse."""

    TEXT = auto()                    # Run of non-< characters
    OPEN_TAG = auto()                # <name ...> or <name .../>
    CLOSE_TAG = auto()               # </name>
    COMMENT = auto()                 # <!-- ... -->
    PROCESSING_INSTRUCTION = auto()  # <? ... ?>
    DOCTYPE = auto()                 # <!DOCTYPE ...>
    CDATA = auto()                   # <![CDATA[ ... ]]>


@dataclass
class Token:
    """A slice of the original document with its classification and position."""

    type: TokenType
    text: str
    line: int
    index: int

    def __post_init__(self) -> None:
        """Validate token values."""
        if not self.text:
            raise ValueError("Token text cannot be empty")
        if self.line < 1:
            raise ValueError("Line number must be >= 1")
        if self.index < 0:
            raise ValueError("Token index must be >= 0")

    @property
    def number(self) -> int:
        """1-based token number used in diagnostics."""
        return self.index + 1

    @property
    def is_markup(self) -> bool:
        return self.text.startswith("<")

    @property
    def is_self_closing(self) -> bool:
        """Check if this is an open tag of the form ``<name/>``."""
        return self.type == TokenType.OPEN_TAG and self.text.endswith("/>")


@dataclass
class TokenizationResult:
    """Ordered tokens of one document."""

    tokens: List[Token] = field(default_factory=list)
    character_count: int = 0

    @property
    def token_count(self) -> int:
        return len(self.tokens)

    def reconstruct(self) -> str:
        """Concatenate token texts back into a document."""
        return "".join(token.text for token in self.tokens)

    def round_trips(self, text: str) -> bool:
        """Check that the tokens concatenate to exactly ``text``."""
        return self.reconstruct() == text


def shallow_parse(text: str) -> List[str]:
    """Split document text into raw token strings.

    The result is exhaustive and non-overlapping: ``"".join(result) == text``.
    """
    return XML_SHALLOW_PATTERN.findall(text)


def classify_token(raw: str) -> TokenType:
    """Classify a raw token by its leading characters."""
    if not raw.startswith("<"):
        return TokenType.TEXT
    if raw.startswith("<!--"):
        return TokenType.COMMENT
    if raw.startswith("<?"):
        return TokenType.PROCESSING_INSTRUCTION
    if raw.startswith("<!DOCTYPE"):
        return TokenType.DOCTYPE
    if raw.startswith("<!["):
        return TokenType.CDATA
    if raw.startswith("</"):
        return TokenType.CLOSE_TAG
    return TokenType.OPEN_TAG


def assign_line_numbers(raw_tokens: List[str]) -> List[int]:
    """Return the 1-based line on which each token starts."""
    line_numbers = []
    line = 1
    for raw in raw_tokens:
        line_numbers.append(line)
        line += raw.count("\n")
    return line_numbers


def extract_tag_name(tag: str) -> str:
    """Return the element name of an open or close tag.

    Raises:
        InvariantViolation: if the tag has no name; tags reach this point
            only after the error scanner accepted them
    """
    match = TAG_NAME_PATTERN.match(tag)
    if match is None:
        raise InvariantViolation(f"Cannot find tag name in tag: {tag}")
    return match.group(1)


class XMLTokenizer:
    """Tokenizer producing classified, line-numbered tokens.

    Tokenization never fails: any text yields tokens, and malformed markup is
    left for the error scanner to report.
    """

    def __init__(self, document: Optional[str] = None) -> None:
        self.document = document
        self.logger = get_logger(__name__, document, "tokenizer")

    def tokenize(self, text: str) -> TokenizationResult:
        """Tokenize document text.

        Args:
            text: Complete document text

        Returns:
            TokenizationResult with tokens in document order
        """
        raw_tokens = shallow_parse(text)
        line_numbers = assign_line_numbers(raw_tokens)

        tokens = [
            Token(
                type=classify_token(raw),
                text=raw,
                line=line,
                index=index,
            )
            for index, (raw, line) in enumerate(zip(raw_tokens, line_numbers))
        ]

        self.logger.debug(
            "Tokenized document",
            extra={"token_count": len(tokens), "character_count": len(text)}
        )
        return TokenizationResult(tokens=tokens, character_count=len(text))
