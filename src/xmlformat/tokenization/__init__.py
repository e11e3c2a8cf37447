"""Tokenization layer for XML reformatting.

This module splits document text into classified tokens, assigns each token
its starting line, and scans the token list for malformed markup.

Key Components:
    XMLTokenizer: Produces a TokenizationResult from document text
    Token: Classified, line-numbered slice of the document
    scan_errors: Reports unterminated markup tokens
"""

from .scanner import scan_errors
from .tokenizer import (
    Token,
    TokenizationResult,
    TokenType,
    XMLTokenizer,
    assign_line_numbers,
    classify_token,
    extract_tag_name,
    shallow_parse,
)

__all__ = [
    "Token",
    "TokenizationResult",
    "TokenType",
    "XMLTokenizer",
    "assign_line_numbers",
    "classify_token",
    "extract_tag_name",
    "scan_errors",
    "shallow_parse",
]
