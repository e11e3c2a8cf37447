"""Formatting layer for XML reformatting.

This module resolves element options, canonicalizes whitespace in the
document tree, and lays the tree out as formatted text.

Key Components:
    OptionResolver: Per-document element-name to options lookup
    Canonicalizer: Deletes or normalizes whitespace text nodes in place
    TreeFormatter: Writes the canonical tree with breaks, indent and wrapping
    line_wrap: Greedy wrapper that never splits a tag
"""

from .blocks import BlockContextStack, BlockFrame
from .canonicalizer import Canonicalizer
from .layout import TreeFormatter
from .options import OptionResolver
from .wrap import line_wrap, split_units

__all__ = [
    "BlockContextStack",
    "BlockFrame",
    "Canonicalizer",
    "OptionResolver",
    "TreeFormatter",
    "line_wrap",
    "split_units",
]
