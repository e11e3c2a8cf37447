"""Tree layer for XML reformatting.

This module provides the document node types and the stack-based builder
that turns a token stream into a node tree.

Key Components:
    XMLTreeBuilder: Builds a TreeBuildResult from tokens
    ElementNode: Element with original tags and ordered children
    TextNode, CommentNode, ProcessingInstructionNode, DoctypeNode, CdataNode:
        Opaque leaf nodes
    stringify: Concatenates a node list back into document text
"""

from .builder import TreeBuildResult, XMLTreeBuilder
from .nodes import (
    CdataNode,
    CommentNode,
    DoctypeNode,
    ElementNode,
    LeafNode,
    Node,
    ProcessingInstructionNode,
    TextNode,
    count_elements,
    stringify,
)

__all__ = [
    "CdataNode",
    "CommentNode",
    "DoctypeNode",
    "ElementNode",
    "LeafNode",
    "Node",
    "ProcessingInstructionNode",
    "TextNode",
    "TreeBuildResult",
    "XMLTreeBuilder",
    "count_elements",
    "stringify",
]
