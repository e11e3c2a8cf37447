"""Document tree node types.

The tree is a closed set of node classes. Leaf nodes carry their source text
verbatim; element nodes keep their exact open and close tag markup so that a
tree stringifies back to the text it was built from.
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Union


@dataclass
class LeafNode:
    """Node whose content is carried as opaque text."""

    content: str


@dataclass
class TextNode(LeafNode):
    """Character data between markup."""


@dataclass
class CommentNode(LeafNode):
    """``<!-- ... -->``"""


@dataclass
class ProcessingInstructionNode(LeafNode):
    """``<? ... ?>``"""


@dataclass
class DoctypeNode(LeafNode):
    """``<!DOCTYPE ...>``"""


@dataclass
class CdataNode(LeafNode):
    """``<![CDATA[ ... ]]>``"""


@dataclass
class ElementNode:
    """Element with its original tags and ordered children.

    ``close_tag`` is empty for elements written in ``<name/>`` form.
    """

    name: str
    open_tag: str
    close_tag: str = ""
    children: List["Node"] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate element values."""
        if not self.name:
            raise ValueError("Element name cannot be empty")

    @property
    def is_self_closed(self) -> bool:
        return not self.close_tag

    def iter_elements(self) -> Iterator["ElementNode"]:
        """Yield this element and every descendant element in document order."""
        stack = [self]
        while stack:
            element = stack.pop()
            yield element
            stack.extend(
                reversed([c for c in element.children if isinstance(c, ElementNode)])
            )


Node = Union[
    TextNode,
    CommentNode,
    ProcessingInstructionNode,
    DoctypeNode,
    CdataNode,
    ElementNode,
]


def stringify(nodes: List[Node]) -> str:
    """Concatenate a node list back into document text.

    Elements contribute their open tag, their stringified children and their
    close tag; every other node contributes its content.
    """
    parts: List[str] = []
    levels = [iter(nodes)]
    close_tags: List[str] = []

    while levels:
        for node in levels[-1]:
            if isinstance(node, ElementNode):
                parts.append(node.open_tag)
                close_tags.append(node.close_tag)
                levels.append(iter(node.children))
                break
            parts.append(node.content)
        else:
            levels.pop()
            if close_tags:
                parts.append(close_tags.pop())

    return "".join(parts)


def count_elements(nodes: List[Node]) -> int:
    """Count element nodes in a node list and all its descendants."""
    return sum(
        sum(1 for _ in node.iter_elements())
        for node in nodes
        if isinstance(node, ElementNode)
    )
