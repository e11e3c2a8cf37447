"""Block context stack shared by canonicalization and layout.

Inline elements take their normalization and wrapping from the nearest
enclosing block element, and blocks and inlines may nest. Each pipeline stage
keeps a stack of the block elements it is currently inside, together with the
break type that governs the next newline written for that block.
"""

from dataclasses import dataclass
from typing import List

from xmlformat.shared import BreakType, ElementOptions, InvariantViolation


@dataclass
class BlockFrame:
    """One enclosing block element."""

    name: str
    options: ElementOptions
    break_type: BreakType = BreakType.ENTRY


class BlockContextStack:
    """Stack of enclosing block elements for one canonicalize or format call."""

    def __init__(self) -> None:
        self._frames: List[BlockFrame] = []

    def __len__(self) -> int:
        return len(self._frames)

    def push(self, name: str, options: ElementOptions) -> None:
        self._frames.append(BlockFrame(name, options))

    def pop(self) -> BlockFrame:
        if not self._frames:
            raise InvariantViolation("Block context stack underflow")
        return self._frames.pop()

    @property
    def top(self) -> BlockFrame:
        if not self._frames:
            raise InvariantViolation("No enclosing block element")
        return self._frames[-1]

    @property
    def names(self) -> List[str]:
        return [frame.name for frame in self._frames]

    @property
    def normalize(self) -> bool:
        """Whether text in the current block is normalized."""
        return self.top.options.normalize

    @property
    def wrap_length(self) -> int:
        return self.top.options.wrap_length

    def set_break_type(self, break_type: BreakType) -> None:
        self.top.break_type = break_type

    @property
    def break_count(self) -> int:
        """Newlines for the current block's active break type."""
        frame = self.top
        return frame.options.break_count(frame.break_type)

    def expect_empty(self, stage: str) -> None:
        """Raise unless the stack is empty, as it must be between documents."""
        if self._frames:
            raise InvariantViolation(
                f"{stage}: block context stack not empty: {self.names}"
            )
