"""Greedy line wrapping that keeps markup intact.

Each fragment handed to the wrapper is either a tag, such as
``<emphasis role="bold">``, which is an indivisible unit, or a run of text,
which is split into words and whitespace. Words and tags that touch without
whitespace between them are joined into a single unit, so ``<i>``, ``word``,
``</i>`` wraps as ``<i>word</i>`` while ``<i>``, `` ``, ``word`` stays
breakable. Whitespace is never written at a line end: it is held and written
as one space only when the next unit fits on the same line.
"""

import re
from typing import List

_XML_WHITESPACE = " \t\n\r\f\v"
_WORD_OR_SPACE = re.compile(r"[^ \t\n\r\f\v]+|[ \t\n\r\f\v]+")


def split_units(fragments: List[str]) -> List[str]:
    """Split fragments into wrap units, joining units that touch."""
    words: List[str] = []
    for fragment in fragments:
        if fragment.startswith("<"):
            words.append(fragment)
        else:
            words.extend(_WORD_OR_SPACE.findall(fragment))

    units: List[str] = []
    for word in words:
        if (
            units
            and units[-1][-1] not in _XML_WHITESPACE
            and word[0] not in _XML_WHITESPACE
        ):
            units[-1] += word
        else:
            units.append(word)
    return units


def line_wrap(
    fragments: List[str], first_indent: int, rest_indent: int, max_width: int
) -> List[str]:
    """Wrap fragments into lines no longer than ``max_width`` where possible.

    Args:
        fragments: Tags and text runs in output order
        first_indent: Spaces before the first line
        rest_indent: Spaces before every following line
        max_width: Maximum line length, indent included

    Returns:
        Lines without trailing newlines. A unit longer than ``max_width``
        is placed on a line by itself rather than split.
    """
    lines: List[str] = []
    line = ""
    length = 0
    indent = first_indent
    held_space = False

    for unit in split_units(fragments):
        if unit[0] in _XML_WHITESPACE:
            held_space = True
            continue

        gap = 1 if held_space else 0
        held_space = False
        if length == 0 or length + gap + len(unit) > max_width:
            if length:
                lines.append(line)
            line = " " * indent + unit
            length = indent + len(unit)
            indent = rest_indent
            continue

        line += " " * gap + unit
        length += gap + len(unit)

    if line:
        lines.append(line)
    return lines
