"""
Character materializer.

Every boundary point with offset > 0 has at most one visible character
"ending at" it. Materialization happens in two passes:

1. possible_character: the raw candidate from the text data or from the
   synthesized space of an element (br line break, block leading/trailing
   line break, table-cell tab), looking only at the position itself.
2. materialize: resolves collapsing against neighbouring raw characters. A
   collapsible space after nothing, a line break or a trailing space vanishes;
   a collapsible space before nothing or before a space-collapsing line break
   vanishes; a br or a leading line break that would double up vanishes.

Both passes are memoized in the session.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace

from .config import LayoutConfig
from .dom import Node
from .options import CharacterOptions
from .positions import Position
from .session import Session

# Raw character kinds
EMPTY = "empty"
NON_SPACE = "non-space"
UNCOLLAPSIBLE_SPACE = "uncollapsible-space"
COLLAPSIBLE_SPACE = "collapsible-space"
PRE_LINE_TRAILING_SPACE = "pre-line-trailing-space"
LINE_BREAK = "line-break"
LEADING_SPACE = "leading-space"
TRAILING_SPACE = "trailing-space"

SPACES = re.compile(r"^[ \t\f\r\n]+$")
SPACES_MINUS_LINE_BREAKS = re.compile(r"^[ \t\f\r]+$")

NO_SYNTHESIZED_SPACE = ("inline-block", "inline-table", "none", "table-column", "table-column-group")


@dataclass(frozen=True)
class Character:
    """A visible character, or an empty placeholder, ending at a position."""
    text: str
    position: Position
    is_leading_space: bool = False
    is_trailing_space: bool = False
    is_line_break_element: bool = False
    is_collapsible: bool = False
    kind: str = EMPTY

    def __str__(self) -> str:
        return self.text

    def collapses_preceding_space(self, layout: LayoutConfig) -> bool:
        return self.text == "\n" and (
            (self.is_line_break_element and layout.trailing_space_before_br_collapses)
            or (self.is_trailing_space and layout.trailing_space_in_block_collapses)
        )


def trailing_space(session: Session, el: Node) -> str:
    """Whitespace an element contributes after its content."""
    def compute() -> str:
        if el.tag == "br":
            return ""
        display = session.computed_display(el)
        if display == "inline":
            for child in reversed(el.children):
                if not session.is_ignored_node(child):
                    return trailing_space(session, child) if child.is_element else ""
            return ""
        if display in NO_SYNTHESIZED_SPACE:
            return ""
        if display == "table-cell":
            return "\t"
        return "\n" if session.has_inner_text(el) else ""
    return session.memoize(el, "trailing_space", compute)


def leading_space(session: Session, el: Node) -> str:
    """Whitespace an element contributes before its content."""
    def compute() -> str:
        display = session.computed_display(el)
        if display == "inline" or display in NO_SYNTHESIZED_SPACE or display == "table-cell":
            return ""
        return "\n" if session.has_inner_text(el) else ""
    return session.memoize(el, "leading_space", compute)


def possible_character(session: Session, pos: Position) -> Character:
    key = ("possible", pos)
    cached = session.cache.get(key)
    if cached is None:
        cached = session.cache[key] = _possible_character(session, pos)
    return cached


def _possible_character(session: Session, pos: Position) -> Character:
    node, offset = pos.node, pos.offset
    if offset == 0:
        return Character("", pos)

    if node.is_text:
        data = node.content
        char = data[offset - 1]
        info = session.text_info(node)
        if not info.collapse_spaces:
            kind = UNCOLLAPSIBLE_SPACE if SPACES.match(char) else NON_SPACE
            return Character(char, pos, kind=kind)
        space = SPACES_MINUS_LINE_BREAKS if info.pre_line else SPACES
        if not space.match(char):
            return Character(char, pos, kind=NON_SPACE)
        if offset > 1 and space.match(data[offset - 2]):
            return Character("", pos, is_collapsible=True, kind=EMPTY)
        if info.pre_line and data[offset:offset + 1] == "\n":
            return Character(" ", pos, is_collapsible=True, kind=PRE_LINE_TRAILING_SPACE)
        return Character(" ", pos, is_collapsible=True, kind=COLLAPSIBLE_SPACE)

    if node.is_character_data:
        return Character("", pos)

    passed = node.children[offset - 1] if offset - 1 < len(node.children) else None
    if passed is not None and passed.is_element and not session.is_collapsed_node(passed):
        if passed.tag == "br":
            return Character("\n", pos, is_line_break_element=True, kind=LINE_BREAK)
        space = trailing_space(session, passed)
        if space:
            return Character(space, pos, is_trailing_space=True, is_collapsible=True, kind=TRAILING_SPACE)

    # A block after inline content implies a line break before it
    following = node.children[offset] if offset < len(node.children) else None
    if following is not None and following.is_element and not session.is_collapsed_node(following):
        space = leading_space(session, following)
        if space:
            return Character(space, pos, is_leading_space=True, kind=LEADING_SPACE)

    return Character("", pos)


def preceding_character(session: Session, pos: Position) -> Character | None:
    """Nearest non-empty raw character before pos."""
    key = ("preceding", pos)
    if key not in session.cache:
        found = None
        current = session.previous_visible(pos)
        while current is not None:
            candidate = possible_character(session, current)
            if candidate.text:
                found = candidate
                break
            current = session.previous_visible(current)
        session.cache[key] = found
    return session.cache[key]


def following_character(session: Session, pos: Position) -> Character | None:
    """Nearest non-empty raw character after pos."""
    key = ("following", pos)
    if key not in session.cache:
        found = None
        current = session.next_visible(pos)
        while current is not None:
            candidate = possible_character(session, current)
            if candidate.text:
                found = candidate
                break
            current = session.next_visible(current)
        session.cache[key] = found
    return session.cache[key]


def materialize(session: Session, pos: Position, options: CharacterOptions | None = None) -> Character:
    """The visible character ending at pos, with collapsing resolved."""
    options = options or CharacterOptions()
    key = ("character", pos, options)
    cached = session.cache.get(key)
    if cached is None:
        cached = session.cache[key] = _materialize(session, pos, options)
    return cached


def _materialize(session: Session, pos: Position, options: CharacterOptions) -> Character:
    possible = possible_character(session, pos)
    kind = possible.kind
    layout = session.layout

    if kind in (EMPTY, NON_SPACE, UNCOLLAPSIBLE_SPACE):
        return possible

    if kind == PRE_LINE_TRAILING_SPACE and layout.trailing_space_before_br_collapses \
            and options.collapse_space_before_line_break:
        return replace(possible, text="")

    if kind in (COLLAPSIBLE_SPACE, PRE_LINE_TRAILING_SPACE):
        preceding = preceding_character(session, pos)
        if preceding is None or preceding.is_trailing_space or preceding.text == "\n" \
                or (preceding.text == " " and preceding.is_collapsible):
            return replace(possible, text="")
        if _collapses_before_next(session, pos, options):
            return replace(possible, text="")
        return possible

    if kind == TRAILING_SPACE:
        if _collapses_before_next(session, pos, options):
            return replace(possible, text="")
        return possible

    if kind == LINE_BREAK:
        following = following_character(session, pos)
        if following is None or following.is_trailing_space:
            return replace(possible, text="")
        return possible

    # LEADING_SPACE
    preceding = preceding_character(session, pos)
    if preceding is None or preceding.text == "\n":
        return replace(possible, text="")
    following = following_character(session, pos)
    if following is None or following.is_trailing_space:
        return replace(possible, text="")
    return possible


def _collapses_before_next(session: Session, pos: Position, options: CharacterOptions) -> bool:
    following = following_character(session, pos)
    if following is None:
        return True
    return following.text == "\n" and options.collapse_space_before_line_break \
        and following.collapses_preceding_space(session.layout)
