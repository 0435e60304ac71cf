"""
Range text operations.

Moving, trimming and expanding range boundaries by visible characters or
words, reading a range's visible text, and converting between ranges and
character offsets. All functions run inside an open session and mutate the
range they are given.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .dom import Node, compare_points
from .errors import UnsupportedUnitError
from .iterator import CharacterIterator
from .options import CHARACTER, WORD, CharacterOptions, ExpandOptions, MoveOptions, merge_options
from .parser import parse_fragment
from .positions import Position
from .ranges import CharacterRange, Range
from .session import Session
from .words import ALL_WHITESPACE, TokenizedTextProvider, WordOptions

logger = logging.getLogger(__name__)


@dataclass
class MoveResult:
    position: Position
    units_moved: int


def move_position_by(session: Session, pos: Position, unit: str, count: int,
                     character_options: CharacterOptions, word_options: WordOptions) -> MoveResult:
    """Move pos by count characters or words; negative counts move backward."""
    if unit not in (CHARACTER, WORD):
        raise UnsupportedUnitError(unit)
    if count == 0:
        return MoveResult(pos, 0)

    backward = count < 0
    wanted = abs(count)
    units_moved = 0
    landed = None
    following = None

    if unit == CHARACTER:
        with CharacterIterator(session, pos, backward, None, character_options) as it:
            char = it.next()
            while char is not None and units_moved < wanted:
                units_moved += 1
                landed = char
                char = it.next()
            following = char
    else:
        with TokenizedTextProvider(session, pos, character_options, word_options) as provider:
            step = provider.previous_start_token if backward else provider.next_end_token
            token = step()
            while token is not None and units_moved < wanted:
                if token.is_word:
                    units_moved += 1
                    landed = token.characters[0] if backward else token.characters[-1]
                if units_moved < wanted:
                    token = step()

    new_pos = pos
    if landed is not None:
        new_pos = landed.position
    if backward:
        # Land before the character rather than after it
        if landed is not None:
            new_pos = session.previous_visible(new_pos) or new_pos
        units_moved = -units_moved
    elif landed is not None and landed.is_leading_space:
        # A leading line break belongs to the position before the block; the
        # caret should sit at the start of the block's content instead.
        if unit == WORD:
            with CharacterIterator(session, new_pos, False, None, character_options) as it:
                following = it.next()
        if following is not None:
            new_pos = session.previous_visible(following.position) or new_pos

    logger.debug("Moved %s by %d %s(s) to %s (%d moved)", pos, count, unit, new_pos, units_moved)
    return MoveResult(new_pos, units_moved)


def move_boundary(session: Session, rng: Range, is_start: bool, collapse: bool,
                  unit: str | int, count: int | None, options: MoveOptions | None = None,
                  **overrides) -> int:
    """Move one boundary of rng (or the whole collapsed range); returns units moved."""
    if count is None:
        if not isinstance(unit, int):
            raise TypeError("count is required when a unit is given")
        unit, count = CHARACTER, unit
    if unit not in (CHARACTER, WORD):
        raise UnsupportedUnitError(unit)
    options = merge_options(options, MoveOptions(), **overrides)
    character_options = options.character_options or CharacterOptions()
    word_options = options.word_options or session.defaults.word_options

    boundary_is_start = is_start
    if collapse:
        boundary_is_start = count >= 0
        rng.collapse(not boundary_is_start)

    pos = rng.start if boundary_is_start else rng.end
    result = move_position_by(session, pos, unit, count, character_options, word_options)
    if boundary_is_start:
        rng.set_start(result.position)
    else:
        rng.set_end(result.position)
    return result.units_moved


def range_iterator(session: Session, rng: Range, character_options: CharacterOptions | None,
                   backward: bool = False) -> CharacterIterator:
    if backward:
        return CharacterIterator(session, rng.end, True, rng.start, character_options)
    return CharacterIterator(session, rng.start, False, rng.end, character_options)


def trim_boundary(session: Session, rng: Range, is_start: bool,
                  character_options: CharacterOptions | None = None) -> bool:
    """Pull one boundary inward past whitespace; True if it moved."""
    character_options = character_options or CharacterOptions()
    trimmed = 0
    with range_iterator(session, rng, character_options, backward=not is_start) as it:
        for char in it:
            if not ALL_WHITESPACE.match(char.text):
                break
            trimmed += 1
    if trimmed:
        move_boundary(session, rng, is_start, False, CHARACTER, trimmed if is_start else -trimmed,
                      MoveOptions(character_options=character_options))
    return trimmed > 0


def expand(session: Session, rng: Range, unit: str = CHARACTER,
           options: ExpandOptions | None = None, **overrides) -> bool:
    """Grow the range to whole units; True if either boundary moved."""
    options = merge_options(options, ExpandOptions(), **overrides)
    character_options = options.character_options or CharacterOptions()

    if unit == CHARACTER:
        moved = move_boundary(session, rng, False, False, CHARACTER, 1,
                              MoveOptions(character_options=character_options))
        return moved != 0
    if unit != WORD:
        raise UnsupportedUnitError(unit)

    word_options = options.word_options or session.defaults.word_options
    start, end = rng.start, rng.end

    with TokenizedTextProvider(session, start, character_options, word_options) as provider:
        start_token = provider.next_end_token()
    if start_token is None:
        return False
    new_start = session.previous_visible(start_token.characters[0].position) or start

    if rng.collapsed:
        end_token = start_token
    else:
        with TokenizedTextProvider(session, end, character_options, word_options) as provider:
            end_token = provider.previous_start_token()
    new_end = end_token.characters[-1].position if end_token is not None else end

    moved = False
    if new_start != start:
        rng.set_start(new_start)
        moved = True
    if new_end != end:
        rng.set_end(new_end)
        moved = True

    if options.trim:
        if options.trim_start:
            moved = trim_boundary(session, rng, True, character_options) or moved
        if options.trim_end:
            moved = trim_boundary(session, rng, False, character_options) or moved

    return moved


def text(session: Session, rng: Range, character_options: CharacterOptions | None = None) -> str:
    """Visible text between the boundaries."""
    if rng.collapsed:
        return ""
    with range_iterator(session, rng, character_options) as it:
        return "".join(char.text for char in it)


def select_characters(session: Session, rng: Range, container: Node, start_index: int, end_index: int,
                      character_options: CharacterOptions | None = None):
    """Select characters [start_index, end_index) of container's visible text."""
    options = MoveOptions(character_options=character_options)
    rng.select_node_contents(container)
    rng.collapse(True)
    move_boundary(session, rng, True, False, CHARACTER, start_index, options)
    rng.collapse(True)
    move_boundary(session, rng, False, False, CHARACTER, end_index - start_index, options)


def to_character_range(session: Session, rng: Range, container: Node | None = None,
                       character_options: CharacterOptions | None = None) -> CharacterRange:
    """Offsets of rng's boundaries in container's visible text."""
    if container is None:
        container = rng.start.node.root()
    parent = container.parent
    boundary = Position(parent, container.index) if parent is not None else Position(container, 0)

    between = rng.clone()
    if compare_points(rng.start.node, rng.start.offset, boundary.node, boundary.offset) < 0:
        between.set_start_and_end(rng.start, boundary)
        start_index = -len(text(session, between, character_options))
    else:
        between.set_start_and_end(boundary, rng.start)
        start_index = len(text(session, between, character_options))
    end_index = start_index + len(text(session, rng, character_options))
    return CharacterRange(start_index, end_index)


def paste_html(session: Session, rng: Range, markup: str):
    """Replace the range's content with parsed markup and collapse after it."""
    rng.delete_contents()
    session.invalidate()
    if not markup:
        return
    parsed = parse_fragment(markup)
    last = parsed.last_child
    if last is None:
        return
    rng.insert_node(parsed)
    rng.collapse_after(last)
    session.invalidate()
