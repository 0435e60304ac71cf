"""
Find engine.

Searches the visible text character by character from a starting position,
in either direction, for a literal string or a compiled regex. Whole-word
searches discard matches that word expansion would widen; wrapping searches
retry once over the part of the scope before the starting point.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace

from .characters import Character
from .iterator import CharacterIterator
from .operations import expand
from .options import WORD, ExpandOptions, FindOptions, is_direction_backward, merge_options
from .positions import Position
from .ranges import Range
from .session import Session

logger = logging.getLogger(__name__)


@dataclass
class FindResult:
    start: Position
    end: Position
    valid: bool


def fold_case(text: str) -> str:
    """Lower-case one character at a time, keeping lengths unchanged."""
    folded = []
    for char in text:
        lower = char.lower()
        folded.append(lower if len(lower) == 1 else char)
    return "".join(folded)


def is_whole_word(session: Session, template: Range, start: Position, end: Position,
                  options: FindOptions) -> bool:
    """True if expanding [start, end] to words leaves it unchanged."""
    candidate = template.clone()
    candidate.set_start_and_end(start, end)
    expand_options = ExpandOptions(word_options=options.word_options,
                                   character_options=options.character_options)
    return not expand(session, candidate, WORD, expand_options)


def find_text_from_position(session: Session, initial: Position, term: str | re.Pattern,
                            scope: Range, options: FindOptions) -> FindResult | None:
    """First match reachable from initial within scope, or None."""
    backward = is_direction_backward(options.direction)
    is_pattern = isinstance(term, re.Pattern)
    text = ""
    chars: list[Character] = []
    span: tuple[int, int] | None = None
    inside_match = False

    def handle_match(start_index: int, end_index: int) -> FindResult:
        start_pos = session.previous_visible(chars[start_index].position) or chars[start_index].position
        end_pos = chars[end_index - 1].position
        valid = not options.whole_words_only or is_whole_word(session, scope, start_pos, end_pos, options)
        return FindResult(start_pos, end_pos, valid)

    far_end = scope.start if backward else scope.end
    with CharacterIterator(session, initial, backward, far_end, options.character_options) as it:
        for char in it:
            current = char.text
            if not is_pattern and not options.case_sensitive:
                current = fold_case(current)
            if backward:
                chars.insert(0, char)
                text = current + text
            else:
                chars.append(char)
                text += current

            if is_pattern:
                # Empty matches never select anything
                match = next((m for m in term.finditer(text) if m.end() > m.start()), None)
                if match:
                    span = match.span()
                    # Done once the match can no longer grow
                    if inside_match and ((not backward and span[1] < len(text)) or (backward and span[0] > 0)):
                        return handle_match(*span)
                    inside_match = True
            else:
                index = text.find(term)
                if index != -1:
                    return handle_match(index, index + len(term))

    if inside_match and span is not None:
        return handle_match(*span)
    return None


def find_text(session: Session, rng: Range, term: str | re.Pattern,
              options: FindOptions | None = None, **overrides) -> bool:
    """Select the next match of term in rng; returns False if there is none."""
    options = merge_options(options, session.defaults.find_options, **overrides)
    if options.whole_words_only:
        word_options = options.word_options or session.defaults.word_options
        # Matches never include trailing space
        options = replace(options, word_options=replace(word_options, include_trailing_space=False))

    backward = is_direction_backward(options.direction)

    scope = options.within_range
    if scope is None:
        scope = rng.clone()
        scope.select_node_contents(rng.start.node.root())

    if isinstance(term, str):
        if not term:
            return False
        if not options.case_sensitive:
            term = fold_case(term)

    initial = rng.end if backward else rng.start
    comparison = scope.compare_point(initial)
    if comparison < 0:
        initial = scope.start
    elif comparison > 0:
        initial = scope.end

    pos = initial
    wrapped = False
    while True:
        result = find_text_from_position(session, pos, term, scope, options)
        if result is not None:
            if result.valid:
                rng.set_start_and_end(result.start, result.end)
                return True
            # Not a whole word; keep looking past it
            pos = result.start if backward else result.end
        elif options.wrap and not wrapped:
            scope = scope.clone()
            if backward:
                pos = scope.end
                scope.set_start(initial)
            else:
                pos = scope.start
                scope.set_end(initial)
            logger.debug("Wrapping search for %r, new scope %r", term, scope)
            wrapped = True
        else:
            return False
