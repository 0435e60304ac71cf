"""
Character iterator.

Walks visible positions from a start position, forward or backward, and
yields materialized characters, skipping empty ones. Going forward the
characters ending at positions in (start, end] are delivered; going backward
those ending at positions in (end, start].

The iterator can hand back its most recent character once via rewind(), which
the word provider uses to put back the first character of the next word.
"""

from __future__ import annotations

from enum import Enum

from .characters import Character, materialize
from .dom import compare_points
from .errors import ProtocolMisuseError
from .options import CharacterOptions
from .positions import Position
from .session import Session


class IteratorState(Enum):
    FRESH = "fresh"
    DELIVERED = "delivered"
    REWOUND = "rewound"
    DISPOSED = "disposed"


class CharacterIterator:
    """Rewindable, disposable sequence of visible characters."""

    def __init__(self, session: Session, start: Position, backward: bool = False,
                 end: Position | None = None, options: CharacterOptions | None = None):
        self.session = session
        self.backward = backward
        self.options = options or CharacterOptions()
        self.state = IteratorState.FRESH

        # Positions inside a collapsed subtree are never visited
        start = self._outside_collapsed(start, after=False)
        if end is not None:
            end = self._outside_collapsed(end, after=backward)
        self.end = end

        self._pos: Position | None = start
        self._finished = False
        self._last: Character | None = None

        if end is not None:
            order = compare_points(start.node, start.offset, end.node, end.offset)
            self._finished = order <= 0 if backward else order >= 0

    def _outside_collapsed(self, pos: Position, after: bool) -> Position:
        """pos, or the boundary just before (or after) its outermost collapsed ancestor."""
        for node in pos.node.ancestors() + [pos.node]:
            parent = node.parent
            if parent is not None and self.session.is_collapsed_node(node):
                return self.session.position(parent, node.index + 1 if after else node.index)
        return pos

    def _step(self) -> Character | None:
        if self._finished:
            return None
        pos = self._pos
        if not self.backward:
            pos = self.session.next_visible(pos)
        if pos is None:
            self._finished = True
            return None
        if self.end is not None and pos == self.end:
            self._finished = True
            if self.backward:
                return None
        char = materialize(self.session, pos, self.options)
        if self.backward:
            pos = self.session.previous_visible(pos)
        self._pos = pos
        return char

    def next(self) -> Character | None:
        """Next non-empty character, or None when exhausted."""
        if self.state is IteratorState.DISPOSED:
            raise ProtocolMisuseError("Character iterator used after dispose()")
        if self.state is IteratorState.REWOUND:
            self.state = IteratorState.DELIVERED
            return self._last
        while True:
            char = self._step()
            if char is None:
                return None
            if char.text:
                self._last = char
                self.state = IteratorState.DELIVERED
                return char

    def rewind(self):
        """Deliver the most recent character again on the next call to next()."""
        if self.state is not IteratorState.DELIVERED:
            raise ProtocolMisuseError(f"Cannot rewind a {self.state.value} character iterator")
        self.state = IteratorState.REWOUND

    def dispose(self):
        self._pos = self.end = self._last = None
        self._finished = True
        self.state = IteratorState.DISPOSED

    def __iter__(self):
        while True:
            char = self.next()
            if char is None:
                return
            yield char

    def __enter__(self) -> CharacterIterator:
        return self

    def __exit__(self, exc_type, exc, tb):
        self.dispose()
