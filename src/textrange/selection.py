"""
Selection - an ordered set of ranges with a direction.

Text operations are broadcast to every range. Character ranges can be saved
relative to a container and restored later, e.g. around a re-render of that
container.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .dom import Node
from .options import CharacterOptions, ExpandOptions, MoveOptions, is_direction_backward
from .positions import Position
from .ranges import CharacterRange, Range

if TYPE_CHECKING:
    from .engine import TextEngine


@dataclass(frozen=True)
class SavedCharacterRange:
    range: CharacterRange
    backward: bool = False
    character_options: CharacterOptions | None = None


class Selection:
    """Multi-range selection bound to a TextEngine."""

    def __init__(self, engine: TextEngine):
        self.engine = engine
        self._ranges: list[Range] = []
        self._backward = False

    @property
    def range_count(self) -> int:
        return len(self._ranges)

    def get_range_at(self, index: int) -> Range:
        return self._ranges[index]

    def get_all_ranges(self) -> list[Range]:
        return list(self._ranges)

    def add_range(self, rng: Range, backward: bool = False):
        self._ranges.append(rng)
        # Direction is only meaningful for a single range
        self._backward = backward and len(self._ranges) == 1

    def remove_all_ranges(self):
        self._ranges = []
        self._backward = False

    def set_single_range(self, rng: Range, backward: bool = False):
        self.remove_all_ranges()
        self.add_range(rng, backward)

    def is_backward(self) -> bool:
        return self._backward

    @property
    def anchor(self) -> Position | None:
        if not self._ranges:
            return None
        rng = self._ranges[-1]
        return rng.end if self._backward else rng.start

    @property
    def focus(self) -> Position | None:
        if not self._ranges:
            return None
        rng = self._ranges[-1]
        return rng.start if self._backward else rng.end

    def collapse(self, pos: Position):
        self.set_single_range(Range(self.engine, pos))

    def expand(self, unit: str = "character", options: ExpandOptions | None = None, **overrides):
        with self.engine.session():
            for rng in self._ranges:
                rng.expand(unit, options, **overrides)

    def _trim_each(self, method: str, character_options: CharacterOptions | None) -> bool:
        trimmed = False
        with self.engine.session():
            for rng in self._ranges:
                trimmed = getattr(rng, method)(character_options) or trimmed
        return trimmed

    def trim_start(self, character_options: CharacterOptions | None = None) -> bool:
        return self._trim_each("trim_start", character_options)

    def trim_end(self, character_options: CharacterOptions | None = None) -> bool:
        return self._trim_each("trim_end", character_options)

    def trim(self, character_options: CharacterOptions | None = None) -> bool:
        return self._trim_each("trim", character_options)

    def move(self, unit: str | int = "character", count: int | None = None,
             options: MoveOptions | None = None, **overrides) -> int:
        """Collapse to the focus and move the caret; returns units moved."""
        focus = self.focus
        if focus is None:
            return 0
        self.collapse(focus)
        rng = self._ranges[0]
        moved = rng.move(unit, count, options, **overrides)
        self.set_single_range(rng)
        return moved

    def select_characters(self, container: Node, start_index: int, end_index: int,
                          direction: str = "forward", character_options: CharacterOptions | None = None):
        rng = self.engine.create_range(container)
        rng.select_characters(container, start_index, end_index, character_options)
        self.set_single_range(rng, is_direction_backward(direction))

    def save_character_ranges(self, container: Node,
                              character_options: CharacterOptions | None = None) -> list[SavedCharacterRange]:
        backward = self.range_count == 1 and self.is_backward()
        with self.engine.session():
            return [
                SavedCharacterRange(rng.to_character_range(container, character_options), backward, character_options)
                for rng in self._ranges
            ]

    def restore_character_ranges(self, container: Node, saved: list[SavedCharacterRange]):
        self.remove_all_ranges()
        with self.engine.session():
            for entry in saved:
                rng = self.engine.create_range(container)
                rng.select_characters(container, entry.range.start, entry.range.end, entry.character_options)
                self.add_range(rng, entry.backward)

    def text(self, character_options: CharacterOptions | None = None) -> str:
        with self.engine.session():
            return "".join(rng.text(character_options) for rng in self._ranges)
