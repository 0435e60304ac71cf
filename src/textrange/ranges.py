"""
Ranges over the host tree.

Range holds two boundary points with start <= end in document order and the
DOM-style primitives on them (set/collapse/select/compare, delete_contents,
insert_node). The text operations (move, expand, trim, text, find...) are
thin wrappers that open an engine session and delegate to operations/find.

CharacterRange is the plain-text counterpart: offsets into the visible text
of a container node.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .dom import Node, compare_points
from .options import CHARACTER, CharacterOptions, ExpandOptions, FindOptions, MoveOptions
from .positions import Position

if TYPE_CHECKING:
    import re

    from .engine import TextEngine


@dataclass(frozen=True)
class CharacterRange:
    """Offsets into a container's visible text. start may be negative."""
    start: int
    end: int

    def intersects(self, other: CharacterRange) -> bool:
        return self.start < other.end and other.start < self.end

    def union(self, other: CharacterRange) -> CharacterRange:
        return CharacterRange(min(self.start, other.start), max(self.end, other.end))

    def __str__(self) -> str:
        return f"[{self.start}, {self.end}]"


class Range:
    """A pair of boundary points bound to a TextEngine."""

    def __init__(self, engine: TextEngine, start: Position, end: Position | None = None):
        self.engine = engine
        self.start = start
        self.end = end if end is not None else start

    def __repr__(self) -> str:
        return f"Range({self.start!r}, {self.end!r})"

    # Boundary primitives

    @property
    def start_container(self) -> Node:
        return self.start.node

    @property
    def start_offset(self) -> int:
        return self.start.offset

    @property
    def end_container(self) -> Node:
        return self.end.node

    @property
    def end_offset(self) -> int:
        return self.end.offset

    @property
    def collapsed(self) -> bool:
        return self.start == self.end

    def set_start(self, node: Node | Position, offset: int | None = None):
        """Move the start; an end that ends up before it collapses onto it."""
        pos = _as_position(node, offset)
        if pos.node.root() is not self.end.node.root() or _compare(pos, self.end) > 0:
            self.end = pos
        self.start = pos

    def set_end(self, node: Node | Position, offset: int | None = None):
        """Move the end; a start that ends up after it collapses onto it."""
        pos = _as_position(node, offset)
        if pos.node.root() is not self.start.node.root() or _compare(pos, self.start) < 0:
            self.start = pos
        self.end = pos

    def set_start_and_end(self, start: Position, end: Position):
        self.start = start
        self.end = end
        if _compare(start, end) > 0:
            self.end = start

    def collapse(self, to_start: bool = True):
        if to_start:
            self.end = self.start
        else:
            self.start = self.end

    def select_node_contents(self, node: Node):
        self.start = Position(node, 0)
        self.end = Position(node, node.length)

    def select_node(self, node: Node):
        parent = node.parent
        if parent is None:
            raise ValueError(f"Cannot select parentless node {node.describe()}")
        self.start = Position(parent, node.index)
        self.end = Position(parent, node.index + 1)

    def collapse_before(self, node: Node):
        parent = node.parent
        if parent is None:
            raise ValueError(f"Cannot collapse before parentless node {node.describe()}")
        self.start = self.end = Position(parent, node.index)

    def collapse_after(self, node: Node):
        parent = node.parent
        if parent is None:
            raise ValueError(f"Cannot collapse after parentless node {node.describe()}")
        self.start = self.end = Position(parent, node.index + 1)

    def clone(self) -> Range:
        return Range(self.engine, self.start, self.end)

    def compare_point(self, node: Node | Position, offset: int | None = None) -> int:
        """-1 if the point is before the range, 1 if after, 0 if inside."""
        pos = _as_position(node, offset)
        if _compare(pos, self.start) < 0:
            return -1
        if _compare(pos, self.end) > 0:
            return 1
        return 0

    def contains_node(self, node: Node) -> bool:
        """True if the whole node lies within the range."""
        parent = node.parent
        if parent is None:
            return False
        index = node.index
        return (compare_points(parent, index, self.start.node, self.start.offset) >= 0
                and compare_points(parent, index + 1, self.end.node, self.end.offset) <= 0)

    def detach(self):
        """Ranges hold no live resources; kept for API symmetry with DOM ranges."""

    # Tree mutation

    def delete_contents(self):
        """Remove the range's content and collapse to where it was."""
        if self.collapsed:
            return
        sc, so = self.start.node, self.start.offset
        ec, eo = self.end.node, self.end.offset

        if sc is ec and sc.is_character_data:
            sc.content = sc.content[:so] + sc.content[eo:]
            self.end = self.start
            return

        if sc.contains(ec):
            new_start = Position(sc, so)
        else:
            reference = sc
            while reference.parent is not None and not reference.parent.contains(ec):
                reference = reference.parent
            new_start = Position(reference.parent, reference.index + 1)

        contained = [
            node for node in sc.root().depth_first()
            if self.contains_node(node) and not self.contains_node(node.parent)
        ]
        if sc.is_character_data:
            sc.content = sc.content[:so]
        if ec.is_character_data:
            ec.content = ec.content[eo:]
        for node in contained:
            node.parent.remove_child(node)

        self.start = self.end = new_start

    def insert_node(self, node: Node):
        """Insert node (or a fragment's children) at the start boundary."""
        sc, so = self.start.node, self.start.offset
        if sc.is_text:
            parent = sc.parent
            if parent is None:
                raise ValueError("Cannot insert into a parentless text node")
            reference = sc.split_text(so)
        elif sc.is_character_data:
            raise ValueError(f"Cannot insert into a {sc.type} node")
        else:
            parent = sc
            reference = sc.children[so] if so < len(sc.children) else None
        was_collapsed = self.collapsed
        parent.insert_before(node, reference)
        if was_collapsed:
            offset = reference.index if reference is not None else len(parent.children)
            self.end = Position(parent, offset)

    # Text operations

    def move_start(self, unit: str | int = CHARACTER, count: int | None = None,
                   options: MoveOptions | None = None, **overrides) -> int:
        from . import operations
        with self.engine.session() as session:
            return operations.move_boundary(session, self, True, False, unit, count, options, **overrides)

    def move_end(self, unit: str | int = CHARACTER, count: int | None = None,
                 options: MoveOptions | None = None, **overrides) -> int:
        from . import operations
        with self.engine.session() as session:
            return operations.move_boundary(session, self, False, False, unit, count, options, **overrides)

    def move(self, unit: str | int = CHARACTER, count: int | None = None,
             options: MoveOptions | None = None, **overrides) -> int:
        """Collapse, then move the collapsed range by count units."""
        from . import operations
        with self.engine.session() as session:
            return operations.move_boundary(session, self, True, True, unit, count, options, **overrides)

    def trim_start(self, character_options: CharacterOptions | None = None) -> bool:
        from . import operations
        with self.engine.session() as session:
            return operations.trim_boundary(session, self, True, character_options)

    def trim_end(self, character_options: CharacterOptions | None = None) -> bool:
        from . import operations
        with self.engine.session() as session:
            return operations.trim_boundary(session, self, False, character_options)

    def trim(self, character_options: CharacterOptions | None = None) -> bool:
        start_trimmed = self.trim_start(character_options)
        end_trimmed = self.trim_end(character_options)
        return start_trimmed or end_trimmed

    def expand(self, unit: str = CHARACTER, options: ExpandOptions | None = None, **overrides) -> bool:
        from . import operations
        with self.engine.session() as session:
            return operations.expand(session, self, unit, options, **overrides)

    def text(self, character_options: CharacterOptions | None = None) -> str:
        from . import operations
        with self.engine.session() as session:
            return operations.text(session, self, character_options)

    def select_characters(self, container: Node, start_index: int, end_index: int,
                          character_options: CharacterOptions | None = None):
        from . import operations
        with self.engine.session() as session:
            operations.select_characters(session, self, container, start_index, end_index, character_options)

    def to_character_range(self, container: Node | None = None,
                           character_options: CharacterOptions | None = None) -> CharacterRange:
        from . import operations
        with self.engine.session() as session:
            return operations.to_character_range(session, self, container, character_options)

    def find_text(self, term: str | re.Pattern, options: FindOptions | None = None, **overrides) -> bool:
        """Search for term and select the match. Returns False when nothing matched."""
        from . import find
        with self.engine.session() as session:
            return find.find_text(session, self, term, options, **overrides)

    def paste_html(self, markup: str):
        from . import operations
        with self.engine.session() as session:
            operations.paste_html(session, self, markup)


def _as_position(node: Node | Position, offset: int | None) -> Position:
    if isinstance(node, Position):
        return node
    if offset is None:
        raise TypeError("offset is required when passing a node")
    return Position(node, offset)


def _compare(a: Position, b: Position) -> int:
    return compare_points(a.node, a.offset, b.node, b.offset)
