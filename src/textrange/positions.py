"""
Position graph.

A Position is a DOM-style boundary point: (node, offset) means "before
child[offset]" in a container or "after the offset-th character" in character
data. The raw moves step through every boundary point in document order; the
visible moves skip whole collapsed subtrees instead of entering them.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Protocol

from .dom import Node

VOID_ELEMENTS = re.compile(r"^(area|base|basefont|br|col|frame|hr|img|input|isindex|link|meta|param)$", re.I)


class CollapseTest(Protocol):
    def is_collapsed_node(self, node: Node) -> bool: ...


@dataclass(frozen=True)
class Position:
    """Boundary point. Equal when the node is the same object and offsets match."""
    node: Node
    offset: int

    def __repr__(self) -> str:
        return f"Position({self.node.describe()}, {self.offset})"


def contains_positions(node: Node) -> bool:
    """Character data and non-void elements have boundary points inside them."""
    return node.is_character_data or not VOID_ELEMENTS.match(node.tag or "")


def next_position(pos: Position) -> Position | None:
    node, offset = pos.node, pos.offset
    if offset == node.length:
        parent = node.parent
        return Position(parent, node.index + 1) if parent is not None else None
    if node.is_character_data:
        return Position(node, offset + 1)
    child = node.children[offset]
    if contains_positions(child):
        return Position(child, 0)
    return Position(node, offset + 1)


def previous_position(pos: Position) -> Position | None:
    node, offset = pos.node, pos.offset
    if offset == 0:
        parent = node.parent
        return Position(parent, node.index) if parent is not None else None
    if node.is_character_data:
        return Position(node, offset - 1)
    child = node.children[offset - 1]
    if contains_positions(child):
        return Position(child, child.length)
    return Position(node, offset - 1)


def next_visible_position(pos: Position, classifier: CollapseTest) -> Position | None:
    """Like next_position, stepping over a collapsed node and all its descendants."""
    following = next_position(pos)
    if following is None:
        return None
    node = following.node
    if classifier.is_collapsed_node(node):
        parent = node.parent
        if parent is None:
            return None
        return Position(parent, node.index + 1)
    return following


def previous_visible_position(pos: Position, classifier: CollapseTest) -> Position | None:
    """Like previous_position, stepping over a collapsed node and all its descendants."""
    preceding = previous_position(pos)
    if preceding is None:
        return None
    node = preceding.node
    if classifier.is_collapsed_node(node):
        parent = node.parent
        if parent is None:
            return None
        return Position(parent, node.index)
    return preceding
