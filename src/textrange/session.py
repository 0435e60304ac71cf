"""
Session cache.

One Session lives for one batch of engine calls. It keeps a side table from
node identity to a NodeWrapper of derived facts (collapsed, display, text
whitespace mode, leading/trailing space), interned positions, and memoized
position moves and characters. Nothing is stored on the tree itself, and
nothing survives detach(), since the tree may change between batches.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .classify import Classifier
from .config import LayoutConfig
from .dom import Node
from .positions import Position, next_visible_position, previous_visible_position

if TYPE_CHECKING:
    from .engine import EngineDefaults

logger = logging.getLogger(__name__)


@dataclass
class TextNodeInfo:
    """How a text node's parent treats whitespace."""
    collapse_spaces: bool
    pre_line: bool


@dataclass
class NodeWrapper:
    """Derived facts about one node, computed on first use."""
    node: Node
    memo: dict[str, Any] = field(default_factory=dict)


class Session:
    """Per-batch cache over a classifier."""

    def __init__(self, classifier: Classifier, defaults: EngineDefaults):
        self.classifier = classifier
        self.defaults = defaults
        self.layout: LayoutConfig = classifier.layout
        self.cache: dict[Any, Any] = {}
        self._wrappers: dict[int, NodeWrapper] = {}
        self._positions: dict[tuple[int, int], Position] = {}
        self.detached = False

    def wrapper(self, node: Node) -> NodeWrapper:
        wrapped = self._wrappers.get(id(node))
        if wrapped is None:
            # Wrapper holds a strong reference, so ids stay unique while cached
            wrapped = self._wrappers[id(node)] = NodeWrapper(node)
        return wrapped

    def memoize(self, node: Node, key: str, compute: Callable[[], Any]) -> Any:
        memo = self.wrapper(node).memo
        if key not in memo:
            memo[key] = compute()
        return memo[key]

    def position(self, node: Node, offset: int) -> Position:
        """Interned Position for (node, offset)."""
        key = (id(node), offset)
        pos = self._positions.get(key)
        if pos is None:
            self.wrapper(node)
            pos = self._positions[key] = Position(node, offset)
        return pos

    def intern(self, pos: Position | None) -> Position | None:
        return None if pos is None else self.position(pos.node, pos.offset)

    # Classification, memoized per node

    def is_collapsed_node(self, node: Node) -> bool:
        return self.memoize(node, "collapsed", lambda: self.classifier.is_collapsed_node(node))

    def is_ignored_node(self, node: Node) -> bool:
        return self.memoize(node, "ignored", lambda: self.classifier.is_ignored_node(node))

    def computed_display(self, node: Node) -> str:
        return self.memoize(node, "display", lambda: self.classifier.computed_display(node))

    def has_inner_text(self, node: Node) -> bool:
        """True if the node holds a text node that is not collapsed."""
        def compute() -> bool:
            if self.is_collapsed_node(node):
                return False
            if node.is_text:
                return True
            return any(self.has_inner_text(child) for child in node.children)
        return self.memoize(node, "has_inner_text", compute)

    def text_info(self, node: Node) -> TextNodeInfo:
        def compute() -> TextNodeInfo:
            white_space = self.classifier.white_space(node)
            if white_space == "pre-line":
                return TextNodeInfo(collapse_spaces=True, pre_line=True)
            return TextNodeInfo(collapse_spaces=white_space in ("normal", "nowrap"), pre_line=False)
        return self.memoize(node, "text_info", compute)

    # Position moves, memoized per position

    def next_visible(self, pos: Position) -> Position | None:
        key = ("next", pos)
        if key not in self.cache:
            self.cache[key] = self.intern(next_visible_position(pos, self))
        return self.cache[key]

    def previous_visible(self, pos: Position) -> Position | None:
        key = ("previous", pos)
        if key not in self.cache:
            self.cache[key] = self.intern(previous_visible_position(pos, self))
        return self.cache[key]

    def invalidate(self):
        """Drop everything derived from the tree, after the tree was mutated."""
        self.cache.clear()
        self._wrappers.clear()
        self._positions.clear()

    def detach(self):
        logger.debug("Detaching session: %d nodes, %d cached entries", len(self._wrappers), len(self.cache))
        self.invalidate()
        self.detached = True
