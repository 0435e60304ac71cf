"""
DOM - host tree for textrange

Minimal document tree the text engine walks. Every node owns its children;
the parent link is a weak reference so the tree has a single ownership edge
per node.

Key invariant: node equality is identity. Two text nodes with the same data
are different nodes and different positions.
"""

from __future__ import annotations

import weakref
from collections.abc import Iterator
from dataclasses import dataclass, field

ELEMENT = "element"
TEXT = "text"
COMMENT = "comment"
PROCESSING_INSTRUCTION = "processing-instruction"
DOCUMENT = "document"
FRAGMENT = "fragment"

CHARACTER_DATA_TYPES = frozenset((TEXT, COMMENT, PROCESSING_INSTRUCTION))


@dataclass(eq=False)
class Node:
    """A node in the document tree."""
    type: str = TEXT
    tag: str | None = None
    content: str = ""  # character data for text, comment and PI nodes
    attributes: dict[str, str] = field(default_factory=dict)
    children: list[Node] = field(default_factory=list)
    _parent: weakref.ReferenceType[Node] | None = field(default=None, repr=False)

    def __post_init__(self):
        if self.tag is not None:
            self.tag = self.tag.lower()
        for child in self.children:
            child._parent = weakref.ref(self)

    @property
    def parent(self) -> Node | None:
        return self._parent() if self._parent is not None else None

    @property
    def is_element(self) -> bool:
        return self.type == ELEMENT

    @property
    def is_text(self) -> bool:
        return self.type == TEXT

    @property
    def is_character_data(self) -> bool:
        return self.type in CHARACTER_DATA_TYPES

    @property
    def length(self) -> int:
        """Number of boundary offsets minus one: data length or child count."""
        if self.is_character_data:
            return len(self.content)
        return len(self.children)

    @property
    def index(self) -> int:
        """Position of this node among its parent's children (0 for roots)."""
        parent = self.parent
        if parent is None:
            return 0
        for i, child in enumerate(parent.children):
            if child is self:
                return i
        raise ValueError("Node is not among its parent's children")

    @property
    def first_child(self) -> Node | None:
        return self.children[0] if self.children else None

    @property
    def last_child(self) -> Node | None:
        return self.children[-1] if self.children else None

    @property
    def previous_sibling(self) -> Node | None:
        parent = self.parent
        if parent is None:
            return None
        i = self.index
        return parent.children[i - 1] if i > 0 else None

    @property
    def next_sibling(self) -> Node | None:
        parent = self.parent
        if parent is None:
            return None
        i = self.index
        return parent.children[i + 1] if i + 1 < len(parent.children) else None

    def get(self, name: str, default: str | None = None) -> str | None:
        """Attribute lookup."""
        return self.attributes.get(name, default)

    def ancestors(self) -> list[Node]:
        """Ancestors from the root down to the parent."""
        result: list[Node] = []
        node = self.parent
        while node is not None:
            result.append(node)
            node = node.parent
        result.reverse()
        return result

    def root(self) -> Node:
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    def contains(self, other: Node) -> bool:
        """True if other is this node or one of its descendants."""
        node: Node | None = other
        while node is not None:
            if node is self:
                return True
            node = node.parent
        return False

    def depth_first(self) -> Iterator[Node]:
        """Traverse tree depth-first, yielding self then children."""
        yield self
        for child in self.children:
            yield from child.depth_first()

    def breadth_first(self) -> Iterator[Node]:
        """Traverse tree breadth-first."""
        queue: list[Node] = [self]
        while queue:
            node = queue.pop(0)
            yield node
            queue.extend(node.children)

    def add_child(self, child: Node) -> Node:
        """Append a child node and return it for chaining."""
        return self.insert_before(child, None)

    def insert_before(self, child: Node, reference: Node | None) -> Node:
        """
        Insert child before reference (append when reference is None).

        Fragments are spliced: their children move into this node in order.
        """
        if child.type == FRAGMENT:
            for grandchild in list(child.children):
                self.insert_before(grandchild, reference)
            return child
        old_parent = child.parent
        if old_parent is not None:
            old_parent.remove_child(child)
        if reference is None:
            self.children.append(child)
        else:
            self.children.insert(reference.index, child)
        child._parent = weakref.ref(self)
        return child

    def remove_child(self, child: Node) -> Node:
        self.children.pop(child.index)
        child._parent = None
        return child

    def split_text(self, offset: int) -> Node:
        """Split a text node at offset; the tail becomes a new following sibling."""
        if not self.is_text:
            raise ValueError(f"split_text on a {self.type} node")
        tail = Node(type=TEXT, content=self.content[offset:])
        self.content = self.content[:offset]
        parent = self.parent
        if parent is not None:
            parent.insert_before(tail, self.next_sibling)
        return tail

    def describe(self) -> str:
        """Short human-readable label used in log messages and reprs."""
        if self.type == ELEMENT:
            return f"<{self.tag}>"
        if self.type == TEXT:
            preview = self.content if len(self.content) <= 20 else self.content[:17] + "..."
            return f"#text({preview!r})"
        return f"#{self.type}"


def text(content: str) -> Node:
    return Node(type=TEXT, content=content)


def comment(content: str) -> Node:
    return Node(type=COMMENT, content=content)


def element(tag: str, *children: Node | str, **attributes: str) -> Node:
    """
    Build an element. String children become text nodes; attribute names use
    underscores for hyphens (data_x -> data-x) and a trailing underscore to
    dodge keywords (class_ -> class).
    """
    attrs = {name.rstrip("_").replace("_", "-"): value for name, value in attributes.items()}
    nodes = [text(c) if isinstance(c, str) else c for c in children]
    return Node(type=ELEMENT, tag=tag, attributes=attrs, children=nodes)


def document(*children: Node | str) -> Node:
    nodes = [text(c) if isinstance(c, str) else c for c in children]
    return Node(type=DOCUMENT, children=nodes)


def fragment(*children: Node | str) -> Node:
    nodes = [text(c) if isinstance(c, str) else c for c in children]
    return Node(type=FRAGMENT, children=nodes)


def find_by_id(root: Node, node_id: str) -> Node | None:
    """Find an element by its id attribute."""
    for node in root.depth_first():
        if node.is_element and node.attributes.get("id") == node_id:
            return node
    return None


def find_all(root: Node, tag: str) -> list[Node]:
    """Collect all elements with the given tag in document order."""
    tag = tag.lower()
    return [node for node in root.depth_first() if node.is_element and node.tag == tag]


def _boundary_key(node: Node, offset: int) -> list[int]:
    # Child-index path from the root, then the offset. Lexicographic order of
    # these keys is document order of boundary points.
    path = [n.index for n in node.ancestors()[1:]]
    if node.parent is not None:
        path.append(node.index)
    path.append(offset)
    return path


def compare_points(node_a: Node, offset_a: int, node_b: Node, offset_b: int) -> int:
    """Compare two boundary points in document order: -1, 0 or 1."""
    if node_a is node_b:
        return (offset_a > offset_b) - (offset_a < offset_b)
    key_a = _boundary_key(node_a, offset_a)
    key_b = _boundary_key(node_b, offset_b)
    return (key_a > key_b) - (key_a < key_b)
