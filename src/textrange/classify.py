"""
Visibility and whitespace classification.

Decides which nodes contribute no visible text: hidden subtrees, comments,
processing instructions, script/style, visibility:hidden text and whitespace
text nodes that layout collapses away.

The whitespace-node rules follow Aryeh Gregor's editing/innerText drafts: a
whitespace-only text node is collapsed when a block boundary or <br> is
reached, walking away from it in either direction, before any real text.
"""

from __future__ import annotations

import re

from .config import LayoutConfig
from .dom import DOCUMENT, ELEMENT, FRAGMENT, PROCESSING_INSTRUCTION, COMMENT, TEXT, Node
from .style import DISPLAY, VISIBILITY, WHITE_SPACE, StyleOracle

NON_BLOCK_DISPLAY = re.compile(r"^(inline(-block|-table)?|none)$")
COLLAPSING_WHITESPACE_TEXT = re.compile(r"^[\t\n\r ]+$")
PRE_LINE_WHITESPACE_TEXT = re.compile(r"^[\t\r ]+$")

# Display values to report for table parts when the oracle says "block"
TABLE_DISPLAY_FALLBACK = {
    "table": "table",
    "caption": "table-caption",
    "colgroup": "table-column-group",
    "col": "table-column",
    "thead": "table-header-group",
    "tbody": "table-row-group",
    "tfoot": "table-footer-group",
    "tr": "table-row",
    "td": "table-cell",
    "th": "table-cell",
}


def next_node(node: Node, exclude_children: bool = False) -> Node | None:
    """Node after this one in tree order."""
    if not exclude_children and node.children:
        return node.children[0]
    while node is not None and node.next_sibling is None:
        node = node.parent
    return node.next_sibling if node is not None else None


def previous_node(node: Node) -> Node | None:
    """Node before this one in tree order, stopping at non-element parents."""
    previous = node.previous_sibling
    if previous is not None:
        while previous.children:
            previous = previous.children[-1]
        return previous
    parent = node.parent
    if parent is not None and parent.type == ELEMENT:
        return parent
    return None


class Classifier:
    """Stateless node classification backed by a style oracle."""

    def __init__(self, oracle: StyleOracle, layout: LayoutConfig):
        self.oracle = oracle
        self.layout = layout

    def computed_display(self, el: Node) -> str:
        display = self.oracle.computed_style(el, DISPLAY)
        if display == "block" and self.layout.table_display_is_block:
            return TABLE_DISPLAY_FALLBACK.get(el.tag or "", display)
        return display

    def white_space(self, node: Node) -> str:
        """white-space of the element a text node lives in."""
        parent = node.parent
        if parent is None or parent.type != ELEMENT:
            return "normal"
        return self.oracle.computed_style(parent, WHITE_SPACE)

    def is_block_node(self, node: Node | None) -> bool:
        if node is None:
            return False
        if node.type in (DOCUMENT, FRAGMENT):
            return True
        return node.type == ELEMENT and not NON_BLOCK_DISPLAY.match(self.computed_display(node))

    def is_hidden(self, node: Node) -> bool:
        """True if the node or any ancestor has display:none."""
        for ancestor in node.ancestors() + [node]:
            if ancestor.type == ELEMENT and self.computed_display(ancestor) == "none":
                return True
        return False

    def is_visibility_hidden_text_node(self, node: Node) -> bool:
        parent = node.parent
        return (node.type == TEXT and parent is not None and parent.type == ELEMENT
                and self.oracle.computed_style(parent, VISIBILITY) == "hidden")

    def is_whitespace_text_node(self, node: Node | None) -> bool:
        if node is None or node.type != TEXT:
            return False
        if node.content == "":
            return True
        parent = node.parent
        if parent is None or parent.type != ELEMENT:
            return False
        white_space = self.white_space(node)
        return bool(
            (COLLAPSING_WHITESPACE_TEXT.match(node.content) and white_space in ("normal", "nowrap"))
            or (PRE_LINE_WHITESPACE_TEXT.match(node.content) and white_space == "pre-line")
        )

    def is_collapsed_whitespace_node(self, node: Node) -> bool:
        if node.content == "":
            return True
        if not self.is_whitespace_text_node(node):
            return False
        ancestor = node.parent
        if ancestor is None:
            return True
        if self.is_hidden(node):
            return True

        while not self.is_block_node(ancestor) and ancestor.parent is not None:
            ancestor = ancestor.parent

        # Backward scan, bounded by the containing block
        reference: Node | None = node
        while reference is not None and reference is not ancestor:
            reference = previous_node(reference)
            if reference is None:
                break
            if self.is_block_node(reference) or _is_tag(reference, "br"):
                return True
            if (reference.type == TEXT and not self.is_whitespace_text_node(reference)) or _is_tag(reference, "img"):
                break

        # Forward scan, bounded by the end of the containing block
        reference = node
        stop = next_node(ancestor, exclude_children=True)
        while reference is not None and reference is not stop:
            reference = next_node(reference)
            if reference is None:
                break
            if self.is_block_node(reference) or _is_tag(reference, "br"):
                return True
            if (reference.type == TEXT and not self.is_whitespace_text_node(reference)) or _is_tag(reference, "img"):
                break

        return False

    def is_collapsed_node(self, node: Node) -> bool:
        """True if the node contributes no visible text at all."""
        return (
            node.type in (PROCESSING_INSTRUCTION, COMMENT)
            or self.is_hidden(node)
            or (node.type == ELEMENT and node.tag in ("script", "style"))
            or self.is_visibility_hidden_text_node(node)
            or (node.type == TEXT and self.is_collapsed_whitespace_node(node))
        )

    def is_ignored_node(self, node: Node) -> bool:
        """Nodes skipped when looking for an inline element's last child."""
        return (
            node.type in (PROCESSING_INSTRUCTION, COMMENT)
            or (node.type == ELEMENT and self.computed_display(node) == "none")
        )


def _is_tag(node: Node, tag: str) -> bool:
    return node.type == ELEMENT and node.tag == tag
