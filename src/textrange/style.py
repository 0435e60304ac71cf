"""
Style oracle interface and a default implementation.

The text engine never computes CSS itself. It asks an oracle for the resolved
value of three properties on an element: display, white-space and visibility.
DefaultStyleOracle answers from a small user-agent table plus inline
style="..." declarations, with white-space and visibility inherited.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod

from .dom import Node

DISPLAY = "display"
WHITE_SPACE = "white-space"
VISIBILITY = "visibility"

# User-agent display values; anything unlisted is inline.
UA_DISPLAY: dict[str, str] = {
    **dict.fromkeys(
        (
            "html", "body", "address", "article", "aside", "blockquote", "center",
            "dd", "details", "dialog", "dir", "div", "dl", "dt", "fieldset",
            "figcaption", "figure", "footer", "form", "frameset", "h1", "h2", "h3",
            "h4", "h5", "h6", "header", "hgroup", "hr", "legend", "listing", "main",
            "menu", "nav", "ol", "p", "plaintext", "pre", "section", "summary",
            "ul", "xmp",
        ),
        "block",
    ),
    **dict.fromkeys(
        (
            "area", "base", "basefont", "datalist", "head", "link", "meta",
            "noembed", "noframes", "param", "rp", "script", "style", "template",
            "title",
        ),
        "none",
    ),
    "li": "list-item",
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
    "button": "inline-block",
    "input": "inline-block",
    "select": "inline-block",
    "textarea": "inline-block",
}

UA_WHITE_SPACE: dict[str, str] = {
    "pre": "pre",
    "listing": "pre",
    "plaintext": "pre",
    "xmp": "pre",
    "textarea": "pre-wrap",
    "nobr": "nowrap",
}

INHERITED = {WHITE_SPACE: "normal", VISIBILITY: "visible"}

DECLARATION_PATTERN = re.compile(r"\s*([-a-zA-Z]+)\s*:\s*([^;]+?)\s*(?:;|$)")


def parse_inline_style(style: str | None) -> dict[str, str]:
    """Parse a style attribute into {property: value}; later declarations win."""
    if not style:
        return {}
    declarations = {}
    for match in DECLARATION_PATTERN.finditer(style):
        value = match.group(2).replace("!important", "").strip().lower()
        declarations[match.group(1).lower()] = value
    return declarations


class StyleOracle(ABC):
    """Reports computed style properties for elements."""

    @abstractmethod
    def computed_style(self, element: Node, prop: str) -> str:
        """
        Return the resolved value of prop ("display", "white-space" or
        "visibility") for an element node.
        """
        ...


class DefaultStyleOracle(StyleOracle):
    """User-agent defaults plus inline style attributes."""

    def computed_style(self, element: Node, prop: str) -> str:
        declared = parse_inline_style(element.get("style")).get(prop)
        if prop == DISPLAY:
            return declared or UA_DISPLAY.get(element.tag or "", "inline")
        if declared and declared != "inherit":
            return declared
        if prop == WHITE_SPACE and element.tag in UA_WHITE_SPACE:
            return UA_WHITE_SPACE[element.tag]
        if prop in INHERITED:
            parent = element.parent
            if parent is not None and parent.is_element:
                return self.computed_style(parent, prop)
            return INHERITED[prop]
        return ""
