"""
Markup to Node trees, via lxml.html.

lxml stores text as .text/.tail strings on elements; here they become text
nodes in document order. Comments and processing instructions are kept so the
classifier can skip them like a browser does.
"""

from __future__ import annotations

import logging

from lxml import etree
from lxml import html as lxml_html

from .dom import ELEMENT, PROCESSING_INSTRUCTION, Node, comment, document, element, fragment, text

logger = logging.getLogger(__name__)


def _convert(el) -> Node | None:
    if el.tag is etree.Comment:
        return comment(el.text or "")
    if el.tag is etree.PI:
        return Node(type=PROCESSING_INSTRUCTION, content=el.text or "")
    if not isinstance(el.tag, str):
        # Unresolved entity references
        return text(el.text) if el.text else None

    node = Node(type=ELEMENT, tag=el.tag, attributes=dict(el.attrib))
    if el.text:
        node.add_child(text(el.text))
    for child in el:
        converted = _convert(child)
        if converted is not None:
            node.add_child(converted)
        if child.tail:
            node.add_child(text(child.tail))
    return node


def _convert_children(container) -> list[Node]:
    nodes: list[Node] = []
    if container.text:
        nodes.append(text(container.text))
    for child in container:
        converted = _convert(child)
        if converted is not None:
            nodes.append(converted)
        if child.tail:
            nodes.append(text(child.tail))
    return nodes


def parse_fragment(markup: str) -> Node:
    """Parse markup into a fragment node holding the top-level nodes."""
    if not markup or not markup.strip():
        return fragment(*([text(markup)] if markup else []))
    container = lxml_html.fragment_fromstring(markup, create_parent="div")
    return fragment(*_convert_children(container))


def parse_html(markup: str) -> Node:
    """
    Parse markup into a document node.

    Full documents (with an <html> tag) are parsed as such; anything else is
    treated as body content and wrapped in html/head/body.
    """
    if "<html" in markup.lower():
        root = lxml_html.document_fromstring(markup)
        converted = _convert(root)
        logger.debug("Parsed full document, root %s", converted.describe())
        return document(converted)
    body = element("body", *parse_fragment(markup).children)
    return document(element("html", element("head"), body))
