"""Typed intermediate XML tree.

``xml.etree.ElementTree`` elements are converted into frozen
``XmlNode`` values (tag, attributes, ordered children, trimmed text)
so that codecs query documents through two small helpers:
``find_child`` for singular elements (first match wins) and
``find_children`` for repeated ones.
"""
from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

from fcaio.formats.errors import MalformedInputError


@dataclass(frozen=True, slots=True)
class XmlNode:
    """One element of a parsed XML document.

    Parameters
    ----------
    tag:
        Element name.
    attrs:
        Element attributes.
    children:
        Child elements in document order.
    text:
        Element text with surrounding whitespace removed.
    """

    tag: str
    attrs: dict[str, str] = field(default_factory=dict, hash=False)
    children: tuple["XmlNode", ...] = ()
    text: str = ""

    def find_child(self, tag: str) -> "XmlNode | None":
        """Return the first child named ``tag``, or ``None``."""
        for child in self.children:
            if child.tag == tag:
                return child
        return None

    def find_children(self, tag: str) -> list["XmlNode"]:
        """Return every child named ``tag`` in document order."""
        return [child for child in self.children if child.tag == tag]

    def get(self, name: str, default: str | None = None) -> str | None:
        """Return the value of attribute ``name``."""
        return self.attrs.get(name, default)


def from_element(element: ET.Element) -> XmlNode:
    """Convert an ElementTree element (recursively) into an ``XmlNode``."""
    return XmlNode(
        tag=element.tag,
        attrs=dict(element.attrib),
        children=tuple(from_element(child) for child in element),
        text=(element.text or "").strip(),
    )


def to_element(node: XmlNode) -> ET.Element:
    """Convert an ``XmlNode`` (recursively) into an ElementTree element."""
    element = ET.Element(node.tag, node.attrs)
    if node.text:
        element.text = node.text
    for child in node.children:
        element.append(to_element(child))
    return element


def parse_xml(text: str) -> XmlNode:
    """Parse a complete XML document into its root ``XmlNode``.

    Raises
    ------
    MalformedInputError
        If ``text`` is not well-formed XML.
    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError as exc:
        line, _col = exc.position
        raise MalformedInputError(f"invalid XML: {exc}", line=line) from exc
    return from_element(root)


def serialize_xml(node: XmlNode, indent: str = "  ") -> str:
    """Serialize ``node`` as an XML document with a declaration.

    The result ends with a newline.
    """
    element = to_element(node)
    ET.indent(element, space=indent)
    body = ET.tostring(element, encoding="unicode")
    return f'<?xml version="1.0" encoding="UTF-8"?>\n{body}\n'
