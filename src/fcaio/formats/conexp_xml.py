"""Conexp-XML context format.

The document shape is::

    <?xml version="1.0" encoding="UTF-8"?>
    <ConceptualSystem>
      <Version MajorNumber="1" MinorNumber="0" />
      <Contexts>
        <Context Identifier="0" Type="Binary">
          <Attributes>
            <Attribute Identifier="0">
              <Name>m1</Name>
            </Attribute>
          </Attributes>
          <Objects>
            <Object>
              <Name>g1</Name>
              <Intent>
                <HasAttribute AttributeIdentifier="0" />
              </Intent>
            </Object>
          </Objects>
        </Context>
      </Contexts>
    </ConceptualSystem>

Objects refer to their attributes through identifiers, so reading
builds an identifier -> name map first and resolves every
``HasAttribute`` through it.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from typing import TextIO

from fcaio.context.model import Context
from fcaio.formats.errors import AmbiguousDocumentError, MalformedInputError
from fcaio.formats.registry import ContextCodec, default_registry
from fcaio.formats.xmltree import XmlNode, parse_xml, serialize_xml

logger = logging.getLogger(__name__)

_XML_DECLARATION = re.compile(r"\s*<\?\s*xml.*\?>.*")
_CONCEPTUAL_SYSTEM = re.compile(r".*<ConceptualSystem(\s[^>]*)?>.*")
# Characters XML 1.0 cannot carry, plus carriage returns, which parsers fold into newlines.
_UNWRITABLE = re.compile("[^\t\n\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


def _require_child(node: XmlNode, tag: str) -> XmlNode:
    child = node.find_child(tag)
    if child is None:
        raise MalformedInputError(f"<{node.tag}> element has no <{tag}> child")
    return child


def _require_attr(node: XmlNode, name: str) -> str:
    value = node.get(name)
    if value is None:
        raise MalformedInputError(f"<{node.tag}> element has no {name!r} attribute")
    return value


def _name_of(node: XmlNode) -> str:
    return _require_child(node, "Name").text


def _check_writable(kind: str, name: str) -> None:
    if _UNWRITABLE.search(name):
        raise ValueError(f"{kind} name {name!r} contains characters XML cannot represent")
    if name != name.strip():
        raise ValueError(f"{kind} name {name!r} has leading or trailing whitespace")


@default_registry.codec("conexp-xml")
class ConexpXmlCodec(ContextCodec):
    """Reader/writer for the ConExp ``ConceptualSystem`` XML format."""

    @staticmethod
    def detect(lines: Sequence[str]) -> bool:
        nonblank = [line for line in lines if line.strip()]
        if not nonblank or not _XML_DECLARATION.fullmatch(nonblank[0]):
            return False
        return any(_CONCEPTUAL_SYSTEM.fullmatch(line) for line in nonblank[:2])

    def read(self, lines: Iterable[str]) -> Context:
        lines = list(lines)
        # The declaration must open the document, so leading blank lines are dropped.
        skipped = 0
        while skipped < len(lines) and not lines[skipped].strip():
            skipped += 1
        try:
            root = parse_xml("\n".join(lines[skipped:]).lstrip())
        except MalformedInputError as exc:
            if exc.line is not None:
                exc.line += skipped
            raise
        if root.tag != "ConceptualSystem":
            raise MalformedInputError(f"expected <ConceptualSystem> root, found <{root.tag}>")

        contexts_node = root.find_child("Contexts")
        contexts = contexts_node.find_children("Context") if contexts_node is not None else []
        if not contexts:
            raise AmbiguousDocumentError("no context specified")
        if len(contexts) > 1:
            raise AmbiguousDocumentError("more than one context specified")
        context_node = contexts[0]

        names_by_id: dict[str, str] = {}
        for attribute in _require_child(context_node, "Attributes").find_children("Attribute"):
            names_by_id[_require_attr(attribute, "Identifier")] = _name_of(attribute)

        intents: dict[str, set[str]] = {}
        for obj in _require_child(context_node, "Objects").find_children("Object"):
            intent = intents.setdefault(_name_of(obj), set())
            intent_node = obj.find_child("Intent")
            if intent_node is None:
                continue
            for has_attribute in intent_node.find_children("HasAttribute"):
                identifier = _require_attr(has_attribute, "AttributeIdentifier")
                if identifier not in names_by_id:
                    raise MalformedInputError(
                        f"object refers to undeclared attribute identifier {identifier!r}"
                    )
                intent.add(identifier)

        logger.debug(
            "Read Conexp-XML context with %d object(s), %d attribute(s)",
            len(intents),
            len(names_by_id),
        )
        return Context(
            objects=list(intents),
            attributes=list(names_by_id.values()),
            incidence=frozenset(
                (obj, names_by_id[identifier])
                for obj, identifiers in intents.items()
                for identifier in identifiers
            ),
        )

    def write(self, context: Context, sink: TextIO) -> None:
        for obj in context.objects:
            _check_writable("object", obj)
        for att in context.attributes:
            _check_writable("attribute", att)
        identifiers = {att: str(index) for index, att in enumerate(context.attributes)}

        attributes = XmlNode(
            "Attributes",
            children=tuple(
                XmlNode(
                    "Attribute",
                    {"Identifier": identifiers[att]},
                    (XmlNode("Name", text=att),),
                )
                for att in context.attributes
            ),
        )
        objects = XmlNode(
            "Objects",
            children=tuple(self._object_node(context, obj, identifiers) for obj in context.objects),
        )
        document = XmlNode(
            "ConceptualSystem",
            children=(
                XmlNode("Version", {"MajorNumber": "1", "MinorNumber": "0"}),
                XmlNode(
                    "Contexts",
                    children=(
                        XmlNode(
                            "Context",
                            {"Identifier": "0", "Type": "Binary"},
                            (attributes, objects),
                        ),
                    ),
                ),
            ),
        )
        sink.write(serialize_xml(document))

    @staticmethod
    def _object_node(context: Context, obj: str, identifiers: dict[str, str]) -> XmlNode:
        derived = context.object_derivation({obj})
        intent = XmlNode(
            "Intent",
            children=tuple(
                XmlNode("HasAttribute", {"AttributeIdentifier": identifiers[att]})
                for att in context.attributes
                if att in derived
            ),
        )
        return XmlNode("Object", children=(XmlNode("Name", text=obj), intent))
