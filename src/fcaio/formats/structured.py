"""JSON and YAML context formats.

Both formats share one plain dict representation::

    {
        "kind": "FormalContext",
        "objects": ["g1", "g2"],
        "attributes": ["m1", "m2"],
        "incidence": [["g1", "m1"]],
    }

The ``"kind"`` discriminator comes first in the serialized output so
that format detection can recognize a document from its leading lines.

Usage
-----
::

    from fcaio.formats.structured import ContextSerializer

    serializer = ContextSerializer()
    text = serializer.to_json(context)
    assert serializer.from_json(text) == context
"""
from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterable, Sequence
from typing import TextIO

import yaml

from fcaio.context.model import Context
from fcaio.formats.errors import MalformedInputError
from fcaio.formats.registry import ContextCodec, default_registry

logger = logging.getLogger(__name__)

KIND = "FormalContext"

_JSON_KIND = re.compile(r'"kind"\s*:\s*"FormalContext"')
_YAML_KIND = re.compile(r"kind:\s*['\"]?FormalContext['\"]?\s*")


class ContextSerializer:
    """Converts between ``Context`` values and plain Python dicts."""

    # ------------------------------------------------------------------
    # Serialization (Context → dict)
    # ------------------------------------------------------------------

    def to_dict(self, context: Context) -> dict[str, object]:
        """Serialize a ``Context`` to a JSON-compatible dict."""
        return {
            "kind": KIND,
            "objects": list(context.objects),
            "attributes": list(context.attributes),
            "incidence": [
                [obj, att] for obj in context.objects for att in context.intent_of(obj)
            ],
        }

    def to_json(self, context: Context, indent: int | None = 2) -> str:
        """Serialize a ``Context`` to a JSON string."""
        return json.dumps(self.to_dict(context), indent=indent, ensure_ascii=False)

    def to_yaml(self, context: Context) -> str:
        """Serialize a ``Context`` to a YAML document."""
        return yaml.safe_dump(
            self.to_dict(context),
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            explicit_start=True,
        )

    # ------------------------------------------------------------------
    # Deserialization (dict → Context)
    # ------------------------------------------------------------------

    def from_dict(self, data: object) -> Context:
        """Deserialize a dict produced by ``to_dict``.

        Raises
        ------
        MalformedInputError
            If the dict does not describe a valid formal context.
        """
        if not isinstance(data, dict):
            raise MalformedInputError(f"expected a mapping, found {type(data).__name__}")
        if data.get("kind") != KIND:
            raise MalformedInputError(f"expected kind {KIND!r}, found {data.get('kind')!r}")

        objects = self._names(data, "objects")
        attributes = self._names(data, "attributes")
        incidence = data.get("incidence", [])
        if not isinstance(incidence, list):
            raise MalformedInputError("'incidence' must be a list of pairs")
        pairs: set[tuple[str, str]] = set()
        for pair in incidence:
            if not (
                isinstance(pair, list)
                and len(pair) == 2
                and all(isinstance(name, str) for name in pair)
            ):
                raise MalformedInputError(f"incidence entry {pair!r} is not an [object, attribute] pair")
            pairs.add((pair[0], pair[1]))

        logger.debug(
            "Deserializing context with %d object(s), %d attribute(s)",
            len(objects),
            len(attributes),
        )
        try:
            return Context(objects=objects, attributes=attributes, incidence=frozenset(pairs))
        except ValueError as exc:
            raise MalformedInputError(str(exc)) from exc

    def from_json(self, text: str) -> Context:
        """Deserialize a JSON string."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise MalformedInputError(f"invalid JSON: {exc.msg}", line=exc.lineno) from exc
        return self.from_dict(data)

    def from_yaml(self, text: str) -> Context:
        """Deserialize a YAML document."""
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            mark = getattr(exc, "problem_mark", None)
            line = mark.line + 1 if mark is not None else None
            raise MalformedInputError(f"invalid YAML: {exc}", line=line) from exc
        return self.from_dict(data)

    @staticmethod
    def _names(data: dict[str, object], key: str) -> list[str]:
        if key not in data:
            raise MalformedInputError(f"missing required key {key!r}")
        names = data[key]
        if not isinstance(names, list) or not all(isinstance(name, str) for name in names):
            raise MalformedInputError(f"{key!r} must be a list of strings")
        return names


def _nonblank(lines: Sequence[str], count: int) -> list[str]:
    return [line for line in lines if line.strip()][:count]


@default_registry.codec("json")
class JsonCodec(ContextCodec):
    """Reader/writer for the JSON context format."""

    @staticmethod
    def detect(lines: Sequence[str]) -> bool:
        head = _nonblank(lines, 2)
        if not head or not head[0].lstrip().startswith("{"):
            return False
        return any(_JSON_KIND.search(line) for line in head)

    def read(self, lines: Iterable[str]) -> Context:
        return ContextSerializer().from_json("\n".join(lines))

    def write(self, context: Context, sink: TextIO) -> None:
        sink.write(ContextSerializer().to_json(context))
        sink.write("\n")


@default_registry.codec("yaml")
class YamlCodec(ContextCodec):
    """Reader/writer for the YAML context format."""

    @staticmethod
    def detect(lines: Sequence[str]) -> bool:
        head = [line.rstrip() for line in _nonblank(lines, 2)]
        if not head:
            return False
        if head[0] == "---":
            return len(head) == 2 and bool(_YAML_KIND.fullmatch(head[1]))
        return bool(_YAML_KIND.fullmatch(head[0]))

    def read(self, lines: Iterable[str]) -> Context:
        return ContextSerializer().from_yaml("\n".join(lines))

    def write(self, context: Context, sink: TextIO) -> None:
        sink.write(ContextSerializer().to_yaml(context))
