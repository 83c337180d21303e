"""Burmeister plain-text context format.

Layout::

    B
    <blank>
    <number of objects N>
    <number of attributes M>
    <blank>
    <N object names, one per line>
    <M attribute names, one per line>
    <N rows of M characters, 'X' = incident, '.' = not incident>

Row ``i`` column ``j`` describes object ``i`` and attribute ``j`` in
name-line order, which is what makes the format round-trip.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from typing import TextIO

from fcaio.context.model import Context
from fcaio.formats.errors import MalformedInputError
from fcaio.formats.registry import ContextCodec, default_registry

logger = logging.getLogger(__name__)


class _LineCursor:
    """Hands out lines one at a time, tracking the 1-based line number."""

    def __init__(self, lines: Iterable[str]) -> None:
        self._lines: Iterator[str] = iter(lines)
        self.line_number = 0

    def next(self, expected: str) -> str:
        try:
            line = next(self._lines)
        except StopIteration:
            raise MalformedInputError(
                f"unexpected end of input, expected {expected}",
                line=self.line_number + 1,
            ) from None
        self.line_number += 1
        return line

    def take(self, count: int, expected: str) -> list[str]:
        return [self.next(expected) for _ in range(count)]

    def integer(self, expected: str) -> int:
        text = self.next(expected)
        try:
            value = int(text.strip())
        except ValueError:
            raise MalformedInputError(
                f"expected {expected}, found {text!r}", line=self.line_number
            ) from None
        if value < 0:
            raise MalformedInputError(
                f"{expected} must not be negative, found {value}", line=self.line_number
            )
        return value


@default_registry.codec("burmeister")
class BurmeisterCodec(ContextCodec):
    """Reader/writer for the Burmeister cross-table format."""

    @staticmethod
    def detect(lines: Sequence[str]) -> bool:
        return bool(lines) and lines[0][:1] == "B"

    def read(self, lines: Iterable[str]) -> Context:
        cursor = _LineCursor(lines)
        header = cursor.next("format marker 'B'")
        if not header.startswith("B"):
            raise MalformedInputError(
                f"expected format marker 'B', found {header!r}", line=cursor.line_number
            )
        cursor.next("blank line")

        n_objects = cursor.integer("number of objects")
        n_attributes = cursor.integer("number of attributes")
        cursor.next("blank line")

        objects = cursor.take(n_objects, "object name")
        attributes = cursor.take(n_attributes, "attribute name")

        incidence: set[tuple[str, str]] = set()
        for obj in objects:
            row = cursor.next(f"incidence row for object {obj!r}")
            if len(row) < n_attributes:
                raise MalformedInputError(
                    f"incidence row for object {obj!r} has {len(row)} "
                    f"character(s), expected {n_attributes}",
                    line=cursor.line_number,
                )
            incidence.update(
                (obj, att) for att, mark in zip(attributes, row) if mark == "X"
            )

        logger.debug(
            "Read Burmeister context with %d object(s), %d attribute(s)",
            n_objects,
            n_attributes,
        )
        return Context(objects=objects, attributes=attributes, incidence=frozenset(incidence))

    def write(self, context: Context, sink: TextIO) -> None:
        for name in context.objects + context.attributes:
            if "\n" in name or "\r" in name:
                raise ValueError(
                    f"Name {name!r} contains a line break and cannot be written "
                    "in Burmeister format"
                )

        sink.write("B\n\n")
        sink.write(f"{len(context.objects)}\n")
        sink.write(f"{len(context.attributes)}\n\n")
        for obj in context.objects:
            sink.write(f"{obj}\n")
        for att in context.attributes:
            sink.write(f"{att}\n")
        for _obj, row in context.rows():
            sink.write("".join("X" if present else "." for present in row))
            sink.write("\n")
