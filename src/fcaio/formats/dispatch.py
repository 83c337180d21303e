"""Read/write dispatch for formal contexts.

``write_context`` is keyed by an explicit format identifier.
``read_context`` is keyed by the identifier that format detection
returns for the leading lines of the source.

Sources and destinations may be filesystem paths, text streams or
binary streams.  Paths are opened and closed here; streams belong to
the caller and are left open.

Usage
-----
::

    from fcaio.formats import read_context, write_context

    write_context("burmeister", context, "animals.cxt")
    assert read_context("animals.cxt") == context
"""
from __future__ import annotations

import io
import itertools
import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from typing import IO, TYPE_CHECKING, Union

from fcaio.formats.errors import (
    MalformedInputError,
    UndeterminedFormatError,
    UnknownFormatError,
)
from fcaio.formats.registry import FormatRegistry, default_registry

if TYPE_CHECKING:
    from fcaio.context.model import Context

logger = logging.getLogger(__name__)

# Non-blank leading lines handed to detection predicates; blank lines are not counted.
DETECTION_WINDOW = 32
DEFAULT_ENCODING = "utf-8"

Source = Union[str, "os.PathLike[str]", IO[str], IO[bytes]]


def _describe(source: Source) -> str:
    if isinstance(source, (str, os.PathLike)):
        return os.fspath(source)
    name = getattr(source, "name", None)
    return str(name) if isinstance(name, (str, os.PathLike)) else repr(source)


def _is_binary(stream: object) -> bool:
    return isinstance(stream, (io.RawIOBase, io.BufferedIOBase))


@contextmanager
def _open_text(target: Source, mode: str, encoding: str) -> Iterator[IO[str]]:
    """Yield a text stream for ``target``, releasing only what was opened here."""
    if isinstance(target, (str, os.PathLike)):
        with open(target, mode, encoding=encoding, newline="" if mode == "w" else None) as stream:
            yield stream
    elif _is_binary(target):
        wrapper = io.TextIOWrapper(target, encoding=encoding, newline="" if mode == "w" else None)
        try:
            yield wrapper
        finally:
            wrapper.flush()
            wrapper.detach()
    else:
        yield target


def _lines(stream: IO[str]) -> Iterator[str]:
    for line in stream:
        yield line.rstrip("\r\n")


def _head(lines: Iterator[str]) -> list[str]:
    """Consume lines up to and including the ``DETECTION_WINDOW``-th non-blank one.

    Blank lines do not count towards the window but are kept, so
    predicates still see the content exactly as written.
    """
    head: list[str] = []
    nonblank = 0
    for line in lines:
        head.append(line)
        if line.strip():
            nonblank += 1
            if nonblank == DETECTION_WINDOW:
                break
    return head


def detect_format(
    source: Source,
    *,
    registry: FormatRegistry | None = None,
    encoding: str = DEFAULT_ENCODING,
) -> str | None:
    """Return the identifier of the format ``source`` is written in.

    Only the leading lines are read, up to ``DETECTION_WINDOW``
    non-blank ones.

    Returns
    -------
    str | None
        The detected identifier, or ``None`` if no format matches.
    """
    if registry is None:
        registry = default_registry
    with _open_text(source, "r", encoding) as stream:
        head = _head(_lines(stream))
    return registry.detect(head)


def read_context_and_format(
    source: Source,
    *,
    registry: FormatRegistry | None = None,
    encoding: str = DEFAULT_ENCODING,
) -> tuple["Context", str]:
    """Read a formal context and report the format it was detected as.

    The source is opened once; detection and parsing share the same
    pass over its lines.

    Returns
    -------
    tuple[Context, str]
        The context and the detected format identifier.

    Raises
    ------
    UndeterminedFormatError
        If no registered predicate recognizes the content, or the
        recognized format has no codec to read it.
    MalformedInputError
        If the content violates the detected format's grammar.
    OSError
        If ``source`` cannot be opened or read.
    """
    if registry is None:
        registry = default_registry
    name = _describe(source)
    with _open_text(source, "r", encoding) as stream:
        lines = _lines(stream)
        head = _head(lines)
        identifier = registry.detect(head)
        if identifier is None:
            raise UndeterminedFormatError(name)
        try:
            codec = registry.get_codec(identifier)
        except UnknownFormatError:
            logger.debug("Format %r was detected but has no codec", identifier)
            raise UndeterminedFormatError(name) from None
        logger.debug("Reading %s as %r", name, identifier)
        try:
            return codec.read(itertools.chain(head, lines)), identifier
        except MalformedInputError as exc:
            if exc.source is None:
                exc.source = name
            raise


def read_context(
    source: Source,
    *,
    registry: FormatRegistry | None = None,
    encoding: str = DEFAULT_ENCODING,
) -> "Context":
    """Read a formal context, detecting its format from its content.

    Parameters
    ----------
    source:
        A path, a text stream or a binary stream.
    registry:
        Registry used for detection and codec lookup.  Defaults to the
        process-wide registry.
    encoding:
        Text encoding for paths and binary streams.

    Returns
    -------
    Context
        The context described by ``source``.

    Raises
    ------
    UndeterminedFormatError
        If no registered format can both recognize and read the content.
    MalformedInputError
        If the content violates the detected format's grammar.
    OSError
        If ``source`` cannot be opened or read.
    """
    context, _identifier = read_context_and_format(source, registry=registry, encoding=encoding)
    return context


def write_context(
    format_identifier: str,
    context: "Context",
    destination: Source,
    *,
    registry: FormatRegistry | None = None,
    encoding: str = DEFAULT_ENCODING,
) -> None:
    """Write ``context`` to ``destination`` in the named format.

    The context is rendered completely before ``destination`` is
    touched, so a failing codec never leaves a partial file behind.

    Raises
    ------
    UnknownFormatError
        If no codec is registered under ``format_identifier``.
    OSError
        If ``destination`` cannot be written.
    """
    if registry is None:
        registry = default_registry
    codec = registry.get_codec(format_identifier)
    buffer = io.StringIO()
    codec.write(context, buffer)
    with _open_text(destination, "w", encoding) as sink:
        sink.write(buffer.getvalue())
    logger.debug("Wrote %r context to %s", format_identifier, _describe(destination))


def write_context_string(
    format_identifier: str,
    context: "Context",
    *,
    registry: FormatRegistry | None = None,
) -> str:
    """Return ``context`` serialized in the named format."""
    buffer = io.StringIO()
    write_context(format_identifier, context, buffer, registry=registry)
    return buffer.getvalue()


def read_context_string(text: str, *, registry: FormatRegistry | None = None) -> "Context":
    """Read a formal context from serialized text, detecting its format."""
    return read_context(io.StringIO(text), registry=registry)
