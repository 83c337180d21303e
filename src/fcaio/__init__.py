"""fcaio — read and write Formal Concept Analysis contexts.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    import fcaio

    ctx = fcaio.Context(["g1", "g2"], ["m1", "m2"], {("g1", "m1")})

    # Writing names the format explicitly
    fcaio.write_context("burmeister", ctx, "example.cxt")

    # Reading detects the format from the file content
    assert fcaio.read_context("example.cxt") == ctx

    fcaio.list_context_formats()
    ['burmeister', 'conexp-xml', 'json', 'yaml']
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from fcaio.context.model import Context
from fcaio.formats.errors import (
    AmbiguousDocumentError,
    ContextFormatError,
    MalformedInputError,
    UndeterminedFormatError,
    UnknownFormatError,
)

__version__: str = "0.1.0"

if TYPE_CHECKING:
    from fcaio.formats.dispatch import Source
    from fcaio.formats.registry import DetectionPredicate


def read_context(source: "Source") -> Context:
    """Read a formal context, detecting its format from the content.

    Parameters
    ----------
    source:
        A path, a text stream or a binary stream.

    Returns
    -------
    Context
        The parsed context.

    Raises
    ------
    fcaio.UndeterminedFormatError
        If no registered format can recognize and read the content.
    fcaio.MalformedInputError
        If the content violates the detected format's grammar.
    """
    from fcaio.formats import read_context as _read_context

    return _read_context(source)


def read_context_and_format(source: "Source") -> tuple[Context, str]:
    """Read a formal context and return it with its detected format identifier."""
    from fcaio.formats import read_context_and_format as _read_context_and_format

    return _read_context_and_format(source)


def write_context(format_identifier: str, context: Context, destination: "Source") -> None:
    """Write ``context`` to ``destination`` in the named format.

    Parameters
    ----------
    format_identifier:
        A registered format, e.g. ``"burmeister"`` or ``"conexp-xml"``.
    context:
        The context to serialize.
    destination:
        A path, a text stream or a binary stream.

    Raises
    ------
    fcaio.UnknownFormatError
        If ``format_identifier`` is not registered.
    """
    from fcaio.formats import write_context as _write_context

    _write_context(format_identifier, context, destination)


def detect_format(source: "Source") -> str | None:
    """Return the format identifier of ``source``, or ``None``."""
    from fcaio.formats import detect_format as _detect_format

    return _detect_format(source)


def read_context_string(text: str) -> Context:
    """Read a formal context from serialized text."""
    from fcaio.formats import read_context_string as _read_context_string

    return _read_context_string(text)


def write_context_string(format_identifier: str, context: Context) -> str:
    """Return ``context`` serialized in the named format."""
    from fcaio.formats import write_context_string as _write_context_string

    return _write_context_string(format_identifier, context)


def register_context_format(identifier: str, predicate: "DetectionPredicate") -> None:
    """Register a detection predicate for ``identifier``.

    Later registrations of the same identifier replace earlier ones.
    """
    from fcaio.formats import register_context_format as _register

    _register(identifier, predicate)


def list_context_formats() -> list[str]:
    """Return the detectable format identifiers in detection order."""
    from fcaio.formats import list_context_formats as _list

    return _list()


__all__ = [
    "__version__",
    "AmbiguousDocumentError",
    "Context",
    "ContextFormatError",
    "MalformedInputError",
    "UndeterminedFormatError",
    "UnknownFormatError",
    "detect_format",
    "list_context_formats",
    "read_context",
    "read_context_and_format",
    "read_context_string",
    "register_context_format",
    "write_context",
    "write_context_string",
]
