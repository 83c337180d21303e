"""Context formats for fcaio.

Importing this package registers the built-in codecs in the
process-wide registry.  Import order is detection priority:
``burmeister``, ``conexp-xml``, ``json``, ``yaml``.
"""
from __future__ import annotations

from fcaio.formats import burmeister, conexp_xml, structured  # noqa: F401  (registration)
from fcaio.formats.dispatch import (
    detect_format,
    read_context,
    read_context_and_format,
    read_context_string,
    write_context,
    write_context_string,
)
from fcaio.formats.errors import (
    AmbiguousDocumentError,
    ContextFormatError,
    MalformedInputError,
    UndeterminedFormatError,
    UnknownFormatError,
)
from fcaio.formats.registry import (
    ContextCodec,
    FormatRegistry,
    default_registry,
    list_context_formats,
    register_context_format,
)

__all__ = [
    "AmbiguousDocumentError",
    "ContextCodec",
    "ContextFormatError",
    "FormatRegistry",
    "MalformedInputError",
    "UndeterminedFormatError",
    "UnknownFormatError",
    "default_registry",
    "detect_format",
    "list_context_formats",
    "read_context",
    "read_context_and_format",
    "read_context_string",
    "register_context_format",
    "write_context",
    "write_context_string",
]
