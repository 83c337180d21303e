"""Error types for context reading and writing.

Every failure surfaced by the dispatcher or a codec is a subclass of
``ContextFormatError`` so callers can catch the whole family at once,
while the concrete classes keep the cause precise.
"""
from __future__ import annotations


class ContextFormatError(Exception):
    """Base class for all serialization errors raised by fcaio."""


class UnknownFormatError(ContextFormatError, KeyError):
    """Raised when no codec is registered under a format identifier."""

    def __init__(self, format_name: str) -> None:
        self.format_name = format_name
        super().__init__(f"Format {format_name!r} for context output is not known.")

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return str(self.args[0])


class UndeterminedFormatError(ContextFormatError, ValueError):
    """Raised when no detection predicate recognizes a source."""

    def __init__(self, source: str) -> None:
        self.source = source
        super().__init__(f"Cannot determine format of context in {source}")


class MalformedInputError(ContextFormatError, ValueError):
    """Raised when a source violates the grammar of its format.

    Parameters
    ----------
    reason:
        Human-readable description of the violation.
    line:
        1-based line number of the offending input, if known.
    source:
        Name of the source being read.  The dispatcher fills this in
        when the codec did not know it.
    """

    def __init__(self, reason: str, line: int | None = None, source: str | None = None) -> None:
        self.reason = reason
        self.line = line
        self.source = source
        super().__init__(reason)

    def __str__(self) -> str:
        where = self.source or "<input>"
        if self.line is not None:
            where = f"{where}:{self.line}"
        return f"{where}: {self.reason}"


class AmbiguousDocumentError(MalformedInputError):
    """Raised when a Conexp-XML document does not hold exactly one context."""
