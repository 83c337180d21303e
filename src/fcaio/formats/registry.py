"""Format registry for fcaio.

Maps format identifiers to two things:

* a *detection predicate* -- a pure function of the leading lines of a
  source, used by ``read_context`` to recognize a format, and
* a *codec* -- a ``ContextCodec`` instance that reads and writes the
  format.

Detection walks the predicates in registration order and stops at the
first match, so registration order is detection priority.  Replacing a
predicate keeps its original position.

Third-party codecs register through the ``@registry.codec`` decorator
or by declaring entry-points under the "fcaio.formats" group.

Example
-------
Register a codec with the decorator::

    from fcaio.formats.registry import ContextCodec, default_registry

    @default_registry.codec("my-format")
    class MyCodec(ContextCodec):
        @staticmethod
        def detect(lines):
            return bool(lines) and lines[0] == "MY-FORMAT"

        def read(self, lines): ...
        def write(self, context, sink): ...

Load codecs from installed packages::

    default_registry.load_entrypoints("fcaio.formats")
"""
from __future__ import annotations

import importlib.metadata
import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Sequence
from typing import TYPE_CHECKING, ClassVar, TextIO

from fcaio.formats.errors import UnknownFormatError

if TYPE_CHECKING:
    from fcaio.context.model import Context

logger = logging.getLogger(__name__)

DetectionPredicate = Callable[[Sequence[str]], bool]

ENTRYPOINT_GROUP = "fcaio.formats"


class ContextCodec(ABC):
    """Reader/writer pair for one context format.

    ``read`` receives the lines of the source with their line
    terminators removed.  ``write`` receives a text sink.

    Subclasses may define a static ``detect`` predicate; registering the
    codec then also registers the predicate for format detection.
    """

    detect: ClassVar[DetectionPredicate | None] = None

    @abstractmethod
    def read(self, lines: Iterable[str]) -> "Context":
        """Build a context from the lines of a source."""

    @abstractmethod
    def write(self, context: "Context", sink: TextIO) -> None:
        """Serialize ``context`` to ``sink``."""


class FormatRegistry:
    """Thread-safe table of detection predicates and codecs.

    Parameters
    ----------
    name:
        A human-readable name for this registry (used in log messages
        and ``repr``).
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._lock = threading.Lock()
        self._predicates: dict[str, DetectionPredicate] = {}
        self._codecs: dict[str, ContextCodec] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, identifier: str, predicate: DetectionPredicate) -> None:
        """Insert or replace the detection predicate for ``identifier``.

        Overwriting is allowed; the last registration wins.
        """
        with self._lock:
            replaced = identifier in self._predicates
            self._predicates[identifier] = predicate
        logger.debug(
            "%s detection predicate %r in registry %r",
            "Replaced" if replaced else "Registered",
            identifier,
            self._name,
        )

    def register_codec(
        self,
        identifier: str,
        codec: ContextCodec,
        predicate: DetectionPredicate | None = None,
    ) -> None:
        """Bind ``codec`` to ``identifier``.

        Parameters
        ----------
        identifier:
            The format identifier, e.g. "burmeister".
        codec:
            The codec instance used for reading and writing.
        predicate:
            Detection predicate.  Defaults to ``codec.detect`` when the
            codec defines one; codecs without either are write-only as
            far as detection is concerned.

        Raises
        ------
        TypeError
            If ``codec`` is not a ``ContextCodec``.
        """
        if not isinstance(codec, ContextCodec):
            raise TypeError(
                f"Cannot register {codec!r} under {identifier!r}: "
                "it must be a ContextCodec instance."
            )
        if predicate is None:
            predicate = codec.detect
        with self._lock:
            self._codecs[identifier] = codec
            if predicate is not None:
                self._predicates[identifier] = predicate
        logger.debug(
            "Registered codec %r -> %s in registry %r (detectable=%s)",
            identifier,
            type(codec).__qualname__,
            self._name,
            predicate is not None,
        )

    def codec(self, identifier: str) -> Callable[[type[ContextCodec]], type[ContextCodec]]:
        """Return a class decorator that instantiates and registers a codec.

        The decorated class is returned unchanged.
        """

        def decorator(cls: type[ContextCodec]) -> type[ContextCodec]:
            if not (isinstance(cls, type) and issubclass(cls, ContextCodec)):
                raise TypeError(
                    f"Cannot register {cls!r} under {identifier!r}: "
                    "it must be a subclass of ContextCodec."
                )
            self.register_codec(identifier, cls())
            return cls

        return decorator

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def list_formats(self) -> list[str]:
        """Return detectable format identifiers in detection order."""
        with self._lock:
            return list(self._predicates)

    def list_codecs(self) -> list[str]:
        """Return identifiers that have a codec, in registration order."""
        with self._lock:
            return list(self._codecs)

    def detect(self, lines: Sequence[str]) -> str | None:
        """Return the first format whose predicate accepts ``lines``.

        Parameters
        ----------
        lines:
            Leading lines of a source without line terminators.

        Returns
        -------
        str | None
            The matching identifier, or ``None`` if nothing matches.
        """
        with self._lock:
            candidates = list(self._predicates.items())
        lines = tuple(lines)
        for identifier, predicate in candidates:
            if predicate(lines):
                logger.debug("Detected format %r", identifier)
                return identifier
        logger.debug("No format matched %d leading line(s)", len(lines))
        return None

    def get_codec(self, identifier: str) -> ContextCodec:
        """Return the codec registered under ``identifier``.

        Raises
        ------
        UnknownFormatError
            If no codec is registered under ``identifier``.
        """
        with self._lock:
            codec = self._codecs.get(identifier)
        if codec is None:
            raise UnknownFormatError(identifier)
        return codec

    def __contains__(self, identifier: object) -> bool:
        with self._lock:
            return identifier in self._codecs or identifier in self._predicates

    def __len__(self) -> int:
        with self._lock:
            return len(self._codecs.keys() | self._predicates.keys())

    def __repr__(self) -> str:
        return (
            f"FormatRegistry(name={self._name!r}, "
            f"formats={self.list_formats()}, codecs={self.list_codecs()})"
        )

    # ------------------------------------------------------------------
    # Entry-point loading
    # ------------------------------------------------------------------

    def load_entrypoints(self, group: str = ENTRYPOINT_GROUP) -> None:
        """Register codecs declared as package entry-points.

        Each entry-point must name a ``ContextCodec`` subclass; it is
        instantiated and registered under the entry-point name.
        Identifiers that already have a codec are skipped, so repeated
        calls are idempotent.

        Example
        -------
        In a downstream package's ``pyproject.toml``::

            [project.entry-points."fcaio.formats"]
            my-format = "my_package.codecs:MyCodec"
        """
        for ep in importlib.metadata.entry_points(group=group):
            with self._lock:
                known = ep.name in self._codecs
            if known:
                logger.debug(
                    "Entry-point %r already registered in %r; skipping.",
                    ep.name,
                    self._name,
                )
                continue
            try:
                cls = ep.load()
            except Exception:
                logger.exception(
                    "Failed to load entry-point %r from group %r; skipping.",
                    ep.name,
                    group,
                )
                continue
            if not (isinstance(cls, type) and issubclass(cls, ContextCodec)):
                logger.warning(
                    "Entry-point %r is not a ContextCodec subclass; skipping.",
                    ep.name,
                )
                continue
            self.register_codec(ep.name, cls())


default_registry = FormatRegistry("contexts")


def register_context_format(identifier: str, predicate: DetectionPredicate) -> None:
    """Register a detection predicate in the process-wide registry."""
    default_registry.register(identifier, predicate)


def list_context_formats() -> list[str]:
    """Return the detectable formats of the process-wide registry."""
    return default_registry.list_formats()
