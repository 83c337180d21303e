"""Unit tests for fcaio.formats.registry — FormatRegistry registration,
first-match detection, codec lookup and entry-point loading.
"""
from __future__ import annotations

import importlib.metadata
import logging
import threading
from collections.abc import Iterable, Sequence
from typing import TextIO
from unittest.mock import MagicMock, patch

import pytest

from fcaio.context import Context
from fcaio.formats.errors import UnknownFormatError
from fcaio.formats.registry import (
    ContextCodec,
    FormatRegistry,
    default_registry,
    list_context_formats,
    register_context_format,
)


# ---------------------------------------------------------------------------
# Test fixtures — codecs and predicates
# ---------------------------------------------------------------------------


class EmptyCodec(ContextCodec):
    """Reads every source as the empty context; writes nothing."""

    def read(self, lines: Iterable[str]) -> Context:
        return Context([], [])

    def write(self, context: Context, sink: TextIO) -> None:
        pass


class DetectingCodec(EmptyCodec):
    @staticmethod
    def detect(lines: Sequence[str]) -> bool:
        return bool(lines) and lines[0] == "DETECT-ME"


class NotACodec:
    pass


def _starts_with(prefix: str):
    return lambda lines: bool(lines) and lines[0].startswith(prefix)


def _fresh_registry(name: str = "test") -> FormatRegistry:
    """Return a new empty registry for each test."""
    return FormatRegistry(name)


# ===========================================================================
# Predicate registration
# ===========================================================================


class TestRegister:
    def test_empty_registry(self) -> None:
        registry = _fresh_registry()
        assert len(registry) == 0
        assert registry.list_formats() == []
        assert registry.list_codecs() == []

    def test_register_adds_format(self) -> None:
        registry = _fresh_registry()
        registry.register("a", _starts_with("A"))
        assert registry.list_formats() == ["a"]
        assert "a" in registry

    def test_list_formats_keeps_insertion_order(self) -> None:
        registry = _fresh_registry()
        for name in ["zeta", "alpha", "mid"]:
            registry.register(name, _starts_with(name))
        assert registry.list_formats() == ["zeta", "alpha", "mid"]

    def test_overwrite_is_allowed_and_last_writer_wins(self) -> None:
        registry = _fresh_registry()
        registry.register("a", _starts_with("A"))
        registry.register("a", _starts_with("Z"))
        assert registry.detect(["A"]) is None
        assert registry.detect(["Z"]) == "a"

    def test_overwrite_keeps_position(self) -> None:
        registry = _fresh_registry()
        registry.register("a", _starts_with("A"))
        registry.register("b", _starts_with("B"))
        registry.register("a", _starts_with("A"))
        assert registry.list_formats() == ["a", "b"]

    def test_register_logs_debug(self, caplog: pytest.LogCaptureFixture) -> None:
        registry = _fresh_registry("logged")
        with caplog.at_level(logging.DEBUG, logger="fcaio.formats.registry"):
            registry.register("a", _starts_with("A"))
        assert "'a'" in caplog.text

    def test_repr_contains_name_and_formats(self) -> None:
        registry = _fresh_registry("contexts-test")
        registry.register("a", _starts_with("A"))
        text = repr(registry)
        assert "contexts-test" in text
        assert "'a'" in text


# ===========================================================================
# Detection
# ===========================================================================


class TestDetect:
    def test_no_match_returns_none(self) -> None:
        registry = _fresh_registry()
        registry.register("a", _starts_with("A"))
        assert registry.detect(["nothing"]) is None

    def test_empty_registry_returns_none(self) -> None:
        assert _fresh_registry().detect(["B"]) is None

    def test_first_match_wins(self) -> None:
        registry = _fresh_registry()
        registry.register("specific", _starts_with("AB"))
        registry.register("general", _starts_with("A"))
        assert registry.detect(["ABC"]) == "specific"
        assert registry.detect(["AXY"]) == "general"

    def test_later_matching_predicate_does_not_change_result(self) -> None:
        registry = _fresh_registry()
        registry.register("first", _starts_with("A"))
        before = registry.detect(["A"])
        registry.register("catch-all", lambda lines: True)
        assert registry.detect(["A"]) == before == "first"

    def test_detection_is_deterministic(self) -> None:
        registry = _fresh_registry()
        registry.register("x", _starts_with("X"))
        registry.register("y", lambda lines: True)
        results = {registry.detect(["X1"]) for _ in range(50)}
        assert results == {"x"}

    def test_predicate_receives_all_lines(self) -> None:
        seen: list[tuple[str, ...]] = []
        registry = _fresh_registry()
        registry.register("spy", lambda lines: seen.append(tuple(lines)) or False)
        registry.detect(["one", "two"])
        assert seen == [("one", "two")]

    def test_accepts_empty_input(self) -> None:
        registry = _fresh_registry()
        registry.register("a", _starts_with("A"))
        assert registry.detect([]) is None

    def test_concurrent_registration_and_detection(self) -> None:
        registry = _fresh_registry()
        registry.register("base", _starts_with("BASE"))
        errors: list[BaseException] = []

        def register_many() -> None:
            for i in range(200):
                registry.register(f"fmt-{i}", _starts_with(f"F{i}"))

        def detect_many() -> None:
            try:
                for _ in range(200):
                    assert registry.detect(["BASE"]) == "base"
            except BaseException as exc:  # collected for the main thread
                errors.append(exc)

        threads = [threading.Thread(target=register_many), threading.Thread(target=detect_many)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert errors == []
        assert len(registry.list_formats()) == 201


# ===========================================================================
# Codecs
# ===========================================================================


class TestCodecs:
    def test_register_codec_without_detect_is_not_detectable(self) -> None:
        registry = _fresh_registry()
        registry.register_codec("plain", EmptyCodec())
        assert registry.list_codecs() == ["plain"]
        assert registry.list_formats() == []

    def test_register_codec_uses_class_detect(self) -> None:
        registry = _fresh_registry()
        registry.register_codec("det", DetectingCodec())
        assert registry.list_formats() == ["det"]
        assert registry.detect(["DETECT-ME"]) == "det"

    def test_explicit_predicate_overrides_class_detect(self) -> None:
        registry = _fresh_registry()
        registry.register_codec("det", DetectingCodec(), predicate=_starts_with("!"))
        assert registry.detect(["DETECT-ME"]) is None
        assert registry.detect(["!"]) == "det"

    def test_register_codec_rejects_non_codec(self) -> None:
        registry = _fresh_registry()
        with pytest.raises(TypeError):
            registry.register_codec("bad", NotACodec())  # type: ignore[arg-type]

    def test_decorator_registers_instance_and_returns_class(self) -> None:
        registry = _fresh_registry()

        @registry.codec("decorated")
        class Decorated(DetectingCodec):
            pass

        assert isinstance(registry.get_codec("decorated"), Decorated)
        assert Decorated.__name__ == "Decorated"

    def test_decorator_rejects_non_codec_class(self) -> None:
        registry = _fresh_registry()
        with pytest.raises(TypeError):
            registry.codec("bad")(NotACodec)  # type: ignore[arg-type]

    def test_get_codec_unknown_raises(self) -> None:
        registry = _fresh_registry()
        with pytest.raises(UnknownFormatError) as info:
            registry.get_codec("nosuchformat")
        assert info.value.format_name == "nosuchformat"

    def test_unknown_format_error_is_key_error(self) -> None:
        with pytest.raises(KeyError):
            _fresh_registry().get_codec("missing")

    def test_len_counts_each_identifier_once(self) -> None:
        registry = _fresh_registry()
        registry.register_codec("det", DetectingCodec())
        registry.register("only-detect", _starts_with("O"))
        assert len(registry) == 2


# ===========================================================================
# Entry-point loading
# ===========================================================================


def _entry_point(name: str, loaded: object = None, error: Exception | None = None) -> MagicMock:
    ep = MagicMock(spec=importlib.metadata.EntryPoint)
    ep.name = name
    if error is not None:
        ep.load.side_effect = error
    else:
        ep.load.return_value = loaded
    return ep


class TestLoadEntrypoints:
    def test_registers_codec_classes(self) -> None:
        registry = _fresh_registry()
        with patch("importlib.metadata.entry_points", return_value=[_entry_point("ext", DetectingCodec)]):
            registry.load_entrypoints()
        assert isinstance(registry.get_codec("ext"), DetectingCodec)
        assert registry.list_formats() == ["ext"]

    def test_uses_default_group(self) -> None:
        registry = _fresh_registry()
        with patch("importlib.metadata.entry_points", return_value=[]) as mock_eps:
            registry.load_entrypoints()
        mock_eps.assert_called_once_with(group="fcaio.formats")

    def test_is_idempotent(self) -> None:
        registry = _fresh_registry()
        ep = _entry_point("ext", DetectingCodec)
        with patch("importlib.metadata.entry_points", return_value=[ep]):
            registry.load_entrypoints()
            registry.load_entrypoints()
        assert ep.load.call_count == 1

    def test_failed_load_is_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        registry = _fresh_registry()
        eps = [_entry_point("broken", error=ImportError("boom")), _entry_point("ok", EmptyCodec)]
        with patch("importlib.metadata.entry_points", return_value=eps):
            with caplog.at_level(logging.ERROR, logger="fcaio.formats.registry"):
                registry.load_entrypoints()
        assert registry.list_codecs() == ["ok"]
        assert "broken" in caplog.text

    def test_non_codec_is_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        registry = _fresh_registry()
        with patch("importlib.metadata.entry_points", return_value=[_entry_point("odd", NotACodec)]):
            with caplog.at_level(logging.WARNING, logger="fcaio.formats.registry"):
                registry.load_entrypoints()
        assert registry.list_codecs() == []
        assert "odd" in caplog.text


# ===========================================================================
# Process-wide registry
# ===========================================================================


class TestDefaultRegistry:
    def test_builtin_detection_order(self) -> None:
        assert default_registry.list_formats()[:4] == ["burmeister", "conexp-xml", "json", "yaml"]

    def test_builtin_codecs(self) -> None:
        for name in ["burmeister", "conexp-xml", "json", "yaml"]:
            assert isinstance(default_registry.get_codec(name), ContextCodec)

    def test_module_level_helpers(self) -> None:
        register_context_format("burmeister", default_registry.get_codec("burmeister").detect)
        assert list_context_formats()[0] == "burmeister"
