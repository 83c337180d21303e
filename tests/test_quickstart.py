"""Test that the quickstart API works for fcaio."""
from __future__ import annotations

import io
from pathlib import Path

import pytest


def test_quickstart_import(package_name: str, expected_version: str) -> None:
    import fcaio

    assert fcaio.__name__ == package_name
    assert fcaio.__version__ == expected_version
    assert callable(fcaio.read_context)
    assert callable(fcaio.write_context)


def test_quickstart_builtin_formats() -> None:
    import fcaio

    assert fcaio.list_context_formats()[:4] == ["burmeister", "conexp-xml", "json", "yaml"]


def test_quickstart_file_round_trip(tmp_path: Path) -> None:
    import fcaio

    ctx = fcaio.Context(["g1", "g2"], ["m1", "m2"], {("g1", "m1")})
    path = tmp_path / "example.cxt"
    fcaio.write_context("burmeister", ctx, path)
    assert fcaio.detect_format(path) == "burmeister"
    assert fcaio.read_context(path) == ctx


def test_quickstart_string_round_trip() -> None:
    import fcaio

    ctx = fcaio.Context(["a"], ["x"], {("a", "x")})
    assert fcaio.read_context_string(fcaio.write_context_string("conexp-xml", ctx)) == ctx


def test_quickstart_unknown_format() -> None:
    import fcaio

    sink = io.StringIO()
    with pytest.raises(fcaio.UnknownFormatError) as info:
        fcaio.write_context("nosuchformat", fcaio.Context([], []), sink)
    assert info.value.format_name == "nosuchformat"
    assert sink.getvalue() == ""


def test_quickstart_register_format() -> None:
    import fcaio

    fcaio.register_context_format("quickstart-never", lambda lines: False)
    assert "quickstart-never" in fcaio.list_context_formats()
    assert fcaio.read_context_string("B\n\n0\n0\n\n") == fcaio.Context([], [])
