#!/usr/bin/env python3
"""Example: Quickstart — fcaio

Minimal working example: build a formal context, write it in the
Burmeister format, read it back with automatic format detection and
query it.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install fcaio
"""
from __future__ import annotations

import tempfile
from pathlib import Path

import fcaio

CONTEXT = fcaio.Context(
    objects=["dove", "hen", "lion"],
    attributes=["small", "big", "feathers", "flies"],
    incidence={
        ("dove", "small"), ("dove", "feathers"), ("dove", "flies"),
        ("hen", "small"), ("hen", "feathers"),
        ("lion", "big"),
    },
)


def main() -> None:
    print(f"fcaio version: {fcaio.__version__}")
    print(f"Known formats: {', '.join(fcaio.list_context_formats())}")

    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "birds.cxt"

        # Step 1: Write — the format is always named explicitly
        fcaio.write_context("burmeister", CONTEXT, path)
        print(f"\n--- {path.name} ---")
        print(path.read_text(encoding="utf-8"), end="")

        # Step 2: Read — the format is detected from the content
        print(f"\nDetected format: {fcaio.detect_format(path)}")
        loaded = fcaio.read_context(path)
        print(f"Round trip equal: {loaded == CONTEXT}")

    # Step 3: Derivation
    print(f"\nAttributes of dove and hen: {sorted(loaded.object_derivation({'dove', 'hen'}))}")
    print(f"Objects with feathers:      {sorted(loaded.attribute_derivation({'feathers'}))}")


if __name__ == "__main__":
    main()
