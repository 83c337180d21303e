"""Shared test fixtures for fcaio.

Fixtures defined here are available to all tests in the suite without
needing an explicit import. Add project-wide fixtures here; keep
format-specific fixtures close to the tests that use them.
"""
from __future__ import annotations

import pytest

from fcaio.context import Context


@pytest.fixture()
def package_name() -> str:
    """Return the importable package name for assertions."""
    return "fcaio"


@pytest.fixture()
def expected_version() -> str:
    """Return the current expected version string.

    Update this fixture when cutting a release so that the version
    test immediately catches stale ``__version__`` values.
    """
    return "0.1.0"


@pytest.fixture()
def small_context() -> Context:
    """Objects {g1, g2}, attributes {m1, m2}, incidence {(g1, m1)}."""
    return Context(["g1", "g2"], ["m1", "m2"], {("g1", "m1")})


@pytest.fixture()
def small_burmeister() -> str:
    """The Burmeister text of ``small_context``."""
    return "B\n\n2\n2\n\ng1\ng2\nm1\nm2\nX.\n..\n"


@pytest.fixture()
def animals_context() -> Context:
    """A slightly larger context with empty rows and columns."""
    return Context(
        objects=["dove", "hen", "duck", "lion", "stone"],
        attributes=["small", "big", "two legs", "four legs", "feathers", "flies"],
        incidence={
            ("dove", "small"), ("dove", "two legs"), ("dove", "feathers"), ("dove", "flies"),
            ("hen", "small"), ("hen", "two legs"), ("hen", "feathers"),
            ("duck", "small"), ("duck", "two legs"), ("duck", "feathers"), ("duck", "flies"),
            ("lion", "big"), ("lion", "four legs"),
        },
    )
