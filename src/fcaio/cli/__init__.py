"""CLI package.

The ``cli`` sub-package contains the Click application and its
commands. It imports from ``fcaio.formats`` and ``fcaio.context`` only.
"""
from __future__ import annotations
