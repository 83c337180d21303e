"""Formal context model.

Exports the immutable ``Context`` value type.
"""
from __future__ import annotations

from fcaio.context.model import Context

__all__ = ["Context"]
