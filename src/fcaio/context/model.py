"""Formal context model.

A ``Context`` is the triple (objects, attributes, incidence) of Formal
Concept Analysis.  Instances are frozen dataclasses: every operation
that "changes" a context (dual, apposition, subposition) returns a new
value.

Objects and attributes are kept as tuples so that positional encodings
(the Burmeister cross table, XML attribute identifiers) have a
canonical order to follow.  That order is the first-occurrence order
of the names handed to the constructor; it does not take part in
equality.
"""
from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass


@dataclass(frozen=True, slots=True, eq=False)
class Context:
    """An immutable formal context.

    Parameters
    ----------
    objects:
        Object names.  Duplicates collapse, keeping the first position.
    attributes:
        Attribute names.  Duplicates collapse, keeping the first position.
    incidence:
        ``(object, attribute)`` pairs.  Every pair must refer to a
        declared object and a declared attribute.

    Raises
    ------
    TypeError
        If a name is not a ``str`` or a pair is not a 2-tuple.
    ValueError
        If a pair refers to an undeclared object or attribute.

    Example
    -------
    ::

        ctx = Context(["g1", "g2"], ["m1", "m2"], {("g1", "m1")})
        ctx.object_derivation({"g1"})   # frozenset({'m1'})
    """

    objects: tuple[str, ...]
    attributes: tuple[str, ...]
    incidence: frozenset[tuple[str, str]] = frozenset()

    def __post_init__(self) -> None:
        objects = _unique_names(self.objects, "object")
        attributes = _unique_names(self.attributes, "attribute")
        object_set = frozenset(objects)
        attribute_set = frozenset(attributes)

        pairs: set[tuple[str, str]] = set()
        for pair in self.incidence:
            if not (isinstance(pair, tuple) and len(pair) == 2):
                raise TypeError(f"Incidence entries must be (object, attribute) pairs, got {pair!r}")
            obj, att = pair
            if obj not in object_set:
                raise ValueError(f"Incidence pair {pair!r} refers to unknown object {obj!r}")
            if att not in attribute_set:
                raise ValueError(f"Incidence pair {pair!r} refers to unknown attribute {att!r}")
            pairs.add((obj, att))

        object.__setattr__(self, "objects", objects)
        object.__setattr__(self, "attributes", attributes)
        object.__setattr__(self, "incidence", frozenset(pairs))

    # ------------------------------------------------------------------
    # Equality
    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Context):
            return NotImplemented
        return (
            frozenset(self.objects) == frozenset(other.objects)
            and frozenset(self.attributes) == frozenset(other.attributes)
            and self.incidence == other.incidence
        )

    def __hash__(self) -> int:
        return hash((frozenset(self.objects), frozenset(self.attributes), self.incidence))

    def __repr__(self) -> str:
        return (
            f"Context(objects={list(self.objects)!r}, "
            f"attributes={list(self.attributes)!r}, "
            f"incidence={len(self.incidence)} pair(s))"
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def incident(self, obj: str, att: str) -> bool:
        """Return True if ``obj`` has ``att``."""
        return (obj, att) in self.incidence

    def object_derivation(self, objects: Iterable[str]) -> frozenset[str]:
        """Return the attributes shared by every object in ``objects``.

        The derivation of the empty set is the full attribute set.
        """
        objs = set(objects)
        return frozenset(
            att for att in self.attributes
            if all((obj, att) in self.incidence for obj in objs)
        )

    def attribute_derivation(self, attributes: Iterable[str]) -> frozenset[str]:
        """Return the objects having every attribute in ``attributes``."""
        atts = set(attributes)
        return frozenset(
            obj for obj in self.objects
            if all((obj, att) in self.incidence for att in atts)
        )

    def intent_of(self, obj: str) -> tuple[str, ...]:
        """Return the attributes of a single object in canonical order."""
        if obj not in self.objects:
            raise KeyError(obj)
        return tuple(att for att in self.attributes if (obj, att) in self.incidence)

    def extent_of(self, att: str) -> tuple[str, ...]:
        """Return the objects having a single attribute in canonical order."""
        if att not in self.attributes:
            raise KeyError(att)
        return tuple(obj for obj in self.objects if (obj, att) in self.incidence)

    def rows(self) -> Iterator[tuple[str, tuple[bool, ...]]]:
        """Yield ``(object, row)`` pairs of the cross table."""
        for obj in self.objects:
            yield obj, tuple((obj, att) in self.incidence for att in self.attributes)

    # ------------------------------------------------------------------
    # Constructions
    # ------------------------------------------------------------------

    def dual(self) -> "Context":
        """Return the context with objects and attributes swapped."""
        return Context(
            objects=self.attributes,
            attributes=self.objects,
            incidence=frozenset((att, obj) for obj, att in self.incidence),
        )

    def apposition(self, other: "Context") -> "Context":
        """Place ``other`` to the right of this context.

        Both contexts must have the same objects and disjoint attributes.
        """
        if frozenset(self.objects) != frozenset(other.objects):
            raise ValueError("Apposition requires both contexts to have the same objects")
        shared = frozenset(self.attributes) & frozenset(other.attributes)
        if shared:
            raise ValueError(f"Apposition requires disjoint attributes, shared: {sorted(shared)!r}")
        return Context(
            objects=self.objects,
            attributes=self.attributes + other.attributes,
            incidence=self.incidence | other.incidence,
        )

    def subposition(self, other: "Context") -> "Context":
        """Place ``other`` below this context.

        Both contexts must have the same attributes and disjoint objects.
        """
        if frozenset(self.attributes) != frozenset(other.attributes):
            raise ValueError("Subposition requires both contexts to have the same attributes")
        shared = frozenset(self.objects) & frozenset(other.objects)
        if shared:
            raise ValueError(f"Subposition requires disjoint objects, shared: {sorted(shared)!r}")
        return Context(
            objects=self.objects + other.objects,
            attributes=self.attributes,
            incidence=self.incidence | other.incidence,
        )


def _unique_names(names: Iterable[str], kind: str) -> tuple[str, ...]:
    names = tuple(names)
    for name in names:
        if not isinstance(name, str):
            raise TypeError(f"Every {kind} name must be a str, got {name!r}")
    return tuple(dict.fromkeys(names))
