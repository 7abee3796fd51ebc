"""Structured addresses for nodes and leaf fields of an expression under edit.

A node is addressed by the sequence of ``left``/``right`` descensions from the
root. Paths are tuples of segments rather than concatenated strings, so two
distinct positions can never share a key. The slash-delimited string form
(``expression/left/right``) is only produced and parsed at the edges, for flat
form records.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from functools import total_ordering

ROOT_SEGMENT = "expression"
_SEPARATOR = "/"


class Segment(StrEnum):
    """One descension step below a binary operation."""

    LEFT = "left"
    RIGHT = "right"


class Field(StrEnum):
    """Leaf fields stored per node."""

    VARIANT = "variant"
    NUMBER = "number"
    NAME = "name"
    OP = "op"


# Pre-order rank: a parent sorts before its children, left before right
_RANK = {Segment.LEFT: 0, Segment.RIGHT: 1}


@total_ordering
@dataclass(frozen=True)
class NodePath:
    """Position of a node in the tree, ordered depth-first."""

    segments: tuple[Segment, ...] = ()

    @classmethod
    def root(cls) -> NodePath:
        return cls()

    def child(self, segment: Segment | str) -> NodePath:
        """Extend this path by one descension."""
        return NodePath((*self.segments, Segment(segment)))

    def leaf(self, field: Field | str) -> LeafKey:
        """Address one leaf field of the node at this path."""
        return LeafKey(self, Field(field))

    @property
    def parent(self) -> NodePath | None:
        if not self.segments:
            return None
        return NodePath(self.segments[:-1])

    @property
    def depth(self) -> int:
        return len(self.segments)

    @property
    def is_root(self) -> bool:
        return not self.segments

    def is_ancestor_of(self, other: NodePath) -> bool:
        """Return True if ``other`` lies strictly below this path."""
        return (
            len(other.segments) > len(self.segments)
            and other.segments[: len(self.segments)] == self.segments
        )

    def is_within(self, other: NodePath) -> bool:
        """Return True if this path equals ``other`` or lies below it."""
        return self == other or other.is_ancestor_of(self)

    @classmethod
    def parse(cls, key: str) -> NodePath:
        """Parse the slash form produced by ``str(path)``.

        Raises:
            ValueError: If the key does not start at the root segment or
                contains a segment other than ``left``/``right``

        """
        head, *rest = key.split(_SEPARATOR)
        if head != ROOT_SEGMENT:
            msg = f"Path '{key}' must start with '{ROOT_SEGMENT}'"
            raise ValueError(msg)
        try:
            return cls(tuple(Segment(part) for part in rest))
        except ValueError:
            msg = f"Path '{key}' contains an invalid segment"
            raise ValueError(msg) from None

    def _sort_key(self) -> tuple[int, ...]:
        return tuple(_RANK[segment] for segment in self.segments)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, NodePath):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __str__(self) -> str:
        return _SEPARATOR.join((ROOT_SEGMENT, *self.segments))


@dataclass(frozen=True)
class LeafKey:
    """A node path combined with one of its leaf fields."""

    path: NodePath
    field: Field

    @classmethod
    def parse(cls, key: str) -> LeafKey:
        """Parse a flat record key.

        A bare node path addresses the node's own discriminator; any other key
        ends with a field suffix (``expression/left/number``).
        """
        head, sep, last = key.rpartition(_SEPARATOR)
        if sep and last in (Field.NUMBER, Field.NAME, Field.OP):
            return cls(NodePath.parse(head), Field(last))
        return cls(NodePath.parse(key), Field.VARIANT)

    def __str__(self) -> str:
        if self.field is Field.VARIANT:
            return str(self.path)
        return f"{self.path}{_SEPARATOR}{self.field}"
