"""Expression tree nodes with automatic tag registration."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import StrEnum
from typing import ClassVar, dataclass_transform


class Operator(StrEnum):
    """Binary operators understood by the evaluation service."""

    ADD = "Add"
    SUB = "Sub"
    MUL = "Mul"
    DIV = "Div"

    @property
    def symbol(self) -> str:
        return _SYMBOLS[self]


_SYMBOLS = {
    Operator.ADD: "+",
    Operator.SUB: "-",
    Operator.MUL: "*",
    Operator.DIV: "/",
}


@dataclass(frozen=True)
@dataclass_transform(frozen_default=True)
class Expression:
    """Base for expression nodes. Subclasses register under a wire tag."""

    tag: ClassVar[str]
    registry: ClassVar[dict[str, type[Expression]]] = {}

    def __init_subclass__(cls, tag: str | None = None) -> None:
        """Register expression subclass with automatic tag derivation."""
        dataclass(frozen=True)(cls)
        cls.tag = tag if tag is not None else cls.__name__.lower()

        if (existing := Expression.registry.get(cls.tag)) and existing is not cls:
            msg = (
                f"Tag '{cls.tag}' already registered to {existing}. "
                "Choose a different tag."
            )
            raise ValueError(msg)

        Expression.registry[cls.tag] = cls

    def depth(self) -> int:
        """Height of the tree rooted at this node (leaves have depth 1)."""
        return 1


class Number(Expression, tag="number"):
    """A numeric literal."""

    value: float

    def __post_init__(self) -> None:
        value = self.value
        if isinstance(value, bool) or not isinstance(value, int | float):
            msg = f"Number value must be a real number, got {type(value).__name__}"
            raise TypeError(msg)
        try:
            converted = float(value)
        except OverflowError:
            msg = "Number value is too large for a float"
            raise ValueError(msg) from None
        if not math.isfinite(converted):
            msg = f"Number value must be finite, got {value!r}"
            raise ValueError(msg)
        object.__setattr__(self, "value", converted)

    def __str__(self) -> str:
        return repr(self.value)


class Variable(Expression, tag="variable"):
    """A named free variable."""

    name: str

    def __post_init__(self) -> None:
        if not isinstance(self.name, str):
            msg = f"Variable name must be a string, got {type(self.name).__name__}"
            raise TypeError(msg)
        if not self.name.strip():
            msg = "Variable name must not be empty"
            raise ValueError(msg)

    def __str__(self) -> str:
        return self.name


class BinaryOp(Expression, tag="binOp"):
    """Binary operation over two exclusively owned subtrees."""

    left: Expression
    right: Expression
    op: Operator

    def __post_init__(self) -> None:
        for side in ("left", "right"):
            child = getattr(self, side)
            if not isinstance(child, Expression):
                msg = (
                    f"BinaryOp.{side} must be an Expression, "
                    f"got {type(child).__name__}"
                )
                raise TypeError(msg)
        # Operator(...) raises ValueError for anything outside the enumeration
        object.__setattr__(self, "op", Operator(self.op))

    def depth(self) -> int:
        return 1 + max(self.left.depth(), self.right.depth())

    def __str__(self) -> str:
        return f"({self.left} {self.op.symbol} {self.right})"
