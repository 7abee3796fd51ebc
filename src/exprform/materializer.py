"""Conversion of sparse builder state into a complete expression tree."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeAlias, cast

from exprform.errors import BuildError, IncompleteNode, InvalidLeaf, MaterializeError
from exprform.nodes import BinaryOp, Expression, Number, Operator, Variable
from exprform.paths import Field, NodePath, Segment
from exprform.values import VariantTag

if TYPE_CHECKING:
    from collections.abc import Callable

    from exprform.values import LeafValue

    Lookup: TypeAlias = Callable[[NodePath, Field], LeafValue | None]


@dataclass(frozen=True)
class MaterializeResult:
    """Outcome of a materialization attempt: a tree or the first blocking error."""

    expression: Expression | None = None
    error: BuildError | None = None

    def __post_init__(self) -> None:
        if (self.expression is None) == (self.error is None):
            msg = "MaterializeResult needs exactly one of expression or error"
            raise ValueError(msg)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Expression:
        """Return the expression or raise the error as ``MaterializeError``."""
        if self.expression is None:
            raise MaterializeError(cast("BuildError", self.error))
        return self.expression


class _Failed(Exception):  # noqa: N818
    """Internal short-circuit carrying the first error found."""

    def __init__(self, error: BuildError) -> None:
        super().__init__(error.format())
        self.error = error


def materialize(lookup: Lookup, path: NodePath | None = None) -> MaterializeResult:
    """Convert the subtree at ``path`` (root by default) into an Expression.

    Args:
        lookup: Returns the stored value for a (path, field) pair, or None
        path: Node to start from

    Returns:
        A result holding either the expression or the first error met in a
        left-first, depth-first walk

    """
    start = NodePath.root() if path is None else path
    try:
        return MaterializeResult(expression=_convert(lookup, start))
    except _Failed as failed:
        return MaterializeResult(error=failed.error)


def _convert(lookup: Lookup, start: NodePath) -> Expression:
    # Explicit stack. A binary node is popped twice: first to schedule its
    # children (left on top), then, once both are built, to read its operator.
    built: list[Expression] = []
    pending: list[tuple[NodePath, bool]] = [(start, False)]
    while pending:
        path, children_built = pending.pop()
        if children_built:
            right = built.pop()
            left = built.pop()
            built.append(BinaryOp(left, right, _read_operator(lookup, path)))
            continue

        match lookup(path, Field.VARIANT):
            case VariantTag.NUMBER:
                built.append(Number(_read_number(lookup, path)))
            case VariantTag.VARIABLE:
                built.append(Variable(_read_name(lookup, path)))
            case VariantTag.EXPRESSION:
                pending.append((path, True))
                pending.append((path.child(Segment.RIGHT), False))
                pending.append((path.child(Segment.LEFT), False))
            case _:
                raise _Failed(IncompleteNode(path))
    return built.pop()


def _read_number(lookup: Lookup, path: NodePath) -> float:
    raw = lookup(path, Field.NUMBER)
    if raw is None:
        raise _Failed(
            InvalidLeaf(path, "number is missing", field=Field.NUMBER),
        )
    if isinstance(raw, str) and "_" in raw:
        raise _Failed(
            InvalidLeaf(path, "not a number", field=Field.NUMBER, value=raw),
        )
    try:
        value = float(raw.strip()) if isinstance(raw, str) else float(raw)
    except (TypeError, ValueError, OverflowError):
        raise _Failed(
            InvalidLeaf(path, "not a number", field=Field.NUMBER, value=raw),
        ) from None
    if not math.isfinite(value):
        raise _Failed(
            InvalidLeaf(path, "number must be finite", field=Field.NUMBER, value=raw),
        )
    return value


def _read_name(lookup: Lookup, path: NodePath) -> str:
    raw = lookup(path, Field.NAME)
    if not isinstance(raw, str) or not raw.strip():
        raise _Failed(
            InvalidLeaf(path, "variable name is missing", field=Field.NAME, value=raw),
        )
    return raw


def _read_operator(lookup: Lookup, path: NodePath) -> Operator:
    raw = lookup(path, Field.OP)
    if raw is None:
        raise _Failed(InvalidLeaf(path, "operator is missing", field=Field.OP))
    try:
        return Operator(raw)
    except ValueError:
        valid = [op.value for op in Operator]
        raise _Failed(
            InvalidLeaf(
                path,
                f"operator must be one of {valid}",
                field=Field.OP,
                value=raw,
            ),
        ) from None
