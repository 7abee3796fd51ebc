"""Incremental, path-addressed editing state for an expression tree."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal, overload

from exprform.materializer import MaterializeResult, materialize
from exprform.nodes import BinaryOp, Expression, Number, Operator, Variable
from exprform.paths import Field, LeafKey, NodePath, Segment
from exprform.values import VariantTag, check_leaf_value

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from exprform.values import LeafValue, NumberValue, OperatorValue

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NodeView:
    """What a renderer needs to draw one node.

    ``children`` is empty unless the node is declared as an expression, in
    which case it holds the left and right paths to descend into.
    """

    path: NodePath
    variant: VariantTag
    number: LeafValue | None = None
    name: LeafValue | None = None
    op: LeafValue | None = None
    children: tuple[NodePath, ...] = ()


class Builder:
    """Sparse, possibly incomplete expression tree under active editing.

    Only touched nodes are stored. A node with no entry, or no declared
    variant, is Unknown. Redeclaring a node purges everything stored at or
    below it, so data entered for an earlier shape can never become reachable
    again.

    Example:
        builder = Builder()
        root = NodePath.root()
        builder.declare_variant(root, VariantTag.EXPRESSION)
        builder.declare_variant(root.child("left"), VariantTag.NUMBER)
        builder.set_leaf(root.child("left"), Field.NUMBER, "10")
        ...
        result = builder.materialize()

    """

    def __init__(self) -> None:
        self._nodes: dict[NodePath, dict[Field, LeafValue]] = {}

    @classmethod
    def from_expression(cls, expression: Expression) -> Builder:
        """Seed a builder with an existing tree, for edit flows."""
        builder = cls()
        builder._seed(NodePath.root(), expression)
        return builder

    @classmethod
    def from_record(cls, record: Mapping[str, LeafValue]) -> Builder:
        """Load a flat form record keyed by slash-delimited leaf keys.

        Entries are applied shallowest first so that a node's declaration
        never purges values given for its own subtree in the same record.

        Raises:
            ValueError: If a key is not a valid leaf key
            TypeError: If a value has the wrong type for its field

        """
        keyed = [(LeafKey.parse(key), value) for key, value in record.items()]
        keyed.sort(
            key=lambda item: (item[0].path.depth, item[0].field is not Field.VARIANT),
        )
        builder = cls()
        for key, value in keyed:
            builder.set_leaf(key.path, key.field, value)
        return builder

    def _seed(self, root: NodePath, expression: Expression) -> None:
        # Only called on a fresh builder, so nodes are written without a purge.
        stack = [(root, expression)]
        fields: dict[Field, LeafValue]
        while stack:
            path, node = stack.pop()
            match node:
                case Number(value=value):
                    fields = {Field.VARIANT: VariantTag.NUMBER, Field.NUMBER: value}
                case Variable(name=name):
                    fields = {Field.VARIANT: VariantTag.VARIABLE, Field.NAME: name}
                case BinaryOp(left=left, right=right, op=op):
                    fields = {Field.VARIANT: VariantTag.EXPRESSION, Field.OP: op}
                    stack.append((path.child(Segment.RIGHT), right))
                    stack.append((path.child(Segment.LEFT), left))
                case _:
                    msg = f"Cannot seed from {type(node).__name__}"
                    raise TypeError(msg)
            self._nodes[path] = fields

    @overload
    def set_leaf(
        self, path: NodePath, field: Literal[Field.NUMBER], value: NumberValue
    ) -> None: ...
    @overload
    def set_leaf(self, path: NodePath, field: Literal[Field.NAME], value: str) -> None: ...
    @overload
    def set_leaf(
        self, path: NodePath, field: Literal[Field.OP], value: OperatorValue
    ) -> None: ...
    @overload
    def set_leaf(
        self, path: NodePath, field: Literal[Field.VARIANT], value: VariantTag | str
    ) -> None: ...
    @overload
    def set_leaf(self, path: NodePath, field: Field, value: LeafValue) -> None: ...

    def set_leaf(self, path: NodePath, field: Field, value: LeafValue) -> None:
        """Overwrite one leaf value.

        Values are stored as given; parsing happens at materialization.
        Writing the ``variant`` field is a redeclaration.

        Raises:
            TypeError: If the value has the wrong type for the field

        """
        field = Field(field)
        checked = check_leaf_value(field, value)
        if field is Field.VARIANT:
            self.declare_variant(path, checked)
            return
        self._nodes.setdefault(path, {})[field] = checked

    def declare_variant(self, path: NodePath, variant: VariantTag | str) -> None:
        """Redeclare the shape of the node at ``path``.

        Everything stored at or below ``path`` is removed first, then the new
        variant is recorded. Declaring Unknown leaves the node absent.
        """
        tag = VariantTag(variant)
        purged = self._purge(path)
        if purged:
            logger.debug("Purged %d stale node(s) under %s", purged, path)
        if tag is not VariantTag.UNKNOWN:
            self._nodes[path] = {Field.VARIANT: tag}
        logger.debug("Declared %s as %s", path, tag)

    def _purge(self, path: NodePath) -> int:
        stale = [stored for stored in self._nodes if stored.is_within(path)]
        for stored in stale:
            del self._nodes[stored]
        return len(stale)

    def variant(self, path: NodePath) -> VariantTag:
        """Return the declared variant of the node at ``path``."""
        value = self._nodes.get(path, {}).get(Field.VARIANT)
        return value if isinstance(value, VariantTag) else VariantTag.UNKNOWN

    def get(self, path: NodePath, field: Field) -> LeafValue | None:
        """Return the raw stored value of one leaf, or None."""
        return self._nodes.get(path, {}).get(Field(field))

    def get_node_view(self, path: NodePath) -> NodeView:
        """Describe the node at ``path`` for rendering.

        Leaf values are reported only for the fields the declared variant
        uses. Descent into children is left to the caller.
        """
        variant = self.variant(path)
        match variant:
            case VariantTag.NUMBER:
                return NodeView(path, variant, number=self.get(path, Field.NUMBER))
            case VariantTag.VARIABLE:
                return NodeView(path, variant, name=self.get(path, Field.NAME))
            case VariantTag.EXPRESSION:
                return NodeView(
                    path,
                    variant,
                    op=self.get(path, Field.OP),
                    children=(path.child(Segment.LEFT), path.child(Segment.RIGHT)),
                )
            case _:
                return NodeView(path, VariantTag.UNKNOWN)

    def materialize(self) -> MaterializeResult:
        """Convert the current state into an Expression, or report why not."""
        result = materialize(self.get)
        if result.error is not None:
            logger.debug("Materialization blocked: %s", result.error.format())
        else:
            logger.debug("Materialized a %s tree", type(result.expression).__name__)
        return result

    def to_record(self) -> dict[str, LeafValue]:
        """Flatten the stored state into a string-keyed record.

        Operators and variant tags are written as their plain string values.
        """
        record: dict[str, LeafValue] = {}
        for path in sorted(self._nodes):
            for field, value in self._nodes[path].items():
                if isinstance(value, VariantTag | Operator):
                    value = value.value
                record[str(path.leaf(field))] = value
        return record

    def paths(self) -> list[NodePath]:
        """Stored node paths in depth-first order."""
        return sorted(self._nodes)

    def clear(self) -> None:
        self._nodes.clear()

    def __contains__(self, path: object) -> bool:
        return path in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __repr__(self) -> str:
        return f"Builder({self.to_record()!r})"


def iter_views(builder: Builder, path: NodePath | None = None) -> Iterator[NodeView]:
    """Yield the view of every reachable node, depth-first, left before right.

    Traversal follows declared variants only, so its cost is bounded by the
    reachable tree, not by everything stored.
    """
    stack = [NodePath.root() if path is None else path]
    while stack:
        view = builder.get_node_view(stack.pop())
        yield view
        stack.extend(reversed(view.children))
