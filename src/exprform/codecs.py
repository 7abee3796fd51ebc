"""Conversion between expression trees and JSON-compatible builtins.

Wire shape, one single-key object per node:
    {"number": {"number": 10.0}}
    {"variable": {"name": "x"}}
    {"binOp": {"left": <node>, "right": <node>, "op": "Add"}}
"""

from __future__ import annotations

from typing import Any

from exprform.nodes import BinaryOp, Expression, Number, Operator, Variable

# Payload key for each variant's own field, keyed by wire tag
_NUMBER_KEY = "number"
_NAME_KEY = "name"


def to_builtins(expr: Expression) -> dict[str, Any]:
    """Convert an expression tree to nested dicts of JSON-compatible values.

    Raises:
        TypeError: If ``expr`` is not an Expression

    """
    match expr:
        case Number(value=value):
            return {Number.tag: {_NUMBER_KEY: value}}
        case Variable(name=name):
            return {Variable.tag: {_NAME_KEY: name}}
        case BinaryOp(left=left, right=right, op=op):
            return {
                BinaryOp.tag: {
                    "left": to_builtins(left),
                    "right": to_builtins(right),
                    "op": op.value,
                },
            }
    msg = f"Cannot serialize object of type {type(expr).__name__}"
    raise TypeError(msg)


def from_builtins(data: Any) -> Expression:
    """Rebuild an expression tree from its builtins form.

    Raises:
        KeyError: If a required field is missing
        ValueError: If the data is not a single-key object with a known tag,
            or a field value is invalid
        TypeError: If a field value has the wrong type

    """
    if not isinstance(data, dict) or len(data) != 1:
        msg = "Expected an object with exactly one variant key"
        raise ValueError(msg)
    ((tag, payload),) = data.items()
    if not isinstance(payload, dict):
        msg = f"Payload of '{tag}' must be an object"
        raise ValueError(msg)

    if tag == Number.tag:
        return Number(_require(payload, _NUMBER_KEY, tag))
    if tag == Variable.tag:
        return Variable(_require(payload, _NAME_KEY, tag))
    if tag == BinaryOp.tag:
        return BinaryOp(
            left=from_builtins(_require(payload, "left", tag)),
            right=from_builtins(_require(payload, "right", tag)),
            op=Operator(_require(payload, "op", tag)),
        )

    available = list(Expression.registry)
    msg = f"Unknown tag '{tag}'. Available tags: {available}"
    raise ValueError(msg)


def _require(payload: dict[str, Any], key: str, tag: str) -> Any:
    if key not in payload:
        msg = f"Missing required '{key}' field for '{tag}'"
        raise KeyError(msg)
    return payload[key]
