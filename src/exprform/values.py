"""Leaf values stored by the builder."""

from __future__ import annotations

from enum import StrEnum
from typing import TypeAlias, cast

from exprform.nodes import Operator
from exprform.paths import Field


class VariantTag(StrEnum):
    """Declared shape of a node under edit."""

    NUMBER = "Number"
    VARIABLE = "Variable"
    EXPRESSION = "Expression"
    UNKNOWN = "Unknown"


# Raw text is accepted for numbers and operators so that incremental input
# ("1e", "Su") can be stored and reported later by the materializer.
NumberValue: TypeAlias = float | int | str
TextValue: TypeAlias = str
OperatorValue: TypeAlias = Operator | str
LeafValue: TypeAlias = NumberValue | TextValue | OperatorValue | VariantTag

_ACCEPTED: dict[Field, tuple[type, ...]] = {
    Field.VARIANT: (VariantTag, str),
    Field.NUMBER: (float, int, str),
    Field.NAME: (str,),
    Field.OP: (Operator, str),
}


def check_leaf_value(field: Field, value: object) -> LeafValue:
    """Check that ``value`` belongs to the slot of ``field``.

    Only the Python type is checked here. Whether the text parses is left to
    materialization, since partial input is expected while editing.

    Raises:
        TypeError: If the value has the wrong type for the field
        ValueError: If a variant tag string is not a known tag

    """
    accepted = _ACCEPTED[field]
    if isinstance(value, bool) or not isinstance(value, accepted):
        names = " | ".join(t.__name__ for t in accepted)
        msg = (
            f"Field '{field}' expects {names}, got {type(value).__name__}"
        )
        raise TypeError(msg)
    if field is Field.VARIANT:
        return VariantTag(cast("str", value))
    return cast("LeafValue", value)
