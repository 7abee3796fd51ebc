"""Expression trees as JSON text."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from exprform.codecs import from_builtins, to_builtins

if TYPE_CHECKING:
    from exprform.nodes import Expression


def to_json(expr: Expression, *, indent: int | None = 2) -> str:
    """Render ``expr`` as the JSON document the evaluation service accepts.

    Pass ``indent=None`` for a single-line document.
    """
    return json.dumps(to_builtins(expr), indent=indent)


def from_json(s: str) -> Expression:
    """Read a tree back from JSON text in the wire shape.

    Raises:
        json.JSONDecodeError: If ``s`` is not JSON at all
        KeyError: If a node object lacks one of its fields
        ValueError: If a node has an unknown tag, a bad operator, or a
            number that is not finite

    """
    return from_builtins(json.loads(s))
