"""Error types for materialization and submission.

Materialization failures are values, not exceptions: a ``BuildError`` names
the exact node (and field) that blocks conversion so the editor can highlight
it. ``MaterializeError`` wraps one for callers that prefer raising, and
``TransportError`` covers everything that can go wrong talking to the
evaluation service.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from exprform.paths import Field, NodePath

_MAX_VALUE_SHOWN = 40


@dataclass(frozen=True)
class BuildError:
    """Base class for materialization errors.

    All errors include the path of the offending node and a message.
    """

    path: NodePath
    message: str

    def format(self) -> str:
        """Format the error for display."""
        return f"{self.path}: {self.message}"


@dataclass(frozen=True)
class IncompleteNode(BuildError):
    """A reachable node was never given a concrete variant."""

    message: str = field(default="node has no declared variant")


@dataclass(frozen=True)
class InvalidLeaf(BuildError):
    """A required leaf of a concrete variant is missing or malformed."""

    field: Field | None = None
    value: object = None

    def format(self) -> str:
        """Format the invalid leaf error for display."""
        text = f"{self.path}/{self.field}: {self.message}"
        if self.value is not None:
            shown = repr(self.value)
            if len(shown) > _MAX_VALUE_SHOWN:
                shown = shown[:_MAX_VALUE_SHOWN] + "..."
            text += f" (got {shown})"
        return text


class MaterializeError(ValueError):
    """Raised when an incomplete builder is converted on demand."""

    def __init__(self, error: BuildError) -> None:
        super().__init__(error.format())
        self.error = error


class TransportError(Exception):
    """The evaluation service could not be reached or rejected the request."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
