"""exprform - Build arithmetic expression trees from flat form input."""

from exprform.builder import (
    Builder,
    NodeView,
    iter_views,
)
from exprform.codecs import (
    from_builtins,
    to_builtins,
)
from exprform.config import GatewayConfig
from exprform.errors import (
    BuildError,
    IncompleteNode,
    InvalidLeaf,
    MaterializeError,
    TransportError,
)
from exprform.formats.json import (
    from_json,
    to_json,
)
from exprform.gateway import (
    ExpressionGateway,
    Submission,
    SubmissionResponse,
    SubmissionState,
)
from exprform.materializer import (
    MaterializeResult,
    materialize,
)
from exprform.nodes import (
    BinaryOp,
    Expression,
    Number,
    Operator,
    Variable,
)
from exprform.paths import (
    Field,
    LeafKey,
    NodePath,
    Segment,
)
from exprform.values import (
    LeafValue,
    VariantTag,
)

__all__ = [
    # Data model
    "BinaryOp",
    # Errors
    "BuildError",
    # Editing
    "Builder",
    "ExpressionGateway",
    "Expression",
    "Field",
    # Submission
    "GatewayConfig",
    "IncompleteNode",
    "InvalidLeaf",
    "LeafKey",
    "LeafValue",
    "MaterializeError",
    "MaterializeResult",
    "NodePath",
    "NodeView",
    "Number",
    "Operator",
    "Segment",
    "Submission",
    "SubmissionResponse",
    "SubmissionState",
    "TransportError",
    "Variable",
    "VariantTag",
    # Serialization
    "from_builtins",
    "from_json",
    "iter_views",
    "materialize",
    "to_builtins",
    "to_json",
]
