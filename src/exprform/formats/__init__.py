"""Text encodings of the expression wire shape.

JSON is the only one: the same document the gateway sends as the
``POST /exp`` body, usable for fixtures, logs and saved drafts.
"""

from exprform.formats.json import from_json, to_json

__all__ = ["from_json", "to_json"]
