"""Tests for exprform.codecs and exprform.formats.json."""

import json

import pytest

from exprform.codecs import from_builtins, to_builtins
from exprform.formats.json import from_json, to_json
from exprform.nodes import BinaryOp, Number, Operator, Variable


class TestToBuiltins:
    """Test the nested wire shape."""

    def test_number(self) -> None:
        """Test encoding a number."""
        assert to_builtins(Number(10)) == {"number": {"number": 10.0}}

    def test_variable(self) -> None:
        """Test encoding a variable."""
        assert to_builtins(Variable("x")) == {"variable": {"name": "x"}}

    def test_binary_op(self) -> None:
        """Test encoding the canonical request body."""
        tree = BinaryOp(Number(10), Number(10), Operator.ADD)
        assert to_builtins(tree) == {
            "binOp": {
                "left": {"number": {"number": 10.0}},
                "right": {"number": {"number": 10.0}},
                "op": "Add",
            },
        }

    def test_operator_is_plain_string(self) -> None:
        """Test that the encoded operator is a str, not the enum."""
        encoded = to_builtins(BinaryOp(Number(1), Number(2), Operator.DIV))
        assert type(encoded["binOp"]["op"]) is str

    def test_rejects_non_expression(self) -> None:
        """Test that arbitrary objects cannot be encoded."""
        with pytest.raises(TypeError, match="dict"):
            to_builtins({"number": {"number": 1}})  # type: ignore[arg-type]


class TestFromBuiltins:
    """Test decoding the nested wire shape."""

    def test_nested(self) -> None:
        """Test decoding a nested tree with integer literals."""
        data = {
            "binOp": {
                "left": {"variable": {"name": "x"}},
                "right": {
                    "binOp": {
                        "left": {"number": {"number": 2}},
                        "right": {"number": {"number": 3.5}},
                        "op": "Mul",
                    },
                },
                "op": "Sub",
            },
        }
        assert from_builtins(data) == BinaryOp(
            Variable("x"),
            BinaryOp(Number(2), Number(3.5), Operator.MUL),
            Operator.SUB,
        )

    def test_unknown_tag(self) -> None:
        """Test that unknown tags list the available ones."""
        with pytest.raises(ValueError, match="Unknown tag 'const'"):
            from_builtins({"const": {"value": 1}})

    @pytest.mark.parametrize(
        "data",
        [
            {},
            [],
            {"number": {"number": 1}, "variable": {"name": "x"}},
            {"number": 1},
        ],
    )
    def test_malformed_shape(self, data: object) -> None:
        """Test that non single-key objects are rejected."""
        with pytest.raises(ValueError):
            from_builtins(data)

    def test_missing_field(self) -> None:
        """Test that a missing field raises KeyError."""
        with pytest.raises(KeyError, match="op"):
            from_builtins({
                "binOp": {
                    "left": {"number": {"number": 1}},
                    "right": {"number": {"number": 1}},
                },
            })

    def test_legacy_operator_rejected(self) -> None:
        """Test that 'Sum' is not accepted on the wire."""
        with pytest.raises(ValueError):
            from_builtins({
                "binOp": {
                    "left": {"number": {"number": 1}},
                    "right": {"number": {"number": 1}},
                    "op": "Sum",
                },
            })

    def test_invalid_leaf_value(self) -> None:
        """Test that invalid values fail in the node constructors."""
        with pytest.raises(ValueError):
            from_builtins({"variable": {"name": ""}})


class TestJson:
    """Test the JSON format adapter."""

    def test_round_trip(self) -> None:
        """Test JSON encode then decode of a mixed tree."""
        tree = BinaryOp(Variable("rate"), Number(0.5), Operator.MUL)
        assert from_json(to_json(tree)) == tree

    def test_compact(self) -> None:
        """Test compact output without indentation."""
        text = to_json(Variable("x"), indent=None)
        assert text == '{"variable": {"name": "x"}}'

    def test_invalid_json(self) -> None:
        """Test that malformed JSON raises JSONDecodeError."""
        with pytest.raises(json.JSONDecodeError):
            from_json("{not json")

    def test_number_beyond_float_range(self) -> None:
        """Test that a JSON integer too large for a float is rejected."""
        text = '{"number": {"number": 1' + "0" * 400 + "}}"
        with pytest.raises(ValueError, match="too large"):
            from_json(text)
