"""Tests for exprform.nodes module."""

import math

import pytest

from exprform.nodes import BinaryOp, Expression, Number, Operator, Variable


class TestRegistration:
    """Test tag registration of expression variants."""

    def test_builtin_tags(self) -> None:
        """Test the wire tags of the three variants."""
        assert Number.tag == "number"
        assert Variable.tag == "variable"
        assert BinaryOp.tag == "binOp"

    def test_registry_contains_variants(self) -> None:
        """Test that variants are registered by tag."""
        assert Expression.registry["number"] is Number
        assert Expression.registry["variable"] is Variable
        assert Expression.registry["binOp"] is BinaryOp

    def test_duplicate_tag_rejected(self) -> None:
        """Test that a second class cannot claim an existing tag."""
        with pytest.raises(ValueError, match="already registered"):

            class Other(Expression, tag="number"):
                value: float


class TestNumber:
    """Test Number construction."""

    def test_int_stored_as_float(self) -> None:
        """Test that integers are normalised to float."""
        node = Number(10)
        assert node.value == 10.0
        assert isinstance(node.value, float)

    @pytest.mark.parametrize("value", [math.inf, -math.inf, math.nan])
    def test_non_finite_rejected(self, value: float) -> None:
        """Test that inf and nan cannot be stored."""
        with pytest.raises(ValueError, match="finite"):
            Number(value)

    def test_int_beyond_float_range_rejected(self) -> None:
        """Test that an int too large for a float raises ValueError."""
        with pytest.raises(ValueError, match="too large"):
            Number(10**400)

    @pytest.mark.parametrize("value", ["10", True, None])
    def test_non_number_rejected(self, value: object) -> None:
        """Test that strings, bools and None are not numbers."""
        with pytest.raises(TypeError):
            Number(value)  # type: ignore[arg-type]

    def test_is_frozen(self) -> None:
        """Test that Number instances are immutable."""
        node = Number(1.0)
        with pytest.raises((AttributeError, TypeError)):
            node.value = 2.0  # type: ignore[misc]


class TestVariable:
    """Test Variable construction."""

    def test_name_kept(self) -> None:
        """Test that the name is stored unchanged."""
        assert Variable("x").name == "x"

    @pytest.mark.parametrize("name", ["", "   "])
    def test_blank_name_rejected(self, name: str) -> None:
        """Test that blank names are rejected."""
        with pytest.raises(ValueError, match="empty"):
            Variable(name)

    def test_non_string_rejected(self) -> None:
        """Test that non-string names are rejected."""
        with pytest.raises(TypeError):
            Variable(3)  # type: ignore[arg-type]


class TestBinaryOp:
    """Test BinaryOp construction, equality and rendering."""

    def test_operator_string_coerced(self) -> None:
        """Test that a valid operator string becomes the enum member."""
        node = BinaryOp(Number(1), Number(2), "Sub")  # type: ignore[arg-type]
        assert node.op is Operator.SUB

    def test_legacy_sum_rejected(self) -> None:
        """Test that the legacy 'Sum' value is not mapped to Add."""
        with pytest.raises(ValueError, match="Sum"):
            BinaryOp(Number(1), Number(2), "Sum")  # type: ignore[arg-type]

    def test_child_must_be_expression(self) -> None:
        """Test that children must be Expression instances."""
        with pytest.raises(TypeError, match=r"BinaryOp\.right"):
            BinaryOp(Number(1), 2, Operator.ADD)  # type: ignore[arg-type]

    def test_structural_equality(self) -> None:
        """Test that equal trees compare and hash equal."""
        a = BinaryOp(Number(10), Variable("x"), Operator.ADD)
        b = BinaryOp(Number(10.0), Variable("x"), Operator.ADD)
        assert a == b
        assert hash(a) == hash(b)
        assert a != BinaryOp(Number(10), Variable("x"), Operator.MUL)

    def test_pattern_matching(self) -> None:
        """Test inspection with structural pattern matching."""
        node = BinaryOp(Number(2), Variable("y"), Operator.MUL)
        match node:
            case BinaryOp(left=Number(value=v), right=Variable(name=n), op=op):
                assert (v, n, op) == (2.0, "y", Operator.MUL)
            case _:
                pytest.fail("pattern did not match")

    def test_str_renders_infix(self) -> None:
        """Test the parenthesised infix rendering."""
        node = BinaryOp(
            BinaryOp(Number(1), Variable("x"), Operator.ADD),
            Number(4),
            Operator.DIV,
        )
        assert str(node) == "((1.0 + x) / 4.0)"

    def test_depth(self) -> None:
        """Test tree height."""
        leaf = Number(1)
        assert leaf.depth() == 1
        node = BinaryOp(BinaryOp(leaf, leaf, Operator.ADD), leaf, Operator.SUB)
        assert node.depth() == 3
