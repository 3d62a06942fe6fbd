"""Tests for known/unknown witness values."""

import pytest

from primitives.field import FF, felt, to_ints
from primitives.value import Value


class TestValue:
    """Tests for Value arithmetic and accessors."""

    def test_known_arithmetic(self) -> None:
        a = Value.known(FF(3))
        b = Value.known(FF(4))
        assert int((a * b).inner) == 12
        assert int((a + b).inner) == 7
        assert int((b - a).inner) == 1

    def test_unknown_propagates(self) -> None:
        a = Value.known(FF(3))
        u = Value.unknown()
        assert not (a + u).is_known
        assert not (u * a).is_known
        assert not (-u).is_known

    def test_mixed_with_raw_ints(self) -> None:
        """Raw operands are treated as known."""
        a = Value.known(5)
        assert (a + 1).inner == 6
        assert (2 * a).inner == 10
        assert (10 - a).inner == 5

    def test_inner_of_unknown_raises(self) -> None:
        with pytest.raises(ValueError):
            Value.unknown().inner

    def test_unwrap_or(self) -> None:
        assert Value.unknown().unwrap_or(7) == 7
        assert Value.known(1).unwrap_or(7) == 1

    def test_map_and_then_zip(self) -> None:
        assert Value.known(2).map(lambda v: v + 1) == Value.known(3)
        assert Value.unknown().map(lambda v: v + 1) == Value.unknown()
        assert Value.known(2).and_then(lambda v: Value.unknown()) == Value.unknown()
        assert Value.known(1).zip(Value.known(2)).inner == (1, 2)
        assert not Value.known(1).zip(Value.unknown()).is_known

    def test_coerce_passes_values_through(self) -> None:
        v = Value.unknown()
        assert Value.coerce(v) is v
        assert Value.coerce(4) == Value.known(4)


class TestFieldHelpers:
    """Tests for integer embedding into the field."""

    def test_felt_reduces_negative(self) -> None:
        assert int(felt(FF, -1)) == FF.order - 1

    def test_felt_reduces_oversized(self) -> None:
        assert int(felt(FF, FF.order + 5)) == 5

    def test_to_ints(self) -> None:
        assert to_ints(FF([1, 2, 3])) == [1, 2, 3]
        assert to_ints(FF(9)) == [9]
