"""Tests for the Money amount type."""

from decimal import Decimal

import pytest

from checkout_promotions.money import Money


class TestConstruction:
    def test_quantizes_to_cents(self) -> None:
        assert Money("10.005").amount == Decimal("10.01")
        assert Money("10.004").amount == Decimal("10.00")

    def test_float_input_has_no_binary_noise(self) -> None:
        assert Money(37.25).amount == Decimal("37.25")

    def test_from_cents(self) -> None:
        assert Money.from_cents(1999) == Money("19.99")
        assert Money.from_cents(Decimal("1999.5")) == Money("20.00")

    def test_zero(self) -> None:
        assert Money.zero().is_zero()
        assert Money.zero().cents == 0


class TestArithmetic:
    def test_add_and_subtract(self) -> None:
        assert Money("10.50") + Money("0.25") == Money("10.75")
        assert Money("10.50") - Money("0.75") == Money("9.75")

    def test_subtract_may_go_negative(self) -> None:
        """Callers are responsible for clamping."""
        assert Money("1.00") - Money("2.00") == Money("-1.00")

    def test_multiply_by_scalar(self) -> None:
        assert Money("30.00") * 5 == Money("150.00")
        assert 3 * Money("1.10") == Money("3.30")
        assert Money("10.00") * Decimal("0.85") == Money("8.50")

    def test_multiply_rounds_half_up(self) -> None:
        assert Money("0.05") * Decimal("0.5") == Money("0.03")

    def test_sum_starts_from_zero(self) -> None:
        assert sum([Money("1.00"), Money("2.50")]) == Money("3.50")

    def test_floor_to_whole_units(self) -> None:
        assert Money("19.99").floor() == Money("19.00")

    def test_cents(self) -> None:
        assert Money("123.45").cents == 12345


class TestComparison:
    def test_ordering(self) -> None:
        assert Money("1.00") < Money("1.01")
        assert Money("2.00") >= Money("2.00")
        assert max(Money("-1.00"), Money.zero()) == Money.zero()

    def test_equality_and_hash(self) -> None:
        assert Money("5") == Money("5.00")
        assert hash(Money("5")) == hash(Money("5.00"))

    def test_not_equal_to_plain_numbers(self) -> None:
        assert Money("5.00") != 5

    def test_money_times_money_is_rejected(self) -> None:
        with pytest.raises(TypeError):
            Money("1.00") * Money("2.00")
