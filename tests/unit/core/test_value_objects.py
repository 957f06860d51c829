"""
Unit tests for the core value objects.
"""

from decimal import Decimal

import pytest

from orderflow.core.domain import Money, Quantity


class TestMoney:
    def test_amount_is_kept_at_two_decimals(self):
        assert Money.of("10.005").amount == Decimal("10.01")
        assert Money.of(19.99).amount == Decimal("19.99")

    def test_negative_amount_is_rejected(self):
        with pytest.raises(ValueError):
            Money.of("-0.01")

    def test_multiply_and_add(self):
        total = Money.of("10.00").multiply(3).add(Money.of("0.50"))
        assert total == Money.of("30.50")

    def test_add_rejects_other_currency(self):
        with pytest.raises(ValueError):
            Money.of("1.00").add(Money(Decimal("1.00"), currency="EUR"))

    def test_zero(self):
        assert Money.zero().is_zero()


class TestQuantity:
    def test_negative_is_rejected(self):
        with pytest.raises(ValueError):
            Quantity(-1)

    def test_availability(self):
        stock = Quantity(5)
        assert stock.is_available(5)
        assert not stock.is_available(6)

    def test_subtract_below_zero_fails(self):
        with pytest.raises(ValueError):
            Quantity(2).subtract(3)
        assert Quantity(2).subtract(2).is_zero()
