"""
Tests for weight-based line pricing.

Covers commodity value, both making charge kinds, input validation,
rounding of persisted values and determinism.
"""

from decimal import Decimal

import pytest

from apps.pricing.exceptions import InvalidChargeConfig, PricingError
from apps.pricing.services import (
    CHARGE_FIXED,
    CHARGE_PERCENTAGE,
    LinePrice,
    calculate_commodity_value,
    calculate_line_price,
    calculate_making_charge,
    round_money,
    to_decimal,
)


class TestCommodityValue:
    """Test commodity (metal) value calculation."""

    def test_weight_times_rate(self):
        assert calculate_commodity_value(Decimal("10"), Decimal("6000")) == Decimal("60000")

    def test_floats_are_converted_through_str(self):
        """0.1 g at 3 per gram is exactly 0.3, not 0.30000000000000004."""
        assert calculate_commodity_value(0.1, 3) == Decimal("0.3")

    def test_zero_weight_rejected(self):
        with pytest.raises(PricingError):
            calculate_commodity_value(0, Decimal("6000"))

    def test_negative_rate_rejected(self):
        with pytest.raises(PricingError):
            calculate_commodity_value(Decimal("10"), Decimal("-1"))

    def test_non_numeric_rejected(self):
        with pytest.raises(PricingError):
            calculate_commodity_value("ten", Decimal("6000"))


class TestMakingCharge:
    """Test making charge calculation."""

    def test_fixed_is_per_gram(self):
        charge = calculate_making_charge(Decimal("5.5"), Decimal("200"), CHARGE_FIXED)
        assert charge == Decimal("1100")

    def test_percentage_of_commodity_value(self):
        charge = calculate_making_charge(
            Decimal("10"), Decimal("10"), CHARGE_PERCENTAGE, commodity_value=Decimal("60000")
        )
        assert charge == Decimal("6000")

    def test_percentage_without_commodity_value_rejected(self):
        with pytest.raises(InvalidChargeConfig):
            calculate_making_charge(Decimal("10"), Decimal("10"), CHARGE_PERCENTAGE)

    def test_unknown_kind_rejected(self):
        with pytest.raises(InvalidChargeConfig):
            calculate_making_charge(Decimal("10"), Decimal("10"), "per_piece")

    def test_negative_charge_rejected(self):
        with pytest.raises(InvalidChargeConfig):
            calculate_making_charge(Decimal("10"), Decimal("-5"), CHARGE_FIXED)

    def test_invalid_charge_config_is_a_pricing_error(self):
        assert issubclass(InvalidChargeConfig, PricingError)
        assert issubclass(PricingError, ValueError)


class TestLinePrice:
    """Test full line pricing."""

    def test_percentage_line(self):
        line = calculate_line_price(Decimal("10"), Decimal("6000"), Decimal("10"), CHARGE_PERCENTAGE)

        assert line.commodity_value == Decimal("60000")
        assert line.making_charge == Decimal("6000")
        assert line.unit_price == Decimal("66000")
        assert line.total == Decimal("66000")

    def test_quantity_multiplies_unit_price(self):
        line = calculate_line_price(
            Decimal("2"), Decimal("100"), Decimal("10"), CHARGE_FIXED, quantity=3
        )

        assert line.unit_price == Decimal("220")
        assert line.commodity_total == Decimal("600")
        assert line.making_total == Decimal("60")
        assert line.total == Decimal("660")

    def test_zero_quantity_rejected(self):
        with pytest.raises(PricingError):
            calculate_line_price(Decimal("1"), Decimal("100"), Decimal("0"), CHARGE_FIXED, quantity=0)

    def test_no_rounding_inside_calculator(self):
        line = calculate_line_price(
            Decimal("1.115"), Decimal("3"), Decimal("0"), CHARGE_FIXED
        )
        assert line.commodity_value == Decimal("3.345")

    def test_rounded_uses_half_up(self):
        line = calculate_line_price(
            Decimal("1.115"), Decimal("3"), Decimal("0"), CHARGE_FIXED
        ).rounded()

        assert line.commodity_value == Decimal("3.35")
        assert line.making_charge == Decimal("0.00")
        assert line.unit_price == line.commodity_value + line.making_charge

    def test_identical_inputs_give_identical_outputs(self):
        args = ("7.777", 6123.45, "12.5", CHARGE_PERCENTAGE)
        first = calculate_line_price(*args, quantity=2)
        second = calculate_line_price(*args, quantity=2)

        assert first == second
        assert str(first.commodity_value) == str(second.commodity_value)
        assert str(first.making_charge) == str(second.making_charge)
        assert isinstance(first, LinePrice)


class TestMoneyHelpers:
    """Test Decimal helpers."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (Decimal("0.005"), Decimal("0.01")),
            (Decimal("0.004"), Decimal("0.00")),
            (Decimal("2.675"), Decimal("2.68")),
            (Decimal("-1.005"), Decimal("-1.01")),
        ],
    )
    def test_round_money(self, value, expected):
        assert round_money(value) == expected

    def test_to_decimal_rejects_booleans_and_none(self):
        with pytest.raises(PricingError):
            to_decimal(True)
        with pytest.raises(PricingError):
            to_decimal(None)

    def test_to_decimal_rejects_nan(self):
        with pytest.raises(PricingError):
            to_decimal("NaN")
