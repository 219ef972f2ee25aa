"""
Pricing services for weight-based jewellery invoicing.

Two building blocks, both free of I/O:

- Line pricing: metal (commodity) value from weight and the day's rate, plus
  a making charge that is either a per-gram amount or a percentage of the
  metal value.
- Invoice aggregation: subtotal, discount, taxable amount, tax and grand total.

Money is carried as ``Decimal``. Values are rounded ROUND_HALF_UP to two
decimal places exactly once, when they become something that is persisted:
the per-unit commodity value and making charge of a line, the discount amount
and the tax amount. Every other total is an exact sum of rounded values.
"""

from dataclasses import dataclass, replace
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable, Optional, Union

from .exceptions import InvalidChargeConfig, InvalidDiscountPolicy, PricingError

MONEY_QUANTUM = Decimal("0.01")
ZERO = Decimal("0")
HUNDRED = Decimal("100")

# Making charge kinds
CHARGE_FIXED = "fixed"
CHARGE_PERCENTAGE = "percentage"
CHARGE_KINDS = (CHARGE_FIXED, CHARGE_PERCENTAGE)

# Discount overflow policies
OVERFLOW_ALLOW_NEGATIVE = "allow-negative"
OVERFLOW_CLAMP = "clamp"


def to_decimal(value, field: str = "value") -> Decimal:
    """
    Convert a number to Decimal without binary float noise.

    Floats go through ``str`` so ``0.1`` becomes ``Decimal("0.1")``.
    """
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool) or value is None:
        raise PricingError(f"{field} must be a number")
    else:
        try:
            result = Decimal(str(value))
        except (InvalidOperation, ValueError):
            raise PricingError(f"{field} must be a number, got {value!r}")
    if not result.is_finite():
        raise PricingError(f"{field} must be finite")
    return result


def round_money(value: Decimal) -> Decimal:
    """Round to two decimal places, half up."""
    return value.quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class LinePrice:
    """
    Priced cart line.

    ``commodity_value`` and ``making_charge`` are per unit; ``quantity``
    multiplies both.
    """

    weight: Decimal
    rate: Decimal
    quantity: int
    commodity_value: Decimal
    making_charge: Decimal

    @property
    def unit_price(self) -> Decimal:
        return self.commodity_value + self.making_charge

    @property
    def commodity_total(self) -> Decimal:
        return self.commodity_value * self.quantity

    @property
    def making_total(self) -> Decimal:
        return self.making_charge * self.quantity

    @property
    def total(self) -> Decimal:
        return self.unit_price * self.quantity

    def rounded(self) -> "LinePrice":
        """Return a copy with per-unit values rounded for persistence."""
        return replace(
            self,
            commodity_value=round_money(self.commodity_value),
            making_charge=round_money(self.making_charge),
        )


def calculate_commodity_value(weight, rate) -> Decimal:
    """
    Calculate the metal value of a line: weight (grams) x rate (per gram).

    Raises:
        PricingError: If weight or rate is not strictly positive
    """
    weight = to_decimal(weight, "weight")
    rate = to_decimal(rate, "rate")
    if weight <= ZERO:
        raise PricingError("weight must be greater than zero")
    if rate <= ZERO:
        raise PricingError("rate must be greater than zero")
    return weight * rate


def calculate_making_charge(
    weight,
    charge_value,
    charge_kind: str,
    commodity_value: Optional[Decimal] = None,
) -> Decimal:
    """
    Calculate the making charge for one unit.

    Args:
        weight: Weight in grams
        charge_value: Per-gram amount (fixed) or percentage (percentage)
        charge_kind: "fixed" or "percentage"
        commodity_value: Metal value of the same unit; required for percentage

    Raises:
        InvalidChargeConfig: Unknown kind, negative value, or percentage mode
            without a commodity value
    """
    charge_value = to_decimal(charge_value, "making charge")
    if charge_value < ZERO:
        raise InvalidChargeConfig("making charge cannot be negative")

    if charge_kind == CHARGE_FIXED:
        return to_decimal(weight, "weight") * charge_value

    if charge_kind == CHARGE_PERCENTAGE:
        if commodity_value is None:
            raise InvalidChargeConfig(
                "percentage making charge requires the line's commodity value"
            )
        return to_decimal(commodity_value, "commodity value") * charge_value / HUNDRED

    raise InvalidChargeConfig(f"unknown making charge kind {charge_kind!r}")


def calculate_line_price(weight, rate, charge_value, charge_kind: str, quantity: int = 1) -> LinePrice:
    """
    Price one cart line.

    Deterministic: identical inputs give identical ``LinePrice`` values, down
    to the Decimal exponent.
    """
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise PricingError("quantity must be a positive integer")

    weight = to_decimal(weight, "weight")
    rate = to_decimal(rate, "rate")
    commodity_value = calculate_commodity_value(weight, rate)
    making_charge = calculate_making_charge(
        weight, charge_value, charge_kind, commodity_value=commodity_value
    )
    return LinePrice(
        weight=weight,
        rate=rate,
        quantity=quantity,
        commodity_value=commodity_value,
        making_charge=making_charge,
    )


# Discount policies


@dataclass(frozen=True)
class NoDiscount:
    kind = "none"
    value = ZERO

    def amount(self, subtotal: Decimal) -> Decimal:
        return ZERO


@dataclass(frozen=True)
class PercentageDiscount:
    value: Decimal
    kind = "percentage"

    def amount(self, subtotal: Decimal) -> Decimal:
        return subtotal * self.value / HUNDRED


@dataclass(frozen=True)
class FixedDiscount:
    value: Decimal
    kind = "fixed"

    def amount(self, subtotal: Decimal) -> Decimal:
        return self.value


DiscountPolicy = Union[NoDiscount, PercentageDiscount, FixedDiscount]


def discount_policy_from_request(discount_type: Optional[str], discount_value) -> DiscountPolicy:
    """
    Build a discount policy from the optional request fields.

    A missing or zero value means no discount. A value without a type is
    treated as a fixed amount.
    """
    if discount_value in (None, ""):
        return NoDiscount()

    try:
        value = to_decimal(discount_value, "discount_value")
    except PricingError as e:
        raise InvalidDiscountPolicy(str(e))

    if value < ZERO:
        raise InvalidDiscountPolicy("discount_value cannot be negative")
    if value == ZERO:
        return NoDiscount()

    kind = (discount_type or FixedDiscount.kind).lower()
    if kind == PercentageDiscount.kind:
        return PercentageDiscount(value)
    if kind == FixedDiscount.kind:
        return FixedDiscount(value)
    raise InvalidDiscountPolicy(f"unknown discount_type {discount_type!r}")


@dataclass(frozen=True)
class InvoiceTotals:
    commodity_value_total: Decimal
    making_charge_total: Decimal
    subtotal: Decimal
    discount_amount: Decimal
    taxable_amount: Decimal
    tax_amount: Decimal
    grand_total: Decimal


class InvoiceAggregator:
    """
    Combine priced lines with a discount policy and a tax rate.

    Handles:
    - Subtotal from the (rounded) line totals
    - Percentage, fixed or no discount
    - Discount overflow: either allowed to push the taxable amount below
      zero, or clamped to the subtotal
    - Tax on the taxable amount
    """

    def __init__(self, tax_rate, overflow_policy: str = OVERFLOW_ALLOW_NEGATIVE):
        """
        Args:
            tax_rate: Tax rate in percent (e.g. 3 for 3%)
            overflow_policy: "allow-negative" or "clamp"
        """
        self.tax_rate = to_decimal(tax_rate, "tax_rate")
        if self.tax_rate < ZERO:
            raise PricingError("tax_rate cannot be negative")
        if overflow_policy not in (OVERFLOW_ALLOW_NEGATIVE, OVERFLOW_CLAMP):
            raise PricingError(f"unknown discount overflow policy {overflow_policy!r}")
        self.overflow_policy = overflow_policy

    def discount_amount(self, subtotal: Decimal, discount: DiscountPolicy) -> Decimal:
        amount = round_money(discount.amount(subtotal))
        if self.overflow_policy == OVERFLOW_CLAMP and amount > subtotal:
            amount = subtotal
        return amount

    def aggregate(self, lines: Iterable[LinePrice], discount: DiscountPolicy = NoDiscount()) -> InvoiceTotals:
        """
        Calculate invoice totals.

        Returns:
            InvoiceTotals with every amount at two decimal places
        """
        commodity_total = ZERO
        making_total = ZERO
        for line in lines:
            line = line.rounded()
            commodity_total += line.commodity_total
            making_total += line.making_total

        commodity_total = round_money(commodity_total)
        making_total = round_money(making_total)
        subtotal = commodity_total + making_total

        discount_amount = self.discount_amount(subtotal, discount)
        taxable_amount = subtotal - discount_amount
        tax_amount = round_money(taxable_amount * self.tax_rate / HUNDRED)

        return InvoiceTotals(
            commodity_value_total=commodity_total,
            making_charge_total=making_total,
            subtotal=subtotal,
            discount_amount=discount_amount,
            taxable_amount=taxable_amount,
            tax_amount=tax_amount,
            grand_total=taxable_amount + tax_amount,
        )
