"""
Checkout: turn a cart into a finalized invoice and decrement stock.

One checkout attempt runs in one database transaction:

1. Issue the next invoice number and write a PROVISIONAL header
2. For each cart line: lock the item, check stock, price the line, decrement
   stock with a version compare-and-swap, then write the invoice line
3. Aggregate the lines, apply discount and tax, finalize the header

Any failure rolls the whole attempt back: header, lines, sequence increment
and stock decrements. A ConcurrencyConflictError is retried with a fresh
attempt up to ``CHECKOUT_CONFLICT_RETRIES`` times.
"""

import logging
import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Sequence

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError, transaction

from apps.core.models import StoreSettings
from apps.inventory.models import InventoryItem
from apps.pricing.exceptions import InvalidDiscountPolicy, PricingError
from apps.pricing.services import (
    DiscountPolicy,
    InvoiceAggregator,
    LinePrice,
    NoDiscount,
    calculate_line_price,
    discount_policy_from_request,
    to_decimal,
)

from .exceptions import (
    CheckoutValidationError,
    ConcurrencyConflictError,
    CustomerNotFoundError,
    EmptyCartError,
    InsufficientStockError,
    InternalError,
    InvalidDiscountError,
    InvalidItemConfigError,
    InvalidRateError,
    InvalidStateTransition,
    ItemNotFoundError,
)
from .models import Customer, Invoice, InvoiceLine
from .sequence import next_invoice_number

logger = logging.getLogger(__name__)

# Precision of Invoice.rate and InvoiceLine.weight
PRICING_INPUT_PLACES = 6
RATE_LIMIT = Decimal("1000000000000")


def decimal_places(value: Decimal) -> int:
    exponent = value.normalize().as_tuple().exponent
    return -exponent if exponent < 0 else 0


@dataclass(frozen=True)
class CartLine:
    """Requested line: which item, how many units, optional weight override."""

    item_id: uuid.UUID
    quantity: int
    weight: Optional[Decimal] = None


class CheckoutAttempt:
    """
    State of one checkout attempt.

    PENDING -> HEADER_WRITTEN -> (VALIDATING -> RESERVED)* -> COMMITTED,
    and any non-terminal state -> ROLLED_BACK.
    """

    PENDING = "PENDING"
    HEADER_WRITTEN = "HEADER_WRITTEN"
    VALIDATING = "VALIDATING"
    RESERVED = "RESERVED"
    COMMITTED = "COMMITTED"
    ROLLED_BACK = "ROLLED_BACK"

    TRANSITIONS = {
        PENDING: {HEADER_WRITTEN, ROLLED_BACK},
        HEADER_WRITTEN: {VALIDATING, ROLLED_BACK},
        VALIDATING: {RESERVED, ROLLED_BACK},
        RESERVED: {VALIDATING, COMMITTED, ROLLED_BACK},
        COMMITTED: set(),
        ROLLED_BACK: set(),
    }

    def __init__(self, tenant):
        self.id = uuid.uuid4().hex[:12]
        self.tenant = tenant
        self.state = self.PENDING
        self.invoice_number = None
        self.history = [self.PENDING]

    def __repr__(self):
        return f"<CheckoutAttempt {self.id} {self.state}>"

    @property
    def is_terminal(self):
        return not self.TRANSITIONS[self.state]

    def advance(self, target, note=""):
        if target not in self.TRANSITIONS[self.state]:
            raise InvalidStateTransition(
                f"Checkout {self.id} cannot move from {self.state} to {target}"
            )
        logger.info(
            f"Checkout {self.id} (tenant {self.tenant.id}): {self.state} -> {target}"
            + (f" [{note}]" if note else "")
        )
        self.state = target
        self.history.append(target)

    def roll_back(self, reason):
        if self.is_terminal:
            return
        self.advance(self.ROLLED_BACK, note=reason)


class CheckoutService:
    """
    Checkout service for a single tenant.

    Usage:
        service = CheckoutService(request.user.tenant)
        invoice = service.checkout(
            lines=[CartLine(item_id=item.id, quantity=1)],
            rate=Decimal("6000"),
            discount_type="percentage",
            discount_value=Decimal("5"),
        )
    """

    def __init__(self, tenant):
        self.tenant = tenant
        self.max_conflict_retries = getattr(settings, "CHECKOUT_CONFLICT_RETRIES", 1)

    # Request validation

    def validate_rate(self, rate) -> Decimal:
        if rate is None or rate == "":
            raise InvalidRateError("Commodity rate is required")
        try:
            rate = to_decimal(rate, "rate")
        except PricingError:
            raise InvalidRateError(f"Commodity rate must be a number, got {rate!r}")
        if rate <= 0:
            raise InvalidRateError()
        if rate >= RATE_LIMIT or decimal_places(rate) > PRICING_INPUT_PLACES:
            raise InvalidRateError(
                f"Commodity rate must be below {RATE_LIMIT} with at most "
                f"{PRICING_INPUT_PLACES} decimal places, got {rate}"
            )
        return rate

    def validate_lines(self, lines: Sequence[CartLine]) -> List[CartLine]:
        if not lines:
            raise EmptyCartError()
        validated = []
        for index, line in enumerate(lines, start=1):
            if isinstance(line.quantity, bool) or not isinstance(line.quantity, int) or line.quantity < 1:
                raise CheckoutValidationError(f"Line {index}: quantity must be at least 1")
            weight = line.weight
            if weight is not None:
                try:
                    weight = to_decimal(weight, "weight")
                except PricingError as e:
                    raise CheckoutValidationError(f"Line {index}: {e}")
                if weight <= 0:
                    raise CheckoutValidationError(f"Line {index}: weight must be greater than zero")
                if decimal_places(weight) > PRICING_INPUT_PLACES:
                    raise CheckoutValidationError(
                        f"Line {index}: weight allows at most {PRICING_INPUT_PLACES} decimal places"
                    )
            validated.append(CartLine(item_id=line.item_id, quantity=line.quantity, weight=weight))
        return validated

    def validate_discount(self, discount_type, discount_value) -> DiscountPolicy:
        try:
            return discount_policy_from_request(discount_type, discount_value)
        except InvalidDiscountPolicy as e:
            raise InvalidDiscountError(str(e))

    # Checkout

    def checkout(
        self,
        lines: Sequence[CartLine],
        rate,
        customer_id=None,
        discount_type: Optional[str] = None,
        discount_value=None,
    ) -> Invoice:
        """
        Price the cart, persist the invoice and decrement stock.

        Everything is validated before the first write. Conflicting stock
        writes are retried with a fresh attempt; every other failure is
        raised after the attempt has been rolled back.

        Returns:
            The finalized Invoice

        Raises:
            CheckoutError: Any subclass; see apps.sales.exceptions
        """
        rate = self.validate_rate(rate)
        lines = self.validate_lines(lines)
        discount = self.validate_discount(discount_type, discount_value)

        conflicts = 0
        while True:
            try:
                return self._attempt(lines, rate, customer_id, discount)
            except ConcurrencyConflictError:
                if conflicts >= self.max_conflict_retries:
                    logger.warning(
                        f"Checkout for tenant {self.tenant.id} gave up after {conflicts + 1} conflicting attempts"
                    )
                    raise
                conflicts += 1
                logger.info(f"Retrying checkout for tenant {self.tenant.id} after stock conflict")
            except DatabaseError as e:
                logger.error(f"Checkout database error: {str(e)}", exc_info=True)
                raise InternalError() from e

    def _attempt(self, lines, rate, customer_id, discount) -> Invoice:
        attempt = CheckoutAttempt(self.tenant)
        try:
            with transaction.atomic():
                invoice = self._write_header(attempt, rate, customer_id, discount)
                priced = []
                for position, line in enumerate(lines):
                    priced.append(self._reserve_line(attempt, invoice, position, line, rate))
                self._finalize(invoice, priced, discount)
        except Exception as e:
            attempt.roll_back(type(e).__name__)
            raise

        attempt.advance(CheckoutAttempt.COMMITTED, note=invoice.invoice_number)
        return invoice

    def _write_header(self, attempt, rate, customer_id, discount) -> Invoice:
        customer = self._resolve_customer(customer_id)
        invoice_number = next_invoice_number(self.tenant)
        invoice = Invoice.objects.create(
            tenant=self.tenant,
            invoice_number=invoice_number,
            customer=customer,
            rate=rate,
            discount_type=discount.kind,
            discount_value=discount.value,
        )
        attempt.invoice_number = invoice_number
        attempt.advance(CheckoutAttempt.HEADER_WRITTEN, note=invoice_number)
        return invoice

    def _resolve_customer(self, customer_id) -> Optional[Customer]:
        if customer_id in (None, ""):
            return None
        try:
            return Customer.objects.get(id=customer_id, tenant=self.tenant)
        except (Customer.DoesNotExist, DjangoValidationError, ValueError):
            raise CustomerNotFoundError(customer_id)

    def _lock_item(self, item_id) -> InventoryItem:
        try:
            return InventoryItem.objects.select_for_update().get(
                id=item_id, tenant=self.tenant, is_active=True
            )
        except (InventoryItem.DoesNotExist, DjangoValidationError, ValueError):
            raise ItemNotFoundError(item_id)

    def _reserve_line(self, attempt, invoice, position, line: CartLine, rate) -> LinePrice:
        attempt.advance(CheckoutAttempt.VALIDATING, note=f"line {position + 1}")

        item = self._lock_item(line.item_id)
        if not item.can_deduct_quantity(line.quantity):
            raise InsufficientStockError(item, line.quantity)

        weight = line.weight if line.weight is not None else item.net_weight
        try:
            price = calculate_line_price(
                weight,
                rate,
                item.making_charge,
                item.making_charge_type,
                quantity=line.quantity,
            ).rounded()
        except PricingError as e:
            raise InvalidItemConfigError(f"{item.sku}: {e}")

        if not item.reserve_stock(line.quantity):
            current = InventoryItem.objects.filter(pk=item.pk).first()
            if current is None or current.quantity < line.quantity:
                raise InsufficientStockError(current or item, line.quantity)
            raise ConcurrencyConflictError(
                f"Stock for {item.sku} changed during checkout (version {item.version} -> {current.version})"
            )

        InvoiceLine.objects.create(
            invoice=invoice,
            inventory_item=item,
            position=position,
            quantity=line.quantity,
            weight=weight,
            commodity_value=price.commodity_value,
            making_charge=price.making_charge,
            price=price.unit_price,
        )

        attempt.advance(CheckoutAttempt.RESERVED, note=f"{item.sku} -{line.quantity}")
        return price

    def _finalize(self, invoice, priced: List[LinePrice], discount=NoDiscount()):
        store_settings = StoreSettings.for_tenant(self.tenant)
        totals = InvoiceAggregator(
            store_settings.tax_rate, store_settings.discount_overflow_policy
        ).aggregate(priced, discount)

        invoice.tax_rate = store_settings.tax_rate
        invoice.commodity_value_total = totals.commodity_value_total
        invoice.making_charge_total = totals.making_charge_total
        invoice.subtotal = totals.subtotal
        invoice.discount_amount = totals.discount_amount
        invoice.tax_amount = totals.tax_amount
        invoice.grand_total = totals.grand_total
        invoice.finalize()
        invoice.save()
