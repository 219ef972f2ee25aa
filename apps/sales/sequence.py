"""
Sequential invoice numbering.
"""

import logging
import re

from django.conf import settings
from django.db import transaction
from django.db.models import F

from .models import Invoice, InvoiceSequence

logger = logging.getLogger(__name__)

_SUFFIX_RE = re.compile(r"(\d+)$")


def format_invoice_number(number):
    """Format ``42`` as ``INV-042``."""
    prefix = getattr(settings, "INVOICE_NUMBER_PREFIX", "INV")
    digits = getattr(settings, "INVOICE_NUMBER_MIN_DIGITS", 3)
    return f"{prefix}-{number:0{digits}d}"


def parse_invoice_number(invoice_number):
    """Return the numeric suffix of an invoice number, or 0 if it has none."""
    match = _SUFFIX_RE.search(invoice_number or "")
    return int(match.group(1)) if match else 0


def _seed_from_existing(tenant):
    last = (
        Invoice.objects.filter(tenant=tenant)
        .order_by("-created_at")
        .values_list("invoice_number", flat=True)
        .first()
    )
    return parse_invoice_number(last)


def next_invoice_number(tenant):
    """
    Issue the next invoice number for a tenant.

    Must run inside the checkout transaction. The tenant's counter row stays
    locked until that transaction ends, so concurrent checkouts receive
    numbers in commit order and a rolled-back checkout gives its number back.

    Returns:
        str: Formatted invoice number, e.g. ``INV-007``
    """
    if not transaction.get_connection().in_atomic_block:
        raise RuntimeError("next_invoice_number() must be called inside transaction.atomic()")

    sequence, created = InvoiceSequence.objects.select_for_update().get_or_create(
        tenant=tenant,
        # Callable default: the seed query only runs when the row is created
        defaults={"last_number": lambda: _seed_from_existing(tenant)},
    )
    if created:
        logger.info(
            f"Created invoice sequence for tenant {tenant.id} starting after {sequence.last_number}"
        )

    InvoiceSequence.objects.filter(pk=sequence.pk).update(last_number=F("last_number") + 1)
    sequence.refresh_from_db(fields=["last_number"])

    return format_invoice_number(sequence.last_number)
