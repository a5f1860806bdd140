# invoice_manager/services/totals.py
"""
Invoice amount computation.

Every persisted create or update of an invoice goes through compute_totals,
so item amounts, subtotal, taxAmount and total always agree with the items
and tax rate, whatever the caller sent. Plain float arithmetic, no rounding.
"""

from typing import Iterable, List, NamedTuple, Tuple

from invoice_manager.models.invoices import LineItem, LineItemIn


class InvoiceTotals(NamedTuple):
    subtotal: float
    tax_amount: float
    total: float


def price_items(items: Iterable[LineItemIn]) -> List[LineItem]:
    return [
        LineItem(
            description=item.description,
            quantity=item.quantity,
            rate=item.rate,
            amount=item.quantity * item.rate,
        )
        for item in items
    ]


def compute_totals(
    items: Iterable[LineItemIn], tax_rate: float
) -> Tuple[List[LineItem], InvoiceTotals]:
    priced = price_items(items)

    subtotal = sum((item.amount for item in priced), 0.0)
    tax_amount = (subtotal * tax_rate) / 100
    total = subtotal + tax_amount

    return priced, InvoiceTotals(subtotal=subtotal, tax_amount=tax_amount, total=total)
