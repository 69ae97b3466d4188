"""
Price reconciliation

Instant estimates of cart totals after an optimistic mutation. The
estimate only bridges the gap until the next bill refetch replaces it.
"""

from collections.abc import Iterable

from ..models.cart import CartItem, CartTotals, TaxBreakdown

DEFAULT_FALLBACK_TAX_RATE = 0.04


def items_subtotal(items: Iterable[CartItem]) -> float:
    """Sum of unit price x quantity over all lines"""
    return sum(item.unit_price * item.quantity for item in items)


def effective_tax_rate(
    previous: CartTotals,
    fallback_rate: float = DEFAULT_FALLBACK_TAX_RATE,
) -> float:
    """Tax rate implied by the last authoritative bill"""
    if previous.items_subtotal <= 0:
        return fallback_rate
    return previous.tax_amount / previous.items_subtotal


def estimate_totals(
    items: list[CartItem],
    previous: CartTotals,
    fallback_rate: float = DEFAULT_FALLBACK_TAX_RATE,
) -> CartTotals:
    """
    Estimate totals for a candidate item set.

    Args:
        items: Cart lines after the optimistic mutation
        previous: Totals before the mutation (normally server-computed)
        fallback_rate: Tax rate used when there is no previous subtotal

    Returns:
        CartTotals with an exact subtotal and approximate tax/fees
    """
    subtotal = items_subtotal(items)

    if not items:
        return CartTotals(items_subtotal=subtotal)

    tax = round(subtotal * effective_tax_rate(previous, fallback_rate), 2)
    if previous.tax_amount > 0:
        breakdown = previous.tax_breakdown.scaled(tax / previous.tax_amount)
    else:
        half = round(tax / 2, 2)
        breakdown = TaxBreakdown(cgst=half, sgst=round(tax - half, 2))

    discount = min(previous.discount_amount, subtotal)
    totals = CartTotals(
        items_subtotal=subtotal,
        tax_amount=tax,
        tax_breakdown=breakdown,
        delivery_fee=previous.delivery_fee,
        discount_amount=discount,
    )
    totals.final_total = totals.expected_final_total
    return totals
