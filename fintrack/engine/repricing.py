"""Single-rate repricing calculator.

Quotes the level payment on a remaining balance after a reprice, and how
much of that balance is left after the instalments paid so far.
"""

from datetime import date
from decimal import Decimal

from fintrack.engine.realestate import installment
from fintrack.models.loan import RepricingQuote

ZERO = Decimal("0")
MONTHS_PER_YEAR = 12


def tenor_to_months(tenor: int, unit: str = "months") -> int:
    return tenor * MONTHS_PER_YEAR if unit == "years" else tenor


def repricing_quote(
    balance: Decimal, annual_rate_pct: Decimal, months: int
) -> RepricingQuote | None:
    """Payment and lifetime totals for a balance repriced at `annual_rate_pct` percent.

    Returns None for an incomplete setup (non-positive balance or tenor,
    negative rate).
    """
    if balance <= 0 or annual_rate_pct < 0 or months <= 0:
        return None

    r = annual_rate_pct / 100 / MONTHS_PER_YEAR
    payment = installment(balance, r, months)
    total_paid = payment * months
    return RepricingQuote(
        balance=balance,
        monthly_rate=r,
        months=months,
        payment=payment,
        total_paid=total_paid,
        total_interest=total_paid - balance,
    )


def months_between(start: date, end: date) -> int:
    """Whole calendar months from start to end, rounded down, never negative."""
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if end.day < start.day:
        months -= 1
    return max(0, months)


def remaining_after_months(
    balance: Decimal,
    monthly_rate: Decimal,
    months: int,
    paid: int,
    payment: Decimal,
) -> Decimal:
    """Closed-form balance after `paid` level instalments."""
    if paid <= 0:
        return balance
    if paid >= months:
        return ZERO
    if monthly_rate == 0:
        return max(ZERO, balance - payment * paid)
    growth = (1 + monthly_rate) ** paid
    # B_m = P(1+r)^m - M((1+r)^m - 1)/r
    return max(ZERO, balance * growth - payment * (growth - 1) / monthly_rate)


def remaining_as_of(
    quote: RepricingQuote, payment_start: date | None, as_of: date
) -> Decimal:
    """Balance left on `as_of` given instalments since `payment_start`."""
    if payment_start is None:
        return quote.balance
    paid = min(quote.months, months_between(payment_start, as_of))
    return remaining_after_months(
        quote.balance, quote.monthly_rate, quote.months, paid, quote.payment
    )
