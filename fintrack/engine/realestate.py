"""Real-estate loan model: rate schedules, staged disbursements, repricing amortization.

Pure functions: Decimal/date in, dataclass out. No I/O, no exceptions.
Degenerate inputs return zeroed results instead of raising.
"""

from datetime import date
from decimal import Decimal

from dateutil.relativedelta import relativedelta

from fintrack.models.loan import (
    AmortizationPaid,
    Disbursement,
    DisbursementAllocation,
    RatePeriod,
    Stage,
)

ZERO = Decimal("0")
DAYS_PER_YEAR = 365


def default_progressive_stages() -> list[Stage]:
    """Progressive payment plan for an uncompleted project.

    Percentages are fractions of purchase price summing to 1.0. All stages
    start undated.
    """
    return [
        Stage("Booking Fee", Decimal("0.05")),
        Stage("S&P within 8 weeks", Decimal("0.15")),
        Stage("Foundation", Decimal("0.10")),
        Stage("Reinforced Concrete Framework", Decimal("0.10")),
        Stage("Walls", Decimal("0.05")),
        Stage("Ceiling", Decimal("0.05")),
        Stage("Doors & Windows, Plumbing & Plastering", Decimal("0.05")),
        Stage("TOP/CSC", Decimal("0.25")),
        Stage("Completion", Decimal("0.20")),
    ]


def add_months(day: date, months: int) -> date:
    """Calendar month arithmetic. Overflowing days clamp to month end (Jan 31 + 1 = Feb 28/29)."""
    return day + relativedelta(months=months)


def days_between(start: date, end: date) -> int:
    """Whole days from start to end, never negative."""
    return max(0, (end - start).days)


def normalize_rate_schedule(
    base_rate: Decimal,
    purchase_date: date,
    schedule: list[RatePeriod] | None = None,
) -> list[RatePeriod]:
    """Merge the base rate (effective at purchase) with explicit rate changes.

    Entries are sorted by start date; entries sharing a start date collapse
    to the one declared last.
    """
    entries = sorted(
        [RatePeriod(start=purchase_date, rate=base_rate), *(schedule or [])],
        key=lambda p: p.start,
    )

    normalized: list[RatePeriod] = []
    for period in entries:
        if normalized and normalized[-1].start == period.start:
            normalized[-1] = period
        else:
            normalized.append(period)
    return normalized


def rate_on(schedule: list[RatePeriod], day: date) -> Decimal:
    """Annual rate in effect on `day`."""
    if not schedule:
        return ZERO
    return schedule[_active_index(schedule, day)].rate


def compute_disbursement_allocation(
    purchase_price: Decimal,
    down_payment: Decimal,
    loan_principal: Decimal,
    stages: list[Stage],
    as_of: date,
) -> DisbursementAllocation:
    """Allocate stage payments to equity first, then to loan drawdowns.

    Dated stages are walked in chronological order. The walk stops at the
    first stage dated after `as_of`. A stage larger than the remaining equity
    and loan combined is left partly unfunded.
    """
    dated = sorted((s for s in stages if s.paid_on), key=lambda s: s.paid_on)

    equity_left = down_payment
    loan_left = loan_principal
    equity_paid = ZERO
    loan_disbursed = ZERO
    disbursements: list[Disbursement] = []

    for stage in dated:
        if stage.paid_on > as_of:
            break
        due = purchase_price * stage.percent

        if equity_left >= due:
            equity_left -= due
            equity_paid += due
            continue

        from_equity = max(ZERO, equity_left)
        from_loan = min(loan_left, due - from_equity)
        equity_left -= from_equity
        equity_paid += from_equity
        loan_left -= from_loan
        loan_disbursed += from_loan
        if from_loan > 0:
            disbursements.append(Disbursement(drawn_on=stage.paid_on, amount=from_loan))

    return DisbursementAllocation(
        equity_paid=equity_paid,
        loan_disbursed=loan_disbursed,
        loan_disbursements=disbursements,
    )


def interest_accrued_pre_start(
    loan_disbursements: list[Disbursement],
    rate_schedule: list[RatePeriod],
    start_date: date,
    as_of: date,
) -> Decimal:
    """Simple interest on drawn principal before amortization begins.

    Accrues actual/365 on the outstanding drawn balance up to the earlier of
    `start_date` and `as_of`. Rate changes inside the window apply from
    their start date.
    """
    end = min(start_date, as_of)

    # (date, principal delta, new rate or None); disbursements sort ahead of
    # rate changes on the same day
    events: list[tuple[date, Decimal, Decimal | None]] = [
        (d.drawn_on, d.amount, None) for d in loan_disbursements if d.drawn_on <= end
    ]
    events += [(p.start, ZERO, p.rate) for p in rate_schedule if p.start <= end]
    events.sort(key=lambda e: e[0])
    if not events:
        return ZERO

    principal = ZERO
    rate = rate_schedule[0].rate if rate_schedule else ZERO
    last = events[0][0]
    accrued = ZERO

    for when, delta, new_rate in events:
        if when > last:
            accrued += principal * rate * Decimal(days_between(last, when)) / DAYS_PER_YEAR
            last = when
        if new_rate is not None:
            rate = new_rate
        principal += delta

    accrued += principal * rate * Decimal(days_between(last, end)) / DAYS_PER_YEAR
    return accrued


def installment(balance: Decimal, monthly_rate: Decimal, months: int) -> Decimal:
    """Level monthly payment that retires `balance` over `months`."""
    if months <= 0:
        return ZERO
    if monthly_rate == 0:
        return balance / months
    # M = P * r / (1 - (1 + r)^-n)
    return balance * monthly_rate / (1 - (1 + monthly_rate) ** -months)


def amortization_paid(
    start_principal: Decimal,
    rate_schedule: list[RatePeriod],
    start_date: date,
    term_months: int,
    as_of: date,
) -> AmortizationPaid:
    """Interest and principal paid, and balance remaining, as of a date.

    Instalment k falls on add_months(start_date, k). Each time a rate change
    takes effect the payment is recomputed from the remaining balance over the
    remaining months.
    """
    if term_months <= 0 or start_principal <= 0 or start_date >= as_of:
        return AmortizationPaid(remaining=start_principal)

    schedule = sorted(rate_schedule, key=lambda p: p.start)
    if not schedule:
        return AmortizationPaid(remaining=start_principal)

    maturity = add_months(start_date, term_months)
    remaining = start_principal
    interest_paid = ZERO
    principal_paid = ZERO
    months_paid = 0
    months_left = term_months
    current = start_date
    index = _active_index(schedule, current)

    while months_left > 0 and current < as_of and remaining > 0:
        r = schedule[index].rate / 12
        has_next = index + 1 < len(schedule)
        next_reprice = schedule[index + 1].start if has_next else maturity
        payment = installment(remaining, r, months_left)

        while (
            months_left > 0
            and current < as_of
            and current < next_reprice
            and remaining > 0
        ):
            interest = remaining * r
            principal = min(remaining, payment - interest)
            interest_paid += interest
            principal_paid += principal
            remaining -= principal
            months_left -= 1
            months_paid += 1
            current = add_months(start_date, months_paid)

        if current >= next_reprice and has_next:
            index += 1
        else:
            break

    return AmortizationPaid(
        interest=interest_paid,
        principal=principal_paid,
        remaining=remaining,
        months_paid=months_paid,
    )


def _active_index(schedule: list[RatePeriod], day: date) -> int:
    """Index of the last period starting on or before `day` (0 if none)."""
    index = 0
    for i, period in enumerate(schedule):
        if period.start <= day:
            index = i
        else:
            break
    return index
