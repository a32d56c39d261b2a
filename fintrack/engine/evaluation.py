"""Property loan evaluation: composes the loan model into one as-of view.

Pure computation. No I/O. RealEstateProperty in, LoanEvaluation out.
"""

from datetime import date
from decimal import Decimal

from fintrack.engine.realestate import (
    amortization_paid,
    compute_disbursement_allocation,
    installment,
    interest_accrued_pre_start,
    normalize_rate_schedule,
    rate_on,
)
from fintrack.models.loan import LoanEvaluation, Stage
from fintrack.models.property import RealEstateProperty

ZERO = Decimal("0")


def stage_plan(prop: RealEstateProperty) -> list[Stage]:
    """Stage plan for a property.

    Properties without a progressive plan are bought outright: one 100% stage
    paid on the loan start date, equity first and the loan for the rest.
    """
    if prop.disbursement_schedule:
        return list(prop.disbursement_schedule)
    return [Stage("Completion", Decimal("1"), prop.loan_start)]


def evaluate_property(prop: RealEstateProperty, as_of: date) -> LoanEvaluation:
    """Evaluate a property's loan as of a date."""
    schedule = normalize_rate_schedule(prop.interest_rate, prop.purchase_date, prop.rate_schedule)
    stages = stage_plan(prop)
    loan_start = prop.loan_start
    term_months = prop.term_months

    allocation = compute_disbursement_allocation(
        prop.purchase_price, prop.down_payment, prop.loan_principal, stages, as_of
    )
    pre_start_interest = interest_accrued_pre_start(
        allocation.loan_disbursements, schedule, loan_start, as_of
    )

    # Amortization runs on whatever had been drawn by the loan start date
    drawn_at_start = compute_disbursement_allocation(
        prop.purchase_price, prop.down_payment, prop.loan_principal, stages, loan_start
    ).loan_disbursed
    amort = amortization_paid(drawn_at_start, schedule, loan_start, term_months, as_of)

    if loan_start < as_of:
        # Drawdowns after the loan start are owed but not yet amortizing
        outstanding = amort.remaining + allocation.loan_disbursed - drawn_at_start
    else:
        outstanding = allocation.loan_disbursed

    current_rate = rate_on(schedule, as_of)
    months_left = term_months - amort.months_paid
    if outstanding > 0 and months_left > 0:
        payment = installment(outstanding, current_rate / 12, months_left)
    else:
        payment = ZERO

    return LoanEvaluation(
        as_of=as_of,
        rate_schedule=schedule,
        current_rate=current_rate,
        term_months=term_months,
        loan_start=loan_start,
        equity_paid=allocation.equity_paid,
        loan_disbursed=allocation.loan_disbursed,
        loan_disbursements=allocation.loan_disbursements,
        pre_start_interest=pre_start_interest,
        amortization=amort,
        outstanding_balance=outstanding,
        monthly_payment=payment,
        current_value=prop.current_value,
    )
