"""Stateless loan calculator routes."""

import logging
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from uuid import uuid4

from fastapi import APIRouter, HTTPException

from fintrack.api.schemas import (
    DisbursementResponse,
    EvaluateRequest,
    EvaluationResponse,
    QuoteRequest,
    QuoteResponse,
    RatePeriodResponse,
    StageResponse,
)
from fintrack.engine.evaluation import evaluate_property
from fintrack.engine.realestate import default_progressive_stages
from fintrack.engine.repricing import (
    months_between,
    remaining_as_of,
    repricing_quote,
    tenor_to_months,
)
from fintrack.models.loan import LoanEvaluation

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/loan", tags=["loan"])

TWO_PLACES = Decimal("0.01")
SIX_PLACES = Decimal("0.000001")


def _money(v: Decimal) -> Decimal:
    return v.quantize(TWO_PLACES, ROUND_HALF_UP)


def _rate(v: Decimal) -> Decimal:
    return v.quantize(SIX_PLACES, ROUND_HALF_UP)


def evaluation_to_response(ev: LoanEvaluation) -> EvaluationResponse:
    """Convert engine LoanEvaluation to API response."""
    return EvaluationResponse(
        as_of=ev.as_of,
        loan_start=ev.loan_start,
        term_months=ev.term_months,
        months_paid=ev.amortization.months_paid,
        months_left=ev.months_left,
        current_rate=_rate(ev.current_rate),
        rate_schedule=[
            RatePeriodResponse(start=p.start, rate=_rate(p.rate)) for p in ev.rate_schedule
        ],
        equity_paid=_money(ev.equity_paid),
        loan_disbursed=_money(ev.loan_disbursed),
        loan_disbursements=[
            DisbursementResponse(drawn_on=d.drawn_on, amount=_money(d.amount))
            for d in ev.loan_disbursements
        ],
        pre_start_interest=_money(ev.pre_start_interest),
        interest_paid=_money(ev.amortization.interest),
        principal_paid=_money(ev.amortization.principal),
        outstanding_balance=_money(ev.outstanding_balance),
        monthly_payment=_money(ev.monthly_payment),
        current_value=_money(ev.current_value),
        equity=_money(ev.equity),
    )


@router.post("/quote", response_model=QuoteResponse)
async def quote(req: QuoteRequest):
    """Repricing calculator: payment, totals and balance left today."""
    months = tenor_to_months(req.tenor, req.unit)
    q = repricing_quote(req.balance, req.annual_rate_pct, months)
    if q is None:
        raise HTTPException(
            status_code=400,
            detail="Balance and tenor must be positive and the rate non-negative",
        )

    as_of = req.as_of or date.today()
    months_paid = 0
    if req.payment_start_date is not None:
        months_paid = min(q.months, months_between(req.payment_start_date, as_of))

    return QuoteResponse(
        balance=_money(q.balance),
        annual_rate_pct=req.annual_rate_pct,
        months=q.months,
        payment=_money(q.payment),
        total_paid=_money(q.total_paid),
        total_interest=_money(q.total_interest),
        months_paid=months_paid,
        remaining_as_of=_money(remaining_as_of(q, req.payment_start_date, as_of)),
    )


@router.post("/evaluate", response_model=EvaluationResponse)
async def evaluate(req: EvaluateRequest):
    """Evaluate a property payload without storing it."""
    prop = req.property.to_property(req.property.id or uuid4().hex)
    as_of = req.as_of or date.today()
    logger.debug("Evaluating unsaved property %s as of %s", prop.name, as_of)
    return evaluation_to_response(evaluate_property(prop, as_of))


@router.get("/stages/default", response_model=list[StageResponse])
async def default_stages():
    """Progressive payment plan for uncompleted projects."""
    return [
        StageResponse(name=s.name, percent=s.percent, paid_on=s.paid_on)
        for s in default_progressive_stages()
    ]
