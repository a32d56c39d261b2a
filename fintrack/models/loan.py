from dataclasses import dataclass, field
from decimal import Decimal
from datetime import date


@dataclass(frozen=True)
class RatePeriod:
    """Annual rate effective from `start` until the next period begins."""
    start: date
    rate: Decimal  # Annual, decimal (0.035 = 3.5%)


@dataclass(frozen=True)
class Stage:
    """One milestone of a progressive payment plan."""
    name: str
    percent: Decimal  # Fraction of purchase price (0..1)
    paid_on: date | None = None  # None until invoiced/paid


@dataclass(frozen=True)
class Disbursement:
    """Loan-funded portion of a stage payment."""
    drawn_on: date
    amount: Decimal


@dataclass(frozen=True)
class DisbursementAllocation:
    equity_paid: Decimal = Decimal("0")
    loan_disbursed: Decimal = Decimal("0")
    loan_disbursements: list[Disbursement] = field(default_factory=list)


@dataclass(frozen=True)
class AmortizationPaid:
    interest: Decimal = Decimal("0")
    principal: Decimal = Decimal("0")
    remaining: Decimal = Decimal("0")
    months_paid: int = 0


@dataclass(frozen=True)
class RepricingQuote:
    balance: Decimal
    monthly_rate: Decimal
    months: int
    payment: Decimal
    total_paid: Decimal
    total_interest: Decimal


@dataclass(frozen=True)
class LoanEvaluation:
    as_of: date
    rate_schedule: list[RatePeriod]
    current_rate: Decimal
    term_months: int
    loan_start: date

    # Allocation
    equity_paid: Decimal
    loan_disbursed: Decimal
    loan_disbursements: list[Disbursement]

    # Interest before amortization begins
    pre_start_interest: Decimal

    # Amortization
    amortization: AmortizationPaid
    outstanding_balance: Decimal
    monthly_payment: Decimal

    current_value: Decimal = Decimal("0")

    @property
    def months_left(self) -> int:
        return max(0, self.term_months - self.amortization.months_paid)

    @property
    def equity(self) -> Decimal:
        """Market equity = current value - outstanding loan balance."""
        return self.current_value - self.outstanding_balance
