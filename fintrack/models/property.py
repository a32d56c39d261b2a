"""Pydantic models for persisted real-estate records."""

from datetime import date, datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel

from fintrack.models.loan import RatePeriod, Stage


class RealEstateProperty(BaseModel):
    id: str
    name: str
    purchase_price: Decimal
    down_payment: Decimal = Decimal("0")
    loan_principal: Decimal = Decimal("0")
    interest_rate: Decimal = Decimal("0")  # Base annual rate at purchase
    loan_term: int = 0  # Years
    current_value: Decimal = Decimal("0")
    monthly_payment: Decimal = Decimal("0")
    purchase_date: date

    # Optional modeling fields
    loan_start_date: date | None = None  # Amortization start; defaults to purchase date
    loan_term_months: int | None = None  # Overrides loan_term when provided
    rate_schedule: list[RatePeriod] = []
    disbursement_schedule: list[Stage] = []

    @property
    def term_months(self) -> int:
        if self.loan_term_months:
            return self.loan_term_months
        return self.loan_term * 12

    @property
    def loan_start(self) -> date:
        return self.loan_start_date or self.purchase_date


class RepriceSnapshot(BaseModel):
    """A locked-in repricing calculator setup."""
    balance: Decimal
    rate_pct: Decimal
    months: int
    unit: Literal["months", "years"] = "months"  # How the tenor was entered
    locked_at: datetime
    start_date: date | None = None  # First instalment after the reprice
    valid_until: date | None = None

    @property
    def tenor(self) -> int:
        """Tenor in the unit it was entered in."""
        return round(self.months / 12) if self.unit == "years" else self.months

    def is_valid_on(self, day: date) -> bool:
        return self.valid_until is None or day <= self.valid_until
