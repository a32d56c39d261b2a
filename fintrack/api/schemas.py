"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

from fintrack.models.property import RealEstateProperty


# ---- Request schemas ----

class RatePeriodIn(BaseModel):
    start: date
    rate: Decimal = Field(..., ge=0, description="Annual rate as a decimal, e.g. 0.035")


class StageIn(BaseModel):
    name: str
    percent: Decimal = Field(..., ge=0, le=1, description="Fraction of purchase price")
    paid_on: date | None = None


class PropertyCreate(BaseModel):
    id: str | None = Field(None, description="Generated when omitted")
    name: str = Field(..., min_length=1)
    purchase_price: Decimal = Field(..., ge=0, max_digits=14, decimal_places=2)
    down_payment: Decimal = Field(Decimal("0"), ge=0, max_digits=14, decimal_places=2)
    loan_principal: Decimal = Field(Decimal("0"), ge=0, max_digits=14, decimal_places=2)
    interest_rate: Decimal = Field(Decimal("0"), ge=0, max_digits=8, decimal_places=6)
    loan_term: int = Field(0, ge=0, description="Years")
    current_value: Decimal = Field(Decimal("0"), ge=0, max_digits=14, decimal_places=2)
    monthly_payment: Decimal = Field(Decimal("0"), ge=0, max_digits=12, decimal_places=2)
    purchase_date: date | None = Field(None, description="Defaults to today")

    loan_start_date: date | None = None
    loan_term_months: int | None = Field(None, gt=0)
    rate_schedule: list[RatePeriodIn] = []
    disbursement_schedule: list[StageIn] = []

    def to_property(self, property_id: str) -> RealEstateProperty:
        data = self.model_dump(exclude={"id"})
        data["purchase_date"] = self.purchase_date or date.today()
        return RealEstateProperty(id=property_id, **data)


class EvaluateRequest(BaseModel):
    property: PropertyCreate
    as_of: date | None = Field(None, description="Defaults to today")


class QuoteRequest(BaseModel):
    """Repricing calculator inputs. Incomplete setups are rejected with 400."""
    balance: Decimal
    annual_rate_pct: Decimal
    tenor: int
    unit: Literal["months", "years"] = "months"
    payment_start_date: date | None = None
    as_of: date | None = None


class SnapshotRequest(BaseModel):
    balance: Decimal = Field(..., gt=0)
    rate_pct: Decimal = Field(..., ge=0)
    tenor: int = Field(..., gt=0)
    unit: Literal["months", "years"] = "months"
    start_date: date | None = None
    valid_until: date | None = None


# ---- Response schemas ----

class RatePeriodResponse(BaseModel):
    start: date
    rate: Decimal


class StageResponse(BaseModel):
    name: str
    percent: Decimal
    paid_on: date | None = None


class DisbursementResponse(BaseModel):
    drawn_on: date
    amount: Decimal


class EvaluationResponse(BaseModel):
    as_of: date
    loan_start: date
    term_months: int
    months_paid: int
    months_left: int
    current_rate: Decimal
    rate_schedule: list[RatePeriodResponse]

    equity_paid: Decimal
    loan_disbursed: Decimal
    loan_disbursements: list[DisbursementResponse]
    pre_start_interest: Decimal

    interest_paid: Decimal
    principal_paid: Decimal
    outstanding_balance: Decimal
    monthly_payment: Decimal

    current_value: Decimal
    equity: Decimal


class QuoteResponse(BaseModel):
    balance: Decimal
    annual_rate_pct: Decimal
    months: int
    payment: Decimal
    total_paid: Decimal
    total_interest: Decimal
    months_paid: int = 0
    remaining_as_of: Decimal


class SnapshotResponse(BaseModel):
    balance: Decimal
    rate_pct: Decimal
    months: int
    tenor: int
    unit: str
    locked_at: datetime
    start_date: date | None = None
    valid_until: date | None = None
    valid: bool = True
