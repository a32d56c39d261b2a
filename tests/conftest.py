"""Canonical test fixtures used across engine, repository and API tests.

Fixture: $1M off-plan condo, $100K down, $800K loan at 3.5%, 25yr.
Stages paid so far: booking, S&P, foundation, framework. Amortization
starts at TOP (2026-07-01).

Fixture: $500K completed house, 80% LTV, 7% rate, 30yr fixed, no stages.
"""

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from fintrack.api.app import app
from fintrack.api.deps import get_repo
from fintrack.models.loan import RatePeriod, Stage
from fintrack.models.property import RealEstateProperty
from fintrack.repo.memory import MemoryRepo


@pytest.fixture
def staged_property() -> RealEstateProperty:
    """Off-plan purchase partway through progressive payments."""
    return RealEstateProperty(
        id="condo-1",
        name="Riverside Condo",
        purchase_price=Decimal("1000000"),
        down_payment=Decimal("100000"),
        loan_principal=Decimal("800000"),
        interest_rate=Decimal("0.035"),
        loan_term=25,
        current_value=Decimal("1100000"),
        purchase_date=date(2024, 1, 10),
        loan_start_date=date(2026, 7, 1),
        disbursement_schedule=[
            Stage("Booking Fee", Decimal("0.05"), date(2024, 1, 10)),
            Stage("S&P within 8 weeks", Decimal("0.15"), date(2024, 3, 5)),
            Stage("Foundation", Decimal("0.10"), date(2024, 9, 1)),
            Stage("Reinforced Concrete Framework", Decimal("0.10"), date(2025, 3, 1)),
            Stage("TOP/CSC", Decimal("0.25")),
            Stage("Completion", Decimal("0.20")),
        ],
    )


@pytest.fixture
def completed_property() -> RealEstateProperty:
    """Completed house bought with a lump-sum drawdown."""
    return RealEstateProperty(
        id="house-1",
        name="Elm Street House",
        purchase_price=Decimal("500000"),
        down_payment=Decimal("100000"),
        loan_principal=Decimal("400000"),
        interest_rate=Decimal("0.07"),
        loan_term=30,
        current_value=Decimal("550000"),
        purchase_date=date(2020, 1, 15),
    )


@pytest.fixture
def repriced_property(completed_property) -> RealEstateProperty:
    """Same house, repriced to 5% after two years."""
    return completed_property.model_copy(update={
        "id": "house-2",
        "rate_schedule": [RatePeriod(date(2022, 1, 15), Decimal("0.05"))],
    })


@pytest.fixture
def memory_repo() -> MemoryRepo:
    return MemoryRepo()


@pytest.fixture
def client(memory_repo):
    async def _override() -> MemoryRepo:
        return memory_repo

    app.dependency_overrides[get_repo] = _override
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
