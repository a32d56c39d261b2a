"""Property routes."""

import logging
from datetime import date, datetime, timezone
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException, Response

from fintrack.api.deps import get_repo
from fintrack.api.routes.loan import evaluation_to_response
from fintrack.api.schemas import (
    EvaluationResponse,
    PropertyCreate,
    SnapshotRequest,
    SnapshotResponse,
)
from fintrack.engine.evaluation import evaluate_property
from fintrack.engine.repricing import tenor_to_months
from fintrack.models.property import RealEstateProperty, RepriceSnapshot
from fintrack.repo.base import PropertyRepo

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/properties", tags=["properties"])


async def _get_or_404(repo: PropertyRepo, property_id: str) -> RealEstateProperty:
    prop = await repo.get_property(property_id)
    if prop is None:
        raise HTTPException(status_code=404, detail=f"Property {property_id} not found")
    return prop


@router.get("", response_model=list[RealEstateProperty])
async def list_properties(repo: PropertyRepo = Depends(get_repo)):
    return await repo.list_properties()


@router.post("", response_model=RealEstateProperty, status_code=201)
async def create_property(req: PropertyCreate, repo: PropertyRepo = Depends(get_repo)):
    """Save a property. An id is generated when the request has none."""
    prop = req.to_property(req.id or uuid4().hex)
    await repo.save_property(prop)
    logger.info("Saved property %s (%s)", prop.id, prop.name)
    return prop


@router.get("/{property_id}", response_model=RealEstateProperty)
async def get_property(property_id: str, repo: PropertyRepo = Depends(get_repo)):
    return await _get_or_404(repo, property_id)


@router.put("/{property_id}", response_model=RealEstateProperty)
async def update_property(
    property_id: str, req: PropertyCreate, repo: PropertyRepo = Depends(get_repo)
):
    await _get_or_404(repo, property_id)
    prop = req.to_property(property_id)
    await repo.save_property(prop)
    return prop


@router.delete("/{property_id}", status_code=204)
async def delete_property(property_id: str, repo: PropertyRepo = Depends(get_repo)):
    await repo.delete_property(property_id)
    return Response(status_code=204)


@router.get("/{property_id}/evaluation", response_model=EvaluationResponse)
async def get_evaluation(
    property_id: str,
    as_of: date | None = None,
    repo: PropertyRepo = Depends(get_repo),
):
    """Loan allocation, accrued interest and amortization as of a date (default today)."""
    prop = await _get_or_404(repo, property_id)
    evaluation = evaluate_property(prop, as_of or date.today())
    return evaluation_to_response(evaluation)


def _snapshot_response(snapshot: RepriceSnapshot, day: date) -> SnapshotResponse:
    return SnapshotResponse(
        balance=snapshot.balance,
        rate_pct=snapshot.rate_pct,
        months=snapshot.months,
        tenor=snapshot.tenor,
        unit=snapshot.unit,
        locked_at=snapshot.locked_at,
        start_date=snapshot.start_date,
        valid_until=snapshot.valid_until,
        valid=snapshot.is_valid_on(day),
    )


@router.get("/{property_id}/reprice-snapshot", response_model=SnapshotResponse)
async def get_snapshot(
    property_id: str,
    as_of: date | None = None,
    repo: PropertyRepo = Depends(get_repo),
):
    """Saved repricing setup, flagged invalid once past its valid-until date."""
    snapshot = await repo.get_snapshot(property_id)
    if snapshot is None:
        raise HTTPException(status_code=404, detail="No repricing setup saved")
    return _snapshot_response(snapshot, as_of or date.today())


@router.put("/{property_id}/reprice-snapshot", response_model=SnapshotResponse)
async def lock_snapshot(
    property_id: str, req: SnapshotRequest, repo: PropertyRepo = Depends(get_repo)
):
    """Lock in a repricing setup for a property."""
    await _get_or_404(repo, property_id)
    snapshot = RepriceSnapshot(
        balance=req.balance,
        rate_pct=req.rate_pct,
        months=tenor_to_months(req.tenor, req.unit),
        unit=req.unit,
        locked_at=datetime.now(timezone.utc),
        start_date=req.start_date,
        valid_until=req.valid_until,
    )
    await repo.save_snapshot(property_id, snapshot)
    logger.info("Locked repricing setup for property %s", property_id)
    return _snapshot_response(snapshot, date.today())


@router.delete("/{property_id}/reprice-snapshot", status_code=204)
async def clear_snapshot(property_id: str, repo: PropertyRepo = Depends(get_repo)):
    await repo.delete_snapshot(property_id)
    return Response(status_code=204)
