"""Relational property store via SQLAlchemy async sessions."""

import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from fintrack.models.db import Base, PropertyRecord, RepriceSnapshotRecord
from fintrack.models.property import RealEstateProperty, RepriceSnapshot

logger = logging.getLogger(__name__)


def _to_record(prop: RealEstateProperty) -> PropertyRecord:
    data = prop.model_dump(mode="json", include={"rate_schedule", "disbursement_schedule"})
    return PropertyRecord(
        id=prop.id,
        name=prop.name,
        purchase_price=prop.purchase_price,
        down_payment=prop.down_payment,
        loan_principal=prop.loan_principal,
        interest_rate=prop.interest_rate,
        loan_term=prop.loan_term,
        current_value=prop.current_value,
        monthly_payment=prop.monthly_payment,
        purchase_date=prop.purchase_date,
        loan_start_date=prop.loan_start_date,
        loan_term_months=prop.loan_term_months,
        rate_schedule=data["rate_schedule"],
        disbursement_schedule=data["disbursement_schedule"],
    )


def _from_record(record: PropertyRecord) -> RealEstateProperty:
    return RealEstateProperty(
        id=record.id,
        name=record.name,
        purchase_price=record.purchase_price,
        down_payment=record.down_payment,
        loan_principal=record.loan_principal,
        interest_rate=record.interest_rate,
        loan_term=record.loan_term,
        current_value=record.current_value,
        monthly_payment=record.monthly_payment,
        purchase_date=record.purchase_date,
        loan_start_date=record.loan_start_date,
        loan_term_months=record.loan_term_months,
        rate_schedule=record.rate_schedule or [],
        disbursement_schedule=record.disbursement_schedule or [],
    )


class SqlRepo:
    def __init__(self, database_url: str, echo: bool = False):
        self.engine: AsyncEngine = create_async_engine(database_url, echo=echo)
        self.session = async_sessionmaker(self.engine, expire_on_commit=False)

    async def initialize(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database ready at %s", self.engine.url.render_as_string(hide_password=True))

    async def close(self) -> None:
        await self.engine.dispose()

    async def save_property(self, prop: RealEstateProperty) -> None:
        async with self.session() as session, session.begin():
            await session.merge(_to_record(prop))

    async def get_property(self, property_id: str) -> RealEstateProperty | None:
        async with self.session() as session:
            record = await session.get(PropertyRecord, property_id)
        return _from_record(record) if record is not None else None

    async def list_properties(self) -> list[RealEstateProperty]:
        async with self.session() as session:
            result = await session.scalars(
                select(PropertyRecord).order_by(PropertyRecord.created_at, PropertyRecord.id)
            )
            return [_from_record(r) for r in result]

    async def delete_property(self, property_id: str) -> None:
        async with self.session() as session, session.begin():
            await session.execute(
                delete(RepriceSnapshotRecord).where(RepriceSnapshotRecord.property_id == property_id)
            )
            await session.execute(delete(PropertyRecord).where(PropertyRecord.id == property_id))

    async def save_snapshot(self, property_id: str, snapshot: RepriceSnapshot) -> None:
        async with self.session() as session, session.begin():
            await session.merge(RepriceSnapshotRecord(
                property_id=property_id,
                locked_at=snapshot.locked_at,
                payload=snapshot.model_dump(mode="json"),
            ))

    async def get_snapshot(self, property_id: str) -> RepriceSnapshot | None:
        async with self.session() as session:
            record = await session.get(RepriceSnapshotRecord, property_id)
        return RepriceSnapshot.model_validate(record.payload) if record is not None else None

    async def delete_snapshot(self, property_id: str) -> None:
        async with self.session() as session, session.begin():
            await session.execute(
                delete(RepriceSnapshotRecord).where(RepriceSnapshotRecord.property_id == property_id)
            )
