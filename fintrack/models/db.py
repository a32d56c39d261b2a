"""SQLAlchemy ORM models for relational persistence."""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    String,
    Integer,
    Numeric,
    Date,
    DateTime,
    ForeignKey,
    JSON,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class PropertyRecord(Base):
    __tablename__ = "properties"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), onupdate=func.now())

    # Precision matches the PropertyCreate request limits
    name: Mapped[str] = mapped_column(String(255))
    purchase_price: Mapped[Decimal] = mapped_column(Numeric(14, 2))
    down_payment: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=0)
    loan_principal: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=0)
    interest_rate: Mapped[Decimal] = mapped_column(Numeric(8, 6), default=0)
    loan_term: Mapped[int] = mapped_column(Integer, default=0)
    current_value: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=0)
    monthly_payment: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0)
    purchase_date: Mapped[date] = mapped_column(Date)

    # Modeling fields
    loan_start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    loan_term_months: Mapped[int | None] = mapped_column(Integer, nullable=True)
    rate_schedule: Mapped[list] = mapped_column(JSON, default=list)
    disbursement_schedule: Mapped[list] = mapped_column(JSON, default=list)


class RepriceSnapshotRecord(Base):
    __tablename__ = "reprice_snapshots"

    property_id: Mapped[str] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"), primary_key=True
    )
    locked_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    # Calculator setup, stored as-is
    payload: Mapped[dict] = mapped_column(JSON)
