# infra/db/models.py
from __future__ import annotations
from datetime import datetime
from typing import Optional

from sqlalchemy import (
    DateTime,
    Enum as SAEnum,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column

from infra.db.base import Base
from core.domain.enums import GigStatus


class GigORM(Base):
    __tablename__ = "gigs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    event_name: Mapped[str] = mapped_column(String, nullable=False)
    client_name: Mapped[str] = mapped_column(String, default="")
    gig_type: Mapped[str] = mapped_column(String, default="")
    date: Mapped[str] = mapped_column(String(10), nullable=False)  # ISO date-only, e.g. 2025-03-01
    status: Mapped[GigStatus] = mapped_column(
        SAEnum(GigStatus), default=GigStatus.UPCOMING, nullable=False
    )

    # money is stored as decimal strings, as entered
    expected_pay: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    actual_pay: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    tips: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    parking_expense: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    other_expenses: Mapped[Optional[str]] = mapped_column(String, nullable=True)

    total_received: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    reimbursed_parking: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    reimbursed_other: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    unreimbursed_parking: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    unreimbursed_other: Mapped[Optional[str]] = mapped_column(String, nullable=True)

    mileage: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    tax_percentage: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    payment_method: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    gig_address: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    starting_address: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    got_paid_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
Index("idx_gigs_user_date", GigORM.user_id, GigORM.date)


class ExpenseORM(Base):
    __tablename__ = "expenses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    date: Mapped[str] = mapped_column(String(10), nullable=False)
    amount: Mapped[str] = mapped_column(String, nullable=False)
    category: Mapped[str] = mapped_column(String, nullable=False)
    business_purpose: Mapped[str] = mapped_column(String, default="")
    merchant: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    reimbursed_amount: Mapped[Optional[str]] = mapped_column(String, nullable=True, default="0")
    gig_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("gigs.id", ondelete="SET NULL"),
        nullable=True,
    )
Index("idx_expenses_user_date", ExpenseORM.user_id, ExpenseORM.date)


class UserProfileORM(Base):
    __tablename__ = "user_profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    default_tax_percentage: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    home_address: Mapped[Optional[str]] = mapped_column(String, nullable=True)
