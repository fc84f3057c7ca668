from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import date, datetime
from typing import Optional

from core.domain.enums import GigStatus

# Fields the payment-capture workflow (and storage) may patch on a record.
PATCHABLE_GIG_FIELDS = frozenset(
    {
        "status",
        "expected_pay",
        "actual_pay",
        "tips",
        "parking_expense",
        "other_expenses",
        "total_received",
        "reimbursed_parking",
        "reimbursed_other",
        "unreimbursed_parking",
        "unreimbursed_other",
        "mileage",
        "tax_percentage",
        "payment_method",
        "gig_address",
        "starting_address",
        "got_paid_date",
    }
)


def parse_iso_day(value: object) -> Optional[date]:
    """Parse a date-only ISO string; ``None`` when missing or malformed."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value or "").strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


@dataclass(frozen=True)
class GigRecord:
    """One calendar day of booked work, as stored."""

    id: int
    event_name: str
    client_name: str
    gig_type: str
    date: str
    user_id: Optional[int] = None
    status: GigStatus = GigStatus.UPCOMING

    # legacy single-amount fields
    expected_pay: Optional[str] = None
    actual_pay: Optional[str] = None
    tips: Optional[str] = None
    parking_expense: Optional[str] = None
    other_expenses: Optional[str] = None

    # "got paid" capture fields, superseding the legacy ones when present
    total_received: Optional[str] = None
    reimbursed_parking: Optional[str] = None
    reimbursed_other: Optional[str] = None
    unreimbursed_parking: Optional[str] = None
    unreimbursed_other: Optional[str] = None

    mileage: Optional[int] = None
    tax_percentage: Optional[int] = None
    payment_method: Optional[str] = None
    gig_address: Optional[str] = None
    starting_address: Optional[str] = None
    got_paid_date: Optional[datetime] = None

    @property
    def grouping_key(self) -> tuple[str, str, str]:
        return (self.event_name, self.client_name, self.gig_type)

    @property
    def is_completed(self) -> bool:
        return self.status == GigStatus.COMPLETED

    def parsed_date(self) -> Optional[date]:
        return parse_iso_day(self.date)


@dataclass(frozen=True)
class ConsolidatedGig:
    """
    Logical booking derived from one or more consecutive ``GigRecord`` days.

    Financial values always come from the first record of the chain; the
    payment capture flow enters totals once per booking, not once per day.
    """

    records: tuple[GigRecord, ...]
    start_date: date
    end_date: date
    is_multi_day: bool = False
    record_ids: tuple[int, ...] = field(default=(), compare=False)

    def __post_init__(self) -> None:
        if not self.records:
            raise ValueError("ConsolidatedGig requires at least one record.")
        if not self.record_ids:
            object.__setattr__(self, "record_ids", tuple(r.id for r in self.records))

    @staticmethod
    def single(record: GigRecord, day: date) -> "ConsolidatedGig":
        return ConsolidatedGig(records=(record,), start_date=day, end_date=day, is_multi_day=False)

    @property
    def primary(self) -> GigRecord:
        return self.records[0]

    @property
    def id(self) -> int:
        return self.primary.id

    @property
    def date(self) -> date:
        return self.start_date

    @property
    def day_count(self) -> int:
        return len(self.records)

    @property
    def span_days(self) -> int:
        return (self.end_date - self.start_date).days + 1

    @property
    def status(self) -> GigStatus:
        return self.primary.status

    @property
    def is_completed(self) -> bool:
        return self.primary.is_completed

    def __getattr__(self, name: str):
        # Delegate record attributes (event_name, tips, mileage, ...) to the first record.
        if name in _GIG_FIELD_NAMES:
            return getattr(self.records[0], name)
        raise AttributeError(name)


_GIG_FIELD_NAMES = frozenset(f.name for f in fields(GigRecord))


__all__ = ["GigRecord", "ConsolidatedGig", "PATCHABLE_GIG_FIELDS", "parse_iso_day"]
