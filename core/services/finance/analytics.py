from __future__ import annotations

from decimal import Decimal

from core.domain.money import ZERO, quantize_money
from core.services.finance.models import FinanceAnalyticsRow, PeriodStats

GIG_PARKING_LABEL = "Gig Parking"
GIG_OTHER_LABEL = "Gig Other Expenses"
MILEAGE_LABEL = "Mileage"


def build_category_analytics(stats: PeriodStats) -> list[FinanceAnalyticsRow]:
    """Deductions grouped by category; gig-embedded amounts get their own buckets."""
    buckets: dict[str, dict[str, object]] = {}

    def add(key: str, label: str, amount: Decimal, reimbursed: Decimal, net: Decimal) -> None:
        bucket = buckets.get(key)
        if bucket is None:
            bucket = {"label": label, "amount": ZERO, "reimbursed": ZERO, "net": ZERO, "count": 0}
            buckets[key] = bucket
        bucket["amount"] += amount  # type: ignore[operator]
        bucket["reimbursed"] += reimbursed  # type: ignore[operator]
        bucket["net"] += net  # type: ignore[operator]
        bucket["count"] += 1  # type: ignore[operator]

    for row in stats.expense_rows:
        add(row.category, row.category, row.amount, row.reimbursed, row.net)
    for row in stats.gig_expense_rows:
        if row.parking > ZERO:
            add("__gig_parking__", GIG_PARKING_LABEL, row.parking, ZERO, row.parking)
        if row.other > ZERO:
            add("__gig_other__", GIG_OTHER_LABEL, row.other, ZERO, row.other)
        if row.mileage_deduction > ZERO:
            add("__mileage__", MILEAGE_LABEL, row.mileage_deduction, ZERO, row.mileage_deduction)

    rows = [
        FinanceAnalyticsRow(
            dimension="category",
            key=key,
            label=str(bucket["label"]),
            amount=quantize_money(bucket["amount"]),  # type: ignore[arg-type]
            reimbursed=quantize_money(bucket["reimbursed"]),  # type: ignore[arg-type]
            net=quantize_money(bucket["net"]),  # type: ignore[arg-type]
            count=int(bucket["count"]),  # type: ignore[arg-type]
        )
        for key, bucket in buckets.items()
    ]
    rows.sort(key=lambda row: (-row.net, row.label.lower()))
    return rows


__all__ = ["build_category_analytics", "GIG_PARKING_LABEL", "GIG_OTHER_LABEL", "MILEAGE_LABEL"]
