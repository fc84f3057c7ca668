from __future__ import annotations

import json
from datetime import date, datetime
from decimal import Decimal

import pytest

from core.domain import ExpenseRecord, GigRecord, GigStatus, UserProfile
from core.exceptions import NotFoundError


def _seed(services) -> None:
    gigs = services["gig_repo"]
    expenses = services["expense_repo"]
    for day in ("2025-04-28", "2025-04-29", "2025-04-30"):
        gigs.add(
            GigRecord(
                id=0,
                user_id=1,
                event_name="Spring Expo",
                client_name="Acme",
                gig_type="Promo",
                date=day,
                status=GigStatus.COMPLETED,
                actual_pay="900" if day == "2025-04-28" else None,
                tips="60" if day == "2025-04-28" else None,
                mileage=20 if day == "2025-04-28" else None,
            )
        )
    gigs.add(
        GigRecord(
            id=0,
            user_id=1,
            event_name="Gala",
            client_name="Hotel",
            gig_type="Server",
            date="2025-05-10",
            status=GigStatus.UPCOMING,
            expected_pay="250",
            gig_address="1 Ballroom Rd",
        )
    )
    gigs.add(
        GigRecord(id=0, user_id=1, event_name="Winter Fair", client_name="City", gig_type="Promo",
                  date="2025-02-01", status=GigStatus.COMPLETED, actual_pay="100")
    )
    expenses.add(ExpenseRecord(id=0, user_id=1, date="2025-05-02", amount="45", category="Supplies"))
    expenses.add(ExpenseRecord(id=0, user_id=1, date="2025-05-03", amount="30", reimbursed_amount="10",
                               category="Work Travel"))
    services["profile_repo"].upsert(UserProfile(id=1, default_tax_percentage=30, home_address="9 Home St"))
    services["session"].commit()


def test_period_stats_for_irs_quarter_use_profile_tax_rate(services):
    _seed(services)
    fs = services["finance_service"]

    stats = fs.get_period_stats(1, "quarterly", date(2025, 5, 15))

    assert stats.period.label == "Q2 2025"
    assert stats.total_gigs == 2
    assert stats.completed_gigs == 1
    assert stats.upcoming_gigs == 1
    assert stats.actual_earnings == Decimal("960.00")
    assert stats.projected_earnings == Decimal("1210.00")
    # 20 miles * 0.70 + (45) + (30 - 10)
    assert stats.total_expenses == Decimal("79.00")
    assert stats.estimated_tax == Decimal("288.00")


def test_list_consolidated_gigs_merges_multi_day_booking(services):
    _seed(services)

    consolidated = services["finance_service"].list_consolidated_gigs(1)

    assert [g.event_name for g in consolidated] == ["Winter Fair", "Spring Expo", "Gala"]
    assert consolidated[1].day_count == 3
    assert services["finance_service"].list_consolidated_gigs(2) == []


def test_period_navigation_reports_adjacent_ranges(services):
    nav = services["finance_service"].get_period_navigation("quarterly", date(2025, 5, 15))

    assert nav.current.label == "Q2 2025"
    assert nav.previous.label == "Q1 2025"
    assert nav.next.label == "Q3 2025"
    assert nav.next.start == date(2025, 6, 1)


def test_expense_analytics_and_monthly_cashflow(services):
    _seed(services)
    fs = services["finance_service"]

    by_category = {row.label: row for row in fs.get_expense_analytics(1, "quarterly", date(2025, 5, 15))}
    cashflow = fs.get_cashflow_by_month(1, "quarterly", date(2025, 5, 15))

    assert by_category["Supplies"].net == Decimal("45.00")
    assert by_category["Work Travel"].reimbursed == Decimal("10.00")
    assert by_category["Mileage"].net == Decimal("14.00")
    assert [row.period_key for row in cashflow] == ["2025-04", "2025-05"]
    assert cashflow[0].taxable_income == Decimal("960.00")
    assert cashflow[0].estimated_tax == Decimal("288.00")
    assert cashflow[1].deductions == Decimal("65.00")


def test_payment_capture_through_service_graph_persists_and_records_event(services, support):
    _seed(services)
    graph = services["service_graph"]
    gala = next(g for g in services["finance_service"].list_consolidated_gigs(1) if g.event_name == "Gala")

    workflow = graph.start_payment_capture(1, gala.id)
    assert workflow.state.start_address == "9 Home St"
    assert workflow.state.tax_rate == 30
    workflow.set_total_received("275")
    workflow.set_mileage(12)
    workflow.set_parking("15", "15")
    for _ in range(5):
        workflow.next()
    workflow.confirm()
    workflow.finalize(paid_at=datetime(2025, 5, 11, 9, 0))

    stored = services["gig_repo"].get(gala.id)
    assert stored.status == GigStatus.COMPLETED
    assert stored.total_received == "275.00"
    assert stored.unreimbursed_parking == "0.00"
    assert stored.tax_percentage == 30

    events = [json.loads(line) for line in support.events_path.read_text(encoding="utf-8").splitlines()]
    assert [e["event_type"] for e in events] == ["gig.payment_captured"]
    assert events[0]["data"]["gig_id"] == gala.id

    stats = services["finance_service"].get_period_stats(1, "monthly", date(2025, 5, 1))
    assert stats.actual_earnings == Decimal("260.00")


def test_start_payment_capture_unknown_gig(services):
    with pytest.raises(NotFoundError):
        services["service_graph"].start_payment_capture(1, 999)
