from __future__ import annotations

from datetime import date
from decimal import Decimal

from core.domain import GigRecord, GigStatus
from infra.bootstrap import build_services
from infra.settings import EngineSettings


def test_build_services_migrates_and_persists(tmp_path, support):
    db_url = f"sqlite:///{(tmp_path / 'gig_ledger.db').as_posix()}"
    settings = EngineSettings(database_url=db_url)

    graph = build_services(settings, support=support)
    try:
        graph.gig_repo.add(
            GigRecord(id=0, user_id=3, event_name="Wedding", client_name="Lee", gig_type="Bartender",
                      date="2025-06-07", status=GigStatus.COMPLETED, actual_pay="400")
        )
        graph.session.commit()
    finally:
        graph.close()

    reopened = build_services(settings, support=support)
    try:
        stats = reopened.finance_service.get_period_stats(3, "monthly", date(2025, 6, 1))
    finally:
        reopened.close()

    assert stats.completed_gigs == 1
    assert stats.actual_earnings == Decimal("400.00")
    assert stats.estimated_tax == Decimal("92.00")
