from __future__ import annotations

from datetime import datetime

import pytest
from sqlalchemy import inspect
from sqlalchemy.exc import OperationalError

from core.domain import ExpenseRecord, GigRecord, GigStatus, UserProfile
from core.exceptions import NotFoundError, PersistenceError, ValidationError
from infra.migrate import run_migrations


def _new_gig(day: str, **kwargs) -> GigRecord:
    return GigRecord(id=0, event_name="Expo", client_name="Acme", gig_type="Promo", date=day, user_id=1, **kwargs)


def test_gig_add_list_and_get(services):
    repo = services["gig_repo"]
    later = repo.add(_new_gig("2025-03-02", expected_pay="100"))
    earlier = repo.add(_new_gig("2025-03-01"))
    repo.add(GigRecord(id=0, event_name="Other", client_name="", gig_type="", date="2025-03-01", user_id=2))
    services["session"].commit()

    assert later.id and earlier.id and later.id != earlier.id
    assert [g.id for g in repo.list_by_user(1)] == [earlier.id, later.id]
    assert repo.get(later.id).expected_pay == "100"
    assert repo.get(later.id).status == GigStatus.UPCOMING
    assert repo.get(9999) is None


def test_patch_updates_and_commits_fields(services):
    repo = services["gig_repo"]
    gig = repo.add(_new_gig("2025-03-01", expected_pay="300"))

    updated = repo.patch(
        gig.id,
        {
            "status": "completed",
            "total_received": "300.00",
            "mileage": 14,
            "got_paid_date": "2025-03-05T10:00:00",
        },
    )

    assert updated.status == GigStatus.COMPLETED
    assert updated.total_received == "300.00"
    assert updated.mileage == 14
    assert updated.got_paid_date == datetime(2025, 3, 5, 10, 0)
    services["session"].rollback()
    assert repo.get(gig.id).total_received == "300.00"


def test_patch_rejects_unknown_gig_and_fields(services):
    repo = services["gig_repo"]
    gig = repo.add(_new_gig("2025-03-01"))

    with pytest.raises(NotFoundError):
        repo.patch(424242, {"mileage": 3})
    with pytest.raises(ValidationError) as exc:
        repo.patch(gig.id, {"event_name": "Renamed"})
    assert exc.value.code == "GIG_PATCH_FIELDS"
    with pytest.raises(ValidationError):
        repo.patch(gig.id, {"status": "paid"})


def test_patch_failure_rolls_back_and_raises_persistence_error(services, monkeypatch):
    session = services["session"]
    repo = services["gig_repo"]
    gig = repo.add(_new_gig("2025-03-01"))
    session.commit()
    rolled_back: list[bool] = []
    original_rollback = session.rollback

    def _failing_commit():
        raise OperationalError("UPDATE gigs", {}, Exception("database is locked"))

    def _tracking_rollback():
        rolled_back.append(True)
        original_rollback()

    monkeypatch.setattr(session, "commit", _failing_commit)
    monkeypatch.setattr(session, "rollback", _tracking_rollback)

    with pytest.raises(PersistenceError) as exc:
        repo.patch(gig.id, {"total_received": "50.00"})

    assert exc.value.code == "GIG_PATCH_FAILED"
    assert rolled_back == [True]
    assert repo.get(gig.id).total_received is None


def test_expense_repository_round_trip(services):
    repo = services["expense_repo"]
    gig = services["gig_repo"].add(_new_gig("2025-03-01"))
    kept = repo.add(ExpenseRecord(id=0, date="2025-03-04", amount="42.10", category="Supplies", user_id=1, gig_id=gig.id))
    dropped = repo.add(ExpenseRecord(id=0, date="2025-03-02", amount="5", category="Office Expenses", user_id=1))
    services["session"].commit()

    assert [e.id for e in repo.list_by_user(1)] == [dropped.id, kept.id]
    assert repo.list_by_user(1)[1].gig_id == gig.id
    assert repo.list_by_user(1)[1].reimbursed_amount == "0"

    repo.delete(dropped.id)
    services["session"].commit()
    assert [e.id for e in repo.list_by_user(1)] == [kept.id]


def test_profile_upsert_and_get(services):
    repo = services["profile_repo"]

    repo.upsert(UserProfile(id=1, default_tax_percentage=28, home_address="9 Home St"))
    repo.upsert(UserProfile(id=1, default_tax_percentage=30, home_address="9 Home St"))
    services["session"].commit()

    assert repo.get(1) == UserProfile(id=1, default_tax_percentage=30, home_address="9 Home St")
    assert repo.get(2) is None


def test_migrations_create_schema(tmp_path):
    db_url = f"sqlite:///{(tmp_path / 'gig_ledger.db').as_posix()}"

    run_migrations(db_url)

    from sqlalchemy import create_engine

    engine = create_engine(db_url)
    try:
        tables = set(inspect(engine).get_table_names())
    finally:
        engine.dispose()
    assert {"gigs", "expenses", "user_profiles", "alembic_version"} <= tables
