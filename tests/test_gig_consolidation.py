from __future__ import annotations

import logging
import random
from datetime import date

import pytest

from core.domain import GigRecord
from core.services.consolidation import (
    GreedyChainGrouper,
    consolidate,
    find_chain_for,
    group_by_day,
)


def _gig(gig_id: int, day: str, event: str = "Expo", client: str = "Acme", gig_type: str = "Promo", **kwargs) -> GigRecord:
    return GigRecord(id=gig_id, event_name=event, client_name=client, gig_type=gig_type, date=day, **kwargs)


def _ids(consolidated) -> list[tuple[int, ...]]:
    return [gig.record_ids for gig in consolidated]


def test_three_day_booking_becomes_one_consolidated_gig():
    records = [
        _gig(1, "2025-03-01", total_received="600.00"),
        _gig(2, "2025-03-02", total_received="0"),
        _gig(3, "2025-03-03", total_received="0"),
    ]

    result = consolidate(records)

    assert len(result) == 1
    booking = result[0]
    assert booking.start_date == date(2025, 3, 1)
    assert booking.end_date == date(2025, 3, 3)
    assert booking.is_multi_day is True
    assert booking.day_count == 3
    assert booking.record_ids == (1, 2, 3)
    # financial fields come from the first record only
    assert booking.total_received == "600.00"
    assert booking.primary.id == 1


def test_single_day_gig_is_not_multi_day():
    result = consolidate([_gig(7, "2025-06-10")])

    assert len(result) == 1
    assert result[0].is_multi_day is False
    assert result[0].start_date == result[0].end_date == date(2025, 6, 10)


def test_different_grouping_key_never_merges():
    records = [
        _gig(1, "2025-03-01"),
        _gig(2, "2025-03-02", client="Other Client"),
        _gig(3, "2025-03-03", gig_type="Setup"),
        _gig(4, "2025-03-04", event="Expo West"),
    ]

    assert _ids(consolidate(records)) == [(1,), (2,), (3,), (4,)]


def test_window_is_measured_from_last_day_of_chain():
    records = [_gig(1, "2025-03-01"), _gig(2, "2025-03-07"), _gig(3, "2025-03-13")]

    assert _ids(consolidate(records)) == [(1, 2, 3)]


def test_gap_beyond_window_starts_new_booking():
    records = [_gig(1, "2025-03-01"), _gig(2, "2025-03-09")]

    assert _ids(consolidate(records)) == [(1,), (2,)]


def test_window_is_configurable():
    records = [_gig(1, "2025-03-01"), _gig(2, "2025-03-03")]

    assert _ids(consolidate(records, window_days=1)) == [(1,), (2,)]
    assert _ids(consolidate(records, window_days=2)) == [(1, 2)]
    with pytest.raises(ValueError):
        GreedyChainGrouper(window_days=0)


def test_same_day_records_are_separate_bookings():
    records = [_gig(1, "2025-03-01"), _gig(2, "2025-03-01")]

    assert _ids(consolidate(records)) == [(1,), (2,)]


def test_non_matching_record_inside_window_is_skipped_not_consumed():
    records = [
        _gig(1, "2025-03-01"),
        _gig(2, "2025-03-02", event="Gala"),
        _gig(3, "2025-03-03"),
    ]

    result = consolidate(records)

    assert _ids(result) == [(1, 3), (2,)]


def test_interleaved_identical_bookings_group_first_match_wins():
    records = [
        _gig(1, "2025-03-01"),
        _gig(2, "2025-03-01"),
        _gig(3, "2025-03-02"),
        _gig(4, "2025-03-02"),
    ]

    assert _ids(consolidate(records)) == [(1, 3), (2, 4)]


def test_malformed_dates_are_excluded_and_logged(caplog):
    records = [_gig(1, "2025-03-01"), _gig(2, "not-a-date"), _gig(3, "")]

    with caplog.at_level(logging.WARNING):
        result = consolidate(records)

    assert _ids(result) == [(1,)]
    assert "malformed date" in caplog.text


def test_input_order_does_not_change_result_and_repeated_runs_are_identical():
    records = [
        _gig(1, "2025-03-01"),
        _gig(2, "2025-03-02"),
        _gig(3, "2025-03-02", event="Gala"),
        _gig(4, "2025-03-20"),
        _gig(5, "2025-03-21"),
    ]
    shuffled = list(records)
    random.Random(7).shuffle(shuffled)
    grouper = GreedyChainGrouper()

    first = grouper.group(records)
    second = grouper.group(records)
    third = grouper.group(shuffled)

    assert first == second == third
    assert _ids(first) == [(1, 2), (3,), (4, 5)]


def test_find_chain_for_locates_booking_from_any_day():
    result = consolidate([_gig(1, "2025-03-01"), _gig(2, "2025-03-02"), _gig(9, "2025-04-01", event="Gala")])

    assert find_chain_for(2, result).record_ids == (1, 2)
    assert find_chain_for(9, result).record_ids == (9,)
    assert find_chain_for(99, result) is None


def test_group_by_day_lists_booking_on_every_covered_day():
    result = consolidate([_gig(1, "2025-03-01"), _gig(2, "2025-03-03"), _gig(3, "2025-03-02", event="Gala")])

    calendar = group_by_day(result)

    assert sorted(calendar) == [date(2025, 3, 1), date(2025, 3, 2), date(2025, 3, 3)]
    assert [g.id for g in calendar[date(2025, 3, 2)]] == [1, 3]
    assert [g.id for g in calendar[date(2025, 3, 3)]] == [1]
