from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, timedelta
from typing import Iterable, Optional, Sequence

from core.domain.gig import ConsolidatedGig, GigRecord

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_DAYS = 7


class GreedyChainGrouper:
    """
    Merges daily gig records belonging to one multi-day booking.

    Records are ordered by (date, id). Each unprocessed record opens a chain
    and absorbs later records with the same (event, client, gig type) whose
    date is 1..window days after the chain's last day. First match wins; a
    record belongs to at most one chain. Scanning for a chain stops once a
    candidate is more than ``window_days`` past the chain end, which relies on
    the sort order.
    """

    def __init__(self, window_days: int = DEFAULT_WINDOW_DAYS) -> None:
        if window_days < 1:
            raise ValueError("window_days must be at least 1.")
        self.window_days = int(window_days)

    def group(self, records: Iterable[GigRecord]) -> list[ConsolidatedGig]:
        dated = self._dated_records(records)
        processed: set[int] = set()
        out: list[ConsolidatedGig] = []

        for index, (current_day, current) in enumerate(dated):
            if current.id in processed:
                continue
            processed.add(current.id)
            chain: list[tuple[date, GigRecord]] = [(current_day, current)]

            for candidate_day, candidate in dated[index + 1:]:
                if candidate.id in processed:
                    continue
                day_diff = (candidate_day - chain[-1][0]).days
                if day_diff > self.window_days:
                    break
                if day_diff > 0 and candidate.grouping_key == current.grouping_key:
                    chain.append((candidate_day, candidate))
                    processed.add(candidate.id)

            out.append(self._emit(chain))
        return out

    def _dated_records(self, records: Iterable[GigRecord]) -> list[tuple[date, GigRecord]]:
        dated: list[tuple[date, GigRecord]] = []
        seen_ids: set[int] = set()
        for record in records:
            day = record.parsed_date()
            if day is None:
                logger.warning("Gig %s has malformed date %r; excluded from consolidation", record.id, record.date)
                continue
            if record.id in seen_ids:
                logger.warning("Duplicate gig id %s ignored during consolidation", record.id)
                continue
            seen_ids.add(record.id)
            dated.append((day, record))
        dated.sort(key=lambda item: (item[0], item[1].id))
        return dated

    @staticmethod
    def _emit(chain: Sequence[tuple[date, GigRecord]]) -> ConsolidatedGig:
        first_day, first = chain[0]
        if len(chain) == 1:
            return ConsolidatedGig.single(first, first_day)
        return ConsolidatedGig(
            records=tuple(record for _, record in chain),
            start_date=first_day,
            end_date=chain[-1][0],
            is_multi_day=True,
        )


def consolidate(
    records: Iterable[GigRecord],
    *,
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> list[ConsolidatedGig]:
    return GreedyChainGrouper(window_days).group(records)


def find_chain_for(gig_id: int, consolidated: Iterable[ConsolidatedGig]) -> Optional[ConsolidatedGig]:
    for gig in consolidated:
        if gig_id in gig.record_ids:
            return gig
    return None


def group_by_day(consolidated: Iterable[ConsolidatedGig]) -> dict[date, list[ConsolidatedGig]]:
    """Calendar view: every day from start to end of a booking maps to the booking."""
    days: dict[date, list[ConsolidatedGig]] = defaultdict(list)
    for gig in consolidated:
        day = gig.start_date
        while day <= gig.end_date:
            days[day].append(gig)
            day += timedelta(days=1)
    return dict(days)


__all__ = ["GreedyChainGrouper", "DEFAULT_WINDOW_DAYS", "consolidate", "find_chain_for", "group_by_day"]
