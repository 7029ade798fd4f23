"""Count aggregator — per-country name totals for the country grid."""

import logging

from app.application.interfaces import RecordStore
from app.domain.entities import CountryCounts

logger = logging.getLogger(__name__)


class CountAggregator:
    """Fetches the total number of names per country in a single query.

    Independent of any active filter. The whole map is replaced on every
    call; callers must treat a missing country as zero.
    """

    def __init__(self, store: RecordStore):
        self._store = store

    async def fetch_country_counts(self) -> CountryCounts:
        rows = await self._store.get_country_counts()
        totals: dict[str, int] = {}
        for country_id, total in rows:
            totals[country_id] = int(total or 0)
        logger.debug("Fetched counts for %d countries", len(totals))
        return CountryCounts(totals=totals)
