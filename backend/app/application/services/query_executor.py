"""Query executor — scoped read queries against the record store."""

import logging

from app.application.interfaces import RecordStore
from app.domain.entities import Country, NameRecord

logger = logging.getLogger(__name__)

DEFAULT_RESULT_LIMIT = 200
DEFAULT_GLOBAL_MIN_CHARS = 2


class QueryExecutor:
    """Issues the three list reads the directory views need.

    Filtering, ordering and the result cap are pushed down to the store so
    that the cap applies to relevant rows only. Store failures propagate as
    ``StoreUnavailableError``; this class never retries.
    """

    def __init__(
        self,
        store: RecordStore,
        *,
        result_limit: int = DEFAULT_RESULT_LIMIT,
        global_min_chars: int = DEFAULT_GLOBAL_MIN_CHARS,
    ):
        self._store = store
        self._result_limit = result_limit
        self._global_min_chars = global_min_chars

    @property
    def global_min_chars(self) -> int:
        return self._global_min_chars

    async def fetch_countries(self) -> list[Country]:
        """All active countries, ordered by name ascending."""
        countries = await self._store.get_active_countries()
        active = [c for c in countries if c.active]
        logger.debug("Fetched %d active countries", len(active))
        return active

    async def fetch_by_country(
        self, country_id: str | None, debounced_text: str | None
    ) -> list[NameRecord]:
        """Names in one country, optionally filtered by name/description text.

        An empty ``country_id`` yields an empty list without touching the store.
        """
        if not country_id:
            return []

        text = (debounced_text or "").strip()
        names = await self._store.query_names(
            country_id=country_id,
            text_like=text or None,
            limit=self._result_limit,
        )
        logger.debug(
            "Fetched %d names for country=%s text=%r", len(names), country_id, text
        )
        return names

    async def fetch_global(self, debounced_text: str | None) -> list[NameRecord]:
        """Names across all countries matching the text, tagged with their country.

        Below ``global_min_chars`` trimmed characters the result is empty and
        no request is issued.
        """
        text = (debounced_text or "").strip()
        if len(text) < self._global_min_chars:
            return []

        names = await self._store.query_names_with_country(
            text_like=text,
            limit=self._result_limit,
        )
        logger.debug("Fetched %d global matches for text=%r", len(names), text)
        return names
