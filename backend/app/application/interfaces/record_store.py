"""Abstract interface (port) for the remote record store."""

from abc import ABC, abstractmethod

from app.domain.entities import Country, NameRecord


class RecordStore(ABC):
    """Port for the name directory backend — implemented in the infrastructure layer.

    Read methods raise ``StoreUnavailableError`` on any backend failure;
    ``insert_name`` raises ``StoreRejectionError`` when the store refuses
    the row.
    """

    @abstractmethod
    async def get_active_countries(self) -> list[Country]:
        """Return all active countries ordered by name ascending."""
        ...

    @abstractmethod
    async def get_country_counts(self) -> list[tuple[str, int]]:
        """Return ``(country_id, total)`` pairs. Countries with no names may be absent."""
        ...

    @abstractmethod
    async def query_names(
        self,
        *,
        country_id: str | None = None,
        text_like: str | None = None,
        limit: int = 200,
    ) -> list[NameRecord]:
        """Return names ordered by name ascending.

        Args:
            country_id: Restrict to one country when given.
            text_like: Keep names whose name OR description contains this
                text, case-insensitively.
            limit: Maximum number of rows returned.
        """
        ...

    @abstractmethod
    async def query_names_with_country(
        self,
        *,
        text_like: str | None = None,
        limit: int = 200,
    ) -> list[NameRecord]:
        """Like ``query_names`` across all countries, with country label/code joined in."""
        ...

    @abstractmethod
    async def insert_name(self, record: NameRecord) -> NameRecord:
        """Persist a new name and return the stored row."""
        ...
