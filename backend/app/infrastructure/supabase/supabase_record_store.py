"""Supabase record store — implements the RecordStore port over PostgREST.

Talks to the ``/rest/v1`` endpoints of a Supabase project with httpx:

    countries            — id, name, code, is_active
    country_name_counts  — view: country_id, total
    names                — id, country_id, name, description, gender, created_by

Text filters are sent as ``or=(name.ilike.*q*,description.ilike.*q*)`` so
matching, ordering and the row cap all happen in the database.
"""

import logging
from collections.abc import Callable
from typing import Any

import httpx

from app.application.interfaces.record_store import RecordStore
from app.domain.entities import Country, Gender, NameRecord, format_country_label
from app.domain.exceptions import StoreRejectionError, StoreUnavailableError

logger = logging.getLogger(__name__)

_NAME_COLUMNS = "id,country_id,name,description,gender,created_by"


class SupabaseRecordStore(RecordStore):
    """Infrastructure adapter — reads and writes directory rows via PostgREST.

    Requests are authorized with the current session's access token when
    one is available, otherwise with the project's anon key.
    """

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        *,
        access_token: Callable[[], str | None] | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ):
        self._rest_url = f"{base_url.rstrip('/')}/rest/v1"
        self._anon_key = anon_key
        self._access_token = access_token
        self._http_client = http_client
        self._timeout = timeout

    def _get_headers(self, *, prefer: str | None = None) -> dict[str, str]:
        token = (self._access_token() if self._access_token else None) or self._anon_key
        headers = {
            "apikey": self._anon_key,
            "Authorization": f"Bearer {token}",
            "Accept": "application/json",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        """Return the injected client or create a new one."""
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=self._timeout)

    # ── Reads ──

    async def get_active_countries(self) -> list[Country]:
        rows = await self._select(
            "countries",
            [
                ("select", "id,name,code,is_active"),
                ("is_active", "eq.true"),
                ("order", "name.asc"),
            ],
            operation="get_active_countries",
        )
        return self._decode(rows, self._to_country, operation="get_active_countries")

    async def get_country_counts(self) -> list[tuple[str, int]]:
        rows = await self._select(
            "country_name_counts",
            [("select", "country_id,total")],
            operation="get_country_counts",
        )
        return self._decode(rows, self._to_count, operation="get_country_counts")

    async def query_names(
        self,
        *,
        country_id: str | None = None,
        text_like: str | None = None,
        limit: int = 200,
    ) -> list[NameRecord]:
        params: list[tuple[str, str]] = [("select", _NAME_COLUMNS)]
        if country_id:
            params.append(("country_id", f"eq.{country_id}"))
        if text_like:
            params.append(("or", ilike_any(text_like)))
        params += [("order", "name.asc"), ("limit", str(limit))]

        rows = await self._select("names", params, operation="query_names")
        return self._decode(rows, self._to_name_record, operation="query_names")

    async def query_names_with_country(
        self,
        *,
        text_like: str | None = None,
        limit: int = 200,
    ) -> list[NameRecord]:
        params: list[tuple[str, str]] = [("select", f"{_NAME_COLUMNS},countries(name,code)")]
        if text_like:
            params.append(("or", ilike_any(text_like)))
        params += [("order", "name.asc"), ("limit", str(limit))]

        rows = await self._select("names", params, operation="query_names_with_country")
        return self._decode(rows, self._to_name_with_country, operation="query_names_with_country")

    # ── Writes ──

    async def insert_name(self, record: NameRecord) -> NameRecord:
        """Insert a row; any refusal is raised as ``StoreRejectionError``."""
        payload = {
            "country_id": record.country_id,
            "name": record.name,
            "description": record.description,
            "gender": record.gender.value,
            "created_by": record.created_by,
        }
        client = await self._get_client()
        should_close = self._http_client is None

        try:
            response = await client.post(
                f"{self._rest_url}/names",
                headers=self._get_headers(prefer="return=representation"),
                json=payload,
            )
        except httpx.HTTPError as exc:
            raise StoreRejectionError(f"{type(exc).__name__}: {exc}") from exc
        finally:
            if should_close:
                await client.aclose()

        if not response.is_success:
            message, code = self._parse_error(response)
            raise StoreRejectionError(message, code=code)

        try:
            rows = response.json() if response.content else []
            if isinstance(rows, list) and rows:
                return self._to_name_record(rows[0])
        except (KeyError, ValueError) as exc:
            logger.warning("Inserted row could not be decoded, keeping submitted values: %s", exc)
        return record

    # ── Helpers ──

    async def _select(
        self, table: str, params: list[tuple[str, str]], *, operation: str
    ) -> list[dict[str, Any]]:
        client = await self._get_client()
        should_close = self._http_client is None

        try:
            response = await client.get(
                f"{self._rest_url}/{table}",
                headers=self._get_headers(),
                params=params,
            )
        except httpx.HTTPError as exc:
            raise StoreUnavailableError(operation, f"{type(exc).__name__}: {exc}") from exc
        finally:
            if should_close:
                await client.aclose()

        if not response.is_success:
            message, code = self._parse_error(response)
            raise StoreUnavailableError(
                operation, f"HTTP {response.status_code} [{code or '-'}]: {message}"
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise StoreUnavailableError(operation, "invalid JSON") from exc
        if not isinstance(data, list):
            raise StoreUnavailableError(operation, "unexpected response shape")
        return data

    @staticmethod
    def _parse_error(response: httpx.Response) -> tuple[str, str | None]:
        """Extract ``(message, code)`` from a PostgREST error body."""
        try:
            data = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}", None
        if not isinstance(data, dict):
            return response.text, None
        message = data.get("message") or data.get("error") or response.text
        code = data.get("code")
        return str(message), (str(code) if code is not None else None)

    @staticmethod
    def _decode(
        rows: list[dict[str, Any]], mapper: Callable[[dict[str, Any]], Any], *, operation: str
    ) -> list:
        """Map rows to entities; a malformed row surfaces as ``StoreUnavailableError``."""
        try:
            return [mapper(row) for row in rows]
        except (KeyError, TypeError, ValueError) as exc:
            raise StoreUnavailableError(operation, f"malformed row: {exc}") from exc

    @staticmethod
    def _to_country(row: dict[str, Any]) -> Country:
        return Country(
            id=str(row["id"]),
            name=row.get("name") or "",
            code=(row.get("code") or "").upper(),
            active=bool(row.get("is_active", True)),
        )

    @staticmethod
    def _to_count(row: dict[str, Any]) -> tuple[str, int]:
        return str(row["country_id"]), int(row.get("total") or 0)

    @staticmethod
    def _to_name_record(row: dict[str, Any], *, with_country: bool = False) -> NameRecord:
        record = NameRecord(
            id=str(row["id"]) if row.get("id") is not None else None,
            country_id=str(row.get("country_id") or ""),
            name=row.get("name") or "",
            description=row.get("description") or None,
            gender=Gender(row.get("gender") or Gender.MALE.value),
            created_by=row.get("created_by"),
        )
        if with_country:
            country = row.get("countries") or {}
            record.country_code = (country.get("code") or "").upper()
            record.country_label = format_country_label(country.get("name"), country.get("code"))
        return record

    @classmethod
    def _to_name_with_country(cls, row: dict[str, Any]) -> NameRecord:
        return cls._to_name_record(row, with_country=True)


def ilike_any(text: str) -> str:
    """Build the PostgREST ``or`` filter matching name OR description, case-insensitively.

    The pattern is double-quoted so commas and parentheses in user text do
    not break the filter syntax.
    """
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    pattern = f'"*{escaped}*"'
    return f"(name.ilike.{pattern},description.ilike.{pattern})"
