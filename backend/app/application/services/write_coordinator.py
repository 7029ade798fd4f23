"""Write coordinator — validates, submits and classifies new name entries."""

import logging
from collections.abc import Iterable
from enum import Enum

from app.application.interfaces import RecordStore
from app.application.schemas import NameSubmission
from app.domain.entities import (
    DESCRIPTION_MAX_LENGTH,
    NAME_MAX_LENGTH,
    NAME_MIN_LENGTH,
    NameRecord,
)
from app.domain.exceptions import (
    DuplicateNameError,
    InvalidDescriptionLengthError,
    InvalidNameLengthError,
    NoCountrySelectedError,
    RestrictedNameError,
    StoreError,
    StoreRejectionError,
    SubmitError,
)
from app.domain.normalization import normalize_text

logger = logging.getLogger(__name__)

# Postgres SQLSTATE for unique_violation
UNIQUE_VIOLATION_CODE = "23505"

DEFAULT_RESTRICTED_MARKER = "NOMBRE RESTRINGIDO"
DEFAULT_DUPLICATE_MARKERS = (
    "DUPLICATE KEY",
    "UNIQUE CONSTRAINT",
    "NAMES_COUNTRY_NAME_UNIQUE_IDX",
)


class ResyncPlan(str, Enum):
    """Which per-country re-sync a successful write requires."""

    REFETCH_CURRENT = "refetch_current"
    SWITCH_TO_WRITTEN = "switch_to_written"


class WriteCoordinator:
    """Runs the submission pipeline for a new name.

    Pipeline (each step is terminal on failure, nothing is retried):
      1. Resolve the country (explicit choice, else the one being viewed).
      2. Normalize and length-check the name.
      3. Normalize and length-check the description.
      4. Insert into the store with ``created_by`` set.
      5. Map store rejections to ``RestrictedNameError``,
         ``DuplicateNameError`` or ``StoreError``.
    """

    def __init__(
        self,
        store: RecordStore,
        *,
        restricted_marker: str = DEFAULT_RESTRICTED_MARKER,
        duplicate_markers: Iterable[str] = DEFAULT_DUPLICATE_MARKERS,
    ):
        self._store = store
        self._restricted_marker = restricted_marker.upper()
        self._duplicate_markers = tuple(m.upper() for m in duplicate_markers if m)

    async def submit(
        self,
        submission: NameSubmission,
        *,
        user_id: str,
        fallback_country_id: str | None = None,
    ) -> NameRecord:
        """Validate and insert a name. Raises a ``SubmitError`` subclass on failure."""
        record = self.build_record(
            submission, user_id=user_id, fallback_country_id=fallback_country_id
        )

        try:
            stored = await self._store.insert_name(record)
        except StoreRejectionError as exc:
            error = self.classify_rejection(exc, record)
            logger.info(
                "Insert rejected: country=%s name=%r → %s",
                record.country_id,
                record.name,
                type(error).__name__,
            )
            raise error from exc

        logger.info("Inserted name %r into country=%s", stored.name, stored.country_id)
        return stored

    def build_record(
        self,
        submission: NameSubmission,
        *,
        user_id: str,
        fallback_country_id: str | None = None,
    ) -> NameRecord:
        """Resolve the country, then normalize and validate the text fields."""
        country_id = submission.country_id or fallback_country_id
        if not country_id:
            raise NoCountrySelectedError()

        name = normalize_text(submission.name)
        if not NAME_MIN_LENGTH <= len(name) <= NAME_MAX_LENGTH:
            raise InvalidNameLengthError(len(name))

        description = normalize_text(submission.description)
        if len(description) > DESCRIPTION_MAX_LENGTH:
            raise InvalidDescriptionLengthError(len(description))

        return NameRecord(
            country_id=country_id,
            name=name,
            description=description or None,
            gender=submission.gender,
            created_by=user_id,
        )

    def classify_rejection(
        self, exc: StoreRejectionError, record: NameRecord
    ) -> SubmitError:
        """Map a raw store rejection to a domain submit error.

        The structured SQLSTATE is used when present; message markers are a
        fallback and must match the backend's actual error text.
        """
        raw = (exc.message or "").upper()

        if self._restricted_marker and self._restricted_marker in raw:
            return RestrictedNameError(record.name)

        if exc.code == UNIQUE_VIOLATION_CODE or any(
            marker in raw for marker in self._duplicate_markers
        ):
            return DuplicateNameError(record.country_id, record.name)

        return StoreError(exc.message)

    @staticmethod
    def plan_resync(
        written_country_id: str, displayed_country_id: str | None
    ) -> ResyncPlan:
        """Re-fetch the displayed list if it holds the new record, else switch to it."""
        if written_country_id == displayed_country_id:
            return ResyncPlan.REFETCH_CURRENT
        return ResyncPlan.SWITCH_TO_WRITTEN
