"""Unit tests for the WriteCoordinator submission pipeline."""

import pytest

from app.application.schemas import NameSubmission
from app.application.services import ResyncPlan, WriteCoordinator
from app.domain.entities import Gender
from app.domain.exceptions import (
    DuplicateNameError,
    InvalidDescriptionLengthError,
    InvalidNameLengthError,
    NoCountrySelectedError,
    RestrictedNameError,
    StoreError,
    StoreRejectionError,
)
from tests.unit.fakes import FakeRecordStore


@pytest.fixture
def store() -> FakeRecordStore:
    return FakeRecordStore(restricted={"PROHIBIDO"})


@pytest.fixture
def writer(store: FakeRecordStore) -> WriteCoordinator:
    return WriteCoordinator(store)


@pytest.mark.asyncio
async def test_submit_normalizes_and_inserts(writer: WriteCoordinator, store: FakeRecordStore):
    record = await writer.submit(
        NameSubmission(country_id="mx", name="  ana   maria  ", description="", gender=Gender.FEMALE),
        user_id="user-1",
    )

    assert record.id is not None
    assert record.name == "ANA MARIA"
    assert record.description is None
    assert record.gender is Gender.FEMALE
    assert record.created_by == "user-1"
    assert [r.name for r in store.names if r.country_id == "mx"] == ["ANA MARIA"]


@pytest.mark.asyncio
async def test_submit_falls_back_to_viewed_country(writer: WriteCoordinator):
    record = await writer.submit(
        NameSubmission(name="juan"), user_id="user-1", fallback_country_id="ar"
    )
    assert record.country_id == "ar"


@pytest.mark.asyncio
async def test_submit_without_country(writer: WriteCoordinator, store: FakeRecordStore):
    with pytest.raises(NoCountrySelectedError):
        await writer.submit(NameSubmission(name="juan"), user_id="user-1")
    assert store.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("name", ["a", "  b  ", "", "x" * 61, "  " + "y" * 70])
async def test_invalid_name_length_never_reaches_store(
    writer: WriteCoordinator, store: FakeRecordStore, name: str
):
    with pytest.raises(InvalidNameLengthError):
        await writer.submit(NameSubmission(country_id="ar", name=name), user_id="user-1")
    assert store.calls_to("insert_name") == []


@pytest.mark.asyncio
@pytest.mark.parametrize("name", ["ab", "z" * 60])
async def test_name_length_bounds_are_inclusive(writer: WriteCoordinator, name: str):
    record = await writer.submit(NameSubmission(country_id="ar", name=name), user_id="user-1")
    assert record.name == name.upper()


@pytest.mark.asyncio
async def test_description_too_long(writer: WriteCoordinator, store: FakeRecordStore):
    with pytest.raises(InvalidDescriptionLengthError) as exc_info:
        await writer.submit(
            NameSubmission(country_id="ar", name="juan", description="d" * 201),
            user_id="user-1",
        )
    assert exc_info.value.length == 201
    assert store.calls_to("insert_name") == []


@pytest.mark.asyncio
async def test_description_measured_after_collapsing(writer: WriteCoordinator):
    description = "a    " * 100  # 500 raw chars, 199 once collapsed
    record = await writer.submit(
        NameSubmission(country_id="ar", name="juan", description=description),
        user_id="user-1",
    )
    assert len(record.description) == 199


@pytest.mark.asyncio
async def test_duplicate_name_in_same_country(writer: WriteCoordinator, store: FakeRecordStore):
    await writer.submit(NameSubmission(country_id="ar", name="JUAN"), user_id="user-1")

    with pytest.raises(DuplicateNameError) as exc_info:
        await writer.submit(NameSubmission(country_id="ar", name="juan"), user_id="user-2")

    assert exc_info.value.country_id == "ar"
    assert [r.name for r in store.names] == ["JUAN"]


@pytest.mark.asyncio
async def test_same_name_in_other_country_is_allowed(writer: WriteCoordinator):
    await writer.submit(NameSubmission(country_id="ar", name="JUAN"), user_id="user-1")
    record = await writer.submit(NameSubmission(country_id="mx", name="JUAN"), user_id="user-1")
    assert record.country_id == "mx"


@pytest.mark.asyncio
async def test_restricted_name(writer: WriteCoordinator):
    with pytest.raises(RestrictedNameError) as exc_info:
        await writer.submit(NameSubmission(country_id="ar", name="prohibido"), user_id="user-1")
    assert exc_info.value.name == "PROHIBIDO"


@pytest.mark.asyncio
async def test_unknown_rejection_is_surfaced_verbatim(
    writer: WriteCoordinator, store: FakeRecordStore
):
    store.insert_error = StoreRejectionError("permission denied for table names", code="42501")

    with pytest.raises(StoreError) as exc_info:
        await writer.submit(NameSubmission(country_id="ar", name="juan"), user_id="user-1")

    assert exc_info.value.message == "permission denied for table names"
    assert exc_info.value.user_message == "ERROR: permission denied for table names"


@pytest.mark.parametrize(
    "message, code, expected",
    [
        ("nombre restringido: no permitido", "P0001", RestrictedNameError),
        ("Duplicate key value", None, DuplicateNameError),
        ("violates UNIQUE constraint", None, DuplicateNameError),
        ("conflict on names_country_name_unique_idx", None, DuplicateNameError),
        ("some conflict", "23505", DuplicateNameError),
        ("timeout", None, StoreError),
    ],
)
def test_classify_rejection(writer: WriteCoordinator, message, code, expected):
    record = writer.build_record(NameSubmission(country_id="ar", name="juan"), user_id="u")
    error = writer.classify_rejection(StoreRejectionError(message, code=code), record)
    assert type(error) is expected


def test_custom_markers():
    writer = WriteCoordinator(
        FakeRecordStore(), restricted_marker="blocked", duplicate_markers=["already there"]
    )
    record = writer.build_record(NameSubmission(country_id="ar", name="juan"), user_id="u")

    assert isinstance(
        writer.classify_rejection(StoreRejectionError("BLOCKED name"), record), RestrictedNameError
    )
    assert isinstance(
        writer.classify_rejection(StoreRejectionError("Already There"), record), DuplicateNameError
    )
    assert isinstance(
        writer.classify_rejection(StoreRejectionError("duplicate key"), record), StoreError
    )


def test_plan_resync():
    assert WriteCoordinator.plan_resync("ar", "ar") is ResyncPlan.REFETCH_CURRENT
    assert WriteCoordinator.plan_resync("ar", "mx") is ResyncPlan.SWITCH_TO_WRITTEN
    assert WriteCoordinator.plan_resync("ar", None) is ResyncPlan.SWITCH_TO_WRITTEN
