"""View state manager — keeps the per-country and global lists in sync with the store.

State lives in one explicit ``ViewState`` container. External events
(session change, country selection, debounced query changes, submit
success) are mapped to exactly one fetch each:

    session established       → countries + counts, per-country, global
    country / per-country query → per-country
    global query                → global

Fetches run as tasks on the event loop and may overlap. Each carries a
``FetchTicket``; a result is applied only if its ticket is still the latest
one issued for that list and the query it was issued for is still the one
on screen. Older results are discarded, not cancelled.
"""

import asyncio
import logging
from dataclasses import dataclass, field

from app.application.schemas import NameSubmission, SubmitOutcome
from app.application.services.count_aggregator import CountAggregator
from app.application.services.debouncer import Debouncer
from app.application.services.query_executor import QueryExecutor
from app.application.services.write_coordinator import ResyncPlan, WriteCoordinator
from app.domain.entities import (
    Country,
    CountryCounts,
    Gender,
    NameRecord,
    SearchQuery,
    SearchScope,
    Session,
    ViewTab,
)
from app.domain.exceptions import AuthError, StoreUnavailableError, SubmitError
from app.domain.normalization import to_upper_strict
from app.infrastructure.logging.colored_logger import SyncLogger, SyncStage

logger = logging.getLogger(__name__)
slog = SyncLogger("ViewStateManager")

SAVED_MESSAGE = "GUARDADO"


@dataclass
class ViewState:
    """Everything the directory screen shows, as plain named fields."""

    session: Session | None = None
    countries: list[Country] = field(default_factory=list)
    counts: CountryCounts = field(default_factory=CountryCounts)
    selected_country_id: str = ""
    tab: ViewTab = ViewTab.PER_COUNTRY

    # Raw text drives the input box only; the debounced text drives fetches.
    country_query_raw: str = ""
    country_query: str = ""
    global_query_raw: str = ""
    global_query: str = ""

    country_names: list[NameRecord] = field(default_factory=list)
    global_names: list[NameRecord] = field(default_factory=list)

    # Submission form
    form_country_id: str = ""
    form_name: str = ""
    form_description: str = ""
    form_gender: Gender = Gender.MALE
    message: str = ""

    @property
    def selected_country(self) -> Country | None:
        return next((c for c in self.countries if c.id == self.selected_country_id), None)

    def per_country_query(self) -> SearchQuery:
        return SearchQuery.per_country(self.selected_country_id, self.country_query)

    def global_search_query(self) -> SearchQuery:
        return SearchQuery.global_search(self.global_query)

    def current_query(self, scope: SearchScope) -> SearchQuery:
        if scope is SearchScope.PER_COUNTRY:
            return self.per_country_query()
        return self.global_search_query()


@dataclass(frozen=True)
class FetchTicket:
    """Tags an in-flight list fetch with the query and sequence it was issued for."""

    scope: SearchScope
    key: SearchQuery
    seq: int
    epoch: int


class ViewStateManager:
    """Owns the ``ViewState`` and decides which queries run on which transitions.

    All handlers run on a single event loop; no locking is needed. Read
    failures are logged and leave the previous list in place.
    """

    def __init__(
        self,
        executor: QueryExecutor,
        count_aggregator: CountAggregator,
        write_coordinator: WriteCoordinator,
        *,
        debounce_seconds: float = 0.25,
    ):
        self._executor = executor
        self._counts = count_aggregator
        self._writer = write_coordinator
        self.state = ViewState()

        self._country_debouncer: Debouncer[str] = Debouncer(
            debounce_seconds,
            self._on_country_query_settled,
            initial="",
            name="country-query",
        )
        self._global_debouncer: Debouncer[str] = Debouncer(
            debounce_seconds,
            self._on_global_query_settled,
            initial="",
            name="global-query",
        )

        self._seq: dict[SearchScope, int] = {scope: 0 for scope in SearchScope}
        # Bumped on every session change so results from a previous session are dropped.
        self._epoch = 0
        self._tasks: set[asyncio.Task] = set()

    # ── Session ────────────────────────────────────────────────────

    def on_session_change(self, session: Session | None) -> None:
        """Session listener: loads everything on sign-in, clears everything on sign-out."""
        self._epoch += 1

        if session is None:
            slog.step_complete(SyncStage.SESSION, "Signed out — view cleared")
            self._reset()
            return

        self.state.session = session
        slog.step_complete(SyncStage.SESSION, "Session established", user=session.user.id)
        self._spawn(self._load_countries_and_counts(self._epoch))
        self._trigger(SearchScope.PER_COUNTRY)
        self._trigger(SearchScope.GLOBAL)

    # ── User events ────────────────────────────────────────────────

    def select_country(self, country_id: str) -> asyncio.Task | None:
        """Show one country's list. Returns the fetch task if one was issued."""
        self.state.tab = ViewTab.PER_COUNTRY
        if country_id == self.state.selected_country_id:
            return None
        self.state.selected_country_id = country_id
        return self._trigger(SearchScope.PER_COUNTRY)

    def set_tab(self, tab: ViewTab) -> None:
        self.state.tab = tab

    def set_country_query(self, raw: str) -> None:
        value = to_upper_strict(raw)
        self.state.country_query_raw = value
        if self.state.session is not None:
            self._country_debouncer.push(value)

    def set_global_query(self, raw: str) -> None:
        value = to_upper_strict(raw)
        self.state.global_query_raw = value
        if self.state.session is not None:
            self._global_debouncer.push(value)

    def set_form_country(self, country_id: str) -> None:
        self.state.form_country_id = country_id

    def set_form_name(self, raw: str) -> None:
        self.state.form_name = to_upper_strict(raw)

    def set_form_description(self, raw: str) -> None:
        self.state.form_description = to_upper_strict(raw)

    def set_form_gender(self, gender: Gender | str) -> None:
        self.state.form_gender = Gender(gender)

    async def submit(self) -> SubmitOutcome:
        """Submit the form, then re-sync counts and the list that shows the new name."""
        state = self.state
        state.message = ""
        if state.session is None:
            raise AuthError("Sign in before submitting a name")

        submission = NameSubmission(
            country_id=state.form_country_id or None,
            name=state.form_name,
            description=state.form_description,
            gender=state.form_gender,
        )
        slog.step_start(SyncStage.SUBMIT, "Submitting name", name=submission.name)
        epoch = self._epoch
        try:
            record = await self._writer.submit(
                submission,
                user_id=state.session.user.id,
                fallback_country_id=state.selected_country_id or None,
            )
        except SubmitError as exc:
            if self._is_live(epoch):
                state.message = exc.user_message
            slog.step_error(SyncStage.SUBMIT, "Submission refused", error=exc)
            return SubmitOutcome(
                ok=False,
                message=exc.user_message,
                error_type=type(exc).__name__,
            )

        saved = SubmitOutcome(
            ok=True,
            message=SAVED_MESSAGE,
            record_id=record.id,
            country_id=record.country_id,
        )
        if not self._is_live(epoch):
            slog.step_complete(SyncStage.SUBMIT, "Name saved after sign-out, re-sync skipped")
            return saved

        state.form_name = ""
        state.form_description = ""
        state.message = SAVED_MESSAGE
        slog.step_complete(SyncStage.SUBMIT, "Name saved", country=record.country_id)

        await self._refresh_counts(epoch)
        if not self._is_live(epoch):
            return saved

        plan = self._writer.plan_resync(record.country_id, state.selected_country_id)
        if plan is ResyncPlan.REFETCH_CURRENT:
            task = self._trigger(SearchScope.PER_COUNTRY)
        else:
            task = self.select_country(record.country_id)
        state.tab = ViewTab.PER_COUNTRY
        if task is not None:
            await task
        return saved

    # ── Lifecycle ──────────────────────────────────────────────────

    async def wait_idle(self) -> None:
        """Wait until no fetch task is in flight."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def aclose(self) -> None:
        """Cancel debounce timers and in-flight fetches."""
        self._country_debouncer.close()
        self._global_debouncer.close()
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    # ── Debounce listeners ─────────────────────────────────────────

    def _on_country_query_settled(self, value: str) -> None:
        if self.state.session is None or value == self.state.country_query:
            return
        self.state.country_query = value
        self._trigger(SearchScope.PER_COUNTRY)

    def _on_global_query_settled(self, value: str) -> None:
        if self.state.session is None or value == self.state.global_query:
            return
        self.state.global_query = value
        self._trigger(SearchScope.GLOBAL)

    # ── Fetching ───────────────────────────────────────────────────

    def _trigger(self, scope: SearchScope) -> asyncio.Task | None:
        """Issue a fresh fetch for one list; supersedes any fetch already in flight."""
        if self.state.session is None:
            return None
        self._seq[scope] += 1
        ticket = FetchTicket(
            scope=scope,
            key=self.state.current_query(scope),
            seq=self._seq[scope],
            epoch=self._epoch,
        )
        return self._spawn(self._run_fetch(ticket))

    async def _run_fetch(self, ticket: FetchTicket) -> None:
        key = ticket.key
        per_country = ticket.scope is SearchScope.PER_COUNTRY
        stage = SyncStage.PER_COUNTRY if per_country else SyncStage.GLOBAL

        try:
            with slog.timed_step(stage, "Fetching names", seq=ticket.seq, text=key.text):
                if per_country:
                    names = await self._executor.fetch_by_country(key.country_id, key.text)
                else:
                    names = await self._executor.fetch_global(key.text)
        except StoreUnavailableError:
            return

        if not self._is_current(ticket):
            slog.stale(stage, seq=ticket.seq, latest=self._seq[ticket.scope])
            return

        if per_country:
            self.state.country_names = names
        else:
            self.state.global_names = names

    def _is_live(self, epoch: int) -> bool:
        return epoch == self._epoch and self.state.session is not None

    def _is_current(self, ticket: FetchTicket) -> bool:
        return (
            ticket.epoch == self._epoch
            and self.state.session is not None
            and ticket.seq == self._seq[ticket.scope]
            and ticket.key == self.state.current_query(ticket.scope)
        )

    async def _load_countries_and_counts(self, epoch: int) -> None:
        try:
            with slog.timed_step(SyncStage.COUNTRIES, "Loading countries"):
                countries = await self._executor.fetch_countries()
        except StoreUnavailableError:
            return
        if not self._is_live(epoch):
            return

        state = self.state
        state.countries = countries
        if countries and not state.form_country_id:
            state.form_country_id = countries[0].id
        if countries and not state.selected_country_id:
            state.selected_country_id = countries[0].id
            self._trigger(SearchScope.PER_COUNTRY)

        await self._refresh_counts(epoch)

    async def _refresh_counts(self, epoch: int) -> None:
        if not self._is_live(epoch):
            return
        try:
            with slog.timed_step(SyncStage.COUNTS, "Loading country counts"):
                counts = await self._counts.fetch_country_counts()
        except StoreUnavailableError:
            return
        if self._is_live(epoch):
            self.state.counts = counts

    # ── Internals ──────────────────────────────────────────────────

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Sync task failed", exc_info=exc)

    def _reset(self) -> None:
        self._country_debouncer.cancel()
        self._global_debouncer.cancel()
        for scope in SearchScope:
            self._seq[scope] += 1
        self.state = ViewState()
