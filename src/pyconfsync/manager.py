"""High-level async manager for the conference dataset."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import aiohttp
from pydantic import ValidationError

from pyconfsync._transport import FileFetcher, Fetcher, HttpFetcher, Response, is_local_locator
from pyconfsync.config import SyncConfig
from pyconfsync.exceptions import ConfSyncParseError, ConfSyncTransportError, NoSourceError
from pyconfsync.models import Conference, Conferences, Event, SyncState, Vote
from pyconfsync.state.favorites import FavoritesProjector
from pyconfsync.state.outcome import SyncOutcome, SyncReason
from pyconfsync.state.policy import is_unchanged, should_attempt_fetch
from pyconfsync.storage import JsonFileStore, LocalStore, MemoryStore

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def decode_dataset(payload: bytes) -> Conferences:
    """Decode a JSON payload into a dataset.

    Raises :class:`ConfSyncParseError` on malformed JSON or on a payload
    that does not match the dataset schema.
    """
    if not payload.strip():
        raise ConfSyncParseError("Empty dataset payload")
    try:
        return Conferences.model_validate_json(payload)
    except ValidationError as exc:
        raise ConfSyncParseError(f"Invalid dataset payload: {exc.error_count()} error(s)") from exc


class ConferenceDataManager:
    """Keeps a local copy of the conference dataset in sync with its source.

    The manager owns the in-memory snapshot, the sync bookkeeping and the
    selected conference.  Construct one per process and pass it to the
    consumers that need it.

    Usage::

        async with ConferenceDataManager(config) as manager:
            outcome = await manager.refresh()
            conference = manager.current_conference()
    """

    def __init__(
        self,
        config: SyncConfig,
        *,
        store: LocalStore | None = None,
        fetcher: Fetcher | None = None,
        session: aiohttp.ClientSession | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._config = config
        if store is None:
            store = JsonFileStore(config.store_dir) if config.store_dir else MemoryStore()
        self._store = store
        self._fetcher = fetcher
        self._external_session = session is not None
        self._http_session = session
        self._clock = clock
        self._min_interval = timedelta(seconds=config.min_fetch_interval)
        self._refresh_lock = asyncio.Lock()
        self._selected_index = 0
        self._dataset: Conferences | None = store.load_dataset()
        self._favorites = FavoritesProjector(store)
        if self._dataset is not None:
            _logger.debug("Loaded cached dataset with %d conference(s)", len(self._dataset.conferences))

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> ConferenceDataManager:
        if self._fetcher is None and self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    async def close(self) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None

    # ------------------------------------------------------------------
    # Snapshot accessors
    # ------------------------------------------------------------------

    @property
    def dataset(self) -> Conferences | None:
        """Last committed dataset, ``None`` until one has been loaded."""
        return self._dataset

    @property
    def sync_state(self) -> SyncState:
        return self._store.load_sync_state()

    @property
    def selected_conference_index(self) -> int:
        return self._selected_index

    def select_conference(self, index: int) -> None:
        """Point at another conference; out-of-range indexes are allowed."""
        self._selected_index = index

    def current_conference(self) -> Conference | None:
        dataset = self._dataset
        if dataset is None:
            return None
        if 0 <= self._selected_index < len(dataset.conferences):
            return dataset.conferences[self._selected_index]
        return None

    # ------------------------------------------------------------------
    # Favorites and votes
    # ------------------------------------------------------------------

    def is_favorited(self, conference_id: int, event_id: int) -> bool:
        return self._favorites.is_favorited(conference_id, event_id)

    async def toggle_favorite(self, conference_id: int, event_id: int, *, remove: bool) -> bool:
        return await self._favorites.toggle_favorite(conference_id, event_id, remove=remove)

    def lookup_vote(self, conference_id: int, event_id: int) -> Vote | None:
        return self._favorites.lookup_vote(conference_id, event_id)

    def favorite_events(self, conference: Conference | None = None) -> list[Event]:
        """Favorited events of *conference* (default: the current one), in schedule order."""
        conference = conference or self.current_conference()
        if conference is None:
            return []
        return [event for event in conference.schedule if self.is_favorited(conference.id, event.id)]

    def votable_events(self, conference: Conference | None = None, now: datetime | None = None) -> list[Event]:
        conference = conference or self.current_conference()
        if conference is None:
            return []
        now = now or self._clock()
        return [event for event in conference.schedule if event.is_votable(now)]

    # ------------------------------------------------------------------
    # Synchronization
    # ------------------------------------------------------------------

    def _resolve_locator(self) -> str | None:
        source = self._config.source_url
        if source is None or not source.strip():
            return None
        return source.strip()

    def _select_fetcher(self, locator: str) -> Fetcher | None:
        """Fetcher for *locator*; ``None`` for an http source without a session."""
        if self._fetcher is not None:
            return self._fetcher
        if is_local_locator(locator):
            return FileFetcher()
        if self._http_session is None:
            return None
        return HttpFetcher(
            self._http_session,
            timeout=self._config.request_timeout,
            user_agent=self._config.user_agent,
        )

    async def refresh(self, forced: bool = False) -> SyncOutcome:
        """Fetch the dataset if warranted and reconcile it with the cache.

        Concurrent calls are serialized: a second caller waits for the
        in-flight refresh and is then throttled like any other call.
        Failures are reported through the returned outcome, never raised.
        """
        async with self._refresh_lock:
            outcome = await self._refresh(forced or self._config.always_force)
        _logger.debug("Refresh finished: %s (%s)", outcome.status, outcome.reason)
        return outcome

    async def _refresh(self, forced: bool) -> SyncOutcome:
        locator = self._resolve_locator()
        if locator is None:
            return SyncOutcome.failed(SyncReason.NO_SOURCE, NoSourceError("No data source configured"))

        cached = self._dataset
        state = self._store.load_sync_state()
        if cached is not None and not should_attempt_fetch(
            now=self._clock(),
            last_attempt=state.last_attempt,
            min_interval=self._min_interval,
            forced=forced,
        ):
            _logger.debug("Last attempt at %s is recent; serving cached dataset", state.last_attempt)
            return SyncOutcome.unchanged()

        fetcher = self._select_fetcher(locator)
        if fetcher is None:
            return SyncOutcome.failed(
                SyncReason.NO_SOURCE,
                NoSourceError("Manager not initialized. Use 'async with ConferenceDataManager(...) as manager:'"),
            )
        try:
            response = await fetcher.fetch(locator)
        except ConfSyncTransportError as exc:
            response = Response(error=exc)
        except TimeoutError:
            response = Response(error=ConfSyncTransportError(f"Fetching {locator} timed out", url=locator))
        finally:
            # Recorded even if the fetch raised, so failures stay throttled.
            state = state.model_copy(update={"last_attempt": self._clock()})
            self._store.store_sync_state(state)

        if cached is not None:
            return await self._reconcile_cached(cached, state, response, forced)
        return await self._reconcile_first_run(state, response)

    async def _reconcile_cached(
        self,
        cached: Conferences,
        state: SyncState,
        response: Response,
        forced: bool,
    ) -> SyncOutcome:
        marker = response.last_modified
        if marker is not None:
            if is_unchanged(server_modified=marker, stored_modified=state.last_modified, forced=forced):
                # Known-unchanged content wins over a transient transport error.
                return SyncOutcome.unchanged()
            if response.error is not None:
                _logger.warning("Refresh failed: %s", response.error)
                return SyncOutcome.failed(SyncReason.TRANSPORT_ERROR, response.error)
            if response.body is None:
                return SyncOutcome.updated(cached)
            return await self._apply_body(response.body, state, marker)

        if response.body is not None and forced:
            return await self._apply_body(response.body, state, None)

        _logger.debug("No usable response; keeping cached dataset")
        return SyncOutcome.unavailable()

    async def _reconcile_first_run(self, state: SyncState, response: Response) -> SyncOutcome:
        marker = response.last_modified
        if marker is not None:
            state = state.model_copy(update={"last_modified": marker})
            self._store.store_sync_state(state)

        if response.error is not None:
            _logger.warning("Initial refresh failed: %s", response.error)
            return SyncOutcome.failed(SyncReason.TRANSPORT_ERROR, response.error)
        if response.body is None:
            return SyncOutcome.unavailable()
        return await self._apply_body(response.body, state, None)

    async def _apply_body(self, body: bytes, state: SyncState, marker: datetime | None) -> SyncOutcome:
        try:
            dataset = decode_dataset(body)
        except ConfSyncParseError as exc:
            _logger.warning("Discarding unparseable dataset: %s", exc)
            return SyncOutcome.failed(SyncReason.PARSE_ERROR, exc)

        # The dataset file is the one large write; keep it off the event loop.
        await asyncio.to_thread(self._store.store_dataset, dataset)
        if marker is not None:
            self._store.store_sync_state(state.model_copy(update={"last_modified": marker}))
        self._dataset = dataset
        _logger.debug("Dataset updated: %d conference(s)", len(dataset.conferences))
        return SyncOutcome.updated(dataset)
