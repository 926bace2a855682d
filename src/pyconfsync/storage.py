"""Local persistence for the dataset, sync bookkeeping, favorites and votes.

The sync engine only talks to the :class:`LocalStore` protocol, so any
backend can be plugged in.  Two implementations ship with the library:

* :class:`MemoryStore` keeps everything in process memory (tests,
  embedding in apps that persist elsewhere).
* :class:`JsonFileStore` writes one JSON document per entity into a
  directory, replacing files atomically.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

from pydantic import TypeAdapter, ValidationError

from pyconfsync._constants import DATASET_FILE, FAVORITES_FILE, SYNC_STATE_FILE, VOTES_FILE
from pyconfsync.exceptions import ConfSyncStoreError
from pyconfsync.models import Conferences, FavoritesIndex, SyncState, Vote

_logger = logging.getLogger(__name__)

_VOTES_ADAPTER: TypeAdapter[dict[str, Vote]] = TypeAdapter(dict[str, Vote])


class LocalStore(Protocol):
    """Typed repository consumed by the sync engine."""

    def load_dataset(self) -> Conferences | None: ...

    def store_dataset(self, dataset: Conferences) -> None: ...

    def load_sync_state(self) -> SyncState: ...

    def store_sync_state(self, state: SyncState) -> None: ...

    def load_favorites(self) -> FavoritesIndex: ...

    def store_favorites(self, favorites: FavoritesIndex) -> None: ...

    def load_votes(self) -> dict[str, Vote]: ...


class MemoryStore:
    """In-process store.  Values are immutable models, so no copying is needed."""

    def __init__(
        self,
        *,
        dataset: Conferences | None = None,
        sync_state: SyncState | None = None,
        favorites: FavoritesIndex | None = None,
        votes: dict[str, Vote] | None = None,
    ) -> None:
        self._dataset = dataset
        self._sync_state = sync_state or SyncState()
        self._favorites = favorites or FavoritesIndex()
        self._votes = dict(votes or {})

    def load_dataset(self) -> Conferences | None:
        return self._dataset

    def store_dataset(self, dataset: Conferences) -> None:
        self._dataset = dataset

    def load_sync_state(self) -> SyncState:
        return self._sync_state

    def store_sync_state(self, state: SyncState) -> None:
        self._sync_state = state

    def load_favorites(self) -> FavoritesIndex:
        return self._favorites

    def store_favorites(self, favorites: FavoritesIndex) -> None:
        self._favorites = favorites

    def load_votes(self) -> dict[str, Vote]:
        return dict(self._votes)

    def store_votes(self, votes: dict[str, Vote]) -> None:
        self._votes = dict(votes)


class JsonFileStore:
    """Directory-backed store writing one JSON file per entity.

    Unreadable or invalid files load as "absent" (with a warning) so a
    corrupt cache never surfaces a partially decoded dataset.  Write
    failures raise :class:`ConfSyncStoreError`.
    """

    def __init__(self, directory: str | os.PathLike[str]) -> None:
        self._dir = Path(directory)

    @property
    def directory(self) -> Path:
        return self._dir

    def _read(self, name: str) -> bytes | None:
        path = self._dir / name
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError:
            _logger.warning("Could not read %s", path, exc_info=True)
            return None

    def _write(self, name: str, payload: bytes) -> None:
        path = self._dir / name
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._dir, prefix=f".{name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "wb") as handle:
                    handle.write(payload)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise ConfSyncStoreError(f"Could not write {path}: {exc}") from exc
        _logger.debug("Wrote %s (%d bytes)", path, len(payload))

    def load_dataset(self) -> Conferences | None:
        raw = self._read(DATASET_FILE)
        if raw is None:
            return None
        try:
            return Conferences.model_validate_json(raw)
        except ValidationError:
            _logger.warning("Discarding invalid cached dataset in %s", self._dir)
            return None

    def store_dataset(self, dataset: Conferences) -> None:
        self._write(DATASET_FILE, dataset.model_dump_json(by_alias=True).encode("utf-8"))

    def load_sync_state(self) -> SyncState:
        raw = self._read(SYNC_STATE_FILE)
        if raw is None:
            return SyncState()
        try:
            return SyncState.model_validate_json(raw)
        except ValidationError:
            _logger.warning("Discarding invalid sync state in %s", self._dir)
            return SyncState()

    def store_sync_state(self, state: SyncState) -> None:
        self._write(SYNC_STATE_FILE, state.model_dump_json().encode("utf-8"))

    def load_favorites(self) -> FavoritesIndex:
        raw = self._read(FAVORITES_FILE)
        if raw is None:
            return FavoritesIndex()
        try:
            return FavoritesIndex.model_validate_json(raw)
        except ValidationError:
            _logger.warning("Discarding invalid favorites in %s", self._dir)
            return FavoritesIndex()

    def store_favorites(self, favorites: FavoritesIndex) -> None:
        self._write(FAVORITES_FILE, favorites.model_dump_json().encode("utf-8"))

    def load_votes(self) -> dict[str, Vote]:
        raw = self._read(VOTES_FILE)
        if raw is None:
            return {}
        try:
            return _VOTES_ADAPTER.validate_json(raw)
        except ValidationError:
            _logger.warning("Discarding invalid votes in %s", self._dir)
            return {}

    def store_votes(self, votes: dict[str, Vote]) -> None:
        self._write(VOTES_FILE, _VOTES_ADAPTER.dump_json(votes, by_alias=True))
