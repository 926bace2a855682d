"""Per-user favorites and votes layered over the synchronized dataset."""

from __future__ import annotations

import asyncio
import logging

from pyconfsync.models import FavoritesIndex, Vote
from pyconfsync.storage import LocalStore

_logger = logging.getLogger(__name__)


class FavoritesProjector:
    """Favorited events per conference, plus read-only vote lookups.

    The favorites index is loaded once and kept in memory; every toggle
    persists the new index before publishing it.  Toggles are serialized
    so rapid repeated taps cannot lose updates.
    """

    def __init__(self, store: LocalStore) -> None:
        self._store = store
        self._favorites = store.load_favorites()
        self._lock = asyncio.Lock()

    @property
    def favorites(self) -> FavoritesIndex:
        return self._favorites

    def is_favorited(self, conference_id: int, event_id: int) -> bool:
        return self._favorites.contains(conference_id, event_id)

    def favorites_for(self, conference_id: int) -> list[int]:
        return self._favorites.for_conference(conference_id)

    async def toggle_favorite(self, conference_id: int, event_id: int, *, remove: bool) -> bool:
        """Add or remove a favorite and return the resulting state.

        Adding an already favorited event, or removing one that is not
        favorited, is a no-op.
        """
        async with self._lock:
            current = self._favorites
            if remove:
                updated = current.without_event(conference_id, event_id)
            else:
                updated = current.with_event(conference_id, event_id)
            if updated is not current:
                self._store.store_favorites(updated)
                self._favorites = updated
                _logger.debug(
                    "%s favorite %s/%s",
                    "Removed" if remove else "Added",
                    conference_id,
                    event_id,
                )
            return updated.contains(conference_id, event_id)

    def lookup_vote(self, conference_id: int, event_id: int) -> Vote | None:
        for vote in self._store.load_votes().values():
            if vote.matches(conference_id, event_id):
                return vote
        return None
