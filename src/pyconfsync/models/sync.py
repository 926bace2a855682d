"""Persisted synchronization bookkeeping and per-user favorites."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SyncState(BaseModel):
    """When the dataset was last modified server-side and last fetched.

    Parameters
    ----------
    last_modified : datetime or None
        Parsed ``Last-Modified`` marker of the dataset currently cached.
    last_attempt : datetime or None
        When the last network attempt completed, whatever its outcome.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    last_modified: datetime | None = None
    last_attempt: datetime | None = None

    @field_validator("last_modified", "last_attempt")
    @classmethod
    def _ensure_tz_aware(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value


class FavoritesIndex(BaseModel):
    """Favorited event ids keyed by conference id.

    Instances are immutable; the ``with_*``/``without_*`` helpers return
    a new index and keep every id list free of duplicates.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    events: dict[int, list[int]] = Field(default_factory=dict)

    @field_validator("events")
    @classmethod
    def _dedupe(cls, value: dict[int, list[int]]) -> dict[int, list[int]]:
        return {conference_id: list(dict.fromkeys(ids)) for conference_id, ids in value.items()}

    def contains(self, conference_id: int, event_id: int) -> bool:
        return event_id in self.events.get(conference_id, ())

    def for_conference(self, conference_id: int) -> list[int]:
        return list(self.events.get(conference_id, ()))

    def with_event(self, conference_id: int, event_id: int) -> FavoritesIndex:
        if self.contains(conference_id, event_id):
            return self
        events = {key: list(ids) for key, ids in self.events.items()}
        events.setdefault(conference_id, []).append(event_id)
        return FavoritesIndex(events=events)

    def without_event(self, conference_id: int, event_id: int) -> FavoritesIndex:
        if not self.contains(conference_id, event_id):
            return self
        events = {key: list(ids) for key, ids in self.events.items()}
        events[conference_id].remove(event_id)
        if not events[conference_id]:
            del events[conference_id]
        return FavoritesIndex(events=events)
