"""Vote model."""

from __future__ import annotations

from pyconfsync.models._base import ConfBaseModel, ConfEnum


class VoteValue(ConfEnum):
    """Rating an attendee gave a talk."""

    UNKNOWN = -1
    UNLIKE = 0
    NEUTRAL = 1
    LIKE = 2


class Vote(ConfBaseModel):
    """A vote cast by the user for one talk.

    Votes are created elsewhere; the sync layer only looks them up.
    """

    conference_id: int
    talk_id: int
    vote_value: VoteValue = VoteValue.UNKNOWN
    comment: str | None = None

    def matches(self, conference_id: int, event_id: int) -> bool:
        return self.conference_id == conference_id and self.talk_id == event_id
