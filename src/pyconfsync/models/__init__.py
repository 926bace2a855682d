"""Pydantic models for the conference dataset and per-user state."""

from pyconfsync.models._base import ConfBaseModel, ConfEnum
from pyconfsync.models.conference import (
    Conference,
    ConferenceInfo,
    Conferences,
    Event,
    Location,
    Picture,
    Speaker,
    SponsorGroup,
    SponsorItem,
    Track,
    Venue,
)
from pyconfsync.models.sync import FavoritesIndex, SyncState
from pyconfsync.models.vote import Vote, VoteValue

__all__ = [
    "ConfBaseModel",
    "ConfEnum",
    "Conference",
    "ConferenceInfo",
    "Conferences",
    "Event",
    "FavoritesIndex",
    "Location",
    "Picture",
    "Speaker",
    "SponsorGroup",
    "SponsorItem",
    "SyncState",
    "Track",
    "Venue",
    "Vote",
    "VoteValue",
]
