"""Conference dataset models.

The top-level :class:`Conferences` model is the dataset the sync
engine persists and replaces wholesale on every successful refresh.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from pyconfsync._constants import EVENT_TYPE_TALK, VOTE_OPEN_LEAD
from pyconfsync._dates import parse_schedule_date, to_local_time
from pyconfsync.models._base import ConfBaseModel


class Picture(ConfBaseModel):
    """A sized image reference."""

    width: int | None = None
    height: int | None = None
    url: str = ""


class Track(ConfBaseModel):
    """Conference track an event belongs to."""

    id: int
    name: str = ""
    host: str = ""
    short_description: str = ""
    api_description: str = ""


class Location(ConfBaseModel):
    """Room or hall where an event takes place."""

    id: int
    name: str = ""
    map_url: str = ""


class Speaker(ConfBaseModel):
    """An event speaker."""

    id: int | None = None
    name: str = ""
    title: str = ""
    company: str = ""
    bio: str = ""
    picture: str = ""
    twitter: str = ""


class Event(ConfBaseModel):
    """A scheduled item (talk, keynote, break, ...).

    ``start_time`` and ``end_time`` are kept as the raw ISO strings the
    API sends; use :meth:`starts_at` / :meth:`ends_at` for datetimes.
    """

    id: int
    title: str = ""
    api_description: str = ""
    type: int = 0
    start_time: str = ""
    end_time: str = ""
    date: str = ""
    track: Track | None = None
    location: Location | None = None
    speakers: list[Speaker] = Field(default_factory=list)

    def starts_at(self) -> datetime | None:
        return parse_schedule_date(self.start_time)

    def ends_at(self) -> datetime | None:
        return parse_schedule_date(self.end_time)

    def is_active(self, now: datetime) -> bool:
        """Whether *now* falls within ``[start, end)``."""
        start, end = self.starts_at(), self.ends_at()
        if start is None or end is None:
            return False
        return start <= now < end

    def is_votable(self, now: datetime) -> bool:
        """Whether attendees may vote on this event at *now*.

        Only talks can be voted on, starting shortly before they end.
        """
        if self.type != EVENT_TYPE_TALK:
            return False
        end = self.ends_at()
        if end is None:
            return False
        return now >= end - VOTE_OPEN_LEAD


class ConferenceInfo(ConfBaseModel):
    """Identity and metadata of a conference edition."""

    id: int
    name: str = ""
    long_name: str = ""
    name_and_location: str = ""
    first_day: str = ""
    last_day: str = ""
    normal_site_price: str = ""
    registration_site: str = ""
    utc_timezone_offset: str = ""
    utc_timezone_offset_millis: int | None = None
    hashtag: str = ""
    query: str = ""
    pictures: list[Picture] = Field(default_factory=list)


class SponsorItem(ConfBaseModel):
    logo: str = ""
    url: str = ""


class SponsorGroup(ConfBaseModel):
    type: str = ""
    items: list[SponsorItem] = Field(default_factory=list)


class Venue(ConfBaseModel):
    name: str = ""
    address: str = ""
    website: str = ""
    latitude: float | None = None
    longitude: float | None = None
    map: str = ""


class Conference(ConfBaseModel):
    """A single conference edition with its schedule."""

    info: ConferenceInfo
    schedule: list[Event] = Field(default_factory=list)
    sponsors: list[SponsorGroup] = Field(default_factory=list)
    speakers: list[Speaker] = Field(default_factory=list)
    venues: list[Venue] = Field(default_factory=list)
    code_of_conduct: str = ""

    @property
    def id(self) -> int:
        return self.info.id

    def local_time(self, value: datetime) -> datetime:
        """Convert *value* into the conference time zone (``utcTimezoneOffset``)."""
        return to_local_time(value, self.info.utc_timezone_offset)

    def local_start(self, event: Event) -> datetime | None:
        start = event.starts_at()
        return self.local_time(start) if start is not None else None

    def event(self, event_id: int) -> Event | None:
        for event in self.schedule:
            if event.id == event_id:
                return event
        return None


class Conferences(ConfBaseModel):
    """The synchronized dataset: every conference the source publishes."""

    conferences: list[Conference] = Field(default_factory=list)

    def conference(self, conference_id: int) -> Conference | None:
        for conference in self.conferences:
            if conference.id == conference_id:
                return conference
        return None
