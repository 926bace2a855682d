"""Internal constants shared across the library."""

from datetime import timedelta

USER_AGENT = "pyconfsync/1.0"
LAST_MODIFIED_HEADER = "Last-Modified"

#: Minimum time between two non-forced network attempts.
DEFAULT_MIN_FETCH_INTERVAL: float = 3600.0
DEFAULT_REQUEST_TIMEOUT: float = 30.0

# ------------------------------------------------------------------
# Schedule semantics
# ------------------------------------------------------------------

#: ``Event.type`` value for talks (the only events that can be voted on).
EVENT_TYPE_TALK = 1

#: Voting opens this long before a talk is scheduled to end.
VOTE_OPEN_LEAD = timedelta(minutes=15)

# ------------------------------------------------------------------
# JsonFileStore file names
# ------------------------------------------------------------------

DATASET_FILE = "conferences.json"
SYNC_STATE_FILE = "sync_state.json"
FAVORITES_FILE = "favorites.json"
VOTES_FILE = "votes.json"
