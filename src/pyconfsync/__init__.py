"""pyconfsync - Async sync and local cache for conference schedule data."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyconfsync")
except PackageNotFoundError:
    __version__ = "0+local"
from pyconfsync._transport import FileFetcher, Fetcher, HttpFetcher, Response
from pyconfsync.config import SyncConfig
from pyconfsync.exceptions import (
    ConfSyncConfigError,
    ConfSyncError,
    ConfSyncParseError,
    ConfSyncStoreError,
    ConfSyncTransportError,
    NoSourceError,
)
from pyconfsync.manager import ConferenceDataManager, decode_dataset
from pyconfsync.models import (
    Conference,
    ConferenceInfo,
    Conferences,
    Event,
    FavoritesIndex,
    Location,
    Speaker,
    SyncState,
    Track,
    Vote,
    VoteValue,
)
from pyconfsync.state.outcome import SyncOutcome, SyncReason, SyncStatus
from pyconfsync.state.policy import should_attempt_fetch
from pyconfsync.storage import JsonFileStore, LocalStore, MemoryStore

__all__ = [
    "__version__",
    "ConfSyncConfigError",
    "ConfSyncError",
    "ConfSyncParseError",
    "ConfSyncStoreError",
    "ConfSyncTransportError",
    "Conference",
    "ConferenceDataManager",
    "ConferenceInfo",
    "Conferences",
    "Event",
    "FavoritesIndex",
    "Fetcher",
    "FileFetcher",
    "HttpFetcher",
    "JsonFileStore",
    "LocalStore",
    "Location",
    "MemoryStore",
    "NoSourceError",
    "Response",
    "Speaker",
    "SyncConfig",
    "SyncOutcome",
    "SyncReason",
    "SyncState",
    "SyncStatus",
    "Track",
    "Vote",
    "VoteValue",
    "decode_dataset",
    "should_attempt_fetch",
]
