"""Tagged result of a refresh."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from pyconfsync.exceptions import ConfSyncError
from pyconfsync.models import Conferences


class SyncStatus(StrEnum):
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    UNAVAILABLE = "unavailable"
    FAILED = "failed"


class SyncReason(StrEnum):
    NO_SOURCE = "no_source"
    TRANSPORT_ERROR = "transport_error"
    PARSE_ERROR = "parse_error"
    NO_CONNECTIVITY = "no_connectivity"


@dataclass(frozen=True, slots=True)
class SyncOutcome:
    """What a refresh did.

    ``UPDATED`` carries the dataset now considered authoritative.
    ``UNAVAILABLE`` is not an error: the cached dataset stays valid and
    is still served by the manager.  ``FAILED`` carries the underlying
    exception in ``error``.
    """

    status: SyncStatus
    dataset: Conferences | None = None
    reason: SyncReason | None = None
    error: ConfSyncError | None = None

    @classmethod
    def updated(cls, dataset: Conferences) -> SyncOutcome:
        return cls(SyncStatus.UPDATED, dataset=dataset)

    @classmethod
    def unchanged(cls) -> SyncOutcome:
        return cls(SyncStatus.UNCHANGED)

    @classmethod
    def unavailable(cls) -> SyncOutcome:
        return cls(SyncStatus.UNAVAILABLE, reason=SyncReason.NO_CONNECTIVITY)

    @classmethod
    def failed(cls, reason: SyncReason, error: ConfSyncError) -> SyncOutcome:
        return cls(SyncStatus.FAILED, reason=reason, error=error)

    @property
    def changed(self) -> bool:
        return self.status is SyncStatus.UPDATED

    @property
    def ok(self) -> bool:
        """False only for ``FAILED``."""
        return self.status is not SyncStatus.FAILED
