"""Custom exception hierarchy for pyconfsync."""

from __future__ import annotations


class ConfSyncError(Exception):
    """Base exception for all pyconfsync errors."""


class ConfSyncConfigError(ConfSyncError):
    """Invalid or missing configuration."""


class NoSourceError(ConfSyncConfigError):
    """No data source locator could be resolved for a refresh."""


class ConfSyncTransportError(ConfSyncError):
    """Fetch-level failure (network, timeout, non-2xx status, unreadable file)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str = "",
    ) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class ConfSyncParseError(ConfSyncError):
    """Payload could not be decoded into a conference dataset."""


class ConfSyncStoreError(ConfSyncError):
    """Local store could not persist data.

    Raised from the store's write paths.  The sync engine lets these
    propagate: a refresh that cannot persist must not report success.
    """
