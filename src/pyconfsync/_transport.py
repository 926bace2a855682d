"""Remote fetchers: HTTP via aiohttp and local/bundled JSON files.

Fetchers never raise for transport problems.  Every outcome, including
timeouts and non-2xx statuses, is reported through :class:`Response`
so the sync engine can reconcile it against cached state.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from email.utils import format_datetime
from pathlib import Path
from typing import Protocol
from urllib.parse import unquote, urlparse

import aiohttp

from pyconfsync._constants import LAST_MODIFIED_HEADER, USER_AGENT
from pyconfsync._dates import parse_server_date
from pyconfsync.exceptions import ConfSyncTransportError

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Response:
    """Result of a single fetch.

    ``body`` is ``None`` when nothing usable was received; ``error`` is
    set when the transport failed or the server answered >= 400.  Headers
    are kept on error responses so a ``Last-Modified`` marker can still
    be inspected.
    """

    status: int | None = None
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes | None = None
    error: ConfSyncTransportError | None = None

    def header(self, name: str) -> str | None:
        """Case-insensitive header lookup."""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None

    @property
    def last_modified(self) -> datetime | None:
        """Parsed ``Last-Modified`` header, ``None`` if absent or unparseable."""
        return parse_server_date(self.header(LAST_MODIFIED_HEADER))


class Fetcher(Protocol):
    """Structural fetcher interface used by the sync engine.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementations concrete.
    """

    async def fetch(self, locator: str) -> Response:
        ...


def is_local_locator(locator: str) -> bool:
    """Whether *locator* points at the local filesystem."""
    scheme = urlparse(locator).scheme.lower()
    # Single-letter schemes are Windows drive letters.
    return scheme in {"", "file"} or len(scheme) == 1


def _locator_path(locator: str) -> Path:
    parsed = urlparse(locator)
    if parsed.scheme.lower() == "file":
        return Path(unquote(parsed.path))
    return Path(locator)


class HttpFetcher:
    """GET the dataset over HTTP(S) with a shared aiohttp session."""

    def __init__(
        self,
        http_session: aiohttp.ClientSession,
        *,
        timeout: float | None = None,
        user_agent: str = USER_AGENT,
    ) -> None:
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=timeout) if timeout else None
        self._user_agent = user_agent

    async def fetch(self, locator: str) -> Response:
        headers = {
            "accept": "application/json",
            "user-agent": self._user_agent,
        }
        _logger.debug("GET %s", locator)

        try:
            async with self._http.get(locator, headers=headers, timeout=self._timeout) as resp:
                body = await resp.read()
                response_headers = dict(resp.headers)
                status = resp.status
        except aiohttp.ClientError as exc:
            _logger.debug("Request to %s failed: %s", locator, exc)
            return Response(error=ConfSyncTransportError(f"Request to {locator} failed: {exc}", url=locator))
        except TimeoutError:
            _logger.debug("Request to %s timed out", locator)
            return Response(error=ConfSyncTransportError(f"Request to {locator} timed out", url=locator))

        error: ConfSyncTransportError | None = None
        if status >= 400:
            error = ConfSyncTransportError(
                f"HTTP {status} from {locator}: {body[:200]!r}",
                status_code=status,
                url=locator,
            )
            body = None
        _logger.debug("GET %s -> %s (%d bytes)", locator, status, len(body or b""))
        return Response(status=status, headers=response_headers, body=body or None, error=error)


class FileFetcher:
    """Read the dataset from a local file (bundled or mirrored data).

    The file modification time is reported as ``Last-Modified`` so the
    conditional-fetch logic behaves as it does for HTTP sources.
    """

    async def fetch(self, locator: str) -> Response:
        path = _locator_path(locator)
        _logger.debug("Reading %s", path)
        try:
            body, mtime = await asyncio.to_thread(self._read, path)
        except OSError as exc:
            return Response(error=ConfSyncTransportError(f"Could not read {path}: {exc}", url=locator))

        modified = format_datetime(datetime.fromtimestamp(mtime, tz=UTC), usegmt=True)
        return Response(status=200, headers={LAST_MODIFIED_HEADER: modified}, body=body)

    @staticmethod
    def _read(path: Path) -> tuple[bytes, float]:
        return path.read_bytes(), path.stat().st_mtime
