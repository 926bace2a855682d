"""Freshness policy.

This module intentionally contains *no* I/O and never reads the clock.
Callers pass ``now`` in, which keeps the throttle testable with an
injected clock.
"""

from __future__ import annotations

from datetime import datetime, timedelta


def should_attempt_fetch(
    *,
    now: datetime,
    last_attempt: datetime | None,
    min_interval: timedelta,
    forced: bool,
) -> bool:
    """Decide whether a network attempt is warranted.

    Policy:
    - Forced refreshes always go to the network.
    - Without a previous attempt there is nothing to throttle against.
    - Otherwise at least ``min_interval`` must have elapsed.
    """
    if forced or last_attempt is None:
        return True
    return now - last_attempt >= min_interval


def is_unchanged(
    *,
    server_modified: datetime | None,
    stored_modified: datetime | None,
    forced: bool,
) -> bool:
    """Whether the server marker says the cached dataset is current."""
    if forced or server_modified is None or stored_modified is None:
        return False
    return server_modified == stored_modified
