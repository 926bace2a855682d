from __future__ import annotations

import pytest

from _support import FakeClock


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
