from datetime import datetime

import pytest

from debuginfolib.info import DebugInfo

FIXED_INSTANT = datetime(2024, 1, 2, 3, 4, 5)


@pytest.fixture
def fixed_instant():
    return FIXED_INSTANT


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_INSTANT


@pytest.fixture
def info(fixed_clock):
    """A DebugInfo with default settings and a frozen clock."""
    return DebugInfo(clock=fixed_clock)
