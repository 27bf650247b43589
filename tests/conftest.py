import os
from datetime import datetime, timezone

import pytest

os.environ["ADMIN_TOKEN"] = "test-admin-token"

from renewal_engine.schemas import DeadlineConfig  # noqa: E402
from renewal_engine.services.clock import FixedClock  # noqa: E402


def at(year: int, month: int, day: int, hour: int = 12) -> FixedClock:
    return FixedClock(datetime(year, month, day, hour, tzinfo=timezone.utc))


def end_of(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, 23, 59, 59, 999000, tzinfo=timezone.utc)


@pytest.fixture
def config() -> DeadlineConfig:
    return DeadlineConfig()
