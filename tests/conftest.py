import json

import pytest

from paceline.cache import CacheStore
from paceline.models import CacheRecord

# 2025-01-01T00:00:00Z
NOW = 1_735_689_600


class MemoryCacheStore(CacheStore):
    def __init__(self, record: CacheRecord | None = None):
        self.record = record
        self.writes: list[CacheRecord] = []

    def read(self) -> CacheRecord | None:
        return self.record

    def write(self, record: CacheRecord) -> None:
        self.writes.append(record)
        self.record = record


def usage_payload(
    five_hour_util=30.7,
    five_hour_reset="2025-01-01T02:30:00.123456+00:00",
    seven_day_util=50.0,
    seven_day_reset="2025-01-06T00:00:00Z",
) -> str:
    return json.dumps(
        {
            "five_hour": {"utilization": five_hour_util, "resets_at": five_hour_reset},
            "seven_day": {"utilization": seven_day_util, "resets_at": seven_day_reset},
        }
    )


@pytest.fixture
def payload() -> str:
    return usage_payload()


@pytest.fixture
def memory_cache() -> MemoryCacheStore:
    return MemoryCacheStore()


@pytest.fixture
def session_input() -> dict:
    return {
        "model": {"display_name": "Opus 4.5"},
        "workspace": {"current_dir": "/tmp/project", "project_dir": "/tmp/project"},
        "cost": {"total_cost_usd": 1.234},
        "context_window": {
            "context_window_size": 200000,
            "current_usage": {
                "input_tokens": 20000,
                "cache_creation_input_tokens": 2000,
                "cache_read_input_tokens": 20000,
            },
        },
    }
