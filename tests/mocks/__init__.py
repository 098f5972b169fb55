"""
Mock implementations for testing.
"""

from tests.mocks.collectors import failing_collector, slow_collector, static_collector
from tests.mocks.http import MockResponse, MockSession
from tests.mocks.storage import (
    FailingCacheRepository,
    MockCacheRepository,
    SlowCacheRepository,
)

__all__ = [
    "FailingCacheRepository",
    "MockCacheRepository",
    "MockResponse",
    "MockSession",
    "SlowCacheRepository",
    "failing_collector",
    "slow_collector",
    "static_collector",
]
