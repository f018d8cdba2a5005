"""Shared pytest fixtures for all tests."""

from pathlib import Path
from typing import List, Optional, Tuple

import pytest

from common.types import MediaKind
from filebot.database import init_database
from filebot.delivery_client import DeliveryTransport
from filebot.exceptions import DeliveryFailedError
from filebot.orchestrator import RequestOrchestrator
from filebot.selection_cache import SelectionCache
from filebot.services.file_service import FileService
from filebot.services.quota_service import DailyQuotaTracker
from filebot.services.search_service import KeywordSearchEngine

ADMIN_ID = "1001"
USER_ID = "2002"


class FakeClock:
    """
    Manually advanced clock usable as a monotonic time source.
    """

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingDelivery(DeliveryTransport):
    """
    Delivery transport that records calls and can be told to fail.
    """

    def __init__(self):
        self.sent: List[Tuple[str, MediaKind, str, str]] = []
        self.fail_with: Optional[str] = None

    async def deliver(self, chat_id: str, media_kind: MediaKind, payload_ref: str, caption: str) -> None:
        if self.fail_with:
            raise DeliveryFailedError(self.fail_with)
        self.sent.append((chat_id, media_kind, payload_ref, caption))


@pytest.fixture
def test_db(monkeypatch, tmp_path) -> Path:
    """
    Create a temporary test database for each test.
    """
    db_path = tmp_path / "test.db"
    monkeypatch.setattr("filebot.database.DATABASE_PATH", str(db_path))
    monkeypatch.setattr("filebot.config.DATABASE_PATH", str(db_path))
    init_database()
    return db_path


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def delivery() -> RecordingDelivery:
    return RecordingDelivery()


@pytest.fixture
def file_service(test_db) -> FileService:
    return FileService()


@pytest.fixture
def make_orchestrator(test_db, clock, delivery):
    """
    Factory building an orchestrator over the test database.

    Returns:
        Callable accepting daily_limit, page_size and ttl_seconds overrides
    """
    def _make(daily_limit: int = 10, page_size: int = 10, ttl_seconds: float = 300) -> RequestOrchestrator:
        return RequestOrchestrator(
            search_engine=KeywordSearchEngine(),
            quota_tracker=DailyQuotaTracker(),
            selection_cache=SelectionCache(ttl_seconds=ttl_seconds, clock=clock),
            file_service=FileService(),
            delivery=delivery,
            admin_ids=frozenset({ADMIN_ID}),
            daily_limit=daily_limit,
            page_size=page_size,
        )

    return _make
