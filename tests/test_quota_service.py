"""Tests for daily quota tracking."""

from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime, timedelta, timezone

import pytest

from filebot.services.quota_service import DailyQuotaTracker


class MutableNow:
    def __init__(self, value: datetime):
        self.value = value

    def __call__(self) -> datetime:
        return self.value


@pytest.fixture
def now() -> MutableNow:
    return MutableNow(datetime(2026, 1, 5, 12, 0, tzinfo=timezone.utc))


class TestDailyQuotaTracker:
    def test_peek_is_zero_for_new_user(self, test_db, now):
        tracker = DailyQuotaTracker(now_fn=now)

        assert tracker.peek("u1") == 0

    def test_increment_returns_new_count(self, test_db, now):
        tracker = DailyQuotaTracker(now_fn=now)

        assert tracker.increment_and_get("u1") == 1
        assert tracker.increment_and_get("u1") == 2
        assert tracker.peek("u1") == 2

    def test_users_are_counted_separately(self, test_db, now):
        tracker = DailyQuotaTracker(now_fn=now)
        tracker.increment_and_get("u1")

        assert tracker.peek("u2") == 0

    def test_new_day_starts_from_zero(self, test_db, now):
        tracker = DailyQuotaTracker(now_fn=now)
        tracker.increment_and_get("u1")
        tracker.increment_and_get("u1")

        now.value += timedelta(days=1)

        assert tracker.peek("u1") == 0
        assert tracker.increment_and_get("u1") == 1

    def test_midnight_boundary(self, test_db, now):
        tracker = DailyQuotaTracker(now_fn=now)

        now.value = datetime(2026, 1, 5, 23, 59, 59, tzinfo=timezone.utc)
        assert tracker.increment_and_get("u1") == 1

        now.value = datetime(2026, 1, 6, 0, 0, 1, tzinfo=timezone.utc)
        assert tracker.increment_and_get("u1") == 1

    def test_day_follows_configured_timezone(self, test_db, now):
        now.value = datetime(2026, 1, 5, 23, 30, tzinfo=timezone.utc)

        assert DailyQuotaTracker(now_fn=now).today() == date(2026, 1, 5)
        assert DailyQuotaTracker(tz_name="Asia/Kolkata", now_fn=now).today() == date(2026, 1, 6)

    def test_concurrent_increments_are_distinct(self, test_db, now):
        tracker = DailyQuotaTracker(now_fn=now)
        total = 40

        with ThreadPoolExecutor(max_workers=8) as pool:
            counts = list(pool.map(lambda _: tracker.increment_and_get("u1"), range(total)))

        assert sorted(counts) == list(range(1, total + 1))
        assert tracker.peek("u1") == total
