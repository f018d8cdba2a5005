"""Per-user, per-day delivery counters."""

from datetime import date, datetime, timezone
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from common.constants import DEFAULT_QUOTA_TIMEZONE
from common.logging_config import get_logger
from filebot.repositories.quota_repository import QuotaRepository

logger = get_logger(__name__)


class DailyQuotaTracker:
    """
    Durable delivery counters keyed by (user_id, calendar date).

    The date is taken from the wall clock in a fixed timezone on every call,
    so an increment just before midnight and one just after land in two
    different counters.
    """

    def __init__(
        self,
        quota_repo: QuotaRepository = None,
        tz_name: str = DEFAULT_QUOTA_TIMEZONE,
        now_fn: Optional[Callable[[], datetime]] = None,
    ):
        self.quota_repo = quota_repo or QuotaRepository()
        self.tz = ZoneInfo(tz_name)
        self._now_fn = now_fn or (lambda: datetime.now(timezone.utc))

    def today(self) -> date:
        return self._now_fn().astimezone(self.tz).date()

    def peek(self, user_id: str) -> int:
        return self.quota_repo.get_count(user_id, self.today().isoformat())

    def increment_and_get(self, user_id: str) -> int:
        day = self.today().isoformat()
        count = self.quota_repo.increment_and_get(user_id, day)
        logger.info(f"Delivery counted: {count} today [user_id={user_id}] [day={day}]")
        return count
