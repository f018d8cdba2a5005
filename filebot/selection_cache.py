"""
In-memory per-user cache of the latest search results.

Bridges a search and a later "pick item N" action. Each user has at most one
entry; a new put() replaces it wholesale. Entries expire a fixed time after
creation: get() never returns an expired entry, and a background sweeper
removes them periodically.
"""

import asyncio
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional, Sequence, Tuple

from common.constants import DEFAULT_SELECTION_SWEEP_INTERVAL_SECONDS, DEFAULT_SELECTION_TTL_SECONDS
from common.logging_config import get_logger
from common.types import FileRecord

logger = get_logger(__name__)


class MissReason(str, Enum):
    NO_ENTRY = "no_entry"
    EXPIRED = "expired"
    OUT_OF_RANGE = "out_of_range"


@dataclass(frozen=True)
class SelectionCacheEntry:
    """
    Immutable result snapshot for one user.

    Attributes:
        results: Records in the order the search returned them
        created_at: Monotonic timestamp of the put()
    """
    results: Tuple[FileRecord, ...]
    created_at: float


@dataclass(frozen=True)
class CacheLookup:
    record: Optional[FileRecord] = None
    miss_reason: Optional[MissReason] = None

    @property
    def found(self) -> bool:
        return self.record is not None


class SelectionCache:
    """
    Thread-safe map of user_id to SelectionCacheEntry with TTL expiry.

    Entries are immutable and swapped under a lock, so a reader sees either
    the old or the new result set, never a mix.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_SELECTION_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Dict[str, SelectionCacheEntry] = {}

    def put(self, user_id: str, results: Sequence[FileRecord]) -> None:
        entry = SelectionCacheEntry(results=tuple(results), created_at=self._clock())
        with self._lock:
            self._entries[user_id] = entry
        logger.debug(f"Cached {len(entry.results)} result(s) [user_id={user_id}]")

    def lookup(self, user_id: str, index: int) -> CacheLookup:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(user_id)
            if entry is not None and self._is_expired(entry, now):
                del self._entries[user_id]
                entry = None
                reason = MissReason.EXPIRED
            else:
                reason = MissReason.NO_ENTRY

        if entry is None:
            logger.debug(f"Selection cache miss ({reason.value}) [user_id={user_id}]")
            return CacheLookup(miss_reason=reason)

        if not 0 <= index < len(entry.results):
            logger.debug(
                f"Selection index {index} out of range 0..{len(entry.results) - 1} [user_id={user_id}]"
            )
            return CacheLookup(miss_reason=MissReason.OUT_OF_RANGE)

        return CacheLookup(record=entry.results[index])

    def get(self, user_id: str, index: int) -> Optional[FileRecord]:
        return self.lookup(user_id, index).record

    def purge_expired(self) -> int:
        """
        Remove every expired entry.

        Returns:
            Number of entries removed
        """
        now = self._clock()
        with self._lock:
            expired = [uid for uid, entry in self._entries.items() if self._is_expired(entry, now)]
            for uid in expired:
                del self._entries[uid]

        if expired:
            logger.info(f"Purged {len(expired)} expired selection(s)")
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _is_expired(self, entry: SelectionCacheEntry, now: float) -> bool:
        return now - entry.created_at >= self.ttl_seconds


class SelectionCacheSweeper:
    """
    Background task that periodically purges expired selections.
    """

    def __init__(
        self,
        cache: SelectionCache,
        interval_seconds: float = DEFAULT_SELECTION_SWEEP_INTERVAL_SECONDS,
    ):
        self.cache = cache
        self.interval_seconds = interval_seconds
        self._running = False
        self._task = None

    async def start(self) -> None:
        """Start the background sweep task."""
        if self._running:
            logger.warning("Selection sweeper already running")
            return

        self._running = True
        self._task = asyncio.create_task(self._run())
        logger.info(f"Started selection cache sweeper (interval: {self.interval_seconds}s)")

    async def stop(self) -> None:
        """Stop the background sweep task."""
        if not self._running:
            return

        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        logger.info("Stopped selection cache sweeper")

    async def _run(self) -> None:
        while self._running:
            try:
                await asyncio.sleep(self.interval_seconds)
                self.cache.purge_expired()
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"Error in selection sweeper: {e}", exc_info=True)
