"""Daily quota repository for database operations."""

import sqlite3

from common.logging_config import get_logger
from filebot.database import get_db_connection
from filebot.exceptions import StorageUnavailableError

logger = get_logger(__name__)


class QuotaRepository:
    @staticmethod
    def get_count(user_id: str, day: str) -> int:
        try:
            with get_db_connection() as conn:
                cursor = conn.cursor()
                cursor.execute(
                    "SELECT delivered_count FROM daily_quotas WHERE user_id = ? AND day = ?",
                    (user_id, day)
                )
                row = cursor.fetchone()
        except sqlite3.Error as e:
            logger.error(f"Failed to read quota [user_id={user_id}] [day={day}]: {e}", exc_info=True)
            raise StorageUnavailableError("Quota store is unavailable") from e

        return row["delivered_count"] if row else 0

    @staticmethod
    def increment_and_get(user_id: str, day: str) -> int:
        """
        Create or increment the counter for (user_id, day) and return the new value.

        A single upsert statement in its own transaction; SQLite serializes
        concurrent writers, so every caller observes a distinct value.
        """
        try:
            with get_db_connection() as conn:
                try:
                    cursor = conn.cursor()
                    cursor.execute(
                        """
                        INSERT INTO daily_quotas (user_id, day, delivered_count)
                        VALUES (?, ?, 1)
                        ON CONFLICT(user_id, day)
                        DO UPDATE SET delivered_count = delivered_count + 1
                        RETURNING delivered_count
                        """,
                        (user_id, day)
                    )
                    count = cursor.fetchone()["delivered_count"]
                    conn.commit()
                except Exception:
                    conn.rollback()
                    raise
        except sqlite3.Error as e:
            logger.error(f"Failed to increment quota [user_id={user_id}] [day={day}]: {e}", exc_info=True)
            raise StorageUnavailableError("Quota store is unavailable") from e

        logger.debug(f"Quota incremented to {count} [user_id={user_id}] [day={day}]")
        return count
