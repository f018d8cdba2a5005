"""File repository for database operations."""

import sqlite3
from datetime import datetime
from typing import Iterable, List, Optional

from common.logging_config import get_logger
from common.types import FileRecord, MediaKind
from filebot.database import get_db_connection
from filebot.exceptions import DuplicateFileError, StorageUnavailableError

logger = get_logger(__name__)

_SELECT_RECORDS = """
    SELECT f.file_id, f.display_name, f.caption, f.media_kind, f.added_by, f.added_at,
           group_concat(k.keyword, ',') AS keywords, MIN(f.rowid) AS seq
    FROM files f
    JOIN file_keywords k ON k.file_id = f.file_id
"""


def _row_to_record(row: sqlite3.Row) -> FileRecord:
    return FileRecord(
        file_id=row["file_id"],
        display_name=row["display_name"],
        keywords=frozenset(row["keywords"].split(",")),
        caption=row["caption"],
        media_kind=MediaKind(row["media_kind"]),
        added_by=row["added_by"],
        added_at=datetime.fromisoformat(row["added_at"]),
    )


class FileRepository:
    @staticmethod
    def create_file(record: FileRecord) -> FileRecord:
        """
        Insert a file and its keywords in one transaction.

        Raises:
            DuplicateFileError: A record with the same file_id already exists
            StorageUnavailableError: The database write failed
        """
        logger.debug(f"Creating file [file_id={record.file_id}] keywords={sorted(record.keywords)}")
        try:
            with get_db_connection() as conn:
                try:
                    cursor = conn.cursor()
                    cursor.execute(
                        """
                        INSERT INTO files (file_id, display_name, caption, media_kind, added_by, added_at)
                        VALUES (?, ?, ?, ?, ?, ?)
                        """,
                        (
                            record.file_id,
                            record.display_name,
                            record.caption,
                            record.media_kind.value,
                            record.added_by,
                            record.added_at.isoformat(),
                        )
                    )
                    cursor.executemany(
                        "INSERT INTO file_keywords (file_id, keyword) VALUES (?, ?)",
                        [(record.file_id, keyword) for keyword in sorted(record.keywords)]
                    )
                    conn.commit()
                except Exception:
                    conn.rollback()
                    raise
        except sqlite3.IntegrityError as e:
            logger.warning(f"File already stored [file_id={record.file_id}]: {e}")
            raise DuplicateFileError(f"File {record.file_id} is already stored") from e
        except sqlite3.Error as e:
            logger.error(f"Failed to create file [file_id={record.file_id}]: {e}", exc_info=True)
            raise StorageUnavailableError("File store is unavailable") from e

        logger.info(f"File created [file_id={record.file_id}]")
        return record

    @staticmethod
    def get_by_id(file_id: str) -> Optional[FileRecord]:
        try:
            with get_db_connection() as conn:
                cursor = conn.cursor()
                cursor.execute(
                    _SELECT_RECORDS + " WHERE f.file_id = ? GROUP BY f.file_id",
                    (file_id,)
                )
                row = cursor.fetchone()
        except sqlite3.Error as e:
            logger.error(f"Failed to read file [file_id={file_id}]: {e}", exc_info=True)
            raise StorageUnavailableError("File store is unavailable") from e

        if row is None:
            return None
        return _row_to_record(row)

    @staticmethod
    def delete_file(file_id: str) -> int:
        """
        Delete a file and its keywords.

        Returns:
            Number of records removed (0 or 1)
        """
        logger.debug(f"Deleting file [file_id={file_id}]")
        try:
            with get_db_connection() as conn:
                try:
                    cursor = conn.cursor()
                    cursor.execute("DELETE FROM files WHERE file_id = ?", (file_id,))
                    deleted = cursor.rowcount
                    conn.commit()
                except Exception:
                    conn.rollback()
                    raise
        except sqlite3.Error as e:
            logger.error(f"Failed to delete file [file_id={file_id}]: {e}", exc_info=True)
            raise StorageUnavailableError("File store is unavailable") from e

        logger.info(f"Deleted {deleted} file(s) [file_id={file_id}]")
        return deleted

    @staticmethod
    def find_by_any_keyword(keywords: Iterable[str]) -> List[FileRecord]:
        """
        Files having at least one of the given keywords, in insertion order.
        """
        terms = sorted(set(keywords))
        if not terms:
            return []

        placeholders = ','.join('?' for _ in terms)
        query = _SELECT_RECORDS + f"""
            WHERE f.file_id IN (
                SELECT file_id FROM file_keywords WHERE keyword IN ({placeholders})
            )
            GROUP BY f.file_id
            ORDER BY seq
        """
        try:
            with get_db_connection() as conn:
                cursor = conn.cursor()
                cursor.execute(query, terms)
                rows = cursor.fetchall()
        except sqlite3.Error as e:
            logger.error(f"Keyword query failed for {terms}: {e}", exc_info=True)
            raise StorageUnavailableError("File store is unavailable") from e

        return [_row_to_record(row) for row in rows]

    @staticmethod
    def find_by_keyword_substring(fragment: str) -> List[FileRecord]:
        """
        Files having a keyword that contains the fragment, in insertion order.

        Stored keywords are lower-case, so the fragment must be lower-cased by the caller.
        """
        if not fragment:
            return []

        query = _SELECT_RECORDS + """
            WHERE f.file_id IN (
                SELECT file_id FROM file_keywords WHERE instr(keyword, ?) > 0
            )
            GROUP BY f.file_id
            ORDER BY seq
        """
        try:
            with get_db_connection() as conn:
                cursor = conn.cursor()
                cursor.execute(query, (fragment,))
                rows = cursor.fetchall()
        except sqlite3.Error as e:
            logger.error(f"Substring query failed for {fragment!r}: {e}", exc_info=True)
            raise StorageUnavailableError("File store is unavailable") from e

        return [_row_to_record(row) for row in rows]
