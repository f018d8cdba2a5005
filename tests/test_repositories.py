"""Integration tests for database repositories."""

import sqlite3
from datetime import datetime, timezone

import pytest

from common.types import FileRecord, MediaKind
from filebot.database import get_db_connection
from filebot.exceptions import DuplicateFileError, StorageUnavailableError
from filebot.repositories.file_repository import FileRepository
from filebot.repositories.quota_repository import QuotaRepository


def make_record(file_id: str, keywords, **overrides) -> FileRecord:
    fields = dict(
        file_id=file_id,
        display_name=f"{file_id}.mp4",
        keywords=frozenset(keywords),
        caption=" ".join(sorted(keywords)),
        media_kind=MediaKind.VIDEO,
        added_by="1001",
        added_at=datetime(2026, 1, 5, 12, 0, tzinfo=timezone.utc),
    )
    fields.update(overrides)
    return FileRecord(**fields)


class TestFileRepository:
    """Test FileRepository with various scenarios."""

    def test_create_and_get_by_id(self, test_db):
        record = make_record("f1", {"war", "action"})
        FileRepository.create_file(record)

        fetched = FileRepository.get_by_id("f1")
        assert fetched == record

    def test_get_by_id_nonexistent(self, test_db):
        assert FileRepository.get_by_id("missing") is None

    def test_duplicate_file_id_rejected(self, test_db):
        FileRepository.create_file(make_record("f1", {"war"}))

        with pytest.raises(DuplicateFileError):
            FileRepository.create_file(make_record("f1", {"peace"}))

        assert FileRepository.get_by_id("f1").keywords == frozenset({"war"})

    def test_find_by_any_keyword_uses_or_semantics(self, test_db):
        FileRepository.create_file(make_record("f1", {"war"}))
        FileRepository.create_file(make_record("f2", {"peace"}))
        FileRepository.create_file(make_record("f3", {"comedy"}))

        results = FileRepository.find_by_any_keyword(["war", "peace"])

        assert [r.file_id for r in results] == ["f1", "f2"]

    def test_find_by_any_keyword_returns_each_file_once(self, test_db):
        FileRepository.create_file(make_record("f1", {"war", "action", "movie"}))

        results = FileRepository.find_by_any_keyword(["war", "action"])

        assert len(results) == 1
        assert results[0].keywords == frozenset({"war", "action", "movie"})

    def test_find_by_any_keyword_order_is_insertion_order(self, test_db):
        for file_id in ["c", "a", "b"]:
            FileRepository.create_file(make_record(file_id, {"movie"}))

        assert [r.file_id for r in FileRepository.find_by_any_keyword(["movie"])] == ["c", "a", "b"]

    def test_find_by_any_keyword_empty(self, test_db):
        assert FileRepository.find_by_any_keyword([]) == []

    def test_find_by_keyword_substring(self, test_db):
        FileRepository.create_file(make_record("f1", {"avatar"}))
        FileRepository.create_file(make_record("f2", {"war"}))
        FileRepository.create_file(make_record("f3", {"starwars"}))

        results = FileRepository.find_by_keyword_substring("war")

        assert [r.file_id for r in results] == ["f2", "f3"]

    def test_substring_treats_like_wildcards_literally(self, test_db):
        FileRepository.create_file(make_record("f1", {"avatar"}))

        assert FileRepository.find_by_keyword_substring("%") == []
        assert FileRepository.find_by_keyword_substring("_") == []

    def test_delete_file_removes_keywords(self, test_db):
        FileRepository.create_file(make_record("f1", {"war"}))

        assert FileRepository.delete_file("f1") == 1

        with get_db_connection() as conn:
            count = conn.execute("SELECT COUNT(*) AS n FROM file_keywords WHERE file_id = 'f1'").fetchone()["n"]
        assert count == 0
        assert FileRepository.find_by_any_keyword(["war"]) == []

    def test_delete_nonexistent_file(self, test_db):
        assert FileRepository.delete_file("missing") == 0

    def test_optional_caption_round_trips_as_none(self, test_db):
        FileRepository.create_file(make_record("f1", {"war"}, caption=None))

        assert FileRepository.get_by_id("f1").caption is None


class TestQuotaRepository:
    """Test QuotaRepository counters."""

    def test_get_count_defaults_to_zero(self, test_db):
        assert QuotaRepository.get_count("u1", "2026-01-05") == 0

    def test_first_increment_creates_counter_at_one(self, test_db):
        assert QuotaRepository.increment_and_get("u1", "2026-01-05") == 1
        assert QuotaRepository.get_count("u1", "2026-01-05") == 1

    def test_increments_are_consecutive(self, test_db):
        values = [QuotaRepository.increment_and_get("u1", "2026-01-05") for _ in range(3)]
        assert values == [1, 2, 3]

    def test_counters_are_keyed_by_user_and_day(self, test_db):
        QuotaRepository.increment_and_get("u1", "2026-01-05")
        QuotaRepository.increment_and_get("u1", "2026-01-05")
        QuotaRepository.increment_and_get("u1", "2026-01-06")
        QuotaRepository.increment_and_get("u2", "2026-01-05")

        assert QuotaRepository.get_count("u1", "2026-01-05") == 2
        assert QuotaRepository.get_count("u1", "2026-01-06") == 1
        assert QuotaRepository.get_count("u2", "2026-01-05") == 1


class TestStorageFailures:
    """Storage errors surface as StorageUnavailableError and leave no partial writes."""

    @pytest.fixture
    def broken_db(self, monkeypatch, tmp_path):
        db_dir = tmp_path / "not-a-file.db"
        db_dir.mkdir()
        monkeypatch.setattr("filebot.database.DATABASE_PATH", str(db_dir))

    def test_file_store_unavailable(self, broken_db):
        with pytest.raises(StorageUnavailableError):
            FileRepository.find_by_any_keyword(["war"])

    def test_quota_store_unavailable(self, broken_db):
        with pytest.raises(StorageUnavailableError):
            QuotaRepository.increment_and_get("u1", "2026-01-05")

    def test_failed_keyword_insert_rolls_back_file_row(self, test_db):
        with get_db_connection() as conn:
            conn.execute("""
                CREATE TRIGGER reject_keyword BEFORE INSERT ON file_keywords
                WHEN NEW.keyword = 'boom'
                BEGIN SELECT RAISE(ABORT, 'rejected'); END
            """)
            conn.commit()

        with pytest.raises((StorageUnavailableError, DuplicateFileError)):
            FileRepository.create_file(make_record("f1", {"boom", "war"}))

        assert FileRepository.get_by_id("f1") is None
        with get_db_connection() as conn:
            row = conn.execute("SELECT COUNT(*) AS n FROM files").fetchone()
        assert row["n"] == 0

    def test_sqlite_errors_are_wrapped(self, test_db, monkeypatch):
        def failing_connect(*args, **kwargs):
            raise sqlite3.OperationalError("disk I/O error")

        monkeypatch.setattr("filebot.database.sqlite3.connect", failing_connect)

        with pytest.raises(StorageUnavailableError):
            QuotaRepository.get_count("u1", "2026-01-05")
