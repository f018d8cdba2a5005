"""File catalog service for admin uploads and deletes."""

from typing import Optional

from common.constants import DEFAULT_DISPLAY_NAME
from common.logging_config import get_logger
from common.types import FileRecord, MediaKind
from filebot.exceptions import EmptyKeywordListError, UnsupportedMediaKindError
from filebot.repositories.file_repository import FileRepository
from filebot.utils import parse_keywords, utc_now

logger = get_logger(__name__)


class FileService:
    def __init__(self, file_repo: FileRepository = None):
        self.file_repo = file_repo or FileRepository()

    def add_file(
        self,
        file_id: str,
        media_kind: str,
        caption: Optional[str],
        added_by: str,
        file_name: Optional[str] = None,
    ) -> FileRecord:
        """
        Register an uploaded payload under the keywords found in its caption.

        Args:
            file_id: Payload id assigned by the delivery transport
            media_kind: One of document, photo, video, audio
            caption: Free text; split on whitespace and commas into keywords
            added_by: Uploader's user id
            file_name: Optional display name

        Returns:
            The stored FileRecord

        Raises:
            EmptyKeywordListError: Caption yields no keywords
            UnsupportedMediaKindError: Unknown media kind
            DuplicateFileError: file_id already stored
        """
        keywords = parse_keywords(caption or "")
        if not keywords:
            logger.warning(f"Upload rejected: no keywords in caption [file_id={file_id}] [user_id={added_by}]")
            raise EmptyKeywordListError("At least one keyword is required for file upload")

        try:
            kind = MediaKind(media_kind)
        except ValueError:
            logger.warning(f"Upload rejected: unsupported media kind {media_kind!r} [file_id={file_id}]")
            raise UnsupportedMediaKindError(f"Unsupported media kind: {media_kind}")

        record = FileRecord(
            file_id=file_id,
            display_name=file_name or DEFAULT_DISPLAY_NAME,
            keywords=keywords,
            caption=caption or None,
            media_kind=kind,
            added_by=added_by,
            added_at=utc_now(),
        )
        return self.file_repo.create_file(record)

    def delete_file(self, file_id: str) -> int:
        deleted = self.file_repo.delete_file(file_id)
        if not deleted:
            logger.info(f"Delete requested for unknown file [file_id={file_id}]")
        return deleted
