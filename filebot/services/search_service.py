"""Keyword search over stored file records."""

from typing import List

from common.logging_config import get_logger
from common.types import FileRecord
from filebot.repositories.file_repository import FileRepository
from filebot.utils import parse_keywords

logger = get_logger(__name__)


class KeywordSearchEngine:
    """
    Read-only matching of queries against file keywords.

    Two modes are offered because they serve different callers:
    search() matches whole terms (any query term present in a record's
    keyword set), find_containing() matches one fragment as a substring of
    any keyword and is used by the admin lookup.
    """

    def __init__(self, file_repo: FileRepository = None):
        self.file_repo = file_repo or FileRepository()

    def search(self, query: str) -> List[FileRecord]:
        terms = parse_keywords(query)
        if not terms:
            logger.debug(f"Empty query after normalization: {query!r}")
            return []

        results = self.file_repo.find_by_any_keyword(terms)
        logger.info(f"Search for {sorted(terms)} matched {len(results)} file(s)")
        return results

    def find_containing(self, fragment: str) -> List[FileRecord]:
        needle = (fragment or "").strip().lower()
        if not needle:
            return []

        results = self.file_repo.find_by_keyword_substring(needle)
        logger.info(f"Substring lookup for {needle!r} matched {len(results)} file(s)")
        return results
