"""Service layer for business logic."""

from filebot.services.file_service import FileService
from filebot.services.quota_service import DailyQuotaTracker
from filebot.services.search_service import KeywordSearchEngine

__all__ = [
    "DailyQuotaTracker",
    "FileService",
    "KeywordSearchEngine",
]
