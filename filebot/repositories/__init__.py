"""Repository layer for data access."""

from filebot.repositories.file_repository import FileRepository
from filebot.repositories.quota_repository import QuotaRepository

__all__ = [
    "FileRepository",
    "QuotaRepository",
]
