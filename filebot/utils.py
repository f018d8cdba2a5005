"""Utility helper functions for the bot."""

import re
from datetime import datetime, timezone
from typing import FrozenSet, Tuple

KEYWORD_SEPARATORS = re.compile(r"[\s,]+")


def parse_keywords(text: str) -> FrozenSet[str]:
    """
    Split free text into normalized keywords.

    Args:
        text: Raw caption or query (e.g., "war, Action ")

    Returns:
        Set of trimmed, lower-cased, non-empty terms (e.g., {"war", "action"})
    """
    if not text:
        return frozenset()
    return frozenset(
        term.strip().lower()
        for term in KEYWORD_SEPARATORS.split(text)
        if term.strip()
    )


def parse_command(text: str) -> Tuple[str, str]:
    """
    Split a slash command into its name and argument string.

    Args:
        text: Raw message such as "/delete@FileBot abc123"

    Returns:
        Tuple of (command name without slash or bot suffix, trimmed arguments)
    """
    head, _, args = text.strip().partition(" ")
    name = head.lstrip("/").split("@", 1)[0].lower()
    return name, args.strip()


def utc_now() -> datetime:
    """
    Get the current timezone-aware UTC timestamp.
    """
    return datetime.now(timezone.utc)
