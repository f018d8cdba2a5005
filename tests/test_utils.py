"""Unit tests for keyword and command parsing helpers."""

import pytest

from filebot.config import parse_admin_ids
from filebot.utils import parse_command, parse_keywords


class TestParseKeywords:
    @pytest.mark.parametrize("text", ["", "   ", ",, ,", None])
    def test_blank_input_yields_no_keywords(self, text):
        assert parse_keywords(text) == frozenset()

    def test_caption_is_split_trimmed_and_lowercased(self):
        assert parse_keywords("war, Action ") == frozenset({"war", "action"})

    def test_mixed_separators_and_duplicates(self):
        assert parse_keywords("Avatar\tmovie,,AVATAR\n2009") == frozenset({"avatar", "movie", "2009"})


class TestParseCommand:
    def test_command_with_argument(self):
        assert parse_command("/delete abc123") == ("delete", "abc123")

    def test_bot_suffix_is_stripped(self):
        assert parse_command("/Start@FileSearchBot") == ("start", "")

    def test_argument_keeps_inner_spaces(self):
        assert parse_command("/find  latest movie ") == ("find", "latest movie")


class TestParseAdminIds:
    def test_trims_and_drops_empties(self):
        assert parse_admin_ids(" 1001, 1002,,") == frozenset({"1001", "1002"})

    def test_empty_string(self):
        assert parse_admin_ids("") == frozenset()
