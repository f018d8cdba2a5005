"""Tests for log masking."""

import logging

from common.logging_config import SensitiveDataFilter, setup_logging


def make_record(msg, args=None):
    return logging.LogRecord("filebot", logging.INFO, __file__, 1, msg, args, None)


def test_bot_token_in_url_is_masked():
    record = make_record("POST https://api.telegram.org/bot123456:AAH-secret_x/sendVideo")

    SensitiveDataFilter().filter(record)

    assert "AAH-secret_x" not in record.msg
    assert "/bot***MASKED***/sendVideo" in record.msg


def test_bearer_value_is_masked_in_args():
    record = make_record("header %s", ("Bearer s3cret",))

    SensitiveDataFilter().filter(record)

    assert record.args == ("Bearer ***MASKED***",)


def test_setup_logging_installs_one_handler():
    setup_logging("filebot")
    setup_logging("filebot")

    marked = [h for h in logging.getLogger().handlers if getattr(h, "_filebot_handler", False)]
    assert len(marked) == 1
