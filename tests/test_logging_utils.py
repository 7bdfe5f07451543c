"""
Tests for API key redaction in log records.
"""
import logging

from luarmor_updater.logging_utils import TokenRedactionFilter


def make_record(msg, args=()):
    return logging.LogRecord("test", logging.INFO, __file__, 1, msg, args, None)


def test_redacts_token_in_message():
    record = make_record("GET /v3/keys/secret-key/details")
    TokenRedactionFilter("secret-key").filter(record)
    assert record.getMessage() == "GET /v3/keys/***REDACTED***/details"


def test_redacts_token_in_args():
    record = make_record("HTTP Request: %s %s", ("GET", "https://x/keys/secret-key/details"))
    TokenRedactionFilter("secret-key").filter(record)
    assert "secret-key" not in record.getMessage()
    assert record.args[0] == "GET"


def test_leaves_other_records_alone():
    record = make_record("Uploading %d characters", (42,))
    assert TokenRedactionFilter("secret-key").filter(record) is True
    assert record.args == (42,)
