"""
Unit Tests for Secret Redaction

Tests the redaction module:
- Every occurrence of every secret is replaced
- Overlapping secrets collapse into one placeholder
- Idempotence
- Logging filter scrubs formatted records
"""

import logging
import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from harvest_notifier.notify.redaction import (
    REDACTED_PLACEHOLDER,
    RedactingFilter,
    SecretRedactor,
    install_redaction_filter,
    redact,
)

WEBHOOK = "https://discord.com/api/webhooks/123/tok3n"


class TestSecretRedactor:

    def test_replaces_every_occurrence(self):
        text = f"posting to {WEBHOOK} failed, retry {WEBHOOK}"
        result = SecretRedactor([WEBHOOK]).redact(text)
        assert WEBHOOK not in result
        assert result.count(REDACTED_PLACEHOLDER) == 2

    def test_multiple_secrets(self):
        result = redact("user=alice key=s3cr3t", ["alice", "s3cr3t"])
        assert result == "user=[REDACTED] key=[REDACTED]"

    def test_longest_secret_wins(self):
        result = redact(f"url: {WEBHOOK}", ["tok3n", WEBHOOK])
        assert result == "url: [REDACTED]"

    def test_overlapping_secrets_collapse(self):
        # "abcd" and "cdef" overlap on "cd"
        result = redact("xxabcdefyy", ["abcd", "cdef"])
        assert result == "xx[REDACTED]yy"

    def test_self_overlapping_occurrences(self):
        result = redact("aaaa", ["aaa"])
        assert result == "[REDACTED]"

    def test_empty_secret_set_is_noop(self):
        assert SecretRedactor([]).redact("nothing to hide") == "nothing to hide"

    def test_empty_secrets_ignored(self):
        redactor = SecretRedactor(["", "x", "x"])
        assert redactor.secret_count == 1

    def test_idempotent(self):
        redactor = SecretRedactor(["ab", "ba"])
        once = redactor.redact("abab-baba")
        assert redactor.redact(once) == once

    def test_secret_spanning_inserted_placeholder_is_absorbed(self):
        # the placeholder tail plus the following text spells "D]x"
        redactor = SecretRedactor(["D]x", "secret"])
        once = redactor.redact("secretx")
        assert once == "[REDACTED]"
        assert redactor.redact(once) == once

    def test_secret_spanning_existing_placeholder_is_absorbed(self):
        redactor = SecretRedactor(["D]tok"])
        assert redactor.redact("prefix [REDACTED]tok") == "prefix [REDACTED]"

    def test_secret_spanning_two_placeholders(self):
        redactor = SecretRedactor(["]["])
        assert redactor.redact("a [REDACTED][REDACTED] b") == "a [REDACTED] b"

    def test_secret_inside_placeholder_left_alone(self):
        redactor = SecretRedactor(["ACT"])
        assert redactor.redact("ACT [REDACTED]") == "[REDACTED] [REDACTED]"

    def test_custom_placeholder(self):
        assert SecretRedactor(["pw"], placeholder="<hidden>").redact("pw=pw") == "<hidden>=<hidden>"

    def test_empty_placeholder_rejected(self):
        with pytest.raises(ValueError):
            SecretRedactor(["x"], placeholder="")

    def test_self_overlapping_placeholder_rejected(self):
        with pytest.raises(ValueError):
            SecretRedactor(["x"], placeholder="***")


class TestRedactingFilter:

    def test_scrubs_formatted_message(self):
        record = logging.LogRecord(
            name="test", level=logging.ERROR, pathname=__file__, lineno=1,
            msg="request to %s failed", args=(WEBHOOK,), exc_info=None,
        )
        assert RedactingFilter(SecretRedactor([WEBHOOK])).filter(record) is True
        assert record.getMessage() == "request to [REDACTED] failed"

    def test_leaves_clean_records_alone(self):
        record = logging.LogRecord(
            name="test", level=logging.INFO, pathname=__file__, lineno=1,
            msg="count=%d", args=(3,), exc_info=None,
        )
        RedactingFilter(SecretRedactor([WEBHOOK])).filter(record)
        assert record.msg == "count=%d"
        assert record.args == (3,)

    def test_install_once_per_handler(self):
        root = logging.getLogger()
        handler = logging.NullHandler()
        root.addHandler(handler)
        try:
            install_redaction_filter(SecretRedactor([WEBHOOK]))
            install_redaction_filter(SecretRedactor([WEBHOOK]))
            filters = [f for f in handler.filters if isinstance(f, RedactingFilter)]
            assert len(filters) == 1
        finally:
            root.removeHandler(handler)
