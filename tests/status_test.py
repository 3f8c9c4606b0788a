"""Tests for scan status parsing."""

import pytest
from conftest import va_response

from icr_action.models.scan import ScanAttempt, ScanStatus, parse_scan_status


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (va_response("OK"), "OK"),
        (va_response("INCOMPLETE"), "INCOMPLETE"),
        (va_response("BOGUS"), "BOGUS"),
        ('[{"status": "FAIL"}, {"status": "OK"}]', "FAIL"),
        ("", None),
        ("not json at all", None),
        ("FAILED\nThe scan results are not yet available.\n", None),
        ("[]", None),
        ('{"status": "OK"}', None),
        ('["OK"]', None),
        ("[{}]", None),
        (va_response(None), None),
        ('[{"status": ""}]', None),
        ('[{"status": 3}]', None),
    ],
)
def test_parse_scan_status(raw: str, expected: str | None) -> None:
    assert parse_scan_status(raw) == expected


def test_from_raw() -> None:
    assert ScanStatus.from_raw("OK") is ScanStatus.OK
    assert ScanStatus.from_raw("UNSCANNED") is ScanStatus.UNSCANNED
    assert ScanStatus.from_raw("BOGUS") == "BOGUS"
    # The registry never reports a timeout; only the poller does
    assert ScanStatus.from_raw("timeout") == "timeout"


@pytest.mark.parametrize(
    ("status", "terminal"),
    [
        ("OK", True),
        ("FAIL", True),
        ("BOGUS", True),
        ("INCOMPLETE", False),
        ("UNSCANNED", False),
        (None, False),
    ],
)
def test_attempt_terminal(status: str | None, terminal: bool) -> None:
    attempt = ScanAttempt(number=1, raw="", status=status)
    assert attempt.terminal is terminal
    assert attempt.timestamp.tzinfo is not None
