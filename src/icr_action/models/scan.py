"""Models for vulnerability scan attempts and their results."""

import datetime
import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from safir.datetime import current_datetime

from ..exceptions import ScanFailedError


class ScanStatus(Enum):
    """Status values reported by the Vulnerability Advisor.

    ``TIMEOUT`` is never reported by the registry; the poller produces it
    when the attempt budget runs out before a terminal status is seen.
    """

    OK = "OK"
    WARN = "WARN"
    UNSUPPORTED = "UNSUPPORTED"
    FAIL = "FAIL"
    INCOMPLETE = "INCOMPLETE"
    UNSCANNED = "UNSCANNED"
    TIMEOUT = "timeout"

    @classmethod
    def from_raw(cls, raw: str) -> "ScanStatus | str":
        """Return the matching ScanStatus, or the raw string if there is
        none.
        """
        for status in cls:
            if status is not cls.TIMEOUT and status.value == raw:
                return status
        return raw


NONTERMINAL_STATUSES = frozenset(
    {ScanStatus.INCOMPLETE.value, ScanStatus.UNSCANNED.value}
)


def parse_scan_status(raw: str) -> str | None:
    """Extract the top-level status from ``ibmcloud cr va`` JSON output.

    The output should be a JSON array whose first element has a string
    ``status`` field.  Anything else (CLI error text, an empty array, a
    null status) yields ``None`` rather than an exception.
    """
    try:
        doc: Any = json.loads(raw)
    except (TypeError, ValueError):
        return None
    if not isinstance(doc, list) or not doc:
        return None
    first = doc[0]
    if not isinstance(first, dict):
        return None
    status = first.get("status")
    if not isinstance(status, str) or not status:
        return None
    return status


@dataclass
class ScanAttempt:
    """One query of the scan status."""

    number: int
    raw: str
    status: str | None = None
    timestamp: datetime.datetime = field(default_factory=current_datetime)

    @property
    def terminal(self) -> bool:
        return (
            self.status is not None
            and self.status not in NONTERMINAL_STATUSES
        )


class OutcomeKind(Enum):
    """How the calling pipeline should treat a scan result."""

    SUCCESS = "success"
    WARNING = "warning"
    FATAL = "fatal"


class FailureReason(Enum):
    """Why a scan outcome is fatal."""

    POLICY = "policy"
    INTEGRITY = "integrity"


@dataclass(frozen=True)
class ScanOutcome:
    """Classification of a finished poll cycle."""

    kind: OutcomeKind
    message: str
    reason: FailureReason | None = None

    @property
    def fatal(self) -> bool:
        return self.kind == OutcomeKind.FATAL


@dataclass(frozen=True)
class ScanResult:
    """Final artifact of one poll cycle.

    ``timed_out`` is set if and only if the attempt budget was exhausted
    without a terminal status, in which case ``status`` is
    ``ScanStatus.TIMEOUT``.  ``raw`` is the verbatim text of the last
    query.
    """

    image: str
    status: ScanStatus | str
    raw: str
    attempts: int
    timed_out: bool
    outcome: ScanOutcome

    @property
    def status_value(self) -> str:
        """Status as written to the workflow output."""
        if isinstance(self.status, ScanStatus):
            return self.status.value
        return self.status

    def raise_for_outcome(self) -> None:
        """Raise ScanFailedError if the outcome is fatal."""
        if self.outcome.fatal:
            raise ScanFailedError(self.image, self.outcome.message)
