"""Provides vulnerability scan polling for an image in the registry."""

import logging
import time
from collections.abc import Callable

import structlog

from ..config import Config, PolicyConfig
from ..exceptions import UsageError
from ..models.scan import (
    FailureReason,
    OutcomeKind,
    ScanAttempt,
    ScanOutcome,
    ScanResult,
    ScanStatus,
    parse_scan_status,
)
from ..storage.output import OutputSink
from ..storage.registry import RegistryClient


class ScanPoller:
    """Turn the registry's eventually-consistent scan status into a single
    terminal result.

    A scan is requested once, then its status is queried at a fixed
    interval until it is something other than INCOMPLETE or UNSCANNED, or
    until the attempt budget runs out.  The interval is fixed on purpose:
    scans are expected to finish within a known time, and the five-minute
    ceiling of the default budget is part of the action's documented
    behavior.

    Parameters
    ----------
    cfg
        Action configuration; supplies the polling budget and the default
        policy.
    client
        Registry client used to trigger and query the scan.
    sink
        Where the final ``status`` and ``result`` outputs are written.
    sleep
        Called with the interval in seconds between attempts.
    """

    def __init__(
        self,
        cfg: Config,
        client: RegistryClient,
        sink: OutputSink,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._debug = cfg.debug
        log_level = logging.DEBUG if self._debug else logging.INFO
        structlog.configure(
            wrapper_class=structlog.make_filtering_bound_logger(log_level)
        )
        self._logger = structlog.get_logger(__name__)

        self._client = client
        self._sink = sink
        self._sleep = sleep
        self._max_attempts = cfg.poll.max_attempts
        self._interval = cfg.poll.interval
        self._policy = cfg.policy

    def run(
        self, image: str, policy: PolicyConfig | None = None
    ) -> ScanResult:
        """Scan an image, wait for the result, classify and report it.

        Outputs are always written before this returns, so they are
        visible even when the caller then fails the pipeline.
        """
        if not image:
            raise UsageError("Image parameter is required")
        if policy is None:
            policy = self._policy

        self._logger.info(f"Scanning image: {image}")
        self._logger.info("Initiating vulnerability scan...")
        # Only the polling loop decides the outcome.
        self._client.trigger_scan(image)

        self._logger.info("Waiting for scan results...")
        last = self._poll(image)
        if last.terminal and last.status is not None:
            status = ScanStatus.from_raw(last.status)
            timed_out = False
        else:
            status = ScanStatus.TIMEOUT
            timed_out = True

        result = ScanResult(
            image=image,
            status=status,
            raw=last.raw,
            attempts=last.number,
            timed_out=timed_out,
            outcome=self.classify(status, policy),
        )
        self._log_outcome(result)
        self.report(result)
        return result

    def _poll(self, image: str) -> ScanAttempt:
        attempt = 0
        while attempt < self._max_attempts:
            attempt += 1
            self._logger.info(
                f"Checking scan status (attempt {attempt}/"
                f"{self._max_attempts})..."
            )
            raw = self._client.query_scan_status(image)
            current = ScanAttempt(
                number=attempt, raw=raw, status=parse_scan_status(raw)
            )
            self._logger.debug("Scan status response", raw=raw)
            if current.status is None:
                self._logger.info(
                    "Scan status not yet available or could not be parsed"
                )
            else:
                self._logger.info(f"Current scan status: {current.status}")
                if current.terminal:
                    self._logger.info("Scan completed successfully!")
                    return current
            if attempt == self._max_attempts:
                budget = self._interval * (self._max_attempts - 1)
                self._logger.warning(
                    "Scan did not complete within timeout period",
                    attempts=attempt,
                    waited=f"{budget.total_seconds():.0f}s",
                )
                return current
            self._sleep(self._interval.total_seconds())
        raise RuntimeError("Polling budget must allow at least one attempt")

    def classify(
        self, status: ScanStatus | str, policy: PolicyConfig
    ) -> ScanOutcome:
        """Decide how the pipeline should treat a final status."""
        match status:
            case ScanStatus.OK:
                return ScanOutcome(
                    OutcomeKind.SUCCESS,
                    "Scan completed with status: OK - No vulnerabilities "
                    "found",
                )
            case ScanStatus.WARN:
                return ScanOutcome(
                    OutcomeKind.WARNING,
                    "Scan completed with status: WARN - Warnings found",
                )
            case ScanStatus.UNSUPPORTED:
                return ScanOutcome(
                    OutcomeKind.SUCCESS,
                    "Scan completed with status: UNSUPPORTED - Image type "
                    "not supported for scanning",
                )
            case ScanStatus.FAIL if policy.fail_on_vulnerability:
                return ScanOutcome(
                    OutcomeKind.FATAL,
                    "Critical vulnerabilities found in image",
                    reason=FailureReason.POLICY,
                )
            case ScanStatus.FAIL:
                return ScanOutcome(
                    OutcomeKind.WARNING,
                    "Critical vulnerabilities found but build is allowed to "
                    "continue",
                )
            case ScanStatus.TIMEOUT:
                return ScanOutcome(
                    OutcomeKind.WARNING,
                    "Vulnerability scan timeout - results may be incomplete",
                )
            case _:
                value = (
                    status.value if isinstance(status, ScanStatus) else status
                )
                return ScanOutcome(
                    OutcomeKind.FATAL,
                    f"Unexpected scan status: {value}",
                    reason=FailureReason.INTEGRITY,
                )

    def _log_outcome(self, result: ScanResult) -> None:
        outcome = result.outcome
        match outcome.kind:
            case OutcomeKind.SUCCESS:
                self._logger.info(outcome.message, status=result.status_value)
            case OutcomeKind.WARNING:
                self._logger.warning(
                    outcome.message, status=result.status_value
                )
            case OutcomeKind.FATAL:
                self._logger.error(
                    outcome.message,
                    status=result.status_value,
                    reason=outcome.reason.value if outcome.reason else None,
                )

    def report(self, result: ScanResult) -> None:
        """Write the ``status`` and ``result`` outputs."""
        self._sink.set_output("status", result.status_value)
        self._sink.set_output("result", result.raw)
