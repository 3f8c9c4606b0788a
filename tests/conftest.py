"""Test fixtures for the ICR vulnerability scan action."""

import datetime
import json
from collections.abc import Callable
from pathlib import Path

import pytest

from icr_action.config import Config, PolicyConfig, PollConfig
from icr_action.services.poller import ScanPoller
from icr_action.storage.output import MemoryOutputSink
from icr_action.storage.preloaded import PreloadedClient

IMAGE = "us.icr.io/sqre/sciplat-lab:w_2025_40"


def va_response(status: str | None) -> str:
    """Render ``ibmcloud cr va --output json`` output with this status."""
    return json.dumps(
        [
            {
                "id": "us.icr.io/sqre/sciplat-lab@sha256:0f3c7e1d",
                "scan_time": 1760780412,
                "status": status,
                "vulnerabilities": [],
                "configuration_issues": [],
            }
        ],
        indent=2,
    )


class RecordingSleep:
    """Stand-in for time.sleep that only remembers what it was asked."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def support_dir() -> Path:
    return Path(__file__).parent / "support"


@pytest.fixture
def config() -> Config:
    """Config with the production polling budget."""
    return Config(
        poll=PollConfig(
            max_attempts=30, interval=datetime.timedelta(seconds=10)
        ),
        policy=PolicyConfig(fail_on_vulnerability=True),
        debug=True,
    )


@pytest.fixture
def sink() -> MemoryOutputSink:
    return MemoryOutputSink()


@pytest.fixture
def sleeper() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def make_poller(
    config: Config, sink: MemoryOutputSink, sleeper: RecordingSleep
) -> Callable[..., tuple[ScanPoller, PreloadedClient]]:
    """Build a poller that replays the given responses."""

    def _make(
        responses: list[str], cfg: Config | None = None, trigger: str = ""
    ) -> tuple[ScanPoller, PreloadedClient]:
        cfg = cfg or config
        client = PreloadedClient(
            cfg=cfg, responses=responses, trigger=trigger
        )
        poller = ScanPoller(cfg=cfg, client=client, sink=sink, sleep=sleeper)
        return poller, client

    return _make
