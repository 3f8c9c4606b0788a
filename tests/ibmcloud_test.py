"""Tests for the ibmcloud CLI client, against stand-in executables."""

import datetime
from pathlib import Path

import pytest
from conftest import IMAGE, RecordingSleep

from icr_action.config import Config, PollConfig
from icr_action.models.scan import ScanStatus
from icr_action.services.poller import ScanPoller
from icr_action.storage.ibmcloud import IBMCloudClient
from icr_action.storage.output import MemoryOutputSink


def _fake_ibmcloud(tmp_path: Path, body: str) -> Path:
    script = tmp_path / "ibmcloud"
    script.write_text(f"#!/bin/sh\n{body}\n")
    script.chmod(0o755)
    return script


@pytest.fixture
def args_file(tmp_path: Path) -> Path:
    return tmp_path / "args"


def test_command_line(tmp_path: Path, args_file: Path) -> None:
    script = _fake_ibmcloud(
        tmp_path,
        f'echo "$@" > {args_file}\necho \'[{{"status": "OK"}}]\'',
    )
    client = IBMCloudClient(cfg=Config(ibmcloud_path=str(script)))
    output = client.query_scan_status(IMAGE)
    assert output == '[{"status": "OK"}]\n'
    assert args_file.read_text() == f"cr va {IMAGE} --output json\n"


def test_errors_become_output(tmp_path: Path) -> None:
    """Exit status is ignored and stderr is captured with stdout."""
    script = _fake_ibmcloud(
        tmp_path,
        "echo 'FAILED' >&2\necho 'Scan results not yet available.'\nexit 1",
    )
    client = IBMCloudClient(cfg=Config(ibmcloud_path=str(script)))
    assert client.trigger_scan(IMAGE) == (
        "FAILED\nScan results not yet available.\n"
    )
    assert client.query_scan_status(IMAGE) == (
        "FAILED\nScan results not yet available.\n"
    )


def test_missing_executable(tmp_path: Path) -> None:
    missing = tmp_path / "no-such-ibmcloud"
    client = IBMCloudClient(cfg=Config(ibmcloud_path=str(missing)))
    assert "Could not run" in client.trigger_scan(IMAGE)
    assert "Could not run" in client.query_scan_status(IMAGE)


def test_command_timeout(tmp_path: Path) -> None:
    script = _fake_ibmcloud(tmp_path, "exec sleep 5")
    cfg = Config(
        ibmcloud_path=str(script),
        poll=PollConfig(command_timeout=datetime.timedelta(seconds=1)),
    )
    client = IBMCloudClient(cfg=cfg)
    assert "did not finish within 1s" in client.query_scan_status(IMAGE)


def test_undecodable_output(
    tmp_path: Path, sink: MemoryOutputSink, sleeper: RecordingSleep
) -> None:
    """Bytes that are not UTF-8 are replaced, not raised."""
    script = _fake_ibmcloud(tmp_path, r"printf 'FAILED \377\376\n'")
    cfg = Config(ibmcloud_path=str(script), poll=PollConfig(max_attempts=2))
    client = IBMCloudClient(cfg=cfg)
    assert client.query_scan_status(IMAGE) == "FAILED \ufffd\ufffd\n"

    poller = ScanPoller(cfg=cfg, client=client, sink=sink, sleep=sleeper)
    result = poller.run(IMAGE)
    assert result.status == ScanStatus.TIMEOUT
    assert sink.outputs == {
        "status": "timeout",
        "result": "FAILED \ufffd\ufffd\n",
    }
