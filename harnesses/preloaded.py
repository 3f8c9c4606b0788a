"""Interactive harness; replays recorded scan responses with no waiting."""

import datetime
from pathlib import Path

from icr_action.config import Config, PollConfig
from icr_action.factory import Factory

input_file = (
    Path(__file__).parent.parent
    / "tests"
    / "support"
    / "va.incomplete-then-ok.json"
)

cfg = Config(
    debug=True,
    input_file=input_file,
    poll=PollConfig(interval=datetime.timedelta(seconds=0)),
)
poller = Factory(cfg).create_scan_poller()
result = poller.run("us.icr.io/sqre/sciplat-lab:w_2025_40", cfg.policy)

print("\nScan result is in variable 'result'")
print("-----------------------------------\n")
