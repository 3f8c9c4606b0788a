"""Registry client that replays recorded scan responses."""

import json
from pathlib import Path

from ..config import Config
from .registry import RegistryClient


class PreloadedClient(RegistryClient):
    """Replay ``ibmcloud cr va`` output captured earlier.

    The input file is a JSON object::

        {
          "trigger": "<text>",
          "responses": ["<text>", "<text>", ...]
        }

    Each status query returns the next response; once they run out, the
    last one is repeated.  Calls are recorded in ``triggered`` and
    ``queried`` so tests can count them.
    """

    def __init__(
        self,
        cfg: Config,
        responses: list[str] | None = None,
        trigger: str = "",
    ) -> None:
        super()._extract_config(cfg)
        self._trigger = trigger
        self._responses: list[str] = list(responses or [])
        self.triggered: list[str] = []
        self.queried: list[str] = []
        if cfg.input_file:
            self.load(cfg.input_file)

    def load(self, inputfile: Path) -> None:
        inp = json.loads(inputfile.read_text())
        responses = inp["responses"]
        if not isinstance(responses, list) or not responses:
            raise ValueError(f"No responses recorded in {inputfile}")
        self._trigger = inp.get("trigger", "")
        self._responses = [
            x if isinstance(x, str) else json.dumps(x) for x in responses
        ]
        count = len(self._responses)
        self._logger.debug(
            f"Loaded {count} response{'s' if count > 1 else ''}"
        )

    def trigger_scan(self, image: str) -> str:
        self.triggered.append(image)
        return self._trigger

    def query_scan_status(self, image: str) -> str:
        if not self._responses:
            raise RuntimeError("No scan responses loaded")
        idx = min(len(self.queried), len(self._responses) - 1)
        self.queried.append(image)
        return self._responses[idx]
