"""Component factory."""

from __future__ import annotations

import time
from collections.abc import Callable

from .config import Config
from .services.poller import ScanPoller
from .storage.ibmcloud import IBMCloudClient
from .storage.output import GitHubOutputSink, LoggingOutputSink, OutputSink
from .storage.preloaded import PreloadedClient
from .storage.registry import RegistryClient


class Factory:
    """Build scan action components.

    Parameters
    ----------
    config
        Action configuration.
    """

    def __init__(self, config: Config) -> None:
        self._config = config

    def create_registry_client(self) -> RegistryClient:
        """Replay recorded responses if an input file is configured,
        otherwise talk to the real registry.
        """
        if self._config.input_file:
            return PreloadedClient(cfg=self._config)
        return IBMCloudClient(cfg=self._config)

    def create_output_sink(self) -> OutputSink:
        if self._config.github_output:
            return GitHubOutputSink(self._config.github_output)
        return LoggingOutputSink()

    def create_scan_poller(
        self, sleep: Callable[[float], None] = time.sleep
    ) -> ScanPoller:
        return ScanPoller(
            cfg=self._config,
            client=self.create_registry_client(),
            sink=self.create_output_sink(),
            sleep=sleep,
        )
