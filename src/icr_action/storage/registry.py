"""Abstract superclass for container registry scan clients."""

import logging
from abc import abstractmethod

import structlog

from ..config import Config


class RegistryClient:
    """Methods the scan poller expects from a registry client.

    Both return raw text and neither raises for transport problems: a CLI
    failure, a missing executable, or a hung command all come back as
    whatever text describes them.  The poller treats such text as
    "no status yet", so the polling loop is the only place where scan
    state is decided.
    """

    @abstractmethod
    def trigger_scan(self, image: str) -> str:
        """Request a vulnerability scan of an image."""
        ...

    @abstractmethod
    def query_scan_status(self, image: str) -> str:
        """Return the current scan report for an image, unparsed."""
        ...

    def __init__(self, cfg: Config) -> None:
        self._extract_config(cfg)

    def _extract_config(self, cfg: Config) -> None:
        self._debug = cfg.debug
        log_level = logging.DEBUG if self._debug else logging.INFO
        structlog.configure(
            wrapper_class=structlog.make_filtering_bound_logger(log_level)
        )
        self._logger = structlog.get_logger(__name__)
        self._command_timeout = cfg.poll.command_timeout
