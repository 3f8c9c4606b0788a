"""Registry client for IBM Cloud Container Registry, via the ibmcloud CLI."""

import subprocess

from ..config import Config
from .registry import RegistryClient


class IBMCloudClient(RegistryClient):
    """Drive Vulnerability Advisor through ``ibmcloud cr va``.

    The same command both starts a scan and reports on it; it is run
    with ``--output json`` so the report can be parsed.
    """

    def __init__(self, cfg: Config) -> None:
        super()._extract_config(cfg)
        self._ibmcloud = cfg.ibmcloud_path

    def _va_command(self, image: str) -> list[str]:
        return [self._ibmcloud, "cr", "va", image, "--output", "json"]

    def _run(self, image: str) -> tuple[int | None, str]:
        cmd = self._va_command(image)
        self._logger.debug(f"Running {' '.join(cmd)}")
        try:
            proc = subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
                timeout=self._command_timeout.total_seconds(),
            )
        except subprocess.TimeoutExpired:
            msg = (
                f"{self._ibmcloud} did not finish within "
                f"{self._command_timeout.total_seconds():.0f}s"
            )
            self._logger.debug(msg, image=image)
            return None, msg
        except OSError as e:
            msg = f"Could not run {self._ibmcloud}: {e}"
            self._logger.debug(msg, image=image)
            return None, msg
        return proc.returncode, proc.stdout or ""

    def trigger_scan(self, image: str) -> str:
        rc, output = self._run(image)
        if rc != 0:
            self._logger.debug(
                "Scan trigger returned an error; ignoring",
                image=image,
                returncode=rc,
            )
        return output

    def query_scan_status(self, image: str) -> str:
        rc, output = self._run(image)
        self._logger.debug(
            "Scan status query finished", image=image, returncode=rc
        )
        return output
