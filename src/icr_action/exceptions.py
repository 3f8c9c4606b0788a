"""Exceptions for the ICR vulnerability scan action."""

__all__ = ["ScanFailedError", "UsageError"]


class UsageError(ValueError):
    """Required input was not supplied."""


class ScanFailedError(RuntimeError):
    """The scan finished with an outcome that must halt the pipeline."""

    def __init__(self, image: str, message: str) -> None:
        super().__init__(f"Scan of {image} failed: {message}")
        self.image = image
        self.message = message
