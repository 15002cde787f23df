"""Exception types raised by the recognition and receipt pipelines."""

from __future__ import annotations

INVALID_FILE = "INVALID_FILE"


class ImageValidationError(ValueError):
    """The uploaded file cannot be processed (wrong type or too large).

    This is the only error that escapes the pipelines; the message is meant
    to be shown to the user as-is.
    """

    def __init__(self, message: str, code: str = INVALID_FILE) -> None:
        super().__init__(message)
        self.code = code


class ProviderError(RuntimeError):
    """A recognition or OCR provider reported an error or sent garbage."""

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider
