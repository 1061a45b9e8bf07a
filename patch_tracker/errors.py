# patch_tracker/errors.py
from __future__ import annotations


class PatchTrackerError(Exception):
    pass


class ConfigError(PatchTrackerError):
    pass


class FetchFailure(PatchTrackerError):
    """Network error or non-success status. Never escapes the fetcher."""


class ExtractionError(PatchTrackerError):
    def __init__(self, message: str, *, raw: str = "") -> None:
        super().__init__(message)
        self.raw = raw or ""


class ExtractionServiceFailure(ExtractionError):
    """Call error, empty response or non-conforming JSON from the AI strategy."""


class ExtractionNotFound(ExtractionError):
    """The regex strategy found no version token."""


class StoreFailure(PatchTrackerError):
    """Catalog cannot be read or written. Fatal to a run."""
