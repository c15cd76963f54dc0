"""
Error taxonomy for a title repair run.

Only FatalTransportError (and ConfigError at startup) ends a run.
ItemError subclasses describe a single bookmark that could not be
repaired; the runner logs them and moves on to the next record.
"""

from typing import Optional


class PinTitlesError(Exception):
    """Base class for all pintitles errors."""
    pass


class ConfigError(PinTitlesError):
    """Raised when required settings are missing or invalid."""
    pass


class FatalTransportError(PinTitlesError):
    """Raised when a listing request fails or returns an unusable body."""
    pass


class ItemError(PinTitlesError):
    """A per-bookmark failure. Never aborts the run."""

    kind = "item_error"

    def __init__(self, url: str, message: str):
        super().__init__(message)
        self.url = url


class TitleFetchError(ItemError):
    """The page could not be fetched, timed out, or was not HTML."""

    kind = "title_fetch_failed"


class AbsentTitleError(ItemError):
    """The page was fetched but carried no usable <title>."""

    kind = "title_absent"

    def __init__(self, url: str):
        super().__init__(url, f"No title found for {url}.")


class UpdateError(ItemError):
    """The service refused or never received the corrected bookmark."""

    kind = "update_failed"

    def __init__(self, url: str, message: str, status_code: Optional[int] = None):
        super().__init__(url, message)
        self.status_code = status_code
