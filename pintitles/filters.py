from typing import Iterable, Tuple
from urllib.parse import urlparse

from .config import EXCLUDED_SUFFIXES
from .models import NO_TITLE_PLACEHOLDER, Record
from .pagination import RunState


def has_placeholder_title(record: Record) -> bool:
    """True when the bookmark's title is its URL or Pinboard's placeholder."""
    return record.description == record.href or record.description == NO_TITLE_PLACEHOLDER


def has_excluded_suffix(href: str, suffixes: Iterable[str] = EXCLUDED_SUFFIXES) -> bool:
    # Query string and fragment don't change what the resource is
    try:
        path = urlparse(href).path
    except ValueError:
        # Unparseable (e.g. an unclosed IPv6 bracket); strip by hand
        path = href.split("#", 1)[0].split("?", 1)[0]
    path = path.lower()
    return any(path.endswith(s.lower()) for s in suffixes)


class RecordFilter:
    """Decides which records need a title, and enforces the global limit."""

    def __init__(self, excluded_suffixes: Tuple[str, ...] = EXCLUDED_SUFFIXES):
        self.excluded_suffixes = excluded_suffixes

    def should_process(self, record: Record, state: RunState) -> bool:
        state.total_processed += 1
        if state.limit is not None:
            if state.total_processed >= state.limit:
                # Stop pagination as soon as the limit is used up
                state.halted = True
            if state.total_processed > state.limit:
                return False
        if not has_placeholder_title(record):
            return False
        return not has_excluded_suffix(record.href, self.excluded_suffixes)
