"""
Best-effort page title lookup.

One GET per bookmark, no retries. Any failure is reported as a
TitleFetchError for that bookmark only.
"""

import time
from typing import Callable, Optional

import requests
from bs4 import BeautifulSoup

from .config import MAX_TITLE_BYTES, TITLE_TIMEOUT_MS
from .errors import TitleFetchError
from .logger import StructuredLogger, get_logger

HTML_CONTENT_TYPES = ("text/html", "application/xhtml+xml")
CHUNK_SIZE = 16 * 1024

_PENDING = object()


class Completion:
    """One-shot result slot: the first outcome settled wins, later ones are ignored."""

    def __init__(self):
        self._value = _PENDING
        self._error: Optional[BaseException] = None

    @property
    def done(self) -> bool:
        return self._value is not _PENDING or self._error is not None

    def succeed(self, value) -> bool:
        if self.done:
            return False
        self._value = value
        return True

    def fail(self, error: BaseException) -> bool:
        if self.done:
            return False
        self._error = error
        return True

    def result(self):
        if self._error is not None:
            raise self._error
        if self._value is _PENDING:
            raise RuntimeError("Completion read before it was settled")
        return self._value


def extract_title(html, from_encoding: Optional[str] = None) -> Optional[str]:
    """Text of the first <title> element, whitespace collapsed, or None."""
    soup = BeautifulSoup(html, "html.parser", from_encoding=from_encoding)
    t = soup.find("title")
    if t is None:
        return None
    text = " ".join(t.get_text().split())
    return text or None


def _is_html(content_type: str) -> bool:
    if not content_type:
        # No header: let the parser decide
        return True
    mime = content_type.split(";", 1)[0].strip().lower()
    return mime in HTML_CONTENT_TYPES


def _declared_charset(content_type: str) -> Optional[str]:
    for part in content_type.split(";")[1:]:
        key, _, value = part.strip().partition("=")
        if key.lower() == "charset" and value:
            return value.strip("\"' ")
    return None


class TitleResolver:
    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout_ms: int = TITLE_TIMEOUT_MS,
        max_bytes: int = MAX_TITLE_BYTES,
        logger: Optional[StructuredLogger] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.session = session or requests.Session()
        self.timeout = timeout_ms / 1000.0
        self.max_bytes = max_bytes
        self.logger = logger or get_logger()
        self.clock = clock

    def resolve_title(self, url: str) -> Optional[str]:
        """Fetch `url` and return its <title> text.

        Returns:
            The title, or None if the page has no usable <title>

        Raises:
            TitleFetchError: On transport error, timeout, HTTP error status
                or a non-HTML response
        """
        done = Completion()
        resp = None
        # requests applies the timeout per socket read; this bounds the whole fetch
        deadline = self.clock() + self.timeout
        try:
            resp = self.session.get(
                url,
                headers={"Accept": "text/html"},
                timeout=self.timeout,
                stream=True,
            )
            content_type = resp.headers.get("Content-Type", "")
            if resp.status_code >= 400:
                raise TitleFetchError(url, f"Error fetching {url}: server responded {resp.status_code}.")
            if not _is_html(content_type):
                raise TitleFetchError(url, f"Error fetching {url}: not HTML ({content_type}).")
            body = self._read_capped(url, resp, deadline)
            done.succeed(extract_title(body, _declared_charset(content_type)))
        except TitleFetchError as e:
            done.fail(e)
        except requests.exceptions.Timeout:
            done.fail(TitleFetchError(url, f"Error fetching {url}: timed out after {self.timeout:g}s."))
        except requests.exceptions.RequestException as e:
            done.fail(TitleFetchError(url, f"Error fetching {url}: {e}"))
        finally:
            if resp is not None:
                try:
                    resp.close()
                except (requests.exceptions.RequestException, OSError) as e:
                    # Ignored when the fetch already settled
                    done.fail(TitleFetchError(url, f"Error fetching {url}: {e}"))
        return done.result()

    def _read_capped(self, url: str, resp: requests.Response, deadline: float) -> bytes:
        chunks = []
        size = 0
        for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
            if self.clock() > deadline:
                raise TitleFetchError(url, f"Error fetching {url}: timed out after {self.timeout:g}s.")
            chunks.append(chunk)
            size += len(chunk)
            if size >= self.max_bytes:
                self.logger.debug("Page body truncated", url=resp.url, bytes=size)
                break
        return b"".join(chunks)
