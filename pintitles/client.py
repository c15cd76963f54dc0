"""Thin Pinboard v1 API client: listing pages and re-adding posts."""

from typing import Dict, List, Optional

import requests

from .config import Settings
from .errors import FatalTransportError
from .logger import StructuredLogger, get_logger
from .models import Record, validate_post

API_TIMEOUT = 30


class PinboardClient:
    """One session against the Pinboard API.

    Every call issues exactly one HTTP request; nothing is retried here.
    """

    def __init__(
        self,
        settings: Settings,
        session: Optional[requests.Session] = None,
        logger: Optional[StructuredLogger] = None,
    ):
        self.settings = settings
        self.session = session or requests.Session()
        self.logger = logger or get_logger()

    def _url(self, method: str) -> str:
        return f"{self.settings.api_base}/{method}"

    def _params(self, **params) -> Dict[str, object]:
        return {"auth_token": self.settings.token, **params}

    def fetch_page(self, offset: int, page_size: int) -> List[Record]:
        """Fetch one page of posts starting at `offset`.

        Raises:
            FatalTransportError: On transport failure, non-200 status or a
                body that is not a JSON array of posts
        """
        url = self._url("posts/all")
        params = self._params(results=page_size, start=offset, format="json")
        self.logger.record_listing_request()
        self.logger.debug("Requesting posts", start=offset, results=page_size)
        try:
            resp = self.session.get(url, params=params, timeout=API_TIMEOUT)
            resp.raise_for_status()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else "HTTPError"
            raise FatalTransportError(f"Pinboard listing failed ({status}) at start={offset}") from e
        except requests.exceptions.Timeout as e:
            raise FatalTransportError(f"Pinboard listing timed out at start={offset}") from e
        except requests.exceptions.RequestException as e:
            raise FatalTransportError(f"Pinboard listing request error: {e}") from e

        try:
            data = resp.json()
        except ValueError as e:
            raise FatalTransportError(f"Pinboard listing at start={offset} is not JSON") from e
        if not isinstance(data, list):
            raise FatalTransportError(
                f"Pinboard listing at start={offset} is not a JSON array"
            )

        records = []
        for i, post in enumerate(data):
            errors = validate_post(post)
            if errors:
                raise FatalTransportError(
                    f"Malformed post #{i} at start={offset}: {'; '.join(errors)}"
                )
            records.append(Record.from_api(post))
        return records

    def add_post(self, params: Dict[str, str]) -> requests.Response:
        """Send /v1/posts/add and hand back the raw response.

        Transport exceptions propagate; status handling is left to the caller.
        """
        return self.session.get(
            self._url("posts/add"),
            params=self._params(format="json", **params),
            timeout=API_TIMEOUT,
        )

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
