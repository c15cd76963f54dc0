from typing import Optional

import requests

from .client import PinboardClient
from .errors import UpdateError
from .models import Record


class RecordUpdater:
    """Re-adds a bookmark with a new title and every other field unchanged."""

    def __init__(self, client: PinboardClient):
        self.client = client

    def build_params(self, record: Record, title: str) -> dict:
        params = record.with_title(title).to_add_params()
        params["replace"] = "yes"
        return params

    def submit_update(self, record: Record, title: str) -> None:
        """
        Raises:
            UpdateError: On transport failure, a non-200 status, or a
                result code other than "done"
        """
        url = record.href
        try:
            resp = self.client.add_post(self.build_params(record, title))
        except requests.exceptions.RequestException as e:
            raise UpdateError(url, f"Error updating {url}: {e}") from e

        if resp.status_code != 200:
            raise UpdateError(
                url,
                f"Error updating {url}: the server responded {resp.status_code}.",
                status_code=resp.status_code,
            )

        result_code = _result_code(resp)
        if result_code is not None and result_code != "done":
            raise UpdateError(
                url,
                f"Error updating {url}: {result_code}",
                status_code=resp.status_code,
            )


def _result_code(resp: requests.Response) -> Optional[str]:
    # format=json answers {"result_code": "done"}; anything else is treated as opaque
    try:
        data = resp.json()
    except ValueError:
        return None
    if isinstance(data, dict) and isinstance(data.get("result_code"), str):
        return data["result_code"]
    return None
