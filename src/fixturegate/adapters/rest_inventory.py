"""Application inventory backed by the REST v2 API.

Lists applications with ``GET /applications.json?filter[name]=...``, following
``Link: <...>; rel="next"`` pagination, and deletes them with
``DELETE /applications/{id}.json``. The remote name filter matches anywhere in
the name, so results are narrowed to true prefix matches locally.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import httpx

from fixturegate.interfaces.errors import RemoteResponseError
from fixturegate.interfaces.inventory import ApplicationInventory, ApplicationRecord

from .http import send

logger = logging.getLogger(__name__)

MAX_PAGES = 100


class RestApplicationInventory(ApplicationInventory):
    """REST v2 implementation of `ApplicationInventory`.

    Args:
        client: httpx client whose base URL points at the REST v2 API.
    """

    def __init__(self, client: httpx.Client) -> None:
        self._client = client

    def list_applications(self, name_prefix: str) -> Sequence[ApplicationRecord]:
        records: list[ApplicationRecord] = []
        url: str | None = "/applications.json"
        params: dict[str, str] | None = {"filter[name]": name_prefix}
        pages = 0

        while url is not None:
            if pages >= MAX_PAGES:
                logger.warning("Stopped listing applications after %d pages", pages)
                break
            response = send(self._client, "GET", url, params=params)
            records.extend(_parse_applications(response))
            url = response.links.get("next", {}).get("url")
            params = None  # the next link already carries the query
            pages += 1

        return [r for r in records if r.name.startswith(name_prefix)]

    def delete_application(self, application_id: int) -> None:
        send(self._client, "DELETE", f"/applications/{application_id}.json")


def _parse_applications(response: httpx.Response) -> list[ApplicationRecord]:
    try:
        body: Any = response.json()
        return [
            ApplicationRecord(
                id=int(app["id"]),
                name=str(app["name"]),
                reporting=bool(app.get("reporting", False)),
            )
            for app in body["applications"]
        ]
    except (ValueError, KeyError, TypeError) as e:
        raise RemoteResponseError(
            f"Malformed applications response: {e}",
            status_code=response.status_code,
        ) from e
