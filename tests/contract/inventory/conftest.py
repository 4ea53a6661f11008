"""Pytest fixtures for application inventory contract tests.

Provided fixtures
-----------------
- **backend**: Parametrized factory returning a fresh `InventoryBackend`: an
  inventory implementation plus a way to seed the remote side with records.
  Supports `"memory"` (`InMemoryInventory`) and `"rest"`
  (`RestApplicationInventory` talking to a fake REST v2 server through an
  `httpx.MockTransport`).
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass

import httpx
import pytest

from fixturegate.adapters.http import build_client
from fixturegate.adapters.memory import InMemoryInventory
from fixturegate.adapters.rest_inventory import RestApplicationInventory
from fixturegate.interfaces.inventory import ApplicationInventory, ApplicationRecord

REST_URL = "https://api.newrelic.com/v2"
PAGE_SIZE = 2

_APP_PATH = re.compile(r"^/v2/applications/(\d+)\.json$")


class FakeRestServer:
    """Just enough of the REST v2 applications API, served from a dict."""

    def __init__(self) -> None:
        self.records: dict[int, ApplicationRecord] = {}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.method == "GET" and request.url.path == "/v2/applications.json":
            return self._list(request)
        if request.method == "DELETE" and (m := _APP_PATH.match(request.url.path)):
            return self._delete(int(m.group(1)))
        return httpx.Response(404, json={"error": {"title": "Not found"}})

    def _list(self, request: httpx.Request) -> httpx.Response:
        name = request.url.params.get("filter[name]", "")
        page = int(request.url.params.get("page", "1"))
        matching = sorted(
            (r for r in self.records.values() if name in r.name), key=lambda r: r.id
        )
        chunk = matching[(page - 1) * PAGE_SIZE : page * PAGE_SIZE]
        headers = {}
        if page * PAGE_SIZE < len(matching):
            next_url = request.url.copy_merge_params({"page": str(page + 1)})
            headers["Link"] = f'<{next_url}>; rel="next"'
        body = {
            "applications": [
                {"id": r.id, "name": r.name, "reporting": r.reporting} for r in chunk
            ]
        }
        return httpx.Response(200, json=body, headers=headers)

    def _delete(self, app_id: int) -> httpx.Response:
        record = self.records.get(app_id)
        if record is None:
            return httpx.Response(404, json={"error": {"title": "Application not found"}})
        if record.reporting:
            return httpx.Response(
                422, json={"error": {"title": "Application is still reporting"}}
            )
        del self.records[app_id]
        return httpx.Response(200, json={"application": {"id": app_id}})


@dataclass
class InventoryBackend:
    """An inventory under test and a hook to seed the remote side."""

    inventory: ApplicationInventory
    seed: Callable[[Iterable[ApplicationRecord]], None]


@pytest.fixture(params=["memory", "rest"])
def backend(request: pytest.FixtureRequest) -> InventoryBackend:
    """Return a fresh inventory backend for the requested implementation."""

    match request.param:
        case "memory":
            memory = InMemoryInventory()

            def _seed_memory(records: Iterable[ApplicationRecord]) -> None:
                for record in records:
                    memory.add(record)

            return InventoryBackend(memory, _seed_memory)
        case "rest":
            server = FakeRestServer()
            client = build_client(
                "NRAK-CONTRACT", base_url=REST_URL, transport=httpx.MockTransport(server)
            )

            def _seed_rest(records: Iterable[ApplicationRecord]) -> None:
                server.records.update({r.id: r for r in records})

            return InventoryBackend(RestApplicationInventory(client), _seed_rest)
        case _:
            raise ValueError(f"unknown inventory type: {request.param}")
