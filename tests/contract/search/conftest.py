"""Pytest fixtures for entity search contract tests.

Provided fixtures
-----------------
- **backend**: Parametrized factory returning a fresh `SearchBackend`: an
  `EntitySearch` implementation plus a way to index entities on the remote
  side. Supports `"memory"` (`InMemoryEntitySearch`) and `"nerdgraph"`
  (`NerdGraphEntitySearch` talking to a fake GraphQL endpoint through an
  `httpx.MockTransport`).
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable
from dataclasses import dataclass

import httpx
import pytest

from fixturegate.adapters.http import build_client
from fixturegate.adapters.memory import InMemoryEntitySearch
from fixturegate.adapters.nerdgraph_search import NerdGraphEntitySearch
from fixturegate.interfaces.search import EntitySearch, EntitySummary

GRAPHQL_URL = "https://api.newrelic.com/graphql"

_NAME_CLAUSE = re.compile(r"name = '((?:[^'\\]|\\.)*)'")


class FakeGraphQLServer:
    """Answers entitySearch queries with exact-name matches."""

    def __init__(self) -> None:
        self.entities: list[EntitySummary] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        match = _NAME_CLAUSE.search(payload["variables"]["query"])
        if match is None:
            return httpx.Response(200, json={"errors": [{"message": "bad query"}]})
        name = re.sub(r"\\(.)", r"\1", match.group(1))
        hits = [e for e in self.entities if e.name == name]
        search = {
            "count": len(hits),
            "results": {"entities": [{"guid": e.guid, "name": e.name} for e in hits]},
        }
        return httpx.Response(200, json={"data": {"actor": {"entitySearch": search}}})


@dataclass
class SearchBackend:
    """A search implementation under test and a hook to index entities."""

    search: EntitySearch
    index: Callable[[EntitySummary], None]


@pytest.fixture(params=["memory", "nerdgraph"])
def backend(request: pytest.FixtureRequest) -> SearchBackend:
    """Return a fresh search backend for the requested implementation."""

    match request.param:
        case "memory":
            memory = InMemoryEntitySearch()
            return SearchBackend(memory, memory.index)
        case "nerdgraph":
            server = FakeGraphQLServer()
            client = build_client(
                "NRAK-CONTRACT", transport=httpx.MockTransport(server)
            )
            return SearchBackend(
                NerdGraphEntitySearch(client, GRAPHQL_URL), server.entities.append
            )
        case _:
            raise ValueError(f"unknown search type: {request.param}")
