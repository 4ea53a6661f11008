"""Entity search backed by the GraphQL (NerdGraph) API."""

from __future__ import annotations

from typing import Any

import httpx

from fixturegate.interfaces.errors import RemoteResponseError
from fixturegate.interfaces.search import (
    EntitySearch,
    EntitySummary,
    SearchQuery,
    SearchResult,
)

from .http import send

ENTITY_SEARCH_QUERY = """
query($query: String) {
  actor {
    entitySearch(query: $query) {
      count
      results {
        entities {
          guid
          name
        }
      }
    }
  }
}
"""


class NerdGraphEntitySearch(EntitySearch):
    """GraphQL implementation of `EntitySearch`.

    Args:
        client: httpx client authenticated with a user API key.
        url: GraphQL endpoint URL.
    """

    def __init__(self, client: httpx.Client, url: str) -> None:
        self._client = client
        self._url = url

    def search(self, query: SearchQuery, timeout: float) -> SearchResult:
        response = send(
            self._client,
            "POST",
            self._url,
            json={
                "query": ENTITY_SEARCH_QUERY,
                "variables": {"query": query.to_query_string()},
            },
            timeout=timeout,
        )
        return _parse_result(response)


def _parse_result(response: httpx.Response) -> SearchResult:
    try:
        body: Any = response.json()
    except ValueError as e:
        raise RemoteResponseError(
            f"Malformed search response: {e}", status_code=response.status_code
        ) from e

    if not isinstance(body, dict):
        raise RemoteResponseError(
            "Malformed search response: expected a JSON object",
            status_code=response.status_code,
        )

    if errors := body.get("errors"):
        messages = "; ".join(
            str(err.get("message", err) if isinstance(err, dict) else err)
            for err in errors
        )
        raise RemoteResponseError(
            f"Entity search failed: {messages}", status_code=response.status_code
        )

    try:
        search = body["data"]["actor"]["entitySearch"]
        entities = search["results"]["entities"] or []
        return SearchResult(
            count=int(search["count"]),
            matches=tuple(
                EntitySummary(guid=str(e["guid"]), name=str(e["name"]))
                for e in entities
            ),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise RemoteResponseError(
            f"Malformed search response: {e}", status_code=response.status_code
        ) from e
