"""httpx helpers shared by the REST and GraphQL adapters.

Centralizes timeouts, headers and the translation of transport and HTTP status
failures into the `RemoteServiceError` hierarchy, so every adapter behaves the
same way and tests can swap in an `httpx.MockTransport`.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from fixturegate import __version__
from fixturegate.config import HTTP_TIMEOUT
from fixturegate.interfaces.errors import RemoteRequestError, RemoteResponseError

logger = logging.getLogger(__name__)

USER_AGENT = f"fixturegate/{__version__}"  # pragma: no mutate


def build_client(
    api_key: str,
    *,
    base_url: str = "",
    timeout: float = HTTP_TIMEOUT,
    transport: httpx.BaseTransport | None = None,
    extra_headers: dict[str, str] | None = None,
) -> httpx.Client:
    """Create an `httpx.Client` authenticated with a user API key.

    Args:
        api_key: User API key, sent in the ``Api-Key`` header.
        base_url: Base URL prepended to relative request paths.
        timeout: Default per-request timeout, in seconds.
        transport: Optional transport override (e.g. `httpx.MockTransport`).
        extra_headers: Additional headers for every request.

    Returns:
        httpx.Client: A configured client; the caller owns and closes it.
    """
    headers: dict[str, str] = {
        "Api-Key": api_key,
        "User-Agent": USER_AGENT,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.Client(
        base_url=base_url,
        timeout=httpx.Timeout(timeout),
        headers=headers,
        transport=transport,
        follow_redirects=True,
    )


def send(client: httpx.Client, method: str, url: str, **kwargs: Any) -> httpx.Response:
    """Send a request and raise `RemoteServiceError` subclasses on failure.

    Raises:
        RemoteRequestError: If the request could not be completed.
        RemoteResponseError: If the response status is not 2xx.
    """
    try:
        response = client.request(method, url, **kwargs)
    except httpx.HTTPError as e:
        raise RemoteRequestError(f"{method} {url} failed: {e}") from e

    logger.debug("%s %s -> %s", method, response.request.url.path, response.status_code)
    if response.is_error:
        raise RemoteResponseError(
            f"{method} {response.request.url.path} returned "
            f"{response.status_code}: {_error_detail(response)}",
            status_code=response.status_code,
        )
    return response


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.reason_phrase or response.text[:200]
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        return str(body["error"].get("title") or body["error"])
    return response.reason_phrase or str(body)[:200]
