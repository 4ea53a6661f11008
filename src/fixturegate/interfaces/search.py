"""Interface for the remote entity search index.

Newly created entities show up in search only after the remote index catches
up, so callers poll this service rather than expect read-after-write.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass, field
from enum import Enum


class EntityType(Enum):
    """Entity types understood by the search service."""

    APPLICATION = "APPLICATION"
    DASHBOARD = "DASHBOARD"
    HOST = "HOST"
    MONITOR = "MONITOR"


class EntityDomain(Enum):
    """Entity domains understood by the search service."""

    APM = "APM"
    BROWSER = "BROWSER"
    INFRA = "INFRA"
    MOBILE = "MOBILE"
    SYNTH = "SYNTH"


@dataclass(frozen=True)
class SearchQuery:
    """Ask whether an entity exists, and whether it is unique."""

    name: str
    type: EntityType = EntityType.APPLICATION
    domain: EntityDomain = EntityDomain.APM

    def to_query_string(self) -> str:
        """Render the query in the search service's filter syntax."""
        name = self.name.replace("\\", "\\\\").replace("'", "\\'")
        return (
            f"name = '{name}' AND type = '{self.type.value}' "
            f"AND domain = '{self.domain.value}'"
        )

    def __str__(self) -> str:
        return f"{self.domain.value}/{self.type.value} {self.name!r}"


@dataclass(frozen=True)
class EntitySummary:
    """A single search hit."""

    guid: str
    name: str


@dataclass(frozen=True)
class SearchResult:
    """Search response: the total count and the matches returned."""

    count: int
    matches: tuple[EntitySummary, ...] = field(default_factory=tuple)


class EntitySearch(abc.ABC):
    """Contract for the remote entity search service."""

    @abc.abstractmethod
    def search(self, query: SearchQuery, timeout: float) -> SearchResult:
        """Run a search against the remote index.

        Args:
            query: What to look for.
            timeout: Per-request timeout in seconds.

        Returns:
            SearchResult: Total count and matching entities.

        Raises:
            RemoteServiceError: If the search request fails.
        """
