"""FIXTUREGATE Interfaces Package

Abstract contracts and value objects for the remote collaborators consumed by
the service layer.
"""

from .agent import AgentHandle, AgentLauncher, ApplicationDescriptor
from .errors import RemoteRequestError, RemoteResponseError, RemoteServiceError
from .inventory import ApplicationInventory, ApplicationRecord
from .search import (
    EntityDomain,
    EntitySearch,
    EntitySummary,
    EntityType,
    SearchQuery,
    SearchResult,
)

__all__ = [
    "AgentHandle",
    "AgentLauncher",
    "ApplicationDescriptor",
    "ApplicationInventory",
    "ApplicationRecord",
    "EntityDomain",
    "EntitySearch",
    "EntitySummary",
    "EntityType",
    "RemoteRequestError",
    "RemoteResponseError",
    "RemoteServiceError",
    "SearchQuery",
    "SearchResult",
]
