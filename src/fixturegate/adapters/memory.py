"""In-memory implementations of the remote service interfaces.

These adapters stand in for the remote telemetry account in tests and demos.
They record every call they receive and accept injected failures, so tests can
assert on exactly which remote operations a component performed.

They are not thread-safe and do not persist anything.
"""

from __future__ import annotations

import itertools
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from fixturegate.interfaces.agent import (
    AgentHandle,
    AgentLauncher,
    ApplicationDescriptor,
)
from fixturegate.interfaces.errors import RemoteResponseError, RemoteServiceError
from fixturegate.interfaces.inventory import ApplicationInventory, ApplicationRecord
from fixturegate.interfaces.search import (
    EntitySearch,
    EntitySummary,
    SearchQuery,
    SearchResult,
)

_ids = itertools.count(1000)


class InMemoryInventory(ApplicationInventory):
    """In-memory application inventory.

    Args:
        records: Initial applications.
        list_error: If set, every `list_applications` call raises it.
        delete_errors: Errors raised by `delete_application`, keyed by id.
    """

    def __init__(
        self,
        records: Iterable[ApplicationRecord] = (),
        *,
        list_error: RemoteServiceError | None = None,
        delete_errors: Mapping[int, RemoteServiceError] | None = None,
    ) -> None:
        self._records: dict[int, ApplicationRecord] = {r.id: r for r in records}
        self.list_error = list_error
        self.delete_errors = dict(delete_errors or {})
        self.list_calls: list[str] = []
        self.delete_calls: list[int] = []

    @property
    def records(self) -> list[ApplicationRecord]:
        """Applications currently in the inventory."""
        return list(self._records.values())

    def add(self, record: ApplicationRecord) -> None:
        """Add or replace an application."""
        self._records[record.id] = record

    def list_applications(self, name_prefix: str) -> Sequence[ApplicationRecord]:
        self.list_calls.append(name_prefix)
        if self.list_error is not None:
            raise self.list_error
        return [r for r in self._records.values() if r.name.startswith(name_prefix)]

    def delete_application(self, application_id: int) -> None:
        self.delete_calls.append(application_id)
        if (error := self.delete_errors.get(application_id)) is not None:
            raise error
        if (record := self._records.get(application_id)) is None:
            raise RemoteResponseError(
                f"Application {application_id} not found", status_code=404
            )
        if record.reporting:
            raise RemoteResponseError(
                f"Application {application_id} has reported recently and cannot be deleted",
                status_code=422,
            )
        del self._records[application_id]


class InMemoryEntitySearch(EntitySearch):
    """In-memory entity search index.

    Searches count the indexed entities whose name equals the query name.
    A script of responses can be queued to simulate index lag and transient
    errors: each search pops the next scripted item (a count or an exception)
    and falls back to the index once the script is exhausted.

    Args:
        entities: Initially indexed entities.
        script: Scripted responses consumed one per search.
    """

    def __init__(
        self,
        entities: Iterable[EntitySummary] = (),
        script: Iterable[int | RemoteServiceError] = (),
    ) -> None:
        self.entities: list[EntitySummary] = list(entities)
        self._script = list(script)
        self.calls: list[SearchQuery] = []

    def index(self, entity: EntitySummary) -> None:
        """Make an entity searchable."""
        self.entities.append(entity)

    def queue(self, *responses: int | RemoteServiceError) -> None:
        """Append scripted responses."""
        self._script.extend(responses)

    def search(self, query: SearchQuery, timeout: float) -> SearchResult:
        self.calls.append(query)
        if self._script:
            response = self._script.pop(0)
            if isinstance(response, Exception):
                raise response
            matches = tuple(
                EntitySummary(guid=f"guid-{n}", name=query.name)
                for n in range(response)
            )
            return SearchResult(count=response, matches=matches)
        matches = tuple(e for e in self.entities if e.name == query.name)
        return SearchResult(count=len(matches), matches=matches)


@dataclass(eq=False)
class InMemoryAgentHandle(AgentHandle):
    """Handle to an in-memory application instance."""

    descriptor: ApplicationDescriptor
    application_id: int
    connected: bool = False
    running: bool = True
    events: list[tuple[str, dict[str, Any]]] = field(default_factory=list)


class InMemoryAgentLauncher(AgentLauncher):
    """In-memory application lifecycle service.

    A connected application is registered as a reporting application in the
    optional inventory and indexed in the optional search backend, like the
    remote account would eventually do.

    Args:
        inventory: Inventory to register connected applications in.
        search: Search index to index connected applications in.
        create_error: If set, `create_application` raises it.
        connect_error: If set, `wait_for_connection` raises it.
        shutdown_error: If set, `shutdown` raises it (after stopping).
    """

    def __init__(  # pylint: disable=too-many-arguments
        self,
        *,
        inventory: InMemoryInventory | None = None,
        search: InMemoryEntitySearch | None = None,
        create_error: RemoteServiceError | None = None,
        connect_error: RemoteServiceError | None = None,
        shutdown_error: RemoteServiceError | None = None,
    ) -> None:
        self._inventory = inventory
        self._search = search
        self.create_error = create_error
        self.connect_error = connect_error
        self.shutdown_error = shutdown_error
        self.handles: list[InMemoryAgentHandle] = []
        self.shutdowns: list[InMemoryAgentHandle] = []

    @property
    def create_calls(self) -> int:
        """Number of application instances created."""
        return len(self.handles)

    def create_application(self, descriptor: ApplicationDescriptor) -> AgentHandle:
        if self.create_error is not None:
            raise self.create_error
        handle = InMemoryAgentHandle(descriptor, application_id=next(_ids))
        self.handles.append(handle)
        return handle

    def wait_for_connection(self, handle: AgentHandle, timeout: float) -> None:
        handle = self._own(handle)
        if self.connect_error is not None:
            raise self.connect_error
        handle.connected = True
        name = handle.descriptor.name
        if self._inventory is not None:
            self._inventory.add(
                ApplicationRecord(id=handle.application_id, name=name, reporting=True)
            )
        if self._search is not None:
            self._search.index(
                EntitySummary(guid=f"guid-{handle.application_id}", name=name)
            )

    def record_event(
        self, handle: AgentHandle, event_type: str, attributes: Mapping[str, Any]
    ) -> None:
        handle = self._own(handle)
        if not handle.connected:
            raise RemoteResponseError("Application is not connected")
        handle.events.append((event_type, dict(attributes)))

    def shutdown(self, handle: AgentHandle, timeout: float) -> None:
        handle = self._own(handle)
        handle.running = False
        self.shutdowns.append(handle)
        if self.shutdown_error is not None:
            raise self.shutdown_error

    @staticmethod
    def _own(handle: AgentHandle) -> InMemoryAgentHandle:
        if not isinstance(handle, InMemoryAgentHandle):
            raise TypeError(f"Foreign agent handle: {handle!r}")
        return handle
