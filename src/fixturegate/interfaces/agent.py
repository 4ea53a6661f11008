"""Interface for starting and stopping an instrumented application.

An agent launcher brings up a short-lived instrumented application instance,
lets it connect to the telemetry backend, emits events on its behalf and shuts
it down. The handle it returns is opaque to callers.
"""

from __future__ import annotations

import abc
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from fixturegate.config import Credentials


@dataclass(frozen=True)
class ApplicationDescriptor:
    """What the agent needs to start an application."""

    name: str
    license_key: str
    labels: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_credentials(
        cls, credentials: Credentials, name: str
    ) -> ApplicationDescriptor:
        """Build a descriptor for ``name`` using the configured license key."""
        return cls(
            name=name,
            license_key=credentials.license_key,
            labels={"account": str(credentials.account_id)},
        )

    def __repr__(self) -> str:
        return f"ApplicationDescriptor(name={self.name!r}, license_key='***')"


class AgentHandle:  # pylint: disable=too-few-public-methods
    """Opaque handle to a running application instance."""


class AgentLauncher(abc.ABC):
    """Contract for the application lifecycle service."""

    @abc.abstractmethod
    def create_application(self, descriptor: ApplicationDescriptor) -> AgentHandle:
        """Create an application instance.

        Raises:
            RemoteServiceError: If the instance cannot be created.
        """

    @abc.abstractmethod
    def wait_for_connection(self, handle: AgentHandle, timeout: float) -> None:
        """Block until the instance has connected, or ``timeout`` elapses.

        Raises:
            RemoteServiceError: If the instance did not connect in time.
        """

    @abc.abstractmethod
    def record_event(
        self, handle: AgentHandle, event_type: str, attributes: Mapping[str, Any]
    ) -> None:
        """Record a custom event on behalf of the instance."""

    @abc.abstractmethod
    def shutdown(self, handle: AgentHandle, timeout: float) -> None:
        """Flush pending data and stop the instance within ``timeout``."""
