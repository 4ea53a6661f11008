"""Application lifecycle backed by the New Relic Python agent.

The agent runs in-process: creating an application configures the agent's
global settings with the descriptor's name and license key, connecting
activates it, and shutting down flushes and stops the agent harvest thread.
The agent is process-global, so only one application can be live at a time,
and once it has been shut down it cannot start another session in the same
process: later creations are refused instead of silently reusing the stopped
agent.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import newrelic.agent

from fixturegate.interfaces.agent import (
    AgentHandle,
    AgentLauncher,
    ApplicationDescriptor,
)
from fixturegate.interfaces.errors import RemoteRequestError

logger = logging.getLogger(__name__)

# Set once `shutdown_agent` has run; the harvest thread never restarts after that.
_agent_stopped = threading.Event()


@dataclass(eq=False)
class NewRelicAgentHandle(AgentHandle):
    """Handle wrapping the agent's application object."""

    name: str
    application: Any


class NewRelicAgentLauncher(AgentLauncher):
    """`AgentLauncher` implementation using the ``newrelic`` package."""

    def create_application(self, descriptor: ApplicationDescriptor) -> AgentHandle:
        if _agent_stopped.is_set():
            raise RemoteRequestError(
                f"Agent could not create application {descriptor.name!r}: the agent "
                "was shut down earlier in this process and cannot be restarted"
            )
        settings = newrelic.agent.global_settings()
        settings.license_key = descriptor.license_key
        settings.app_name = descriptor.name
        settings.labels = [
            {"label_type": key, "label_value": value}
            for key, value in descriptor.labels.items()
        ]
        try:
            application = newrelic.agent.application(descriptor.name)
        except Exception as e:  # pylint: disable=broad-except
            raise RemoteRequestError(
                f"Agent could not create application {descriptor.name!r}: {e}"
            ) from e
        if application is None:
            raise RemoteRequestError(
                f"Agent could not create application {descriptor.name!r}"
            )
        return NewRelicAgentHandle(name=descriptor.name, application=application)

    def wait_for_connection(self, handle: AgentHandle, timeout: float) -> None:
        handle = self._own(handle)
        logger.debug("Activating agent application %r", handle.name)
        handle.application.activate(timeout=timeout)
        if not handle.application.active:
            raise RemoteRequestError(
                f"Application {handle.name!r} did not connect within {timeout:g}s"
            )

    def record_event(
        self, handle: AgentHandle, event_type: str, attributes: Mapping[str, Any]
    ) -> None:
        handle = self._own(handle)
        newrelic.agent.record_custom_event(
            event_type, dict(attributes), application=handle.application
        )

    def shutdown(self, handle: AgentHandle, timeout: float) -> None:
        self._own(handle)
        try:
            newrelic.agent.shutdown_agent(timeout=timeout)
        except Exception as e:  # pylint: disable=broad-except
            raise RemoteRequestError(f"Agent shutdown failed: {e}") from e
        finally:
            _agent_stopped.set()

    @staticmethod
    def _own(handle: AgentHandle) -> NewRelicAgentHandle:
        if not isinstance(handle, NewRelicAgentHandle):
            raise TypeError(f"Foreign agent handle: {handle!r}")
        return handle
