"""Create the shared reference application.

The reference application is a short-lived instrumented instance: it is
started, allowed to connect to the telemetry backend, emits one marker event so
the backend indexes it, and is shut down again. Creating it has a visible side
effect on the remote account, so callers invoke this at most once per process.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from fixturegate.config import CONNECT_TIMEOUT, SHUTDOWN_TIMEOUT
from fixturegate.interfaces.agent import (
    AgentHandle,
    AgentLauncher,
    ApplicationDescriptor,
)
from fixturegate.interfaces.errors import RemoteServiceError

from .errors import SetupError

logger = logging.getLogger(__name__)

MARKER_EVENT_TYPE = "fixturegate marker"  # pragma: no mutate


class ApplicationLifecycleManager:
    """Start, mark and stop the reference application.

    Args:
        agent: Launcher used to run the instrumented instance.
        descriptor: Name and license of the application to create.
        connect_timeout: Seconds to wait for the instance to connect.
        shutdown_timeout: Seconds allowed for an orderly shutdown.
        event_type: Type of the marker event.
        event_attributes: Attributes attached to the marker event.
    """

    def __init__(  # pylint: disable=too-many-arguments
        self,
        agent: AgentLauncher,
        descriptor: ApplicationDescriptor,
        *,
        connect_timeout: float = CONNECT_TIMEOUT,
        shutdown_timeout: float = SHUTDOWN_TIMEOUT,
        event_type: str = MARKER_EVENT_TYPE,
        event_attributes: Mapping[str, Any] | None = None,
    ) -> None:
        self._agent = agent
        self.descriptor = descriptor
        self.connect_timeout = connect_timeout
        self.shutdown_timeout = shutdown_timeout
        self.event_type = event_type
        self.event_attributes = dict(event_attributes or {})

    def create_reference_application(self) -> None:
        """Create the application, wait for it to connect and emit the marker.

        The instance is always shut down once it exists, whether or not the
        connection and the marker event succeeded.

        Raises:
            SetupError: If the instance cannot be created or does not connect
                within ``connect_timeout``.
        """
        name = self.descriptor.name
        try:
            handle = self._agent.create_application(self.descriptor)
        except RemoteServiceError as e:
            raise SetupError(f"Error setting up application {name!r}: {e}") from e
        logger.info("Created application %r", name)

        try:
            try:
                self._agent.wait_for_connection(handle, self.connect_timeout)
            except RemoteServiceError as e:
                raise SetupError(
                    f"Unable to set up connection for application {name!r}: {e}"
                ) from e
            logger.info("Application %r connected", name)

            self._agent.record_event(handle, self.event_type, self.event_attributes)
            logger.info("Recorded %r event for application %r", self.event_type, name)
        finally:
            self._shutdown(handle)

    def _shutdown(self, handle: AgentHandle) -> None:
        try:
            self._agent.shutdown(handle, self.shutdown_timeout)
        except RemoteServiceError as e:
            logger.warning(
                "Error shutting down application %r: %s", self.descriptor.name, e
            )
        else:
            logger.info("Application %r shut down", self.descriptor.name)
