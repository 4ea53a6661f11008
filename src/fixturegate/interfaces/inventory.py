"""Interface for the remote application inventory.

The inventory lists the telemetry applications known to the remote account and
deletes them by id. Applications that reported data recently cannot be deleted;
the `reporting` flag of each record tells which ones.
"""

from __future__ import annotations

import abc
from collections.abc import Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class ApplicationRecord:
    """A remote telemetry application as seen through the inventory."""

    id: int
    name: str
    reporting: bool  # data arrived within the reporting window


class ApplicationInventory(abc.ABC):
    """Contract for listing and deleting remote applications."""

    @abc.abstractmethod
    def list_applications(self, name_prefix: str) -> Sequence[ApplicationRecord]:
        """List every application whose name matches ``name_prefix``.

        Args:
            name_prefix: Name filter passed to the remote service.

        Returns:
            Sequence[ApplicationRecord]: All matching applications, across pages.

        Raises:
            RemoteServiceError: If the applications cannot be enumerated.
        """

    @abc.abstractmethod
    def delete_application(self, application_id: int) -> None:
        """Delete a single application.

        Args:
            application_id: Id of the application to delete.

        Raises:
            RemoteServiceError: If the remote service refuses or fails the delete.
        """
