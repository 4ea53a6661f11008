"""Bootstrap (composition root) for FIXTUREGATE.

Assembles the fixture gate at runtime: wires concrete adapters (httpx clients,
the agent launcher) into the service-layer components, resolves configuration,
and keeps the process-wide default gate.

Import rules:
- Entry points import *this* package (not adapters/service_layer directly).
- This package may import: `fixturegate.adapters`, `fixturegate.service_layer`,
  `fixturegate.interfaces`, and `fixturegate.config`.
- Inner layers must not import `fixturegate.bootstrap`.
"""

from .bootstrap import (
    RemoteFactory,
    RemoteServices,
    build_cleaner,
    build_gate,
    build_remote_services,
    build_redactor,
    build_services,
    default_gate,
    reset_default_gate,
)

__all__ = [
    "RemoteFactory",
    "RemoteServices",
    "build_cleaner",
    "build_gate",
    "build_remote_services",
    "build_redactor",
    "build_services",
    "default_gate",
    "reset_default_gate",
]
