"""Bootstrap the fixture gate with its remote adapters."""

from __future__ import annotations

import os
import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import TracebackType

import httpx

from fixturegate import config
from fixturegate.adapters.http import build_client
from fixturegate.adapters.nerdgraph_search import NerdGraphEntitySearch
from fixturegate.adapters.newrelic_agent import NewRelicAgentLauncher
from fixturegate.adapters.redactor import Redactor
from fixturegate.adapters.rest_inventory import RestApplicationInventory
from fixturegate.interfaces.agent import AgentLauncher, ApplicationDescriptor
from fixturegate.interfaces.inventory import ApplicationInventory
from fixturegate.interfaces.redactor import RedactorMode
from fixturegate.interfaces.search import EntitySearch
from fixturegate.service_layer import (
    ApplicationLifecycleManager,
    EntityVisibilityWaiter,
    FixtureGate,
    FixtureServices,
    FixtureState,
    StaleEntityCleaner,
)

_default_gate: FixtureGate | None = None
_default_gate_lock = threading.Lock()


@dataclass(frozen=True)
class RemoteServices:
    """The remote collaborators, ready to use.

    ``clients`` are the HTTP connection pools behind the inventory and search;
    `close` releases them. Usable as a context manager.
    """

    inventory: ApplicationInventory
    search: EntitySearch
    agent: AgentLauncher
    clients: tuple[httpx.Client, ...] = ()

    def close(self) -> None:
        """Close the HTTP clients. Safe to call multiple times."""
        for client in self.clients:
            client.close()

    def __enter__(self) -> RemoteServices:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


RemoteFactory = Callable[[config.Credentials], RemoteServices]


def build_remote_services(
    credentials: config.Credentials, transport: httpx.BaseTransport | None = None
) -> RemoteServices:
    """Build the httpx-backed inventory and search, and the agent launcher."""
    region = credentials.region
    rest_client = build_client(
        credentials.api_key, base_url=region.rest_url, transport=transport
    )
    graphql_client = build_client(credentials.api_key, transport=transport)
    return RemoteServices(
        inventory=RestApplicationInventory(rest_client),
        search=NerdGraphEntitySearch(graphql_client, region.graphql_url),
        agent=NewRelicAgentLauncher(),
        clients=(rest_client, graphql_client),
    )


def build_services(
    credentials: config.Credentials,
    names: config.TestNames,
    state: FixtureState,
    *,
    remote: RemoteServices,
) -> FixtureServices:
    """Wire remote services into the cleaner, lifecycle manager and waiter."""
    descriptor = ApplicationDescriptor.from_credentials(credentials, names.application)
    return FixtureServices(
        cleaner=StaleEntityCleaner(remote.inventory, state),
        lifecycle=ApplicationLifecycleManager(remote.agent, descriptor),
        waiter=EntityVisibilityWaiter(remote.search),
        on_close=remote.close,
    )


def build_gate(
    *,
    environ: Mapping[str, str] | None = None,
    state: FixtureState | None = None,
    names: config.TestNames | None = None,
    remote_factory: RemoteFactory = build_remote_services,
) -> FixtureGate:
    """Build a fixture gate.

    Remote services are only built once the gate has confirmed the environment
    is configured, so a skipped gate never opens a connection.

    Args:
        environ: Environment snapshot; defaults to ``os.environ``.
        state: Readiness state; a fresh one when omitted.
        names: Test names; generated when omitted.
        remote_factory: Builds the remote services from credentials.
    """

    def _services(
        credentials: config.Credentials,
        gate_names: config.TestNames,
        gate_state: FixtureState,
    ) -> FixtureServices:
        return build_services(
            credentials, gate_names, gate_state, remote=remote_factory(credentials)
        )

    return FixtureGate(_services, state=state, names=names, environ=environ)


def default_gate() -> FixtureGate:
    """Return the process-wide gate, building it on first use."""
    global _default_gate  # pylint: disable=global-statement
    with _default_gate_lock:
        if _default_gate is None:
            _default_gate = build_gate()
        return _default_gate


def reset_default_gate() -> None:
    """Forget the process-wide gate (tests only)."""
    global _default_gate  # pylint: disable=global-statement
    with _default_gate_lock:
        _default_gate = None


def build_redactor(
    mode: RedactorMode = RedactorMode.LENIENT,
    environ: Mapping[str, str] | None = None,
) -> Redactor:
    """Build a redactor that masks the configured keys and, in strict mode, ids."""
    env = os.environ if environ is None else environ
    return Redactor(
        mode,
        secrets=(env.get(config.API_KEY_ENV, ""), env.get(config.LICENSE_KEY_ENV, "")),
        account_ids=(
            env.get(config.ACCOUNT_ID_ENV, ""),
            env.get(config.SUBACCOUNT_ID_ENV, ""),
        ),
    )


def build_cleaner(
    remote: RemoteServices,
    *,
    prefix: str = config.TEST_NAME_PREFIX,
    state: FixtureState | None = None,
) -> StaleEntityCleaner:
    """Build a standalone stale-application cleaner over ``remote``.

    The caller owns ``remote`` and closes it once the cleaner is done.
    """
    return StaleEntityCleaner(remote.inventory, state or FixtureState(), prefix=prefix)
