"""Fixtures and test helpers for end-to-end CLI tests.

Provides a test-only `log-demo` Click command that emits log messages
(including a secret, to check redaction), plus fixtures to register that
command, obtain a CliRunner, run in an isolated filesystem, and build the
`CliState` that points the gate commands at in-memory remote services.
"""

import logging

import click
import pytest
from click.testing import CliRunner

from fixturegate.adapters.memory import (
    InMemoryAgentLauncher,
    InMemoryEntitySearch,
    InMemoryInventory,
)
from fixturegate.bootstrap import RemoteServices
from fixturegate.entrypoints.cli.gate_cmds import CliState
from fixturegate.entrypoints.cli.main import fixturegate
from fixturegate.interfaces.errors import RemoteRequestError

# pylint: disable=redefined-outer-name

DEMO_SECRET = "NRAK-DEMOSECRET0123456789ABCDEFG"


@click.command()
def log_demo():
    """Emit representative log messages for CLI/flight-recorder tests."""
    logger = logging.getLogger("fixturegate.demo")
    logger.debug("This is a debug-level test message.")
    logger.info("This is an info-level test message.")
    logger.warning("This is a warning-level test message.")
    logger.error("This is an error-level test message.")
    logger.critical("This is a critical-level test message.")
    logger.warning("Request failed with key %s", DEMO_SECRET)
    third_party_logger = logging.getLogger("some.thirdparty")
    third_party_logger.debug("This is a debug-level third-party test message.")
    third_party_logger.info("This is an info-level third-party test message.")
    third_party_logger.warning("This is a warning-level third-party test message.")
    logger.debug("This is a final debug-level test message.")


def _remove_command_everywhere(group, name: str) -> None:
    """Remove a command from a Click group and its internal sections."""
    group.commands.pop(name, None)
    if hasattr(group, "_default_section"):
        group._default_section.commands.pop(name, None)  # pylint: disable=protected-access
    for sec in getattr(group, "_sections", []):
        getattr(sec, "commands", {}).pop(name, None)


@pytest.fixture
def registered_log_demo():
    """Register the 'log-demo' command for the duration of a test."""
    fixturegate.add_command(log_demo, name="log-demo")
    try:
        yield
    finally:
        _remove_command_everywhere(fixturegate, "log-demo")


@pytest.fixture
def runner():
    """Return a Click CliRunner for invoking CLI commands in tests."""
    return CliRunner()


@pytest.fixture
def fs(runner):
    """Run the test inside the runner's isolated filesystem."""
    with runner.isolated_filesystem():
        yield


@pytest.fixture
def remote(inventory, search, agent) -> RemoteServices:
    """In-memory remote services wired to the shared fixtures."""
    return RemoteServices(inventory=inventory, search=search, agent=agent)


@pytest.fixture
def make_state(configured_env, remote):
    """Factory fixture: a `CliState` using ``remote`` and a configured env.

    Example:
        runner.invoke(fixturegate, ["check"], obj=make_state(environ={}))
    """

    def _make_state(**overrides) -> CliState:
        kwargs = {"environ": dict(configured_env), "remote_factory": lambda c: remote}
        kwargs.update(overrides)
        return CliState(**kwargs)

    return _make_state


@pytest.fixture
def demo_secret() -> str:
    """The secret logged by `log-demo`."""
    return DEMO_SECRET


@pytest.fixture
def failing_remote() -> RemoteServices:
    """Remote services whose agent never connects."""
    inventory = InMemoryInventory()
    search = InMemoryEntitySearch()
    agent = InMemoryAgentLauncher(
        inventory=inventory,
        search=search,
        connect_error=RemoteRequestError("connection timed out"),
    )
    return RemoteServices(inventory=inventory, search=search, agent=agent)
