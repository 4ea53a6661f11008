"""fixturegate CLI: gate commands.

Thin wrappers over the bootstrap facade that run the fixture steps by hand,
e.g. to purge stale applications before a CI run or to check that an
environment is configured.

Behavior
- Human-oriented messages go to **stderr**; ``--json`` output goes to
  **stdout** so it can be piped.
- Every message shown to the user passes through the redactor first.

Exit codes
- ``0`` ready / done (a skipped gate also exits 0 unless ``--strict``).
- ``1`` the gate failed, or the environment is not configured.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass

import click

from fixturegate import config
from fixturegate.bootstrap import (
    RemoteFactory,
    build_cleaner,
    build_gate,
    build_remote_services,
)
from fixturegate.interfaces.redactor import Redactor
from fixturegate.service_layer import GateStatus

from .helpers import error, info, success, warn

logger = logging.getLogger(__name__)

EXIT_FAILED = 1


@dataclass
class CliState:
    """Objects shared between the top-level group and its subcommands."""

    redactor: Redactor | None = None
    remote_factory: RemoteFactory = build_remote_services
    environ: dict[str, str] | None = None

    def redact(self, text: str) -> str:
        """Sanitize ``text`` for display."""
        return self.redactor.sanitize(text) if self.redactor else text


@click.command()
@click.pass_obj
def check(state: CliState) -> None:
    """Check that the required environment variables are set."""
    try:
        credentials = config.load_credentials(state.environ)
    except (config.MissingCredentialError, config.InvalidConfigurationError) as e:
        warn(state.redact(str(e)))
        raise click.exceptions.Exit(EXIT_FAILED) from e
    success(
        f"Environment is configured for account {state.redact(str(credentials.account_id))} "
        f"({credentials.region.value})."
    )


@click.command()
@click.option(
    "--prefix",
    default=config.TEST_NAME_PREFIX,
    show_default=True,
    help="Name prefix identifying test applications.",
)
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON.")
@click.pass_obj
def cleanup(state: CliState, prefix: str, as_json: bool) -> None:
    """Delete stale, non-reporting applications whose name starts with PREFIX."""
    try:
        credentials = config.load_credentials(state.environ)
    except (config.MissingCredentialError, config.InvalidConfigurationError) as e:
        raise click.ClickException(state.redact(str(e))) from e

    with state.remote_factory(credentials) as remote:
        report = build_cleaner(remote, prefix=prefix).cleanup()

    if as_json:
        click.echo(json.dumps({**asdict(report), "attempted": report.attempted}))
    if report.listing_error:
        warn(f"Could not list applications: {state.redact(report.listing_error)}")
    elif report.failed:
        warn(
            f"Deleted {report.deleted} of {report.attempted} stale applications "
            f"({report.failed} failed)."
        )
    else:
        success(
            f"Deleted {report.deleted} stale applications "
            f"({report.skipped_reporting} still reporting, {report.total} listed)."
        )


@click.command()
@click.option(
    "--strict/--no-strict",
    default=False,
    help="Exit non-zero when the gate is skipped for missing configuration.",
)
@click.pass_obj
def ensure(state: CliState, strict: bool) -> None:
    """Run the fixture gate: clean up, create the application, wait for search."""
    gate = build_gate(environ=state.environ, remote_factory=state.remote_factory)
    info(f"Reference application: {gate.names.application}")
    try:
        outcome = gate.ensure_ready()
    finally:
        gate.close()
    logger.debug("Gate finished at stage %s: %s", gate.stage.name, outcome.status.name)

    match outcome.status:
        case GateStatus.READY:
            success(f"Application {gate.names.application!r} is ready.")
        case GateStatus.SKIPPED:
            warn(f"Skipped: {state.redact(outcome.reason or '')}")
            if strict:
                raise click.exceptions.Exit(EXIT_FAILED)
        case GateStatus.FAILED:
            error(state.redact(outcome.reason or "Fixture gate failed."))
            raise click.exceptions.Exit(EXIT_FAILED)


@click.command()
def names() -> None:
    """Print a freshly generated set of test names as JSON."""
    click.echo(json.dumps(asdict(config.TestNames.generate())))
