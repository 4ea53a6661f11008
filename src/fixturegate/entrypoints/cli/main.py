"""fixturegate CLI entry point.

Defines the top-level ``fixturegate`` command (via Click-Extra), configures
logging for every subcommand, and registers the gate commands.

Currently available commands
- ``fixturegate check``   — verify the environment is configured.
- ``fixturegate cleanup`` — delete stale, non-reporting test applications.
- ``fixturegate ensure``  — run the full fixture gate.
- ``fixturegate names``   — print a fresh set of generated test names.

Examples
    $ fixturegate --version
    $ fixturegate -v cleanup --json
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import click
import click_extra as clickx
from platformdirs import user_log_dir

from fixturegate import __version__
from fixturegate.bootstrap import build_redactor
from fixturegate.interfaces.redactor import RedactorMode
from fixturegate.logging import (
    config_console_handler,
    config_flight_recorder,
    log_startup,
)

from .gate_cmds import CliState, check, cleanup, ensure, names
from .helpers import hyperlink, parse_log_level

if TYPE_CHECKING:
    from logging import Handler

logger = logging.getLogger(__name__)


HELP = """fixturegate command-line interface.

    fixturegate prepares the shared reference application that integration tests
    rely on in a live telemetry account: it purges stale test applications,
    creates a fresh instrumented application, and waits until the search index
    can see it.
    """


EPILOG = "\b\n" + "\n".join(
    [
        f"{click.style('Environment:', fg='blue', bold=True, underline=True)}",
        "  NEW_RELIC_API_KEY, NEW_RELIC_LICENSE_KEY, NEW_RELIC_ACCOUNT_ID (required)",
        "  NEW_RELIC_ACCOUNT_NAME, NEW_RELIC_SUBACCOUNT_ID, NEW_RELIC_REGION (optional)",
        f"{click.style('See Also:', fg='blue', bold=True, underline=True)}",
        "  API keys: " + hyperlink("https://one.newrelic.com/api-keys"),
    ]
)


@clickx.extra_group(
    version=__version__,
    help=HELP,
    params=[
        clickx.ColorOption(show_envvar=True),
        clickx.TimerOption(show_envvar=True),
        clickx.ExtraVersionOption(),
    ],
    epilog=EPILOG,
)
@click.option(
    "--verbose",
    "-v",
    "verbose_count",
    count=True,
    help=(
        "Increase the default WARNING verbosity by one level "
        "for each additional repetition of the option."
    ),
    default=0,
)
@click.option(
    "--quiet",
    "-q",
    "quiet_count",
    count=True,
    help=(
        "Decrease the default WARNING verbosity by one level "
        "for each additional repetition of the option."
    ),
    default=0,
)
@click.option(
    "--debug/--no-debug",
    is_flag=True,
    help="Enable debug mode (timestamps, logger names and source locations).",
    default=False,
)
@click.option(
    "--log-path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to log file (overrides default flight recorder path).",
    default=Path(user_log_dir("fixturegate", appauthor=False, ensure_exists=True))
    / "latest.log",
    envvar="FIXTUREGATE_LOG_PATH",
    show_default=True,
    show_envvar=True,
)
@click.option(
    "--flight-recorder-capacity",
    type=int,
    default=2000,
    hidden=True,
    envvar="FIXTUREGATE_FLIGHT_RECORDER_CAPACITY",
    show_envvar=True,
    help="Capacity of the flight recorder (in number of log records).",
)
@click.option(
    "--flight-recorder/--no-flight-recorder",
    "flight_recorder",
    is_flag=True,
    help=(
        "Keep the last N log records at DEBUG granularity and write them to "
        "--log-path when a WARNING/ERROR occurs, or on exit if --force-flush is set."
    ),
    default=True,
    show_envvar=True,
)
@click.option(
    "--force-flush/--no-force-flush",
    "force_flush_flight_recorder",
    is_flag=True,
    help="Force-flush the flight recorder buffer to --log-path on program exit.",
    default=False,
    show_default=True,
    show_envvar=True,
)
@click.option(
    "-L",
    "--logger-level",
    "logger_levels",
    multiple=True,
    callback=parse_log_level,
    help=(
        "Set MINIMUM LEVEL for specific LOGGERS (NAME=LEVEL). Applies to both "
        "console and flight recorder. Repeatable (e.g. -L httpx=INFO)."
    ),
    default=("httpx=WARNING", "httpcore=WARNING", "newrelic=WARNING"),
    show_default=True,
    show_envvar=True,
)
@click.option(
    "--redactor-mode",
    "redactor_mode",
    type=click.Choice([m.value for m in RedactorMode], case_sensitive=False),
    help=(
        "'lenient' (default) redacts API/license keys and tokens; "
        "'strict' also redacts account ids."
    ),
    default=RedactorMode.LENIENT.value,
    show_envvar=True,
    show_default=True,
)
@clickx.pass_context
def fixturegate(  # pylint: disable=too-many-arguments, too-many-locals, too-many-positional-arguments
    ctx: click.Context,
    verbose_count: int,
    quiet_count: int,
    debug: bool,
    log_path: Path,
    flight_recorder_capacity: int,
    flight_recorder: bool,
    force_flush_flight_recorder: bool,
    logger_levels: dict[str, int],
    redactor_mode: str,
) -> None:
    """fixturegate command-line interface."""

    # 0) compute effective verbosity
    level = logging.WARNING - (10 * verbose_count) + (10 * quiet_count)
    level = max(logging.DEBUG, min(logging.CRITICAL, level))

    # 1) shared state for subcommands
    state = ctx.ensure_object(CliState)
    state.redactor = build_redactor(
        RedactorMode(redactor_mode.lower()), environ=state.environ
    )

    handlers: list[Handler] = []

    # 2) configure console handler
    use_color = ctx.color is not False  # None or True => allow color
    handlers.append(
        config_console_handler(
            level=level, debug_mode=debug, color=use_color, redactor=state.redactor
        )
    )

    # 3) configure flight recorder
    if flight_recorder:
        handlers.append(
            config_flight_recorder(
                path=log_path,
                capacity=flight_recorder_capacity,
                flush_on_close=force_flush_flight_recorder,
                redactor=state.redactor,
            )
        )

    # 4) configure root logger
    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)

    # 5) set 3rd-party logger levels
    for name, lvl in logger_levels.items():
        logging.getLogger(name).setLevel(lvl)

    log_startup(
        logger,
        app_version=__version__,
        level=level,
        handlers=handlers,
        log_path=log_path,
        flight_recorder=flight_recorder,
        flight_capacity=flight_recorder_capacity if flight_recorder else None,
        force_flush_fr=force_flush_flight_recorder,
        logger_levels=logger_levels,
        redactor_mode=redactor_mode,
    )

    ctx.call_on_close(logging.shutdown)


fixturegate.add_command(check)
fixturegate.add_command(cleanup)
fixturegate.add_command(ensure)
fixturegate.add_command(names)
