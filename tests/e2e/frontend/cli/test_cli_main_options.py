"""End-to-end CLI tests for the top-level `fixturegate` command.

These tests exercise logging, verbosity flags, logger-level overrides, debug
formatting, redaction, and the in-memory flight-recorder by invoking the
`log-demo` command under various CLI flags and environment variables.
"""

import re
from pathlib import Path

import pytest

from fixturegate import __version__
from fixturegate.entrypoints.cli.main import fixturegate

# pylint: disable=unused-argument


def assert_in_output(pattern: str, output: str) -> None:
    """Assert that a regex pattern is found in the output string."""
    if not re.search(pattern, output, re.MULTILINE):
        raise AssertionError(f"Pattern '{pattern}' not found in output:\n{output}")


def assert_not_in_output(pattern: str, output: str) -> None:
    """Assert that a regex pattern is NOT found in the output string."""
    if re.search(pattern, output, re.MULTILINE):
        raise AssertionError(f"Pattern '{pattern}' found in output:\n{output}")


def test_version_option(runner, fs):
    """The click-extra group reports the package version."""
    result = runner.invoke(fixturegate, ["--version"])
    assert result.exit_code == 0, result.output
    assert __version__ in result.output


def test_help_lists_gate_commands(runner, fs):
    """--help renders the group with every gate command."""
    result = runner.invoke(fixturegate, ["--help"])
    assert result.exit_code == 0, result.output
    for command in ("check", "cleanup", "ensure", "names"):
        assert_in_output(rf"\b{command}\b", result.output)


def test_default_shows_warning(registered_log_demo, runner, fs):
    """Default invocation shows WARNING and above but not INFO."""
    result = runner.invoke(fixturegate, ["log-demo"])
    assert result.exit_code == 0
    assert_in_output("warning-level test message", result.output)
    assert_not_in_output("info-level test message", result.output)


def test_verbose_shows_info(registered_log_demo, runner, fs):
    """Single -v enables INFO-level console output (but not DEBUG)."""
    result = runner.invoke(fixturegate, ["-v", "log-demo"])
    assert result.exit_code == 0
    assert_in_output("info-level test message", result.output)
    assert_not_in_output("debug-level test message", result.output)


def test_vv_shows_debug(registered_log_demo, runner, fs):
    """-vv enables DEBUG-level console output."""
    result = runner.invoke(fixturegate, ["-vv", "log-demo"])
    assert result.exit_code == 0
    assert_in_output("This is a debug-level test message", result.output)


def test_qq_keeps_only_critical(registered_log_demo, runner, fs):
    """-qq lowers verbosity to CRITICAL only."""
    result = runner.invoke(fixturegate, ["-qq", "log-demo"])
    assert result.exit_code == 0
    assert_in_output("critical-level test message", result.output)
    assert_not_in_output("error-level test message", result.output)


@pytest.mark.parametrize(
    "env, cli_args",
    [
        ({}, ["-vv", "-L", "some.thirdparty=INFO"]),
        ({"FIXTUREGATE_LOGGER_LEVEL": "some.thirdparty=INFO"}, ["-vv"]),
    ],
)
def test_logger_level_silences_debug(registered_log_demo, runner, fs, env, cli_args):
    """Logger-level overrides silence third-party DEBUG while keeping INFO+."""
    result = runner.invoke(fixturegate, cli_args + ["log-demo"], env=env)
    assert result.exit_code == 0
    assert_not_in_output(
        "This is a debug-level third-party test message.", result.output
    )
    assert_in_output("This is an info-level third-party test message.", result.output)


def test_debug_mode_shows_paths(registered_log_demo, runner, fs):
    """With --debug, log output includes file paths and line numbers."""
    result = runner.invoke(fixturegate, ["--debug", "log-demo"])
    assert result.exit_code == 0
    assert_in_output(r"conftest\.py:\d+\b", result.output)


def test_console_output_is_redacted(registered_log_demo, runner, fs, demo_secret):
    """Secrets logged by any component never reach the console."""
    result = runner.invoke(fixturegate, ["log-demo"])
    assert result.exit_code == 0
    assert_in_output(r"Request failed with key \*\*\*", result.output)
    assert demo_secret not in result.output


def test_flight_recorder_flush_on_warning(
    registered_log_demo, runner, fs, demo_secret
):
    """Flight recorder writes buffered DEBUG logs to disk when a WARNING occurs."""
    log_path = "flight_recorder.log"
    result = runner.invoke(
        fixturegate,
        ["--log-path", log_path, "-L", "some.thirdparty=INFO", "log-demo"],
    )
    assert result.exit_code == 0
    content = Path(log_path).read_text(encoding="utf-8")
    assert_in_output("This is a debug-level test message.", content)
    assert_not_in_output("This is a debug-level third-party test message.", content)
    assert_in_output("This is an info-level third-party test message.", content)
    assert_in_output("This is a critical-level test message.", content)
    assert_not_in_output("This is a final debug-level test message.", content)
    assert demo_secret not in content


@pytest.mark.parametrize(
    "env, cli_args",
    [({}, ["--force-flush"]), ({"FIXTUREGATE_FORCE_FLUSH_FLIGHT_RECORDER": "true"}, [])],
    ids=["cli-flag", "env-var"],
)
def test_flight_recorder_force_flush(registered_log_demo, runner, fs, env, cli_args):
    """With force-flush enabled, the final DEBUG buffer is written on exit."""
    log_path = "flight_recorder.log"
    result = runner.invoke(
        fixturegate, ["--log-path", log_path] + cli_args + ["log-demo"], env=env
    )
    assert result.exit_code == 0
    content = Path(log_path).read_text(encoding="utf-8")
    assert_in_output("This is a final debug-level test message.", content)


@pytest.mark.parametrize(
    "env, cli_args",
    [({}, ["--no-flight-recorder"]), ({"FIXTUREGATE_FLIGHT_RECORDER": "0"}, [])],
    ids=["cli-flag", "env-var"],
)
def test_flight_recorder_can_be_disabled(
    registered_log_demo, runner, fs, env, cli_args
):
    """Disabling the flight recorder prevents writing the log file."""
    log_path = "flight_recorder.log"
    result = runner.invoke(
        fixturegate, ["--log-path", log_path] + cli_args + ["log-demo"], env=env
    )
    assert result.exit_code == 0
    assert not Path(log_path).exists()


def test_startup_logging(registered_log_demo, runner, fs):
    """Startup logging records versions, handlers and overrides."""
    log_path = "startup.log"
    result = runner.invoke(
        fixturegate,
        ["--log-path", log_path, "--flight-recorder", "--force-flush", "log-demo"],
        env={"FIXTUREGATE_LOGGER_LEVEL": "some.thirdparty=INFO"},
    )
    assert result.exit_code == 0
    content = Path(log_path).read_text(encoding="utf-8")
    assert_in_output(r"fixturegate \d+\.\d+\.\d+ - console=WARNING", content)
    assert_in_output(r"flight-recorder=ON, redaction=lenient", content)
    assert_in_output(r"Python: \d+\.\d+\.\d+", content)
    assert_in_output(r"httpx: \d+\.\d+", content)
    assert_in_output(
        r"Flight recorder: path=startup\.log, capacity=2000, flush_on_close=True",
        content,
    )
    assert_in_output(r"Per-logger overrides: .*'some\.thirdparty': 'INFO'", content)
