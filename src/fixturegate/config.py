"""Configuration utilities for FIXTUREGATE.

This module centralizes the environment variables, endpoints, timing constants
and generated test names shared by every component. Configuration is read from
the process environment and treated as immutable once resolved.
"""

from __future__ import annotations

import os
import random
import string
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

API_KEY_ENV = "NEW_RELIC_API_KEY"  # pragma: no mutate
LICENSE_KEY_ENV = "NEW_RELIC_LICENSE_KEY"  # pragma: no mutate
ACCOUNT_ID_ENV = "NEW_RELIC_ACCOUNT_ID"  # pragma: no mutate
ACCOUNT_NAME_ENV = "NEW_RELIC_ACCOUNT_NAME"  # pragma: no mutate
SUBACCOUNT_ID_ENV = "NEW_RELIC_SUBACCOUNT_ID"  # pragma: no mutate
REGION_ENV = "NEW_RELIC_REGION"  # pragma: no mutate

# Checked in this order; the first missing one is reported.
REQUIRED_ENV_VARS = (API_KEY_ENV, LICENSE_KEY_ENV, ACCOUNT_ID_ENV)

DEFAULT_ACCOUNT_NAME = "New Relic Terraform Provider Acceptance Testing"

TEST_NAME_PREFIX = "tf_test"

# Seconds
CONNECT_TIMEOUT = 30.0
SHUTDOWN_TIMEOUT = 30.0
VISIBILITY_TIMEOUT = 30.0
POLL_INTERVAL = 1.0
HTTP_TIMEOUT = 20.0


class MissingCredentialError(Exception):
    """Raised when a required environment variable is not set.

    Attributes:
        env_var (str): Name of the missing environment variable.
    """

    def __init__(self, env_var: str) -> None:
        super().__init__(f"{env_var} must be set for acceptance tests")
        self.env_var = env_var


class InvalidConfigurationError(ValueError):
    """Raised when a configured environment variable has an unusable value."""


class InvalidRegionError(InvalidConfigurationError):
    """Raised when NEW_RELIC_REGION names an unknown region."""

    def __init__(self, value: str) -> None:
        super().__init__(
            f"Unknown region {value!r}; expected one of "
            f"{', '.join(r.name for r in Region)}."
        )
        self.value = value


class InvalidAccountIdError(InvalidConfigurationError):
    """Raised when NEW_RELIC_ACCOUNT_ID is set but is not a positive integer."""

    def __init__(self, value: str) -> None:
        super().__init__(f"{ACCOUNT_ID_ENV} must be a positive integer, got {value!r}")
        self.value = value


class Region(Enum):
    """Data-center region, mapped to its API endpoints."""

    US = "US"
    EU = "EU"

    @property
    def rest_url(self) -> str:
        """Base URL of the REST v2 API."""
        if self is Region.EU:
            return "https://api.eu.newrelic.com/v2"
        return "https://api.newrelic.com/v2"

    @property
    def graphql_url(self) -> str:
        """URL of the GraphQL (NerdGraph) endpoint."""
        if self is Region.EU:
            return "https://api.eu.newrelic.com/graphql"
        return "https://api.newrelic.com/graphql"

    @classmethod
    def parse(cls, value: str | None) -> Region:
        """Parse a region name, defaulting to US when unset."""
        if not value:
            return cls.US
        try:
            return cls[value.strip().upper()]
        except KeyError as e:
            raise InvalidRegionError(value) from e


@dataclass(frozen=True)
class Credentials:
    """Credentials and account settings resolved from the environment."""

    api_key: str
    license_key: str
    account_id: int
    account_name: str = DEFAULT_ACCOUNT_NAME
    subaccount_id: int | None = None
    region: Region = Region.US


def _positive_int(value: str | None) -> int | None:
    try:
        number = int(value or "")
    except ValueError:
        return None
    return number if number > 0 else None


def check_environment(environ: Mapping[str, str] | None = None) -> None:
    """Verify that every required environment variable is present.

    Args:
        environ: Mapping to read from; defaults to ``os.environ``.

    Raises:
        MissingCredentialError: Naming the first missing variable.
    """
    env = os.environ if environ is None else environ
    for name in REQUIRED_ENV_VARS:
        if not env.get(name):
            raise MissingCredentialError(name)


def load_credentials(environ: Mapping[str, str] | None = None) -> Credentials:
    """Resolve credentials from the environment.

    Args:
        environ: Mapping to read from; defaults to ``os.environ``.

    Returns:
        The resolved `Credentials`.

    Raises:
        MissingCredentialError: If a required variable is unset or empty.
        InvalidAccountIdError: If `NEW_RELIC_ACCOUNT_ID` is not a positive
            integer.
        InvalidRegionError: If `NEW_RELIC_REGION` names an unknown region.
    """
    env = os.environ if environ is None else environ
    check_environment(env)

    if (account_id := _positive_int(env.get(ACCOUNT_ID_ENV))) is None:
        raise InvalidAccountIdError(env[ACCOUNT_ID_ENV])

    return Credentials(
        api_key=env[API_KEY_ENV],
        license_key=env[LICENSE_KEY_ENV],
        account_id=account_id,
        account_name=env.get(ACCOUNT_NAME_ENV) or DEFAULT_ACCOUNT_NAME,
        subaccount_id=_positive_int(env.get(SUBACCOUNT_ID_ENV)),
        region=Region.parse(env.get(REGION_ENV)),
    )


def random_string(length: int, rand: random.Random | None = None) -> str:
    """Return a random string of lowercase ASCII letters."""
    rand = rand or random.Random()
    return "".join(rand.choice(string.ascii_lowercase) for _ in range(length))


@dataclass(frozen=True)
class TestNames:
    """Names shared by all tests of one process run."""

    __test__ = False  # not a pytest test class

    application: str
    alert_policy: str
    alert_channel: str

    @classmethod
    def generate(cls, rand: random.Random | None = None) -> TestNames:
        """Generate a fresh set of names using the test name prefix."""
        rand = rand or random.Random()
        return cls(
            application=f"{TEST_NAME_PREFIX}_{random_string(10, rand)}",
            alert_policy=f"{TEST_NAME_PREFIX}_{random_string(10, rand)}",
            alert_channel=f"{random_string(5, rand)} tf-test@example.com",
        )
