"""Allow ``python -m fixturegate``."""

from fixturegate.entrypoints.cli.main import fixturegate

if __name__ == "__main__":
    fixturegate()  # pylint: disable=no-value-for-parameter
