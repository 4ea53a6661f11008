"""The ``fixturegate`` command-line interface."""

from .main import fixturegate

__all__ = ["fixturegate"]
