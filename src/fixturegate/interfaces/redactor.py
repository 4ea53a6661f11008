"""Interfaces for redacting sensitive values.

This module defines the Redactor interface and the RedactorMode enumeration
used by adapters to sanitize secrets (API keys, license keys, tokens, etc.)
from strings such as error messages, request URLs, HTTP headers and free-form
key/value fragments before they reach logs or the terminal.
"""

import abc
from enum import Enum

# pylint: disable=too-few-public-methods


class RedactorMode(Enum):
    """Enumeration for redactor modes.

    Modes:
    - LENIENT: redact keys/tokens but keep account ids visible.
    - STRICT: redact keys/tokens and also account ids.
    """

    LENIENT = "lenient"
    STRICT = "strict"


class Redactor(abc.ABC):
    """Interface for sanitizing sensitive information from strings."""

    _mode: RedactorMode

    @abc.abstractmethod
    def sanitize(self, text: str) -> str:
        """Return a display-safe copy of ``text``.

        Args:
            text: Raw text that may contain secrets.

        Returns:
            The text with sensitive information redacted.
        """

    @property
    def mode(self) -> RedactorMode:
        """Return the redaction mode."""
        return self._mode
