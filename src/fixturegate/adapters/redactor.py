"""Regex-based redactor for sanitizing secrets from strings.

This module provides a Redactor implementation that masks sensitive values
(API keys, license keys, tokens, passwords, etc.) found in error messages,
request URLs, HTTP headers and free-form "key: value" fragments. Secret values
known up front (e.g. the configured keys) are masked verbatim as well. It
supports lenient and strict modes (strict also redacts account ids).
"""

import re
from collections.abc import Iterable

from fixturegate.interfaces import redactor
from fixturegate.interfaces.redactor import RedactorMode

# pylint: disable=too-few-public-methods

PLACEHOLDER = "***"
SECRET_KEYWORDS = [
    "password",
    "secret",
    "token",
    "api_key",
    "apikey",
    "license_key",
    "licensekey",
    "x_license_key",
    "access_token",
    "authorization",
]
STRICT_MODE_ADDITIONAL_KEYWORDS = ["account_id", "accountid", "subaccount_id"]
STRICT_MODE_SECRET_KEYWORDS = SECRET_KEYWORDS + STRICT_MODE_ADDITIONAL_KEYWORDS
SECRET_KEYWORDS_PATTERN = "|".join(kw.replace("_", "[-_]?") for kw in SECRET_KEYWORDS)
STRICT_MODE_SECRET_KEYWORDS_PATTERN = "|".join(
    kw.replace("_", "[-_]?") for kw in STRICT_MODE_SECRET_KEYWORDS
)
QUERY_STRING_PATTERN = re.compile(
    rf"([?&](?:{SECRET_KEYWORDS_PATTERN})=)[^&#\s;]*", re.IGNORECASE
)
STRICT_MODE_QUERY_STRING_PATTERN = re.compile(
    rf"([?&](?:{STRICT_MODE_SECRET_KEYWORDS_PATTERN})=)[^&#\s;]*", re.IGNORECASE
)
KEY_VALUE_SECRET_PATTERN = re.compile(
    rf"(?<![?&])(\b(?:{SECRET_KEYWORDS_PATTERN})\s*[:=]\s*)[^\s,;&]+", re.IGNORECASE
)
STRICT_MODE_KEY_VALUE_SECRET_PATTERN = re.compile(
    rf"(?<![?&])(\b(?:{STRICT_MODE_SECRET_KEYWORDS_PATTERN})\s*[:=]\s*)[^\s,;&]+",
    re.IGNORECASE,
)
BEARER_PATTERN = re.compile(r"Bearer\s[0-9a-zA-Z\.\-_]*", re.IGNORECASE)
USER_KEY_PATTERN = re.compile(r"\bNRAK-[0-9A-Z]+\b")
LICENSE_KEY_PATTERN = re.compile(r"\b[0-9a-fA-F]{36}NRAL\b|\b[0-9a-fA-F]{40}\b")


class Redactor(redactor.Redactor):
    """Redactor implementation using regex-based sanitization.

    Args:
        mode: Lenient or strict redaction.
        secrets: Literal values to mask wherever they appear.
        account_ids: Account ids masked in strict mode.
    """

    def __init__(
        self,
        mode: RedactorMode = RedactorMode.LENIENT,
        secrets: Iterable[str] = (),
        account_ids: Iterable[int | str] = (),
    ) -> None:
        self._mode = mode
        # Longest first so a secret containing another is masked whole.
        self._secrets = sorted({s for s in secrets if s}, key=len, reverse=True)
        self._account_ids = {str(a) for a in account_ids if a}

    def sanitize(self, text: str) -> str:
        sanitized = str(text)
        strict = self._mode == RedactorMode.STRICT

        # 1) Known secret values, verbatim
        for secret in self._secrets:
            sanitized = sanitized.replace(secret, PLACEHOLDER)

        # 2) Key shapes: user keys and license keys
        sanitized = USER_KEY_PATTERN.sub(PLACEHOLDER, sanitized)
        sanitized = LICENSE_KEY_PATTERN.sub(PLACEHOLDER, sanitized)

        # 3) Bearer tokens: Bearer <token>
        sanitized = BEARER_PATTERN.sub(PLACEHOLDER, sanitized)

        # 4) Query-string secrets
        query_pattern = (
            STRICT_MODE_QUERY_STRING_PATTERN if strict else QUERY_STRING_PATTERN
        )
        sanitized = query_pattern.sub(rf"\1{PLACEHOLDER}", sanitized)

        # 5) Key:Value and Key=Value secrets
        key_value_pattern = (
            STRICT_MODE_KEY_VALUE_SECRET_PATTERN if strict else KEY_VALUE_SECRET_PATTERN
        )
        sanitized = key_value_pattern.sub(rf"\1{PLACEHOLDER}", sanitized)

        # 6) Strict: known account ids as whole numbers
        if strict:
            for account_id in self._account_ids:
                sanitized = re.sub(
                    rf"(?<!\d){re.escape(account_id)}(?!\d)", PLACEHOLDER, sanitized
                )

        return sanitized
