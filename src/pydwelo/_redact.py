"""Helpers for safe debug logging.

Every Dwelo request carries the account API token in its ``Authorization``
header, and tokens also show up in error bodies echoed back by the API.
``redact_for_log`` masks both before anything reaches a DEBUG log.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any

_SENSITIVE_KEYS: frozenset[str] = frozenset({"authorization", "token", "cookie", "set-cookie", "password"})

# "Token abc123" as sent in the Authorization header.
_TOKEN_PATTERN = re.compile(r"\bToken\s+\S+", re.IGNORECASE)

_MAX_DEPTH = 20


def _redact_str(value: str, max_string: int) -> str:
    value = _TOKEN_PATTERN.sub("Token <redacted>", value)
    if len(value) > max_string:
        return f"{value[:max_string]}…<truncated>"
    return value


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a redacted copy of *value* suitable for debug logs.

    Mapping entries whose key names a credential are replaced wholesale;
    strings are scrubbed of inline ``Token ...`` credentials and truncated
    to *max_string* characters.
    """
    if _depth > _MAX_DEPTH:
        return "<max-depth>"

    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, str):
        return _redact_str(value, max_string)
    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"

    if isinstance(value, Mapping):
        return {
            str(key): (
                "<redacted>"
                if str(key).lower() in _SENSITIVE_KEYS
                else redact_for_log(item, max_string=max_string, _depth=_depth + 1)
            )
            for key, item in value.items()
        }

    if isinstance(value, Sequence):
        return [redact_for_log(item, max_string=max_string, _depth=_depth + 1) for item in value]

    return repr(value)
