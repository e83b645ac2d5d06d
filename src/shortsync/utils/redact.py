"""API key / payload redaction for safe logging.

Before any Short.io request or response is written to logs or debug dumps
the :func:`redact` function must be applied:

* values under **sensitive keys** (``authorization``, ``api_key``,
  ``token``, ...) are replaced with a masked placeholder that shows only
  the last four characters of the API key;
* the full **API key is never present** in the output, wherever it
  appears in the tree.
"""

from __future__ import annotations

import copy
from typing import Any

# If any of these appear in a key name (case-insensitive), the value is
# redacted.
_SENSITIVE_KEY_PATTERNS: frozenset[str] = frozenset({
    "token",
    "secret",
    "password",
    "authorization",
    "cookie",
    "api_key",
    "apikey",
    "api-key",
})


def _placeholder(api_key: str | None) -> str:
    if api_key and len(api_key) >= 4:
        return f"<redacted:...{api_key[-4:]}>"
    return "<redacted>"


def _redact_value(value: Any, api_key: str | None) -> Any:
    """Redact a single value (recursive for dicts / lists)."""
    if isinstance(value, dict):
        return _redact_dict(value, api_key)
    if isinstance(value, list):
        return [_redact_value(item, api_key) for item in value]
    if isinstance(value, str) and api_key and api_key in value:
        return value.replace(api_key, _placeholder(api_key))
    return value


def _redact_dict(d: dict, api_key: str | None) -> dict:
    result: dict = {}
    for key, value in d.items():
        key_lower = key.lower() if isinstance(key, str) else ""
        if any(pat in key_lower for pat in _SENSITIVE_KEY_PATTERNS):
            result[key] = _placeholder(api_key)
        else:
            result[key] = _redact_value(value, api_key)
    return result


def redact(payload: dict, api_key: str | None = None) -> dict:
    """Return a deep copy of *payload* with sensitive data redacted.

    Parameters
    ----------
    payload:
        The dictionary to sanitize (a request body, headers, or a debug
        dump).
    api_key:
        The Short.io API key.  If supplied, any occurrence of this exact
        string anywhere in the payload is replaced.

    Examples
    --------
    >>> redact({"authorization": "sk_live_abcd1234"}, "sk_live_abcd1234")
    {'authorization': '<redacted:...1234>'}
    """
    safe = copy.deepcopy(payload)
    return _redact_dict(safe, api_key)
