"""Credential and payload redaction for safe logging.

Apply :func:`redact` to any request description before it is logged:

* Values under credential-like keys (``X-API-Key``, ``api_key``, ...) are
  masked down to their last four characters.
* The API key, when supplied, is scrubbed from every string in the tree.
* ``bytes`` values (image payloads) become ``<binary:N_bytes>``.
"""

from __future__ import annotations

from typing import Any

# If any of these appear in a key name (case-insensitive), the value is
# redacted.
_SENSITIVE_KEY_PATTERNS: frozenset[str] = frozenset({
    "token",
    "secret",
    "password",
    "authorization",
    "api_key",
    "apikey",
    "api-key",
})


def _mask(value: str, api_key: str | None) -> str:
    """Replace a credential with a placeholder showing its last four chars."""
    secret = api_key if api_key and api_key in value else value
    suffix = secret[-4:] if len(secret) >= 8 else ""
    placeholder = f"<redacted:...{suffix}>" if suffix else "<redacted>"
    if api_key and api_key in value:
        return value.replace(api_key, placeholder)
    return placeholder


def _redact_value(value: Any, api_key: str | None) -> Any:
    if isinstance(value, dict):
        return _redact_dict(value, api_key)
    if isinstance(value, (list, tuple)):
        return [_redact_value(item, api_key) for item in value]
    if isinstance(value, (bytes, bytearray, memoryview)):
        return f"<binary:{len(value)}_bytes>"
    if isinstance(value, str) and api_key and api_key in value:
        return _mask(value, api_key)
    return value


def _redact_dict(d: dict, api_key: str | None) -> dict:
    result: dict = {}
    for key, value in d.items():
        key_lower = key.lower() if isinstance(key, str) else ""
        if any(pat in key_lower for pat in _SENSITIVE_KEY_PATTERNS):
            result[key] = _mask(value, api_key) if isinstance(value, str) else "<redacted>"
        else:
            result[key] = _redact_value(value, api_key)
    return result


def redact(payload: dict, api_key: str | None = None) -> dict:
    """Return a copy of *payload* with credentials and binary data removed.

    The original *payload* is never mutated.

    Examples
    --------
    >>> redact({"X-API-Key": "imge_1234567890abcd"})
    {'X-API-Key': '<redacted:...abcd>'}

    >>> redact({"source": ("cat.png", b"\\x89PNG", "image/png")})
    {'source': ['cat.png', '<binary:4_bytes>', 'image/png']}
    """
    return _redact_dict(payload, api_key)
