"""Environment driven settings.

Values are read on every call so that changes to the process environment are
picked up without reimporting the package.
"""

from __future__ import annotations

import codecs
import os

ENCODING_ENV = "PATHHANDLE_ENCODING"
ATOMIC_WRITES_ENV = "PATHHANDLE_ATOMIC_WRITES"

_DEFAULT_ENCODING = "utf-8"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def default_encoding() -> str:
    """Return the text encoding used when callers don't pass one."""

    raw = os.getenv(ENCODING_ENV)
    if raw is None:
        return _DEFAULT_ENCODING
    value = raw.strip()
    if not value:
        return _DEFAULT_ENCODING
    try:
        codecs.lookup(value)
    except LookupError:
        return _DEFAULT_ENCODING
    return value


def atomic_writes_enabled() -> bool:
    return _env_bool(ATOMIC_WRITES_ENV, False)
