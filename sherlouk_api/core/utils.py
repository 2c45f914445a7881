"""
Utility helpers shared across repositories/services.
"""

from __future__ import annotations

import secrets
import time

# 15 random bytes -> 20 url-safe characters
_ID_BYTES = 15


def new_record_id() -> str:
    """Random identifier safe to embed in URL paths ([A-Za-z0-9_-])."""
    return secrets.token_urlsafe(_ID_BYTES)


def now_ms() -> int:
    """Current time as integer milliseconds since the epoch."""
    return int(time.time() * 1000)
