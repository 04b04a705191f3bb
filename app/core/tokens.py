"""Identifiers, bearer tokens and one-way digests for notes and chats."""

from __future__ import annotations

import hashlib
import hmac
import secrets
import string
import time
from typing import Optional

_BASE36_ALPHABET = string.digits + string.ascii_lowercase

ID_RANDOM_LENGTH = 8
TOKEN_BYTES = 24


def now_ms() -> int:
    """Current time in milliseconds since the Unix epoch."""
    return int(time.time() * 1000)


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36_ALPHABET[rem])
    return "".join(reversed(digits))


def generate_id() -> str:
    """Entity ID: base36 timestamp prefix followed by a random base36 suffix."""
    suffix = "".join(
        secrets.choice(_BASE36_ALPHABET) for _ in range(ID_RANDOM_LENGTH)
    )
    return _to_base36(now_ms()) + suffix


def generate_token() -> str:
    """Unguessable bearer token, hex encoded."""
    return secrets.token_hex(TOKEN_BYTES)


def hash_token(value: Optional[str]) -> Optional[str]:
    """SHA-256 hex digest of a token or session ID. Empty input has no digest."""
    if not value:
        return None
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def digests_match(stored: Optional[str], presented: Optional[str]) -> bool:
    if stored is None or presented is None:
        return False
    return hmac.compare_digest(stored, presented)
