"""Tenant API key generation and hashing.

Keys look like ``os_live_<32 lowercase hex>``; the prefix is part of the
public wire contract. Only the SHA-256 hash is stored.
"""

import hashlib
import re
import secrets

API_KEY_PREFIX = "os_live_"
API_KEY_PATTERN = re.compile(r"^os_live_[0-9a-f]{32}$")


def generate_api_key() -> str:
    """New key from 128 bits of CSPRNG output."""
    return f"{API_KEY_PREFIX}{secrets.token_hex(16)}"


def hash_api_key(raw_key: str) -> str:
    """SHA-256 hash of a raw API key for storage."""
    return hashlib.sha256(raw_key.encode()).hexdigest()
