"""Tests for tenant API key generation and hashing."""

from storefront_engine.tenants.keys import (
    API_KEY_PATTERN,
    API_KEY_PREFIX,
    generate_api_key,
    hash_api_key,
)


class TestApiKeys:
    def test_format(self):
        key = generate_api_key()
        assert key.startswith(API_KEY_PREFIX)
        assert API_KEY_PATTERN.match(key)
        assert len(key) == len(API_KEY_PREFIX) + 32

    def test_unique(self):
        assert len({generate_api_key() for _ in range(200)}) == 200

    def test_hash_is_stable_and_hides_key(self):
        key = generate_api_key()
        assert hash_api_key(key) == hash_api_key(key)
        assert key not in hash_api_key(key)
        assert len(hash_api_key(key)) == 64

    def test_different_keys_different_hashes(self):
        assert hash_api_key(generate_api_key()) != hash_api_key(generate_api_key())
