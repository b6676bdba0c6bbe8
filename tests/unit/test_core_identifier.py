"""Unit tests for account identifier normalization and hashing."""

import hashlib

import pytest

from src.core.identifier import hash_identifier, normalize_identifier


@pytest.mark.unit
class TestNormalizeIdentifier:
    """Test identifier normalization."""

    def test_trims_and_lowercases(self):
        """Test whitespace and case are removed."""
        assert normalize_identifier("  User@Example.COM \n") == "user@example.com"


@pytest.mark.unit
class TestHashIdentifier:
    """Test identifier hashing."""

    def test_hash_is_sha256_hex_of_normalized_value(self):
        """Test digest matches SHA-256 of the normalized identifier."""
        expected = hashlib.sha256(b"user@example.com").hexdigest()
        assert hash_identifier(" User@Example.com") == expected

    def test_equivalent_identifiers_share_a_key(self):
        """Test case and padding do not create distinct keys."""
        assert hash_identifier("USER@example.com") == hash_identifier("user@example.com  ")

    def test_distinct_identifiers_differ(self):
        """Test different accounts get different keys."""
        assert hash_identifier("a@example.com") != hash_identifier("b@example.com")

    def test_raw_identifier_not_in_key(self):
        """Test the key is a 64-char hex digest, not the identifier."""
        key = hash_identifier("user@example.com")
        assert len(key) == 64
        assert "user" not in key
        int(key, 16)
