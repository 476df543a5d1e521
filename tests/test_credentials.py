"""Tests for password hashing."""

import asyncio
import base64
import hashlib

import pytest

from spendwise.services.credentials import ITERATIONS, KEY_SIZE, SALT_SIZE, PasswordHasher


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher()


class TestPasswordHasher:

    def test_hash_then_verify(self, hasher):
        encoded = hasher.hash("correct horse")
        assert hasher.verify("correct horse", encoded) is True

    def test_wrong_password_fails(self, hasher):
        encoded = hasher.hash("correct horse")
        assert hasher.verify("Correct horse", encoded) is False
        assert hasher.verify("", encoded) is False

    def test_encoded_layout(self, hasher):
        """base64 of a 16-byte salt followed by a 20-byte key."""
        raw = base64.b64decode(hasher.hash("pw"))
        assert len(raw) == SALT_SIZE + KEY_SIZE == 36

    def test_derivation_parameters(self, hasher):
        """The stored key is PBKDF2-HMAC-SHA256 with 10,000 iterations."""
        raw = base64.b64decode(hasher.hash("pw"))
        salt, key = raw[:16], raw[16:]
        assert ITERATIONS == 10_000
        assert key == hashlib.pbkdf2_hmac("sha256", b"pw", salt, 10_000, dklen=20)

    def test_salts_differ(self, hasher):
        assert hasher.hash("pw") != hasher.hash("pw")

    @pytest.mark.parametrize(
        "encoded",
        [
            "",
            "not base64 at all!",
            base64.b64encode(b"short").decode(),
            base64.b64encode(bytes(40)).decode(),
        ],
    )
    def test_malformed_hash_never_raises(self, hasher, encoded):
        assert hasher.verify("pw", encoded) is False

    def test_truncated_hash_fails(self, hasher):
        encoded = hasher.hash("pw")
        assert hasher.verify("pw", encoded[:-8]) is False

    def test_async_variants(self, hasher):
        async def scenario():
            encoded = await hasher.hash_async("pw")
            return await hasher.verify_async("pw", encoded)

        assert asyncio.run(scenario()) is True
