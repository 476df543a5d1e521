"""
Password Hashing

Stored passwords are encoded as base64(salt || derived_key):
- salt: 16 random bytes
- derived_key: 20 bytes of PBKDF2-HMAC-SHA256 over the UTF-8 password,
  10,000 iterations

CRITICAL: These parameters are part of the persisted format. Changing any
of them makes every stored password unverifiable, so they are constants,
not settings. A change needs a migration that re-hashes on next login.
"""

import asyncio
import base64
import binascii
import hashlib
import hmac
import secrets

import structlog


SALT_SIZE = 16
KEY_SIZE = 20
ITERATIONS = 10_000
HASH_NAME = "sha256"
ENCODED_SIZE = SALT_SIZE + KEY_SIZE


logger = structlog.get_logger(__name__)


def _derive_key(password: str, salt: bytes) -> bytes:
    return hashlib.pbkdf2_hmac(
        HASH_NAME,
        password.encode("utf-8"),
        salt,
        ITERATIONS,
        dklen=KEY_SIZE,
    )


class PasswordHasher:
    """
    Derives and verifies salted password hashes.

    The sync methods do the CPU-bound work; the async variants run it in a
    worker thread so registration and login do not stall the event loop.
    """

    def hash(self, password: str) -> str:
        """Hash a password with a fresh random salt."""
        salt = secrets.token_bytes(SALT_SIZE)
        derived = _derive_key(password, salt)
        return base64.b64encode(salt + derived).decode("ascii")

    def verify(self, password: str, encoded: str) -> bool:
        """
        Check a password against a stored hash.

        Any malformed or truncated hash counts as a mismatch.
        """
        try:
            raw = base64.b64decode(encoded, validate=True)
            if len(raw) != ENCODED_SIZE:
                return False
            salt, expected = raw[:SALT_SIZE], raw[SALT_SIZE:]
            return hmac.compare_digest(_derive_key(password, salt), expected)
        except (binascii.Error, ValueError, TypeError, AttributeError) as e:
            logger.warning("password_verification_failed", error=str(e))
            return False

    async def hash_async(self, password: str) -> str:
        return await asyncio.to_thread(self.hash, password)

    async def verify_async(self, password: str, encoded: str) -> bool:
        return await asyncio.to_thread(self.verify, password, encoded)
