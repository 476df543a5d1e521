"""Credential hashing package."""

from spendwise.services.credentials.password_hasher import (
    ITERATIONS,
    KEY_SIZE,
    SALT_SIZE,
    PasswordHasher,
)

__all__ = [
    "ITERATIONS",
    "KEY_SIZE",
    "SALT_SIZE",
    "PasswordHasher",
]
