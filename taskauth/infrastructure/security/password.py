"""Password hashing (bcrypt with SHA-256 pre-hash).

Bcrypt truncates inputs at 72 bytes; pre-hashing with SHA-256 yields a fixed-length
input so long passwords are not silently truncated. bcrypt is CPU-bound, so the
async methods run it in a worker thread to keep the event loop responsive.
"""

import asyncio
import base64
import hashlib
import secrets
import string

import bcrypt

DEFAULT_ROUNDS = 12

_RANDOM_PASSWORD_SPECIALS = "!@#$%^&*"
_RANDOM_PASSWORD_ALPHABET = string.ascii_letters + string.digits + _RANDOM_PASSWORD_SPECIALS


def _prehash(password: str) -> bytes:
    """SHA-256 pre-hash to avoid bcrypt's 72-byte truncation."""
    return base64.b64encode(hashlib.sha256(password.encode("utf-8")).digest())


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Return True if plain_password matches hashed_password."""
    try:
        result = bcrypt.checkpw(
            _prehash(plain_password),
            hashed_password.encode("utf-8"),
        )
        return bool(result)
    except (ValueError, TypeError):
        return False


def get_password_hash(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Return bcrypt hash of password (SHA-256 pre-hashed before bcrypt)."""
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(_prehash(password), salt)
    return hashed.decode("utf-8")


def generate_random_password(length: int = 12) -> str:
    """Return a random password with at least one lower, upper and digit.

    Raises:
        ValueError: If length is below 8.
    """
    if length < 8:
        raise ValueError("Random passwords must be at least 8 characters")
    while True:
        candidate = "".join(secrets.choice(_RANDOM_PASSWORD_ALPHABET) for _ in range(length))
        if (
            any(c.islower() for c in candidate)
            and any(c.isupper() for c in candidate)
            and any(c.isdigit() for c in candidate)
        ):
            return candidate


class PasswordHasher:
    """Async one-way password hashing with a fixed bcrypt work factor."""

    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        """Initialize with bcrypt cost.

        Args:
            rounds: bcrypt log2 cost (production settings enforce >= 12;
                tests may pass a lower value for speed).
        """
        self.rounds = rounds

    async def hash(self, password: str) -> str:
        """Return a salted hash; two calls on the same input differ."""
        return await asyncio.to_thread(get_password_hash, password, self.rounds)

    async def compare(self, password: str, password_hash: str) -> bool:
        """Return True if password matches password_hash. Never raises on mismatch."""
        return await asyncio.to_thread(verify_password, password, password_hash)
