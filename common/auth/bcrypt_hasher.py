"""
bcrypt password hashing.

Example:
    hasher = BcryptPasswordHasher(rounds=10)

    hashed = hasher.hash_password("pw1")
    assert hasher.verify_password("pw1", hashed)
"""

import base64
import hashlib

import bcrypt as bcrypt_lib

from common.auth.base import PasswordHasher


class BcryptPasswordHasher(PasswordHasher):
    """
    bcrypt hasher with SHA-256 pre-hashing.

    Plain bcrypt digests (no pre-hash) are still accepted by
    verify_password so users imported from other systems can log in.
    """

    def __init__(self, rounds: int = 10):
        """
        Initialize the hasher.

        Args:
            rounds: bcrypt cost factor (log2 of iterations, 4..31)
        """
        if not 4 <= rounds <= 31:
            raise ValueError("bcrypt rounds must be between 4 and 31")
        self.rounds = rounds

    def _prehash_password(self, password: str) -> str:
        """
        Pre-hash password with SHA-256 before bcrypt.

        This handles bcrypt's 72-byte limit and ensures consistent
        behavior across all password lengths.
        """
        sha256_hash = hashlib.sha256(password.encode("utf-8")).digest()
        return base64.b64encode(sha256_hash).decode("utf-8")

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt with SHA-256 pre-hashing."""
        prehashed = self._prehash_password(password)
        salt = bcrypt_lib.gensalt(rounds=self.rounds)
        return bcrypt_lib.hashpw(prehashed.encode("utf-8"), salt).decode("utf-8")

    def verify_password(self, password: str, hashed: str) -> bool:
        """
        Verify a password against its hash.

        Supports both pre-hashed and plain bcrypt digests.
        """
        if not hashed:
            return False

        hashed_bytes = hashed.encode("utf-8")

        prehashed = self._prehash_password(password)
        try:
            if bcrypt_lib.checkpw(prehashed.encode("utf-8"), hashed_bytes):
                return True
        except ValueError:
            # Malformed digest
            return False

        try:
            return bcrypt_lib.checkpw(password.encode("utf-8"), hashed_bytes)
        except ValueError:
            # Password too long for direct bcrypt - definitely not a match
            return False
