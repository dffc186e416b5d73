"""
Abstract password hashing interface.

Defines the contract that all password hashers must implement.
This allows swapping the one-way hashing strategy without changing
application code.

Example:
    from common.auth import PasswordHasher, BcryptPasswordHasher

    def get_password_hasher(settings) -> PasswordHasher:
        return BcryptPasswordHasher(rounds=settings.BCRYPT_ROUNDS)
"""

from abc import ABC, abstractmethod


class PasswordHasher(ABC):
    """
    Abstract one-way password hasher.

    Both operations are expected to be deliberately slow; callers on an
    event loop should run them in a worker thread.
    """

    @abstractmethod
    def hash_password(self, password: str) -> str:
        """
        Hash a raw password.

        Args:
            password: Raw password

        Returns:
            Salted digest suitable for storage
        """
        pass

    @abstractmethod
    def verify_password(self, password: str, hashed: str) -> bool:
        """
        Check a raw password against a stored digest.

        Args:
            password: Raw password
            hashed: Digest produced by hash_password

        Returns:
            True if the password matches
        """
        pass
