"""
Authentication module - Pluggable password hashing.
"""

from common.auth.base import PasswordHasher
from common.auth.bcrypt_hasher import BcryptPasswordHasher

__all__ = ["PasswordHasher", "BcryptPasswordHasher"]
