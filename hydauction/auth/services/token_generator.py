"""
Session token generation.
"""

import secrets


class TokenGenerator:
    """
    Handles session token generation.
    """

    @staticmethod
    def generate_token(length: int = 32) -> str:
        """
        Generate a cryptographically secure random token.

        Args:
            length: Number of random bytes (output will be hex, so 2x length)

        Returns:
            Hex-encoded random string
        """
        return secrets.token_hex(length)
