"""
HydAuction application settings.

Extends the base settings with session, upload and listing configuration.
"""

from datetime import timedelta
from typing import List

from common.config import BaseAppSettings


class Settings(BaseAppSettings):
    """HydAuction-specific settings."""

    MONGODB_DATABASE: str = "hydauction"

    # ==========================================================================
    # Session Settings
    # ==========================================================================
    SESSION_COOKIE_NAME: str = "sessionId"
    SESSION_COOKIE_SECURE: bool = False
    SESSION_MAX_AGE_MINUTES: int = 60
    SESSION_SWEEP_INTERVAL_MINUTES: int = 10

    # bcrypt cost factor
    BCRYPT_ROUNDS: int = 10

    # ==========================================================================
    # Files
    # ==========================================================================
    STATIC_DIR: str = "static"
    PUBLIC_DIR: str = "public"
    UPLOAD_SUBDIR: str = "uploads"
    PUBLIC_URL_PREFIX: str = "/public"

    # ==========================================================================
    # Listings
    # ==========================================================================
    # Wrap image + item deletion in one transaction (needs a replica set)
    ITEM_DELETE_USE_TRANSACTION: bool = False

    @property
    def session_max_age(self) -> timedelta:
        return timedelta(minutes=self.SESSION_MAX_AGE_MINUTES)

    @property
    def session_sweep_interval(self) -> timedelta:
        return timedelta(minutes=self.SESSION_SWEEP_INTERVAL_MINUTES)

    def collect_errors(self) -> List[str]:
        errors = super().collect_errors()

        if self.SESSION_MAX_AGE_MINUTES <= 0:
            errors.append("SESSION_MAX_AGE_MINUTES must be positive")

        if self.SESSION_SWEEP_INTERVAL_MINUTES <= 0:
            errors.append("SESSION_SWEEP_INTERVAL_MINUTES must be positive")

        if not 4 <= self.BCRYPT_ROUNDS <= 31:
            errors.append("BCRYPT_ROUNDS must be between 4 and 31")

        if not self.SESSION_COOKIE_NAME:
            errors.append("SESSION_COOKIE_NAME is required")

        return errors


# Global settings instance
settings = Settings()
