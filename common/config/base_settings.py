"""
Environment-backed settings shared by every service built on `common`.

Values come from process environment variables first, then from a `.env`
file in the working directory. Names are case sensitive.

Example:
    from common.config import BaseAppSettings

    class Settings(BaseAppSettings):
        UPLOAD_SUBDIR: str = "uploads"

    settings = Settings()
    settings.validate_required()
"""

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class BaseAppSettings(BaseSettings):
    """
    Database, server and CORS settings.

    Applications subclass this and add their own fields; unknown variables
    in the environment are tolerated.
    """

    # ==========================================================================
    # Database Settings
    # ==========================================================================
    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_DATABASE: str = "app"
    MONGODB_SERVER_TIMEOUT_MS: int = 5000

    # ==========================================================================
    # Server Settings
    # ==========================================================================
    HOST: str = "0.0.0.0"
    PORT: int = 9090
    DEBUG: bool = False
    ENVIRONMENT: str = "development"  # development, staging, production, test
    LOG_LEVEL: str = "INFO"

    # CORS Settings
    CORS_ORIGINS: str = "*"  # Comma-separated origins or "*"
    CORS_ALLOW_CREDENTIALS: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="allow",
        case_sensitive=True,
    )

    def get_cors_origins(self) -> List[str]:
        """Parse CORS_ORIGINS into a list."""
        if self.CORS_ORIGINS == "*":
            return ["*"]
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"

    def collect_errors(self) -> List[str]:
        """Return configuration problems; subclasses extend the list."""
        errors = []

        if not self.MONGODB_URI:
            errors.append("MONGODB_URI is required")

        if not self.MONGODB_DATABASE:
            errors.append("MONGODB_DATABASE is required")

        if self.MONGODB_SERVER_TIMEOUT_MS <= 0:
            errors.append("MONGODB_SERVER_TIMEOUT_MS must be positive")

        if self.LOG_LEVEL.upper() not in _LOG_LEVELS:
            errors.append(f"LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}")

        return errors

    def validate_required(self) -> None:
        """
        Fail fast on a misconfigured environment.

        Raises:
            ValueError: One line per problem found by collect_errors()
        """
        errors = self.collect_errors()

        if errors:
            raise ValueError("Configuration errors:\n- " + "\n- ".join(errors))
