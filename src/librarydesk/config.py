"""Configuration management for librarydesk.

Loads configuration from environment variables and provides defaults.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()

DEFAULT_JWT_SECRET = "change-me-in-production"

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@dataclass
class Config:
    """Application configuration."""

    # Database
    database_url: str

    # Authentication
    jwt_secret_key: str
    jwt_expires_minutes: int

    # Server
    host: str
    port: int

    # Logging
    log_level: str

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        database_url = os.environ.get("LIBRARYDESK_DATABASE_URL")
        if not database_url:
            db_path = Path.home() / ".librarydesk" / "library.db"
            database_url = f"sqlite:///{db_path}"

        return cls(
            database_url=database_url,
            jwt_secret_key=os.environ.get("LIBRARYDESK_JWT_SECRET", DEFAULT_JWT_SECRET),
            jwt_expires_minutes=int(os.environ.get("LIBRARYDESK_JWT_EXPIRES_MINUTES", "60")),
            host=os.environ.get("LIBRARYDESK_HOST", "127.0.0.1"),
            port=int(os.environ.get("LIBRARYDESK_PORT", "5000")),
            log_level=os.environ.get("LIBRARYDESK_LOG_LEVEL", "INFO").upper(),
        )

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []

        if self.jwt_secret_key == DEFAULT_JWT_SECRET:
            errors.append("LIBRARYDESK_JWT_SECRET is not set; using the insecure default")

        if self.jwt_expires_minutes <= 0:
            errors.append("LIBRARYDESK_JWT_EXPIRES_MINUTES must be positive")

        if not isinstance(logging.getLevelName(self.log_level), int):
            errors.append(f"Unknown log level: {self.log_level}")

        return errors


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once; later calls only adjust the level."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the global config instance."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reset_config() -> None:
    """Reset the global config instance. Used for testing."""
    global _config
    _config = None
