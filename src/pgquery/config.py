"""Configuration management for the database connection pool."""

import os
import logging
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv

from pgquery.sql.errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass
class DatabaseConfig:
    """Pool configuration with validation."""
    database_url: str
    pool_min_size: int = 1
    pool_max_size: int = 10
    command_timeout: Optional[float] = None
    log_level: str = "INFO"

    def __post_init__(self):
        """Validate configuration after initialization."""
        errors = []

        if not self.database_url or not self.database_url.startswith(('postgres://', 'postgresql://')):
            errors.append("DATABASE_URL must start with 'postgres://' or 'postgresql://'")

        if self.pool_min_size < 0:
            errors.append("PGQUERY_POOL_MIN_SIZE must be >= 0")

        if self.pool_max_size < 1:
            errors.append("PGQUERY_POOL_MAX_SIZE must be >= 1")
        elif self.pool_min_size > self.pool_max_size:
            errors.append("PGQUERY_POOL_MIN_SIZE cannot exceed PGQUERY_POOL_MAX_SIZE")

        if self.command_timeout is not None and self.command_timeout <= 0:
            errors.append("PGQUERY_COMMAND_TIMEOUT must be positive")

        if self.log_level.upper() not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            errors.append(f"LOG_LEVEL '{self.log_level}' is not a logging level")

        if errors:
            error_message = "Configuration errors:\n" + "\n".join(f"  - {e}" for e in errors)
            raise ConfigError(error_message)


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got '{value}'") from None


def load_config() -> DatabaseConfig:
    """
    Load configuration from environment variables.

    Loads from .env file if present, then from environment variables.

    Returns:
        DatabaseConfig object with validated settings
    """
    load_dotenv()

    try:
        timeout = os.getenv("PGQUERY_COMMAND_TIMEOUT")
        try:
            command_timeout = float(timeout) if timeout else None
        except ValueError:
            raise ConfigError(f"PGQUERY_COMMAND_TIMEOUT must be a number, got '{timeout}'") from None

        config = DatabaseConfig(
            database_url=os.getenv("DATABASE_URL", ""),
            pool_min_size=_int_env("PGQUERY_POOL_MIN_SIZE", 1),
            pool_max_size=_int_env("PGQUERY_POOL_MAX_SIZE", 10),
            command_timeout=command_timeout,
            log_level=os.getenv("LOG_LEVEL", "INFO")
        )
        logger.info("Configuration loaded successfully")
        return config
    except ConfigError as error:
        logger.error(f"Failed to load configuration: {error}")
        raise


def setup_logging(log_level: str = "INFO"):
    """
    Setup logging configuration.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
