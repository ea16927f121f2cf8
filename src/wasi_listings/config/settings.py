# src/wasi_listings/config/settings.py
import os
import yaml
from pathlib import Path
from typing import Optional
from dataclasses import dataclass, field
from dotenv import load_dotenv

from .constants import (
    DEFAULT_USER_AGENT,
    DEFAULT_LOCATION,
    MAX_IMAGES,
    MAX_DESCRIPTION_LENGTH,
)

# Load environment variables from .env file
load_dotenv()


class ConfigurationError(Exception):
    """Custom exception for configuration errors."""
    pass


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError as e:
        raise ConfigurationError(
            f"Environment variable {name} must be an integer, got {value!r}") from e


@dataclass
class ScraperConfig:
    user_agent: str = DEFAULT_USER_AGENT
    timeout: int = 15  # seconds, per outbound fetch
    max_images: int = MAX_IMAGES
    max_description_length: int = MAX_DESCRIPTION_LENGTH
    default_location: str = DEFAULT_LOCATION
    # Sanity bound for keyword-matched room counts
    room_count_min: int = 1
    room_count_max: int = 19
    max_concurrency: int = 3

    def __post_init__(self):
        if self.room_count_min > self.room_count_max:
            raise ConfigurationError(
                f"room_count_min ({self.room_count_min}) exceeds "
                f"room_count_max ({self.room_count_max})")
        if self.timeout <= 0:
            raise ConfigurationError("timeout must be positive")
        if self.max_concurrency < 1:
            raise ConfigurationError("max_concurrency must be at least 1")
        if not self.default_location:
            raise ConfigurationError("default_location cannot be empty")

    @classmethod
    def from_env(cls):
        return cls(
            user_agent=os.getenv("WASI_USER_AGENT", DEFAULT_USER_AGENT),
            timeout=_env_int("WASI_TIMEOUT", 15),
            default_location=os.getenv(
                "WASI_DEFAULT_LOCATION", DEFAULT_LOCATION),
            room_count_min=_env_int("WASI_ROOM_COUNT_MIN", 1),
            room_count_max=_env_int("WASI_ROOM_COUNT_MAX", 19),
            max_concurrency=_env_int("WASI_MAX_CONCURRENCY", 3),
        )


@dataclass
class LoggingConfig:
    level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_dir: str = "logs"


@dataclass
class ApiConfig:
    title: str = "Wasi Listings API"
    description: str = "Scrapes Wasi/Remax listing pages into structured property records"


class Settings:
    """Settings manager for the application."""

    def __init__(self, env: Optional[str] = None):
        self.env = env or os.getenv("APP_ENV", "development")
        self.config_dir = Path(__file__).parent

        # Load base settings
        self.scraper = ScraperConfig.from_env()
        self.logging = LoggingConfig()
        self.api = ApiConfig()

        # Load environment-specific settings
        self._load_env_settings()

    def _load_env_settings(self):
        """Load environment-specific settings from file."""
        config_file = self.config_dir / f"{self.env}.yaml"

        if config_file.exists():
            with open(config_file) as f:
                config = yaml.safe_load(f) or {}

            try:
                if "scraper" in config:
                    self.scraper = ScraperConfig(**config["scraper"])
                if "logging" in config:
                    self.logging = LoggingConfig(**config["logging"])
                if "api" in config:
                    self.api = ApiConfig(**config["api"])
            except TypeError as e:
                raise ConfigurationError(
                    f"Invalid settings in {config_file}: {e}") from e


# Create global settings instance
settings = Settings()


def get_settings(env: Optional[str] = None) -> Settings:
    """Get settings instance."""
    global settings
    if env and env != settings.env:
        settings = Settings(env)
    return settings

