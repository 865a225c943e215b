"""Configuration management for the trait explorer.

Provides:
- Config: base class with dict / JSON round-tripping
- LoadConfig: where records come from and how they are fetched
- AppConfig: web application settings read from environment variables
"""

import json
import os as _os
from pathlib import Path
from typing import Any, Dict, Optional

from engine.filters import NoResultsPolicy

# Number of numbered record files in a full collection.
DEFAULT_RECORD_COUNT = 1600


class Config:
    """Base configuration class for organizing application settings."""

    def __init__(self):
        """Initialize configuration with default values."""
        pass

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary.

        Returns:
            Dictionary of all config attributes
        """
        return {k: v for k, v in self.__dict__.items() if not k.startswith("_")}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create config from dictionary.

        Keys that are not already attributes of the config are ignored.
        """
        config = cls()
        for key, value in data.items():
            if not hasattr(config, key):
                continue
            current = getattr(config, key)
            if isinstance(current, Path) and value is not None:
                value = Path(value)
            setattr(config, key, value)
        return config

    def save_json(self, path: Path) -> None:
        """Save configuration to JSON file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2, default=str)

    @classmethod
    def load_json(cls, path: Path) -> "Config":
        """Load configuration from JSON file.

        Raises:
            FileNotFoundError: If file doesn't exist
            json.JSONDecodeError: If file is not valid JSON
        """
        with open(path, "r") as f:
            data = json.load(f)
        return cls.from_dict(data)


class LoadConfig(Config):
    """Configuration for loading the record collection.

    Exactly one shape is used, checked in this order:
    ``combined_url`` → ``data_url`` → ``combined_file`` → ``data_dir``.
    """

    def __init__(self):
        """Initialize load configuration."""
        super().__init__()
        self.data_dir = Path("public/json")
        self.record_count = DEFAULT_RECORD_COUNT
        self.combined_file: Optional[Path] = None
        self.data_url: Optional[str] = None
        self.combined_url: Optional[str] = None
        self.workers = 8
        self.timeout_seconds = 30.0
        self.max_retries = 3
        self.backoff_factor = 0.5


class AppConfig(Config):
    """Application-level configuration loaded from environment variables.

    All env vars have sensible defaults so the application works out of the
    box without any configuration.

    Environment variables:
        APP_DATA_DIR: Directory holding 1.json .. N.json (default: public/json)
        APP_RECORD_COUNT: Number of numbered records to request (default: 1600)
        APP_COMBINED_FILE: Pre-joined JSON array file; overrides APP_DATA_DIR
        APP_DATA_URL: Base URL serving 1.json .. N.json; overrides local files
        APP_COMBINED_URL: URL of a pre-joined JSON array; overrides the rest
        APP_LOAD_WORKERS: Concurrent record fetches (default: 8)
        APP_HTTP_TIMEOUT: Per-request timeout in seconds (default: 30)
        APP_HTTP_RETRIES: Retries per request for HTTP sources (default: 3)
        APP_NO_RESULTS_POLICY: "empty" or "sentinel" (default: empty)
        APP_LOG_FORMAT: Logging format — "text" or "json" (default: text)
        APP_CORS_ORIGINS: Comma-separated allowed origins (default: *)
        APP_HOST: API server bind address (default: 127.0.0.1)
        APP_PORT: API server port (default: 8000)

    Raises:
        ValueError: If a numeric variable is not a number or the policy is
            unknown.
    """

    def __init__(self) -> None:
        super().__init__()
        load = LoadConfig()
        load.data_dir = Path(_os.getenv("APP_DATA_DIR", str(load.data_dir)))
        load.record_count = _int_env("APP_RECORD_COUNT", load.record_count)
        combined = _os.getenv("APP_COMBINED_FILE")
        load.combined_file = Path(combined) if combined else None
        load.data_url = _os.getenv("APP_DATA_URL") or None
        load.combined_url = _os.getenv("APP_COMBINED_URL") or None
        load.workers = _int_env("APP_LOAD_WORKERS", load.workers)
        load.timeout_seconds = float(_os.getenv("APP_HTTP_TIMEOUT", str(load.timeout_seconds)))
        load.max_retries = _int_env("APP_HTTP_RETRIES", load.max_retries)
        self.load = load

        self.no_results_policy = NoResultsPolicy.parse(
            _os.getenv("APP_NO_RESULTS_POLICY", "empty")
        )
        self.log_format = _os.getenv("APP_LOG_FORMAT", "text")
        raw_origins = _os.getenv("APP_CORS_ORIGINS", "*")
        self.cors_origins: list[str] = (
            ["*"] if raw_origins == "*"
            else [o.strip() for o in raw_origins.split(",") if o.strip()]
        )
        self.api_host = _os.getenv("APP_HOST", "127.0.0.1")
        self.api_port = _int_env("APP_PORT", 8000)

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create an AppConfig instance populated from environment variables."""
        return cls()

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d["load"] = self.load.to_dict()
        d["no_results_policy"] = self.no_results_policy.value
        return d


def _int_env(name: str, default: int) -> int:
    raw = _os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
