"""Shared utilities for the trait explorer: configuration and HTTP access."""

# Configuration
from utils.config import (
    AppConfig,
    Config,
    DEFAULT_RECORD_COUNT,
    LoadConfig,
)

# HTTP utilities
from utils.http import (
    RetryStrategy,
    SessionManager,
    fetch_json,
)

__all__ = [
    # Config
    "AppConfig",
    "Config",
    "DEFAULT_RECORD_COUNT",
    "LoadConfig",
    # HTTP
    "RetryStrategy",
    "SessionManager",
    "fetch_json",
]
