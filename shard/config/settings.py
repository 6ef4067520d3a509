"""
Shard Configuration Settings

This module contains all configuration constants for the Shard server.
Values can be overridden through environment variables at startup.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Server configuration settings."""

    # Network settings
    HOST: str = os.environ.get("SHARD_HOST", "0.0.0.0")
    PORT: int = int(os.environ.get("SHARD_PORT", "8080"))

    # Service identity (reported by /health)
    SERVICE_NAME: str = "shard"

    # Routing
    KV_PREFIX: str = "/kv/"

    # Logging settings
    DEBUG: bool = os.environ.get("SHARD_DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.environ.get("SHARD_LOG_LEVEL", "INFO")


# Global settings instance
settings = Settings()
