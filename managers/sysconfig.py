"""
System Configuration Manager

Loads application-wide settings (API keys, timeouts) from a YAML file.
Environment variables override values from the file.
"""
import logging
import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, ValidationError

from config import DEFAULT_TIMEOUT_MS, DEFAULT_USER_AGENT, HTTP_CACHE_TTL, SYSCONFIG_PATH


class SystemConfig(BaseModel):
    unsplash_api_key: Optional[str] = None
    request_timeout_ms: int = DEFAULT_TIMEOUT_MS
    http_cache_ttl: int = HTTP_CACHE_TTL
    user_agent: str = DEFAULT_USER_AGENT


_config: Optional[SystemConfig] = None


def _load_config(path: str) -> SystemConfig:
    """Load configuration from YAML file, falling back to defaults"""
    data = {}
    if Path(path).exists():
        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            logging.error(f"Failed to parse system config {path}: {e}")
            data = {}
    else:
        logging.info(f"System config {path} not found, using defaults")

    env_key = os.getenv("UNSPLASH_API_KEY")
    if env_key:
        data["unsplash_api_key"] = env_key

    try:
        config = SystemConfig(**data)
    except ValidationError as e:
        logging.error(f"Invalid system config {path}: {e}")
        config = SystemConfig(unsplash_api_key=env_key or None)

    logging.info(f"Loaded system config: unsplash_configured={bool(config.unsplash_api_key)}, "
                 f"timeout={config.request_timeout_ms}ms")
    return config


async def get_config() -> SystemConfig:
    """Return the application configuration, loading it on first use"""
    global _config
    if _config is None:
        _config = _load_config(SYSCONFIG_PATH)
    return _config


def reload_config() -> None:
    """Drop the loaded configuration so the next get_config() rereads it"""
    global _config
    _config = None
