"""Configuration management for the NeoCities client.

Configuration is loaded from an optional JSON file and then from
environment variables, which take precedence.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, Field, ValidationError, field_validator

DEFAULT_BASE_URL = "https://neocities.org"
DEFAULT_LOG_LEVEL = "warning"
VALID_LOG_LEVELS = ["debug", "info", "warning", "error"]

logger = logging.getLogger(__name__)


class ClientConfig(BaseModel):
    """Configuration for NeoCities API access."""

    base_url: str = Field(
        default=DEFAULT_BASE_URL, description="Scheme and host of the NeoCities API"
    )
    timeout: Optional[float] = Field(
        default=None,
        description="Request timeout in seconds (None waits indefinitely)",
    )
    log_level: str = Field(
        default=DEFAULT_LOG_LEVEL, description="Logging level for the CLI"
    )

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        if not v:
            raise ValueError("base_url cannot be empty")
        if not v.startswith(("https://", "http://")):
            raise ValueError(f"base_url must be an http(s) URL. Got: {v}")
        return v.rstrip("/")

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v <= 0:
            raise ValueError(f"timeout must be positive. Got: {v}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.lower()
        if v not in VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {VALID_LOG_LEVELS}. Got: {v}")
        return v


def load_config(
    config_path: Optional[Union[str, Path]] = None, use_env: bool = True
) -> ClientConfig:
    """Load configuration from file and/or environment variables.

    Args:
        config_path: Path to a JSON config file (optional)
        use_env: Whether environment variables override file values

    Returns:
        ClientConfig instance

    Raises:
        FileNotFoundError: If config_path is given but does not exist
        ValueError: If the file is not valid JSON or a value is invalid

    Environment Variables:
        NEOCITIES_BASE_URL: API scheme and host
        NEOCITIES_TIMEOUT: Request timeout in seconds
        NEOCITIES_LOG_LEVEL: Logging level
    """
    config_data: Dict[str, Any] = {}

    if config_path is not None:
        path = Path(config_path).expanduser()
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        try:
            with open(path, encoding="utf-8") as f:
                config_data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in configuration file: {e}")

        if not isinstance(config_data, dict):
            raise ValueError(f"Configuration file must contain a JSON object: {path}")
        logger.debug(f"Loaded configuration from {path}")

    if use_env:
        if "NEOCITIES_BASE_URL" in os.environ:
            config_data["base_url"] = os.environ["NEOCITIES_BASE_URL"]
        if "NEOCITIES_TIMEOUT" in os.environ:
            try:
                config_data["timeout"] = float(os.environ["NEOCITIES_TIMEOUT"])
            except ValueError:
                raise ValueError(
                    f"NEOCITIES_TIMEOUT must be a number. Got: {os.environ['NEOCITIES_TIMEOUT']}"
                )
        if "NEOCITIES_LOG_LEVEL" in os.environ:
            config_data["log_level"] = os.environ["NEOCITIES_LOG_LEVEL"]

    try:
        return ClientConfig(**config_data)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}")
