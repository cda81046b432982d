"""API key resolution for NeoCities sites."""

import logging
import os
from pathlib import Path
from typing import Optional, Union

API_KEY_ENV_VAR = "NEOCITIES_API_KEY"

logger = logging.getLogger(__name__)


def read_key_file(filename: Union[str, Path]) -> str:
    """Read an entire key file.

    Intended for building a Site whose key is stored in a file.

    Raises:
        OSError: If the file cannot be opened or read
    """
    with open(filename, "rb") as f:
        return f.read().decode("utf-8")


def resolve_key(
    key: Optional[str] = None,
    keyfile: Optional[Union[str, Path]] = None,
    use_env: bool = True,
) -> str:
    """Pick the API key from the first available source.

    Precedence is the literal key, then the key file, then the
    NEOCITIES_API_KEY environment variable.

    Args:
        key: Literal API key, used as-is
        keyfile: Path of a file holding the key
        use_env: Whether to fall back to the environment

    Returns:
        The key, or an empty string if no source provided one

    Raises:
        OSError: If keyfile is given but cannot be read
    """
    if key:
        return key

    if keyfile:
        logger.debug(f"Reading API key from {keyfile}")
        return read_key_file(keyfile).strip()

    if use_env and os.environ.get(API_KEY_ENV_VAR):
        logger.debug(f"Using API key from {API_KEY_ENV_VAR}")
        return os.environ[API_KEY_ENV_VAR].strip()

    return ""
