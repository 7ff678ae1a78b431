"""Scenario file path handling for the margin simulator.

Scenario books are resolved in this order:

1. ``MARGIN_SIMULATOR_SCENARIOS_PATH`` environment variable
2. The user's config directory (XDG on Linux, via platformdirs)
3. The scenarios bundled with the package
"""

import logging
import os
from pathlib import Path
from typing import Dict, Optional

import platformdirs

# Application name used for directory paths
APP_NAME = "margin-simulator"

# Environment variable names
ENV_SCENARIOS = "MARGIN_SIMULATOR_SCENARIOS_PATH"

# Default filenames
SCENARIOS_FILENAME = "scenarios.yml"

logger = logging.getLogger(__name__)


def get_package_config_dir() -> Path:
    """Get the path to the package's bundled config directory."""
    return Path(__file__).parent / "config"


def get_user_config_dir() -> Path:
    """Get the path to the user's config directory for this application."""
    return Path(platformdirs.user_config_dir(APP_NAME))


def ensure_user_config_dir_exists() -> None:
    """Ensure that the user config directory exists.

    Raises:
        OSError: If the directory cannot be created due to permission errors or other IO issues
        PermissionError: If the directory exists but is not writable
    """
    user_dir = get_user_config_dir()

    if user_dir.exists():
        if not os.access(user_dir, os.W_OK):
            raise PermissionError(f"Config directory exists but is not writable: {user_dir}")
        return

    os.makedirs(user_dir, exist_ok=True)

    if not os.access(user_dir, os.W_OK):
        raise PermissionError(f"Created config directory but it is not writable: {user_dir}")


def copy_default_to_user_config(filename: str = SCENARIOS_FILENAME) -> bool:
    """Copy a bundled config file to the user config directory if it doesn't exist.

    Args:
        filename: Name of the config file to copy

    Returns:
        True if file was copied, False if no action was taken

    Raises:
        OSError: If there is an error creating directory or copying file
    """
    package_file = get_package_config_dir() / filename
    user_file = get_user_config_dir() / filename

    if user_file.exists():
        return False

    try:
        ensure_user_config_dir_exists()
    except OSError as e:
        logger.error(f"Failed to create user config directory: {e}")
        raise

    if package_file.exists():
        try:
            user_file.write_bytes(package_file.read_bytes())
            return True
        except OSError as e:
            logger.error(f"Failed to copy config file {filename}: {e}")
            raise

    return False


def get_scenarios_path() -> str:
    """Get the path to the scenario book, respecting the resolution order.

    Returns:
        Path to the scenario file
    """
    # 1. Check environment variable
    env_path = os.environ.get(ENV_SCENARIOS)
    if env_path and Path(env_path).is_file():
        return env_path

    # 2. Check user config directory
    user_path = get_user_config_dir() / SCENARIOS_FILENAME
    if user_path.is_file():
        return str(user_path)

    # 3. Fall back to package directory
    return str(get_package_config_dir() / SCENARIOS_FILENAME)


def describe_scenario_paths() -> Dict[str, Optional[str]]:
    """Report every candidate location and the one in effect.

    Returns:
        Mapping with ``env``, ``user``, ``bundled`` and ``effective`` entries
    """
    user_path = get_user_config_dir() / SCENARIOS_FILENAME
    return {
        "env": os.environ.get(ENV_SCENARIOS),
        "user": str(user_path) if user_path.is_file() else None,
        "bundled": str(get_package_config_dir() / SCENARIOS_FILENAME),
        "effective": get_scenarios_path(),
    }
