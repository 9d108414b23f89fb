"""TOML configuration loader with deep merge support."""

import os
import tomllib
from pathlib import Path
from typing import Any


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Overridden with the MFLIX_CONFIG_DIR env var. Otherwise the nearest
    'config/' directory from the current directory upwards is used.
    """
    config_dir_env = os.environ.get("MFLIX_CONFIG_DIR")
    if config_dir_env:
        path = Path(config_dir_env)
        if not path.exists():
            raise FileNotFoundError(f"Config directory not found: {config_dir_env}")
        return path

    current = Path.cwd()
    for _ in range(5):
        config_path = current / "config"
        if config_path.exists():
            return config_path
        current = current.parent

    return Path("config")


DEFAULT_MONGODB_URI = "mongodb://localhost:27017"


def get_mongodb_uri() -> str:
    """Get the MongoDB connection string from the environment.

    MFLIX_MONGODB_URI wins over the conventional MONGODB_URI. Falls back
    to a local server.
    """
    return (
        os.environ.get("MFLIX_MONGODB_URI")
        or os.environ.get("MONGODB_URI")
        or DEFAULT_MONGODB_URI
    )


def get_environment() -> str:
    """Get the current environment from MFLIX_ENV (default 'development')."""
    return os.environ.get("MFLIX_ENV", "development")


def load_toml(file_path: Path) -> dict[str, Any]:
    """Load a TOML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the TOML syntax is invalid
    """
    if not file_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {file_path}")

    with file_path.open("rb") as f:
        return tomllib.load(f)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge ``override`` into a copy of ``base``, recursing into nested tables."""
    result = base.copy()

    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_config() -> dict[str, Any]:
    """Load configuration from TOML files.

    Loading order:
    1. config/default.toml (required)
    2. config/{MFLIX_ENV}.toml (optional)
    """
    config_dir = get_config_dir()

    default_path = config_dir / "default.toml"
    if not default_path.exists():
        raise FileNotFoundError(
            f"Default configuration file not found: {default_path}. "
            "Create config/default.toml or set MFLIX_CONFIG_DIR."
        )

    config = load_toml(default_path)

    env_path = config_dir / f"{get_environment()}.toml"
    if env_path.exists():
        config = deep_merge(config, load_toml(env_path))

    return config
