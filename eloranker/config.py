"""Settings for the eloranker server."""

import json
import os
from pathlib import Path
from typing import Any


CONFIG_ENV = "ELORANKER_CONFIG"
DEFAULT_CONFIG_PATH = Path(".eloranker.json")
ENV_PREFIX = "ELORANKER_"


def split_origins(value: str | list[str]) -> list[str]:
    """Normalize CORS origins given as a list or a comma separated string."""
    if isinstance(value, str):
        value = value.split(",")
    return [origin.strip() for origin in value if origin.strip()]


class Settings:
    """Server settings."""

    def __init__(self, data: dict[str, Any] | None = None):
        """Initialize settings from dictionary, falling back to defaults."""
        data = data or {}
        self.host: str = data.get("host", "127.0.0.1")
        self.port: int = int(data.get("port", 3001))
        self.cors_origins: list[str] = split_origins(
            data.get("cors_origins", ["http://localhost:3000"])
        )
        store_path = data.get("store_path")
        self.store_path: Path | None = Path(store_path) if store_path else None
        self.keepalive_seconds: float = float(data.get("keepalive_seconds", 15.0))
        self.log_level: str = str(data.get("log_level", "INFO")).upper()


def env_overrides(environ: dict[str, str]) -> dict[str, Any]:
    """Collect ELORANKER_* variables as settings keys.

    ELORANKER_CORS_ORIGINS is a comma separated list.
    """
    overrides: dict[str, Any] = {}
    for name, value in environ.items():
        if not name.startswith(ENV_PREFIX) or name == CONFIG_ENV:
            continue
        key = name[len(ENV_PREFIX):].lower()
        if key == "cors_origins":
            overrides[key] = split_origins(value)
        else:
            overrides[key] = value
    return overrides


def load_settings(environ: dict[str, str] | None = None) -> Settings:
    """Load settings from the JSON config file and the environment.

    Args:
        environ: Environment to read (default: os.environ)

    Returns:
        Settings with environment values taking precedence over the file
    """
    environ = dict(os.environ if environ is None else environ)
    config_path = Path(environ.get(CONFIG_ENV, DEFAULT_CONFIG_PATH))

    data: dict[str, Any] = {}
    if config_path.exists():
        data = json.loads(config_path.read_text())

    data.update(env_overrides(environ))
    return Settings(data)
