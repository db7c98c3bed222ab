"""Configuration loading and validation for thread-notifier."""

import logging
import os
from dataclasses import dataclass

import yaml

logger = logging.getLogger(__name__)

DEFAULT_DATABASE = "~/.local/share/thread-notifier/notifier.db"

KNOWN_KEYS = {
    "base_url",
    "database",
    "max_workers",
    "profile_endpoint",
    "profile_timeout",
}


@dataclass
class Config:
    base_url: str = "http://localhost"
    database: str = DEFAULT_DATABASE
    max_workers: int = 4
    profile_endpoint: str | None = None
    profile_timeout: float = 3


def _validate_config(config: Config) -> None:
    """Validate config values, raising ValueError on invalid fields."""
    if not isinstance(config.base_url, str) or not config.base_url:
        raise ValueError("base_url must be a non-empty string")

    if not isinstance(config.database, str) or not config.database:
        raise ValueError("database must be a non-empty string")

    # bool is an int subclass; reject it explicitly
    if not isinstance(config.max_workers, int) or isinstance(config.max_workers, bool):
        raise ValueError(
            f"max_workers must be an integer, got {type(config.max_workers).__name__}"
        )
    if config.max_workers < 1:
        raise ValueError(f"max_workers must be positive, got {config.max_workers}")

    if not isinstance(config.profile_timeout, (int, float)) or isinstance(
        config.profile_timeout, bool
    ):
        raise ValueError(
            f"profile_timeout must be a number, got {type(config.profile_timeout).__name__}"
        )
    if config.profile_timeout <= 0:
        raise ValueError(
            f"profile_timeout must be positive, got {config.profile_timeout}"
        )


def load_config(path: str | None = None) -> Config:
    """Load configuration from a YAML file.

    Config path resolution order:
    1. Explicit path argument
    2. THREAD_NOTIFIER_CONFIG_PATH environment variable
    3. ~/.config/thread-notifier/config.yaml
    """
    if path is None:
        path = os.environ.get("THREAD_NOTIFIER_CONFIG_PATH")
    if path is None:
        path = os.path.expanduser("~/.config/thread-notifier/config.yaml")

    with open(path) as f:
        raw = yaml.safe_load(f)

    if raw is None:
        raw = {}

    if not isinstance(raw, dict):
        raise ValueError(f"Config file must contain a YAML mapping, got {type(raw).__name__}")

    for key in raw:
        if key not in KNOWN_KEYS:
            logger.warning("Unknown config key '%s', ignoring", key)

    config = Config()

    if "base_url" in raw:
        config.base_url = raw["base_url"]
        if isinstance(config.base_url, str):
            config.base_url = config.base_url.rstrip("/")
    if "database" in raw:
        config.database = raw["database"]
    if "max_workers" in raw:
        config.max_workers = raw["max_workers"]
    if "profile_endpoint" in raw and raw["profile_endpoint"] is not None:
        config.profile_endpoint = str(raw["profile_endpoint"])
    if "profile_timeout" in raw:
        config.profile_timeout = raw["profile_timeout"]

    _validate_config(config)

    return config
