"""
Host configuration parameters for openbid.

Defines where auction state is persisted and how the host logs.
Values can be overridden through ``OPENBID_*`` environment variables,
optionally loaded from a ``.env`` file.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


ENV_PREFIX = "OPENBID_"


@dataclass
class HostConfig:
    """Host-wide configuration parameters"""

    # Storage parameters
    data_dir: Path = Path("~/.openbid")
    db_name: str = "auction.db"

    # Logging
    log_dir: Path = Path("logs")
    log_level: int = logging.INFO
    log_to_file: bool = False

    def __post_init__(self):
        self.data_dir = Path(self.data_dir).expanduser()
        self.log_dir = Path(self.log_dir).expanduser()

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name

    def ensure_dirs(self) -> None:
        """Create necessary directories"""
        self.data_dir.mkdir(exist_ok=True, parents=True)
        if self.log_to_file:
            self.log_dir.mkdir(exist_ok=True, parents=True)


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _parse_level(value: str) -> int:
    value = value.strip()
    if value.isdigit():
        return int(value)
    level = logging.getLevelName(value.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {value}")
    return level


def load_config(env_file: Optional[str] = None) -> HostConfig:
    """
    Load configuration from the environment or use defaults.

    Args:
        env_file: Optional path to a .env file. Variables already set in
            the process environment take precedence over the file.

    Returns:
        HostConfig instance
    """
    if env_file:
        load_dotenv(env_file, override=False)

    config = HostConfig()
    env = os.environ

    if env.get(f"{ENV_PREFIX}DATA_DIR"):
        config.data_dir = Path(env[f"{ENV_PREFIX}DATA_DIR"]).expanduser()
    if env.get(f"{ENV_PREFIX}DB_NAME"):
        config.db_name = env[f"{ENV_PREFIX}DB_NAME"]
    if env.get(f"{ENV_PREFIX}LOG_DIR"):
        config.log_dir = Path(env[f"{ENV_PREFIX}LOG_DIR"]).expanduser()
    if env.get(f"{ENV_PREFIX}LOG_LEVEL"):
        config.log_level = _parse_level(env[f"{ENV_PREFIX}LOG_LEVEL"])
    if env.get(f"{ENV_PREFIX}LOG_TO_FILE"):
        config.log_to_file = _parse_bool(env[f"{ENV_PREFIX}LOG_TO_FILE"])

    return config
