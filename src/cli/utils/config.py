"""Configuration file management for CLI."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from src.thread import Participant

_LOG_LEVELS = frozenset(("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"))


@dataclass
class ThreadsConfig:
    """Local identity and storage location loaded from config file."""

    participant_id: str
    db_path: Path
    name: Optional[str] = None

    @property
    def participant(self) -> Participant:
        return Participant(self.participant_id, self.name)


class ConfigError(Exception):
    """Configuration file error."""

    pass


class ConfigManager:
    """Manages the local identity in ~/.threads/config.yaml.

    ``THREADS_CONFIG_DIR`` overrides the default directory.
    """

    DEFAULT_DIR = Path.home() / ".threads"
    CONFIG_FILE = "config.yaml"
    DB_FILE = "threads.db"

    def __init__(self, config_dir: Optional[Path] = None) -> None:
        env_dir = os.environ.get("THREADS_CONFIG_DIR")
        self._config_dir = config_dir or (Path(env_dir) if env_dir else self.DEFAULT_DIR)
        self._config_path = self._config_dir / self.CONFIG_FILE
        self._db_path = self._config_dir / self.DB_FILE

    @property
    def config_dir(self) -> Path:
        return self._config_dir

    @property
    def config_path(self) -> Path:
        return self._config_path

    @property
    def db_path(self) -> Path:
        return self._db_path

    def exists(self) -> bool:
        """Check if configuration exists."""
        return self._config_path.exists()

    def load(self) -> ThreadsConfig:
        """Load configuration from file. Raises ConfigError if not found."""
        if not self._config_path.exists():
            raise ConfigError(
                f"Config not found at {self._config_path}. Run 'threads init' first."
            )

        try:
            with open(self._config_path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid config file: {e}") from e

        if not isinstance(data, dict) or not data.get("participant_id"):
            raise ConfigError("Invalid config: missing participant_id")

        return ThreadsConfig(
            participant_id=str(data["participant_id"]),
            name=data.get("name"),
            db_path=self._db_path,
        )

    def save(self, participant_id: str, name: Optional[str] = None) -> None:
        """Save configuration to file."""
        self._config_dir.mkdir(parents=True, exist_ok=True)

        config_data = {"participant_id": participant_id}
        if name:
            config_data["name"] = name

        with open(self._config_path, "w") as f:
            yaml.safe_dump(config_data, f, default_flow_style=False)


def log_level_from_env(verbose: bool = False) -> int:
    """Resolve the log level from ``THREADS_LOG_LEVEL``.

    ``verbose`` forces DEBUG. Unrecognised names fall back to WARNING
    with a warning logged once logging is configured.
    """
    if verbose:
        return logging.DEBUG
    value = os.environ.get("THREADS_LOG_LEVEL", "").strip().upper()
    if not value:
        return logging.WARNING
    if value not in _LOG_LEVELS:
        logging.getLogger(__name__).warning(
            "Unrecognised log level %r, using WARNING. Expected one of: %s",
            value, ", ".join(sorted(_LOG_LEVELS)),
        )
        return logging.WARNING
    return getattr(logging, value)
