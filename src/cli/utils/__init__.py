"""CLI utilities."""

from .config import ConfigError, ConfigManager, ThreadsConfig, log_level_from_env
from .validation import (
    validate_message_body,
    validate_participant_id,
    validate_subject,
    validate_thread_id,
    validate_timestamp,
)

__all__ = [
    "ConfigError",
    "ConfigManager",
    "ThreadsConfig",
    "log_level_from_env",
    "validate_message_body",
    "validate_participant_id",
    "validate_subject",
    "validate_thread_id",
    "validate_timestamp",
]
