"""Shared async runner for CLI commands."""

import asyncio
import logging
from typing import Any, Coroutine, TypeVar

import typer
from rich.console import Console

from src.cli.output import format_error
from src.cli.utils.config import ConfigError, ConfigManager, ThreadsConfig
from src.state import DatabaseManager, ThreadImportError, ThreadNotFoundError
from src.thread import ThreadError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def open_database() -> tuple[ThreadsConfig, DatabaseManager]:
    """Load the local config and an initialized database manager."""
    config = ConfigManager().load()
    db = DatabaseManager(config.db_path)
    await db.initialize()
    return config, db


def run_async(console: Console, coro: Coroutine[Any, Any, T], error_label: str) -> T:
    """Run async operation with standard error handling.

    Exit codes: 1 config or unexpected failure, 2 invalid input,
    5 thread not found.
    """
    try:
        return asyncio.run(coro)
    except ConfigError as e:
        format_error(console, str(e), hint="Run 'threads init' first")
        raise typer.Exit(code=1)
    except ThreadNotFoundError as e:
        format_error(console, str(e))
        raise typer.Exit(code=5)
    except (ThreadError, ThreadImportError, ValueError) as e:
        format_error(console, f"Failed to {error_label}: {e}")
        raise typer.Exit(code=2)
    except Exception as e:
        logger.debug("Failed to %s", error_label, exc_info=True)
        format_error(console, f"Failed to {error_label}: {e}")
        raise typer.Exit(code=1)
