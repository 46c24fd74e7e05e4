"""Initialize the local participant identity."""

import typer
from rich.console import Console

from src.cli.output import format_error, format_success, json_output
from src.cli.utils import ConfigManager, validate_participant_id

console = Console()


def init_command(
    participant_id: str,
    name: str | None,
    force: bool,
    json_flag: bool,
) -> None:
    """Initialize participant configuration.

    Creates ~/.threads/config.yaml holding the identity used to post,
    read and delete threads.
    """
    try:
        participant_id = validate_participant_id(participant_id)
    except ValueError as e:
        format_error(console, str(e))
        raise typer.Exit(code=2)

    config = ConfigManager()

    if config.exists() and not force:
        format_error(
            console,
            f"Configuration already exists at {config.config_path}",
            hint="Use --force to overwrite existing configuration",
        )
        raise typer.Exit(code=1)

    config.save(participant_id, name)

    if json_flag:
        json_output(
            console,
            {
                "status": "initialized",
                "participant_id": participant_id,
                "name": name,
                "config_path": str(config.config_path),
            },
        )
    else:
        format_success(console, "Participant initialized successfully")
        console.print(f"[cyan]Participant:[/cyan] {participant_id}")
        if name:
            console.print(f"[cyan]Name:[/cyan]        {name}")
        console.print(f"[cyan]Config:[/cyan]      {config.config_path}")
