"""Factory functions for CLI commands.

Centralizes creation of settings, the agent connection, session memory and
the sheet client. Hides configuration details from command implementations.
"""

from typing import Any

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from ..agent import AgentConnection
from ..config import Settings
from ..memory import SessionMemory
from ..sheet import SheetClient
from ..ui.app import build_connection, build_memory
from ..ui.config import LogLevel

# Default console for output
_console = Console()


def get_settings(console: Console | None = None) -> Settings:
    """Load settings from .env and the environment.

    Raises:
        typer.Exit: If a variable holds an invalid value
    """
    con = console or _console
    try:
        return Settings.from_env()
    except ValidationError as e:
        con.print("[red]Error: invalid configuration[/red]")
        for error in e.errors():
            field = ".".join(str(part) for part in error["loc"])
            con.print(f"[red]  STOCKCHAT_{field.upper()}: {error['msg']}[/red]")
        raise typer.Exit(code=1)


def get_connection(settings: Settings) -> AgentConnection:
    """Create the agent connection."""
    return build_connection(settings)


def get_memory(settings: Settings) -> SessionMemory:
    """Create the session memory backend."""
    return build_memory(settings)


def get_sheet_client(settings: Settings, console: Console | None = None) -> SheetClient:
    """Create the sheet client.

    Raises:
        typer.Exit: If STOCKCHAT_SHEET_ID is not set
    """
    con = console or _console
    if not settings.sheet_id:
        con.print("[red]Error: STOCKCHAT_SHEET_ID not set in environment[/red]")
        raise typer.Exit(code=1)
    return SheetClient(settings.sheet_id, settings.sheet_gid, timeout=settings.request_timeout)


def make_debug_callback(console: Console | None = None, level: str = "debug") -> Any:
    """Build a debug callback that prints to the console.

    Args:
        console: Console to print to
        level: Minimum level shown (debug/info/warning/error)

    Returns:
        Callable(level, component, message)
    """
    con = console or _console
    threshold = LogLevel.from_string(level)
    colors = {"debug": "dim", "info": "cyan", "warning": "yellow", "error": "red"}

    def debug_callback(msg_level: str, component: str, message: str) -> None:
        if LogLevel.from_string(msg_level) < threshold:
            return
        color = colors.get(msg_level, "white")
        con.print(f"[{color}]\\[{component}][/{color}] {escape(message)}", highlight=False)

    return debug_callback
