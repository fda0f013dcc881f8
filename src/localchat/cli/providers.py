"""Provider factory functions for CLI.

Centralizes creation of the message store, completion client and chat
controller from environment variables. Hides configuration details from
command implementations.
"""

import os
from typing import Any

from rich.console import Console
from rich.markup import escape

from ..chat import ChatController
from ..completion import create_completion_client
from ..completion.ollama import DEFAULT_BASE_URL, DEFAULT_MODEL, DEFAULT_TIMEOUT
from ..store import MessageStore, create_message_store

# Default console for output
_console = Console()

DEFAULT_STORE = "sqlite"
DEFAULT_DB_PATH = "./localchat.db"


def get_store(backend: str | None = None, db_path: str | None = None) -> MessageStore:
    """Create message store from environment variables.

    Args:
        backend: Overrides LOCALCHAT_STORE
        db_path: Overrides LOCALCHAT_DB_PATH

    Returns:
        Message store instance (not yet connected)

    Environment variables:
        LOCALCHAT_STORE: 'sqlite' (persistent) or 'memory' (default: sqlite)
        LOCALCHAT_DB_PATH: SQLite database file (default: ./localchat.db)
    """
    backend = (backend or os.getenv("LOCALCHAT_STORE", DEFAULT_STORE)).lower()
    if backend == "sqlite":
        path = db_path or os.getenv("LOCALCHAT_DB_PATH", DEFAULT_DB_PATH)
        return create_message_store("sqlite", path=path)
    return create_message_store(backend)


def get_client(model: str | None = None, console: Console | None = None) -> Any:
    """Create completion client from environment variables.

    Args:
        model: Overrides OLLAMA_MODEL
        console: Optional Rich console for output

    Returns:
        Ollama completion client instance

    Raises:
        SystemExit: If OLLAMA_TIMEOUT is not a number

    Environment variables:
        OLLAMA_BASE_URL: Server root URL (default: http://localhost:11434)
        OLLAMA_MODEL: Model name (default: mistral)
        OLLAMA_TIMEOUT: Request timeout in seconds (default: 60)
    """
    import typer

    con = console or _console
    raw_timeout = os.getenv("OLLAMA_TIMEOUT", str(DEFAULT_TIMEOUT))
    try:
        timeout = float(raw_timeout)
    except ValueError:
        con.print(f"[red]Error: OLLAMA_TIMEOUT must be a number, got {raw_timeout!r}[/red]")
        raise typer.Exit(code=1)

    return create_completion_client(
        "ollama",
        model=model or os.getenv("OLLAMA_MODEL", DEFAULT_MODEL),
        base_url=os.getenv("OLLAMA_BASE_URL", DEFAULT_BASE_URL),
        timeout=timeout,
    )


def get_controller(
    store: MessageStore,
    client: Any,
    verbose: bool = False,
    console: Console | None = None,
) -> ChatController:
    """Create a chat controller that logs through the console.

    Args:
        store: Connected message store
        client: Completion client
        verbose: Print debug and info messages, not only warnings and errors
        console: Optional Rich console for output
    """
    con = console or _console
    controller = ChatController(store, client)

    level_styles = {
        "debug": "dim",
        "info": "dim cyan",
        "warning": "yellow",
        "error": "red",
    }

    def debug_callback(level: str, component: str, message: str) -> None:
        """Route debug messages to the console."""
        if level in ("debug", "info") and not verbose:
            return
        style = level_styles.get(level, "white")
        con.print(f"[{style}]{escape(f'[{component}] {message}')}[/{style}]")

    controller.set_debug_callback(debug_callback)
    return controller
