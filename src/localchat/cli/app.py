"""Main CLI application using Typer."""
import asyncio

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..chat import ChatController
from ..errors import StorageError
from .providers import get_client, get_controller, get_store

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="localchat",
    help="Chat with a locally hosted Ollama model, with persistent history",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()


def _print_error(error: Exception) -> None:
    console.print(f"[red]Error: {escape(str(error))}[/red]")


def _last_reply(controller: ChatController) -> str | None:
    for message in reversed(controller.state.messages):
        if not message.is_from_user:
            return message.text
    return None


@app.command()
def ask(
    prompt: str = typer.Argument(..., help="Prompt to send"),
    model: str | None = typer.Option(None, "--model", "-m", help="Model name (default: $OLLAMA_MODEL or mistral)"),
    store_backend: str | None = typer.Option(None, "--store", help="Message store: 'sqlite' or 'memory'"),
    db_path: str | None = typer.Option(None, "--db-path", help="Path of the SQLite history database"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug output"),
):
    """Send a single prompt and print the reply."""
    async def _ask():
        if not prompt.strip():
            console.print("[dim]Nothing to send.[/dim]")
            return

        store = get_store(store_backend, db_path)
        client = get_client(model, console)
        try:
            await store.connect()
            controller = get_controller(store, client, verbose=verbose, console=console)

            with console.status(f"[dim]{client.model} is thinking...[/dim]"):
                state = await controller.send_message(prompt)

            if state.last_error is not None:
                _print_error(state.last_error)
                raise typer.Exit(code=1)

            console.print(escape(_last_reply(controller) or ""))

        except StorageError as e:
            _print_error(e)
            raise typer.Exit(code=1)
        finally:
            await store.disconnect()
            await client.close()

    asyncio.run(_ask())


@app.command()
def chat(
    model: str | None = typer.Option(None, "--model", "-m", help="Model name (default: $OLLAMA_MODEL or mistral)"),
    store_backend: str | None = typer.Option(None, "--store", help="Message store: 'sqlite' or 'memory'"),
    db_path: str | None = typer.Option(None, "--db-path", help="Path of the SQLite history database"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug output"),
):
    """Interactive line-based chat."""
    async def _chat():
        store = get_store(store_backend, db_path)
        client = get_client(model, console)

        try:
            await store.connect()
            controller = get_controller(store, client, verbose=verbose, console=console)
            await controller.load_history()

            console.print(f"[bold cyan]Chat with Ollama[/bold cyan] [dim]({client.model})[/dim]")
            console.print("[dim]Type 'exit', 'quit', or 'q' to leave, '/clear' to erase the history[/dim]\n")

            while True:
                try:
                    user_input = console.input("[bold yellow]You:[/bold yellow] ")

                    if not user_input.strip():
                        continue

                    if user_input.strip().lower() in ('exit', 'quit', 'q'):
                        console.print("[dim]Goodbye![/dim]")
                        break

                    if user_input.strip() == "/clear":
                        if not typer.confirm("Erase the whole conversation?"):
                            console.print("[dim]Aborted.[/dim]\n")
                            continue
                        state = await controller.clear_all()
                        if state.last_error is not None:
                            _print_error(state.last_error)
                            controller.dismiss_error()
                        else:
                            console.print("[dim]History cleared.[/dim]\n")
                        continue

                    with console.status("[dim]Thinking...[/dim]"):
                        state = await controller.send_message(user_input)

                    if state.last_error is not None:
                        _print_error(state.last_error)
                        controller.dismiss_error()
                        console.print()
                        continue

                    reply = escape(_last_reply(controller) or "")
                    console.print(f"[bold green]Assistant:[/bold green] {reply}\n")

                except KeyboardInterrupt:
                    console.print("\n[dim]Goodbye![/dim]")
                    break
                except EOFError:
                    console.print("\n[dim]Goodbye![/dim]")
                    break

        except StorageError as e:
            _print_error(e)
            raise typer.Exit(code=1)
        finally:
            await store.disconnect()
            await client.close()

    asyncio.run(_chat())


@app.command()
def history(
    limit: int | None = typer.Option(None, "--limit", "-n", min=1, help="Show only the last N messages"),
    store_backend: str | None = typer.Option(None, "--store", help="Message store: 'sqlite' or 'memory'"),
    db_path: str | None = typer.Option(None, "--db-path", help="Path of the SQLite history database"),
):
    """Show the stored conversation."""
    async def _history():
        store = get_store(store_backend, db_path)
        try:
            await store.connect()
            messages = await store.fetch_all()
        except StorageError as e:
            _print_error(e)
            raise typer.Exit(code=1)
        finally:
            await store.disconnect()

        if not messages:
            console.print("[dim]No messages yet.[/dim]")
            return

        if limit is not None:
            messages = messages[-limit:]

        table = Table(title="Conversation")
        table.add_column("Time", style="dim", no_wrap=True)
        table.add_column("From", style="cyan", no_wrap=True)
        table.add_column("Message")

        for message in messages:
            table.add_row(
                message.timestamp.astimezone().strftime("%Y-%m-%d %H:%M:%S"),
                "You" if message.is_from_user else "Assistant",
                escape(message.text),
            )

        console.print(table)

    asyncio.run(_history())


@app.command()
def clear(
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Skip confirmation prompt"
    ),
    store_backend: str | None = typer.Option(None, "--store", help="Message store: 'sqlite' or 'memory'"),
    db_path: str | None = typer.Option(None, "--db-path", help="Path of the SQLite history database"),
):
    """Delete the whole conversation."""
    async def _clear():
        if not yes:
            console.print("[yellow]WARNING: This will delete the whole conversation![/yellow]")
            confirm = typer.confirm("Are you sure you want to continue?")
            if not confirm:
                console.print("[dim]Aborted.[/dim]")
                return

        store = get_store(store_backend, db_path)
        client = get_client(console=console)

        try:
            await store.connect()
            controller = get_controller(store, client, console=console)
            await controller.load_history()
            count = len(controller.state.messages)

            state = await controller.clear_all()
            if state.last_error is not None:
                _print_error(state.last_error)
                raise typer.Exit(code=1)

            console.print(f"[green]Success! Deleted {count} messages.[/green]")

        except StorageError as e:
            _print_error(e)
            raise typer.Exit(code=1)
        finally:
            await store.disconnect()
            await client.close()

    asyncio.run(_clear())


@app.command(name="tui")
def tui_command(
    model: str | None = typer.Option(None, "--model", "-m", help="Model name (default: $OLLAMA_MODEL or mistral)"),
    store_backend: str | None = typer.Option(None, "--store", help="Message store: 'sqlite' or 'memory'"),
    db_path: str | None = typer.Option(None, "--db-path", help="Path of the SQLite history database"),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Show log panel with level: debug (all), info, warning, or error"
    ),
):
    """Launch interactive TUI chat interface."""
    async def _tui():
        from ..ui import run_textual_tui

        store = get_store(store_backend, db_path)
        client = get_client(model, console)

        try:
            await store.connect()
            await run_textual_tui(
                controller=ChatController(store, client),
                log_level=log_level,
            )
        except StorageError as e:
            _print_error(e)
            raise typer.Exit(code=1)
        finally:
            try:
                await store.disconnect()
                await client.close()
            except RuntimeError:
                pass
            console.print("\n[dim]Goodbye![/dim]")

    try:
        asyncio.run(_tui())
    except KeyboardInterrupt:
        pass


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
