"""Main CLI application using Typer."""
import asyncio
from pathlib import Path

import typer
from rich.console import Console, Group, RenderableType
from rich.live import Live
from rich.text import Text

from ..agent import HealthStatus
from ..conversation import ChatSession, Message
from ..markdown import IncrementalMarkdownParser, parse_markdown, render_markdown, render_rows
from ..sheet import SheetFetchError
from .providers import get_connection, get_memory, get_settings, get_sheet_client, make_debug_callback

# Create Typer app
app = typer.Typer(
    name="stockchat",
    help="Chat with a hosted inventory agent next to a live view of the stock sheet",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()


def _render_message(message: Message, parser: IncrementalMarkdownParser) -> RenderableType:
    """Render a bot message (text plus any table) for the console."""
    if message.is_error:
        return Text(message.text, style="bold red")
    if message.is_pending:
        return Text("Thinking...", style="dim italic")

    renderables: list[RenderableType] = [
        render_markdown(parser.parse(message.text), streaming=message.streaming)
    ]
    if message.table and not message.streaming:
        renderables.append(render_rows(message.table))
    return Group(*renderables)


@app.command()
def chat(
    log_level: str = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Show the log panel at this level (debug, info, warning, error)"
    )
):
    """Open the interactive terminal UI."""
    from ..ui import run_textual_tui

    settings = get_settings(console)
    asyncio.run(run_textual_tui(settings, log_level=log_level))


@app.command()
def ask(
    query: str = typer.Argument(..., help="Question for the inventory agent"),
    no_stream: bool = typer.Option(
        False,
        "--no-stream",
        help="Use the single-response endpoint instead of streaming"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Print debug output from the stream and session"
    ),
):
    """Ask one question and render the answer as it streams in."""
    async def _ask():
        settings = get_settings(console)
        connection = get_connection(settings)
        memory = get_memory(settings)
        parser = IncrementalMarkdownParser()

        if verbose:
            connection.set_debug_callback(make_debug_callback(console))

        try:
            await memory.connect()
            with Live(console=console, refresh_per_second=12, transient=False) as live:
                def refresh() -> None:
                    if session.messages:
                        live.update(_render_message(session.messages[-1], parser))

                session = ChatSession(
                    connection,
                    memory=memory,
                    streaming=settings.streaming and not no_stream,
                    request_timeout=settings.request_timeout,
                    max_tokens=settings.max_tokens,
                    on_change=refresh,
                )
                if verbose:
                    session.set_debug_callback(make_debug_callback(console))

                message = await session.submit(query)
                live.update(_render_message(message, parser))

            if message.is_error:
                raise typer.Exit(code=1)

            thread_id = await session.thread_id()
            if verbose and thread_id:
                console.print(f"[dim]Thread: {thread_id}[/dim]")
        finally:
            await connection.disconnect()
            await memory.disconnect()

    asyncio.run(_ask())


@app.command()
def sheet(
    limit: int = typer.Option(
        None,
        "--limit",
        "-n",
        help="Maximum number of rows to show"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Print debug output"
    ),
):
    """Print the live inventory sheet."""
    async def _sheet():
        settings = get_settings(console)
        async with get_sheet_client(settings, console) as client:
            if verbose:
                client.set_debug_callback(make_debug_callback(console))
            try:
                rows = await client.fetch_rows()
            except SheetFetchError as e:
                console.print(f"[red]Error: {e}[/red]")
                raise typer.Exit(code=1)

        if not rows:
            console.print("[yellow]Sheet has no rows[/yellow]")
            return
        console.print(render_rows(rows, title="Inventory", limit=limit))

    asyncio.run(_sheet())


@app.command()
def health():
    """Check that the agent server is reachable."""
    async def _health():
        settings = get_settings(console)
        connection = get_connection(settings)
        try:
            console.print(f"[dim]Probing {settings.agent_url}...[/dim]")
            report = await connection.health()
        finally:
            await connection.disconnect()

        if report.status is HealthStatus.ONLINE:
            console.print("[green]+[/green] Agent server: ONLINE")
            if report.detail:
                for key, value in report.detail.items():
                    console.print(f"[dim]  {key}: {value}[/dim]")
        else:
            console.print(f"[red]x[/red] Agent server: OFFLINE ({report.error})")
            raise typer.Exit(code=1)

        if settings.sheet_id:
            console.print("[green]+[/green] Sheet id: SET")
        else:
            console.print("[yellow]![/yellow] Sheet id: NOT SET")

    asyncio.run(_health())


@app.command()
def render(
    file: Path = typer.Argument(
        ...,
        exists=True,
        file_okay=True,
        dir_okay=False,
        help="Markdown file to render"
    ),
    streaming: bool = typer.Option(
        False,
        "--streaming",
        "-s",
        help="Show the streaming cursor after the last block"
    ),
):
    """Render a markdown file the way agent answers are rendered."""
    try:
        text = file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)
    console.print(render_markdown(parse_markdown(text), streaming=streaming))


@app.command(name="new-chat")
def new_chat():
    """Forget the stored thread id so the next question starts a new chat."""
    async def _new_chat():
        settings = get_settings(console)
        memory = get_memory(settings)
        try:
            await memory.connect()
            await memory.clear()
        finally:
            await memory.disconnect()

        if memory.backend_type == "memory":
            console.print("[dim]Session memory is in-process; nothing was stored.[/dim]")
        else:
            console.print("[green]Started a new chat.[/green]")

    asyncio.run(_new_chat())


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
