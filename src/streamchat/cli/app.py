"""Main CLI application using Typer."""
import asyncio

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape

from ..chat.models import Message, Role
from ..chat.session import ChatSession
from ..ui.config import LogLevel
from .providers import require_session

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="streamchat",
    help="Terminal chat client that streams Gemini responses",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()


class ConsoleStreamPrinter:
    """Store observer that prints assistant text as it streams in.

    Only the part of a reply not yet printed is written. A reply whose text
    was replaced rather than extended (the error apology) is printed again
    on a fresh line.
    """

    def __init__(self, output: Console) -> None:
        self._console = output
        self._printed: dict[str, str] = {}

    def __call__(self, messages: tuple[Message, ...]) -> None:
        for message in messages:
            if message.role != Role.ASSISTANT or message.pending:
                continue
            previous = self._printed.get(message.id)
            if previous is None:
                self._console.print("[bold green]Gemini:[/bold green] ", end="")
                self._write(message.text)
            elif message.text.startswith(previous):
                self._write(message.text[len(previous):])
            else:
                self._console.print()
                self._write(message.text)
            self._printed[message.id] = message.text

    def _write(self, text: str) -> None:
        if text:
            self._console.print(text, end="", markup=False, highlight=False)


def console_debug_callback(level_name: str):
    """Debug callback printing session logs at or above a level."""
    threshold = LogLevel.from_string(level_name)

    def _callback(level: str, component: str, message: str) -> None:
        if LogLevel.from_string(level) >= threshold:
            console.print(f"\n[dim]{level.upper():<7} [{component}] {escape(message)}[/dim]")

    return _callback


def _attach(session: ChatSession, log_level: str | None) -> None:
    """Print the conversation so far, then stream further changes."""
    if log_level is not None:
        session.set_debug_callback(console_debug_callback(log_level))
    printer = ConsoleStreamPrinter(console)
    printer(session.store.messages)
    session.store.subscribe(printer)


@app.command()
def chat(
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Print session logs with level: debug (all), info, warning, or error"
    ),
):
    """Interactive chat in the terminal with streamed replies."""
    async def _chat():
        session = require_session(console)
        _attach(session, log_level)
        console.print()

        console.print("[dim]Type 'exit', 'quit', or 'q' to leave[/dim]\n")

        try:
            while True:
                try:
                    user_input = console.input("[bold yellow]You:[/bold yellow] ")
                except (KeyboardInterrupt, EOFError):
                    console.print("\n[dim]Goodbye![/dim]")
                    break

                if user_input.strip().lower() in ("exit", "quit", "q"):
                    console.print("[dim]Goodbye![/dim]")
                    break

                session.input_text = user_input
                if await session.submit():
                    console.print("\n")
        finally:
            await session.source.close()

    asyncio.run(_chat())


@app.command()
def ask(
    prompt: str = typer.Argument(..., help="Prompt to send"),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Print session logs with level: debug (all), info, warning, or error"
    ),
):
    """Send a single prompt and stream the reply."""
    async def _ask() -> bool:
        session = require_session(console, welcome_text=None)
        _attach(session, log_level)
        try:
            if not await session.submit(prompt):
                console.print("[yellow]Nothing to send.[/yellow]")
                return True
        finally:
            await session.source.close()
        console.print()
        return session.last_error is None

    if not asyncio.run(_ask()):
        raise typer.Exit(code=1)


@app.command(name="tui")
def tui_command(
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Show log panel with level: debug (all), info, warning, or error"
    ),
):
    """Launch interactive TUI chat interface."""
    async def _tui():
        from ..chat.scroll import ScrollFollowPolicy
        from ..ui import run_textual_tui
        from ..ui.config import SCROLL_FOLLOW_TOLERANCE_ROWS

        session = require_session(
            console,
            scroll=ScrollFollowPolicy(tolerance=SCROLL_FOLLOW_TOLERANCE_ROWS),
        )
        await run_textual_tui(session, log_level=log_level)
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
