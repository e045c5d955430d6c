"""Main CLI application using Typer."""
import asyncio
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape

from ..chat import ConversationController, ConversationObserver, RequestState
from ..ui.config import LogLevel
from .providers import get_controller, get_credential_store

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="relaychat",
    help="Minimal chat client for OpenAI-compatible completion endpoints",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()

MODEL_OPTION = typer.Option(
    None,
    "--model",
    "-m",
    help="Model identifier (default: $OPENAI_CHAT_MODEL or gpt-3.5-turbo)"
)
CREDENTIALS_PATH_OPTION = typer.Option(
    None,
    "--credentials-path",
    "-c",
    help="Credential file (default: $RELAYCHAT_CREDENTIALS_PATH or ~/.relaychat/credentials.json)"
)
LOG_LEVEL_OPTION = typer.Option(
    None,
    "--log-level",
    "-l",
    help="Show log output with level: debug (all), info, warning, or error"
)


class ConsoleObserver(ConversationObserver):
    """Prints controller notifications to a Rich console."""

    def __init__(self, out: Console) -> None:
        self.out = out
        self.credential_requested = False

    def on_request_state_changed(self, state: RequestState) -> None:
        if state.is_pending:
            self.out.print("[dim]Thinking...[/dim]")

    def on_error_occurred(self, message: str) -> None:
        self.out.print(f"[red]Error:[/red] {escape(message)}", highlight=False)

    def on_credential_required(self) -> None:
        self.credential_requested = True

    def on_notice(self, message: str) -> None:
        self.out.print(f"[green]{message}[/green]")


def _validate_log_level(log_level: str | None) -> None:
    if log_level is not None and not LogLevel.is_valid(log_level):
        console.print(f"[red]Error: Unknown log level: {log_level}[/red]")
        raise typer.Exit(code=1)


def _console_debug_callback(log_level: str):
    """Build a debug callback printing entries at or above `log_level`."""
    threshold = LogLevel.from_string(log_level)

    def _callback(level: str, component: str, message: str) -> None:
        numeric = LogLevel.from_string(level)
        if numeric < threshold:
            return
        console.print(
            f"[dim]{LogLevel.name(numeric):<7} {escape(f'[{component}] {message}')}[/dim]",
            highlight=False,
        )

    return _callback


def _mask(value: str) -> str:
    if len(value) <= 8:
        return "*" * len(value)
    return f"{value[:3]}...{value[-4:]}"


def _prompt_for_key(controller: ConversationController) -> bool:
    """Ask for the API key on the console and store it."""
    console.print("[yellow]An OpenAI API key is required.[/yellow]")
    console.print("[dim]Get one at https://platform.openai.com/api-keys[/dim]")
    try:
        value = console.input("[bold]API key:[/bold] ", password=True)
    except (KeyboardInterrupt, EOFError):
        return False
    if not controller.set_credential(value):
        console.print("[yellow]No key entered.[/yellow]")
        return False
    return True


@app.command(name="tui")
def tui_command(
    model: str | None = MODEL_OPTION,
    credentials_path: Path | None = CREDENTIALS_PATH_OPTION,
    log_level: str | None = LOG_LEVEL_OPTION,
):
    """Launch the interactive TUI chat interface."""
    _validate_log_level(log_level)

    async def _tui():
        from ..ui import run_textual_tui

        controller = get_controller(model=model, credentials_path=credentials_path)
        try:
            await run_textual_tui(controller, log_level=log_level)
        finally:
            await controller.client.close()
            console.print("\n[dim]Goodbye![/dim]")

    try:
        asyncio.run(_tui())
    except KeyboardInterrupt:
        pass


@app.command()
def chat(
    model: str | None = MODEL_OPTION,
    credentials_path: Path | None = CREDENTIALS_PATH_OPTION,
    log_level: str | None = LOG_LEVEL_OPTION,
):
    """Interactive console chat without the TUI."""
    _validate_log_level(log_level)

    observer = ConsoleObserver(console)
    controller = get_controller(
        model=model, credentials_path=credentials_path, observer=observer
    )
    if log_level is not None:
        controller.set_debug_callback(_console_debug_callback(log_level))

    async def _chat():
        console.print("[bold cyan]relaychat[/bold cyan]")
        console.print("[dim]Type 'exit', 'quit', or 'q' to leave, '/clear' to reset the chat, '/key' to change the API key[/dim]\n")

        if not controller.has_credential:
            _prompt_for_key(controller)

        try:
            while True:
                try:
                    user_input = console.input("[bold yellow]You:[/bold yellow] ")
                except (KeyboardInterrupt, EOFError):
                    console.print("\n[dim]Goodbye![/dim]")
                    break

                text = user_input.strip()
                if not text:
                    continue
                if text.lower() in ("exit", "quit", "q"):
                    console.print("[dim]Goodbye![/dim]")
                    break
                if text == "/clear":
                    controller.clear_conversation()
                    continue
                if text == "/key":
                    _prompt_for_key(controller)
                    continue

                reply = await controller.submit(text)
                if observer.credential_requested:
                    observer.credential_requested = False
                    if _prompt_for_key(controller):
                        reply = await controller.submit(text)

                if reply is not None:
                    console.print("[bold green]Assistant:[/bold green]")
                    console.print(Markdown(reply.content))
                    console.print()
        finally:
            await controller.client.close()

    asyncio.run(_chat())


@app.command(name="set-key")
def set_key(
    key: str | None = typer.Argument(
        None,
        help="API key to store (prompted with hidden input when omitted)"
    ),
    credentials_path: Path | None = CREDENTIALS_PATH_OPTION,
):
    """Store the API key used for completion requests."""
    if key is None:
        key = typer.prompt("API key", hide_input=True)

    store = get_credential_store(credentials_path)
    if not store.set(key):
        console.print("[red]Error: API key must not be blank[/red]")
        raise typer.Exit(code=1)
    console.print("[green]API key saved successfully![/green]")


@app.command(name="clear-key")
def clear_key(credentials_path: Path | None = CREDENTIALS_PATH_OPTION):
    """Forget the stored API key."""
    store = get_credential_store(credentials_path)
    store.clear()
    console.print("[green]API key cleared.[/green]")


@app.command(name="key-status")
def key_status(credentials_path: Path | None = CREDENTIALS_PATH_OPTION):
    """Report whether an API key is stored (masked)."""
    store = get_credential_store(credentials_path)
    value = store.get()
    if value is None:
        console.print("[yellow]No API key stored.[/yellow]")
        raise typer.Exit(code=1)
    console.print(f"API key stored: [bold]{_mask(value)}[/bold]")


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
