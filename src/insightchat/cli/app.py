"""Main CLI application using Typer."""
import asyncio

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.markup import escape
from rich.text import Text

from ..config import WidgetConfig, configure_logging
from ..session.host import ChatWidget
from ..session.markup import MemorySurface, plain_text_to_markup

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="insightchat",
    help="Embeddable insights chat widget: terminal UI and one-shot queries",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()


def _config(api_key: str | None, endpoint: str | None, delay: float | None = None) -> WidgetConfig:
    return WidgetConfig.from_env(api_key=api_key, endpoint=endpoint, heuristic_delay=delay)


@app.command()
def tui(
    api_key: str | None = typer.Option(
        None,
        "--api-key",
        "-k",
        help="Credential for the remote chat endpoint (default: $INSIGHTCHAT_API_KEY)"
    ),
    endpoint: str | None = typer.Option(
        None,
        "--endpoint",
        "-e",
        help="Remote chat endpoint URL (default: $INSIGHTCHAT_ENDPOINT)"
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Show the log panel at this level (debug/info/warning/error)"
    ),
):
    """Run the chat widget in the terminal."""
    from ..ui import run_textual_tui

    asyncio.run(run_textual_tui(config=_config(api_key, endpoint), log_level=log_level))


@app.command()
def ask(
    query: str = typer.Argument(..., help="Message to send"),
    api_key: str | None = typer.Option(
        None,
        "--api-key",
        "-k",
        help="Credential for the remote chat endpoint (default: $INSIGHTCHAT_API_KEY)"
    ),
    endpoint: str | None = typer.Option(
        None,
        "--endpoint",
        "-e",
        help="Remote chat endpoint URL (default: $INSIGHTCHAT_ENDPOINT)"
    ),
    delay: float | None = typer.Option(
        None,
        "--delay",
        help="Artificial latency of the local fallback in seconds"
    ),
    log_level: str = typer.Option(
        "warning",
        "--log-level",
        "-l",
        help="Log level (debug/info/warning/error)"
    ),
):
    """Send one message through the reply chain and print the answer."""
    configure_logging(log_level)

    async def _ask() -> bool:
        surface = MemorySurface()
        widget = ChatWidget(surface=surface)
        session = widget.init(_config(api_key, endpoint, delay))
        try:
            surface.insert_markup(plain_text_to_markup(query))
            session.on_edit()
            with console.status("[dim]Sending...[/dim]"):
                submitted = await session.submit()
            if not submitted:
                return False

            view = widget.view()
            reply = view.messages[-1]
            console.print(Panel(
                Text(reply.text),
                title=f"[bold cyan]{escape(view.title)}[/bold cyan]",
                subtitle=f"[dim]{session.resolver.last_strategy}[/dim]",
                border_style="cyan",
            ))
            if view.key_note:
                console.print(Text(view.key_note, style="dim"))
            return True
        finally:
            await widget.dispose()

    if not asyncio.run(_ask()):
        console.print("[red]Error: nothing to send[/red]")
        raise typer.Exit(code=1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
