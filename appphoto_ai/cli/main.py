"""AppPhoto AI CLI - Main entry point.

This module provides the command-line interface: analyze a document image,
chat with the assistant, or serve the web front end.
"""

import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from appphoto_ai.config import Settings, init_settings
from appphoto_ai.errors import ConfigurationError, InvalidImageError

app = typer.Typer(
    name="appphoto",
    help="AppPhoto AI - Intelligent document and photo analysis",
    add_completion=False,
)
console = Console()

EXIT_WORDS = {"exit", "quit"}


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs")) -> None:
    """Configure console logging."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _load_settings(**overrides) -> Settings:
    """Validate settings or exit with an explanation."""
    try:
        return init_settings(**overrides)
    except ConfigurationError as e:
        console.print(f"[red]Error: {e}[/red]")
        console.print("\n[yellow]Please create a .env file with your OPENAI_API_KEY.[/yellow]")
        console.print("[dim]Copy .env.example to .env and add your API key.[/dim]\n")
        raise typer.Exit(1) from e


@app.command()
def analyze(
    image: Path = typer.Argument(..., help="Document image to analyze", exists=True, dir_okay=False),
    export: Path = typer.Option(None, "--export", "-e", help="Write the records to an .xlsx file"),
    model: str = typer.Option(None, "--model", help="Model to use (overrides config)"),
) -> None:
    """Extract the people recorded in a birth or baptism document.

    Requires: OPENAI_API_KEY in .env file
    """
    from appphoto_ai.agents import DocumentAnalyzer
    from appphoto_ai.controllers import AnalyzerController, AnalyzerState
    from appphoto_ai.export import SpreadsheetExporter
    from appphoto_ai.ingestion import read_image_file
    from appphoto_ai.schemas.extraction import display_fields, display_title

    console.print("\n[bold cyan]AppPhoto AI - Document Analyzer[/bold cyan]\n")

    settings = _load_settings()

    try:
        data, mime_type = asyncio.run(read_image_file(image))
    except InvalidImageError as e:
        console.print(f"[red]Please upload a valid image file. ({e})[/red]\n")
        raise typer.Exit(1) from e

    size_mb = len(data) / (1024 * 1024)
    if size_mb > settings.max_upload_mb:
        console.print(
            f"[yellow]Warning: {image.name} is {size_mb:.1f}MB "
            f"(recommended limit {settings.max_upload_mb}MB)[/yellow]"
        )

    controller = AnalyzerController(
        DocumentAnalyzer(settings=settings, model_name=model),
        exporter=SpreadsheetExporter(export) if export else None,
    )
    controller.select_file(data, mime_type, image.name)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task(f"AI is analyzing {image.name}...", total=None)
        asyncio.run(controller.analyze())

    if controller.state is AnalyzerState.FAILED:
        console.print(f"[red]{controller.error}[/red]\n")
        raise typer.Exit(1)

    records = controller.records or []
    if not records:
        console.print("[yellow]No people found in this document.[/yellow]\n")
        return

    for index, record in enumerate(records):
        table = Table(show_header=False, title=display_title(record, index), title_style="bold blue")
        table.add_column("Field", style="dim")
        table.add_column("Value")
        for label, value in display_fields(record):
            table.add_row(label, value)
        console.print(table)
        console.print()

    if export:
        controller.export()
        console.print(f"[bold green]✓ Exported {len(records)} record(s) to {export}[/bold green]\n")


async def _chat_loop(controller) -> None:
    """Read user turns until EOF or an exit word, streaming each reply."""
    console.print(f"[bold blue]AI:[/bold blue] {controller.messages[-1].text}\n")

    while True:
        try:
            text = await asyncio.to_thread(console.input, "[bold]You:[/bold] ")
        except EOFError:
            break
        if text.strip().lower() in EXIT_WORDS:
            break
        if not text.strip():
            continue

        console.print("[bold blue]AI:[/bold blue] ", end="")
        async for fragment in controller.stream(text):
            console.print(fragment, end="", markup=False, highlight=False)
        console.print("\n")

        if controller.error:
            console.print(f"[red]{controller.error}[/red]\n")
            controller.dismiss_error()


@app.command()
def chat(
    model: str = typer.Option(None, "--model", help="Model to use (overrides config)"),
) -> None:
    """Chat with the AI assistant. Type 'exit' or press Ctrl-D to leave."""
    from appphoto_ai.agents import ChatSessionManager
    from appphoto_ai.controllers import ChatbotController

    console.print("\n[bold cyan]AppPhoto AI - Chatbot[/bold cyan]\n")

    settings = _load_settings()
    controller = ChatbotController(ChatSessionManager(settings=settings, model_name=model))
    controller.mount()

    asyncio.run(_chat_loop(controller))
    console.print("[dim]Goodbye![/dim]\n")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind"),
    port: int = typer.Option(5001, "--port", help="Port to listen on"),
    env: str = typer.Option("development", "--env", help="Configuration environment"),
) -> None:
    """Serve the web front end."""
    from appphoto_ai.web.app import create_app

    try:
        web_app = create_app(env)
    except ConfigurationError as e:
        console.print(f"[red]Error: {e}[/red]\n")
        raise typer.Exit(1) from e

    web_app.run(host=host, port=port, debug=env == "development")


@app.command()
def version() -> None:
    """Display version information."""
    from appphoto_ai import __version__

    console.print(f"\n[bold cyan]AppPhoto AI[/bold cyan] version {__version__}\n")


if __name__ == "__main__":
    app()
