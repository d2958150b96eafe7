"""Display, edit, and search commands: resolve clip content from a JSON file."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.text import Text

from mark_clipper.cli._helpers import _emit_json, _engine_config, _load_or_exit, _verbose
from mark_clipper.core.models import ContentOptions
from mark_clipper.core.strategy import ContentStrategy

console = Console()


def register(app: typer.Typer) -> None:
    """Register the content commands onto the Typer app."""

    @app.command()
    def display(
        ctx: typer.Context,
        file: str = typer.Argument(..., help="JSON file with one clip or a list of clips"),
        strict: bool = typer.Option(
            False, "--strict", help="Use the strict tag allow-list"
        ),
        no_cache: bool = typer.Option(
            False, "--no-cache", help="Bypass the translation cache"
        ),
        no_fallback: bool = typer.Option(
            False, "--no-fallback", help="Skip the plain-text display tier"
        ),
        detailed: bool = typer.Option(
            False, "--detailed", "-d", help="Show which tier produced the content"
        ),
        json_output: bool = typer.Option(
            False, "--json", help="Output ContentResult JSON"
        ),
    ) -> None:
        """Print render-safe display content for each clip."""
        clips = _load_or_exit(file, console)
        strategy = ContentStrategy(_engine_config(ctx))
        options = ContentOptions(
            strict_mode=strict,
            use_cache=not no_cache,
            fallback_to_plain_text=not no_fallback,
            log_errors=_verbose(ctx),
        )

        results = [strategy.get_detailed_display_content(c, options) for c in clips]
        if json_output:
            _emit_json(results)
            return

        for clip, result in zip(clips, results):
            if detailed:
                label = f"#{clip.id}" if clip.id is not None else "clip"
                console.print(
                    f"[bold]{label}[/bold] [cyan]{result.source.value}[/cyan]",
                    highlight=False,
                )
                if result.error_message:
                    console.print(Text(f"  {result.error_message}", style="yellow"))
            typer.echo(result.content)

    @app.command()
    def edit(
        file: str = typer.Argument(..., help="JSON file with one clip or a list of clips"),
        no_preserve: bool = typer.Option(
            False, "--no-preserve", help="Hand the editor plain text instead of raw HTML"
        ),
    ) -> None:
        """Print the content an editor would load for each clip."""
        clips = _load_or_exit(file, console)
        strategy = ContentStrategy()
        options = ContentOptions(preserve_formatting=not no_preserve)
        for clip in clips:
            typer.echo(strategy.get_edit_content(clip, options))

    @app.command()
    def search(
        ctx: typer.Context,
        file: str = typer.Argument(..., help="JSON file with one clip or a list of clips"),
    ) -> None:
        """Print the plain-text search projection of each clip."""
        clips = _load_or_exit(file, console)
        strategy = ContentStrategy(_engine_config(ctx))
        for clip in clips:
            typer.echo(strategy.get_searchable_content(clip))
