"""Rich-powered console output for promptweave."""

from __future__ import annotations

from rich.console import Console as RichConsole
from rich.panel import Panel
from rich.table import Table

from promptweave import __version__
from promptweave.composer.section import Section
from promptweave.context.models import ContextCollection


class Console:
    """Terminal output for the promptweave CLI."""

    def __init__(self) -> None:
        self.console = RichConsole()

    def banner(self) -> None:
        self.console.print(
            Panel(
                f"[bold cyan]promptweave[/bold cyan] [dim]v{__version__}[/dim]\n"
                "[dim]Ranked context, fitted to the token budget[/dim]",
                border_style="cyan",
                padding=(1, 2),
            )
        )

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {message}")

    def error(self, message: str) -> None:
        self.console.print(f"[red]✗[/red] {message}")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]![/yellow] {message}")

    def info(self, message: str) -> None:
        self.console.print(f"[blue]i[/blue] {message}")

    def show_models(self, models: dict[str, int], encodings: dict[str, str]) -> None:
        """Display the known models with their context windows."""
        table = Table(title="Known Models", border_style="cyan")
        table.add_column("Model pattern", style="bold")
        table.add_column("Context window", justify="right", style="cyan")
        table.add_column("Encoding", style="dim")

        for model, window in models.items():
            table.add_row(model, f"{window:,}", encodings.get(model, ""))

        self.console.print(table)

    def show_results(self, results: ContextCollection) -> None:
        """Display ranked context items."""
        table = Table(border_style="cyan")
        table.add_column("#", justify="right")
        table.add_column("Score", justify="right", style="cyan")
        table.add_column("Source", style="dim")
        table.add_column("Content")

        for i, item in enumerate(results, start=1):
            preview = item.content
            if len(preview) > 120:
                preview = preview[:120] + "..."
            table.add_row(str(i), f"{item.score:.2f}", item.source, preview)

        self.console.print(table)

    def show_fit_summary(
        self, sections: tuple[Section, ...], used: int, available: int, model: str
    ) -> None:
        """Display per-section token usage after fitting."""
        pct = used / max(available, 1) * 100
        color = "green" if used <= available else "red"

        table = Table(
            title=f"Prompt budget: [{color}]{used:,}[/{color}] / {available:,} tokens "
            f"({pct:.0f}%) for {model}",
            border_style=color,
        )
        table.add_column("Section", style="bold")
        table.add_column("Priority", justify="right")
        table.add_column("Shrinker", style="dim")
        table.add_column("Chars", justify="right", style="cyan")

        for section in sorted(sections, key=lambda s: s.priority, reverse=True):
            table.add_row(
                section.name,
                str(section.priority),
                section.shrinker or "-",
                f"{len(section.content_as_string()):,}",
            )

        self.console.print(table)
