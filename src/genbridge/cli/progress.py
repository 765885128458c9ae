"""
Rich progress displays for CLI operations.

All output goes to stderr to preserve stdout for machine-readable output
(reply text, saved file paths).
"""

from collections.abc import Iterator
from contextlib import contextmanager

from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

from genbridge import ProviderConfig
from genbridge.core.poller import AttemptCallback

# Console for stderr output (preserves stdout for machine output)
console = Console(stderr=True)


def _model_display(model: str) -> str:
    return model if len(model) <= 40 else f"{model[:37]}..."


@contextmanager
def operation_progress(action: str, provider: ProviderConfig) -> Iterator[None]:
    """
    Display a spinner while one provider request is in flight.

    Args:
        action: What is happening, e.g. "Generating image"
        provider: The provider being called (name and model are shown)
    """
    progress = Progress(
        SpinnerColumn(spinner_name="dots"),
        TextColumn("[green]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,  # Disappears when done
    )

    desc_parts = [action, f"[dim]via {provider.name}[/dim]"]
    if provider.model:
        desc_parts.append(f"[dim]({_model_display(provider.model)})[/dim]")

    with progress:
        task = progress.add_task(" ".join(desc_parts), total=None)
        yield
        progress.update(task, completed=True)


@contextmanager
def poll_progress(max_attempts: int) -> Iterator[AttemptCallback]:
    """
    Display a bar of status checks while a video job is polled.

    Yields:
        Callback to pass as on_attempt to the poller
    """
    progress = Progress(
        SpinnerColumn(spinner_name="dots"),
        TextColumn("[cyan]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )

    with progress:
        task = progress.add_task("Waiting for video", total=max_attempts)

        def on_attempt(attempt: int, total: int, status: str) -> None:
            progress.update(
                task,
                completed=attempt,
                total=total,
                description=f"Waiting for video [dim]({status})[/dim]",
            )

        yield on_attempt


def print_success_result(title: str, rows: list[tuple[str, str]]) -> None:
    """
    Print a rich formatted success panel.

    Args:
        title: Panel title, e.g. "Image Generated"
        rows: (label, value) pairs shown in a two-column grid
    """
    table = Table.grid(padding=(0, 2))
    table.add_column(style="cyan", justify="right", vertical="top")
    table.add_column(style="white")
    for label, value in rows:
        table.add_row(label, value)

    panel = Panel(
        table,
        title=f"[bold green]✓ {title}[/bold green]",
        border_style="green",
        padding=(1, 2),
    )

    console.print()
    console.print(panel)


def print_info(message: str) -> None:
    """Print an info message in cyan."""
    console.print(f"[cyan]ℹ[/cyan] {message}")


def print_warning(message: str) -> None:
    """Print a warning message in yellow."""
    console.print(f"[yellow]⚠[/yellow] {message}")


def print_error(message: str) -> None:
    """Print an error message in red."""
    console.print(f"[red]✗[/red] {message}")


def print_success(message: str) -> None:
    """Print a success message in green."""
    console.print(f"[green]✓[/green] {message}")
