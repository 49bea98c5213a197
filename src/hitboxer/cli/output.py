"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with progress bars, tables, and formatted messages.
"""


from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table
from rich.text import Text

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_DOT = "·"  # Separator/secondary info


def create_progress() -> Progress:
    """Create a rich progress bar for sprite processing.

    Returns:
        Configured Progress instance with bar and time elapsed.
    """
    return Progress(
        TextColumn("  "),
        BarColumn(bar_width=40, complete_style="green", finished_style="green"),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=False,
    )


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]Hitboxer[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator.

    Args:
        message: Step description message
    """
    console.print(f"\n{SYM_STEP} {message}")


def print_sheet_info(
    image_path: str,
    width: int,
    height: int,
    sprite_width: int,
    sprite_height: int,
    num_sprites: int,
) -> None:
    """Print sprite sheet information.

    Args:
        image_path: Path to the sprite sheet
        width: Sheet width in pixels
        height: Sheet height in pixels
        sprite_width: Sprite cell width in pixels
        sprite_height: Sprite cell height in pixels
        num_sprites: Number of sprites in the sheet
    """
    # Use Text to safely handle paths with special characters
    line1 = Text("  ")
    line1.append(image_path)
    line1.append(f" ({width}x{height})")
    console.print(line1)
    console.print(f"  {num_sprites:,} sprites {SYM_DOT} {sprite_width}x{sprite_height} cells")


def print_solid_sprites(solid: int, empty: int) -> None:
    """Print how many sprites have solid pixels.

    Args:
        solid: Number of sprites with at least one solid pixel
        empty: Number of fully transparent sprites
    """
    console.print(f"  [green]{solid}[/green] sprites with pixels {SYM_DOT} {empty} empty")


def _format_time(seconds: float) -> str:
    """Format seconds into human-readable time string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.1f}s"


def print_processing_info(workers: int, mode: str, tiers: list[str], is_auto: bool = False) -> None:
    """Print processing configuration.

    Args:
        workers: Number of parallel workers
        mode: Shape mode being computed
        tiers: Accuracy tiers being computed
        is_auto: Whether the worker count was auto-detected
    """
    auto_suffix = " (auto)" if is_auto else ""
    console.print(f"  {mode} {SYM_DOT} tiers: {', '.join(tiers)}")
    console.print(f"  {workers} workers{auto_suffix} {SYM_DOT} Ctrl+C to cancel")


def print_tier_table(rows: list[tuple[str, int, int, int]]) -> None:
    """Print per-tier totals.

    Args:
        rows: Tuples of (tier, sprites, polygons, points)
    """
    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    table.add_column("Tier")
    table.add_column("Sprites", justify="right")
    table.add_column("Polygons", justify="right")
    table.add_column("Points", justify="right")
    for tier, sprites, polygons, points in rows:
        table.add_row(tier, str(sprites), str(polygons), str(points))
    console.print(table)


def print_success(
    output_paths: list[str],
    total_time_s: float,
    processed: int,
    polygons: int,
    points: int,
    errors: int,
    unstable: int = 0,
    avg_time_ms: float | None = None,
    min_time_ms: float | None = None,
    max_time_ms: float | None = None,
) -> None:
    """Print success message with summary.

    Args:
        output_paths: Paths of files written
        total_time_s: Total processing time in seconds
        processed: Number of sprites processed
        polygons: Total number of polygons across tiers
        points: Total number of points across tiers
        errors: Number of errors encountered
        unstable: Number of sprites whose trace hit the iteration cap
        avg_time_ms: Average processing time per sprite in milliseconds
        min_time_ms: Minimum processing time per sprite in milliseconds
        max_time_ms: Maximum processing time per sprite in milliseconds
    """
    time_str = _format_time(total_time_s)

    console.print(f"\n[bold green]{SYM_OK} Complete[/bold green] in {time_str}")

    for output_path in output_paths:
        line = Text("  ")
        line.append(output_path, style="bold")
        console.print(line)

    error_style = "red" if errors > 0 else "green"
    console.print(
        f"  {processed} sprites {SYM_DOT} {polygons} polygons {SYM_DOT} {points} points {SYM_DOT} "
        f"[{error_style}]{errors} errors[/{error_style}]"
    )
    if unstable:
        console.print(f"  [yellow]{unstable} unstable traces[/yellow] (partial contours)")

    # Per-sprite timing
    if avg_time_ms is not None:
        timing_str = f"{avg_time_ms:.1f}ms avg"
        if min_time_ms is not None and max_time_ms is not None:
            timing_str += f" ({min_time_ms:.1f}-{max_time_ms:.1f}ms range)"
        console.print(f"  {timing_str}")


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")


def print_cancellation_notice() -> None:
    """Print cancellation acknowledgment."""
    console.print(f"\n{SYM_DOT} Cancelling... waiting for in-progress sprites")


def print_cancellation_summary(processed: int, cancelled: int) -> None:
    """Print cancellation summary.

    Args:
        processed: Number of sprites successfully processed before cancellation
        cancelled: Number of pending tasks that were cancelled
    """
    console.print(f"\n{SYM_DOT} [bold]Cancelled[/bold]")
    console.print(f"  {processed} sprites completed {SYM_DOT} {cancelled} tasks cancelled")
    console.print("  No output file created")
