"""CLI application entry point for hitboxer.

This module provides the main CLI interface using Typer.
"""

import os
from pathlib import Path
from typing import Annotated

import typer

from hitboxer import __version__
from hitboxer.cli.output import (
    SYM_OK,
    console,
    create_progress,
    print_cancellation_notice,
    print_cancellation_summary,
    print_error,
    print_header,
    print_processing_info,
    print_sheet_info,
    print_solid_sprites,
    print_step,
    print_success,
    print_tier_table,
)
from hitboxer.config import (
    DecompositionConfig,
    HitboxerSettings,
    LoggingConfig,
    ProcessingConfig,
    TracingConfig,
)
from hitboxer.core import SpriteSheetProcessor
from hitboxer.core.tracer import find_start_pixel
from hitboxer.domain import AccuracyTier, ShapeMode, SpriteSheetSpec
from hitboxer.exceptions import HitboxerError, ImageLoadError, MetadataSaveError
from hitboxer.io import MetadataWriter, SpriteSheetReader

# Create the Typer app
app = typer.Typer(
    name="hitboxer",
    help="Generate collision polygons for every sprite of a sprite sheet.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]Hitboxer[/bold blue] v{__version__}")
        raise typer.Exit()


@app.command()
def hitbox(
    image: Annotated[
        Path,
        typer.Argument(
            help="Path to the sprite sheet image",
            show_default=False,
        ),
    ],
    sprite_width: Annotated[
        int,
        typer.Option(
            "--sprite-width",
            "-W",
            help="Width of one sprite cell in pixels",
            min=1,
        ),
    ],
    sprite_height: Annotated[
        int,
        typer.Option(
            "--sprite-height",
            "-H",
            help="Height of one sprite cell in pixels",
            min=1,
        ),
    ],
    grid_width: Annotated[
        int,
        typer.Option(
            "--grid-width",
            "-g",
            help="Number of sprites per row",
            min=1,
        ),
    ],
    count: Annotated[
        int,
        typer.Option(
            "--count",
            "-n",
            help="Total number of sprites in the sheet",
            min=1,
        ),
    ],
    mode: Annotated[
        ShapeMode,
        typer.Option(
            "--mode",
            "-m",
            help="Kind of collision geometry to generate",
        ),
    ] = ShapeMode.DECOMPOSITION,
    tiers: Annotated[
        list[AccuracyTier] | None,
        typer.Option(
            "--tier",
            "-t",
            help="Accuracy tier to compute (repeatable, default: all)",
        ),
    ] = None,
    threshold: Annotated[
        int,
        typer.Option(
            "--threshold",
            help="Alpha value at or above which a pixel is solid (0-255)",
            min=0,
            max=255,
        ),
    ] = 128,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Metadata output path (default: {dir}/meta/{name}-{mode}-meta.json)",
        ),
    ] = None,
    preview: Annotated[
        bool,
        typer.Option(
            "--preview",
            help="Render a preview PNG for each tier next to the metadata",
        ),
    ] = False,
    workers: Annotated[
        int | None,
        typer.Option(
            "--workers",
            "-j",
            help="Number of parallel workers (default: auto)",
            min=1,
        ),
    ] = None,
    max_depth: Annotated[
        int,
        typer.Option(
            "--max-depth",
            help="Convex decomposition depth cap",
            min=1,
            max=1000,
        ),
    ] = 100,
    min_area: Annotated[
        float,
        typer.Option(
            "--min-area",
            help="Drop convex pieces smaller than this many square pixels",
            min=0.0,
        ),
    ] = 0.0,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            help="Inspect the sheet and show what would be done without writing files",
        ),
    ] = False,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Write detailed logs to file",
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            help="Logging level (DEBUG|INFO|WARNING|ERROR)",
        ),
    ] = "WARNING",
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbose console output",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Minimal console output",
        ),
    ] = False,
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Generate collision polygons for every sprite of a sprite sheet.

    Each sprite's silhouette is traced from its alpha channel and turned into
    a collision shape at up to three accuracy tiers (low, mid, high). The
    default mode decomposes the silhouette into convex polygons.

    Example:
        hitboxer img/asteroid4_32x32.png -W 32 -H 32 -g 5 -n 19

    This will write img/meta/asteroid4_32x32-decomposition-meta.json.
    """
    if verbose and quiet:
        print_error("Cannot use --verbose and --quiet together")
        raise typer.Exit(code=1)

    if not image.exists():
        print_error(
            f"Input file not found: {image}",
            details=f"The file '{image}' does not exist or is not accessible.",
        )
        raise typer.Exit(code=1)

    if not image.is_file():
        print_error(
            f"Input path is not a file: {image}",
            details="Please provide a path to a PNG or other raster image.",
        )
        raise typer.Exit(code=1)

    if not quiet:
        print_header(__version__)

    selected_tiers = list(dict.fromkeys(tiers)) if tiers else list(AccuracyTier)

    try:
        sheet = SpriteSheetSpec(
            sprite_width=sprite_width,
            sprite_height=sprite_height,
            grid_width=grid_width,
            num_sprites=count,
        )
        settings = HitboxerSettings(
            tracing=TracingConfig(threshold=threshold),
            decomposition=DecompositionConfig(max_depth=max_depth, min_area=min_area),
            processing=ProcessingConfig(
                max_workers=workers,
                mode=mode,
                tiers=selected_tiers,
                write_previews=preview,
            ),
            logging=LoggingConfig(
                log_file=log_file,
                log_level=log_level if not quiet else "WARNING",
            ),
        )

        if not quiet:
            print_step("Loading sprite sheet")

        with SpriteSheetReader(image) as reader:
            sheet_width, sheet_height = reader.width, reader.height
            solid = sum(
                1
                for _, mask in reader.iter_masks(sheet)
                if find_start_pixel(mask, threshold) is not None
            )

        if not quiet:
            print_sheet_info(
                image_path=str(image),
                width=sheet_width,
                height=sheet_height,
                sprite_width=sprite_width,
                sprite_height=sprite_height,
                num_sprites=count,
            )
            if (
                grid_width * sprite_width > sheet_width
                or sheet.num_rows * sprite_height > sheet_height
            ):
                console.print(
                    "  [yellow]Grid extends past the image; missing pixels are transparent[/yellow]"
                )
            print_solid_sprites(solid=solid, empty=count - solid)

        output_path = output if output is not None else MetadataWriter.get_meta_path(image, mode)

        if dry_run:
            if not quiet:
                console.print("\n[bold]Plan[/bold]\n")
                console.print(f"  Mode                  {mode.value}")
                console.print(f"  Tiers                 {', '.join(t.value for t in selected_tiers)}")
                console.print(f"  Sprites to process    {solid}")
                console.print(f"  Metadata              {output_path}")
                console.print(f"\n[bold green]{SYM_OK} Dry run complete[/bold green] - no files written")
            raise typer.Exit(code=0)

        if not quiet:
            actual_workers = workers if workers else os.cpu_count() or 1
            print_step("Processing")
            print_processing_info(
                actual_workers,
                mode=mode.value,
                tiers=[t.value for t in selected_tiers],
                is_auto=(workers is None),
            )

        processor = SpriteSheetProcessor(settings)
        stats = None

        try:
            if not quiet:
                with create_progress() as progress:
                    task_id = progress.add_task(
                        f"Processing {solid} sprites",
                        total=solid,
                    )

                    def update_progress(completed: int, *_: object) -> None:
                        progress.update(task_id, completed=completed)

                    stats = processor.process(
                        image_path=image,
                        sheet=sheet,
                        output_path=output_path,
                        max_workers=workers,
                        progress_callback=update_progress,
                    )
            else:
                stats = processor.process(
                    image_path=image,
                    sheet=sheet,
                    output_path=output_path,
                    max_workers=workers,
                )
        except KeyboardInterrupt:
            if not quiet:
                print_cancellation_notice()
                print_cancellation_summary(
                    processed=stats.processed_count if stats else 0,
                    cancelled=stats.cancelled_count if stats else 0,
                )
            raise typer.Exit(code=130) from None  # Standard Unix SIGINT exit code

        if not quiet:
            if verbose:
                print_step("Tiers")
                print_tier_table(
                    [
                        (
                            tier.value,
                            len(shapes),
                            sum(shape.polygon_count for shape in shapes),
                            sum(shape.total_points for shape in shapes),
                        )
                        for tier, shapes in processor.shapes.items()
                    ]
                )

            print_success(
                output_paths=[str(path) for path in stats.output_files],
                total_time_s=stats.duration_seconds,
                processed=stats.processed_count,
                polygons=stats.polygon_count,
                points=stats.point_count,
                errors=stats.error_count,
                unstable=stats.unstable_count,
                avg_time_ms=stats.avg_sprite_time_ms,
                min_time_ms=stats.min_sprite_time_ms,
                max_time_ms=stats.max_sprite_time_ms,
            )

        if stats.error_count:
            raise typer.Exit(code=1)

    except ImageLoadError as e:
        print_error(f"Could not load image: {e.reason}")
        raise typer.Exit(code=1)
    except MetadataSaveError as e:
        print_error(f"Could not save metadata: {e.reason}")
        raise typer.Exit(code=1)
    except HitboxerError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except typer.Exit:
        # Re-raise typer.Exit to allow clean exits
        raise
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        raise typer.Exit(code=1)


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
