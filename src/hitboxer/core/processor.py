"""Parallel processing orchestration for sprite sheets.

This module coordinates the full collision shape workflow with parallel
processing of individual sprites using ProcessPoolExecutor.

Key components:
- process_sprite: Top-level picklable function for parallel execution
- SpriteSheetProcessor: Main orchestrator class for sprite sheet processing
"""

import time
import traceback
from collections.abc import Callable
from concurrent.futures import ProcessPoolExecutor, as_completed
from pathlib import Path
from typing import Any

from hitboxer.config import HitboxerSettings
from hitboxer.core.pipeline import compute_shape
from hitboxer.core.tracer import find_start_pixel
from hitboxer.domain import AccuracyTier, AlphaMask, ShapeMode, SpriteShape, SpriteSheetSpec
from hitboxer.io import MetadataWriter, SpriteSheetReader, build_metadata, render_preview
from hitboxer.utils import ProcessingLogger, ProcessingStats, configure_logging


def process_sprite(task: dict[str, Any]) -> dict[str, Any]:
    """Compute collision shapes for one sprite at every requested tier.

    Top-level function designed to be picklable for use with ProcessPoolExecutor.
    Deserializes the sprite's alpha region and settings, runs the pipeline and
    returns serialized shapes.

    Args:
        task: Dictionary with ``index``, ``position``, ``mask``
            (from AlphaMask.to_dict()), ``mode``, ``tiers`` and ``settings``
            (from HitboxerSettings.model_dump())

    Returns:
        Dictionary containing either:
        - Success: {"index": int, "shapes": list[dict], "duration_ms": float}
        - Error: {"error": str, "index": int, "traceback": str, "duration_ms": float}
    """
    start_time = time.time()

    try:
        mask = AlphaMask.from_dict(task["mask"])
        settings = HitboxerSettings.model_validate(task["settings"])
        mode = ShapeMode(task["mode"])
        index = task["index"]
        position = tuple(task["position"])

        shapes = [
            compute_shape(
                mask,
                mode,
                AccuracyTier(tier),
                settings,
                index=index,
                position=position,  # type: ignore[arg-type]
            ).to_dict()
            for tier in task["tiers"]
        ]

        duration_ms = (time.time() - start_time) * 1000
        return {
            "index": index,
            "shapes": shapes,
            "duration_ms": duration_ms,
        }

    except Exception as e:
        duration_ms = (time.time() - start_time) * 1000
        tb = traceback.format_exc()
        return {
            "error": str(e),
            "index": task.get("index", -1),
            "traceback": tb,
            "duration_ms": duration_ms,
        }


class SpriteSheetProcessor:
    """Orchestrates parallel collision shape processing of a sprite sheet.

    Manages the complete workflow:
    1. Load the sprite sheet
    2. Skip fully transparent sprites
    3. Process sprites in parallel using worker processes
    4. Collect results in sprite index order and update statistics
    5. Save JSON metadata and optional preview images

    Example:
        settings = HitboxerSettings()
        processor = SpriteSheetProcessor(settings)
        stats = processor.process(
            image_path=Path("asteroids.png"),
            sheet=SpriteSheetSpec(32, 32, 5, 19),
            max_workers=4
        )
    """

    def __init__(self, config: HitboxerSettings) -> None:
        """Initialize sprite sheet processor with configuration.

        Args:
            config: Hitboxer settings
        """
        self.config = config
        self.logger = configure_logging(
            log_file=config.logging.log_file,
            console_level=config.logging.log_level,
            file_level=config.logging.file_log_level,
            quiet=False,
        )
        self.shapes: dict[AccuracyTier, list[SpriteShape]] = {}

    def process(
        self,
        image_path: Path,
        sheet: SpriteSheetSpec,
        output_path: Path | None = None,
        max_workers: int | None = None,
        progress_callback: Callable[[int, int, int, bool], None] | None = None,
    ) -> ProcessingStats:
        """Process a sprite sheet with parallel sprite processing.

        Args:
            image_path: Path to the sprite sheet image
            sheet: Grid layout of the sheet
            output_path: Path for the metadata JSON (auto-generated if None)
            max_workers: Maximum worker processes (None = from config)
            progress_callback: Optional callback(completed, total, sprite_index, success)
                for progress updates

        Returns:
            ProcessingStats with counts, timing, and error details

        Raises:
            FileNotFoundError: If the image file does not exist
            ImageLoadError: If the image cannot be decoded
            MetadataSaveError: If the metadata file cannot be written
            KeyboardInterrupt: If processing is cancelled by user
        """
        stats = ProcessingStats()
        stats.start_time = time.time()
        processing_logger = ProcessingLogger(self.logger, stats)

        processing = self.config.processing
        mode = processing.mode
        tiers = list(processing.tiers)

        if max_workers is None:
            max_workers = processing.max_workers

        if output_path is None:
            output_path = MetadataWriter.get_meta_path(image_path, mode)

        self.logger.info(
            "Starting sprite sheet processing",
            input=str(image_path),
            output=str(output_path),
            mode=mode.value,
            tiers=[tier.value for tier in tiers],
            max_workers=max_workers,
        )

        reader = SpriteSheetReader(image_path)
        reader.load()

        try:
            self.logger.info(
                "Sprite sheet loaded",
                width=reader.width,
                height=reader.height,
                sprites=sheet.num_sprites,
            )

            results: dict[int, list[SpriteShape]] = {}
            tasks: dict[int, dict[str, Any]] = {}
            settings_dict = self.config.model_dump()

            for index, mask in reader.iter_masks(sheet):
                position = sheet.origin(index)

                if find_start_pixel(mask, self.config.tracing.threshold) is None:
                    processing_logger.log_sprite_empty(index)
                    results[index] = [
                        SpriteShape(index=index, tier=tier, mode=mode, position=position)
                        for tier in tiers
                    ]
                    continue

                tasks[index] = {
                    "index": index,
                    "position": list(position),
                    "mask": mask.to_dict(),
                    "mode": mode.value,
                    "tiers": [tier.value for tier in tiers],
                    "settings": settings_dict,
                }

            self.logger.info(
                "Filtered sprites",
                total=sheet.num_sprites,
                to_process=len(tasks),
                empty=stats.empty_count,
            )

            if tasks:
                results.update(
                    self._process_sprites_parallel(
                        tasks=tasks,
                        max_workers=max_workers,
                        processing_logger=processing_logger,
                        progress_callback=progress_callback,
                    )
                )
            else:
                self.logger.info("No sprites to process")

            self.shapes = self._collect_by_tier(results, tiers, processing_logger)

            metadata = build_metadata(image_path.name, sheet, mode, self.shapes)
            MetadataWriter(output_path).save(metadata)
            stats.output_files.append(output_path)
            self.logger.info("Metadata saved", output=str(output_path))

            if processing.write_previews:
                for tier in tiers:
                    preview_path = MetadataWriter.get_preview_path(output_path, image_path, mode, tier)
                    render_preview(
                        reader.image,
                        sheet,
                        self.shapes[tier],
                        tier,
                        preview_path,
                        title=f"{image_path.name} - {mode.value}",
                    )
                    stats.output_files.append(preview_path)
                    self.logger.info("Preview saved", output=str(preview_path), tier=tier.value)

        finally:
            reader.close()

        stats.end_time = time.time()

        self.logger.info(
            "Processing complete",
            processed=stats.processed_count,
            empty=stats.empty_count,
            unstable=stats.unstable_count,
            errors=stats.error_count,
            polygons=stats.polygon_count,
            points=stats.point_count,
            duration_seconds=round(stats.duration_seconds, 2),
        )

        return stats

    def _collect_by_tier(
        self,
        results: dict[int, list[SpriteShape]],
        tiers: list[AccuracyTier],
        processing_logger: ProcessingLogger,
    ) -> dict[AccuracyTier, list[SpriteShape]]:
        """Regroup per-sprite results into per-tier lists in sprite index order.

        Sprites whose processing failed are left out.
        """
        by_tier: dict[AccuracyTier, list[SpriteShape]] = {tier: [] for tier in tiers}
        for index in sorted(results):
            for shape in results[index]:
                by_tier[shape.tier].append(shape)

        for tier, shapes in by_tier.items():
            processing_logger.log_tier_summary(
                tier=tier.value,
                sprites=len(shapes),
                polygons=sum(shape.polygon_count for shape in shapes),
                points=sum(shape.total_points for shape in shapes),
            )
        return by_tier

    def _process_sprites_parallel(
        self,
        tasks: dict[int, dict[str, Any]],
        max_workers: int | None,
        processing_logger: ProcessingLogger,
        progress_callback: Callable[[int, int, int, bool], None] | None = None,
    ) -> dict[int, list[SpriteShape]]:
        """Process sprites in parallel using ProcessPoolExecutor.

        Args:
            tasks: Serialized sprite tasks keyed by sprite index
            max_workers: Maximum worker processes
            processing_logger: Progress logger updating the run statistics
            progress_callback: Optional callback(completed, total, sprite_index, success)
                for progress updates

        Returns:
            Dictionary mapping sprite indices to their shapes, one per tier
        """
        results: dict[int, list[SpriteShape]] = {}
        stats = processing_logger.stats

        self.logger.info(
            "Starting parallel processing",
            sprite_count=len(tasks),
            max_workers=max_workers,
        )

        total = len(tasks)
        completed = 0
        pending_futures: dict = {}

        with ProcessPoolExecutor(max_workers=max_workers) as executor:
            for index, task in tasks.items():
                processing_logger.log_sprite_start(index)
                future = executor.submit(process_sprite, task)
                pending_futures[future] = index

            try:
                for future in as_completed(pending_futures):
                    index = pending_futures.pop(future)
                    success = False

                    try:
                        result = future.result()

                        if "error" in result:
                            processing_logger.log_sprite_error(
                                index=result["index"],
                                error=Exception(result["error"]),
                                traceback=result.get("traceback"),
                            )
                        else:
                            success = True
                            shapes = [SpriteShape.from_dict(data) for data in result["shapes"]]
                            results[index] = shapes

                            processing_logger.log_sprite_complete(
                                index=index,
                                polygons=sum(shape.polygon_count for shape in shapes),
                                points=sum(shape.total_points for shape in shapes),
                                stable=all(shape.stable for shape in shapes),
                                duration_ms=result.get("duration_ms", 0.0),
                            )

                    except Exception as e:
                        # Executor-level error
                        tb = traceback.format_exc()
                        processing_logger.log_sprite_error(
                            index=index,
                            error=e,
                            traceback=tb,
                        )

                    completed += 1
                    if progress_callback is not None:
                        progress_callback(completed, total, index, success)

            except KeyboardInterrupt:
                self.logger.info("Cancellation requested by user")
                for f in pending_futures:
                    f.cancel()

                stats.was_cancelled = True
                stats.cancelled_count = len(pending_futures)

                executor.shutdown(wait=True, cancel_futures=True)
                raise

        return results
