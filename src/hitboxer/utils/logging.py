"""Logging utilities for Hitboxer."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

import structlog


@dataclass
class ProcessingStats:
    """Statistics from processing run."""

    processed_count: int = 0
    empty_count: int = 0
    unstable_count: int = 0
    error_count: int = 0
    polygon_count: int = 0
    point_count: int = 0
    errors: list[tuple[int, str]] = field(default_factory=list)
    sprite_timings_ms: list[float] = field(default_factory=list)
    output_files: list[Path] = field(default_factory=list)
    start_time: float | None = None
    end_time: float | None = None
    was_cancelled: bool = False
    cancelled_count: int = 0

    @property
    def duration_seconds(self) -> float:
        """Calculate processing duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0

    @property
    def avg_sprite_time_ms(self) -> float:
        """Mean per-sprite worker time."""
        if not self.sprite_timings_ms:
            return 0.0
        return sum(self.sprite_timings_ms) / len(self.sprite_timings_ms)

    @property
    def min_sprite_time_ms(self) -> float:
        """Fastest per-sprite worker time."""
        return min(self.sprite_timings_ms, default=0.0)

    @property
    def max_sprite_time_ms(self) -> float:
        """Slowest per-sprite worker time."""
        return max(self.sprite_timings_ms, default=0.0)


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Args:
        log_file: Path to log file (auto-generated if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output except errors

    Returns:
        Configured structlog logger
    """
    if log_file is None:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = Path(f"hitboxer_{timestamp}.log")

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(getattr(logging, file_level.upper()))
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.ERROR if quiet else getattr(logging, console_level.upper()))
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("hitboxer")
    logger.info("Logging initialized", log_file=str(log_file), level=file_level)

    return logger


class ProcessingLogger:
    """Logger for tracking processing progress and statistics."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger,
        stats: ProcessingStats | None = None,
    ) -> None:
        self._logger = logger
        self._stats = stats if stats is not None else ProcessingStats()

    def log_sprite_start(self, index: int) -> None:
        """Log start of sprite processing."""
        self._logger.debug("Processing sprite", sprite=index)

    def log_sprite_complete(
        self,
        index: int,
        polygons: int,
        points: int,
        stable: bool,
        duration_ms: float,
    ) -> None:
        """Log successful sprite processing."""
        self._logger.info(
            "Sprite processed",
            sprite=index,
            polygons=polygons,
            points=points,
            stable=stable,
            duration_ms=round(duration_ms, 2),
        )
        self._stats.processed_count += 1
        self._stats.polygon_count += polygons
        self._stats.point_count += points
        self._stats.sprite_timings_ms.append(duration_ms)
        if not stable:
            self._stats.unstable_count += 1
            self._logger.warning("Contour trace hit its iteration cap", sprite=index)

    def log_sprite_empty(self, index: int) -> None:
        """Log a sprite with no solid pixels."""
        self._logger.debug("Sprite is fully transparent", sprite=index)
        self._stats.empty_count += 1

    def log_sprite_error(
        self,
        index: int,
        error: Exception,
        traceback: str | None = None,
    ) -> None:
        """Log sprite processing error."""
        self._logger.error(
            "Sprite processing failed",
            sprite=index,
            error=str(error),
            error_type=type(error).__name__,
            traceback=traceback,
        )
        self._stats.error_count += 1
        self._stats.errors.append((index, str(error)))

    def log_tier_summary(
        self,
        tier: str,
        sprites: int,
        polygons: int,
        points: int,
    ) -> None:
        """Log per-tier totals."""
        self._logger.info(
            "Tier complete",
            tier=tier,
            sprites=sprites,
            polygons=polygons,
            points=points,
        )

    @property
    def stats(self) -> ProcessingStats:
        """Get current processing statistics."""
        return self._stats
