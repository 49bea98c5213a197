"""Configuration settings for Hitboxer."""

from pathlib import Path

from pydantic import BaseModel, Field

from hitboxer.domain import AccuracyTier, ShapeMode


class TracingConfig(BaseModel):
    """Configuration for contour tracing."""

    threshold: int = Field(
        default=128,
        ge=0,
        le=255,
        description="Alpha value at or above which a pixel counts as solid",
    )
    iteration_factor: int = Field(
        default=4,
        ge=1,
        le=64,
        description="Trace iteration cap as a multiple of the mask area",
    )

    def max_iterations(self, width: int, height: int) -> int:
        """Get the trace iteration cap for a mask of the given size."""
        return width * height * self.iteration_factor


class ToleranceConfig(BaseModel):
    """Simplification tolerance per accuracy tier, in pixels.

    Outline and decomposition modes consume the same traced contour, so they
    share one scale to keep point density comparable between them. Hull
    modes start from a far sparser point set and use their own scale.
    """

    outline_low: float = Field(default=4.0, gt=0.0, le=32.0)
    outline_mid: float = Field(default=2.0, gt=0.0, le=32.0)
    outline_high: float = Field(default=1.0, gt=0.0, le=32.0)
    hull_low: float = Field(default=2.0, gt=0.0, le=32.0)
    hull_mid: float = Field(default=1.0, gt=0.0, le=32.0)
    hull_high: float = Field(default=0.5, gt=0.0, le=32.0)

    def for_tier(self, tier: AccuracyTier, mode: ShapeMode = ShapeMode.DECOMPOSITION) -> float:
        """Get the tolerance for a tier.

        Args:
            tier: Accuracy tier
            mode: Shape mode the tolerance is used for

        Returns:
            Simplification tolerance in pixels
        """
        prefix = "hull" if mode in (ShapeMode.CONVEX_HULL, ShapeMode.SIMPLIFIED_HULL) else "outline"
        return getattr(self, f"{prefix}_{tier.value}")


class DecompositionConfig(BaseModel):
    """Configuration for convex decomposition and its optimization pass."""

    max_depth: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Recursion depth past which a sub-polygon is emitted unsplit",
    )
    optimize_ratio: float = Field(
        default=0.3,
        gt=0.0,
        le=1.0,
        description="Fraction of the tier tolerance used to re-simplify convex pieces",
    )
    optimize_floor: float = Field(
        default=0.5,
        ge=0.0,
        le=10.0,
        description="Minimum tolerance used to re-simplify convex pieces",
    )
    min_area: float = Field(
        default=0.0,
        ge=0.0,
        description="Drop convex pieces smaller than this area in square pixels (0 = keep all)",
    )


class ProcessingConfig(BaseModel):
    """Configuration for sprite sheet processing."""

    max_workers: int | None = Field(
        default=None,
        description="Max worker processes (None = auto)",
    )
    mode: ShapeMode = Field(
        default=ShapeMode.DECOMPOSITION,
        description="Kind of collision geometry to derive",
    )
    tiers: list[AccuracyTier] = Field(
        default_factory=lambda: [AccuracyTier.LOW, AccuracyTier.MID, AccuracyTier.HIGH],
        min_length=1,
        description="Accuracy tiers to compute",
    )
    write_previews: bool = Field(
        default=False,
        description="Render a preview PNG per tier next to the metadata",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class HitboxerSettings(BaseModel):
    """Main application settings."""

    tracing: TracingConfig = Field(default_factory=TracingConfig)
    tolerance: ToleranceConfig = Field(default_factory=ToleranceConfig)
    decomposition: DecompositionConfig = Field(default_factory=DecompositionConfig)
    processing: ProcessingConfig = Field(default_factory=ProcessingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> HitboxerSettings:
    """Get default application settings."""
    return HitboxerSettings()
