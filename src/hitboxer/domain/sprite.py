"""Sprite sheet layout and per-sprite collision shape results.

This module defines the domain models describing where sprites live in a
sheet and what collision geometry was derived for each of them.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from hitboxer.domain.point import Point
from hitboxer.exceptions import InvalidParametersError


class AccuracyTier(str, Enum):
    """Accuracy tier, mapped to a simplification tolerance by configuration."""

    LOW = "low"
    MID = "mid"
    HIGH = "high"


class ShapeMode(str, Enum):
    """Kind of collision geometry to derive from a sprite.

    - OUTLINE: whole silhouette, traced and simplified into one polygon
    - CONVEX_HULL: convex hull of every solid pixel
    - SIMPLIFIED_HULL: convex hull with near-collinear points removed
    - DECOMPOSITION: set of convex polygons covering the silhouette
    """

    OUTLINE = "outline"
    CONVEX_HULL = "convex_hull"
    SIMPLIFIED_HULL = "simplified_hull"
    DECOMPOSITION = "decomposition"


@dataclass(frozen=True)
class SpriteSheetSpec:
    """Grid layout of a sprite sheet.

    Sprites are laid out left to right, top to bottom, ``grid_width`` per row.

    Attributes:
        sprite_width: Width of one sprite cell in pixels
        sprite_height: Height of one sprite cell in pixels
        grid_width: Number of cells per row
        num_sprites: Total number of sprites in the sheet
    """

    sprite_width: int
    sprite_height: int
    grid_width: int
    num_sprites: int

    def __post_init__(self) -> None:
        for name in ("sprite_width", "sprite_height", "grid_width", "num_sprites"):
            value = getattr(self, name)
            if value <= 0:
                raise InvalidParametersError(name, f"must be positive, got {value}")

    @property
    def num_rows(self) -> int:
        """Number of grid rows needed to hold every sprite."""
        return (self.num_sprites + self.grid_width - 1) // self.grid_width

    def origin(self, index: int) -> tuple[int, int]:
        """Return the top-left pixel of a sprite cell.

        Args:
            index: Sprite index (0-based, row-major)

        Returns:
            Tuple of (sx, sy) in sheet pixel coordinates

        Raises:
            IndexError: If index is outside the sheet
        """
        if index < 0 or index >= self.num_sprites:
            raise IndexError(f"Sprite index {index} out of range 0..{self.num_sprites - 1}")
        col = index % self.grid_width
        row = index // self.grid_width
        return (col * self.sprite_width, row * self.sprite_height)


@dataclass
class SpriteShape:
    """Collision geometry derived for one sprite at one accuracy tier.

    Counters are computed from the polygons held, so metadata can never
    drift from the geometry it describes.

    Attributes:
        index: Sprite index in the sheet
        tier: Accuracy tier the shape was computed at
        mode: Kind of geometry
        position: Top-left of the sprite cell in the sheet
        polygons: Output polygons. Outline and hull modes hold at most one.
        stable: False when the contour trace hit its iteration cap
    """

    index: int
    tier: AccuracyTier
    mode: ShapeMode
    position: tuple[int, int] = (0, 0)
    polygons: list[list[Point]] = field(default_factory=list)
    stable: bool = True

    @property
    def polygon_count(self) -> int:
        """Number of polygons in the shape."""
        return len(self.polygons)

    @property
    def total_points(self) -> int:
        """Number of points across all polygons."""
        return sum(len(polygon) for polygon in self.polygons)

    @property
    def outline(self) -> list[Point]:
        """The single polygon of an outline or hull shape (empty if none)."""
        return self.polygons[0] if self.polygons else []

    def is_empty(self) -> bool:
        """Check if no geometry was produced."""
        return self.total_points == 0

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC.

        Returns:
            Dictionary representation of the shape
        """
        return {
            "index": self.index,
            "tier": self.tier.value,
            "mode": self.mode.value,
            "position": list(self.position),
            "polygons": [[p.to_dict() for p in polygon] for polygon in self.polygons],
            "stable": self.stable,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SpriteShape":
        """Deserialize from dictionary.

        Args:
            data: Dictionary representation of a shape

        Returns:
            SpriteShape instance
        """
        return cls(
            index=data["index"],
            tier=AccuracyTier(data["tier"]),
            mode=ShapeMode(data["mode"]),
            position=tuple(data["position"]),  # type: ignore[arg-type]
            polygons=[
                [Point.from_dict(p) for p in polygon] for polygon in data["polygons"]
            ],
            stable=data.get("stable", True),
        )
