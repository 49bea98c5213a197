"""Core geometric types for collision shape representation.

This module defines the fundamental geometric types used throughout hitboxer:
- Point: An immutable 2D point in sprite pixel space
- TraceResult: The outcome of walking a sprite's silhouette boundary
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class Point:
    """A point in 2D sprite space.

    Immutable and hashable for use in sets/dicts. Coordinates are integer
    pixel positions when produced by contour tracing and become real-valued
    once Steiner points are introduced by convex decomposition.

    The y axis grows downward, matching raster row order.

    Attributes:
        x: X coordinate in pixels
        y: Y coordinate in pixels
    """

    x: float
    y: float

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple.

        Returns:
            Tuple of (x, y) coordinates
        """
        return (self.x, self.y)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC and metadata output.

        Returns:
            Dictionary with x and y fields
        """
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Point":
        """Deserialize from dictionary.

        Args:
            data: Dictionary with x and y fields

        Returns:
            Point instance
        """
        return cls(x=data["x"], y=data["y"])


@dataclass
class TraceResult:
    """Boundary walk produced by the contour tracer.

    Attributes:
        points: Boundary pixels in walk order (closed implicitly)
        stable: False when the walk hit its iteration cap before returning
            to the start pixel; the points are then a partial contour
        iterations: Number of steps taken by the walk
    """

    points: list[Point] = field(default_factory=list)
    stable: bool = True
    iterations: int = 0

    def is_empty(self) -> bool:
        """Check if no solid pixel was found."""
        return len(self.points) == 0
