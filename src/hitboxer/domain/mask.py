"""Alpha mask view over a sprite sheet raster.

An AlphaMask is a read-only window onto a flat 8-bit alpha buffer. The
buffer is usually the alpha band of a whole sprite sheet, decoded once and
shared by every sprite cell; each mask only records where its cell starts.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from hitboxer.exceptions import InvalidParametersError


@dataclass(frozen=True)
class AlphaMask:
    """Immutable width x height view over a rectangular region of a raster.

    Pixels outside the backing raster (for example a sprite cell that runs
    past the edge of the sheet) read as fully transparent.

    Attributes:
        data: Flat row-major alpha buffer of the backing raster (0-255)
        width: Width of the viewed region in pixels
        height: Height of the viewed region in pixels
        origin_x: Left edge of the region in backing raster coordinates
        origin_y: Top edge of the region in backing raster coordinates
        stride: Row length of the backing raster (defaults to width)
    """

    data: bytes
    width: int
    height: int
    origin_x: int = 0
    origin_y: int = 0
    stride: int = 0

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise InvalidParametersError(
                "mask", f"region must have positive area, got {self.width}x{self.height}"
            )
        if self.stride == 0:
            object.__setattr__(self, "stride", self.width)
        if self.stride < 0:
            raise InvalidParametersError("stride", f"must be positive, got {self.stride}")
        if self.origin_x < 0 or self.origin_y < 0:
            raise InvalidParametersError(
                "origin", f"must be non-negative, got ({self.origin_x}, {self.origin_y})"
            )

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> "AlphaMask":
        """Build a standalone mask from nested rows of alpha values.

        Args:
            rows: Equal-length rows of alpha values, top row first

        Returns:
            AlphaMask covering exactly the given rows
        """
        if not rows or not rows[0]:
            raise InvalidParametersError("rows", "mask must have at least one pixel")
        width = len(rows[0])
        if any(len(row) != width for row in rows):
            raise InvalidParametersError("rows", "all rows must have the same length")
        data = bytes(value for row in rows for value in row)
        return cls(data=data, width=width, height=len(rows))

    @property
    def backing_height(self) -> int:
        """Number of complete rows in the backing raster."""
        return len(self.data) // self.stride

    def alpha(self, x: int, y: int) -> int:
        """Return the alpha value at region coordinates (x, y).

        Coordinates outside the region or the backing raster read as 0.
        """
        if x < 0 or y < 0 or x >= self.width or y >= self.height:
            return 0
        bx = self.origin_x + x
        by = self.origin_y + y
        if bx >= self.stride or by >= self.backing_height:
            return 0
        return self.data[by * self.stride + bx]

    def is_solid(self, x: int, y: int, threshold: int) -> bool:
        """Check whether a pixel meets the alpha threshold.

        Pixels outside the region are never solid, even at threshold 0.
        """
        if x < 0 or y < 0 or x >= self.width or y >= self.height:
            return False
        return self.alpha(x, y) >= threshold

    def crop(self, x: int, y: int, width: int, height: int) -> "AlphaMask":
        """Return a view of a sub-region without copying the buffer.

        Args:
            x: Left edge relative to this mask
            y: Top edge relative to this mask
            width: Width of the sub-region
            height: Height of the sub-region

        Returns:
            AlphaMask sharing this mask's backing buffer
        """
        return AlphaMask(
            data=self.data,
            width=width,
            height=height,
            origin_x=self.origin_x + x,
            origin_y=self.origin_y + y,
            stride=self.stride,
        )

    def region_bytes(self) -> bytes:
        """Copy out just this region as a compact row-major buffer.

        Returns:
            width * height bytes, transparent where the region is clipped
        """
        if (
            self.origin_x == 0
            and self.origin_y == 0
            and self.stride == self.width
            and len(self.data) == self.width * self.height
        ):
            return bytes(self.data)

        out = bytearray(self.width * self.height)
        for y in range(self.height):
            by = self.origin_y + y
            if by >= self.backing_height:
                break
            start = by * self.stride + self.origin_x
            row_len = max(0, min(self.width, self.stride - self.origin_x))
            out[y * self.width : y * self.width + row_len] = self.data[start : start + row_len]
        return bytes(out)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a compact dictionary for IPC.

        Only the viewed region is copied, so workers never receive the
        whole sheet.
        """
        return {
            "width": self.width,
            "height": self.height,
            "alpha": self.region_bytes(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AlphaMask":
        """Deserialize from dictionary."""
        return cls(data=data["alpha"], width=data["width"], height=data["height"])
