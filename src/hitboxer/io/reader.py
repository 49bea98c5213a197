"""Sprite sheet reader for loading raster images.

This module provides the SpriteSheetReader class for decoding sprite sheets
with Pillow and exposing each sprite cell as an AlphaMask.
"""

from collections.abc import Iterator
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from hitboxer.domain import AlphaMask, SpriteSheetSpec
from hitboxer.exceptions import ImageLoadError


class SpriteSheetReader:
    """Loads sprite sheets and slices them into per-sprite alpha masks.

    The image is decoded once and converted to RGBA; only its alpha band is
    kept. Masks returned for individual sprites are views over that shared
    buffer.

    Example:
        reader = SpriteSheetReader(Path("asteroids.png"))
        reader.load()
        for index, mask in reader.iter_masks(sheet):
            print(index, mask.width)
    """

    def __init__(self, image_path: Path) -> None:
        """Initialize the sprite sheet reader.

        Args:
            image_path: Path to the sprite sheet image (PNG, GIF, ...)
        """
        self._image_path = image_path
        self._image: Image.Image | None = None
        self._mask: AlphaMask | None = None

    def load(self) -> None:
        """Load and decode the image file.

        Raises:
            FileNotFoundError: If the image file does not exist
            ImageLoadError: If the file cannot be decoded as an image
        """
        if not self._image_path.exists():
            raise FileNotFoundError(f"Image file not found: {self._image_path}")

        try:
            with Image.open(self._image_path) as source:
                image = source.convert("RGBA")
        except (UnidentifiedImageError, OSError) as e:
            raise ImageLoadError(str(self._image_path), str(e)) from e

        self._image = image
        self._mask = AlphaMask(
            data=image.getchannel("A").tobytes(),
            width=image.width,
            height=image.height,
        )

    def _require_loaded(self) -> Image.Image:
        if self._image is None:
            raise RuntimeError("Image not loaded. Call load() first.")
        return self._image

    @property
    def image(self) -> Image.Image:
        """Return the decoded RGBA image.

        Raises:
            RuntimeError: If the image has not been loaded yet
        """
        return self._require_loaded()

    @property
    def width(self) -> int:
        """Return the sheet width in pixels."""
        return self._require_loaded().width

    @property
    def height(self) -> int:
        """Return the sheet height in pixels."""
        return self._require_loaded().height

    @property
    def alpha_mask(self) -> AlphaMask:
        """Return the alpha band of the whole sheet as a mask.

        Raises:
            RuntimeError: If the image has not been loaded yet
        """
        if self._mask is None:
            raise RuntimeError("Image not loaded. Call load() first.")
        return self._mask

    def mask_for(self, index: int, sheet: SpriteSheetSpec) -> AlphaMask:
        """Get the alpha mask of one sprite cell.

        Cells that extend past the image edge are clipped; the missing
        pixels read as transparent.

        Args:
            index: Sprite index (0-based, row-major)
            sheet: Grid layout of the sheet

        Returns:
            AlphaMask of size sprite_width x sprite_height

        Raises:
            IndexError: If index is outside the sheet
            RuntimeError: If the image has not been loaded yet
        """
        sx, sy = sheet.origin(index)
        return self.alpha_mask.crop(sx, sy, sheet.sprite_width, sheet.sprite_height)

    def iter_masks(self, sheet: SpriteSheetSpec) -> Iterator[tuple[int, AlphaMask]]:
        """Iterate over every sprite cell in index order.

        Yields:
            Tuples of (sprite index, alpha mask)
        """
        sheet_mask = self.alpha_mask
        for index in range(sheet.num_sprites):
            sx, sy = sheet.origin(index)
            yield index, sheet_mask.crop(sx, sy, sheet.sprite_width, sheet.sprite_height)

    def close(self) -> None:
        """Release the decoded image."""
        if self._image is not None:
            self._image.close()
            self._image = None
            self._mask = None

    def __enter__(self) -> "SpriteSheetReader":
        """Context manager entry."""
        self.load()
        return self

    def __exit__(self, _exc_type: object, _exc_val: object, _exc_tb: object) -> None:
        """Context manager exit."""
        self.close()
