"""Metadata writer for saving collision shapes.

This module provides the MetadataWriter class for writing per-sprite
collision geometry to a JSON document next to the sprite sheet.
"""

import json
import re
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from hitboxer.domain import AccuracyTier, ShapeMode, SpriteShape, SpriteSheetSpec
from hitboxer.exceptions import MetadataSaveError

# Algorithm names written to metadata, one per shape mode
ALGORITHM_NAMES: dict[ShapeMode, str] = {
    ShapeMode.OUTLINE: "marchingSquares",
    ShapeMode.CONVEX_HULL: "convexHull",
    ShapeMode.SIMPLIFIED_HULL: "simplifiedConvexHull",
    ShapeMode.DECOMPOSITION: "convexDecomposition",
}

ALGORITHM_DESCRIPTIONS: dict[ShapeMode, str] = {
    ShapeMode.OUTLINE: "Moore-neighbour contour trace simplified with Douglas-Peucker",
    ShapeMode.CONVEX_HULL: "Monotone chain convex hull of all solid pixels",
    ShapeMode.SIMPLIFIED_HULL: "Monotone chain convex hull simplified with Douglas-Peucker",
    ShapeMode.DECOMPOSITION: "Bayazit algorithm (FACD) - Fast Approximate Convex Decomposition",
}

_NUMBER = r"-?\d+(?:\.\d+)?(?:[eE][-+]?\d+)?"
_POINT_PATTERN = re.compile(
    r'\{\s+"x":\s+(' + _NUMBER + r'),\s+"y":\s+(' + _NUMBER + r")\s+\}"
)


def stringify_metadata(metadata: Mapping[str, Any]) -> str:
    """Serialize metadata as indented JSON with one-line point objects.

    Args:
        metadata: Metadata document

    Returns:
        JSON text
    """
    text = json.dumps(metadata, indent=2)
    return _POINT_PATTERN.sub(r'{ "x": \1, "y": \2 }', text)


def sprite_entry(shape: SpriteShape) -> dict[str, Any]:
    """Build the metadata entry for one sprite.

    Counters are derived from the shape's polygons so they always agree with
    the geometry written next to them.

    Args:
        shape: Collision shape of one sprite at one tier

    Returns:
        Dictionary entry for the ``accuracyLevels`` lists
    """
    entry: dict[str, Any] = {
        "index": shape.index,
        "position": {"x": shape.position[0], "y": shape.position[1]},
    }

    if shape.mode == ShapeMode.DECOMPOSITION:
        entry["convexPolygons"] = [
            [p.to_dict() for p in polygon] for polygon in shape.polygons
        ]
        entry["polygonCount"] = shape.polygon_count
        entry["totalPoints"] = shape.total_points
    else:
        entry["boundingShape"] = [p.to_dict() for p in shape.outline]
        entry["pointCount"] = len(shape.outline)

    entry["stable"] = shape.stable
    return entry


def build_metadata(
    source_image: str,
    sheet: SpriteSheetSpec,
    mode: ShapeMode,
    shapes: Mapping[AccuracyTier, Sequence[SpriteShape]],
) -> dict[str, Any]:
    """Assemble the metadata document for a processed sprite sheet.

    Args:
        source_image: File name of the sprite sheet
        sheet: Grid layout of the sheet
        mode: Shape mode used for every sprite
        shapes: Shapes per tier, in sprite index order

    Returns:
        Metadata document ready for serialization
    """
    return {
        "sourceImage": source_image,
        "spriteWidth": sheet.sprite_width,
        "spriteHeight": sheet.sprite_height,
        "gridWidth": sheet.grid_width,
        "numSprites": sheet.num_sprites,
        "timestamp": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
        "algorithm": ALGORITHM_NAMES[mode],
        "description": ALGORITHM_DESCRIPTIONS[mode],
        "accuracyLevels": {
            tier.value: [sprite_entry(shape) for shape in tier_shapes]
            for tier, tier_shapes in shapes.items()
        },
    }


class MetadataWriter:
    """Writes collision shape metadata as JSON.

    Example:
        writer = MetadataWriter(Path("meta/ship-convex-decomposition-meta.json"))
        writer.save(metadata)
    """

    def __init__(self, output_path: Path) -> None:
        """Initialize the metadata writer.

        Args:
            output_path: Path where the JSON document will be saved
        """
        self._output_path = output_path

    @property
    def output_path(self) -> Path:
        """Return the destination path."""
        return self._output_path

    def save(self, metadata: Mapping[str, Any]) -> None:
        """Write the metadata document, creating parent directories.

        Raises:
            MetadataSaveError: If the file cannot be written
        """
        try:
            self._output_path.parent.mkdir(parents=True, exist_ok=True)
            self._output_path.write_text(stringify_metadata(metadata), encoding="utf-8")
        except OSError as e:
            raise MetadataSaveError(str(self._output_path), str(e)) from e

    @staticmethod
    def get_meta_path(image_path: Path, mode: ShapeMode) -> Path:
        """Generate the default metadata path for a sprite sheet.

        Converts: img/ship.png -> img/meta/ship-convex-decomposition-meta.json

        Args:
            image_path: Sprite sheet path
            mode: Shape mode written to the file

        Returns:
            Path inside a ``meta`` directory next to the image
        """
        slug = mode.value.replace("_", "-")
        return image_path.parent / "meta" / f"{image_path.stem}-{slug}-meta.json"

    @staticmethod
    def get_preview_path(meta_path: Path, image_path: Path, mode: ShapeMode, tier: AccuracyTier) -> Path:
        """Generate the preview image path for one tier.

        Converts: img/ship.png -> <meta dir>/ship-convexDecomposition-low.png

        Args:
            meta_path: Path of the metadata file (previews go next to it)
            image_path: Sprite sheet path
            mode: Shape mode drawn in the preview
            tier: Accuracy tier drawn in the preview

        Returns:
            PNG path next to the metadata file
        """
        return meta_path.parent / f"{image_path.stem}-{ALGORITHM_NAMES[mode]}-{tier.value}.png"
