"""Image and metadata I/O layer for hitboxer.

This module handles decoding sprite sheets with Pillow, writing collision
metadata as JSON and rendering preview images. It provides a clean
abstraction layer between Pillow and the domain models.

Key responsibilities:
- Load sprite sheets and slice them into per-sprite alpha masks
- Serialize collision shapes with compact point formatting
- Render preview sheets with polygons drawn over each sprite

Key classes:
- SpriteSheetReader: Load sprite sheets and extract alpha masks
- MetadataWriter: Save collision metadata
"""

from hitboxer.io.preview import render_preview
from hitboxer.io.reader import SpriteSheetReader
from hitboxer.io.writer import MetadataWriter, build_metadata, stringify_metadata

__all__ = [
    "MetadataWriter",
    "SpriteSheetReader",
    "build_metadata",
    "render_preview",
    "stringify_metadata",
]
