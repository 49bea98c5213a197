"""Preview rendering for computed collision shapes.

Draws every sprite of a sheet in a grid with its collision polygons on top,
for checking the output of one accuracy tier by eye.
"""

from collections.abc import Sequence
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

from hitboxer.domain import AccuracyTier, SpriteShape, SpriteSheetSpec

MAX_COLUMNS = 5
PADDING = 10
TITLE_HEIGHT = 60

BACKGROUND = "#1a1a1a"
TITLE_COLOR = "#4CAF50"
CAPTION_COLOR = "#aaaaaa"
VERTEX_COLOR = "#ff0000"
VERTEX_RADIUS = 2
POLYGON_COLORS = ("#00ff00", "#00ccff", "#ff00ff", "#ffff00", "#ff9900", "#ff0099")


def _caption(shape: SpriteShape) -> str:
    return f"#{shape.index} ({shape.polygon_count}poly, {shape.total_points}pts)"


def render_preview(
    image: Image.Image,
    sheet: SpriteSheetSpec,
    shapes: Sequence[SpriteShape],
    tier: AccuracyTier,
    output_path: Path,
    title: str | None = None,
) -> Path:
    """Render a preview sheet of sprites with their collision polygons.

    Sprites are laid out at most five per row, each centred in its own cell
    on a dark background. Every polygon of a sprite gets the next colour of
    a fixed cycle; vertices are drawn as small red dots and each cell is
    captioned with its sprite index and polygon/point counts.

    Args:
        image: Decoded sprite sheet
        sheet: Grid layout of the sheet
        shapes: Shapes of one tier, in sprite index order
        tier: Tier the shapes were computed at (used in the title)
        output_path: Destination PNG path
        title: Title text (defaults to the tier name)

    Returns:
        The path written
    """
    cols = min(MAX_COLUMNS, sheet.num_sprites)
    rows = (sheet.num_sprites + cols - 1) // cols
    cell = max(sheet.sprite_width, sheet.sprite_height) + PADDING * 2

    width = cols * cell + PADDING
    height = rows * cell + PADDING + TITLE_HEIGHT

    canvas = Image.new("RGBA", (width, height), BACKGROUND)
    draw = ImageDraw.Draw(canvas)
    font = ImageFont.load_default()

    heading = f"{title or 'Collision shapes'} ({tier.value})"
    draw.text(
        ((width - draw.textlength(heading, font=font)) / 2, TITLE_HEIGHT / 3),
        heading,
        fill=TITLE_COLOR,
        font=font,
    )

    for i, shape in enumerate(shapes):
        col = i % cols
        row = i // cols
        center_x = col * cell + PADDING + cell / 2
        center_y = row * cell + PADDING + TITLE_HEIGHT + cell / 2
        left = int(center_x - sheet.sprite_width / 2)
        top = int(center_y - sheet.sprite_height / 2)

        sx, sy = shape.position
        sprite = image.crop((sx, sy, sx + sheet.sprite_width, sy + sheet.sprite_height))
        canvas.alpha_composite(sprite.convert("RGBA"), (left, top))

        for poly_index, polygon in enumerate(shape.polygons):
            if not polygon:
                continue
            color = POLYGON_COLORS[poly_index % len(POLYGON_COLORS)]
            xy = [(left + p.x, top + p.y) for p in polygon]
            if len(xy) > 1:
                draw.line([*xy, xy[0]], fill=color, width=1)
            for x, y in xy:
                draw.ellipse(
                    (x - VERTEX_RADIUS, y - VERTEX_RADIUS, x + VERTEX_RADIUS, y + VERTEX_RADIUS),
                    fill=VERTEX_COLOR,
                )

        caption = _caption(shape)
        draw.text(
            (center_x - draw.textlength(caption, font=font) / 2, center_y + cell / 2 - 14),
            caption,
            fill=CAPTION_COLOR,
            font=font,
        )

    output_path.parent.mkdir(parents=True, exist_ok=True)
    canvas.convert("RGB").save(output_path)
    return output_path
