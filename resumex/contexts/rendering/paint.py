"""
Painter for realized layouts.

Draws a ``RenderedNode`` subtree onto an opaque white Pillow image at a pixel
density multiplier. Subtrees marked export-excluded are skipped.
"""

import math
from pathlib import Path
from typing import Optional

from PIL import Image, ImageDraw, UnidentifiedImageError

from resumex.contexts.rendering.layout import FontBook, RenderedNode
from resumex.contexts.rendering.logger import _log_warning

WHITE = (255, 255, 255)
AVATAR_PLACEHOLDER = (226, 232, 240)


def paint(
    root: RenderedNode,
    scale: float = 1.0,
    fonts: Optional[FontBook] = None,
    skip_excluded: bool = True,
) -> Image.Image:
    """
    Paint a realized subtree.

    Args:
        root: Subtree to paint; its top-left corner becomes the image origin
        scale: Pixel density multiplier (2 doubles both dimensions)
        fonts: Font source (must match the one used for layout)
        skip_excluded: Leave out subtrees carrying the export-exclude class

    Returns:
        RGB image on a white background
    """
    if scale <= 0:
        raise ValueError(f"scale must be positive, got {scale}")
    fonts = fonts or FontBook()
    width = max(1, math.ceil(root.width * scale))
    height = max(1, math.ceil(root.height * scale))

    image = Image.new("RGB", (width, height), WHITE)
    draw = ImageDraw.Draw(image)
    _paint_node(root, image, draw, fonts, scale, root.x, root.y, skip_excluded)
    return image


def _paint_node(rendered, image, draw, fonts, scale, origin_x, origin_y, skip_excluded) -> None:
    if skip_excluded and rendered.excluded:
        return

    left = (rendered.x - origin_x) * scale
    top = (rendered.y - origin_y) * scale
    right = left + rendered.width * scale
    bottom = top + rendered.height * scale

    if rendered.background is not None and rendered.height > 0:
        if rendered.radius:
            radius = min(rendered.radius * scale, (right - left) / 2, (bottom - top) / 2)
            draw.rounded_rectangle((left, top, right, bottom), radius=radius, fill=rendered.background)
        else:
            draw.rectangle((left, top, right, bottom), fill=rendered.background)

    for side, (border_width, color) in rendered.borders.items():
        line_width = max(1, round(border_width * scale))
        if side == "top":
            draw.line((left, top, right, top), fill=color, width=line_width)
        elif side == "bottom":
            draw.line((left, bottom, right, bottom), fill=color, width=line_width)
        elif side == "left":
            draw.line((left, top, left, bottom), fill=color, width=line_width)
        else:
            draw.line((right, top, right, bottom), fill=color, width=line_width)

    if rendered.node.tag == "img":
        _paint_image(rendered, image, draw, (left, top, right, bottom))

    if rendered.lines:
        font = fonts.get(round(rendered.font_px * scale), rendered.bold)
        for line in rendered.lines:
            if line.text:
                position = ((line.x - origin_x) * scale, (line.y - origin_y) * scale)
                draw.text(position, line.text, fill=rendered.color, font=font)

    for child in rendered.children:
        _paint_node(child, image, draw, fonts, scale, origin_x, origin_y, skip_excluded)


def _paint_image(rendered: RenderedNode, image: Image.Image, draw: ImageDraw.ImageDraw, box) -> None:
    left, top, right, bottom = (int(round(v)) for v in box)
    size = (max(1, right - left), max(1, bottom - top))
    source = rendered.node.attrs.get("src", "")

    if source and Path(source).is_file():
        try:
            with Image.open(source) as avatar:
                picture = avatar.convert("RGB").resize(size, Image.Resampling.LANCZOS)
            image.paste(picture, (left, top))
            return
        except (OSError, UnidentifiedImageError) as e:
            _log_warning(f"Avatar could not be drawn ({e}); using placeholder")

    draw.rectangle((left, top, right, bottom), fill=AVATAR_PLACEHOLDER)
