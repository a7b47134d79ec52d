"""Canvas allocation and cover-fit background drawing."""

from __future__ import annotations

import logging

from PIL import Image

from .errors import RenderSurfaceError
from .models import CoverRect

_log = logging.getLogger("thumbcard.compositor")

CANVAS_FILL = (0, 0, 0, 255)


def new_canvas(width: int, height: int) -> Image.Image:
    if isinstance(width, bool) or isinstance(height, bool) or not isinstance(width, int) or not isinstance(height, int):
        raise RenderSurfaceError("canvas dimensions must be integers", width, height)
    if width <= 0 or height <= 0:
        raise RenderSurfaceError("canvas dimensions must be positive", width, height)
    try:
        return Image.new("RGBA", (width, height), CANVAS_FILL)
    except (MemoryError, ValueError) as exc:
        raise RenderSurfaceError(f"could not allocate canvas: {exc}", width, height) from exc


def cover_rect(src_size: tuple[int, int], canvas_size: tuple[int, int]) -> CoverRect:
    """Rectangle the source occupies on the canvas when scaled to cover it.

    The scaled axis matches the canvas exactly; the other axis overflows and
    is centered, so offsets on that axis are zero or negative.
    """
    src_w, src_h = src_size
    canvas_w, canvas_h = canvas_size
    img_aspect = src_w / src_h
    target_aspect = canvas_w / canvas_h

    if img_aspect > target_aspect:
        draw_h = float(canvas_h)
        draw_w = src_w * (canvas_h / src_h)
        return CoverRect(x=(canvas_w - draw_w) / 2, y=0.0, width=draw_w, height=draw_h)

    draw_w = float(canvas_w)
    draw_h = src_h * (canvas_w / src_w)
    return CoverRect(x=0.0, y=(canvas_h - draw_h) / 2, width=draw_w, height=draw_h)


def composite_background(canvas: Image.Image, source_image: Image.Image) -> None:
    canvas_w, canvas_h = canvas.size
    rect = cover_rect(source_image.size, canvas.size)

    # Map the canvas back into source coordinates and resample only that box,
    # so the result lands on exactly canvas_w x canvas_h pixels.
    scale = rect.width / source_image.width
    box = (
        -rect.x / scale,
        -rect.y / scale,
        (canvas_w - rect.x) / scale,
        (canvas_h - rect.y) / scale,
    )

    source = source_image if source_image.mode == "RGBA" else source_image.convert("RGBA")
    layer = source.resize((canvas_w, canvas_h), Image.Resampling.BICUBIC, box=box)
    canvas.alpha_composite(layer)

    _log.debug(
        "background composited src=%sx%s rect=(%.1f, %.1f, %.1f, %.1f)",
        source_image.width,
        source_image.height,
        rect.x,
        rect.y,
        rect.width,
        rect.height,
        extra={"event": "background_composited"},
    )
