"""End-to-end thumbnail composition: decode, draw, encode."""

from __future__ import annotations

import base64
import logging
from concurrent.futures import ThreadPoolExecutor
from io import BytesIO
from typing import Iterable

from PIL import Image, UnidentifiedImageError

from .errors import DecodeError, EncodeError
from .fonts import FontResolver, PillowTextMeasurer, TextMeasurer
from .frame import composite_background, new_canvas
from .models import CompositionRequest, ImageSource
from .sampler import sample_dominant_color
from .typesetter import apply_overlay_and_text

_log = logging.getLogger("thumbcard.compositor")


def decode_image(data: ImageSource, width: int | None = None, height: int | None = None) -> Image.Image:
    if isinstance(data, Image.Image):
        return data
    if not isinstance(data, (bytes, bytearray)) or not data:
        raise DecodeError("no image data supplied", width, height)
    try:
        image = Image.open(BytesIO(bytes(data)))
        image.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        raise DecodeError(f"could not decode source image: {exc}", width, height) from exc
    if image.width <= 0 or image.height <= 0:
        raise DecodeError("source image has no pixels", width, height)
    return image


def encode_png(canvas: Image.Image) -> bytes:
    buf = BytesIO()
    try:
        canvas.save(buf, format="PNG")
    except (OSError, ValueError) as exc:
        raise EncodeError(f"could not encode PNG: {exc}", canvas.width, canvas.height) from exc
    return buf.getvalue()


def to_data_url(png_bytes: bytes) -> str:
    b64 = base64.b64encode(png_bytes).decode("ascii")
    return f"data:image/png;base64,{b64}"


def render_composite(
    request: CompositionRequest,
    measurer: TextMeasurer | None = None,
    fonts: FontResolver | None = None,
) -> Image.Image:
    """Run the drawing stages and return the finished canvas.

    Pixel output is a pure function of the request, the fonts, and the
    measurer; two calls with the same inputs produce identical pixels.
    """
    source = decode_image(request.image, request.width, request.height)
    canvas = new_canvas(request.width, request.height)

    composite_background(canvas, source)
    theme = sample_dominant_color(canvas)

    fonts = fonts or FontResolver()
    apply_overlay_and_text(
        canvas,
        theme,
        request.title,
        request.provider,
        measurer=measurer or PillowTextMeasurer(fonts),
        fonts=fonts,
    )

    _log.info(
        "composite rendered %dx%d theme=%s",
        request.width,
        request.height,
        theme.css(),
        extra={
            "event": "composite_rendered",
            "width": request.width,
            "height": request.height,
            "theme": theme.css(),
        },
    )
    return canvas


def compose_thumbnail(
    request: CompositionRequest,
    measurer: TextMeasurer | None = None,
    fonts: FontResolver | None = None,
) -> bytes:
    return encode_png(render_composite(request, measurer=measurer, fonts=fonts))


def compose_many(
    requests: Iterable[CompositionRequest],
    max_workers: int = 4,
    measurer: TextMeasurer | None = None,
    fonts: FontResolver | None = None,
) -> list[bytes]:
    """Compose independent requests on a thread pool, preserving input order.

    Each job owns its canvas; fonts load into a per-thread cache. The first failing
    job's error propagates to the caller.
    """
    fonts = fonts or FontResolver()
    jobs = list(requests)
    _log.debug("composing %d jobs", len(jobs), extra={"event": "batch_started", "workers": max_workers})
    with ThreadPoolExecutor(max_workers=max(1, max_workers), thread_name_prefix="thumbcard") as pool:
        futures = [pool.submit(compose_thumbnail, req, measurer, fonts) for req in jobs]
        return [f.result() for f in futures]
