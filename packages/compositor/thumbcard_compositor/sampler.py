"""Theme color sampling from the lower band of a rendered canvas."""

from __future__ import annotations

import numpy as np
from PIL import Image

from .models import ColorRGB

BAND_FRACTION = 0.2
PIXEL_STRIDE = 10


def sample_dominant_color(canvas: Image.Image) -> ColorRGB:
    width, height = canvas.size
    sample_height = int(height * BAND_FRACTION)
    if sample_height <= 0:
        return ColorRGB(0, 0, 0)

    start_y = height - sample_height
    band = canvas.crop((0, start_y, width, height)).convert("RGB")
    pixels = np.asarray(band, dtype=np.uint8).reshape((-1, 3))

    # Stride over the flattened band in row-major order.
    sampled = pixels[::PIXEL_STRIDE]
    sums = sampled.sum(axis=0, dtype=np.int64)
    # Divide by the pixels actually visited (ceil(total / 10)), not total / 10;
    # the two agree whenever the band size is a multiple of the stride.
    count = len(sampled)
    r, g, b = (int(v) // count for v in sums)
    return ColorRGB(r, g, b)
