"""Vertical scrim gradient seeded from the sampled theme color."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
from PIL import Image

from .models import RGBA, ColorRGB

_log = logging.getLogger("thumbcard.compositor")

# Gradient coordinate span and fill rectangle, as fractions of canvas height.
# The fill starts above the span; rows in between clamp to the first stop.
GRADIENT_START = 0.5
GRADIENT_END = 1.0
FILL_START = 0.4


@dataclass(frozen=True)
class GradientStop:
    offset: float
    color: RGBA


def gradient_stops(theme: ColorRGB) -> tuple[GradientStop, ...]:
    return (
        GradientStop(0.0, theme.with_alpha(0)),
        GradientStop(0.6, theme.scaled(0.5).with_alpha(int(255 * 0.8))),
        GradientStop(1.0, theme.scaled(0.2).with_alpha(255)),
    )


def gradient_rows(theme: ColorRGB, height: int, top: int, bottom: int) -> np.ndarray:
    """RGBA color of each canvas row in ``[top, bottom)`` as a uint8 array."""
    stops = gradient_stops(theme)
    offsets = [s.offset for s in stops]

    span_start = height * GRADIENT_START
    span = height * (GRADIENT_END - GRADIENT_START)
    centers = np.arange(top, bottom, dtype=np.float64) + 0.5
    t = np.clip((centers - span_start) / span, 0.0, 1.0)

    channels = [np.interp(t, offsets, [s.color[i] for s in stops]) for i in range(4)]
    return np.stack(channels, axis=1).astype(np.uint8)


def apply_gradient(canvas: Image.Image, theme: ColorRGB) -> None:
    width, height = canvas.size
    top = int(height * FILL_START)
    if top >= height:
        return

    rows = gradient_rows(theme, height, top, height)
    pixels = np.ascontiguousarray(np.broadcast_to(rows[:, None, :], (height - top, width, 4)))
    layer = Image.fromarray(pixels)
    canvas.alpha_composite(layer, dest=(0, top))

    _log.debug("gradient applied theme=%s rows=%d", theme.css(), height - top, extra={"event": "gradient_applied"})
