"""Font resolution and text measurement backed by Pillow."""

from __future__ import annotations

import threading
from typing import Protocol

from PIL import ImageFont

from .models import FontSpec

TITLE_WEIGHT = 900
PROVIDER_WEIGHT = 500

_HEAVY_CANDIDATES = (
    "Inter-Black.ttf",
    "Inter-ExtraBold.ttf",
    "Inter-Bold.ttf",
    "DejaVuSans-Bold.ttf",
    "LiberationSans-Bold.ttf",
    "Arial Bold.ttf",
    "arialbd.ttf",
)
_MEDIUM_CANDIDATES = (
    "Inter-Medium.ttf",
    "Inter-Regular.ttf",
    "DejaVuSans.ttf",
    "LiberationSans-Regular.ttf",
    "Arial.ttf",
    "arial.ttf",
)

Font = ImageFont.FreeTypeFont | ImageFont.ImageFont


class TextMeasurer(Protocol):
    def measure(self, text: str, font: FontSpec) -> float: ...


class FontResolver:
    """Maps a FontSpec onto a loaded Pillow font.

    A configured path for the weight wins, then the first well-known font file
    Pillow can find, then Pillow's bundled default face. Loaded fonts are
    cached per thread and (weight, size), since FreeType faces are not safe
    to render from several threads at once.
    """

    def __init__(self, title_font: str | None = None, provider_font: str | None = None) -> None:
        self.title_font = title_font
        self.provider_font = provider_font
        self._local = threading.local()

    def candidates(self, weight: int) -> list[str]:
        if weight >= 600:
            configured, defaults = self.title_font, _HEAVY_CANDIDATES
        else:
            configured, defaults = self.provider_font, _MEDIUM_CANDIDATES
        names = list(defaults)
        if configured:
            names.insert(0, configured)
        return names

    def resolve_path(self, weight: int) -> str | None:
        for name in self.candidates(weight):
            try:
                ImageFont.truetype(name, 12)
            except OSError:
                continue
            return name
        return None

    def load(self, spec: FontSpec) -> Font:
        cache: dict[tuple[int, int], Font] | None = getattr(self._local, "fonts", None)
        if cache is None:
            cache = self._local.fonts = {}
        key = (spec.weight, spec.size)
        font = cache.get(key)
        if font is None:
            font = self._load_uncached(spec)
            cache[key] = font
        return font

    def _load_uncached(self, spec: FontSpec) -> Font:
        for name in self.candidates(spec.weight):
            try:
                return ImageFont.truetype(name, spec.size)
            except OSError:
                continue
        return ImageFont.load_default(size=spec.size)


class PillowTextMeasurer:
    def __init__(self, fonts: FontResolver | None = None) -> None:
        self.fonts = fonts or FontResolver()

    def measure(self, text: str, font: FontSpec) -> float:
        if font.size <= 0 or not text:
            return 0.0
        return float(self.fonts.load(font).getlength(text))
