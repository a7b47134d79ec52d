"""Typed compositor models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from PIL import Image

DEFAULT_WIDTH = 1080
DEFAULT_HEIGHT = 1920

RGBA = tuple[int, int, int, int]


@dataclass(frozen=True)
class ColorRGB:
    r: int
    g: int
    b: int

    def scaled(self, factor: float) -> ColorRGB:
        # 8-bit channel math: truncate toward zero.
        return ColorRGB(int(self.r * factor), int(self.g * factor), int(self.b * factor))

    def with_alpha(self, alpha: int) -> RGBA:
        return (self.r, self.g, self.b, alpha)

    def css(self) -> str:
        return f"rgb({self.r},{self.g},{self.b})"


@dataclass(frozen=True)
class FontSpec:
    size: int
    weight: int


@dataclass(frozen=True)
class ShadowSpec:
    color: RGBA
    blur: float
    offset_x: int = 0
    offset_y: int = 0


@dataclass(frozen=True)
class TextBlock:
    text: str
    font: FontSpec
    fill: RGBA
    shadow: ShadowSpec | None
    anchor_x: float
    anchor_y: float
    wrap: bool
    max_width: float
    line_height: float


@dataclass(frozen=True)
class PlacedLine:
    text: str
    x: float
    y: float
    width: float


@dataclass(frozen=True)
class CoverRect:
    x: float
    y: float
    width: float
    height: float


ImageSource = Union[bytes, bytearray, Image.Image]


@dataclass(frozen=True)
class CompositionRequest:
    image: ImageSource
    title: str
    provider: str
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT

    def __post_init__(self) -> None:
        for name in ("width", "height"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
        if self.title is None or self.provider is None:
            raise ValueError("title and provider must not be None")
