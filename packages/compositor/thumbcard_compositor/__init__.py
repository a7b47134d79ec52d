"""Thumbnail card compositor: cover-fit background, theme scrim, and typeset text."""

from .errors import CompositorError, DecodeError, EncodeError, RenderSurfaceError
from .fonts import FontResolver, PillowTextMeasurer, TextMeasurer
from .frame import composite_background, cover_rect, new_canvas
from .models import (
    DEFAULT_HEIGHT,
    DEFAULT_WIDTH,
    ColorRGB,
    CompositionRequest,
    CoverRect,
    FontSpec,
    PlacedLine,
    ShadowSpec,
    TextBlock,
)
from .overlay import GradientStop, apply_gradient, gradient_rows, gradient_stops
from .pipeline import compose_many, compose_thumbnail, decode_image, encode_png, render_composite, to_data_url
from .sampler import sample_dominant_color
from .typesetter import (
    apply_overlay_and_text,
    draw_text,
    layout_provider,
    layout_title,
    provider_block,
    title_block,
    wrap_words,
)

__all__ = [
    "DEFAULT_HEIGHT",
    "DEFAULT_WIDTH",
    "ColorRGB",
    "CompositionRequest",
    "CompositorError",
    "CoverRect",
    "DecodeError",
    "EncodeError",
    "FontResolver",
    "FontSpec",
    "GradientStop",
    "PillowTextMeasurer",
    "PlacedLine",
    "RenderSurfaceError",
    "ShadowSpec",
    "TextBlock",
    "TextMeasurer",
    "apply_gradient",
    "apply_overlay_and_text",
    "compose_many",
    "compose_thumbnail",
    "composite_background",
    "cover_rect",
    "decode_image",
    "draw_text",
    "encode_png",
    "gradient_rows",
    "gradient_stops",
    "layout_provider",
    "layout_title",
    "new_canvas",
    "provider_block",
    "render_composite",
    "sample_dominant_color",
    "title_block",
    "to_data_url",
    "wrap_words",
]
