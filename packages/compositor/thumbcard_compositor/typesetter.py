"""Title and provider text layout, wrapping, and drawing."""

from __future__ import annotations

import logging
import math

from PIL import Image, ImageDraw, ImageFilter

from .fonts import PROVIDER_WEIGHT, TITLE_WEIGHT, FontResolver, PillowTextMeasurer, TextMeasurer
from .models import ColorRGB, FontSpec, PlacedLine, ShadowSpec, TextBlock
from .overlay import apply_gradient

_log = logging.getLogger("thumbcard.compositor")

TITLE_SIZE_FRACTION = 0.12
PROVIDER_SIZE_FRACTION = 0.05
MAX_LINE_FRACTION = 0.9
LINE_HEIGHT_FACTOR = 1.1
TITLE_BOTTOM_FRACTION = 0.15
PROVIDER_BOTTOM_FRACTION = 0.05
LONG_TITLE_CHARS = 15

SHADOW_COLOR = (0, 0, 0, int(255 * 0.8))
TITLE_FILL = (255, 255, 255, 255)
PROVIDER_FILL = (255, 255, 255, int(255 * 0.7))


def wrap_words(text: str, font: FontSpec, max_width: float, measurer: TextMeasurer) -> list[str]:
    """Greedy word wrap.

    Widths are measured with the trailing space included. The first word is
    never pushed to a new line, so a single word wider than ``max_width``
    comes out unsplit.
    """
    words = text.split(" ")
    lines: list[str] = []
    line = ""
    for n, word in enumerate(words):
        test_line = line + word + " "
        if measurer.measure(test_line, font) > max_width and n > 0:
            lines.append(line)
            line = word + " "
        else:
            line = test_line
    lines.append(line)
    return [ln.strip() for ln in lines]


def title_block(title: str, width: int, height: int) -> TextBlock:
    size = math.floor(width * TITLE_SIZE_FRACTION)
    return TextBlock(
        text=title.upper(),
        font=FontSpec(size=size, weight=TITLE_WEIGHT),
        fill=TITLE_FILL,
        shadow=ShadowSpec(color=SHADOW_COLOR, blur=10, offset_x=0, offset_y=4),
        anchor_x=width / 2,
        anchor_y=height - height * TITLE_BOTTOM_FRACTION,
        wrap=True,
        max_width=width * MAX_LINE_FRACTION,
        line_height=size * LINE_HEIGHT_FACTOR,
    )


def provider_block(provider: str, width: int, height: int) -> TextBlock:
    size = math.floor(width * PROVIDER_SIZE_FRACTION)
    return TextBlock(
        text=provider.upper(),
        font=FontSpec(size=size, weight=PROVIDER_WEIGHT),
        fill=PROVIDER_FILL,
        # Same shadow as the title with the blur switched off.
        shadow=ShadowSpec(color=SHADOW_COLOR, blur=0, offset_x=0, offset_y=4),
        anchor_x=width / 2,
        anchor_y=height - height * PROVIDER_BOTTOM_FRACTION,
        wrap=False,
        max_width=float(width),
        line_height=size * LINE_HEIGHT_FACTOR,
    )


def layout_title(title: str, width: int, height: int, measurer: TextMeasurer) -> list[PlacedLine]:
    block = title_block(title, width, height)
    lines = wrap_words(block.text, block.font, block.max_width, measurer)

    # The last line stays anchored; earlier lines stack upward.
    y = block.anchor_y - (len(lines) - 1) * block.line_height
    # Long raw titles get one extra line height on top of the stacking shift,
    # even when they fit on a single line.
    if len(title) > LONG_TITLE_CHARS:
        y -= block.line_height

    return [
        PlacedLine(text=ln, x=block.anchor_x, y=y + i * block.line_height, width=measurer.measure(ln, block.font))
        for i, ln in enumerate(lines)
    ]


def layout_provider(provider: str, width: int, height: int, measurer: TextMeasurer) -> list[PlacedLine]:
    block = provider_block(provider, width, height)
    return [
        PlacedLine(
            text=block.text,
            x=block.anchor_x,
            y=block.anchor_y,
            width=measurer.measure(block.text, block.font),
        )
    ]


def _text_layer(
    size: tuple[int, int],
    lines: list[PlacedLine],
    font,
    fill: tuple[int, int, int, int],
    dx: float = 0,
    dy: float = 0,
) -> Image.Image:
    layer = Image.new("RGBA", size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(layer)
    for line in lines:
        if not line.text:
            continue
        # "ms": horizontally centered, y on the alphabetic baseline.
        draw.text((line.x + dx, line.y + dy), line.text, font=font, fill=fill, anchor="ms")
    return layer


def draw_text(canvas: Image.Image, block: TextBlock, lines: list[PlacedLine], fonts: FontResolver) -> None:
    # Canvases narrower than ~9px floor the font size to zero.
    if block.font.size <= 0 or not any(line.text for line in lines):
        return
    font = fonts.load(block.font)

    # Shadow then fill per line: a lower line's shadow lands over the line above.
    for line in lines:
        if not line.text:
            continue
        if block.shadow is not None:
            shadow = block.shadow
            layer = _text_layer(canvas.size, [line], font, shadow.color, shadow.offset_x, shadow.offset_y)
            if shadow.blur > 0:
                layer = layer.filter(ImageFilter.GaussianBlur(radius=shadow.blur / 2))
            canvas.alpha_composite(layer)
        canvas.alpha_composite(_text_layer(canvas.size, [line], font, block.fill))


def apply_overlay_and_text(
    canvas: Image.Image,
    theme: ColorRGB,
    title: str,
    provider: str,
    measurer: TextMeasurer | None = None,
    fonts: FontResolver | None = None,
) -> None:
    """Paint the scrim, then the title block, then the provider line."""
    fonts = fonts or FontResolver()
    measurer = measurer or PillowTextMeasurer(fonts)
    width, height = canvas.size

    apply_gradient(canvas, theme)

    title_lines = layout_title(title, width, height, measurer)
    draw_text(canvas, title_block(title, width, height), title_lines, fonts)

    provider_lines = layout_provider(provider, width, height, measurer)
    draw_text(canvas, provider_block(provider, width, height), provider_lines, fonts)

    _log.debug(
        "text drawn title_lines=%d provider=%r",
        len(title_lines),
        provider,
        extra={"event": "text_drawn"},
    )
