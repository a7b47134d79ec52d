import sys
import unittest
from pathlib import Path
from unittest.mock import patch

import numpy as np
from PIL import Image

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "compositor"))

from thumbcard_compositor.fonts import FontResolver
from thumbcard_compositor.models import ColorRGB, FontSpec, PlacedLine
from thumbcard_compositor.overlay import apply_gradient
from thumbcard_compositor.typesetter import (
    SHADOW_COLOR,
    TITLE_FILL,
    apply_overlay_and_text,
    draw_text,
    layout_provider,
    layout_title,
    provider_block,
    title_block,
    wrap_words,
)


class FixedAdvanceMeasurer:
    """Every character advances 0.6 em."""

    def measure(self, text, font):
        return len(text) * font.size * 0.6


MEASURER = FixedAdvanceMeasurer()
TITLE_FONT = FontSpec(size=129, weight=900)


class WrapWordsTests(unittest.TestCase):
    def test_breaks_when_line_would_exceed_limit(self):
        lines = wrap_words("SUPER GOLD QUEST", TITLE_FONT, 1080 * 0.9, MEASURER)
        self.assertEqual(lines, ["SUPER GOLD", "QUEST"])

    def test_short_text_stays_on_one_line(self):
        self.assertEqual(wrap_words("GOLD RUSH", TITLE_FONT, 972, MEASURER), ["GOLD RUSH"])

    def test_lines_respect_limit_unless_single_word(self):
        text = "THE QUICK BROWN FOX JUMPS OVER A REMARKABLYLONGWORDTHATNEVERFITS AND LANDS"
        max_width = 972
        lines = wrap_words(text, TITLE_FONT, max_width, MEASURER)
        self.assertGreater(len(lines), 1)
        for line in lines:
            if " " in line:
                self.assertLessEqual(MEASURER.measure(line, TITLE_FONT), max_width)
        self.assertIn("REMARKABLYLONGWORDTHATNEVERFITS", lines)
        self.assertEqual(" ".join(lines), text)

    def test_oversized_first_word_is_not_split(self):
        lines = wrap_words("MEGAJACKPOTTASTIC WIN", TITLE_FONT, 300, MEASURER)
        self.assertEqual(lines, ["MEGAJACKPOTTASTIC", "WIN"])

    def test_empty_text_yields_one_empty_line(self):
        self.assertEqual(wrap_words("", TITLE_FONT, 972, MEASURER), [""])


class BlockTests(unittest.TestCase):
    def test_title_block(self):
        block = title_block("Gold Rush", 1080, 1920)
        self.assertEqual(block.text, "GOLD RUSH")
        self.assertEqual(block.font, FontSpec(size=129, weight=900))
        self.assertEqual(block.fill, (255, 255, 255, 255))
        self.assertEqual(block.shadow.color, (0, 0, 0, 204))
        self.assertEqual((block.shadow.blur, block.shadow.offset_y), (10, 4))
        self.assertAlmostEqual(block.max_width, 972)
        self.assertAlmostEqual(block.line_height, 129 * 1.1)
        self.assertEqual(block.anchor_x, 540)

    def test_provider_block(self):
        block = provider_block("Acme Games", 1080, 1920)
        self.assertEqual(block.text, "ACME GAMES")
        self.assertEqual(block.font, FontSpec(size=54, weight=500))
        self.assertEqual(block.fill, (255, 255, 255, 178))
        self.assertEqual(block.shadow.blur, 0)
        self.assertEqual(block.shadow.offset_y, 4)
        self.assertFalse(block.wrap)


class LayoutTitleTests(unittest.TestCase):
    BASE_Y = 1920 - 1920 * 0.15
    LINE_HEIGHT = 129 * 1.1

    def test_single_short_line_sits_on_anchor(self):
        lines = layout_title("Gold", 1080, 1920, MEASURER)
        self.assertEqual(len(lines), 1)
        self.assertAlmostEqual(lines[0].y, self.BASE_Y)
        self.assertEqual(lines[0].x, 540)

    def test_block_grows_upward(self):
        lines = layout_title("Big Bass Bonanza Reel Kingdom", 1080, 1920, MEASURER)
        self.assertGreater(len(lines), 1)
        ys = [ln.y for ln in lines]
        for upper, lower in zip(ys, ys[1:]):
            self.assertAlmostEqual(lower - upper, self.LINE_HEIGHT)
        # Long title: last line carries the extra one-line shift.
        self.assertAlmostEqual(ys[-1], self.BASE_Y - self.LINE_HEIGHT)

    def test_sixteen_char_single_line_is_shifted(self):
        lines = layout_title("ABCDEFGHIJKLMNOP", 1080, 1920, MEASURER)
        self.assertEqual(len(lines), 1)
        self.assertAlmostEqual(lines[0].y, self.BASE_Y - self.LINE_HEIGHT)

    def test_fourteen_char_single_line_is_not_shifted(self):
        lines = layout_title("ABCDEFGHIJKLMN", 1080, 1920, MEASURER)
        self.assertEqual(len(lines), 1)
        self.assertAlmostEqual(lines[0].y, self.BASE_Y)

    def test_fifteen_chars_is_not_long(self):
        lines = layout_title("ABCDEFGHIJKLMNO", 1080, 1920, MEASURER)
        self.assertAlmostEqual(lines[0].y, self.BASE_Y)

    def test_both_shifts_apply_to_wrapped_long_title(self):
        lines = layout_title("SUPER GOLD QUEST", 1080, 1920, MEASURER)
        self.assertEqual([ln.text for ln in lines], ["SUPER GOLD", "QUEST"])
        self.assertAlmostEqual(lines[0].y, self.BASE_Y - 2 * self.LINE_HEIGHT)


class LayoutProviderTests(unittest.TestCase):
    def test_single_centered_line_near_bottom(self):
        lines = layout_provider("Acme Games with a rather long studio name", 1080, 1920, MEASURER)
        self.assertEqual(len(lines), 1)
        self.assertEqual(lines[0].text, "ACME GAMES WITH A RATHER LONG STUDIO NAME")
        self.assertEqual(lines[0].x, 540)
        self.assertAlmostEqual(lines[0].y, 1920 - 1920 * 0.05)

    def test_independent_of_title(self):
        short = layout_provider("Acme", 1080, 1920, MEASURER)[0].y
        self.assertAlmostEqual(short, 1824)


class DrawTextTests(unittest.TestCase):
    def test_each_line_gets_shadow_then_fill(self):
        block = title_block("Gold Rush", 1080, 1920)
        lines = [
            PlacedLine(text="GOLD", x=540, y=1490, width=0),
            PlacedLine(text="", x=540, y=1560, width=0),
            PlacedLine(text="RUSH", x=540, y=1632, width=0),
        ]
        calls = []

        def layer(size, placed, font, fill, dx=0, dy=0):
            calls.append(([ln.text for ln in placed], fill, dy))
            return Image.new("RGBA", size, (0, 0, 0, 0))

        canvas = Image.new("RGBA", (1080, 1920), (0, 0, 0, 255))
        with patch("thumbcard_compositor.typesetter._text_layer", side_effect=layer):
            draw_text(canvas, block, lines, FontResolver())

        self.assertEqual(
            calls,
            [
                (["GOLD"], SHADOW_COLOR, 4),
                (["GOLD"], TITLE_FILL, 0),
                (["RUSH"], SHADOW_COLOR, 4),
                (["RUSH"], TITLE_FILL, 0),
            ],
        )


class ApplyOverlayAndTextTests(unittest.TestCase):
    def test_empty_strings_render_only_the_scrim(self):
        theme = ColorRGB(80, 90, 100)
        expected = Image.new("RGBA", (216, 384), (128, 128, 128, 255))
        apply_gradient(expected, theme)

        canvas = Image.new("RGBA", (216, 384), (128, 128, 128, 255))
        apply_overlay_and_text(canvas, theme, "", "", measurer=MEASURER, fonts=FontResolver())
        self.assertEqual(canvas.tobytes(), expected.tobytes())

    def test_title_draws_white_pixels_above_anchor(self):
        canvas = Image.new("RGBA", (1080, 1920), (60, 60, 60, 255))
        apply_overlay_and_text(canvas, ColorRGB(60, 60, 60), "Gold", "", fonts=FontResolver())
        band = np.asarray(canvas)[1500:1640, 200:880, :3]
        self.assertGreater(int(band.min(axis=2).max()), 200)
        self.assertEqual(canvas.size, (1080, 1920))

    def test_tiny_canvas_skips_zero_size_fonts(self):
        canvas = Image.new("RGBA", (5, 8), (0, 0, 0, 255))
        apply_overlay_and_text(canvas, ColorRGB(0, 0, 0), "Title", "Provider", fonts=FontResolver())
        self.assertEqual(canvas.size, (5, 8))


if __name__ == "__main__":
    unittest.main()
