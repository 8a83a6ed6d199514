#!/usr/bin/env python3
"""
Text measurement, word wrapping and drawing for tooltip panels.

Text goes through Pillow's FreeType engine so accented, CJK and symbol
characters are measured and drawn with real glyphs. The font is loaded at
text_size pixels per em; line height comes from the font's own ascent and
descent.
"""

import logging
import math
from dataclasses import dataclass
from functools import lru_cache
from typing import List, Optional, Tuple

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from spotlight_tour.overlay.pixel_metrics import round_half_up

logger = logging.getLogger(__name__)

FONT_CANDIDATES = (
    "DejaVuSans.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/System/Library/Fonts/Supplemental/Arial Unicode.ttf",
    "/System/Library/Fonts/Supplemental/Arial.ttf",
    "C:/Windows/Fonts/segoeui.ttf",
    "C:/Windows/Fonts/arial.ttf",
)
LINE_GAP_RATIO = 0.2


@lru_cache(maxsize=32)
def load_font(size: int, font_path: Optional[str] = None):
    """
    Load a TrueType font at size pixels per em.

    Tries font_path first, then the usual system sans fonts, then Pillow's
    bundled default font.
    """
    candidates = ((font_path,) if font_path else ()) + FONT_CANDIDATES
    for item in candidates:
        try:
            return ImageFont.truetype(item, size=size)
        except OSError:
            continue

    logger.debug(f"No system font found, using Pillow's default font at {size}px")
    return ImageFont.load_default(size=size)


@dataclass(frozen=True)
class TextBlock:
    """Wrapped text with its pixel size."""
    lines: Tuple[str, ...]
    width: int
    height: int
    line_height: int
    ascent: int


class TextMetrics:
    """Measures and draws text at one pixel size."""

    def __init__(self, text_size: int, font_path: Optional[str] = None):
        """
        Args:
            text_size: Font size in pixels per em
            font_path: Optional TrueType/OpenType file to use instead of the system font
        """
        self.text_size = max(1, text_size)
        self.font = load_font(self.text_size, font_path)

        ascent, descent = self.font.getmetrics()
        self.ascent = ascent
        self.descent = descent
        self.line_height = ascent + descent + max(1, round_half_up(self.text_size * LINE_GAP_RATIO))

    def measure(self, text: str) -> int:
        """Pixel width of text drawn on one line."""
        if not text:
            return 0
        return int(math.ceil(self.font.getlength(text)))

    def measure_unwrapped(self, text: str) -> int:
        """Width of the widest explicit line of text."""
        return max((self.measure(line) for line in text.split('\n')), default=0)

    def wrap(self, text: str, max_width: int) -> List[str]:
        """Wrap text to fit within max_width, honouring explicit newlines."""
        lines: List[str] = []
        for paragraph in text.split('\n'):
            lines.extend(self._wrap_paragraph(paragraph, max_width))
        return lines or [""]

    def layout(self, text: str, max_width: int) -> TextBlock:
        lines = self.wrap(text, max_width)
        width = max((self.measure(line) for line in lines), default=0)
        return TextBlock(
            lines=tuple(lines),
            width=width,
            height=len(lines) * self.line_height,
            line_height=self.line_height,
            ascent=self.ascent,
        )

    def draw(self, canvas: np.ndarray, block: TextBlock, x: int, y: int,
             color: Tuple[int, int, int]) -> None:
        """
        Draw block with its top-left corner at (x, y).

        Glyphs are rasterised into an 8-bit coverage mask and blended into
        canvas, so anti-aliased edges mix with whatever is underneath.
        """
        canvas_h, canvas_w = canvas.shape[:2]
        # Glyph overhang (italics, accents on the last character)
        slack = self.text_size
        x0, y0 = max(x, 0), max(y, 0)
        x1 = min(x + block.width + slack, canvas_w)
        y1 = min(y + block.height, canvas_h)
        if x1 <= x0 or y1 <= y0:
            return

        mask = Image.new("L", (x1 - x0, y1 - y0), 0)
        pen = ImageDraw.Draw(mask)
        line_y = y - y0
        for line in block.lines:
            if line:
                pen.text((x - x0, line_y), line, fill=255, font=self.font)
            line_y += block.line_height

        coverage = np.asarray(mask, dtype=np.float32)[..., np.newaxis] / 255.0
        if not coverage.any():
            return

        region = canvas[y0:y1, x0:x1]
        ink = np.array(color, dtype=np.float32)
        blended = region.astype(np.float32) * (1.0 - coverage) + ink * coverage
        region[...] = np.clip(blended + 0.5, 0, 255).astype(np.uint8)

    def _wrap_paragraph(self, text: str, max_width: int) -> List[str]:
        words = text.split()
        if not words:
            return [""]

        lines = []
        current_line: List[str] = []

        for word in words:
            test_line = ' '.join(current_line + [word])
            if self.measure(test_line) <= max_width:
                current_line.append(word)
                continue

            if current_line:
                lines.append(' '.join(current_line))
                current_line = []

            if self.measure(word) <= max_width:
                current_line = [word]
            else:
                pieces = self._break_word(word, max_width)
                lines.extend(pieces[:-1])
                current_line = [pieces[-1]]

        if current_line:
            lines.append(' '.join(current_line))

        return lines

    def _break_word(self, word: str, max_width: int) -> List[str]:
        """Split a word wider than max_width at character boundaries."""
        pieces = []
        current = ""
        for char in word:
            if current and self.measure(current + char) > max_width:
                pieces.append(current)
                current = char
            else:
                current += char
        pieces.append(current)
        return pieces
