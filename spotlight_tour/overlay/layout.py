#!/usr/bin/env python3
"""
Tooltip panel layout.

Panels are stacked top-to-bottom in step order (not in on-screen order of
their targets), each horizontally centred on the canvas, starting at a fixed
offset with a fixed gap between panels.
"""

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from spotlight_tour.models.regions import Rect
from spotlight_tour.models.step import TargetInfo
from spotlight_tour.overlay.pixel_metrics import PixelMetrics, ResolvedStyle
from spotlight_tour.overlay.text_layout import TextBlock, TextMetrics

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TooltipPanel:
    """Placement of one tooltip panel and its wrapped text."""
    index: int
    rect: Rect
    text: TextBlock
    text_origin: Tuple[int, int]
    corner_radius: int

    @property
    def anchor(self) -> Tuple[float, float]:
        """Bottom-centre point where the connector starts."""
        return (self.rect.center_x, float(self.rect.bottom))


def stack_panels(heights: Sequence[int], start: int, spacing: int) -> List[int]:
    """
    Compute panel tops for a vertical stack.

    Args:
        heights: Panel heights in stacking order
        start: Top of the first panel
        spacing: Gap between consecutive panels

    Returns:
        Top coordinate of each panel
    """
    tops = []
    cursor = start
    for height in heights:
        tops.append(cursor)
        cursor += height + spacing
    return tops


def layout_tooltips(canvas_width: int, targets: Sequence[TargetInfo], style: ResolvedStyle,
                    text_metrics: TextMetrics, metrics: PixelMetrics) -> List[TooltipPanel]:
    """
    Lay out one tooltip panel per target.

    Wrap width is min(unwrapped text width, max width - 2 * horizontal
    padding), where max width is the step's own limit or the default.
    """
    blocks = []
    sizes = []
    for target in targets:
        if target.max_tooltip_width_dp is not None:
            max_width = metrics.dp(target.max_tooltip_width_dp)
        else:
            max_width = style.default_max_width

        wrap_width = max(1, min(text_metrics.measure_unwrapped(target.text),
                                max_width - 2 * style.padding_h))
        block = text_metrics.layout(target.text, wrap_width)
        blocks.append(block)
        sizes.append((
            max(wrap_width, block.width) + 2 * style.padding_h,
            block.height + 2 * style.padding_v,
        ))

    tops = stack_panels([h for _, h in sizes], style.start_offset, style.spacing)

    panels = []
    for index, (block, (width, height), top) in enumerate(zip(blocks, sizes, tops)):
        left = (canvas_width - width) // 2
        rect = Rect(left=left, top=top, right=left + width, bottom=top + height)
        panels.append(TooltipPanel(
            index=index,
            rect=rect,
            text=block,
            text_origin=(left + style.padding_h, top + style.padding_v),
            corner_radius=style.tooltip_corner_radius,
        ))
        logger.debug(f"Tooltip {index}: {width}x{height} at ({left}, {top}), {len(block.lines)} lines")

    return panels
