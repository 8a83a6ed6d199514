#!/usr/bin/env python3
"""
Compositing renderer for tutorial overlays.

Turns a screen snapshot plus resolved targets into the final overlay image:
dim layer with spotlight cutouts, highlight borders, a stack of tooltip
panels and connector lines from each panel to its target.
"""

import logging
import math
from typing import Callable, List, Optional, Sequence, Tuple

import cv2
import numpy as np

from spotlight_tour.config.tunables import TooltipLayoutSettings
from spotlight_tour.models.color import RGBA, alpha_of, to_bgr
from spotlight_tour.models.regions import Rect
from spotlight_tour.models.step import HighlightShape, TargetInfo
from spotlight_tour.models.style import LineStyle, StyleConfig, TooltipStyle
from spotlight_tour.overlay.layout import TooltipPanel, layout_tooltips
from spotlight_tour.overlay.pixel_metrics import PixelMetrics, ResolvedStyle, round_half_up
from spotlight_tour.overlay.shapes import Cutout, fill_shape, stroke_shape
from spotlight_tour.overlay.text_layout import TextMetrics

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


class CompositingRenderer:
    """
    Renders tutorial overlay images.

    Stateless apart from its layout constants, so one instance can be shared
    by worker threads. The input snapshot is never modified.
    """

    def __init__(self, layout: Optional[TooltipLayoutSettings] = None):
        """
        Initialize the renderer.

        Args:
            layout: Tooltip stack constants. Defaults to TooltipLayoutSettings()
        """
        self.layout = layout or TooltipLayoutSettings()
        logger.info("CompositingRenderer initialized")

    def render(self, snapshot: np.ndarray, targets: Sequence[TargetInfo], overlay_color: RGBA,
               style: StyleConfig, density_scale: float = 1.0,
               font_scale: Optional[float] = None) -> np.ndarray:
        """
        Render the complete overlay.

        Args:
            snapshot: Screen capture, HxWx3 BGR (BGRA is converted)
            targets: Resolved targets in step order
            overlay_color: Dim layer colour including alpha
            style: Visual style
            density_scale: Pixels per dp
            font_scale: Pixels per sp; defaults to density_scale

        Returns:
            New BGR image with the same dimensions as snapshot
        """
        if snapshot.ndim == 3 and snapshot.shape[2] == 4:
            canvas = cv2.cvtColor(snapshot, cv2.COLOR_BGRA2BGR)
        else:
            canvas = snapshot.copy()

        metrics = PixelMetrics(density_scale=density_scale, font_scale=font_scale)
        resolved = ResolvedStyle.resolve(style, self.layout, metrics)

        height, width = canvas.shape[:2]
        logger.debug(f"Rendering overlay {width}x{height} with {len(targets)} targets")

        # 1-3. Dim layer with holes, composited over the snapshot
        cutouts = self.compute_cutouts(targets, resolved)
        self._composite_dim_layer(canvas, cutouts, overlay_color)

        # 4. Hole outlines
        for cutout in cutouts:
            self._draw_blended(
                canvas, resolved.border_color,
                lambda layer, bgr, c=cutout: stroke_shape(layer, c, bgr, resolved.border_width)
            )

        # 5-6. Tooltip stack and connectors
        text_metrics = TextMetrics(resolved.text_size)
        panels = layout_tooltips(width, targets, resolved, text_metrics, metrics)
        for panel, cutout in zip(panels, cutouts):
            self._draw_panel_background(canvas, panel, resolved)
            self._draw_blended(
                canvas, resolved.text_color,
                lambda layer, bgr, p=panel: text_metrics.draw(layer, p.text, p.text_origin[0],
                                                             p.text_origin[1], bgr)
            )
            self._draw_connector(canvas, panel.anchor, cutout.top_center, resolved)

        return canvas

    def compute_cutouts(self, targets: Sequence[TargetInfo], style: ResolvedStyle) -> List[Cutout]:
        """Pad each target rect and pair it with its shape."""
        return [
            Cutout(
                shape=target.shape,
                rect=target.rect.expanded(style.highlight_padding),
                corner_radius=style.highlight_corner_radius,
            )
            for target in targets
        ]

    def _composite_dim_layer(self, canvas: np.ndarray, cutouts: Sequence[Cutout],
                             overlay_color: RGBA) -> None:
        """Blend the dim colour over canvas everywhere except inside cutouts."""
        height, width = canvas.shape[:2]

        # 255 = dimmed, 0 = hole; anti-aliased edges land in between
        coverage = np.full((height, width), 255, dtype=np.uint8)
        for cutout in cutouts:
            fill_shape(coverage, cutout, 0)

        alpha = coverage.astype(np.float32) * (alpha_of(overlay_color) / 255.0)
        alpha = alpha[..., np.newaxis]
        dim = np.array(to_bgr(overlay_color), dtype=np.float32)

        blended = canvas.astype(np.float32) * (1.0 - alpha) + dim * alpha
        canvas[...] = np.clip(blended + 0.5, 0, 255).astype(np.uint8)

    def _draw_panel_background(self, canvas: np.ndarray, panel: TooltipPanel,
                               style: ResolvedStyle) -> None:
        """Fill a rounded panel with a solid colour or a corner-to-corner gradient."""
        rect = panel.rect
        canvas_h, canvas_w = canvas.shape[:2]
        x0, y0 = max(rect.left, 0), max(rect.top, 0)
        x1, y1 = min(rect.right, canvas_w), min(rect.bottom, canvas_h)
        if x1 <= x0 or y1 <= y0:
            logger.debug(f"Tooltip {panel.index} is off-canvas, skipping background")
            return

        panel_w, panel_h = rect.width, rect.height
        local = Cutout(
            shape=HighlightShape.ROUNDED_RECT,
            rect=Rect(left=0, top=0, right=panel_w, bottom=panel_h),
            corner_radius=panel.corner_radius,
        )
        mask = np.zeros((panel_h, panel_w), dtype=np.uint8)
        fill_shape(mask, local, 255)

        if style.tooltip_style == TooltipStyle.GRADIENT:
            rgba = self._gradient(panel_w, panel_h, style.tooltip_start_color, style.tooltip_end_color)
        else:
            rgba = np.empty((panel_h, panel_w, 4), dtype=np.float32)
            rgba[...] = np.array(style.tooltip_start_color, dtype=np.float32)

        # Crop the panel-local buffers to the visible part of the canvas
        ly0, lx0 = y0 - rect.top, x0 - rect.left
        ly1, lx1 = ly0 + (y1 - y0), lx0 + (x1 - x0)
        rgba = rgba[ly0:ly1, lx0:lx1]
        coverage = mask[ly0:ly1, lx0:lx1].astype(np.float32) / 255.0

        alpha = (rgba[..., 3] / 255.0 * coverage)[..., np.newaxis]
        fill_bgr = rgba[..., [2, 1, 0]]
        region = canvas[y0:y1, x0:x1].astype(np.float32)
        blended = region * (1.0 - alpha) + fill_bgr * alpha
        canvas[y0:y1, x0:x1] = np.clip(blended + 0.5, 0, 255).astype(np.uint8)

    def _gradient(self, width: int, height: int, start: RGBA, end: RGBA) -> np.ndarray:
        """Linear gradient from the bottom-right corner (start) to the top-left (end)."""
        ys, xs = np.mgrid[0:height, 0:width].astype(np.float32)
        dx, dy = -(width - 1), -(height - 1)
        denom = float(dx * dx + dy * dy) or 1.0
        t = ((xs - (width - 1)) * dx + (ys - (height - 1)) * dy) / denom
        t = np.clip(t, 0.0, 1.0)[..., np.newaxis]

        start_arr = np.array(start, dtype=np.float32)
        end_arr = np.array(end, dtype=np.float32)
        return start_arr * (1.0 - t) + end_arr * t

    def _draw_connector(self, canvas: np.ndarray, start: Point, end: Point,
                        style: ResolvedStyle) -> None:
        """Straight connector with filled end caps at both points."""
        p0 = (round_half_up(start[0]), round_half_up(start[1]))
        p1 = (round_half_up(end[0]), round_half_up(end[1]))

        def draw(layer: np.ndarray, bgr: Tuple[int, int, int]) -> None:
            if style.line_width > 0:
                if style.line_style == LineStyle.DASHED:
                    self._draw_dashed_line(layer, p0, p1, bgr, style.line_width, style.dash_pattern)
                else:
                    cv2.line(layer, p0, p1, bgr, style.line_width, cv2.LINE_AA)
            if style.ball_radius > 0:
                cv2.circle(layer, p0, style.ball_radius, bgr, -1, cv2.LINE_AA)
                cv2.circle(layer, p1, style.ball_radius, bgr, -1, cv2.LINE_AA)

        self._draw_blended(canvas, style.line_color, draw)

    def _draw_dashed_line(self, canvas: np.ndarray, p0: Tuple[int, int], p1: Tuple[int, int],
                          color: Tuple[int, int, int], thickness: int,
                          pattern: Tuple[int, int]) -> None:
        dash_on, dash_off = pattern
        length = math.hypot(p1[0] - p0[0], p1[1] - p0[1])
        if length == 0:
            return

        ux = (p1[0] - p0[0]) / length
        uy = (p1[1] - p0[1]) / length
        position = 0.0
        while position < length:
            end = min(position + dash_on, length)
            seg_start = (round_half_up(p0[0] + ux * position), round_half_up(p0[1] + uy * position))
            seg_end = (round_half_up(p0[0] + ux * end), round_half_up(p0[1] + uy * end))
            cv2.line(canvas, seg_start, seg_end, color, thickness, cv2.LINE_AA)
            position += dash_on + dash_off

    def _draw_blended(self, canvas: np.ndarray, color: RGBA,
                      draw: Callable[[np.ndarray, Tuple[int, int, int]], None]) -> None:
        """Run a drawing call with the colour's alpha applied."""
        alpha = alpha_of(color)
        if alpha <= 0.0:
            return

        bgr = to_bgr(color)
        if alpha >= 1.0:
            draw(canvas, bgr)
            return

        layer = canvas.copy()
        draw(layer, bgr)
        cv2.addWeighted(layer, alpha, canvas, 1.0 - alpha, 0, dst=canvas)


if __name__ == "__main__":
    # Setup logging for testing
    logging.basicConfig(
        level=logging.DEBUG,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    demo_snapshot = np.full((800, 400, 3), 235, dtype=np.uint8)
    cv2.rectangle(demo_snapshot, (100, 100), (139, 139), (60, 160, 60), -1)
    cv2.rectangle(demo_snapshot, (40, 600), (359, 659), (200, 120, 40), -1)

    demo_targets = [
        TargetInfo(rect=Rect(left=100, top=100, right=140, bottom=140),
                   text="Tap here to start a new session", shape=HighlightShape.CIRCLE),
        TargetInfo(rect=Rect(left=40, top=600, right=360, bottom=660),
                   text="Your recent history shows up in this list", shape=HighlightShape.ROUNDED_RECT),
    ]

    renderer = CompositingRenderer()
    result = renderer.render(demo_snapshot, demo_targets, (0, 0, 0, 0xD0), StyleConfig())
    cv2.imwrite("overlay_demo.png", result)
    print(f"Rendered {result.shape[1]}x{result.shape[0]} overlay to overlay_demo.png")
