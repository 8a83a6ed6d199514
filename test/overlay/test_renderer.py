#!/usr/bin/env python3
"""
Tests for the compositing renderer.

Tests cutout geometry, dim layer compositing, tooltip stacking and the
density conversion used by every render.
"""

import pytest
import numpy as np
import cv2
from pathlib import Path
import sys

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from spotlight_tour.config.tunables import TooltipLayoutSettings
from spotlight_tour.models import HighlightShape, Rect, StyleConfig, TargetInfo
from spotlight_tour.overlay import (
    CompositingRenderer,
    Cutout,
    PixelMetrics,
    ResolvedStyle,
    layout_tooltips,
    stack_panels,
)
from spotlight_tour.overlay.pixel_metrics import round_half_up
from spotlight_tour.overlay.shapes import fill_shape
from spotlight_tour.overlay.text_layout import TextMetrics

OVERLAY = (0, 0, 0, 0xD0)
# 255 * (1 - 0xD0 / 255)
DIMMED_WHITE = 47


@pytest.fixture
def renderer():
    return CompositingRenderer()


@pytest.fixture
def snapshot():
    """400x800 white canvas (width x height)."""
    return np.full((800, 400, 3), 255, dtype=np.uint8)


@pytest.fixture
def resolved_style():
    return ResolvedStyle.resolve(StyleConfig(), TooltipLayoutSettings(), PixelMetrics(1.0))


def circle_target(text="Hi"):
    return TargetInfo(rect=Rect(left=100, top=100, right=140, bottom=140), text=text,
                      shape=HighlightShape.CIRCLE)


class TestCutouts:
    """Test cutout geometry."""

    def test_circle_cutout_geometry(self, renderer, resolved_style):
        cutouts = renderer.compute_cutouts([circle_target()], resolved_style)

        assert len(cutouts) == 1
        assert cutouts[0].center == (120, 120)
        assert cutouts[0].radius == 28
        assert cutouts[0].rect == Rect(left=92, top=92, right=148, bottom=148)

    def test_cutout_uses_longer_side_for_circle(self):
        cutout = Cutout(shape=HighlightShape.CIRCLE, rect=Rect(left=0, top=0, right=60, bottom=20))
        assert cutout.radius == 30

    def test_corner_radius_clamped(self):
        cutout = Cutout(shape=HighlightShape.ROUNDED_RECT,
                        rect=Rect(left=0, top=0, right=20, bottom=10), corner_radius=100)
        assert cutout.effective_corner_radius == 5

    def test_rect_fill_covers_exactly_the_rect(self):
        mask = np.full((10, 10), 255, dtype=np.uint8)
        cutout = Cutout(shape=HighlightShape.RECT, rect=Rect(left=2, top=2, right=6, bottom=6))

        fill_shape(mask, cutout, 0)

        assert np.all(mask[2:6, 2:6] == 0)
        assert mask[6, 6] == 255
        assert mask[1, 1] == 255

    def test_padding_scales_with_density(self, renderer):
        style = ResolvedStyle.resolve(StyleConfig(), TooltipLayoutSettings(), PixelMetrics(2.0))
        cutout = renderer.compute_cutouts([circle_target()], style)[0]
        assert cutout.rect == Rect(left=84, top=84, right=156, bottom=156)


class TestRender:
    """Test full overlay rendering."""

    def test_output_matches_snapshot_size(self, renderer, snapshot):
        result = renderer.render(snapshot, [circle_target()], OVERLAY, StyleConfig())

        assert result.shape == (800, 400, 3)
        assert result.dtype == np.uint8

    def test_snapshot_not_mutated(self, renderer, snapshot):
        original = snapshot.copy()
        renderer.render(snapshot, [circle_target()], OVERLAY, StyleConfig())
        assert np.array_equal(snapshot, original)

    def test_hole_shows_snapshot_and_rest_is_dimmed(self, renderer, snapshot):
        result = renderer.render(snapshot, [circle_target()], OVERLAY, StyleConfig())

        # Centre of the circle cutout is untouched
        assert result[120, 120].tolist() == [255, 255, 255]
        # Far corner carries the full dim layer
        assert result[790, 10].tolist() == [DIMMED_WHITE] * 3

    def test_rect_hole(self, renderer, snapshot):
        target = TargetInfo(rect=Rect(left=100, top=300, right=200, bottom=340), text="Hi",
                            shape=HighlightShape.RECT)

        result = renderer.render(snapshot, [target], OVERLAY, StyleConfig())

        assert result[320, 150].tolist() == [255, 255, 255]
        assert result[320, 60].tolist() == [DIMMED_WHITE] * 3

    def test_no_targets_dims_everything(self, renderer, snapshot):
        result = renderer.render(snapshot, [], OVERLAY, StyleConfig())
        assert np.all(result == DIMMED_WHITE)

    def test_transparent_overlay_keeps_snapshot(self, renderer, snapshot):
        result = renderer.render(snapshot, [], (0, 0, 0, 0), StyleConfig())
        assert np.array_equal(result, snapshot)

    def test_bgra_snapshot_converted(self, renderer):
        bgra = np.full((800, 400, 4), 255, dtype=np.uint8)
        result = renderer.render(bgra, [circle_target()], OVERLAY, StyleConfig())
        assert result.shape == (800, 400, 3)

    def test_non_ascii_tooltip_text_is_drawn(self, renderer, snapshot):
        accented = renderer.render(snapshot, [circle_target("Café menu")], OVERLAY, StyleConfig())
        placeholder = renderer.render(snapshot, [circle_target("Caf? menu")], OVERLAY, StyleConfig())

        assert not np.array_equal(accented, placeholder)

    def test_gradient_runs_bottom_right_to_top_left(self, renderer):
        start = (255, 0, 0, 255)
        end = (0, 0, 255, 255)

        gradient = renderer._gradient(3, 3, start, end)

        assert gradient[2, 2].tolist() == list(start)
        assert gradient[0, 0].tolist() == list(end)


class TestTooltipLayout:
    """Test tooltip stacking."""

    def test_stack_panels(self):
        assert stack_panels([60, 80, 50], start=100, spacing=16) == [100, 176, 272]

    def test_stack_panels_empty(self):
        assert stack_panels([], start=100, spacing=16) == []

    def test_panels_follow_step_order(self, resolved_style):
        targets = [
            TargetInfo(rect=Rect(left=10, top=700, right=50, bottom=740), text="Bottom target"),
            TargetInfo(rect=Rect(left=10, top=10, right=50, bottom=50), text="Top target"),
            TargetInfo(rect=Rect(left=10, top=300, right=50, bottom=340), text="Middle\ntarget"),
        ]
        text_metrics = TextMetrics(resolved_style.text_size)

        panels = layout_tooltips(400, targets, resolved_style, text_metrics, PixelMetrics(1.0))

        assert [p.index for p in panels] == [0, 1, 2]
        assert panels[0].rect.top == 100
        assert panels[1].rect.top == panels[0].rect.bottom + 16
        assert panels[2].rect.top == panels[1].rect.bottom + 16
        assert len(panels[2].text.lines) == 2

    def test_panels_centred(self, resolved_style):
        text_metrics = TextMetrics(resolved_style.text_size)

        panel = layout_tooltips(400, [circle_target("Centred")], resolved_style, text_metrics,
                                PixelMetrics(1.0))[0]

        assert panel.rect.left == (400 - panel.rect.width) // 2
        assert panel.anchor == (panel.rect.center_x, float(panel.rect.bottom))
        assert panel.text_origin == (panel.rect.left + 16, panel.rect.top + 8)

    def test_step_max_width_wraps_text(self, resolved_style):
        text_metrics = TextMetrics(resolved_style.text_size)
        target = TargetInfo(rect=Rect(left=0, top=0, right=10, bottom=10),
                            text="A fairly long sentence that has to wrap", max_tooltip_width_dp=100)

        panel = layout_tooltips(400, [target], resolved_style, text_metrics, PixelMetrics(1.0))[0]

        assert panel.rect.width <= 100
        assert len(panel.text.lines) > 1
        assert panel.rect.height == panel.text.height + 16

    def test_start_offset_scales_with_density(self):
        metrics = PixelMetrics(2.0)
        style = ResolvedStyle.resolve(StyleConfig(), TooltipLayoutSettings(), metrics)
        text_metrics = TextMetrics(style.text_size)

        panel = layout_tooltips(800, [circle_target()], style, text_metrics, metrics)[0]

        assert panel.rect.top == 200


class TestPixelMetrics:
    """Test dp/sp conversion."""

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(2.49) == 2
        assert round_half_up(-0.5) == 0

    def test_dp_and_sp(self):
        metrics = PixelMetrics(density_scale=1.5, font_scale=2.0)

        assert metrics.dp(8) == 12
        assert metrics.dp(1) == 2
        assert metrics.sp(14) == 28

    def test_sp_defaults_to_density(self):
        assert PixelMetrics(density_scale=3.0).sp(14) == 42

    def test_rejects_non_positive_scale(self):
        with pytest.raises(ValueError):
            PixelMetrics(density_scale=0)
