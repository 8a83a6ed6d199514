#!/usr/bin/env python3
"""
Density conversion for overlay rendering.

Every dp/sp value is turned into an integer pixel count exactly once per
render, using one rounding rule: round half up (floor(value * scale + 0.5)).
"""

import math
from dataclasses import dataclass
from typing import Optional

from spotlight_tour.config.tunables import TooltipLayoutSettings
from spotlight_tour.models.color import RGBA
from spotlight_tour.models.style import LineStyle, StyleConfig, TooltipStyle


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class PixelMetrics:
    """Scale factors of the host surface."""
    density_scale: float = 1.0
    font_scale: Optional[float] = None

    def __post_init__(self):
        if self.density_scale <= 0:
            raise ValueError(f"density_scale must be positive, got {self.density_scale}")
        if self.font_scale is not None and self.font_scale <= 0:
            raise ValueError(f"font_scale must be positive, got {self.font_scale}")

    def dp(self, value: float) -> int:
        """Convert density-independent pixels to device pixels."""
        return round_half_up(value * self.density_scale)

    def sp(self, value: float) -> int:
        """Convert scale-independent pixels (text) to device pixels."""
        scale = self.font_scale if self.font_scale is not None else self.density_scale
        return round_half_up(value * scale)


@dataclass(frozen=True)
class ResolvedStyle:
    """StyleConfig and layout constants with every length in device pixels."""
    border_color: RGBA
    border_width: int
    highlight_corner_radius: int
    highlight_padding: int

    tooltip_style: TooltipStyle
    tooltip_start_color: RGBA
    tooltip_end_color: RGBA
    text_color: RGBA
    text_size: int
    tooltip_corner_radius: int
    padding_h: int
    padding_v: int

    line_color: RGBA
    line_style: LineStyle
    line_width: int
    ball_radius: int

    start_offset: int
    spacing: int
    default_max_width: int
    dash_pattern: tuple

    @classmethod
    def resolve(cls, style: StyleConfig, layout: TooltipLayoutSettings,
                metrics: PixelMetrics) -> "ResolvedStyle":
        return cls(
            border_color=style.highlight_border_color,
            border_width=metrics.dp(style.highlight_border_width_dp),
            highlight_corner_radius=metrics.dp(style.highlight_corner_radius_dp),
            highlight_padding=metrics.dp(style.highlight_padding_dp),
            tooltip_style=style.tooltip_style,
            tooltip_start_color=style.tooltip_start_color,
            tooltip_end_color=style.tooltip_end_color,
            text_color=style.tooltip_text_color,
            text_size=max(1, metrics.sp(style.tooltip_text_size_sp)),
            tooltip_corner_radius=metrics.dp(style.tooltip_corner_radius_dp),
            padding_h=metrics.dp(style.tooltip_padding_horizontal_dp),
            padding_v=metrics.dp(style.tooltip_padding_vertical_dp),
            line_color=style.connector_line_color,
            line_style=style.connector_line_style,
            line_width=metrics.dp(style.connector_line_width_dp),
            ball_radius=metrics.dp(style.connector_ball_radius_dp),
            start_offset=metrics.dp(layout.start_offset_dp),
            spacing=metrics.dp(layout.spacing_dp),
            default_max_width=metrics.dp(layout.default_max_width_dp),
            dash_pattern=layout.dash_pattern,
        )
