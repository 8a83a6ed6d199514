#!/usr/bin/env python3
"""
StyleConfig model for overlay appearance.

All lengths are density-independent (dp, text size in sp) and converted to
pixels once per render. Colours accept anything parse_color understands.
"""

from enum import Enum
from typing import Tuple

from pydantic import BaseModel, Field, field_validator

from spotlight_tour.models.color import RGBA, WHITE, parse_color

BRAND_BLUE = "#2B44B1"
BRAND_BLUE_LIGHT = "#015BE2"


class TooltipStyle(str, Enum):
    """Fill mode of tooltip panels."""
    SOLID = "solid"
    GRADIENT = "gradient"


class LineStyle(str, Enum):
    """Stroke pattern of connector lines."""
    SOLID = "solid"
    DASHED = "dashed"


class ButtonStyle(str, Enum):
    """Look of the dismiss button drawn by the presentation sink."""
    SOLID_BLUE = "solid_blue"
    GRADIENT_BLUE = "gradient_blue"
    SOLID_YELLOW = "solid_yellow"
    GRADIENT_YELLOW = "gradient_yellow"
    CUSTOM = "custom"


class StyleConfig(BaseModel):
    """Visual style of highlights, tooltip panels and connectors."""
    highlight_border_color: Tuple[int, int, int, int] = Field(BRAND_BLUE, validate_default=True)
    highlight_border_width_dp: float = Field(2.0, ge=0)
    highlight_corner_radius_dp: float = Field(4.0, ge=0)
    highlight_padding_dp: float = Field(8.0, ge=0)

    tooltip_style: TooltipStyle = TooltipStyle.GRADIENT
    tooltip_colors: Tuple[Tuple[int, int, int, int], ...] = Field(
        default=(BRAND_BLUE, BRAND_BLUE_LIGHT), validate_default=True
    )
    tooltip_text_color: Tuple[int, int, int, int] = WHITE
    tooltip_text_size_sp: float = Field(14.0, gt=0)
    tooltip_corner_radius_dp: float = Field(100.0, ge=0)
    tooltip_padding_horizontal_dp: float = Field(16.0, ge=0)
    tooltip_padding_vertical_dp: float = Field(8.0, ge=0)

    connector_line_color: Tuple[int, int, int, int] = Field(BRAND_BLUE, validate_default=True)
    connector_line_style: LineStyle = LineStyle.DASHED
    connector_line_width_dp: float = Field(2.0, ge=0)
    connector_ball_radius_dp: float = Field(4.0, ge=0)

    button_text: str = "Got it"
    button_style: ButtonStyle = ButtonStyle.GRADIENT_BLUE

    @field_validator('highlight_border_color', 'tooltip_text_color', 'connector_line_color', mode='before')
    @classmethod
    def validate_color(cls, v):
        return parse_color(v)

    @field_validator('tooltip_colors', mode='before')
    @classmethod
    def validate_tooltip_colors(cls, v):
        colors = [parse_color(c) for c in v]
        if not 1 <= len(colors) <= 2:
            raise ValueError(f'tooltip_colors must hold 1 or 2 colours, got {len(colors)}')
        return tuple(colors)

    @property
    def tooltip_start_color(self) -> RGBA:
        return self.tooltip_colors[0]

    @property
    def tooltip_end_color(self) -> RGBA:
        """Second gradient stop; falls back to the first colour."""
        return self.tooltip_colors[1] if len(self.tooltip_colors) > 1 else self.tooltip_colors[0]

    class Config:
        frozen = True
        extra = "forbid"
