#!/usr/bin/env python3
"""
Tunable constants for the overlay pipeline and tooltip layout.

Defaults live on the Pydantic models; register_defaults() publishes them to
Settings so they can be overridden in settings.json, and from_settings()
reads them back.
"""

from typing import Tuple

from pydantic import BaseModel, Field

from spotlight_tour.config.settings import Settings


class PipelineTimings(BaseModel):
    """Delays and bounds used by the orchestrator, in milliseconds."""
    settle_delay_ms: int = Field(300, ge=0, description="Wait before a show() run starts")
    frame_delay_ms: int = Field(16, ge=0, description="One frame for layout to settle")
    readiness_max_attempts: int = Field(10, ge=1, description="Readiness checks in force_show()")
    readiness_interval_ms: int = Field(100, ge=0, description="Delay between readiness checks")

    @property
    def settle_delay(self) -> float:
        return self.settle_delay_ms / 1000.0

    @property
    def frame_delay(self) -> float:
        return self.frame_delay_ms / 1000.0

    @property
    def readiness_interval(self) -> float:
        return self.readiness_interval_ms / 1000.0

    @classmethod
    def register_defaults(cls, settings: Settings) -> None:
        defaults = cls()
        settings.create("overlay.settle_delay_ms", default=defaults.settle_delay_ms)
        settings.create("overlay.frame_delay_ms", default=defaults.frame_delay_ms)
        settings.create("overlay.readiness.max_attempts", default=defaults.readiness_max_attempts)
        settings.create("overlay.readiness.interval_ms", default=defaults.readiness_interval_ms)

    @classmethod
    def from_settings(cls, settings: Settings) -> "PipelineTimings":
        cls.register_defaults(settings)
        return cls(
            settle_delay_ms=settings.get("overlay.settle_delay_ms"),
            frame_delay_ms=settings.get("overlay.frame_delay_ms"),
            readiness_max_attempts=settings.get("overlay.readiness.max_attempts"),
            readiness_interval_ms=settings.get("overlay.readiness.interval_ms"),
        )

    class Config:
        frozen = True
        extra = "forbid"


class TooltipLayoutSettings(BaseModel):
    """Fixed layout constants of the tooltip stack."""
    start_offset_dp: float = Field(100.0, ge=0, description="Top of the first panel")
    spacing_dp: float = Field(16.0, ge=0, description="Gap between stacked panels")
    default_max_width_dp: float = Field(250.0, gt=0, description="Max panel width when a step sets none")
    dash_on_px: int = Field(10, gt=0, description="Dash length of dashed connectors")
    dash_off_px: int = Field(5, ge=0, description="Gap length of dashed connectors")

    @property
    def dash_pattern(self) -> Tuple[int, int]:
        return (self.dash_on_px, self.dash_off_px)

    @classmethod
    def register_defaults(cls, settings: Settings) -> None:
        defaults = cls()
        settings.create("renderer.tooltip.start_offset_dp", default=defaults.start_offset_dp)
        settings.create("renderer.tooltip.spacing_dp", default=defaults.spacing_dp)
        settings.create("renderer.tooltip.default_max_width_dp", default=defaults.default_max_width_dp)
        settings.create("renderer.connector.dash_on_px", default=defaults.dash_on_px)
        settings.create("renderer.connector.dash_off_px", default=defaults.dash_off_px)

    @classmethod
    def from_settings(cls, settings: Settings) -> "TooltipLayoutSettings":
        cls.register_defaults(settings)
        return cls(
            start_offset_dp=settings.get("renderer.tooltip.start_offset_dp"),
            spacing_dp=settings.get("renderer.tooltip.spacing_dp"),
            default_max_width_dp=settings.get("renderer.tooltip.default_max_width_dp"),
            dash_on_px=settings.get("renderer.connector.dash_on_px"),
            dash_off_px=settings.get("renderer.connector.dash_off_px"),
        )

    class Config:
        frozen = True
        extra = "forbid"
