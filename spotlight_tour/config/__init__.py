#!/usr/bin/env python3
"""Configuration: persisted settings and pipeline tunables."""

from spotlight_tour.config.settings import Settings
from spotlight_tour.config.tunables import PipelineTimings, TooltipLayoutSettings

__all__ = ['Settings', 'PipelineTimings', 'TooltipLayoutSettings']
