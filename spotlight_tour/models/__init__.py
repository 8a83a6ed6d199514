#!/usr/bin/env python3
"""
Models package for spotlight_tour value objects.

Provides frozen Pydantic models for steps, style and tutorial configuration,
plus the UI node contract and the image buffer passed between stages.
"""

from .regions import Rect
from .color import RGBA, parse_color
from .step import HighlightShape, Step, TargetInfo
from .style import StyleConfig, TooltipStyle, LineStyle, ButtonStyle
from .tutorial_config import AnimationConfig, Trigger, TriggerKind, TutorialConfig
from .ui_node import UINode, ViewNode
from .image_buffer import ImageBuffer

__all__ = [
    'Rect',
    'RGBA',
    'parse_color',
    'HighlightShape',
    'Step',
    'TargetInfo',
    'StyleConfig',
    'TooltipStyle',
    'LineStyle',
    'ButtonStyle',
    'AnimationConfig',
    'Trigger',
    'TriggerKind',
    'TutorialConfig',
    'UINode',
    'ViewNode',
    'ImageBuffer',
]
