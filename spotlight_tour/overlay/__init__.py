#!/usr/bin/env python3
"""
Overlay module for spotlight tutorial images.

Provides the compositing renderer that draws dim layer, cutouts, tooltip
stack and connectors, and the presentation boundary used to show the result.
"""

from spotlight_tour.overlay.renderer import CompositingRenderer
from spotlight_tour.overlay.layout import TooltipPanel, layout_tooltips, stack_panels
from spotlight_tour.overlay.pixel_metrics import PixelMetrics, ResolvedStyle
from spotlight_tour.overlay.presentation import DismissHandle, PresentationResult, PresentationSink
from spotlight_tour.overlay.shapes import Cutout

__all__ = [
    'CompositingRenderer',
    'TooltipPanel',
    'layout_tooltips',
    'stack_panels',
    'PixelMetrics',
    'ResolvedStyle',
    'DismissHandle',
    'PresentationResult',
    'PresentationSink',
    'Cutout',
]
