#!/usr/bin/env python3
"""
spotlight_tour - spotlight style onboarding overlays.

Dims a snapshot of the host surface, punches highlight holes over the
targeted UI nodes and stacks tooltips connected to them, then hands the
finished image to the host for modal display.
"""

from spotlight_tour.errors import (
    BufferReleasedError,
    FailureKind,
    InvalidStepDefinition,
    PipelineFailure,
    TutorialError,
)
from spotlight_tour.models import (
    HighlightShape,
    ImageBuffer,
    Rect,
    Step,
    StyleConfig,
    TargetInfo,
    Trigger,
    TutorialConfig,
    ViewNode,
)
from spotlight_tour.orchestrator import OverlayOrchestrator, RunOutcome, RunState
from spotlight_tour.overlay import CompositingRenderer, DismissHandle, PresentationResult
from spotlight_tour.resolver import TargetResolver
from spotlight_tour.storage import InMemoryStateStore, JsonStateStore

__version__ = "0.1.0"

__all__ = [
    'BufferReleasedError',
    'FailureKind',
    'InvalidStepDefinition',
    'PipelineFailure',
    'TutorialError',
    'HighlightShape',
    'ImageBuffer',
    'Rect',
    'Step',
    'StyleConfig',
    'TargetInfo',
    'Trigger',
    'TutorialConfig',
    'ViewNode',
    'OverlayOrchestrator',
    'RunOutcome',
    'RunState',
    'CompositingRenderer',
    'DismissHandle',
    'PresentationResult',
    'TargetResolver',
    'InMemoryStateStore',
    'JsonStateStore',
]
