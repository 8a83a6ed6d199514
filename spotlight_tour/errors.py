#!/usr/bin/env python3
"""
Error taxonomy for spotlight_tour.

Construction-time problems (bad step definitions) raise immediately.
Pipeline problems are wrapped in PipelineFailure, absorbed by the
orchestrator and recorded as a RunOutcome instead of escaping to the caller.
"""

from enum import Enum
from typing import Optional


class FailureKind(str, Enum):
    """Why a tutorial run did not reach the screen."""
    ALREADY_IN_FLIGHT = "already_in_flight"
    ALREADY_SHOWN = "already_shown"
    READINESS_TIMEOUT = "readiness_timeout"
    NO_TARGETS_RESOLVED = "no_targets_resolved"
    CAPTURE_FAILURE = "capture_failure"
    PRESENTATION_REJECTED = "presentation_rejected"
    DESTROYED = "destroyed"
    UNEXPECTED = "unexpected"


class TutorialError(Exception):
    """Base class for all spotlight_tour errors."""


class InvalidStepDefinition(TutorialError):
    """A step was built with zero or two selectors."""


class BufferReleasedError(TutorialError):
    """Pixels were accessed after the owning buffer was released."""


class PipelineFailure(TutorialError):
    """A pipeline stage could not complete."""

    def __init__(self, kind: FailureKind, message: str, stage: Optional[str] = None,
                 quiet: bool = False):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.stage = stage
        # quiet failures are expected host lifecycle events, logged at debug
        self.quiet = quiet

    def __str__(self) -> str:
        if self.stage:
            return f"[{self.kind.value} @ {self.stage}] {self.message}"
        return f"[{self.kind.value}] {self.message}"
