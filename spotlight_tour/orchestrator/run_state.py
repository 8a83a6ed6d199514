#!/usr/bin/env python3
"""
Run states and outcomes of the overlay orchestrator.

A run moves strictly forward through RESOLVING, CAPTURING, RENDERING and
PRESENTING, ends in DONE or FAILED and then drops back to IDLE.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from spotlight_tour.errors import FailureKind


class RunState(str, Enum):
    IDLE = "idle"
    RESOLVING = "resolving"
    CAPTURING = "capturing"
    RENDERING = "rendering"
    PRESENTING = "presenting"
    DONE = "done"
    FAILED = "failed"


# Allowed forward moves; any active state may also go to FAILED
_TRANSITIONS = {
    RunState.IDLE: {RunState.RESOLVING},
    RunState.RESOLVING: {RunState.CAPTURING},
    RunState.CAPTURING: {RunState.RENDERING},
    RunState.RENDERING: {RunState.PRESENTING},
    RunState.PRESENTING: {RunState.DONE},
    RunState.DONE: {RunState.IDLE},
    RunState.FAILED: {RunState.IDLE},
}

ACTIVE_STATES = {RunState.RESOLVING, RunState.CAPTURING, RunState.RENDERING, RunState.PRESENTING}


def can_transition(current: RunState, target: RunState) -> bool:
    if target == RunState.FAILED:
        return current in ACTIVE_STATES
    if target == RunState.IDLE:
        # Cancellation drops any state straight back to idle
        return True
    return target in _TRANSITIONS[current]


@dataclass
class RunOutcome:
    """How the most recent show()/force_show() request ended."""
    succeeded: bool
    failure: Optional[FailureKind] = None
    stage: Optional[RunState] = None
    message: str = ""
    finished_at: datetime = field(default_factory=datetime.now)

    @classmethod
    def success(cls) -> "RunOutcome":
        return cls(succeeded=True, message="dismissed")

    @classmethod
    def failed(cls, kind: FailureKind, message: str,
               stage: Optional[RunState] = None) -> "RunOutcome":
        return cls(succeeded=False, failure=kind, stage=stage, message=message)
