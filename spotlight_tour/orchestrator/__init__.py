#!/usr/bin/env python3
"""
Orchestrator module for tutorial runs.

Provides the single-flight state machine that drives resolve, capture,
render and present, plus the host contract it reads from.
"""

from spotlight_tour.orchestrator.busy_gate import BusyGate
from spotlight_tour.orchestrator.host import HostSurface
from spotlight_tour.orchestrator.overlay_orchestrator import OverlayOrchestrator
from spotlight_tour.orchestrator.run_state import RunOutcome, RunState, can_transition

__all__ = [
    'BusyGate',
    'HostSurface',
    'OverlayOrchestrator',
    'RunOutcome',
    'RunState',
    'can_transition',
]
