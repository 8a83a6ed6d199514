#!/usr/bin/env python3
"""
Host surface contract.

The host is whatever owns the screen being toured: a window, an activity,
a browser page. The orchestrator only reads from it on the event loop.
"""

from typing import Protocol, Tuple

from spotlight_tour.models.ui_node import UINode


class HostSurface(Protocol):
    """Read-only view of the host's root surface and lifecycle."""

    density_scale: float
    font_scale: float

    def surface_size(self) -> Tuple[int, int]:
        """Current (width, height) of the root surface in pixels."""
        ...

    def has_focus(self) -> bool:
        """True when the host window has input focus."""
        ...

    def is_finishing(self) -> bool:
        ...

    def is_destroyed(self) -> bool:
        ...

    def root_node(self) -> UINode:
        """Snapshot of the UI tree, bounds in root coordinates."""
        ...

    async def wait_for_layout(self) -> None:
        """Return after the next layout pass of the root surface."""
        ...
