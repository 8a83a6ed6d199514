#!/usr/bin/env python3
"""
Screen snapshot providers.

SnapshotProvider is the contract the orchestrator captures through. Hosts
that can render their own surface implement it directly; MssSnapshotProvider
grabs a monitor region from the desktop with mss.
"""

import logging
from typing import Dict, Optional, Protocol

import cv2
import mss
import numpy as np

from spotlight_tour.models.image_buffer import ImageBuffer

logger = logging.getLogger(__name__)


class SnapshotProvider(Protocol):
    """Produces a pixel snapshot of the current root surface."""

    def capture_root_snapshot(self) -> Optional[ImageBuffer]:
        """Return a BGR snapshot, or None when the surface is not capturable."""
        ...


class MssSnapshotProvider:
    """
    Captures a desktop region with mss.

    Either a whole monitor (by mss index, 1 = primary) or explicit bounds
    {'left', 'top', 'width', 'height'} in virtual-screen coordinates.
    """

    def __init__(self, monitor_index: int = 1, bounds: Optional[Dict[str, int]] = None):
        """Initializes the provider and resolves the capture bounds."""
        self.sct = mss.mss()
        if bounds is not None:
            self.bounds = dict(bounds)
        else:
            monitors = self.sct.monitors
            if not 0 <= monitor_index < len(monitors):
                logger.warning(f"Monitor {monitor_index} not found, falling back to primary")
                monitor_index = 1 if len(monitors) > 1 else 0
            self.bounds = dict(monitors[monitor_index])
        logger.info(f"MssSnapshotProvider initialized with bounds {self.bounds}")

    def close(self) -> None:
        """Closes the mss instance."""
        self.sct.close()
        logger.info("MssSnapshotProvider closed.")

    def capture_root_snapshot(self) -> Optional[ImageBuffer]:
        """
        Capture one frame of the configured region.

        Returns:
            ImageBuffer in BGR format, or None if the grab failed
        """
        try:
            logger.debug(f"Capturing snapshot from bounds: {self.bounds}")
            frame = np.array(self.sct.grab(self.bounds))

            if frame.ndim != 3 or frame.shape[0] == 0 or frame.shape[1] == 0:
                logger.error(f"Snapshot has unusable shape {frame.shape}")
                return None

            if frame.shape[2] == 4:
                frame = cv2.cvtColor(frame, cv2.COLOR_BGRA2BGR)

            logger.debug(f"Snapshot captured successfully. Shape: {frame.shape}")
            return ImageBuffer(frame, label="snapshot")

        except Exception as e:
            logger.error(f"Screen capture failed: {e}")
            return None

    def __enter__(self):
        """Enter the runtime context."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit the runtime context and close resources."""
        self.close()
