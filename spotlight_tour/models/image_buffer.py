#!/usr/bin/env python3
"""
ImageBuffer - single-owner wrapper around a BGR pixel array.

Pipeline stages hand buffers to each other instead of sharing them; the
stage that finishes with a buffer calls release() so the pixels can be freed
even while the wrapper object is still referenced.
"""

import logging
from typing import Optional

import numpy as np

from spotlight_tour.errors import BufferReleasedError

logger = logging.getLogger(__name__)


class ImageBuffer:
    """Owns one HxWx3 uint8 BGR image."""

    def __init__(self, pixels: np.ndarray, label: str = "image"):
        if pixels.ndim != 3 or pixels.shape[2] != 3:
            raise ValueError(f"{label} must be HxWx3, got shape {pixels.shape}")
        self._pixels: Optional[np.ndarray] = pixels
        self.label = label

    @property
    def pixels(self) -> np.ndarray:
        if self._pixels is None:
            raise BufferReleasedError(f"{self.label} buffer was already released")
        return self._pixels

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def released(self) -> bool:
        return self._pixels is None

    def release(self) -> None:
        """Drop the pixel array. Safe to call more than once."""
        if self._pixels is not None:
            logger.debug(f"Releasing {self.label} buffer {self._pixels.shape}")
            self._pixels = None

    def __repr__(self) -> str:
        if self._pixels is None:
            return f"ImageBuffer({self.label}, released)"
        return f"ImageBuffer({self.label}, {self.width}x{self.height})"
