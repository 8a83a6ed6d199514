#!/usr/bin/env python3
"""
Presentation boundary.

The host supplies a PresentationSink that shows the finished overlay image
modally. The orchestrator hands it a DismissHandle; the sink calls it when
the user closes the overlay. The handle runs its callback at most once no
matter how often, or from which thread, it is invoked.
"""

import logging
import threading
from enum import Enum
from typing import Callable, Optional, Protocol

import numpy as np

from spotlight_tour.models.tutorial_config import TutorialConfig

logger = logging.getLogger(__name__)


class PresentationResult(str, Enum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class DismissHandle:
    """One-shot completion handle passed across the presentation boundary."""

    def __init__(self, callback: Callable[[], None], name: str = "dismiss"):
        self._callback: Optional[Callable[[], None]] = callback
        self._lock = threading.Lock()
        self._fired = False
        self._cancelled = False
        self.name = name

    @property
    def fired(self) -> bool:
        """True once the callback has run."""
        return self._fired and not self._cancelled

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def __call__(self) -> bool:
        """
        Run the callback if it has not run yet.

        Returns:
            True if this call ran the callback, False if it was already used
        """
        with self._lock:
            if self._fired:
                logger.debug(f"{self.name} handle already used, ignoring")
                return False
            self._fired = True
            callback, self._callback = self._callback, None

        callback()
        return True

    def cancel(self) -> bool:
        """
        Disarm the handle without running the callback.

        Returns:
            True if the handle was disarmed, False if it was already used
        """
        with self._lock:
            if self._fired:
                return False
            self._fired = True
            self._cancelled = True
            self._callback = None
        logger.debug(f"{self.name} handle cancelled")
        return True


class PresentationSink(Protocol):
    """Host component that displays the overlay image modally."""

    def dismiss_existing(self, tag: str) -> None:
        """Close any presentation currently shown under tag."""
        ...

    def present(self, tag: str, image: np.ndarray, config: TutorialConfig,
                on_dismiss: DismissHandle) -> PresentationResult:
        """
        Show image full-screen.

        Must return REJECTED when the host cannot take a new presentation
        (state locked or torn down). on_dismiss is invoked when the user
        closes the overlay.
        """
        ...
