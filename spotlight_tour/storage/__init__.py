#!/usr/bin/env python3
"""Storage module for tutorial "already shown" flags."""

from spotlight_tour.storage.state_store import (
    InMemoryStateStore,
    JsonStateStore,
    TutorialStateStore,
    build_state_key,
)

__all__ = ['InMemoryStateStore', 'JsonStateStore', 'TutorialStateStore', 'build_state_key']
