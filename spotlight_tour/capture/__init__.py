#!/usr/bin/env python3
"""Capture module for screen snapshots."""

from spotlight_tour.capture.screen_capture import MssSnapshotProvider, SnapshotProvider

__all__ = ['MssSnapshotProvider', 'SnapshotProvider']
