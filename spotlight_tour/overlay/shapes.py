#!/usr/bin/env python3
"""
Cutout geometry and shape drawing.

The shape set is closed (HighlightShape); fill_shape() and stroke_shape()
dispatch on it explicitly so the cutout and its outline always share the
same geometry.
"""

from dataclasses import dataclass
from typing import Tuple, Union

import cv2
import numpy as np

from spotlight_tour.models.regions import Rect
from spotlight_tour.models.step import HighlightShape
from spotlight_tour.overlay.pixel_metrics import round_half_up

Color = Union[int, Tuple[int, int, int]]


@dataclass(frozen=True)
class Cutout:
    """A spotlight hole: padded target rect plus the shape carved from it."""
    shape: HighlightShape
    rect: Rect
    corner_radius: int = 0

    @property
    def center(self) -> Tuple[float, float]:
        return (self.rect.center_x, self.rect.center_y)

    @property
    def radius(self) -> float:
        """Circle radius: half of the longer side."""
        return max(self.rect.width, self.rect.height) / 2

    @property
    def effective_corner_radius(self) -> int:
        """Corner radius clamped so opposite corners never overlap."""
        return max(0, min(self.corner_radius, self.rect.width // 2, self.rect.height // 2))

    @property
    def top_center(self) -> Tuple[float, float]:
        return (self.rect.center_x, float(self.rect.top))


def fill_shape(canvas: np.ndarray, cutout: Cutout, color: Color) -> None:
    """Fill the cutout's shape on canvas."""
    if cutout.shape == HighlightShape.CIRCLE:
        cv2.circle(canvas, _pixel_center(cutout), round_half_up(cutout.radius), color, -1, cv2.LINE_AA)
    elif cutout.shape == HighlightShape.RECT:
        left, top, right, bottom = _inclusive_corners(cutout.rect)
        cv2.rectangle(canvas, (left, top), (right, bottom), color, -1)
    elif cutout.shape == HighlightShape.ROUNDED_RECT:
        _fill_rounded_rect(canvas, cutout.rect, cutout.effective_corner_radius, color)
    else:
        raise ValueError(f"Unknown highlight shape: {cutout.shape}")


def stroke_shape(canvas: np.ndarray, cutout: Cutout, color: Color, thickness: int) -> None:
    """Stroke the cutout's outline on canvas."""
    if thickness <= 0:
        return

    if cutout.shape == HighlightShape.CIRCLE:
        cv2.circle(canvas, _pixel_center(cutout), round_half_up(cutout.radius), color, thickness, cv2.LINE_AA)
    elif cutout.shape == HighlightShape.RECT:
        left, top, right, bottom = _inclusive_corners(cutout.rect)
        cv2.rectangle(canvas, (left, top), (right, bottom), color, thickness, cv2.LINE_AA)
    elif cutout.shape == HighlightShape.ROUNDED_RECT:
        _stroke_rounded_rect(canvas, cutout.rect, cutout.effective_corner_radius, color, thickness)
    else:
        raise ValueError(f"Unknown highlight shape: {cutout.shape}")


def _pixel_center(cutout: Cutout) -> Tuple[int, int]:
    cx, cy = cutout.center
    return (round_half_up(cx), round_half_up(cy))


def _inclusive_corners(rect: Rect) -> Tuple[int, int, int, int]:
    # OpenCV rectangle corners are inclusive, Rect right/bottom are not
    return (rect.left, rect.top, rect.right - 1, rect.bottom - 1)


def _fill_rounded_rect(canvas: np.ndarray, rect: Rect, radius: int, color: Color) -> None:
    left, top, right, bottom = _inclusive_corners(rect)
    if radius <= 0:
        cv2.rectangle(canvas, (left, top), (right, bottom), color, -1)
        return

    cv2.rectangle(canvas, (left + radius, top), (right - radius, bottom), color, -1)
    cv2.rectangle(canvas, (left, top + radius), (right, bottom - radius), color, -1)
    for cx, cy in _corner_centers(left, top, right, bottom, radius):
        cv2.circle(canvas, (cx, cy), radius, color, -1, cv2.LINE_AA)


def _stroke_rounded_rect(canvas: np.ndarray, rect: Rect, radius: int,
                         color: Color, thickness: int) -> None:
    left, top, right, bottom = _inclusive_corners(rect)
    if radius <= 0:
        cv2.rectangle(canvas, (left, top), (right, bottom), color, thickness, cv2.LINE_AA)
        return

    cv2.line(canvas, (left + radius, top), (right - radius, top), color, thickness, cv2.LINE_AA)
    cv2.line(canvas, (left + radius, bottom), (right - radius, bottom), color, thickness, cv2.LINE_AA)
    cv2.line(canvas, (left, top + radius), (left, bottom - radius), color, thickness, cv2.LINE_AA)
    cv2.line(canvas, (right, top + radius), (right, bottom - radius), color, thickness, cv2.LINE_AA)

    top_left, top_right, bottom_left, bottom_right = _corner_centers(left, top, right, bottom, radius)
    axes = (radius, radius)
    cv2.ellipse(canvas, top_left, axes, 0, 180, 270, color, thickness, cv2.LINE_AA)
    cv2.ellipse(canvas, top_right, axes, 0, 270, 360, color, thickness, cv2.LINE_AA)
    cv2.ellipse(canvas, bottom_right, axes, 0, 0, 90, color, thickness, cv2.LINE_AA)
    cv2.ellipse(canvas, bottom_left, axes, 0, 90, 180, color, thickness, cv2.LINE_AA)


def _corner_centers(left: int, top: int, right: int, bottom: int, radius: int):
    return (
        (left + radius, top + radius),
        (right - radius, top + radius),
        (left + radius, bottom - radius),
        (right - radius, bottom - radius),
    )
