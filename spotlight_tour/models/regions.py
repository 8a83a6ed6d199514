#!/usr/bin/env python3
"""
Rect model for screen regions in root-surface coordinates.

Edges are integer pixels; right and bottom are exclusive, so a rect with
left == right has zero area.
"""

from typing import Tuple

from pydantic import BaseModel, Field, model_validator


class Rect(BaseModel):
    """Axis-aligned rectangle in root coordinates."""
    left: int = Field(..., description="Left edge")
    top: int = Field(..., description="Top edge")
    right: int = Field(..., description="Right edge (exclusive)")
    bottom: int = Field(..., description="Bottom edge (exclusive)")

    @model_validator(mode='after')
    def validate_edges(self):
        if self.right < self.left or self.bottom < self.top:
            raise ValueError(
                f'Rect edges inverted: ({self.left}, {self.top})-({self.right}, {self.bottom})'
            )
        return self

    @classmethod
    def from_xywh(cls, x: int, y: int, width: int, height: int) -> "Rect":
        """Build a rect from origin and size."""
        return cls(left=x, top=y, right=x + width, bottom=y + height)

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.bottom - self.top

    @property
    def is_empty(self) -> bool:
        """True when the rect covers no pixels."""
        return self.width <= 0 or self.height <= 0

    @property
    def center_x(self) -> float:
        return (self.left + self.right) / 2

    @property
    def center_y(self) -> float:
        return (self.top + self.bottom) / 2

    def expanded(self, padding: int) -> "Rect":
        """Return a copy grown outward by padding on every side."""
        return Rect(
            left=self.left - padding,
            top=self.top - padding,
            right=self.right + padding,
            bottom=self.bottom + padding,
        )

    def to_tuple(self) -> Tuple[int, int, int, int]:
        """Convert to (left, top, right, bottom)."""
        return (self.left, self.top, self.right, self.bottom)

    class Config:
        frozen = True
        extra = "forbid"
