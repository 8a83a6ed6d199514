#!/usr/bin/env python3
"""
Step and TargetInfo models for tutorial walkthroughs.

A Step is the declarative description of one callout: which UI node to point
at and what to say about it. A TargetInfo is what a Step becomes once its
node has been located on screen for a single run.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from spotlight_tour.errors import InvalidStepDefinition
from spotlight_tour.models.regions import Rect


class HighlightShape(str, Enum):
    """Shape of the spotlight hole cut around a target."""
    CIRCLE = "circle"
    RECT = "rect"
    ROUNDED_RECT = "rounded_rect"


class Step(BaseModel):
    """One tutorial step. Exactly one of target_tag / target_id must be set."""
    target_tag: Optional[str] = Field(None, description="Tag of the node to highlight")
    target_id: Optional[int] = Field(None, description="Identifier of the node to highlight")
    text: str = Field(..., description="Guide text shown in the tooltip panel")
    max_tooltip_width_dp: Optional[float] = Field(None, gt=0, description="Max tooltip width in dp")
    shape: HighlightShape = Field(HighlightShape.ROUNDED_RECT, description="Cutout shape")

    @model_validator(mode='after')
    def validate_single_selector(self):
        # InvalidStepDefinition is not a ValueError, so pydantic re-raises it as-is
        has_tag = self.target_tag is not None
        has_id = self.target_id is not None
        if has_tag == has_id:
            raise InvalidStepDefinition(
                f"Step must set exactly one of target_tag or target_id "
                f"(got tag={self.target_tag!r}, id={self.target_id!r})"
            )
        return self

    @classmethod
    def for_tag(cls, tag: str, text: str, **kwargs) -> "Step":
        return cls(target_tag=tag, text=text, **kwargs)

    @classmethod
    def for_id(cls, node_id: int, text: str, **kwargs) -> "Step":
        return cls(target_id=node_id, text=text, **kwargs)

    @property
    def selector(self) -> str:
        """Human readable selector for log messages."""
        if self.target_tag is not None:
            return f"tag={self.target_tag!r}"
        return f"id={self.target_id}"

    class Config:
        frozen = True
        extra = "forbid"


class TargetInfo(BaseModel):
    """A step resolved against the live UI tree for one run."""
    rect: Rect = Field(..., description="Target bounds in root coordinates")
    text: str = Field(..., description="Guide text")
    max_tooltip_width_dp: Optional[float] = Field(None, gt=0, description="Max tooltip width in dp")
    shape: HighlightShape = Field(HighlightShape.ROUNDED_RECT, description="Cutout shape")

    @classmethod
    def from_step(cls, step: Step, rect: Rect) -> "TargetInfo":
        return cls(
            rect=rect,
            text=step.text,
            max_tooltip_width_dp=step.max_tooltip_width_dp,
            shape=step.shape,
        )

    class Config:
        frozen = True
        extra = "forbid"
