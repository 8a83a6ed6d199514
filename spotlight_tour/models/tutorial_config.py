#!/usr/bin/env python3
"""
TutorialConfig model for tutorial identity and behaviour.

Bundles the tutorial identifier, show-once policy, overlay dim colour, style,
cosmetic animation timings and the triggers that may start the tutorial.
"""

from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator

from spotlight_tour.models.color import parse_color
from spotlight_tour.models.style import StyleConfig

DEFAULT_OVERLAY_COLOR = 0xD0000000


class AnimationConfig(BaseModel):
    """Cosmetic timings handed to the presentation sink."""
    fade_in_ms: int = Field(300, ge=0)
    fade_out_ms: int = Field(200, ge=0)
    highlight_pulse_ms: int = Field(1000, ge=0)
    enable_pulse_animation: bool = False

    class Config:
        frozen = True
        extra = "forbid"


class TriggerKind(str, Enum):
    FIRST_LAUNCH = "first_launch"
    EVENT = "event"
    MANUAL = "manual"


class Trigger(BaseModel):
    """Condition under which the orchestrator shows the tutorial by itself."""
    kind: TriggerKind
    event: Optional[str] = Field(None, description="Event name for EVENT triggers")

    @model_validator(mode='after')
    def validate_event_name(self):
        if self.kind == TriggerKind.EVENT and not self.event:
            raise ValueError('EVENT trigger requires an event name')
        if self.kind != TriggerKind.EVENT and self.event is not None:
            raise ValueError(f'{self.kind.value} trigger does not take an event name')
        return self

    @classmethod
    def first_launch(cls) -> "Trigger":
        return cls(kind=TriggerKind.FIRST_LAUNCH)

    @classmethod
    def on_event(cls, event: str) -> "Trigger":
        return cls(kind=TriggerKind.EVENT, event=event)

    @classmethod
    def manual(cls) -> "Trigger":
        return cls(kind=TriggerKind.MANUAL)

    class Config:
        frozen = True
        extra = "forbid"


class TutorialConfig(BaseModel):
    """Configuration for one tutorial."""
    tutorial_id: str = Field("default_tutorial", min_length=1, description="Tutorial identifier")
    show_only_once: bool = Field(True, description="Skip show() once the tutorial was dismissed")
    overlay_color: Tuple[int, int, int, int] = Field(
        DEFAULT_OVERLAY_COLOR, validate_default=True, description="Dim layer colour incl. alpha"
    )
    style: StyleConfig = Field(default_factory=StyleConfig)
    animation: AnimationConfig = Field(default_factory=AnimationConfig)
    triggers: List[Trigger] = Field(default_factory=lambda: [Trigger.manual()])

    @field_validator('overlay_color', mode='before')
    @classmethod
    def validate_overlay_color(cls, v):
        return parse_color(v)

    @field_validator('triggers')
    @classmethod
    def validate_triggers(cls, v):
        # An empty trigger list means manual only
        return v or [Trigger.manual()]

    def has_trigger(self, kind: TriggerKind, event: Optional[str] = None) -> bool:
        for trigger in self.triggers:
            if trigger.kind == kind and (event is None or trigger.event == event):
                return True
        return False

    class Config:
        frozen = True
        extra = "forbid"
