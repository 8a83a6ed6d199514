#!/usr/bin/env python3
"""
UI tree node contract consumed by the target resolver.

Hosts can either expose their own widget objects through the UINode protocol
or build a ViewNode snapshot of their tree.
"""

from typing import List, Optional, Protocol, Sequence, runtime_checkable

from pydantic import BaseModel, Field

from spotlight_tour.models.regions import Rect


@runtime_checkable
class UINode(Protocol):
    """Read-only view of a node in the host UI tree."""
    tag: Optional[str]
    node_id: Optional[int]
    visible: bool
    shown: bool
    bounds: Rect
    children: Sequence["UINode"]


class ViewNode(BaseModel):
    """
    Plain snapshot of a UI tree node.

    visible is the node's own visibility flag; shown is True only when the
    node and every ancestor are visible and attached.
    """
    tag: Optional[str] = None
    node_id: Optional[int] = None
    visible: bool = True
    shown: bool = True
    bounds: Rect = Field(default_factory=lambda: Rect(left=0, top=0, right=0, bottom=0))
    children: List["ViewNode"] = Field(default_factory=list)

    class Config:
        frozen = True
        extra = "forbid"


ViewNode.model_rebuild()
