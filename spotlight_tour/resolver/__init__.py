#!/usr/bin/env python3
"""Resolver module for locating tutorial targets in a UI tree."""

from spotlight_tour.resolver.node_finder import find_by_id, find_by_ids, find_by_tag, iter_preorder
from spotlight_tour.resolver.target_resolver import (
    ResolutionOutcome,
    ResolutionReport,
    StepResolution,
    TargetResolver,
)

__all__ = [
    'find_by_id',
    'find_by_ids',
    'find_by_tag',
    'iter_preorder',
    'ResolutionOutcome',
    'ResolutionReport',
    'StepResolution',
    'TargetResolver',
]
