#!/usr/bin/env python3
"""
Target resolver for tutorial steps.

Locates the on-screen rectangle of each step's selector within a UI tree
snapshot. Steps whose node is missing, hidden or has no area are dropped;
the resolver never raises for an unresolvable step.

Usage:
    from spotlight_tour.resolver.target_resolver import TargetResolver

    resolver = TargetResolver()
    targets = resolver.resolve_all(host.root_node(), steps)
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence

from spotlight_tour.models.step import Step, TargetInfo
from spotlight_tour.models.ui_node import UINode
from spotlight_tour.resolver.node_finder import find_by_id, find_by_tag

logger = logging.getLogger(__name__)


class ResolutionOutcome(str, Enum):
    RESOLVED = "resolved"
    NOT_FOUND = "not_found"
    NOT_SHOWN = "not_shown"
    EMPTY_BOUNDS = "empty_bounds"


@dataclass
class StepResolution:
    """Diagnostic record for one step."""
    index: int
    selector: str
    text: str
    outcome: ResolutionOutcome

    def __str__(self) -> str:
        return f"Step {self.index}: {self.selector} -> {self.outcome.value} ({self.text!r})"


@dataclass
class ResolutionReport:
    """Resolved targets plus one diagnostic entry per step."""
    targets: List[TargetInfo] = field(default_factory=list)
    steps: List[StepResolution] = field(default_factory=list)

    @property
    def resolved_count(self) -> int:
        return len(self.targets)

    def unresolved(self) -> List[StepResolution]:
        return [s for s in self.steps if s.outcome != ResolutionOutcome.RESOLVED]


class TargetResolver:
    """Resolves step selectors against a UI tree."""

    def resolve_all(self, root: UINode, steps: Sequence[Step]) -> List[TargetInfo]:
        """
        Resolve every step, keeping step order and dropping failures.

        Args:
            root: Root of the UI tree snapshot
            steps: Steps in declaration order

        Returns:
            One TargetInfo per resolvable step
        """
        return self.resolve(root, steps).targets

    def resolve(self, root: UINode, steps: Sequence[Step]) -> ResolutionReport:
        """Resolve every step and keep a per-step diagnostic record."""
        report = ResolutionReport()
        logger.debug(f"Resolving {len(steps)} steps")

        for index, step in enumerate(steps):
            node = self._find_node(root, step)
            outcome = self._classify(node)

            if outcome == ResolutionOutcome.RESOLVED:
                report.targets.append(TargetInfo.from_step(step, node.bounds))
                logger.debug(f"Step {index}: resolved {step.selector} at {node.bounds.to_tuple()}")
            else:
                logger.debug(f"Step {index}: dropped {step.selector} ({outcome.value})")

            report.steps.append(StepResolution(
                index=index,
                selector=step.selector,
                text=step.text,
                outcome=outcome,
            ))

        logger.debug(f"Resolved {report.resolved_count} of {len(steps)} steps")
        return report

    def _find_node(self, root: UINode, step: Step) -> Optional[UINode]:
        if step.target_tag is not None:
            candidates = find_by_tag(root, step.target_tag)
            logger.debug(f"Found {len(candidates)} nodes with tag {step.target_tag!r}")
            for candidate in candidates:
                if candidate.visible:
                    return candidate
            return None
        return find_by_id(root, step.target_id)

    def _classify(self, node: Optional[UINode]) -> ResolutionOutcome:
        if node is None:
            return ResolutionOutcome.NOT_FOUND
        if not node.visible or not node.shown:
            return ResolutionOutcome.NOT_SHOWN
        if node.bounds.is_empty:
            return ResolutionOutcome.EMPTY_BOUNDS
        return ResolutionOutcome.RESOLVED
