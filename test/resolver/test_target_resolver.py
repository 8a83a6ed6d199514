#!/usr/bin/env python3
"""
Tests for the target resolver and node finder.

Tests pre-order traversal, selector matching and the rules for dropping
steps whose targets are missing, hidden or empty.
"""

import pytest
from pathlib import Path
import sys

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from spotlight_tour.models import Rect, Step, ViewNode
from spotlight_tour.resolver import (
    ResolutionOutcome,
    TargetResolver,
    find_by_id,
    find_by_ids,
    find_by_tag,
    iter_preorder,
)


def node(tag=None, node_id=None, rect=(0, 0, 10, 10), visible=True, shown=True, children=()):
    left, top, right, bottom = rect
    return ViewNode(
        tag=tag,
        node_id=node_id,
        visible=visible,
        shown=shown,
        bounds=Rect(left=left, top=top, right=right, bottom=bottom),
        children=list(children),
    )


@pytest.fixture
def tree():
    """
    root
    ├── header (id 1)
    │   ├── menu  (tag "menu", id 2)
    │   └── title (tag "dup", id 3)
    ├── body (id 4)
    │   └── card  (tag "dup", id 5)
    └── footer (id 6, hidden)
        └── cta   (tag "cta", id 7)
    """
    return node(tag="root", node_id=0, rect=(0, 0, 400, 800), children=[
        node(node_id=1, rect=(0, 0, 400, 60), children=[
            node(tag="menu", node_id=2, rect=(10, 10, 50, 50)),
            node(tag="dup", node_id=3, rect=(60, 10, 200, 50)),
        ]),
        node(node_id=4, rect=(0, 60, 400, 700), children=[
            node(tag="dup", node_id=5, rect=(20, 100, 380, 300)),
        ]),
        node(node_id=6, rect=(0, 700, 400, 800), visible=False, children=[
            node(tag="cta", node_id=7, rect=(100, 720, 300, 780), shown=False),
        ]),
    ])


class TestNodeFinder:
    """Test tree search helpers."""

    def test_preorder_visits_parents_before_children(self, tree):
        ids = [n.node_id for n in iter_preorder(tree)]
        assert ids == [0, 1, 2, 3, 4, 5, 6, 7]

    def test_find_by_tag_returns_preorder_matches(self, tree):
        matches = find_by_tag(tree, "dup")
        assert [n.node_id for n in matches] == [3, 5]

    def test_find_by_tag_missing(self, tree):
        assert find_by_tag(tree, "nope") == []

    def test_find_by_id(self, tree):
        assert find_by_id(tree, 5).tag == "dup"
        assert find_by_id(tree, 99) is None

    def test_find_by_ids_skips_misses(self, tree):
        matches = find_by_ids(tree, 7, 99, 2)
        assert [n.node_id for n in matches] == [7, 2]


class TestTargetResolver:
    """Test TargetResolver resolution rules."""

    @pytest.fixture
    def resolver(self):
        return TargetResolver()

    def test_preserves_step_order(self, resolver, tree):
        steps = [
            Step.for_id(5, "Card"),
            Step.for_tag("menu", "Menu"),
            Step.for_id(1, "Header"),
        ]

        targets = resolver.resolve_all(tree, steps)

        assert [t.text for t in targets] == ["Card", "Menu", "Header"]
        assert targets[1].rect == Rect(left=10, top=10, right=50, bottom=50)

    def test_earlier_preorder_node_wins_for_shared_tag(self, resolver, tree):
        targets = resolver.resolve_all(tree, [Step.for_tag("dup", "Dup")])

        assert len(targets) == 1
        assert targets[0].rect == Rect(left=60, top=10, right=200, bottom=50)

    def test_first_visible_tag_match_is_used(self, resolver):
        root = node(rect=(0, 0, 400, 800), children=[
            node(tag="dup", rect=(0, 0, 10, 10), visible=False),
            node(tag="dup", rect=(20, 20, 60, 60)),
        ])

        targets = resolver.resolve_all(root, [Step.for_tag("dup", "Second")])

        assert targets[0].rect == Rect(left=20, top=20, right=60, bottom=60)

    def test_drops_missing_hidden_and_empty_targets(self, resolver, tree):
        root = node(rect=(0, 0, 400, 800), children=[
            tree,
            node(tag="empty", rect=(50, 50, 50, 90)),
        ])
        steps = [
            Step.for_tag("missing", "Missing"),
            Step.for_id(7, "Not shown"),
            Step.for_id(6, "Invisible"),
            Step.for_tag("empty", "Zero width"),
            Step.for_tag("menu", "Menu"),
        ]

        report = resolver.resolve(root, steps)

        assert [t.text for t in report.targets] == ["Menu"]
        assert [s.outcome for s in report.steps] == [
            ResolutionOutcome.NOT_FOUND,
            ResolutionOutcome.NOT_SHOWN,
            ResolutionOutcome.NOT_SHOWN,
            ResolutionOutcome.EMPTY_BOUNDS,
            ResolutionOutcome.RESOLVED,
        ]
        assert report.resolved_count == 1
        assert len(report.unresolved()) == 4

    def test_step_attributes_carried_over(self, resolver, tree):
        step = Step.for_tag("menu", "Menu", shape="circle", max_tooltip_width_dp=120)

        target = resolver.resolve_all(tree, [step])[0]

        assert target.shape == step.shape
        assert target.max_tooltip_width_dp == 120

    def test_nothing_resolves(self, resolver, tree):
        report = resolver.resolve(tree, [Step.for_tag("missing", "Missing")])

        assert report.targets == []
        assert "not_found" in str(report.steps[0])
        assert "tag='missing'" in str(report.steps[0])

    def test_empty_step_list(self, resolver, tree):
        assert resolver.resolve_all(tree, []) == []
