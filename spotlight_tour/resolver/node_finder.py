#!/usr/bin/env python3
"""
Node lookup helpers for UI trees.

All searches walk the tree pre-order depth-first, visiting children in
sibling order, so "first match" always means first in that sequence.
"""

from typing import Iterator, List, Optional

from spotlight_tour.models.ui_node import UINode


def iter_preorder(root: UINode) -> Iterator[UINode]:
    """Yield root and its descendants in pre-order."""
    # Explicit stack keeps deep trees clear of the recursion limit
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(list(node.children)))


def find_by_tag(root: UINode, tag: str) -> List[UINode]:
    """Return every node whose tag equals tag, in pre-order."""
    return [node for node in iter_preorder(root) if node.tag == tag]


def find_by_id(root: UINode, node_id: int) -> Optional[UINode]:
    """Return the first node with the given identifier, or None."""
    for node in iter_preorder(root):
        if node.node_id == node_id:
            return node
    return None


def find_by_ids(root: UINode, *node_ids: int) -> List[UINode]:
    """Return the first match for each identifier; missing ids are skipped."""
    found = []
    for node_id in node_ids:
        node = find_by_id(root, node_id)
        if node is not None:
            found.append(node)
    return found
