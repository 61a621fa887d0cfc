"""Read-only invariant checks over a file tree.

These functions never mutate anything. Each violation is logged at ERROR
level and the check stops at the first one found.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .errors import FileTreeError
from .node import Node

if TYPE_CHECKING:
    from .tree import FileTree

logger = logging.getLogger(__name__)


def is_node_valid(node: Node | None) -> bool:
    """Check one node against its parent and its immediate children."""
    if node is None:
        logger.error("A node is None")
        return False

    path = node.path
    if path is None:
        logger.error("A node's path is None")
        return False

    parent = node.parent
    if parent is None:
        if path.depth != 1:
            logger.error(f"Parentless node does not have depth 1: {path}")
            return False
    else:
        parent_path = parent.path
        if parent_path is None:
            logger.error(f"Parent of {path} has no path")
            return False
        if path.shared_prefix_depth(parent_path) != path.depth - 1 or parent_path.depth != path.depth - 1:
            logger.error(f"P-C nodes don't have P-C paths: ({parent_path}) ({path})")
            return False

    if node.is_file:
        if node.has_children_collection:
            logger.error(f"File node has a children collection: {path}")
            return False
        if not node.has_contents_buffer:
            logger.error(f"File node has no contents buffer: {path}")
            return False
        return True

    if node.has_contents_buffer:
        logger.error(f"Directory node has a contents buffer: {path}")
        return False

    children: list[Node] = []
    for i in range(node.num_children):
        try:
            child = node.child_at(i)
        except FileTreeError:
            child = None
        if child is None:
            logger.error(f"Child {i} of node {path} is None or cannot be fetched")
            return False
        if child.parent is not node:
            logger.error(f"Child's parent reference does not match expected parent: {child.path}")
            return False
        children.append(child)

    seen = set()
    for child in children:
        if child.path in seen:
            logger.error(f"Duplicate child path found under node {path}: {child.path}")
            return False
        seen.add(child.path)

    for first, second in zip(children, children[1:]):
        if Node.compare(first, second) >= 0:
            logger.error(f"Children are not in lexicographic order: {first.path} >= {second.path}")
            return False

    return True


def _tree_check(node: Node, counter: list[int]) -> bool:
    if not is_node_valid(node):
        return False
    counter[0] += 1
    if node.is_file:
        return True
    for i in range(node.num_children):
        if not _tree_check(node.child_at(i), counter):
            return False
    return True


def is_tree_valid(initialized: bool, root: Node | None, count: int) -> bool:
    """Check the whole tree and that ``count`` matches the nodes reachable."""
    if not initialized:
        if count != 0:
            logger.error("Not initialized, but count is not 0")
            return False
        if root is not None:
            logger.error("Not initialized, but root is not None")
            return False
        return True

    if count == 0 and root is not None:
        logger.error("Count is 0, but root is not None")
        return False
    if count > 0 and root is None:
        logger.error("Count is positive, but root is None")
        return False
    if root is None:
        return True

    if root.parent is not None:
        logger.error(f"Root {root.path} has a parent")
        return False

    counter = [0]
    if not _tree_check(root, counter):
        return False
    if counter[0] != count:
        logger.error(f"Node count mismatch: expected {count}, got {counter[0]}")
        return False
    return True


def check_tree(tree: FileTree) -> bool:
    """Run :func:`is_tree_valid` against a FileTree's state."""
    return is_tree_valid(tree.initialized, tree.root, tree.count)


__all__ = ["check_tree", "is_node_valid", "is_tree_valid"]
