"""In-memory file tree: nodes, the tree handle and its invariant checker."""

from .checker import check_tree, is_node_valid, is_tree_valid
from .errors import (
    AlreadyInTreeError,
    BadPathError,
    ConflictingPathError,
    FileTreeError,
    InitializationError,
    NoSuchPathError,
    NotADirectoryPathError,
    NotAFilePathError,
    Status,
    TreeMemoryError,
)
from .models import StatResult, TreeSettings, coerce_settings
from .node import Node, NodeKind
from .path import Path
from .tree import FileTree

__all__ = [
    "AlreadyInTreeError",
    "BadPathError",
    "ConflictingPathError",
    "FileTree",
    "FileTreeError",
    "InitializationError",
    "NoSuchPathError",
    "Node",
    "NodeKind",
    "NotADirectoryPathError",
    "NotAFilePathError",
    "Path",
    "StatResult",
    "Status",
    "TreeMemoryError",
    "TreeSettings",
    "check_tree",
    "coerce_settings",
    "is_node_valid",
    "is_tree_valid",
]
