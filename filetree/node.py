"""Directory and file nodes of the in-memory file tree.

A directory owns its children (kept sorted by path); a file owns a bytes
buffer. The parent link is a weak reference used only for upward checks.
Nodes are created through :meth:`Node.create` and linked by the caller with
:meth:`Node.insert_child`, so the tree decides where ordering is enforced.
"""

from __future__ import annotations

import bisect
import logging
import weakref
from enum import Enum

from .errors import AlreadyInTreeError, ConflictingPathError, NoSuchPathError
from .path import Path

logger = logging.getLogger(__name__)


class NodeKind(Enum):
    DIRECTORY = "dir"
    FILE = "file"


class Node:
    """A single tree entry, either a directory or a file."""

    __slots__ = ("_path", "_parent", "_kind", "_children", "_contents", "__weakref__")

    def __init__(self, path: Path, parent: Node | None, kind: NodeKind):
        self._path = path
        self._parent = weakref.ref(parent) if parent is not None else None
        self._kind = kind
        self._children: list[Node] | None = [] if kind is NodeKind.DIRECTORY else None
        self._contents: bytes | None = b"" if kind is NodeKind.FILE else None

    @classmethod
    def create(cls, path: Path, parent: Node | None, kind: NodeKind) -> Node:
        """Validate placement of ``path`` under ``parent`` and build the node.

        The new node is not linked into ``parent``; see :meth:`insert_child`.
        """
        depth = path.depth
        if depth == 0:
            raise NoSuchPathError("Cannot create a node for the zero-depth path")
        if parent is None:
            if depth != 1:
                raise NoSuchPathError(f"A parentless node must have depth 1: {path}")
        else:
            if depth != parent.path.depth + 1:
                raise NoSuchPathError(f"{path} is not one level below {parent.path}")
            if not parent.path.is_prefix_of(path):
                raise ConflictingPathError(f"{parent.path} is not a prefix of {path}")
            if parent.has_child(path):
                raise AlreadyInTreeError(f"{path} already exists")
        return cls(path, parent, kind)

    # ------------------------------------------------------------------
    # accessors

    @property
    def path(self) -> Path:
        return self._path

    @property
    def parent(self) -> Node | None:
        if self._parent is None:
            return None
        return self._parent()

    @property
    def kind(self) -> NodeKind:
        return self._kind

    @property
    def is_dir(self) -> bool:
        return self._kind is NodeKind.DIRECTORY

    @property
    def is_file(self) -> bool:
        return self._kind is NodeKind.FILE

    @property
    def has_children_collection(self) -> bool:
        return self._children is not None

    @property
    def has_contents_buffer(self) -> bool:
        return self._contents is not None

    @property
    def num_children(self) -> int:
        assert self._children is not None, "only directories have children"
        return len(self._children)

    def child_at(self, index: int) -> Node:
        assert self._children is not None, "only directories have children"
        if index < 0 or index >= len(self._children):
            raise NoSuchPathError(f"{self._path} has no child at index {index}")
        return self._children[index]

    def children(self) -> list[Node]:
        """Snapshot of the children in stored order (empty for files)."""
        return list(self._children or ())

    def find_child(self, path: Path) -> tuple[bool, int]:
        """Look up ``path`` among the children.

        Returns ``(found, index)`` where ``index`` is the position of the
        match, or where a node with that path would be inserted.
        """
        assert self._children is not None, "only directories have children"
        key = str(path)
        index = bisect.bisect_left(self._children, key, key=lambda child: str(child._path))
        found = index < len(self._children) and self._children[index]._path == path
        return found, index

    def has_child(self, path: Path) -> bool:
        if self._children is None:
            return False
        return self.find_child(path)[0]

    def get_child(self, path: Path) -> Node | None:
        if self._children is None:
            return None
        found, index = self.find_child(path)
        return self._children[index] if found else None

    @staticmethod
    def compare(first: Node, second: Node) -> int:
        return first.path.compare(second.path)

    def __str__(self) -> str:
        return f"{self._path} [{self._kind.value}]"

    def __repr__(self) -> str:
        return f"Node({str(self._path)!r}, {self._kind.name})"

    # ------------------------------------------------------------------
    # linkage

    def insert_child(self, child: Node) -> int:
        """Link ``child`` at its sorted position and return that index."""
        assert self._children is not None, "only directories have children"
        if child.parent is not self:
            raise ConflictingPathError(f"{child.path} was not created under {self._path}")
        found, index = self.find_child(child.path)
        if found:
            raise AlreadyInTreeError(f"{child.path} already exists")
        self._children.insert(index, child)
        return index

    def remove_child(self, child: Node) -> None:
        """Unlink ``child`` without destroying it."""
        assert self._children is not None, "only directories have children"
        for i, candidate in enumerate(self._children):
            if candidate is child:
                del self._children[i]
                return
        raise NoSuchPathError(f"{child.path} is not a child of {self._path}")

    # ------------------------------------------------------------------
    # file contents

    def get_contents(self) -> bytes | None:
        """Return the file's contents, or None for a directory."""
        if not self.is_file:
            return None
        return self._contents

    def set_contents(self, contents: bytes | bytearray | memoryview | None) -> bool:
        """Replace the file's contents.

        The new buffer is built before the old one is dropped, so on failure
        the previous contents are left untouched and False is returned.
        """
        if not self.is_file:
            return False
        if contents is not None and not isinstance(contents, (bytes, bytearray, memoryview)):
            raise TypeError(f"File contents must be bytes, not {type(contents).__name__}")
        try:
            new_contents = _copy_buffer(contents)
        except MemoryError:
            logger.debug(f"Out of memory copying contents for {self._path}")
            return False
        self._contents = new_contents
        return True

    # ------------------------------------------------------------------
    # teardown

    def destroy_subtree(self) -> int:
        """Destroy this node and all descendants; return the number freed."""
        freed = 0
        if self._children is not None:
            for child in self._children:
                freed += child.destroy_subtree()
            self._children.clear()
        self._contents = None
        self._parent = None
        return freed + 1


def _copy_buffer(contents: bytes | bytearray | memoryview | None) -> bytes:
    if contents is None:
        return b""
    return bytes(contents)


__all__ = ["Node", "NodeKind"]
