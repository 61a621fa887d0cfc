"""The file tree: a rooted hierarchy of directories and files.

A :class:`FileTree` is an explicit handle with an init/destroy lifecycle.
Every path-routed operation parses its argument into a :class:`Path`, checks
that the first component matches the root, then walks down one prefix at a
time through each directory's sorted children.

Mutating operations raise a :class:`FileTreeError` subclass on failure and
leave the tree untouched. Lookups (``contains_*``, ``get_file_contents``,
``replace_file_contents``, ``to_string``) never raise tree errors: they answer
False or None instead.
"""

from __future__ import annotations

import logging

from .errors import (
    AlreadyInTreeError,
    BadPathError,
    ConflictingPathError,
    FileTreeError,
    InitializationError,
    NoSuchPathError,
    NotADirectoryPathError,
    NotAFilePathError,
    TreeMemoryError,
)
from .models import StatResult
from .node import Node, NodeKind
from .path import Path, coerce_path

logger = logging.getLogger(__name__)

Contents = bytes | bytearray | memoryview | None


class FileTree:
    """In-memory file tree with a maintained node count."""

    def __init__(self) -> None:
        self._initialized = False
        self._root: Node | None = None
        self._count = 0

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def root(self) -> Node | None:
        return self._root

    @property
    def count(self) -> int:
        return self._count

    def __len__(self) -> int:
        return self._count

    def __repr__(self) -> str:
        state = "initialized" if self._initialized else "uninitialized"
        return f"<FileTree {state} count={self._count}>"

    # ------------------------------------------------------------------
    # lifecycle

    def init(self) -> None:
        """Move from uninitialized to initialized with an empty tree."""
        if self._initialized:
            raise InitializationError("File tree is already initialized")
        self._initialized = True
        self._root = None
        self._count = 0
        logger.debug("File tree initialized")

    def destroy(self) -> None:
        """Free the whole tree and return to the uninitialized state."""
        if not self._initialized:
            raise InitializationError("File tree is not initialized")
        if self._root is not None:
            freed = self._root.destroy_subtree()
            logger.debug(f"Destroyed {freed} nodes")
        self._root = None
        self._count = 0
        self._initialized = False
        logger.debug("File tree destroyed")

    # ------------------------------------------------------------------
    # insertion

    def insert_dir(self, path: str | Path) -> None:
        """Insert a directory at ``path``.

        Raises InitializationError, BadPathError, ConflictingPathError,
        NoSuchPathError, NotADirectoryPathError or AlreadyInTreeError.
        """
        self._insert(path, NodeKind.DIRECTORY, None)

    def insert_file(self, path: str | Path, contents: Contents = None) -> None:
        """Insert a file at ``path`` holding a copy of ``contents``.

        A file can never be the root: inserting at depth 1 raises
        ConflictingPathError. Inserting into an empty tree creates the root
        directory first; it is removed again if the insertion fails.
        """
        self._insert(path, NodeKind.FILE, contents)

    def _insert(self, raw_path: str | Path, kind: NodeKind, contents: Contents) -> None:
        self._require_initialized()
        path = self._parse(raw_path)

        if path.depth == 1:
            if kind is NodeKind.FILE:
                raise ConflictingPathError(f"A file cannot be the root: {path}")
            self._insert_root(path)
            return

        created_root = None
        if self._root is None:
            if kind is NodeKind.DIRECTORY:
                raise ConflictingPathError(f"Tree is empty, {path} cannot be the root")
            created_root = Node.create(path.prefix(1), None, NodeKind.DIRECTORY)
            self._root = created_root
            self._count += 1
            logger.debug(f"Created root directory {created_root.path} for {path}")

        try:
            self._check_root(path)
            parent = self._descend(path, path.depth - 1)
            if not parent.is_dir:
                raise NotADirectoryPathError(f"{parent.path} is a file")
            node = Node.create(path, parent, kind)
            if kind is NodeKind.FILE and not node.set_contents(contents):
                node.destroy_subtree()
                raise TreeMemoryError(f"Could not store contents for {path}")
            parent.insert_child(node)
        except Exception:
            if created_root is not None:
                self._count -= created_root.destroy_subtree()
                self._root = None
                logger.debug(f"Rolled back root directory {created_root.path}")
            raise

        self._count += 1
        logger.info(f"Inserted {kind.value} {path}")

    def _insert_root(self, path: Path) -> None:
        if self._root is not None:
            if self._root.path == path:
                raise AlreadyInTreeError(f"{path} already exists")
            raise ConflictingPathError(f"Tree already has root {self._root.path}")
        self._root = Node.create(path, None, NodeKind.DIRECTORY)
        self._count += 1
        logger.info(f"Inserted root dir {path}")

    # ------------------------------------------------------------------
    # removal

    def rm_dir(self, path: str | Path) -> None:
        """Remove the directory at ``path`` together with its whole subtree."""
        target = self._locate_for_removal(path)
        if not target.is_dir:
            raise NotADirectoryPathError(f"{target.path} is a file")
        self._unlink_and_destroy(target)

    def rm_file(self, path: str | Path) -> None:
        """Remove the file at ``path``."""
        target = self._locate_for_removal(path)
        if target is self._root:
            raise ConflictingPathError(f"{target.path} is the root and cannot be removed as a file")
        if not target.is_file:
            raise NotAFilePathError(f"{target.path} is a directory")
        self._unlink_and_destroy(target)

    def _locate_for_removal(self, raw_path: str | Path) -> Node:
        self._require_initialized()
        path = self._parse(raw_path)
        if self._root is None:
            raise NoSuchPathError(f"Tree is empty, {path} does not exist")
        self._check_root(path)
        return self._descend(path, path.depth)

    def _unlink_and_destroy(self, target: Node) -> None:
        if target is self._root:
            self._root = None
        else:
            parent = target.parent
            assert parent is not None
            parent.remove_child(target)
        path = target.path
        freed = target.destroy_subtree()
        self._count -= freed
        logger.info(f"Removed {path} ({freed} nodes)")

    # ------------------------------------------------------------------
    # queries

    def contains_dir(self, path: str | Path) -> bool:
        """Whether ``path`` is a directory in the tree. Never raises."""
        node = self._lookup(path)
        return node is not None and node.is_dir

    def contains_file(self, path: str | Path) -> bool:
        """Whether ``path`` is a file in the tree. Never raises."""
        node = self._lookup(path)
        return node is not None and node.is_file

    def get_file_contents(self, path: str | Path) -> bytes | None:
        """Contents of the file at ``path``, or None if there is no such file."""
        node = self._lookup(path)
        if node is None:
            return None
        return node.get_contents()

    def replace_file_contents(self, path: str | Path, contents: Contents) -> bytes | None:
        """Swap in ``contents`` and hand back the previous contents.

        Returns None, leaving the file untouched, if the file does not exist,
        the new contents are not a bytes-like object, or they could not be
        stored.
        """
        node = self._lookup(path)
        if node is None or not node.is_file:
            return None
        if contents is not None and not isinstance(contents, (bytes, bytearray, memoryview)):
            logger.debug(f"Refusing {type(contents).__name__} contents for {node.path}")
            return None
        previous = node.get_contents()
        if not node.set_contents(contents):
            return None
        logger.info(f"Replaced contents of {node.path}")
        return previous

    def stat(self, path: str | Path) -> StatResult:
        """Report whether ``path`` is a file and, if so, its size."""
        node = self._find(path)
        if node.is_file:
            contents = node.get_contents() or b""
            return StatResult(is_file=True, size=len(contents))
        return StatResult(is_file=False)

    def _lookup(self, raw_path: str | Path) -> Node | None:
        try:
            return self._find(raw_path)
        except FileTreeError as exc:
            logger.debug(f"Lookup of {raw_path!r} failed: {exc}")
            return None

    def _find(self, raw_path: str | Path) -> Node:
        self._require_initialized()
        path = self._parse(raw_path)
        if self._root is None:
            raise NoSuchPathError(f"Tree is empty, {path} does not exist")
        self._check_root(path)
        return self._descend(path, path.depth, through_file=NoSuchPathError)

    # ------------------------------------------------------------------
    # rendering

    def to_string(self) -> str | None:
        """Depth-first listing, files before directories at each level.

        Returns None if the tree is uninitialized or empty.
        """
        if not self._initialized or self._root is None:
            return None
        lines: list[str] = []
        _render(self._root, lines)
        return "\n".join(lines) + "\n"

    def __str__(self) -> str:
        return self.to_string() or ""

    # ------------------------------------------------------------------
    # traversal helpers

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise InitializationError("File tree is not initialized")

    @staticmethod
    def _parse(raw_path: str | Path) -> Path:
        path = coerce_path(raw_path)
        if path.depth == 0:
            raise BadPathError(f"Path has no components: {raw_path!r}")
        return path

    def _check_root(self, path: Path) -> None:
        assert self._root is not None
        if self._root.path != path.prefix(1):
            raise ConflictingPathError(f"{path} is not under the root {self._root.path}")

    def _descend(
        self,
        path: Path,
        levels: int,
        through_file: type[FileTreeError] = NotADirectoryPathError,
    ) -> Node:
        """Walk from the root to the node for ``path.prefix(levels)``.

        A missing prefix raises NoSuchPathError; a file met where a directory
        is needed raises ``through_file``.
        """
        current = self._root
        assert current is not None
        for level in range(2, levels + 1):
            if not current.is_dir:
                raise through_file(f"{current.path} is a file")
            child = current.get_child(path.prefix(level))
            if child is None:
                raise NoSuchPathError(f"{path.prefix(level)} does not exist")
            current = child
        return current


def _render(node: Node, lines: list[str]) -> None:
    lines.append(str(node))
    children = node.children()
    files = sorted((child for child in children if child.is_file), key=lambda child: str(child.path))
    dirs = sorted((child for child in children if child.is_dir), key=lambda child: str(child.path))
    for child in files + dirs:
        _render(child, lines)


__all__ = ["Contents", "FileTree"]
