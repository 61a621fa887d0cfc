"""
ft_cli.driver
-------------
Turns text commands into FileTree calls.

One command per line, split shell-style:

    mkdir /a            insert a directory
    touch /a/f [TEXT]   insert a file, optionally with contents
    rmdir /a            remove a directory and its subtree
    rm /a/f             remove a file
    isdir /a            true / false
    isfile /a/f         true / false
    cat /a/f            print the contents (NONE if there is no such file)
    replace /a/f [TEXT] replace the contents, print the previous contents
    stat /a/f           "file <size>" or "dir"
    print               the depth-first tree listing
    count               number of nodes
    check               run the invariant checker
    init / destroy      lifecycle

Blank lines and lines starting with '#' are skipped.
"""

from __future__ import annotations

import logging
import shlex
from typing import Callable, Iterable, Iterator

from filetree import FileTree, FileTreeError, Status, TreeSettings, check_tree

logger = logging.getLogger(__name__)

NONE_MARKER = "NONE"


class DriverError(Exception):
    """An unknown command or a command with the wrong arguments."""


class CommandDriver:
    """Applies commands to one FileTree and returns printable result lines."""

    def __init__(self, tree: FileTree | None = None, settings: TreeSettings | None = None, auto_init: bool = True):
        self.tree = tree if tree is not None else FileTree()
        self.settings = settings or TreeSettings()
        if auto_init and not self.tree.initialized:
            self.tree.init()
        self._commands: dict[str, tuple[Callable[..., list[str]], int, int, bool]] = {
            # name: (handler, min args, max args, mutating)
            "init": (self._init, 0, 0, True),
            "destroy": (self._destroy, 0, 0, True),
            "mkdir": (self._mkdir, 1, 1, True),
            "touch": (self._touch, 1, 2, True),
            "rmdir": (self._rmdir, 1, 1, True),
            "rm": (self._rm, 1, 1, True),
            "isdir": (self._isdir, 1, 1, False),
            "isfile": (self._isfile, 1, 1, False),
            "cat": (self._cat, 1, 1, False),
            "replace": (self._replace, 1, 2, True),
            "stat": (self._stat, 1, 1, False),
            "print": (self._print, 0, 0, False),
            "count": (self._count, 0, 0, False),
            "check": (self._check, 0, 0, False),
        }

    @property
    def command_names(self) -> list[str]:
        return sorted(self._commands)

    def execute(self, line: str) -> list[str]:
        """Run one command line and return its output lines."""
        try:
            tokens = shlex.split(line, comments=True)
        except ValueError as exc:
            raise DriverError(f"Cannot parse command: {exc}") from exc
        if not tokens:
            return []
        name, args = tokens[0].lower(), tokens[1:]
        if name not in self._commands:
            raise DriverError(f"Unknown command: {name!r}")
        handler, min_args, max_args, mutating = self._commands[name]
        if not min_args <= len(args) <= max_args:
            raise DriverError(f"{name} takes {_arity(min_args, max_args)}, got {len(args)}")
        logger.debug(f"Executing {name} {args}")
        output = handler(*args)
        if mutating and self.settings.check_invariants and not check_tree(self.tree):
            output.append(f"CHECK FAILED after {name}")
        return output

    @staticmethod
    def commands(lines: Iterable[str]) -> Iterator[tuple[int, str]]:
        """Yield (line number, command) for each line that is not blank or a comment."""
        for number, raw in enumerate(lines, start=1):
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            yield number, line

    # ------------------------------------------------------------------
    # helpers

    def _encode(self, text: str | None) -> bytes | None:
        if text is None:
            return None
        try:
            return text.encode(self.settings.encoding)
        except UnicodeError as exc:
            raise DriverError(f"Cannot encode contents as {self.settings.encoding}: {exc}") from exc

    def _decode(self, contents: bytes | None) -> str:
        if contents is None:
            return NONE_MARKER
        return contents.decode(self.settings.encoding, errors="replace")

    @staticmethod
    def _status(call: Callable[[], object]) -> list[str]:
        try:
            call()
        except FileTreeError as exc:
            logger.debug(f"Command failed with {exc.status.name}: {exc}")
            return [exc.status.name]
        return [Status.SUCCESS.name]

    # ------------------------------------------------------------------
    # commands

    def _init(self) -> list[str]:
        return self._status(self.tree.init)

    def _destroy(self) -> list[str]:
        return self._status(self.tree.destroy)

    def _mkdir(self, path: str) -> list[str]:
        return self._status(lambda: self.tree.insert_dir(path))

    def _touch(self, path: str, text: str | None = None) -> list[str]:
        return self._status(lambda: self.tree.insert_file(path, self._encode(text)))

    def _rmdir(self, path: str) -> list[str]:
        return self._status(lambda: self.tree.rm_dir(path))

    def _rm(self, path: str) -> list[str]:
        return self._status(lambda: self.tree.rm_file(path))

    def _isdir(self, path: str) -> list[str]:
        return [str(self.tree.contains_dir(path)).lower()]

    def _isfile(self, path: str) -> list[str]:
        return [str(self.tree.contains_file(path)).lower()]

    def _cat(self, path: str) -> list[str]:
        return [self._decode(self.tree.get_file_contents(path))]

    def _replace(self, path: str, text: str | None = None) -> list[str]:
        return [self._decode(self.tree.replace_file_contents(path, self._encode(text)))]

    def _stat(self, path: str) -> list[str]:
        try:
            result = self.tree.stat(path)
        except FileTreeError as exc:
            return [exc.status.name]
        if result.is_file:
            return [f"file {result.size}"]
        return ["dir"]

    def _print(self) -> list[str]:
        rendered = self.tree.to_string()
        if rendered is None:
            return [NONE_MARKER]
        return rendered.splitlines()

    def _count(self) -> list[str]:
        return [str(self.tree.count)]

    def _check(self) -> list[str]:
        return ["valid" if check_tree(self.tree) else "invalid"]


def _arity(min_args: int, max_args: int) -> str:
    if min_args == max_args:
        return f"{min_args} argument(s)"
    return f"{min_args} to {max_args} arguments"


__all__ = ["CommandDriver", "DriverError", "NONE_MARKER"]
