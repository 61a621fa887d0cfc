"""Error taxonomy for the file tree.

Each error carries a ``status`` so callers that think in result codes (the
command driver, for instance) can report ``err.status.name``.
"""

from __future__ import annotations

import logging
from enum import Enum

mylogger = logging.getLogger(__name__)


class Status(Enum):
    SUCCESS = 0
    INITIALIZATION_ERROR = 1
    BAD_PATH = 2
    CONFLICTING_PATH = 3
    NO_SUCH_PATH = 4
    NOT_A_DIRECTORY = 5
    NOT_A_FILE = 6
    ALREADY_IN_TREE = 7
    MEMORY_ERROR = 8


class FileTreeError(Exception):
    """Base error with a message. Optionally logs itself when raised."""

    status: Status = Status.SUCCESS
    default_message = "A file tree error occurred"

    def __init__(self, message: str | None = None, log: bool = False):
        self.message = message or self.default_message
        super().__init__(self.message)
        if log:
            mylogger.error(self.message)


class InitializationError(FileTreeError):
    status = Status.INITIALIZATION_ERROR
    default_message = "File tree is not in the required initialization state"


class BadPathError(FileTreeError):
    status = Status.BAD_PATH
    default_message = "Malformed path"


class ConflictingPathError(FileTreeError):
    status = Status.CONFLICTING_PATH
    default_message = "Path conflicts with the tree root"


class NoSuchPathError(FileTreeError):
    status = Status.NO_SUCH_PATH
    default_message = "No such path"


class NotADirectoryPathError(FileTreeError):
    status = Status.NOT_A_DIRECTORY
    default_message = "Not a directory"


class NotAFilePathError(FileTreeError):
    status = Status.NOT_A_FILE
    default_message = "Not a file"


class AlreadyInTreeError(FileTreeError):
    status = Status.ALREADY_IN_TREE
    default_message = "Path already in tree"


class TreeMemoryError(FileTreeError):
    status = Status.MEMORY_ERROR
    default_message = "Memory could not be allocated"


__all__ = [
    "AlreadyInTreeError",
    "BadPathError",
    "ConflictingPathError",
    "FileTreeError",
    "InitializationError",
    "NoSuchPathError",
    "NotADirectoryPathError",
    "NotAFilePathError",
    "Status",
    "TreeMemoryError",
]
