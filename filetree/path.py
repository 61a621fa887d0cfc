"""Immutable absolute paths addressed by component."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import BadPathError, NoSuchPathError

SEPARATOR = "/"


@dataclass(frozen=True)
class Path:
    """An absolute slash-delimited path, stored as a tuple of components.

    ``Path.parse("/")`` is the zero-depth path. Paths are compared by their
    string form, which for ``str`` is code-point (and UTF-8 byte) order.
    """

    components: tuple[str, ...] = ()

    @classmethod
    def parse(cls, text: str) -> Path:
        """Parse ``text`` into a Path, raising BadPathError if malformed."""
        if not isinstance(text, str) or not text.startswith(SEPARATOR):
            raise BadPathError(f"Not an absolute path: {text!r}")
        if "\0" in text:
            raise BadPathError(f"Path contains a NUL character: {text!r}")
        if text == SEPARATOR:
            return cls()
        parts = tuple(text[1:].split(SEPARATOR))
        if any(part == "" for part in parts):
            raise BadPathError(f"Empty component in path: {text!r}")
        return cls(parts)

    @property
    def depth(self) -> int:
        return len(self.components)

    @property
    def name(self) -> str:
        return self.components[-1] if self.components else ""

    def prefix(self, k: int) -> Path:
        """Return the path formed by the first ``k`` components."""
        if k < 0 or k > self.depth:
            raise NoSuchPathError(f"Prefix depth {k} out of range for {self}")
        return Path(self.components[:k])

    def is_prefix_of(self, other: Path) -> bool:
        return other.components[: self.depth] == self.components

    def shared_prefix_depth(self, other: Path) -> int:
        shared = 0
        for mine, theirs in zip(self.components, other.components):
            if mine != theirs:
                break
            shared += 1
        return shared

    def compare(self, other: Path) -> int:
        """Three-way comparison by path string: <0, 0 or >0."""
        a, b = str(self), str(other)
        return (a > b) - (a < b)

    def __lt__(self, other: Path) -> bool:
        return self.compare(other) < 0

    def __str__(self) -> str:
        return SEPARATOR + SEPARATOR.join(self.components)


def coerce_path(value: str | Path) -> Path:
    """Accept either a Path or a path string."""
    if isinstance(value, Path):
        return value
    return Path.parse(value)


__all__ = ["Path", "SEPARATOR", "coerce_path"]
