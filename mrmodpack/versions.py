import re
from dataclasses import dataclass
from functools import total_ordering
from typing import Optional, Tuple

from .exceptions import InvalidVersionFormat

VERSION_PATTERN = re.compile(r"^(\d+)\.(\d+)(?:\.(\d+))?(?:-([0-9A-Za-z.]+))?$")


@total_ordering
@dataclass(frozen=True)
class VersionId:
    """A parsed game version such as ``1.20.1`` or ``1.20.1-rc1``.

    Ordering goes from oldest to newest. A tagged version (pre-release,
    release candidate) sorts before the release with the same numbers, and
    two tags of the same numbers sort lexicographically.
    """

    major: int
    minor: int
    patch: int = 0
    tag: Optional[str] = None

    @classmethod
    def parse(cls, raw: str) -> "VersionId":
        if not isinstance(raw, str):
            raise InvalidVersionFormat(repr(raw))
        match = VERSION_PATTERN.match(raw.strip())
        if not match:
            raise InvalidVersionFormat(raw)
        major, minor, patch, tag = match.groups()
        return cls(int(major), int(minor), int(patch or 0), tag)

    def sort_key(self) -> Tuple[int, int, int, int, str]:
        return (self.major, self.minor, self.patch, 0 if self.tag else 1, self.tag or "")

    def __lt__(self, other: "VersionId") -> bool:
        if not isinstance(other, VersionId):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}"
        if self.patch:
            text += f".{self.patch}"
        if self.tag:
            text += f"-{self.tag}"
        return text


def compare(a: VersionId, b: VersionId) -> int:
    """Three-way comparison: -1 if ``a`` is older, 1 if newer, 0 if equal."""
    ka, kb = a.sort_key(), b.sort_key()
    return (ka > kb) - (ka < kb)
