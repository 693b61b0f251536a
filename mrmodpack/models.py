import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, Optional, Tuple, Union

from .exceptions import InvalidVersionFormat
from .versions import VersionId

logger = logging.getLogger(__name__)


class Loader(Enum):
    FORGE = "forge"
    FABRIC = "fabric"
    QUILT = "quilt"
    NEOFORGE = "neoforge"
    ANY = "any"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, name: str) -> "Loader":
        try:
            return cls(name.strip().lower())
        except ValueError:
            choices = ", ".join(loader.value for loader in cls)
            raise ValueError(f"Unknown loader {name!r} (expected one of: {choices})") from None

    @classmethod
    def from_registry(cls, name: str) -> Optional["Loader"]:
        """Map a registry loader name to a concrete loader, or None if it is not one we track."""
        if not isinstance(name, str):
            return None
        try:
            loader = cls(name.strip().lower())
        except ValueError:
            return None
        return None if loader is cls.ANY else loader

    @classmethod
    def concrete(cls) -> Tuple["Loader", ...]:
        return tuple(loader for loader in cls if loader is not cls.ANY)


@dataclass(frozen=True)
class CompatibilityRecord:
    mod_id: str
    name: str
    pairs: FrozenSet[Tuple[Loader, VersionId]]

    def __post_init__(self):
        if not self.pairs:
            raise ValueError(f"Record for {self.mod_id!r} has no supported versions; use Unresolved instead")

    def versions_for(self, loader_filter: Loader) -> FrozenSet[VersionId]:
        """Versions supported under ``loader_filter``, one entry per version whatever the loader count."""
        if loader_filter is Loader.ANY:
            return frozenset(version for _, version in self.pairs)
        return frozenset(version for loader, version in self.pairs if loader is loader_filter)


@dataclass(frozen=True)
class Unresolved:
    mod_id: str
    reason: str = "no compatibility data"


Resolution = Union[CompatibilityRecord, Unresolved]


@dataclass(frozen=True)
class CoverageEntry:
    version: VersionId
    mods: Tuple[str, ...]
    count: int
    percentage: Optional[float] = None


@dataclass(frozen=True)
class Report:
    entries: Tuple[CoverageEntry, ...]
    unresolved: Tuple[str, ...]
    loader: Loader
    total_resolved: int
    mods: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)

    @property
    def best(self) -> Optional[CoverageEntry]:
        return self.entries[0] if self.entries else None

    def supports(self, mod_id: str, version: VersionId) -> bool:
        for entry in self.entries:
            if entry.version == version:
                return mod_id in entry.mods
        return False


def build_record(mod_id: str, name: str, raw_pairs: Iterable[Tuple[str, str]]) -> Resolution:
    """Build a record from raw ``(loader, game_version)`` strings as the registry reports them.

    Unparsable versions and untracked loaders are skipped. If the registry
    listed versions but none of them parse, the whole record is rejected with
    ``InvalidVersionFormat``. A mod with no pairs at all comes back as
    ``Unresolved``.
    """
    pairs = set()
    bad_versions = []
    seen_versions = 0
    for raw_loader, raw_version in raw_pairs:
        seen_versions += 1
        try:
            version = VersionId.parse(raw_version)
        except InvalidVersionFormat:
            bad_versions.append(str(raw_version))
            continue
        loader = Loader.from_registry(raw_loader)
        if loader is None:
            logger.debug("Skipping %s loader %r for %s", mod_id, raw_loader, version)
            continue
        pairs.add((loader, version))

    if bad_versions:
        logger.warning(
            "Skipped %d unparsable version(s) for %s: %s",
            len(bad_versions),
            mod_id,
            ", ".join(sorted(set(bad_versions))[:5]),
        )
    if pairs:
        return CompatibilityRecord(mod_id=mod_id, name=name, pairs=frozenset(pairs))
    if seen_versions and len(bad_versions) == seen_versions:
        raise InvalidVersionFormat(bad_versions[0], f"No parsable game versions for {mod_id!r}")
    return Unresolved(mod_id, "no supported versions for any tracked loader" if seen_versions else "no version data")
