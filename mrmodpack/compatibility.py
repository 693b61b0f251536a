import logging
from concurrent.futures import ThreadPoolExecutor
from functools import cmp_to_key
from typing import Callable, Dict, Iterable, List, Sequence, Set

from .exceptions import EmptyModList, NoResolvableMods
from .models import CompatibilityRecord, CoverageEntry, Loader, Report, Resolution, Unresolved
from .report import build_report
from .versions import VersionId, compare

logger = logging.getLogger(__name__)

Resolver = Callable[[str], Resolution]


def normalize(record: CompatibilityRecord, loader_filter: Loader) -> Set[VersionId]:
    """Collapse a record's (loader, version) pairs into the set of versions it supports."""
    return set(record.versions_for(loader_filter))


def aggregate(records: Sequence[CompatibilityRecord], loader_filter: Loader) -> List[CoverageEntry]:
    """Group mod ids by the versions they support under ``loader_filter``.

    Every version that at least one record supports gets one entry. A mod
    counts once per version, whatever the number of loaders it lists for it.
    The entries come back unordered; see ``rank``.
    """
    if not records:
        raise EmptyModList("Cannot aggregate an empty set of records")

    supporters: Dict[VersionId, Set[str]] = {}
    for record in records:
        for version in normalize(record, loader_filter):
            supporters.setdefault(version, set()).add(record.mod_id)

    return [
        CoverageEntry(version=version, mods=tuple(sorted(mods)), count=len(mods))
        for version, mods in supporters.items()
    ]


def compare_entries(a: CoverageEntry, b: CoverageEntry) -> int:
    """Rank order: more supporting mods first, then newer versions, then mod ids lexically."""
    if a.count != b.count:
        return -1 if a.count > b.count else 1
    by_version = compare(a.version, b.version)
    if by_version:
        return -by_version
    for mod_a, mod_b in zip(a.mods, b.mods):
        if mod_a != mod_b:
            return -1 if mod_a < mod_b else 1
    return (len(a.mods) > len(b.mods)) - (len(a.mods) < len(b.mods))


def rank(entries: Iterable[CoverageEntry]) -> List[CoverageEntry]:
    return sorted(entries, key=cmp_to_key(compare_entries))


def unique_identifiers(mod_identifiers: Iterable[str]) -> List[str]:
    seen: Set[str] = set()
    unique = []
    for mod_id in mod_identifiers:
        mod_id = mod_id.strip()
        if mod_id and mod_id not in seen:
            seen.add(mod_id)
            unique.append(mod_id)
    return unique


def resolve_all(mod_identifiers: Sequence[str], resolve: Resolver, max_workers: int = 1) -> List[Resolution]:
    """Resolve every identifier, keeping input order. All lookups finish before this returns."""
    if max_workers <= 1 or len(mod_identifiers) <= 1:
        return [resolve(mod_id) for mod_id in mod_identifiers]
    with ThreadPoolExecutor(max_workers=min(max_workers, len(mod_identifiers)), thread_name_prefix="resolve") as pool:
        return list(pool.map(resolve, mod_identifiers))


def merge_aliases(results: Sequence[Resolution]) -> List[Resolution]:
    """Keep the first record for each mod id; later records for the same mod are aliases."""
    seen: Set[str] = set()
    merged = []
    for item in results:
        if isinstance(item, CompatibilityRecord):
            if item.mod_id in seen:
                logger.info("Merged duplicate record for %s", item.mod_id)
                continue
            seen.add(item.mod_id)
        merged.append(item)
    return merged


def compute_report_from_records(results: Sequence[Resolution], loader_filter: Loader) -> Report:
    """Aggregate, rank and build the report for results that are already resolved.

    Records sharing a ``mod_id`` (for example a slug and a project id of the
    same mod) count as one mod.
    """
    if not results:
        raise EmptyModList()

    results = merge_aliases(results)

    records = [r for r in results if isinstance(r, CompatibilityRecord)]
    unresolved = [r.mod_id for r in results if isinstance(r, Unresolved)]
    for item in results:
        if isinstance(item, Unresolved):
            logger.info("Unresolved: %s (%s)", item.mod_id, item.reason)

    if not records:
        raise NoResolvableMods(unresolved)

    ranked = rank(aggregate(records, loader_filter))
    logger.debug(
        "Ranked %d candidate version(s) from %d resolved mod(s) with loader=%s",
        len(ranked),
        len(records),
        loader_filter,
    )
    return build_report(
        ranked,
        total_resolved=len(records),
        unresolved=unresolved,
        loader=loader_filter,
        mods=[(r.mod_id, r.name) for r in records],
    )


def compute_report(
    mod_identifiers: Sequence[str],
    loader_filter: Loader,
    resolve: Resolver,
    max_workers: int = 1,
) -> Report:
    """Find which game versions cover the most of ``mod_identifiers``.

    ``resolve`` maps a mod identifier to a ``CompatibilityRecord`` or an
    ``Unresolved`` value and must not raise for per-mod failures.

    Raises ``EmptyModList`` when no identifiers are given and
    ``NoResolvableMods`` when none of them resolve.
    """
    identifiers = unique_identifiers(mod_identifiers)
    if not identifiers:
        raise EmptyModList()

    results = resolve_all(identifiers, resolve, max_workers)
    return compute_report_from_records(results, loader_filter)
