__version__ = "0.1.0"

from .compatibility import aggregate, compute_report, compute_report_from_records, rank
from .exceptions import EmptyModList, InvalidVersionFormat, ModpackError, NoResolvableMods
from .models import CompatibilityRecord, CoverageEntry, Loader, Report, Unresolved
from .report import build_report
from .versions import VersionId

__all__ = [
    "CompatibilityRecord",
    "CoverageEntry",
    "EmptyModList",
    "InvalidVersionFormat",
    "Loader",
    "ModpackError",
    "NoResolvableMods",
    "Report",
    "Unresolved",
    "VersionId",
    "aggregate",
    "build_report",
    "compute_report",
    "compute_report_from_records",
    "rank",
]
