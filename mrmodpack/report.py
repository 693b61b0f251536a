from dataclasses import replace
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from .models import CoverageEntry, Loader, Report


def coverage_percentage(count: int, total_resolved: int) -> float:
    return round(count / total_resolved * 100, 1)


def build_report(
    ranked: Sequence[CoverageEntry],
    total_resolved: int,
    unresolved: Sequence[str],
    loader: Loader,
    mods: Sequence[Tuple[str, str]] = (),
) -> Report:
    """Attach percentages to ranked entries and freeze everything into a Report."""
    if total_resolved <= 0 and ranked:
        raise ValueError("Ranked entries given without any resolved mods")
    entries = tuple(
        replace(entry, percentage=coverage_percentage(entry.count, total_resolved)) for entry in ranked
    )
    return Report(
        entries=entries,
        unresolved=tuple(unresolved),
        loader=loader,
        total_resolved=total_resolved,
        mods=tuple(mods),
    )


def render_markdown(report: Report, title: str = "Mod Version Coverage Report", top: Optional[int] = None,
                    generated_at: Optional[datetime] = None) -> str:
    """Render a report as Markdown: ranking, support matrix and unresolved mods."""
    entries = report.entries[:top] if top else report.entries
    now = generated_at or datetime.now()
    lines: List[str] = []

    lines.append(f"# {title}")
    lines.append(f"Generated on: {now.strftime('%Y-%m-%d %H:%M:%S')}")
    lines.append("")

    lines.append("## Summary")
    lines.append(f"- Loader: {report.loader}")
    lines.append(f"- Resolved mods: {report.total_resolved}")
    lines.append(f"- Unresolved mods: {len(report.unresolved)}")
    if report.best:
        lines.append(f"- Best version: {report.best.version} ({report.best.percentage}%)")
    lines.append("")

    lines.append("## Version Ranking")
    if entries:
        lines.append("| Rank | Version | Mods | Coverage |")
        lines.append("| ---: | --- | ---: | ---: |")
        for position, entry in enumerate(entries, start=1):
            lines.append(
                f"| {position} | {entry.version} | {entry.count}/{report.total_resolved} | {entry.percentage}% |"
            )
    else:
        lines.append(f"No version supports any of the resolved mods with loader {report.loader}.")
    lines.append("")

    if entries and report.mods:
        lines.append("## Support Matrix")
        lines.append("| Mod | " + " | ".join(str(entry.version) for entry in entries) + " |")
        lines.append("| --- |" + " :---: |" * len(entries))
        for mod_id, name in report.mods:
            marks = ["✅" if report.supports(mod_id, entry.version) else "❌" for entry in entries]
            lines.append(f"| [{name}](https://modrinth.com/mod/{mod_id}) | " + " | ".join(marks) + " |")
        lines.append("")

    if report.unresolved:
        lines.append("## Unresolved Mods")
        for mod_id in report.unresolved:
            lines.append(f"- {mod_id}")
        lines.append("")

    return "\n".join(lines)
