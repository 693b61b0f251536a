import argparse
import sys
from pathlib import Path
from typing import List, Optional

import requests
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn
from rich.table import Table, box

from mrmodpack import EmptyModList, Loader, NoResolvableMods, Report, VersionId, compute_report
from mrmodpack.config import Settings
from mrmodpack.downloader import download_mods
from mrmodpack.exceptions import InvalidVersionFormat, RegistryError
from mrmodpack.logger import setup_logging
from mrmodpack.modrinth_api import ModrinthClient, ModrinthResolver
from mrmodpack.report import render_markdown
from mrmodpack.utils import console, parse_collection_reference, parse_mod_reference, read_mod_list

EXIT_EMPTY = 2
EXIT_NO_DATA = 3


def positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return number


def non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative, got {value}")
    return number


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="""
Mr Modpack

Finds the Minecraft version(s) supported by the most mods in a list, using
compatibility data from Modrinth.

Example usage:
  python mr_modpack.py sodium lithium iris --loader fabric
  python mr_modpack.py --collection AbCdEfGh --matrix --report coverage.md
  python mr_modpack.py --input my_mods.md --download 1.20.1 --output-dir mods
""",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("mods", nargs="*", help="Mod slugs, ids or Modrinth URLs")
    parser.add_argument("--input", help="File with Modrinth links or one mod slug per line")
    parser.add_argument("--collection", action="append", default=[],
                        help="Modrinth collection id or URL (can be repeated)")
    parser.add_argument("--loader", default="any", choices=[loader.value for loader in Loader],
                        help="Only count support for this loader (default: any)")
    parser.add_argument("--top", type=non_negative_int, default=10,
                        help="Number of versions to show (default: 10, 0 for all)")
    parser.add_argument("--matrix", action="store_true", help="Show which mods support each listed version")
    parser.add_argument("--report", help="Write a Markdown report to this file")
    parser.add_argument("--download", metavar="VERSION",
                        help='Download all supporting mods for this game version (use "best" for the top result)')
    parser.add_argument("--output-dir", default="mods", help="Directory to save downloaded mods (default: mods)")
    parser.add_argument("--workers", type=positive_int, help="Parallel registry lookups")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging verbosity (default: WARNING, or DEBUG with MRMODPACK_DEBUG=1)")

    return parser.parse_args(argv)


def collect_mod_ids(args: argparse.Namespace, client: ModrinthClient) -> List[str]:
    mod_ids = [parse_mod_reference(mod) for mod in args.mods]
    if args.input:
        mod_ids.extend(read_mod_list(args.input))
    for reference in args.collection:
        collection_id = parse_collection_reference(reference)
        try:
            projects = client.get_collection(collection_id)
        except (requests.exceptions.RequestException, RegistryError) as e:
            console.print(f"[red]Could not load collection {collection_id}: {e}[/]")
            continue
        console.print(f"[dim]Collection {collection_id}: {len(projects)} project(s)[/]")
        mod_ids.extend(projects)
    return mod_ids


def coverage_table(report: Report, top: int) -> Table:
    table = Table(box=box.ROUNDED, title=f"Version coverage ({report.loader})")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Version", style="bold")
    table.add_column("Mods", justify="right")
    table.add_column("Coverage", justify="right")

    entries = report.entries[:top] if top else report.entries
    for position, entry in enumerate(entries, start=1):
        style = "green" if entry.count == report.total_resolved else "yellow"
        table.add_row(
            str(position),
            str(entry.version),
            f"{entry.count}/{report.total_resolved}",
            f"[{style}]{entry.percentage:.1f}%[/]",
        )
    return table


def matrix_table(report: Report, top: int) -> Table:
    entries = report.entries[:top] if top else report.entries
    table = Table(box=box.ROUNDED, title="Support matrix")
    table.add_column("Mod", style="bold")
    for entry in entries:
        table.add_column(str(entry.version), justify="center")
    for mod_id, name in report.mods:
        marks = ("[green]+[/]" if report.supports(mod_id, entry.version) else "[red]-[/]" for entry in entries)
        table.add_row(name, *marks)
    return table


def run_download(args: argparse.Namespace, client: ModrinthClient, report: Report) -> None:
    if args.download == "best":
        if report.best is None:
            console.print("[red]No version to download for.[/]")
            return
        entry = report.best
    else:
        try:
            version = VersionId.parse(args.download)
        except InvalidVersionFormat as e:
            console.print(f"[red]{e.message}[/]")
            return
        entry = next((e for e in report.entries if e.version == version), None)
        if entry is None:
            console.print(f"[red]None of the mods support {version} with loader {report.loader}.[/]")
            return

    console.print(f"\nDownloading {entry.count} mod(s) for Minecraft {entry.version} into {args.output_dir}...")
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
        transient=True,
    ) as progress:
        results = download_mods(client, entry.mods, entry.version, report.loader, args.output_dir, progress)

    table = Table(box=box.ROUNDED)
    table.add_column("Status", justify="center")
    table.add_column("Mod", style="bold")
    table.add_column("Details", style="dim")
    for result in results:
        status = "[green]+[/]" if result.available else "[red]-[/]"
        name = f"{result.name} (dependency)" if result.dependency_of else result.name
        details = result.filename if result.available else (result.error or "Not available")
        table.add_row(status, name, details)
    console.print(table)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level)

    settings = Settings.from_env()
    client = ModrinthClient(settings)
    loader = Loader.parse(args.loader)
    workers = args.workers or settings.max_workers

    mod_ids = collect_mod_ids(args, client)
    console.print(Panel.fit(
        f"Checking {len(mod_ids)} mod(s) using loader [blue]{loader}[/]",
        title="[bold green]Mr Modpack[/]",
    ))

    try:
        with console.status("Fetching compatibility data from Modrinth..."):
            report = compute_report(mod_ids, loader, ModrinthResolver(client), max_workers=workers)
    except EmptyModList:
        console.print("[red]No mods given.[/] Pass mod slugs, --input or --collection.")
        return EXIT_EMPTY
    except NoResolvableMods as e:
        console.print(f"[red]No data: none of the {len(e.unresolved)} mod(s) could be resolved.[/]")
        for mod_id in e.unresolved:
            console.print(f"- [red]{mod_id}[/]")
        return EXIT_NO_DATA

    if report.entries:
        console.print(coverage_table(report, args.top))
        if args.matrix:
            console.print(matrix_table(report, args.top))
        best = report.best
        console.print(f"\n[green]Best version: {best.version}[/] supports {best.count}/{report.total_resolved} mod(s)")
    else:
        console.print(f"[yellow]None of the resolved mods support any version with loader {loader}.[/]")

    if report.unresolved:
        console.print(f"\n[yellow]Unresolved mods ({len(report.unresolved)}):[/]")
        for mod_id in report.unresolved:
            console.print(f"- [red]{mod_id}[/]")

    if args.report:
        Path(args.report).write_text(render_markdown(report, top=args.top), encoding="utf-8")
        console.print(f"\n[dim]Detailed report saved to {args.report}[/]")

    if args.download:
        run_download(args, client, report)

    return 0


if __name__ == "__main__":
    sys.exit(main())
