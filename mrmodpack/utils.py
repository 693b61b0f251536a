import re
from pathlib import Path
from typing import List, Union

from rich.console import Console

console = Console()

MODRINTH_URL = re.compile(r"https?://(?:www\.)?modrinth\.com/(?:mod|plugin|datapack|shader|resourcepack)/([A-Za-z0-9_.-]+)")
COLLECTION_URL = re.compile(r"https?://(?:www\.)?modrinth\.com/collection/([A-Za-z0-9]+)")
SLUG = re.compile(r"^[A-Za-z0-9_.-]+$")


def parse_mod_reference(reference: str) -> str:
    """Return the slug or id from a Modrinth project URL, or the reference itself."""
    reference = reference.strip()
    match = MODRINTH_URL.match(reference)
    return match.group(1) if match else reference


def parse_collection_reference(reference: str) -> str:
    reference = reference.strip()
    match = COLLECTION_URL.match(reference)
    return match.group(1) if match else reference


def extract_modrinth_links(text: str) -> List[str]:
    """Extract mod slugs from free text.

    Supports:
    - Markdown links to Modrinth ([Name](https://modrinth.com/mod/slug))
    - Bare Modrinth URLs
    - One plain slug per line, with ``#`` comments
    """
    slugs: List[str] = []
    for match in MODRINTH_URL.finditer(text):
        if match.group(1) not in slugs:
            slugs.append(match.group(1))

    for line in text.splitlines():
        line = line.split("#", 1)[0].strip()
        if line and SLUG.match(line) and line not in slugs:
            slugs.append(line)
    return slugs


def read_mod_list(input_file: Union[str, Path]) -> List[str]:
    content = Path(input_file).read_text(encoding="utf-8")
    mods = extract_modrinth_links(content)
    if not mods:
        console.print("[yellow]Warning: No Modrinth mods found in the input file.[/]")
        console.print("[yellow]Make sure your file contains either:")
        console.print("[yellow]  - Markdown links: [Mod Name](https://modrinth.com/mod/mod-slug)")
        console.print("[yellow]  - Direct URLs: https://modrinth.com/mod/mod-slug")
        console.print("[yellow]  - One mod slug per line")
    return mods
