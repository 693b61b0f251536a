import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Set

import requests
from rich.progress import Progress

from .exceptions import RegistryError
from .models import Loader
from .modrinth_api import ModrinthClient
from .versions import VersionId

logger = logging.getLogger(__name__)


@dataclass
class DownloadResult:
    mod_id: str
    name: str
    available: bool
    filename: Optional[str] = None
    dependency_of: Optional[str] = None
    error: Optional[str] = None


def loader_names(loader: Loader) -> List[str]:
    loaders = Loader.concrete() if loader is Loader.ANY else (loader,)
    return [l.value for l in loaders]


def primary_file(version: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    files = version.get("files") or []
    for file in files:
        if file.get("primary"):
            return file
    return files[0] if files else None


def pick_version(versions: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Newest listed version, preferring the latest publish date."""
    usable = [v for v in versions if primary_file(v)]
    if not usable:
        return None
    return max(usable, key=lambda v: v.get("date_published") or "")


def download_file(session: requests.Session, url: str, output_path: Path, progress: Optional[Progress] = None,
                  description: str = "", timeout: Optional[float] = None) -> None:
    """Stream ``url`` into ``output_path``. The file only appears once the body is complete."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    part_path = output_path.with_name(output_path.name + ".part")
    try:
        with session.get(url, stream=True, timeout=timeout) as response:
            response.raise_for_status()
            total_size = int(response.headers.get("content-length", 0))

            task = progress.add_task(description or f"Downloading {output_path.name}...", total=total_size) if progress else None
            with open(part_path, "wb") as f:
                for chunk in response.iter_content(chunk_size=8192):
                    if chunk:
                        f.write(chunk)
                        if progress is not None:
                            progress.update(task, advance=len(chunk))
        part_path.replace(output_path)
    except BaseException:
        part_path.unlink(missing_ok=True)
        raise


def download_mods(
    client: ModrinthClient,
    mod_ids: Iterable[str],
    version: VersionId,
    loader: Loader,
    output_dir: str,
    progress: Optional[Progress] = None,
) -> List[DownloadResult]:
    """Download every mod (and its required dependencies) for ``version`` into ``output_dir``."""
    game_version = str(version)
    loaders = loader_names(loader)
    out = Path(output_dir)
    results: List[DownloadResult] = []
    processed: Set[str] = set()

    todo = [(mod_id, None) for mod_id in reversed(list(mod_ids))]
    while todo:
        mod_id, parent = todo.pop()
        if mod_id in processed:
            logger.debug("%s already processed", mod_id)
            continue
        processed.add(mod_id)

        try:
            project = client.get_project(mod_id)
            processed.add(project.get("id", mod_id))
            name = project.get("title") or mod_id
            chosen = pick_version(client.get_project_versions(mod_id, loaders, [game_version]))
        except (requests.exceptions.RequestException, RegistryError) as e:
            logger.warning("Could not look up %s: %s", mod_id, e)
            results.append(DownloadResult(mod_id, mod_id, False, dependency_of=parent, error=str(e)))
            continue

        if chosen is None:
            logger.info("Nothing found for %s (%s, %s)", name, game_version, "/".join(loaders))
            results.append(DownloadResult(mod_id, name, False, dependency_of=parent, error=f"no file for {game_version}"))
            continue

        file = primary_file(chosen)
        output_path = out / file["filename"]
        if output_path.exists():
            logger.info("%s already exists in %s", file["filename"], out)
        else:
            try:
                download_file(client.session, file["url"], output_path, progress, f"Downloading {name}...",
                              timeout=client.settings.request_timeout)
            except requests.exceptions.RequestException as e:
                logger.error("Error downloading %s: %s", name, e)
                results.append(DownloadResult(mod_id, name, False, dependency_of=parent, error=str(e)))
                continue
        results.append(DownloadResult(mod_id, name, True, filename=file["filename"], dependency_of=parent))

        for dep in chosen.get("dependencies") or []:
            dep_id = dep.get("project_id")
            if dep.get("dependency_type") != "required" or not dep_id:
                continue
            if dep_id not in processed:
                todo.append((dep_id, mod_id))

    return results
