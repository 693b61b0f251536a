import json
import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import requests

from .cache import RequestThrottle, ResponseCache
from .config import Settings
from .exceptions import InvalidVersionFormat, RegistryError, RegistryNotFound
from .models import Resolution, Unresolved, build_record

logger = logging.getLogger(__name__)


class ModrinthClient:
    """Thin, rate-limited wrapper around the Modrinth REST API."""

    def __init__(self, settings: Optional[Settings] = None, session: Optional[requests.Session] = None) -> None:
        self.settings = settings or Settings()
        self.session = session or requests.Session()
        self.session.headers["User-Agent"] = self.settings.user_agent
        self.cache = ResponseCache(self.settings.cache_duration)
        self.throttle = RequestThrottle(self.settings.min_request_interval, self.settings.rate_limit_threshold)

    def make_request(self, url: str, params: Optional[Dict[str, str]] = None) -> requests.Response:
        self.throttle.wait()
        response = self.session.get(url, params=params, timeout=self.settings.request_timeout)
        self.throttle.update_rate_limits(response.headers)
        return response

    def get_json(self, url: str, params: Optional[Dict[str, str]] = None) -> Any:
        key = url if not params else f"{url}?{json.dumps(params, sort_keys=True)}"
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        response = self.make_request(url, params)
        if response.status_code == 404:
            raise RegistryNotFound(f"Not found on Modrinth: {url}", context={"url": url})
        response.raise_for_status()
        try:
            data = response.json()
        except ValueError as e:
            raise RegistryError(f"Malformed JSON from {url}: {e}", context={"url": url}) from e

        self.cache.put(key, data)
        return data

    def get_project(self, slug: str) -> Dict[str, Any]:
        project = self.get_json(f"{self.settings.api_url}/project/{slug}")
        if not isinstance(project, dict):
            raise RegistryError(f"Unexpected project data for {slug}", context={"slug": slug})
        return project

    def get_project_versions(
        self,
        slug: str,
        loaders: Optional[Sequence[str]] = None,
        game_versions: Optional[Sequence[str]] = None,
    ) -> List[Dict[str, Any]]:
        params = {}
        if loaders:
            params["loaders"] = json.dumps(list(loaders))
        if game_versions:
            params["game_versions"] = json.dumps(list(game_versions))
        versions = self.get_json(f"{self.settings.api_url}/project/{slug}/version", params or None)
        if not isinstance(versions, list):
            raise RegistryError(f"Unexpected version listing for {slug}", context={"slug": slug})
        return [ver for ver in versions if isinstance(ver, dict)]

    def get_collection(self, collection_id: str) -> List[str]:
        """Project ids listed in a Modrinth collection."""
        data = self.get_json(f"{self.settings.api_v3_url}/collection/{collection_id}")
        projects = data.get("projects") if isinstance(data, dict) else None
        if not isinstance(projects, list):
            raise RegistryError(f"Collection {collection_id} has no project list", context={"collection": collection_id})
        return [str(project) for project in projects]


def listed(value: Any) -> List[Any]:
    """A registry list field, or an empty list when it is missing or not a list."""
    return value if isinstance(value, list) else []


def version_pairs(versions: Iterable[Dict[str, Any]]) -> List[Tuple[str, str]]:
    """Flatten a version listing into raw (loader, game_version) pairs."""
    pairs = []
    for ver in versions:
        for game_version in listed(ver.get("game_versions")):
            for loader in listed(ver.get("loaders")):
                pairs.append((loader, game_version))
    return pairs


def project_pairs(project: Dict[str, Any]) -> List[Tuple[str, str]]:
    """Project-level (loader, game_version) pairs, less precise than the version listing."""
    return [
        (loader, game_version)
        for game_version in listed(project.get("game_versions"))
        for loader in listed(project.get("loaders"))
    ]


class ModrinthResolver:
    """Turns a mod slug or id into a CompatibilityRecord, or Unresolved when that fails.

    Records are keyed on the project slug the registry reports, so a slug and
    a project id naming the same mod produce records with the same ``mod_id``.
    """

    def __init__(self, client: ModrinthClient) -> None:
        self.client = client

    def __call__(self, mod_id: str) -> Resolution:
        return self.resolve(mod_id)

    def resolve(self, mod_id: str) -> Resolution:
        try:
            project = self.client.get_project(mod_id)
            slug = project.get("slug")
            canonical = slug if isinstance(slug, str) and slug else mod_id
            title = project.get("title")
            name = title if isinstance(title, str) and title else canonical

            pairs = version_pairs(self.client.get_project_versions(mod_id))
            if not pairs:
                logger.info("No version listing for %s, falling back to project metadata", mod_id)
                pairs = project_pairs(project)

            result = build_record(canonical, name, pairs)
            if isinstance(result, Unresolved):
                return Unresolved(mod_id, result.reason)
            return result
        except RegistryNotFound:
            logger.warning("Mod %s was not found on Modrinth", mod_id)
            return Unresolved(mod_id, "not found")
        except (requests.exceptions.RequestException, RegistryError) as e:
            logger.warning("Could not fetch %s: %s", mod_id, e)
            return Unresolved(mod_id, str(e))
        except InvalidVersionFormat as e:
            logger.warning("Dropping %s: %s", mod_id, e.message)
            return Unresolved(mod_id, e.message)
