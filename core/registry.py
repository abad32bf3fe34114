"""npm registry client."""

import logging
from urllib.parse import quote

import httpx

from .constants import DEFAULT_TIMEOUT, NPM_REGISTRY
from .versions import sort_descending

logger = logging.getLogger(__name__)


class NpmRegistryClient:
    """Fetches package metadata from the npm registry.

    Records are cached per package name for the lifetime of the client.
    The cache is never evicted; it only ever holds the packages of the
    manifests analyzed with this client.
    """

    def __init__(
        self,
        registry_url: str = NPM_REGISTRY,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the registry client.

        Args:
            registry_url: Base URL of the registry
            timeout: Request timeout in seconds
            transport: Optional httpx transport, mainly for tests
        """
        self.registry_url = registry_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport
        self._cache: dict[str, dict] = {}

    def package_url(self, package_name: str) -> str:
        # Scoped names keep their "@" but the slash is encoded
        return f"{self.registry_url}/{quote(package_name, safe='@')}"

    async def fetch_package_info(self, package_name: str) -> dict | None:
        """Fetch the registry record for a package.

        Args:
            package_name: Name of the package

        Returns:
            Registry record dict, or None if it could not be fetched
        """
        if package_name in self._cache:
            return self._cache[package_name]

        url = self.package_url(package_name)

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(url)
                response.raise_for_status()
                record = response.json()
        except httpx.TimeoutException:
            logger.warning("Timeout fetching package info for %s", package_name)
            return None
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Registry returned %s for %s", e.response.status_code, package_name
            )
            return None
        except httpx.HTTPError as e:
            logger.warning("Network error fetching %s: %s", package_name, e)
            return None
        except ValueError as e:
            logger.warning("Malformed registry response for %s: %s", package_name, e)
            return None

        if not isinstance(record, dict) or not _has_record_shape(record):
            logger.warning("Unexpected registry payload for %s", package_name)
            return None

        self._cache[package_name] = record
        return record


def get_latest_version(record: dict) -> str | None:
    """Read the "latest" dist-tag of a registry record."""
    dist_tags = record.get("dist-tags") or {}
    return dist_tags.get("latest")


def get_available_versions(record: dict) -> list[str]:
    """Published versions, newest first."""
    return sort_descending((record.get("versions") or {}).keys())


def get_peer_dependencies(record: dict, version: str) -> dict[str, str]:
    version_info = (record.get("versions") or {}).get(version)
    if not isinstance(version_info, dict):
        return {}
    peer_dependencies = version_info.get("peerDependencies")
    return peer_dependencies if isinstance(peer_dependencies, dict) else {}


def has_peer_dependency(record: dict, version: str, peer_package: str) -> bool:
    return peer_package in get_peer_dependencies(record, version)


def _has_record_shape(record: dict) -> bool:
    # Absent blocks are fine; present ones must be objects
    return all(
        isinstance(record.get(key, {}), dict) for key in ("dist-tags", "versions")
    )
