"""React Native project-template diffs between two releases."""

import logging
import re

import httpx
from unidiff import UnidiffParseError

from .constants import (
    DEFAULT_APP_NAME,
    DEFAULT_APP_PACKAGE,
    DEFAULT_TIMEOUT,
    PACKAGE_NAMES,
    RN_CHANGELOG_URLS,
    RN_DIFF_REPOSITORIES,
)
from .diff import parse_diff
from .errors import TemplateDiffError
from .models import DiffFile

logger = logging.getLogger(__name__)


def get_diff_url(from_version: str, to_version: str, package_name: str = PACKAGE_NAMES["RN"]) -> str:
    """URL of the precomputed template diff; unknown packages use the React Native repo."""
    repo = RN_DIFF_REPOSITORIES.get(package_name, RN_DIFF_REPOSITORIES[PACKAGE_NAMES["RN"]])
    return f"https://raw.githubusercontent.com/{repo}/diffs/diffs/{from_version}..{to_version}.diff"


def clean_version(version: str) -> str:
    return re.sub(r"[\^~]", "", version)


class TemplateDiffClient:
    """Fetches and parses template diffs, memoized per version pair."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.timeout = timeout
        self.transport = transport
        self._cache: dict[tuple[str, str, str], list[DiffFile]] = {}

    async def fetch_template_diff(
        self,
        from_version: str,
        to_version: str,
        package_name: str = PACKAGE_NAMES["RN"],
    ) -> list[DiffFile]:
        """Fetch the template diff between two versions, package.json files first.

        Raises:
            TemplateDiffError: If the diff cannot be fetched, is empty or does not parse
        """
        key = (package_name, clean_version(from_version), clean_version(to_version))
        if key in self._cache:
            return self._cache[key]

        url = get_diff_url(key[1], key[2], package_name)
        logger.info("Fetching diff from: %s", url)

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(url)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TemplateDiffError(
                f"Failed to fetch diff: {e.response.status_code} {e.response.reason_phrase}"
            ) from e
        except httpx.HTTPError as e:
            raise TemplateDiffError(f"Failed to fetch diff: {e}") from e

        diff_text = response.text
        if not diff_text.strip():
            raise TemplateDiffError("Empty diff received")

        try:
            files = move_package_json_to_top(parse_diff(diff_text))
        except UnidiffParseError as e:
            raise TemplateDiffError(f"Failed to parse diff: {e}") from e
        self._cache[key] = files
        return files


def move_package_json_to_top(files: list[DiffFile]) -> list[DiffFile]:
    return sorted(files, key=lambda file: "package.json" not in file.path)


def get_changelog_url(version: str, package_name: str = PACKAGE_NAMES["RN"]) -> str | None:
    """Release notes link for a version; None for release candidates."""
    if "-rc" in version:
        return None

    base_url = RN_CHANGELOG_URLS.get(package_name)
    if not base_url:
        return None

    if package_name == PACKAGE_NAMES["RN"]:
        return f"{base_url}#v{version.replace('.', '')}"

    return f"{base_url}v{version}"


def replace_app_details(
    text: str, app_name: str | None = None, app_package: str | None = None
) -> str:
    """Swap the template's placeholder app name and package for the user's own."""
    app_name = app_name or DEFAULT_APP_NAME
    app_package = app_package or DEFAULT_APP_PACKAGE

    return (
        text.replace(DEFAULT_APP_PACKAGE, app_package)
        .replace(DEFAULT_APP_PACKAGE.replace(".", "/"), app_package.replace(".", "/"))
        .replace(DEFAULT_APP_NAME, app_name)
        .replace(DEFAULT_APP_NAME.lower(), app_name.lower())
    )


def remove_app_path_prefix(path: str, app_name: str | None = None) -> str:
    prefix = f"{app_name or DEFAULT_APP_NAME}/"
    return path[len(prefix):] if path.startswith(prefix) else path


def get_file_paths_to_show(
    file: DiffFile, app_name: str | None = None, app_package: str | None = None
) -> tuple[str, str]:
    """Old and new paths of a template file, rewritten for the user's app."""
    old_path = replace_app_details(file.old_path, app_name, app_package) if file.old_path else ""
    new_path = replace_app_details(file.new_path, app_name, app_package) if file.new_path else ""
    return remove_app_path_prefix(old_path, app_name), remove_app_path_prefix(new_path, app_name)
