"""Peer-dependency compatibility analysis against a target React Native version."""

import asyncio
import logging
from collections.abc import Callable, Mapping

from . import versions
from .constants import NPM_PACKAGE_PAGE, PLATFORM_PACKAGE
from .models import COMPATIBLE, UNKNOWN, WARNING, CompatibilityVerdict
from .registry import (
    NpmRegistryClient,
    get_available_versions,
    get_latest_version,
    get_peer_dependencies,
    has_peer_dependency,
)

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


class CompatibilityChecker:
    """Resolves dependencies to versions compatible with a platform release."""

    def __init__(
        self,
        registry: NpmRegistryClient | None = None,
        platform_package: str = PLATFORM_PACKAGE,
        max_concurrency: int = 1,
    ):
        """Initialize the checker.

        Args:
            registry: Registry client to use (a default npm client if omitted)
            platform_package: Package whose version is the upgrade target
            max_concurrency: Resolutions allowed in flight; 1 means sequential
        """
        self.registry = registry or NpmRegistryClient()
        self.platform_package = platform_package
        self.max_concurrency = max(1, max_concurrency)

    async def analyze_dependency(
        self, package_name: str, current_version: str, target_version: str
    ) -> CompatibilityVerdict:
        """Compute the recommended version of one dependency.

        Missing registry data never raises; the verdict degrades to "unknown".
        """
        if package_name == self.platform_package:
            return CompatibilityVerdict(
                package=package_name,
                current_version=current_version,
                recommended_version=target_version,
                latest_version=target_version,
                needs_update=current_version != target_version,
                has_breaking_changes=False,
                compatibility_status=COMPATIBLE,
                reason="React Native core package",
            )

        record = await self.registry.fetch_package_info(package_name)
        if not record:
            return _unknown_verdict(
                package_name, current_version, "Could not fetch package information from npm"
            )

        latest_version = get_latest_version(record)
        recommended_version = self.find_compatible_version(record, target_version)
        if recommended_version is None:
            return _unknown_verdict(
                package_name, current_version, "No published versions found on npm"
            )

        return create_verdict(
            package_name,
            current_version,
            recommended_version,
            latest_version or recommended_version,
            "Based on peer dependency analysis",
        )

    def find_compatible_version(self, record: dict, target_version: str) -> str | None:
        """Newest version whose platform peer range accepts the target.

        Falls back to the "latest" dist-tag when no version declares a
        satisfying peer range.
        """
        for version in get_available_versions(record):
            if not has_peer_dependency(record, version, self.platform_package):
                continue
            peer_range = get_peer_dependencies(record, version)[self.platform_package]
            if versions.satisfies(target_version, peer_range):
                return version

        return get_latest_version(record)

    async def analyze_all_dependencies(
        self,
        dependencies: Mapping[str, str],
        target_version: str,
        on_progress: ProgressCallback | None = None,
    ) -> list[CompatibilityVerdict]:
        """Analyze every dependency, keeping the mapping's order.

        on_progress(started, total) is called as each package begins
        processing. Unexpected errors abort the whole batch.
        """
        entries = list(dependencies.items())
        total = len(entries)
        started = 0

        def report_start() -> None:
            nonlocal started
            started += 1
            if on_progress:
                on_progress(started, total)

        if self.max_concurrency == 1:
            results = []
            for package_name, version in entries:
                report_start()
                results.append(
                    await self.analyze_dependency(package_name, version, target_version)
                )
            return results

        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def analyze(package_name: str, version: str) -> CompatibilityVerdict:
            async with semaphore:
                report_start()
                return await self.analyze_dependency(package_name, version, target_version)

        tasks = [analyze(package_name, version) for package_name, version in entries]
        return list(await asyncio.gather(*tasks))


def create_verdict(
    package_name: str,
    current_version: str,
    recommended_version: str,
    latest_version: str,
    reason: str,
) -> CompatibilityVerdict:
    """Build a verdict by comparing canonical current and recommended versions."""
    current = versions.coerce(current_version) or current_version
    recommended = versions.coerce(recommended_version) or recommended_version

    needs_update = current != recommended

    has_breaking_changes = False
    if needs_update:
        current_major = versions.major(current)
        recommended_major = versions.major(recommended)
        if current_major is not None and recommended_major is not None:
            has_breaking_changes = recommended_major > current_major

    status = WARNING if needs_update or has_breaking_changes else COMPATIBLE

    return CompatibilityVerdict(
        package=package_name,
        current_version=current_version,
        recommended_version=recommended_version,
        latest_version=latest_version,
        needs_update=needs_update,
        has_breaking_changes=has_breaking_changes,
        compatibility_status=status,
        reason=reason,
        changelog_url=f"{NPM_PACKAGE_PAGE}/{package_name}?activeTab=versions",
    )


def _unknown_verdict(package_name: str, current_version: str, reason: str) -> CompatibilityVerdict:
    logger.debug("No registry data for %s: %s", package_name, reason)
    return CompatibilityVerdict(
        package=package_name,
        current_version=current_version,
        recommended_version=current_version,
        latest_version="unknown",
        needs_update=False,
        has_breaking_changes=False,
        compatibility_status=UNKNOWN,
        reason=reason,
    )
