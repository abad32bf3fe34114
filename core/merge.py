"""Apply compatibility verdicts to a package.json and describe the result."""

import json
from collections.abc import Iterable

from .constants import PLATFORM_PACKAGE
from .diff import generate_diff
from .models import ChangeSummary, CompatibilityVerdict, MergedPackageJson, PackageManifest

ANNOTATED_FIELDS = ["name", "version", "description", "main", "scripts"]
BREAKING_COMMENT = " // ⚠️ Breaking changes - review changelog"
UPDATED_COMMENT = " // ✅ Updated for compatibility"


def merge_package_json_with_analysis(
    manifest: PackageManifest,
    verdicts: Iterable[CompatibilityVerdict],
    target_version: str,
    platform_package: str = PLATFORM_PACKAGE,
) -> MergedPackageJson:
    """Build the upgraded manifest and a unified diff against the original.

    The platform package is pinned to the target version as-is; every other
    dependency that needs an update gets "^" plus its recommended version.
    The input manifest is never modified.
    """
    upgraded = manifest.copy()
    by_package = {verdict.package: verdict for verdict in verdicts}

    dependencies = upgraded.data.get("dependencies")
    if dependencies:
        for package in dependencies:
            if package == platform_package:
                dependencies[package] = target_version
                continue
            verdict = by_package.get(package)
            if verdict and verdict.needs_update:
                dependencies[package] = f"^{verdict.recommended_version}"

    dev_dependencies = upgraded.data.get("devDependencies")
    if dev_dependencies:
        for package in dev_dependencies:
            verdict = by_package.get(package)
            if verdict and verdict.needs_update:
                dev_dependencies[package] = f"^{verdict.recommended_version}"

    return MergedPackageJson(
        original=manifest,
        upgraded=upgraded,
        diff_text=generate_diff(manifest.to_json(), upgraded.to_json()),
    )


def get_package_json_change_summary(
    original: PackageManifest, upgraded: PackageManifest
) -> ChangeSummary:
    """Classify every runtime and dev dependency name across both manifests."""
    summary = ChangeSummary()

    all_packages = dict.fromkeys(
        [
            *original.dependencies,
            *original.dev_dependencies,
            *upgraded.dependencies,
            *upgraded.dev_dependencies,
        ]
    )

    for package in all_packages:
        original_version = original.lookup(package)
        upgraded_version = upgraded.lookup(package)

        if not original_version and upgraded_version:
            summary.added.append(package)
        elif original_version and not upgraded_version:
            summary.removed.append(package)
        elif original_version != upgraded_version:
            summary.updated.append(package)
        else:
            summary.unchanged.append(package)

    return summary


def create_annotated_package_json(
    upgraded: PackageManifest, verdicts: Iterable[CompatibilityVerdict]
) -> str:
    """Render the upgraded manifest as JSON text with a comment per changed dependency."""
    by_package = {verdict.package: verdict for verdict in verdicts}

    sections = []
    for field in ANNOTATED_FIELDS:
        value = upgraded.data.get(field)
        if value:
            rendered = json.dumps(value, indent=2, ensure_ascii=False).replace("\n", "\n  ")
            sections.append([f"  {json.dumps(field)}: {rendered}"])

    for field in ("dependencies", "devDependencies"):
        deps = upgraded.data.get(field)
        if deps:
            sections.append(_annotated_block(field, deps, by_package))

    output = ["{"]
    for index, section in enumerate(sections):
        if index < len(sections) - 1:
            section = [*section[:-1], section[-1] + ","]
        output.extend(section)
    output.append("}")
    return "\n".join(output)


def _annotated_block(
    field: str, deps: dict[str, str], by_package: dict[str, CompatibilityVerdict]
) -> list[str]:
    lines = [f"  {json.dumps(field)}: {{"]
    entries = list(deps.items())
    for index, (package, version) in enumerate(entries):
        verdict = by_package.get(package)
        comment = ""
        if verdict and verdict.has_breaking_changes:
            comment = BREAKING_COMMENT
        elif verdict and verdict.needs_update:
            comment = UPDATED_COMMENT

        comma = "," if index < len(entries) - 1 else ""
        lines.append(f"    {json.dumps(package)}: {json.dumps(version)}{comma}{comment}")
    lines.append("  }")
    return lines
