"""Core data models for PeerFix."""

import copy
import json
from dataclasses import asdict, dataclass, field
from typing import Any

# Compatibility statuses
COMPATIBLE = "compatible"
WARNING = "warning"
INCOMPATIBLE = "incompatible"
UNKNOWN = "unknown"


@dataclass
class PackageManifest:
    """A parsed package.json.

    Only the dependency sections are interpreted; every other field is kept
    as-is, in its original order, so serializing the manifest reproduces it.
    """

    data: dict[str, Any] = field(default_factory=dict)

    @property
    def name(self) -> str | None:
        return self.data.get("name")

    @property
    def version(self) -> str | None:
        return self.data.get("version")

    @property
    def dependencies(self) -> dict[str, str]:
        return self.data.get("dependencies") or {}

    @property
    def dev_dependencies(self) -> dict[str, str]:
        return self.data.get("devDependencies") or {}

    @property
    def peer_dependencies(self) -> dict[str, str]:
        return self.data.get("peerDependencies") or {}

    def lookup(self, package: str) -> str | None:
        """Return the declared constraint for a package, runtime deps first."""
        return self.dependencies.get(package) or self.dev_dependencies.get(package)

    def all_dependencies(self) -> dict[str, str]:
        """Runtime then dev dependencies; runtime wins on duplicate names."""
        combined = dict(self.dependencies)
        for package, spec in self.dev_dependencies.items():
            combined.setdefault(package, spec)
        return combined

    def copy(self) -> "PackageManifest":
        return PackageManifest(data=copy.deepcopy(self.data))

    def to_json(self) -> str:
        return json.dumps(self.data, indent=2, ensure_ascii=False)


@dataclass(frozen=True)
class CompatibilityVerdict:
    """Recommended version and compatibility status for one dependency."""

    package: str
    current_version: str
    recommended_version: str
    latest_version: str
    needs_update: bool
    has_breaking_changes: bool
    compatibility_status: str  # compatible, warning, incompatible, unknown
    reason: str
    changelog_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DiffChange:
    """A single line inside a diff hunk."""

    type: str  # insert, delete, normal
    content: str
    old_line_number: int | None = None
    new_line_number: int | None = None

    @property
    def prefix(self) -> str:
        return {"insert": "+", "delete": "-"}.get(self.type, " ")


@dataclass(frozen=True)
class DiffHunk:
    """A contiguous block of changes plus surrounding context."""

    old_start: int
    old_lines: int
    new_start: int
    new_lines: int
    changes: tuple[DiffChange, ...] = ()

    @property
    def content(self) -> str:
        return f"@@ -{self.old_start},{self.old_lines} +{self.new_start},{self.new_lines} @@"

    @property
    def additions(self) -> int:
        return sum(1 for change in self.changes if change.type == "insert")

    @property
    def deletions(self) -> int:
        return sum(1 for change in self.changes if change.type == "delete")


@dataclass(frozen=True)
class DiffFile:
    """One file section of a unified diff."""

    old_path: str
    new_path: str
    type: str = "modify"  # add, delete, modify, rename
    hunks: tuple[DiffHunk, ...] = ()
    is_binary: bool = False

    @property
    def path(self) -> str:
        return self.new_path or self.old_path

    @property
    def additions(self) -> int:
        return sum(hunk.additions for hunk in self.hunks)

    @property
    def deletions(self) -> int:
        return sum(hunk.deletions for hunk in self.hunks)


@dataclass
class ChangeSummary:
    """Dependency names grouped by how they changed between two manifests."""

    added: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    unchanged: list[str] = field(default_factory=list)


@dataclass
class MergedPackageJson:
    """Original and upgraded manifests with the diff between them."""

    original: PackageManifest
    upgraded: PackageManifest
    diff_text: str
