"""npm-style semantic version helpers built on node-semver."""

import re
from functools import cmp_to_key

import nodesemver

# Same pattern npm's semver.coerce uses: first run of up to three numeric parts
_COERCE_RE = re.compile(r"(?:^|[^\d])(\d{1,16})(?:\.(\d{1,16}))?(?:\.(\d{1,16}))?(?:$|[^\d])")


def parse(version: str):
    """Parse a version string, returning None when it is not valid semver."""
    try:
        return nodesemver.parse(version, True)
    except (TypeError, ValueError):
        return None


def coerce(version: str) -> str | None:
    """Coerce a loosely formatted string ("^1.2", "v3") into "X.Y.Z"."""
    if not isinstance(version, str):
        return None
    match = _COERCE_RE.search(version)
    if not match:
        return None
    major, minor, patch = match.groups()
    return f"{int(major)}.{int(minor or 0)}.{int(patch or 0)}"


def major(version: str) -> int | None:
    parsed = parse(version)
    return parsed.major if parsed else None


def satisfies(version: str, range_: str) -> bool:
    """Check a version against an npm range such as "^0.70.0 || >=0.71"."""
    if not isinstance(range_, str):
        return False
    try:
        return bool(nodesemver.satisfies(version, range_, True))
    except (TypeError, ValueError):
        return False


def sort_descending(versions) -> list[str]:
    """Sort versions newest first, dropping anything that is not valid semver."""
    valid = [version for version in versions if parse(version) is not None]
    return sorted(valid, key=cmp_to_key(lambda a, b: nodesemver.compare(b, a, True)))
