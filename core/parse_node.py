"""Node.js package.json parsing."""

import json

from .errors import ManifestError
from .models import PackageManifest


def parse_package_json(content: str) -> PackageManifest:
    """Parse package.json content into a PackageManifest.

    Args:
        content: The package.json file content

    Returns:
        Parsed PackageManifest object

    Raises:
        ManifestError: If the content is not a JSON object with dependencies
    """
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ManifestError(f"Invalid JSON: {e.msg} (line {e.lineno})") from e

    if not isinstance(data, dict):
        raise ManifestError("package.json must contain a JSON object")

    if not data.get("dependencies") and not data.get("devDependencies"):
        raise ManifestError("No dependencies found in package.json")

    for field in ("dependencies", "devDependencies", "peerDependencies"):
        if field in data and not isinstance(data[field], dict):
            raise ManifestError(f'"{field}" must be an object')

    return PackageManifest(data=data)
