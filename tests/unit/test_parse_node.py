"""Tests for package.json parsing."""

import pytest

from core.errors import ManifestError
from core.parse_node import parse_package_json


class TestPackageJsonParser:
    """Test package.json parsing."""

    def test_parse_dependencies(self, sample_package_json):
        manifest = parse_package_json(sample_package_json)

        assert manifest.name == "test-app"
        assert manifest.version == "0.0.1"
        assert manifest.dependencies["react-native"] == "0.68.2"
        assert manifest.dev_dependencies == {"jest": "^26.6.3"}

    def test_preserves_unknown_fields(self, sample_package_json):
        manifest = parse_package_json(sample_package_json)

        assert manifest.data["private"] is True
        assert manifest.data["scripts"] == {"start": "react-native start"}

    def test_all_dependencies_prefers_runtime(self):
        manifest = parse_package_json(
            '{"dependencies": {"a": "1.0.0"}, "devDependencies": {"a": "2.0.0", "b": "3.0.0"}}'
        )

        assert manifest.all_dependencies() == {"a": "1.0.0", "b": "3.0.0"}
        assert manifest.lookup("a") == "1.0.0"
        assert manifest.lookup("b") == "3.0.0"
        assert manifest.lookup("c") is None

    def test_dev_dependencies_only(self):
        manifest = parse_package_json('{"devDependencies": {"jest": "^29.0.0"}}')
        assert manifest.dependencies == {}

    def test_invalid_json(self):
        with pytest.raises(ManifestError, match="Invalid JSON"):
            parse_package_json("{not json")

    def test_non_object_root(self):
        with pytest.raises(ManifestError, match="JSON object"):
            parse_package_json('["react"]')

    def test_no_dependencies(self):
        with pytest.raises(ManifestError, match="No dependencies found"):
            parse_package_json('{"name": "empty"}')

    def test_dependencies_must_be_an_object(self):
        with pytest.raises(ManifestError, match='"dependencies" must be an object'):
            parse_package_json('{"dependencies": ["react"]}')

    def test_to_json_round_trips(self, sample_package_json):
        assert parse_package_json(sample_package_json).to_json() == sample_package_json
