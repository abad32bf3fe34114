"""Tests for web application functionality."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

from fastapi.testclient import TestClient

from apps.web.main import app, template_diffs
from core.diff import parse_diff
from core.errors import TemplateDiffError


class TestWebApp:
    """Test web application endpoints."""

    def setup_method(self):
        """Setup test fixtures."""
        self.client = TestClient(app)

    def mock_checker(self, mock_checker_class, verdicts=None, error=None):
        mock_checker = MagicMock()
        mock_checker.analyze_all_dependencies = AsyncMock(
            return_value=verdicts or [], side_effect=error
        )
        mock_checker_class.return_value = mock_checker
        return mock_checker

    def test_home_page(self):
        """Should serve the landing page."""
        response = self.client.get("/")
        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert "PeerFix" in response.text

    def test_analyze_api_success(self, sample_package_json, make_verdict):
        """Should analyze and merge dependencies."""
        with patch("apps.web.main.CompatibilityChecker") as mock_checker_class:
            self.mock_checker(
                mock_checker_class,
                [
                    make_verdict("react-native", "0.68.2", "0.72.0"),
                    make_verdict("react-native-screens", "^3.10.0", "3.22.0"),
                    make_verdict("react", "18.0.0", "18.0.0", needs_update=False),
                ],
            )

            response = self.client.post(
                "/api/analyze",
                json={"content": sample_package_json, "target_version": "0.72.0"},
            )

        assert response.status_code == 200
        data = response.json()

        assert data["has_changes"] is True
        assert len(data["reports"]) == 3
        assert data["reports"][0]["package"] == "react-native"
        assert data["upgraded"]["dependencies"]["react-native"] == "0.72.0"
        assert data["upgraded"]["dependencies"]["react-native-screens"] == "^3.22.0"
        assert data["summary"]["updated"] == ["react-native", "react-native-screens"]
        assert "@@ -" in data["diff"]

    def test_analyze_api_uses_requested_platform(self, make_verdict):
        """Should pass the platform package to the checker and merger."""
        content = json.dumps({"dependencies": {"react-native-windows": "0.71.0"}})

        with patch("apps.web.main.CompatibilityChecker") as mock_checker_class:
            self.mock_checker(
                mock_checker_class,
                [make_verdict("react-native-windows", "0.71.0", "0.72.0")],
            )

            response = self.client.post(
                "/api/analyze",
                json={
                    "content": content,
                    "target_version": "0.72.0",
                    "platform_package": "react-native-windows",
                },
            )

        assert response.status_code == 200
        assert mock_checker_class.call_args[1]["platform_package"] == "react-native-windows"
        assert response.json()["upgraded"]["dependencies"]["react-native-windows"] == "0.72.0"

    def test_analyze_api_empty_content(self):
        """Should reject empty content."""
        response = self.client.post(
            "/api/analyze", json={"content": "", "target_version": "0.72.0"}
        )

        assert response.status_code == 400
        assert "No content provided" in response.json()["detail"]

    def test_analyze_api_invalid_manifest(self):
        """Should reject content that is not a usable package.json."""
        response = self.client.post(
            "/api/analyze", json={"content": "{oops", "target_version": "0.72.0"}
        )

        assert response.status_code == 400
        assert "Invalid JSON" in response.json()["detail"]

    def test_analyze_api_batch_failure(self, sample_package_json):
        """Should report a single generic failure when analysis aborts."""
        with patch("apps.web.main.CompatibilityChecker") as mock_checker_class:
            self.mock_checker(mock_checker_class, error=RuntimeError("boom"))

            response = self.client.post(
                "/api/analyze",
                json={"content": sample_package_json, "target_version": "0.72.0"},
            )

        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to analyze dependencies. Please try again."

    def test_upload_file(self, sample_package_json, make_verdict):
        """Should analyze an uploaded package.json."""
        with patch("apps.web.main.CompatibilityChecker") as mock_checker_class:
            self.mock_checker(mock_checker_class, [make_verdict("react-native", "0.68.2", "0.72.0")])

            response = self.client.post(
                "/api/upload",
                files={"file": ("package.json", sample_package_json, "application/json")},
                data={"target_version": "0.72.0"},
            )

        assert response.status_code == 200
        assert response.json()["upgraded"]["dependencies"]["react-native"] == "0.72.0"

    def test_upload_non_utf8_file(self):
        """Should reject binary uploads."""
        response = self.client.post(
            "/api/upload",
            files={"file": ("package.json", b"\xff\xfe\x00", "application/json")},
            data={"target_version": "0.72.0"},
        )

        assert response.status_code == 400
        assert "UTF-8" in response.json()["detail"]

    def test_download_upgraded_file(self, sample_package_json, make_verdict):
        """Should return the upgraded package.json as an attachment."""
        with patch("apps.web.main.CompatibilityChecker") as mock_checker_class:
            self.mock_checker(mock_checker_class, [make_verdict("react-native", "0.68.2", "0.72.0")])

            response = self.client.post(
                "/api/download",
                json={"content": sample_package_json, "target_version": "0.72.0"},
            )

        assert response.status_code == 200
        assert 'filename="package.json"' in response.headers["content-disposition"]
        assert json.loads(response.text)["dependencies"]["react-native"] == "0.72.0"

    def test_download_annotated_file(self, sample_package_json, make_verdict):
        """Should return the commented package.json when asked."""
        with patch("apps.web.main.CompatibilityChecker") as mock_checker_class:
            self.mock_checker(mock_checker_class, [make_verdict("react-native", "0.68.2", "0.72.0")])

            response = self.client.post(
                "/api/download",
                json={
                    "content": sample_package_json,
                    "target_version": "0.72.0",
                    "annotated": True,
                },
            )

        assert response.status_code == 200
        assert "// ✅ Updated for compatibility" in response.text

    def test_download_without_changes(self, make_verdict):
        """Should refuse to download when nothing changed."""
        content = json.dumps({"dependencies": {"react-native": "0.72.0"}})

        with patch("apps.web.main.CompatibilityChecker") as mock_checker_class:
            self.mock_checker(
                mock_checker_class,
                [make_verdict("react-native", "0.72.0", "0.72.0", needs_update=False)],
            )

            response = self.client.post(
                "/api/download", json={"content": content, "target_version": "0.72.0"}
            )

        assert response.status_code == 400
        assert "No changes to download" in response.json()["detail"]

    def test_template_diff(self, template_diff_text):
        """Should return parsed template files."""
        with patch.object(
            template_diffs,
            "fetch_template_diff",
            new=AsyncMock(return_value=parse_diff(template_diff_text)),
        ):
            response = self.client.get(
                "/api/template-diff", params={"from_version": "0.68.2", "to_version": "0.72.0"}
            )

        assert response.status_code == 200
        data = response.json()
        assert data["changelog_url"].endswith("CHANGELOG.md#v0720")
        assert len(data["files"]) == 5
        package_json = data["files"][1]
        assert package_json["new_path"] == "RnDiffApp/package.json"
        assert package_json["additions"] == 1
        assert package_json["hunks"][0]["content"] == "@@ -10,3 +10,3 @@"

    def test_template_diff_changelog_ignores_range_prefix(self, template_diff_text):
        """Should build the changelog link from the bare version."""
        with patch.object(
            template_diffs,
            "fetch_template_diff",
            new=AsyncMock(return_value=parse_diff(template_diff_text)),
        ):
            response = self.client.get(
                "/api/template-diff", params={"from_version": "^0.68.2", "to_version": "^0.72.0"}
            )

        assert response.status_code == 200
        assert response.json()["changelog_url"].endswith("CHANGELOG.md#v0720")

    def test_template_diff_failure(self):
        """Should map fetch failures to a bad gateway."""
        with patch.object(
            template_diffs,
            "fetch_template_diff",
            new=AsyncMock(side_effect=TemplateDiffError("Failed to fetch diff: 404 Not Found")),
        ):
            response = self.client.get(
                "/api/template-diff", params={"from_version": "0.68.2", "to_version": "0.99.0"}
            )

        assert response.status_code == 502
        assert "404" in response.json()["detail"]
