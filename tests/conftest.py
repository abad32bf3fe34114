"""Pytest configuration and fixtures."""

import json

import pytest

from core.models import CompatibilityVerdict

TEMPLATE_DIFF = """\
diff --git a/RnDiffApp/android/app/src/main/java/com/rndiffapp/MainActivity.java b/RnDiffApp/android/app/src/main/java/com/rndiffapp/MainActivity.java
deleted file mode 100644
index 3333333..0000000
--- a/RnDiffApp/android/app/src/main/java/com/rndiffapp/MainActivity.java
+++ /dev/null
@@ -1,2 +0,0 @@
-package com.rndiffapp;
-class MainActivity {}
diff --git a/RnDiffApp/package.json b/RnDiffApp/package.json
index 1111111..2222222 100644
--- a/RnDiffApp/package.json
+++ b/RnDiffApp/package.json
@@ -10,3 +10,3 @@
   "dependencies": {
-    "react-native": "0.68.2"
+    "react-native": "0.72.0"
   }
diff --git a/RnDiffApp/.ruby-version b/RnDiffApp/.ruby-version
new file mode 100644
index 0000000..4444444
--- /dev/null
+++ b/RnDiffApp/.ruby-version
@@ -0,0 +1 @@
+2.7.6
\\ No newline at end of file
diff --git a/RnDiffApp/ios/RnDiffApp/Images.xcassets/icon.png b/RnDiffApp/ios/RnDiffApp/Images.xcassets/icon.png
index 5555555..6666666 100644
Binary files a/RnDiffApp/ios/RnDiffApp/Images.xcassets/icon.png and b/RnDiffApp/ios/RnDiffApp/Images.xcassets/icon.png differ
diff --git a/RnDiffApp/old.js b/RnDiffApp/new.js
similarity index 100%
rename from RnDiffApp/old.js
rename to RnDiffApp/new.js
"""


@pytest.fixture
def sample_package_json():
    """Sample package.json content for testing."""
    return json.dumps(
        {
            "name": "test-app",
            "version": "0.0.1",
            "private": True,
            "scripts": {"start": "react-native start"},
            "dependencies": {
                "react": "18.0.0",
                "react-native": "0.68.2",
                "react-native-screens": "^3.10.0",
            },
            "devDependencies": {
                "jest": "^26.6.3",
            },
        },
        indent=2,
    )


@pytest.fixture
def screens_record():
    """Registry record where only 3.22.0 declares a peer range on react-native."""
    return {
        "name": "react-native-screens",
        "dist-tags": {"latest": "4.0.0"},
        "versions": {
            "3.10.0": {"version": "3.10.0", "peerDependencies": {"react-native": "*"}},
            "3.22.0": {"version": "3.22.0", "peerDependencies": {"react-native": ">=0.70.0"}},
            "4.0.0": {"version": "4.0.0", "peerDependencies": {"react-native": ">=0.74.0"}},
        },
    }


@pytest.fixture
def make_verdict():
    """Factory for verdicts with sensible defaults."""

    def _make(package, current, recommended, needs_update=True, breaking=False):
        return CompatibilityVerdict(
            package=package,
            current_version=current,
            recommended_version=recommended,
            latest_version=recommended,
            needs_update=needs_update,
            has_breaking_changes=breaking,
            compatibility_status="warning" if needs_update else "compatible",
            reason="Based on peer dependency analysis",
        )

    return _make


@pytest.fixture
def template_diff_text():
    """A small rn-diff-purge style diff covering every file change type."""
    return TEMPLATE_DIFF
