"""Shared constants for PeerFix."""

NPM_REGISTRY = "https://registry.npmjs.org"
NPM_PACKAGE_PAGE = "https://www.npmjs.com/package"

DEFAULT_TIMEOUT = 10.0
DIFF_CONTEXT_LINES = 3

PACKAGE_NAMES = {
    "RN": "react-native",
    "RNM": "react-native-macos",
    "RNW": "react-native-windows",
}

PLATFORM_PACKAGE = PACKAGE_NAMES["RN"]

RN_DIFF_REPOSITORIES = {
    PACKAGE_NAMES["RN"]: "react-native-community/rn-diff-purge",
    PACKAGE_NAMES["RNM"]: "microsoft/react-native-macos",
    PACKAGE_NAMES["RNW"]: "microsoft/react-native-windows",
}

RN_CHANGELOG_URLS = {
    PACKAGE_NAMES["RN"]: "https://github.com/facebook/react-native/blob/main/CHANGELOG.md",
    PACKAGE_NAMES["RNM"]: "https://github.com/microsoft/react-native-macos/releases/tag/",
    PACKAGE_NAMES["RNW"]: (
        "https://github.com/microsoft/react-native-windows/releases/tag/react-native-windows_"
    ),
}

# Placeholder app identity used inside the upstream template diffs
DEFAULT_APP_NAME = "RnDiffApp"
DEFAULT_APP_PACKAGE = "com.rndiffapp"
