"""Exceptions raised by PeerFix core modules."""


class PeerFixError(Exception):
    """Base class for PeerFix errors."""


class ManifestError(PeerFixError, ValueError):
    """Raised when a package.json cannot be used for analysis."""


class TemplateDiffError(PeerFixError):
    """Raised when a template diff cannot be fetched."""
