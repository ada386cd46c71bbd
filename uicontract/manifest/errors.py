"""
Manifest-specific errors.
"""


class ManifestError(Exception):
    """Base exception for manifest loading failures."""

    pass


class ManifestNotFoundError(ManifestError):
    """Manifest file does not exist."""

    pass


class ManifestInvalidError(ManifestError):
    """Manifest is not valid JSON or does not match the schema."""

    pass
