"""
Manifest loading.

Minimal reader for the manifest produced by scanning and naming. Only
what annotation needs is modelled and validated here.
"""

from .errors import ManifestError, ManifestNotFoundError, ManifestInvalidError
from .models import Manifest, NamedElement, load_manifest, resolve_element_paths

__all__ = [
    "ManifestError",
    "ManifestNotFoundError",
    "ManifestInvalidError",
    "Manifest",
    "NamedElement",
    "load_manifest",
    "resolve_element_paths",
]
