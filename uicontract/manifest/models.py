"""
Manifest data models.

The manifest is JSON with camelCase keys. Elements arrive already named:
agent_id values are globally unique by contract of the naming step and
are not deduplicated here.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from .errors import ManifestInvalidError, ManifestNotFoundError


AGENT_ID_PATTERN = r"^[a-z][a-z0-9.-]*$"
SCHEMA_VERSION_PATTERN = r"^\d+\.\d+$"


class NamedElement(BaseModel):
    """
    One interactive element with its assigned agent id.

    line and column are 1-based and point at the opening '<'.
    source_tag_name is set for component-mapped elements (e.g. "Button"
    for type "button").
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    agent_id: str = Field(pattern=AGENT_ID_PATTERN)
    type: str = Field(min_length=1)
    file_path: str = Field(min_length=1)
    line: int = Field(ge=1)
    column: int = Field(ge=1)

    component_name: Optional[str] = None
    route: Optional[str] = None
    label: Optional[str] = None
    handler: Optional[str] = None
    attributes: Dict[str, str] = Field(default_factory=dict)
    conditional: bool = False
    dynamic: bool = False
    directive: Optional[str] = None
    source_tag_name: Optional[str] = None


class Manifest(BaseModel):
    """Manifest envelope. Unknown top-level keys are ignored."""

    model_config = ConfigDict(
        extra="ignore",
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    schema_version: str = Field(pattern=SCHEMA_VERSION_PATTERN)
    generated_at: Optional[str] = None
    generator: Dict[str, Any] = Field(default_factory=dict)
    metadata: Dict[str, Any] = Field(default_factory=dict)
    elements: List[NamedElement] = Field(default_factory=list)


def load_manifest(path: Union[str, Path]) -> Manifest:
    """
    Read and validate a manifest file.

    Raises:
        ManifestNotFoundError: path does not exist
        ManifestInvalidError: bad JSON or schema violation
    """
    manifest_path = Path(path)
    if not manifest_path.is_file():
        raise ManifestNotFoundError(f"Manifest not found: {manifest_path}")

    try:
        data = json.loads(manifest_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ManifestInvalidError(f"Invalid JSON in {manifest_path}: {e}") from e
    except OSError as e:
        raise ManifestNotFoundError(f"Could not read manifest {manifest_path}: {e}") from e

    try:
        return Manifest.model_validate(data)
    except ValidationError as e:
        raise ManifestInvalidError(f"Invalid manifest {manifest_path}: {e}") from e


def resolve_element_paths(
    elements: List[NamedElement],
    base_dir: Union[str, Path, None] = None,
) -> List[NamedElement]:
    """Return copies of elements with file_path made absolute against base_dir."""
    base = Path(base_dir) if base_dir is not None else Path.cwd()
    return [
        el.model_copy(update={"file_path": str((base / el.file_path).resolve())})
        for el in elements
    ]
