"""
Annotator data models.

In-memory records (targets, per-source results, options) are frozen
dataclasses. Records that leave the process as JSON (patches, backups,
aggregate results) are pydantic models serialized with camelCase keys.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


DATA_AGENT_ID_ATTR = "data-agent-id"
DEFAULT_BACKUP_DIR = ".uic-backup"


@dataclass(frozen=True)
class AnnotationTarget:
    """
    One desired attribute injection.

    line and column are 1-based and point at the '<' of the opening tag.
    source_tag_name holds the tag actually written in source when it differs
    from the logical type (e.g. <Button> mapped to type "button").
    """

    agent_id: str
    line: int
    column: int
    type: str
    source_tag_name: Optional[str] = None

    @property
    def tag_name(self) -> str:
        """Tag name to match in source."""
        return self.source_tag_name or self.type

    @classmethod
    def from_element(cls, element: Any) -> "AnnotationTarget":
        """Build a target from a named element (anything with the element fields)."""
        return cls(
            agent_id=element.agent_id,
            line=element.line,
            column=element.column,
            type=element.type,
            source_tag_name=getattr(element, "source_tag_name", None),
        )


@dataclass(frozen=True)
class AnnotationResult:
    """
    Result of annotating one source string.

    annotations_skipped counts targets whose attribute was already correct.
    Unlocatable and out-of-range targets are counted in neither field.
    """

    original_source: str
    annotated_source: str
    modified: bool
    annotations_applied: int
    annotations_skipped: int

    @classmethod
    def unmodified(cls, source: str) -> "AnnotationResult":
        return cls(
            original_source=source,
            annotated_source=source,
            modified=False,
            annotations_applied=0,
            annotations_skipped=0,
        )


@dataclass(frozen=True)
class AnnotateOptions:
    """
    Options for annotate_files.

    dry_run: only produce patches (default)
    write: write files in place; ignored while dry_run is set
    backup_dir: where pre-write copies go
    """

    dry_run: bool = True
    write: bool = False
    backup_dir: str = DEFAULT_BACKUP_DIR

    @property
    def writes_files(self) -> bool:
        return self.write and not self.dry_run

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "AnnotateOptions":
        if not data:
            return DEFAULT_ANNOTATE_OPTIONS
        return cls(
            dry_run=bool(data.get("dry_run", True)),
            write=bool(data.get("write", False)),
            backup_dir=data.get("backup_dir") or DEFAULT_BACKUP_DIR,
        )


DEFAULT_ANNOTATE_OPTIONS = AnnotateOptions()


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class FilePatch(_CamelModel):
    """
    Unified diff for a single file.

    diff is "" exactly when original == modified.
    """

    file_path: str
    original: str
    modified: str
    diff: str


class BackupResult(_CamelModel):
    """
    A snapshot of files taken before a destructive write.

    files holds the original absolute paths; the layout under backup_dir is
    each file's path relative to the common ancestor of all of them.
    """

    backup_dir: str
    files: List[str]


class AnnotateFileResult(_CamelModel):
    """Outcome for one annotated file. patch is None when nothing changed."""

    file_path: str
    annotations_applied: int
    annotations_skipped: int
    patch: Optional[FilePatch] = None


class AnnotateResult(_CamelModel):
    """Aggregate outcome across all files of one annotate run."""

    files: List[AnnotateFileResult]
    total_applied: int
    total_skipped: int
    backup: Optional[BackupResult] = None

    @property
    def patches(self) -> List[FilePatch]:
        return [f.patch for f in self.files if f.patch is not None]

    def to_json_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
