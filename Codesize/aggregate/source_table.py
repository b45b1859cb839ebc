from typing import Dict, Iterable, Optional

from Codesize.artifacts.build_info import GeneratedSource
from Codesize.core.errors import ArtifactReadError
from Codesize.core.types import (
    NO_SOURCE_ID, METADATA_ID, UNKNOWN_CODE_ID, SourceKind, SourceLabel
)

PSEUDO_SOURCES: Dict[int, SourceLabel] = {
    NO_SOURCE_ID: SourceLabel(kind=SourceKind.NON_MAPPED, name="## non-mapped bytecode"),
    METADATA_ID: SourceLabel(kind=SourceKind.METADATA, name="## metadata hash"),
    UNKNOWN_CODE_ID: SourceLabel(kind=SourceKind.NON_CODE, name="## non-code bytes"),
}

class SourceTable:
    """
    Source id -> label lookup for one build-info file.
    Shared read-only by every contract of that file; generated fragments are
    scoped to a single bytecode and are passed in per lookup.
    """

    def __init__(self, source_files: Dict[int, str]):
        self.labels: Dict[int, SourceLabel] = {
            sid: SourceLabel(kind=SourceKind.FILE, name=path) for sid, path in source_files.items()
        }
        for sid, label in PSEUDO_SOURCES.items():
            if sid in self.labels:
                raise ArtifactReadError(f"Source id {sid} ({source_files[sid]}) collides with a reserved pseudo id")
            self.labels[sid] = label

    def scoped(self, generated: Iterable[GeneratedSource]) -> "ScopedSourceTable":
        return ScopedSourceTable(self, {
            g.id: SourceLabel(kind=SourceKind.GENERATED, name=g.name) for g in generated
        })

    def resolve(self, source_id: int, generated: Optional[Dict[int, SourceLabel]] = None) -> SourceLabel:
        label = self.labels.get(source_id)
        if label is None and generated:
            label = generated.get(source_id)
        if label is None:
            label = SourceLabel(kind=SourceKind.UNKNOWN, name=f"<unknown:{source_id}>")
        return label

class ScopedSourceTable:
    """A SourceTable plus the generated sources of one bytecode variant."""

    def __init__(self, table: SourceTable, generated: Dict[int, SourceLabel]):
        self.table = table
        self.generated = generated

    def resolve(self, source_id: int) -> SourceLabel:
        return self.table.resolve(source_id, self.generated)
