from enum import Enum
from typing import Dict, List, Optional
from pydantic import BaseModel, Field

# Pseudo source ids; real solc source ids are never negative
NO_SOURCE_ID = -1
METADATA_ID = -2
UNKNOWN_CODE_ID = -3

class SourceKind(str, Enum):
    """What a range of bytecode is attributed to."""
    FILE = "file"
    GENERATED = "generated"
    NON_MAPPED = "non_mapped"
    METADATA = "metadata"
    NON_CODE = "non_code"
    UNKNOWN = "unknown"

class SourceLabel(BaseModel, frozen=True):
    """Resolved identity of a source id."""
    kind: SourceKind
    name: str

    @property
    def display_name(self) -> str:
        if self.kind is SourceKind.GENERATED:
            return f"## compiler {self.name}"
        return self.name

class SourceSize(BaseModel):
    """Bytes contributed by one source to a contract's runtime and creation code."""
    file_name: str
    kind: SourceKind = SourceKind.FILE
    code_size: int = 0
    init_size: int = 0

class SizeRecord(BaseModel):
    """Size of one contract, split by contributing source."""
    name: str
    fully_qualified_name: Optional[str] = None
    code_size: int
    init_size: int
    sources: List[SourceSize] = Field(default_factory=list)

    @property
    def total_size(self) -> int:
        return self.code_size + self.init_size

class SourceDelta(BaseModel):
    code_size: Optional[int] = None
    init_size: Optional[int] = None

class ContractDelta(BaseModel):
    """Change against a previous run. A field is None when it did not change or has no previous value."""
    code_size: Optional[int] = None
    init_size: Optional[int] = None
    sources: Dict[str, SourceDelta] = Field(default_factory=dict)

    def is_empty(self) -> bool:
        return self.code_size is None and self.init_size is None and not self.sources
