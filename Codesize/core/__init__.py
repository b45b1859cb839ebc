"""
Core module for Codesize.
Provides error handling, logging, configuration, types, and serialization.
"""
from Codesize.core.errors import (
    CodesizeError, ConfigError, ArtifactReadError, ArtifactLookupFailure,
    DecodeInconsistency, SnapshotReadFailure
)
from Codesize.core.logging import get_logger, set_log_level
from Codesize.core.config import SizerConfig, MAX_CONTRACT_SIZE
from Codesize.core.types import (
    NO_SOURCE_ID, METADATA_ID, UNKNOWN_CODE_ID,
    SourceKind, SourceLabel, SourceSize, SizeRecord, SourceDelta, ContractDelta
)
from Codesize.core.serialization import (
    to_json, from_json, atomic_write_text, safe_mkdir, read_text, read_json, strip_hex_prefix
)

__all__ = [
    "CodesizeError", "ConfigError", "ArtifactReadError", "ArtifactLookupFailure",
    "DecodeInconsistency", "SnapshotReadFailure",
    "get_logger", "set_log_level",
    "SizerConfig", "MAX_CONTRACT_SIZE",
    "NO_SOURCE_ID", "METADATA_ID", "UNKNOWN_CODE_ID",
    "SourceKind", "SourceLabel", "SourceSize", "SizeRecord", "SourceDelta", "ContractDelta",
    "to_json", "from_json", "atomic_write_text", "safe_mkdir", "read_text", "read_json", "strip_hex_prefix"
]
