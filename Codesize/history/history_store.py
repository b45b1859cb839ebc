"""
Persistence of per-contract sizes between runs, and deltas against them.

The snapshot file uses the camelCase layout of the Hardhat contract-sizes
cache (`{name: {codeSize, initSize, sources: {file: {codeSize, initSize}}}}`)
so files written by either tool can be compared.
"""
import json
from pathlib import Path
from typing import Iterable, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from Codesize.core.errors import SnapshotReadFailure
from Codesize.core.logging import get_logger
from Codesize.core.serialization import atomic_write_text, read_json, to_json
from Codesize.core.types import ContractDelta, SizeRecord, SourceDelta
from Codesize.history.history_types import HistorySnapshot, StoredContractSize, StoredSourceSize

logger = get_logger(__name__)

def load_snapshot(path: Union[str, Path]) -> HistorySnapshot:
    """Loads a snapshot. A missing file is an empty snapshot; a corrupt one is an error."""
    p = Path(path)
    if not p.exists():
        logger.debug(f"No previous sizes at {p}")
        return HistorySnapshot()
    try:
        return HistorySnapshot.model_validate(read_json(p))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, PydanticValidationError) as e:
        raise SnapshotReadFailure(f"Corrupt size history {p}: {e}")

def save_snapshot(path: Union[str, Path], snapshot: HistorySnapshot) -> None:
    """Overwrites the snapshot file atomically."""
    atomic_write_text(Path(path), to_json(snapshot.model_dump(by_alias=True)))
    logger.debug(f"Saved sizes of {len(snapshot)} contracts to {path}")

def snapshot_from_records(records: Iterable[SizeRecord]) -> HistorySnapshot:
    """Builds a snapshot; contracts without any attributed source are left out."""
    root = {}
    for rec in records:
        if not rec.sources:
            continue
        root[rec.name] = StoredContractSize(
            code_size=rec.code_size,
            init_size=rec.init_size,
            sources={
                s.file_name: StoredSourceSize(code_size=s.code_size, init_size=s.init_size)
                for s in rec.sources
            },
        )
    return HistorySnapshot(root)

def _delta(current: int, previous: Optional[int]) -> Optional[int]:
    if previous is None:
        return None
    d = current - previous
    return d if d != 0 else None

def diff(record: SizeRecord, snapshot: HistorySnapshot) -> Optional[ContractDelta]:
    """
    Returns current minus previous sizes for the contract and each source.
    Zero changes and sources with no previous entry are omitted; None when
    the contract has no previous entry or nothing changed.
    """
    prev = snapshot.get(record.name)
    if prev is None:
        return None

    delta = ContractDelta(
        code_size=_delta(record.code_size, prev.code_size),
        init_size=_delta(record.init_size, prev.init_size),
    )
    for s in record.sources:
        prev_source = prev.sources.get(s.file_name)
        if prev_source is None:
            continue
        sd = SourceDelta(
            code_size=_delta(s.code_size, prev_source.code_size),
            init_size=_delta(s.init_size, prev_source.init_size),
        )
        if sd.code_size is not None or sd.init_size is not None:
            delta.sources[s.file_name] = sd

    return None if delta.is_empty() else delta
