from Codesize.history.history_types import HistorySnapshot, StoredContractSize, StoredSourceSize
from Codesize.history.history_store import load_snapshot, save_snapshot, snapshot_from_records, diff

__all__ = [
    "HistorySnapshot", "StoredContractSize", "StoredSourceSize",
    "load_snapshot", "save_snapshot", "snapshot_from_records", "diff"
]
