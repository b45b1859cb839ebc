"""
Report Driver: selects contracts, measures them one build-info file at a
time, and diffs against the previous run.

The previous snapshot is an explicit input and the next one an explicit
output of `build_report`; only `contract_sizes` touches the history file.
"""
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Set, Union

from pydantic import BaseModel, Field

from Codesize.aggregate.aggregator import aggregate
from Codesize.aggregate.source_table import SourceTable
from Codesize.artifacts.build_info import (
    BuildInfo, ContractRef, discover_contracts, find_build_info_files, load_build_info
)
from Codesize.core.errors import ArtifactLookupFailure, DecodeInconsistency
from Codesize.core.logging import get_logger
from Codesize.core.types import ContractDelta, SizeRecord
from Codesize.history.history_store import diff, load_snapshot, save_snapshot, snapshot_from_records
from Codesize.history.history_types import HistorySnapshot

logger = get_logger(__name__)

class SizeReport(BaseModel):
    """Result of one run."""
    records: List[SizeRecord] = Field(default_factory=list)
    # contract name -> change since the previous snapshot, only when diffing
    deltas: Dict[str, ContractDelta] = Field(default_factory=dict)
    # contracts skipped because of a lookup or decode failure
    failures: List[str] = Field(default_factory=list)
    # every measured contract regardless of the size threshold
    snapshot: HistorySnapshot = Field(default_factory=HistorySnapshot)
    diffed: bool = False
    measured: int = 0

def select_contracts(refs: Iterable[ContractRef], filters: Iterable[str]) -> List[ContractRef]:
    """Keeps refs whose contract name or fully-qualified name is in `filters`; no filters keeps all."""
    wanted: Set[str] = set(filters)
    if not wanted:
        return list(refs)
    return [r for r in refs if r.contract_name in wanted or r.fully_qualified_name in wanted]

def sort_records(records: Iterable[SizeRecord]) -> List[SizeRecord]:
    return sorted(records, key=lambda r: (r.code_size, r.name))

def measure_build_info(build_info: BuildInfo, refs: Sequence[ContractRef],
                       failures: Optional[List[str]] = None) -> List[SizeRecord]:
    """
    Measures the refs that belong to `build_info`. A ref without a build-info
    name is looked up in every file. Lookup and decode failures are logged,
    appended to `failures` and skipped.
    """
    table = SourceTable(build_info.source_files())
    records: List[SizeRecord] = []

    for ref in refs:
        if ref.build_info and ref.build_info != build_info.name:
            continue
        try:
            evm = build_info.get_contract(ref.source_name, ref.contract_name)
            records.append(aggregate(ref.contract_name, evm, table, ref.fully_qualified_name))
        except ArtifactLookupFailure as e:
            logger.error(str(e))
            if failures is not None:
                failures.append(str(e))
        except DecodeInconsistency as e:
            logger.error(f"Failed to decode {ref.fully_qualified_name}: {e}")
            if failures is not None:
                failures.append(str(e))

    return records

def build_report(build_infos: Iterable[BuildInfo],
                 refs: Optional[Sequence[ContractRef]] = None,
                 filters: Iterable[str] = (),
                 min_size: int = 0,
                 previous: Optional[HistorySnapshot] = None,
                 include_tests: bool = False) -> SizeReport:
    """
    Measures the selected contracts of each build-info in turn.

    Args:
        build_infos: parsed build-info files, consumed one at a time.
        refs: contracts to look for; None enumerates each build-info's own output.
        filters: contract names or fully-qualified names; empty selects everything.
        min_size: contracts with code + init size below this are left out of `records`.
        previous: snapshot of an earlier run to diff against.
        include_tests: when enumerating a build-info, keep *.t.sol and *.s.sol contracts.
    """
    filters = list(filters)
    selected = select_contracts(refs, filters) if refs is not None else None
    report = SizeReport(diffed=previous is not None)
    measured: List[SizeRecord] = []

    for build_info in build_infos:
        file_refs = selected
        if file_refs is None:
            file_refs = select_contracts(build_info.contract_refs(include_tests), filters)
        measured.extend(measure_build_info(build_info, file_refs, report.failures))

    report.measured = len(measured)
    report.snapshot = snapshot_from_records(measured)
    report.records = sort_records(r for r in measured if r.total_size >= min_size)

    if previous is not None:
        for rec in report.records:
            delta = diff(rec, previous)
            if delta is not None:
                report.deltas[rec.name] = delta

    logger.info(
        f"Measured {len(measured)} contracts, {len(report.records)} at or above {min_size} bytes"
        + (f", {len(report.failures)} skipped" if report.failures else "")
    )
    return report

def iter_build_infos(paths: Iterable[Path]) -> Iterable[BuildInfo]:
    for p in paths:
        yield load_build_info(p)

def contract_sizes(artifacts_dir: Union[str, Path],
                   contracts: Iterable[str] = (),
                   min_size: int = 0,
                   history_path: Optional[Union[str, Path]] = None,
                   include_tests: bool = False) -> SizeReport:
    """
    Sizes of the contracts in a Hardhat artifacts directory, sorted by runtime size.
    With `history_path`, the previous snapshot is diffed against and then replaced.
    """
    artifacts_dir = Path(artifacts_dir)
    paths = find_build_info_files(artifacts_dir)

    # None means bare build-info output without per-contract artifacts
    refs = discover_contracts(artifacts_dir, link_build_info=len(paths) > 1, include_tests=include_tests)

    previous = load_snapshot(history_path) if history_path is not None else None
    report = build_report(iter_build_infos(paths), refs, contracts, min_size, previous, include_tests)

    if history_path is not None:
        save_snapshot(history_path, report.snapshot)
    return report
