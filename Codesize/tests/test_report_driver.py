import json

import pytest

from Codesize import contract_sizes
from Codesize.artifacts.build_info import BuildInfo, ContractRef, discover_contracts
from Codesize.core.errors import ArtifactReadError, SnapshotReadFailure
from Codesize.history import HistorySnapshot, load_snapshot, save_snapshot
from Codesize.history.history_types import StoredContractSize
from Codesize.report import build_report, select_contracts, render_table, oversized_contracts

from conftest import make_build_info, make_contract, write_artifacts

REFS = [
    ContractRef(source_name="contracts/Box.sol", contract_name="Box"),
    ContractRef(source_name="contracts/Small.sol", contract_name="Small"),
]

def load(data: dict, name: str = "box.json") -> BuildInfo:
    info = BuildInfo.model_validate(data)
    info.name = name
    return info

def test_select_contracts():
    assert select_contracts(REFS, []) == REFS
    assert select_contracts(REFS, ["Box"]) == [REFS[0]]
    assert select_contracts(REFS, ["contracts/Small.sol:Small"]) == [REFS[1]]
    assert select_contracts(REFS, ["Small.sol:Small"]) == []

def test_build_report_sorted_by_code_size(box_build_info):
    report = build_report([load(box_build_info)], REFS)
    assert [r.name for r in report.records] == ["Small", "Box"]
    assert report.failures == []
    assert report.measured == 2
    assert not report.diffed

def test_build_report_ties_broken_by_name():
    same = make_contract("600100" + "600100", "0:3:0", "600100", "0:2:0;:1:0")
    data = make_build_info({"z.sol": {"Zed": same}, "a.sol": {"Alpha": same}}, {"z.sol": 0, "a.sol": 1})
    report = build_report([load(data)])
    assert [r.name for r in report.records] == ["Alpha", "Zed"]

def test_threshold_filters_output_not_snapshot(box_build_info):
    report = build_report([load(box_build_info)], REFS, min_size=10)
    assert [r.name for r in report.records] == ["Box"]
    assert "Small" in report.snapshot

def test_filter_by_name(box_build_info):
    report = build_report([load(box_build_info)], REFS, filters=["Small"])
    assert [r.name for r in report.records] == ["Small"]

def test_enumerates_build_info_without_refs(box_build_info):
    report = build_report([load(box_build_info)])
    assert sorted(r.fully_qualified_name for r in report.records) == [
        "contracts/Box.sol:Box", "contracts/Small.sol:Small"
    ]

def test_lookup_failure_is_skipped(box_build_info):
    refs = REFS + [ContractRef(source_name="contracts/Gone.sol", contract_name="Gone")]
    report = build_report([load(box_build_info)], refs)
    assert [r.name for r in report.records] == ["Small", "Box"]
    assert len(report.failures) == 1
    assert "contracts/Gone.sol:Gone" in report.failures[0]

def test_decode_failure_is_skipped(box_build_info):
    box_build_info["output"]["contracts"]["contracts/Bad.sol"] = {
        "Bad": make_contract("6001" + "6001ffff", "0:1:0", "6001ffff", "0:1:0"),
    }
    report = build_report([load(box_build_info)])
    assert sorted(r.name for r in report.records) == ["Box", "Small"]
    assert len(report.failures) == 1
    assert "Bad" in report.failures[0]

def test_refs_bound_to_other_build_info_are_ignored(box_build_info):
    refs = [ContractRef(source_name="contracts/Box.sol", contract_name="Box", build_info="other.json")]
    report = build_report([load(box_build_info)], refs)
    assert report.records == []
    assert report.failures == []

def test_diff_against_previous(box_build_info):
    previous = HistorySnapshot({
        "Box": StoredContractSize(code_size=8, init_size=5),
    })
    report = build_report([load(box_build_info)], REFS, previous=previous)
    assert report.diffed
    assert report.deltas["Box"].code_size == 3
    assert report.deltas["Box"].init_size is None
    assert "Small" not in report.deltas

def test_contract_sizes_end_to_end(artifacts_dir, tmp_path):
    history = tmp_path / "cache" / "sizes.json"

    first = contract_sizes(artifacts_dir, history_path=history)
    assert [r.name for r in first.records] == ["Small", "Box"]
    assert first.deltas == {}
    assert load_snapshot(history).get("Box").code_size == 11

    # pretend Box shrank since the previous run
    snap = load_snapshot(history)
    snap.root["Box"].code_size = 20
    save_snapshot(history, snap)

    second = contract_sizes(artifacts_dir, contracts=["Box"], history_path=history)
    assert [r.name for r in second.records] == ["Box"]
    assert second.deltas["Box"].code_size == -9
    assert set(load_snapshot(history).root) == {"Box"}

def test_contract_sizes_without_history(artifacts_dir):
    report = contract_sizes(artifacts_dir, min_size=100)
    assert report.records == []
    assert report.measured == 2
    assert not report.diffed

def test_contract_sizes_corrupt_history(artifacts_dir, tmp_path):
    history = tmp_path / "sizes.json"
    history.write_text("[1, 2", encoding="utf-8")
    with pytest.raises(SnapshotReadFailure):
        contract_sizes(artifacts_dir, history_path=history)

def test_contract_sizes_corrupt_build_info(artifacts_dir):
    (artifacts_dir / "build-info" / "box.json").write_text("{", encoding="utf-8")
    with pytest.raises(ArtifactReadError):
        contract_sizes(artifacts_dir)

def test_multiple_build_infos_follow_debug_files(tmp_path, box_build_info):
    # An older build-info still holds a stale Box; the .dbg.json points at the new one
    stale = json.loads(json.dumps(box_build_info))
    stale["output"]["contracts"]["contracts/Box.sol"]["Box"] = make_contract(
        "00" + "00", "0:1:0", "00", "0:1:0"
    )
    artifacts = write_artifacts(tmp_path, {"new.json": box_build_info})
    (artifacts / "build-info" / "old.json").write_text(json.dumps(stale), encoding="utf-8")

    refs = discover_contracts(artifacts, link_build_info=True)
    assert {r.build_info for r in refs} == {"new.json"}

    report = contract_sizes(artifacts, contracts=["Box"])
    assert [(r.name, r.code_size) for r in report.records] == [("Box", 11)]

def test_discover_skips_test_sources(tmp_path):
    data = make_build_info({
        "test/Box.t.sol": {"BoxTest": make_contract("00" + "00", "0:1:0", "00", "0:1:0")},
        "src/Box.sol": {"Box": make_contract("00" + "00", "0:1:0", "00", "0:1:0")},
    }, {"test/Box.t.sol": 0, "src/Box.sol": 1})
    artifacts = write_artifacts(tmp_path, {"bi.json": data}, link=False)

    assert [r.contract_name for r in discover_contracts(artifacts)] == ["Box"]
    assert sorted(r.contract_name for r in discover_contracts(artifacts, include_tests=True)) == ["Box", "BoxTest"]

def test_render_table_details_and_delta(box_build_info):
    previous = HistorySnapshot({"Box": StoredContractSize(code_size=20, init_size=5)})
    report = build_report([load(box_build_info)], REFS, previous=previous)
    text = render_table(report, details=True, max_contract_size=10)
    lines = text.splitlines()

    assert lines[0].split() == ["contract", "source", "code%", "code", "±code", "init"]
    assert any("== Total" in line and "11 !" in line and "-9" in line for line in lines)
    assert any("## metadata hash" in line and "45%" in line for line in lines)
    assert [r.name for r in oversized_contracts(report.records, 10)] == ["Box"]

def test_render_table_plain(box_build_info):
    report = build_report([load(box_build_info)], REFS)
    lines = render_table(report).splitlines()
    assert lines[0].split() == ["contract", "code", "init"]
    assert len(lines) == 4

def test_only_test_contracts_are_not_measured(tmp_path):
    data = make_build_info({
        "test/Box.t.sol": {"BoxTest": make_contract("00" + "00", "0:1:0", "00", "0:1:0")},
    }, {"test/Box.t.sol": 0})
    artifacts = write_artifacts(tmp_path, {"bi.json": data}, link=False)

    assert discover_contracts(artifacts) == []
    assert [r.name for r in contract_sizes(artifacts).records] == []
    assert [r.name for r in contract_sizes(artifacts, include_tests=True).records] == ["BoxTest"]

def test_bare_build_info_skips_test_sources(tmp_path):
    data = make_build_info({
        "test/Box.t.sol": {"BoxTest": make_contract("00" + "00", "0:1:0", "00", "0:1:0")},
        "src/Box.sol": {"Box": make_contract("00" + "00", "0:1:0", "00", "0:1:0")},
    }, {"test/Box.t.sol": 0, "src/Box.sol": 1})
    bi_dir = tmp_path / "artifacts" / "build-info"
    bi_dir.mkdir(parents=True)
    (bi_dir / "bi.json").write_text(json.dumps(data), encoding="utf-8")

    assert discover_contracts(tmp_path / "artifacts") is None
    assert [r.name for r in contract_sizes(tmp_path / "artifacts").records] == ["Box"]
    assert sorted(r.name for r in contract_sizes(tmp_path / "artifacts", include_tests=True).records) == ["Box", "BoxTest"]

def test_contract_sizes_non_utf8_build_info(artifacts_dir):
    (artifacts_dir / "build-info" / "box.json").write_bytes(b'{"output": "\xff\xfe"}')
    with pytest.raises(ArtifactReadError):
        contract_sizes(artifacts_dir)

def test_contract_sizes_non_utf8_history(artifacts_dir, tmp_path):
    history = tmp_path / "sizes.json"
    history.write_bytes(b'{"A": "\xff\xfe"}')
    with pytest.raises(SnapshotReadFailure):
        contract_sizes(artifacts_dir, history_path=history)

@pytest.mark.parametrize("dbg", [[], {}, {"buildInfo": ""}, {"buildInfo": 3}])
def test_debug_file_without_build_info_link(tmp_path, box_build_info, dbg):
    artifacts = write_artifacts(tmp_path, {"box.json": box_build_info})
    (artifacts / "contracts" / "Box.sol" / "Box.dbg.json").write_text(json.dumps(dbg), encoding="utf-8")
    with pytest.raises(ArtifactReadError):
        discover_contracts(artifacts, link_build_info=True)
