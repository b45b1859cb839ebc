import json
from pathlib import Path

import pytest

# Box runtime: PUSH1 80, PUSH1 40, MSTORE, INVALID, then a 3 byte metadata body + length
BOX_RUNTIME = "6080604052" + "fe" + "aaaaaa" + "0003"
BOX_RUNTIME_MAP = "0:10:0:-:0;;"
# Box creation: PUSH1 80, PUSH1 40 from Base.sol, INVALID, then the runtime image
BOX_CREATION = "60806040" + "fe" + BOX_RUNTIME
BOX_CREATION_MAP = "0:5:1;:::"

def make_contract(creation: str, creation_map: str, runtime: str, runtime_map: str,
                  creation_generated=None, runtime_generated=None) -> dict:
    return {
        "abi": [],
        "evm": {
            "bytecode": {
                "object": creation,
                "sourceMap": creation_map,
                "generatedSources": creation_generated or [],
                "linkReferences": {},
            },
            "deployedBytecode": {
                "object": runtime,
                "sourceMap": runtime_map,
                "generatedSources": runtime_generated or [],
                "immutableReferences": {},
            },
        },
    }

def make_build_info(contracts: dict, sources: dict) -> dict:
    """contracts: {source path: {name: compiled}}, sources: {source path: id}"""
    return {
        "_format": "hh-sol-build-info-1",
        "id": "0123abcd",
        "solcVersion": "0.8.19",
        "input": {"language": "Solidity", "sources": {}},
        "output": {
            "contracts": contracts,
            "sources": {path: {"id": sid, "ast": {}} for path, sid in sources.items()},
        },
    }

@pytest.fixture
def box_build_info() -> dict:
    return make_build_info(
        {
            "contracts/Box.sol": {
                "Box": make_contract(BOX_CREATION, BOX_CREATION_MAP, BOX_RUNTIME, BOX_RUNTIME_MAP),
            },
            "contracts/Small.sol": {
                # PUSH1 01, STOP; no metadata
                "Small": make_contract("6001fe" + "600100", "0:3:2", "600100", "0:2:2;:1:2"),
            },
        },
        {"contracts/Box.sol": 0, "contracts/Base.sol": 1, "contracts/Small.sol": 2},
    )

def write_artifacts(root: Path, build_infos: dict, link: bool = True) -> Path:
    """
    Lays out a Hardhat artifacts directory under root.
    build_infos: {build-info file name: build-info dict}.
    """
    artifacts = root / "artifacts"
    bi_dir = artifacts / "build-info"
    bi_dir.mkdir(parents=True)
    for bi_name, bi in build_infos.items():
        (bi_dir / bi_name).write_text(json.dumps(bi), encoding="utf-8")
        for source, contracts in bi["output"]["contracts"].items():
            src_dir = artifacts / source
            src_dir.mkdir(parents=True, exist_ok=True)
            for name in contracts:
                (src_dir / f"{name}.json").write_text(json.dumps({
                    "_format": "hh-sol-artifact-1",
                    "contractName": name,
                    "sourceName": source,
                    "abi": [],
                }), encoding="utf-8")
                if link:
                    rel = "../" * len(Path(source).parts) + f"build-info/{bi_name}"
                    (src_dir / f"{name}.dbg.json").write_text(json.dumps({
                        "_format": "hh-sol-dbg-1",
                        "buildInfo": rel,
                    }), encoding="utf-8")
    return artifacts

@pytest.fixture
def artifacts_dir(tmp_path, box_build_info) -> Path:
    return write_artifacts(tmp_path, {"box.json": box_build_info})
