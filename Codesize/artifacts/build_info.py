"""
Readers for Hardhat compilation output.

A Hardhat artifacts directory holds `build-info/<hash>.json` files (solc
standard JSON input and output) and one `<source>/<Name>.json` artifact per
contract, with a `<Name>.dbg.json` pointing back at its build-info file.
"""
import json
from pathlib import Path
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError

from Codesize.core.errors import ArtifactLookupFailure, ArtifactReadError
from Codesize.core.logging import get_logger
from Codesize.core.serialization import read_json

logger = get_logger(__name__)

BUILD_INFO_DIR = "build-info"
TEST_SOURCE_SUFFIXES = (".t.sol", ".s.sol")

class GeneratedSource(BaseModel):
    """Compiler-generated Yul fragment (e.g. `#utility.yul`) scoped to one bytecode."""
    model_config = ConfigDict(extra="ignore")
    id: int
    name: str

class EvmBytecode(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)
    object_hex: str = Field(default="", alias="object")
    source_map: str = Field(default="", alias="sourceMap")
    generated_sources: List[GeneratedSource] = Field(default_factory=list, alias="generatedSources")

class ContractEvm(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)
    bytecode: EvmBytecode = Field(default_factory=EvmBytecode)
    deployed_bytecode: EvmBytecode = Field(default_factory=EvmBytecode, alias="deployedBytecode")

class CompiledContract(BaseModel):
    model_config = ConfigDict(extra="ignore")
    evm: ContractEvm = Field(default_factory=ContractEvm)

class SourceEntry(BaseModel):
    model_config = ConfigDict(extra="ignore")
    id: int

class BuildOutput(BaseModel):
    model_config = ConfigDict(extra="ignore")
    contracts: Dict[str, Dict[str, CompiledContract]] = Field(default_factory=dict)
    sources: Dict[str, SourceEntry] = Field(default_factory=dict)

class ContractRef(BaseModel, frozen=True):
    """A contract to be measured and, if known, the build-info file holding it."""
    source_name: str
    contract_name: str
    build_info: Optional[str] = None

    @property
    def fully_qualified_name(self) -> str:
        return f"{self.source_name}:{self.contract_name}"

class BuildInfo(BaseModel):
    """One parsed build-info file."""
    model_config = ConfigDict(extra="ignore")
    name: str = ""
    output: BuildOutput = Field(default_factory=BuildOutput)

    def source_files(self) -> Dict[int, str]:
        """Source id -> source path."""
        return {entry.id: path for path, entry in self.output.sources.items()}

    def get_contract(self, source_name: str, contract_name: str) -> ContractEvm:
        compiled = self.output.contracts.get(source_name, {}).get(contract_name)
        if compiled is None:
            raise ArtifactLookupFailure(f"{source_name}:{contract_name}", self.name or "<build-info>")
        return compiled.evm

    def contract_refs(self, include_tests: bool = False) -> List[ContractRef]:
        """Every contract this build compiled, in output order."""
        return [
            ContractRef(source_name=src, contract_name=name, build_info=self.name)
            for src, contracts in self.output.contracts.items()
            if include_tests or not is_test_source(src)
            for name in contracts
        ]

def is_test_source(source_name: str) -> bool:
    return source_name.endswith(TEST_SOURCE_SUFFIXES)

def load_build_info(path: Union[str, Path]) -> BuildInfo:
    """Loads and validates a build-info file. Any failure is fatal for the file."""
    p = Path(path)
    try:
        data = read_json(p)
        info = BuildInfo.model_validate(data)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, PydanticValidationError) as e:
        raise ArtifactReadError(f"Failed to read build info {p}: {e}")
    info.name = p.name
    logger.debug(f"Loaded build info {p.name} ({len(info.output.contracts)} sources with contracts)")
    return info

def find_build_info_files(artifacts_dir: Union[str, Path]) -> List[Path]:
    return sorted((Path(artifacts_dir) / BUILD_INFO_DIR).glob("*.json"))

def _debug_file_path(artifact_path: Path) -> Path:
    return artifact_path.with_name(artifact_path.name[:-len(".json")] + ".dbg.json")

def discover_contracts(artifacts_dir: Union[str, Path],
                       link_build_info: bool = False,
                       include_tests: bool = False) -> Optional[List[ContractRef]]:
    """
    Lists contracts from per-contract artifact files.
    With `link_build_info`, each ref is tied to the build-info named by its .dbg.json.
    Returns None when the directory holds no per-contract artifacts at all.
    """
    root = Path(artifacts_dir)
    build_info_root = root / BUILD_INFO_DIR
    refs: List[ContractRef] = []
    seen_artifact = False

    for p in sorted(root.rglob("*.json")):
        if p.name.endswith(".dbg.json") or build_info_root in p.parents:
            continue
        try:
            data = read_json(p)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ArtifactReadError(f"Failed to parse JSON artifact {p}: {e}")
        if not isinstance(data, dict) or "contractName" not in data or "sourceName" not in data:
            continue
        seen_artifact = True

        source_name = data["sourceName"]
        if not include_tests and is_test_source(source_name):
            continue

        build_info = None
        if link_build_info:
            dbg_path = _debug_file_path(p)
            try:
                dbg = read_json(dbg_path)
            except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
                raise ArtifactReadError(f"Failed to read debug file {dbg_path}: {e}")
            if not isinstance(dbg, dict) or not isinstance(dbg.get("buildInfo"), str) or not dbg["buildInfo"]:
                raise ArtifactReadError(f"Debug file {dbg_path} does not name a build info")
            build_info = Path(dbg["buildInfo"]).name

        refs.append(ContractRef(source_name=source_name, contract_name=data["contractName"], build_info=build_info))

    return refs if seen_artifact else None
