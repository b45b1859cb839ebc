from Codesize.artifacts.build_info import (
    BuildInfo, BuildOutput, CompiledContract, ContractEvm, EvmBytecode, GeneratedSource,
    ContractRef, load_build_info, find_build_info_files, discover_contracts
)

__all__ = [
    "BuildInfo", "BuildOutput", "CompiledContract", "ContractEvm", "EvmBytecode", "GeneratedSource",
    "ContractRef", "load_build_info", "find_build_info_files", "discover_contracts"
]
