from typing import Dict, Optional

from Codesize.artifacts.build_info import ContractEvm, EvmBytecode
from Codesize.aggregate.source_table import SourceTable
from Codesize.core.errors import DecodeInconsistency
from Codesize.core.serialization import strip_hex_prefix
from Codesize.core.types import SizeRecord, SourceLabel, SourceSize
from Codesize.decode.decoder import ByteTally, decode

CREATION = "bytecode"
RUNTIME = "deployedBytecode"

def _decode_variant(name: str, variant: str, code: EvmBytecode,
                    tail_length: int, metadata_allowed: bool):
    try:
        return decode(code.source_map, code.object_hex, tail_length, metadata_allowed)
    except DecodeInconsistency as e:
        raise DecodeInconsistency(e.reason, contract=name, variant=variant) from e

def _merge(sources: Dict[SourceLabel, SourceSize], tally: ByteTally,
           resolve, field: str) -> None:
    for source_id, size in tally.items():
        label = resolve(source_id)
        entry = sources.get(label)
        if entry is None:
            entry = SourceSize(file_name=label.display_name, kind=label.kind)
            sources[label] = entry
        setattr(entry, field, getattr(entry, field) + size)

def aggregate(name: str, evm: ContractEvm, table: SourceTable,
              fully_qualified_name: Optional[str] = None) -> SizeRecord:
    """
    Measures one contract: creation and runtime code decoded separately, then
    merged per source. The runtime image embedded in creation code is its tail.
    """
    runtime_length = len(strip_hex_prefix(evm.deployed_bytecode.object_hex)) // 2

    init_size, init_tally = _decode_variant(name, CREATION, evm.bytecode, runtime_length, False)
    code_size, code_tally = _decode_variant(name, RUNTIME, evm.deployed_bytecode, 0, True)

    sources: Dict[SourceLabel, SourceSize] = {}
    _merge(sources, init_tally, table.scoped(evm.bytecode.generated_sources).resolve, "init_size")
    _merge(sources, code_tally, table.scoped(evm.deployed_bytecode.generated_sources).resolve, "code_size")

    return SizeRecord(
        name=name,
        fully_qualified_name=fully_qualified_name,
        code_size=code_size,
        init_size=init_size,
        sources=sorted(sources.values(), key=lambda s: (s.code_size, s.file_name)),
    )
