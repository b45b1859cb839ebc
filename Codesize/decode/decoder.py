"""
Byte-level attribution of EVM bytecode to source ids.

The solc source map has one entry per instruction. Walking it alongside the
bytecode gives the id responsible for every instruction byte; whatever the map
does not cover is classified afterwards as the assert trap, the CBOR metadata
trailer, the tail (runtime code embedded in creation code) or plain data.
"""
from typing import Dict, NamedTuple, Optional, Tuple

from Codesize.core.errors import DecodeInconsistency
from Codesize.core.serialization import strip_hex_prefix
from Codesize.core.types import NO_SOURCE_ID, METADATA_ID, UNKNOWN_CODE_ID
from Codesize.decode.opcodes import INVALID_HEX, instruction_length
from Codesize.decode.source_map import iter_source_ids

ByteTally = Dict[int, int]

class DecodeState(NamedTuple):
    """Fold state carried across source map entries."""
    cursor: int  # in hex characters
    source_id: int

def _add(tally: ByteTally, source_id: int, size: int) -> None:
    if size > 0:
        tally[source_id] = tally.get(source_id, 0) + size

def step(state: DecodeState, entry_id: Optional[int], bytecode_hex: str, tally: ByteTally) -> DecodeState:
    """Decodes one instruction and attributes it to the entry's id, or the sticky one."""
    source_id = state.source_id if entry_id is None else entry_id
    n = instruction_length(bytecode_hex, state.cursor)
    _add(tally, source_id, n)
    return DecodeState(state.cursor + n * 2, source_id)

def decode(source_map: Optional[str], bytecode_hex: str, tail_length: int = 0,
           metadata_allowed: bool = False) -> Tuple[int, ByteTally]:
    """
    Attributes every byte of `bytecode_hex` to a source id.

    Args:
        source_map: solc source map for this bytecode, may be empty.
        bytecode_hex: hex encoded bytecode, with or without 0x.
        tail_length: bytes at the end that belong to neither code nor metadata
            (the runtime image inside creation code).
        metadata_allowed: whether a length-suffixed metadata trailer may end the stream.

    Returns:
        (logical code length in bytes, tally of bytes per source id). The tally
        sums to the logical length and never contains zero entries.
    """
    code = strip_hex_prefix(bytecode_hex)
    if len(code) % 2:
        raise DecodeInconsistency(f"Odd-length bytecode ({len(code)} hex characters)")
    tail = tail_length * 2
    tally: ByteTally = {}

    mapped = False
    state = DecodeState(0, NO_SOURCE_ID)
    for entry_id in iter_source_ids(source_map):
        mapped = True
        state = step(state, entry_id, code, tally)

    unknown = len(code) - state.cursor
    if unknown > tail and unknown >= 2 and code[state.cursor:state.cursor + 2].upper() == INVALID_HEX:
        _add(tally, state.source_id, 1)
        unknown -= 2

    if unknown > tail:
        unknown -= tail

        if metadata_allowed and unknown >= 4:
            try:
                metadata_len = int(code[-4:], 16) + 2
            except ValueError:
                raise DecodeInconsistency(f"Malformed metadata length field: {code[-4:]!r}")
            if metadata_len * 2 > unknown:
                raise DecodeInconsistency(f"Inconsistent metadata size: {unknown // 2} < {metadata_len}")
            unknown -= metadata_len * 2
            _add(tally, METADATA_ID, metadata_len)

        # Without any map there is no telling code from data
        _add(tally, UNKNOWN_CODE_ID if mapped else NO_SOURCE_ID, unknown // 2)
    elif unknown < tail:
        raise DecodeInconsistency(f"Inconsistent bytecode size: {unknown // 2} < {tail_length}")

    return (len(code) - tail) // 2, tally
