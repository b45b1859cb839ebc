from Codesize.decode.decoder import decode, step, DecodeState, ByteTally
from Codesize.decode.opcodes import instruction_length
from Codesize.decode.source_map import iter_source_ids

__all__ = ["decode", "step", "DecodeState", "ByteTally", "instruction_length", "iter_source_ids"]
