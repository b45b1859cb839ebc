"""
EVM opcode widths needed to walk an instruction stream.

Only the PUSH family carries inline operands; every other opcode is one byte.
Instruction widths are read straight off the hex text, so link placeholders
(`__$...$__`) inside PUSH20 operands never have to be parsed.
"""
from Codesize.core.errors import DecodeInconsistency

PUSH1 = 0x60
PUSH32 = 0x7f

# INVALID (0xfe), the assert trap solc places right after the mapped code
INVALID_HEX = "FE"

def instruction_length(bytecode_hex: str, pos: int) -> int:
    """
    Returns the byte length of the instruction whose opcode starts at hex offset `pos`.
    PUSH1..PUSH16 (0x60..0x6f) take 1..16 operand bytes, PUSH17..PUSH32 (0x70..0x7f) 17..32.
    """
    if pos >= len(bytecode_hex):
        raise DecodeInconsistency(f"Source map runs past end of bytecode at offset {pos // 2}")

    high = bytecode_hex[pos]
    n = 1
    if high in "67":
        if high == "7":
            n += 16
        try:
            n += int(bytecode_hex[pos + 1], 16) + 1
        except (IndexError, ValueError):
            raise DecodeInconsistency(f"Malformed PUSH opcode at offset {pos // 2}")
    return n
