"""CHIP-8 instruction decoding.

Opcodes are classified against an ordered table of ``(mask, pattern)`` pairs.
Several families share leading nibbles, so the table is walked top to bottom
and the first match wins: exact words, then leading-nibble families, then the
``8xyN``, ``ExNN`` and ``FxNN`` families keyed on their low bits.
"""

import enum
from typing import NamedTuple, Optional, Tuple

from chex import dataclass


class Op(enum.Enum):
    """Instruction variants, named after their conventional mnemonic form."""
    CLS = "CLS"
    RET = "RET"
    SYS = "SYS addr"
    JP = "JP addr"
    CALL = "CALL addr"
    SE_BYTE = "SE Vx, byte"
    SNE_BYTE = "SNE Vx, byte"
    SE_REG = "SE Vx, Vy"
    LD_BYTE = "LD Vx, byte"
    ADD_BYTE = "ADD Vx, byte"
    LD_REG = "LD Vx, Vy"
    OR = "OR Vx, Vy"
    AND = "AND Vx, Vy"
    XOR = "XOR Vx, Vy"
    ADD_REG = "ADD Vx, Vy"
    SUB = "SUB Vx, Vy"
    SHR = "SHR Vx"
    SUBN = "SUBN Vx, Vy"
    SHL = "SHL Vx"
    SNE_REG = "SNE Vx, Vy"
    LD_I = "LD I, addr"
    JP_V0 = "JP V0, addr"
    RND = "RND Vx, byte"
    DRW = "DRW Vx, Vy, nibble"
    SKP = "SKP Vx"
    SKNP = "SKNP Vx"
    LD_VX_DT = "LD Vx, DT"
    LD_VX_K = "LD Vx, K"
    LD_DT_VX = "LD DT, Vx"
    LD_ST_VX = "LD ST, Vx"
    ADD_I = "ADD I, Vx"
    LD_F = "LD F, Vx"
    LD_B = "LD B, Vx"
    LD_STORE = "LD [I], Vx"
    LD_LOAD = "LD Vx, [I]"
    UNKNOWN = "UNKNOWN"


class OpcodePattern(NamedTuple):
    """One row of the decode table."""
    mask: int
    pattern: int
    op: Op
    fields: Tuple[str, ...]
    template: str


# Operand extractors, keyed by field name: (shift, width mask).
FIELD_LAYOUT = {
    "x": (8, 0xF),
    "y": (4, 0xF),
    "b": (0, 0xFF),
    "n": (0, 0xF),
    "addr": (0, 0xFFF),
}

XY = ("x", "y")
XB = ("x", "b")

OPCODE_TABLE: Tuple[OpcodePattern, ...] = (
    # Exact words
    OpcodePattern(0xFFFF, 0x00E0, Op.CLS, (), "CLS"),
    OpcodePattern(0xFFFF, 0x00EE, Op.RET, (), "RET"),
    # Leading nibble
    OpcodePattern(0xF000, 0x0000, Op.SYS, ("addr",), "SYS {addr:03X}"),
    OpcodePattern(0xF000, 0x1000, Op.JP, ("addr",), "JP {addr:03X}"),
    OpcodePattern(0xF000, 0x2000, Op.CALL, ("addr",), "CALL {addr:03X}"),
    OpcodePattern(0xF000, 0x3000, Op.SE_BYTE, XB, "SE V{x:X}, {b:02X}"),
    OpcodePattern(0xF000, 0x4000, Op.SNE_BYTE, XB, "SNE V{x:X}, {b:02X}"),
    OpcodePattern(0xF00F, 0x5000, Op.SE_REG, XY, "SE V{x:X}, V{y:X}"),
    OpcodePattern(0xF000, 0x6000, Op.LD_BYTE, XB, "LD V{x:X}, {b:02X}"),
    OpcodePattern(0xF000, 0x7000, Op.ADD_BYTE, XB, "ADD V{x:X}, {b:02X}"),
    OpcodePattern(0xF00F, 0x9000, Op.SNE_REG, XY, "SNE V{x:X}, V{y:X}"),
    OpcodePattern(0xF000, 0xA000, Op.LD_I, ("addr",), "LD I, {addr:03X}"),
    OpcodePattern(0xF000, 0xB000, Op.JP_V0, ("addr",), "JP V0, {addr:03X}"),
    OpcodePattern(0xF000, 0xC000, Op.RND, XB, "RND V{x:X}, {b:02X}"),
    OpcodePattern(0xF000, 0xD000, Op.DRW, ("x", "y", "n"), "DRW V{x:X}, V{y:X}, {n:X}"),
    # 8xyN register-register ALU
    OpcodePattern(0xF00F, 0x8000, Op.LD_REG, XY, "LD V{x:X}, V{y:X}"),
    OpcodePattern(0xF00F, 0x8001, Op.OR, XY, "OR V{x:X}, V{y:X}"),
    OpcodePattern(0xF00F, 0x8002, Op.AND, XY, "AND V{x:X}, V{y:X}"),
    OpcodePattern(0xF00F, 0x8003, Op.XOR, XY, "XOR V{x:X}, V{y:X}"),
    OpcodePattern(0xF00F, 0x8004, Op.ADD_REG, XY, "ADD V{x:X}, V{y:X}"),
    OpcodePattern(0xF00F, 0x8005, Op.SUB, XY, "SUB V{x:X}, V{y:X}"),
    OpcodePattern(0xF00F, 0x8006, Op.SHR, ("x",), "SHR V{x:X}"),
    OpcodePattern(0xF00F, 0x8007, Op.SUBN, XY, "SUBN V{x:X}, V{y:X}"),
    OpcodePattern(0xF00F, 0x800E, Op.SHL, ("x",), "SHL V{x:X}"),
    # ExNN keypad
    OpcodePattern(0xF0FF, 0xE09E, Op.SKP, ("x",), "SKP V{x:X}"),
    OpcodePattern(0xF0FF, 0xE0A1, Op.SKNP, ("x",), "SKNP V{x:X}"),
    # FxNN timers, index, font, BCD, block transfer
    OpcodePattern(0xF0FF, 0xF007, Op.LD_VX_DT, ("x",), "LD V{x:X}, DT"),
    OpcodePattern(0xF0FF, 0xF00A, Op.LD_VX_K, ("x",), "LD V{x:X}, K"),
    OpcodePattern(0xF0FF, 0xF015, Op.LD_DT_VX, ("x",), "LD DT, V{x:X}"),
    OpcodePattern(0xF0FF, 0xF018, Op.LD_ST_VX, ("x",), "LD ST, V{x:X}"),
    OpcodePattern(0xF0FF, 0xF01E, Op.ADD_I, ("x",), "ADD I, V{x:X}"),
    OpcodePattern(0xF0FF, 0xF029, Op.LD_F, ("x",), "LD F, V{x:X}"),
    OpcodePattern(0xF0FF, 0xF033, Op.LD_B, ("x",), "LD B, V{x:X}"),
    OpcodePattern(0xF0FF, 0xF055, Op.LD_STORE, ("x",), "LD [I], V{x:X}"),
    OpcodePattern(0xF0FF, 0xF065, Op.LD_LOAD, ("x",), "LD V{x:X}, [I]"),
)

PATTERNS_BY_OP = {entry.op: entry for entry in OPCODE_TABLE}


@dataclass(frozen=True)
class Instruction:
    """Decoded CHIP-8 instruction.

    Only the operands used by ``op`` are set; the others stay ``None``.
    """
    raw: int
    op: Op
    x: Optional[int] = None      # Vx register index
    y: Optional[int] = None      # Vy register index
    b: Optional[int] = None      # 8-bit immediate
    n: Optional[int] = None      # 4-bit sprite height
    addr: Optional[int] = None   # 12-bit address

    @property
    def mnemonic(self) -> str:
        """Conventional assembly text, e.g. ``LD V3, 2A``."""
        if self.op is Op.UNKNOWN:
            return f"UNKNOWN {self.raw:04X}"
        entry = PATTERNS_BY_OP[self.op]
        return entry.template.format(**{name: getattr(self, name) for name in entry.fields})


def _extract(opcode: int, name: str) -> int:
    shift, width = FIELD_LAYOUT[name]
    return (opcode >> shift) & width


def decode(opcode: int) -> Instruction:
    """Decode a 16-bit opcode into an ``Instruction``."""
    opcode = int(opcode) & 0xFFFF
    for entry in OPCODE_TABLE:
        if opcode & entry.mask == entry.pattern:
            operands = {name: _extract(opcode, name) for name in entry.fields}
            return Instruction(raw=opcode, op=entry.op, **operands)
    return Instruction(raw=opcode, op=Op.UNKNOWN)


def encode(instruction: Instruction) -> int:
    """Rebuild the opcode word from an instruction's variant and operands."""
    if instruction.op is Op.UNKNOWN:
        return instruction.raw
    entry = PATTERNS_BY_OP[instruction.op]
    opcode = entry.pattern
    for name in entry.fields:
        shift, width = FIELD_LAYOUT[name]
        opcode |= (getattr(instruction, name) & width) << shift
    return opcode


def disassemble(opcode: int) -> str:
    """Mnemonic text for a raw opcode."""
    return decode(opcode).mnemonic
