"""CHIP-8 error hierarchy.

Faults are fatal to the running program: they mean the program image is
malformed, not that the emulator is broken. The host decides whether to halt,
reset or report.
"""

from typing import Optional


class Chix8Error(Exception):
    """Base class for every error raised by chix8."""


class ProgramTooLargeError(Chix8Error, ValueError):
    """Program image does not fit between 0x200 and the end of memory."""

    def __init__(self, size: int, limit: int):
        super().__init__(f"Program is {size} bytes, at most {limit} bytes fit in memory")
        self.size = size
        self.limit = limit


class ChipFault(Chix8Error):
    """Unrecoverable fault raised while executing an instruction."""

    def __init__(self, message: str, opcode: Optional[int] = None):
        if opcode is not None:
            message = f"{message} (opcode {opcode:04X})"
        super().__init__(message)
        self.opcode = opcode


class StackOverflowFault(ChipFault):
    """CALL with 15 return addresses already on the stack."""


class StackUnderflowFault(ChipFault):
    """RET with no pending CALL."""


class MemoryAccessFault(ChipFault):
    """Access to an address outside 0x000-0xFFF."""

    def __init__(self, address: int, length: int = 1, opcode: Optional[int] = None):
        if length > 1:
            message = f"Memory access [{address:04X}, {address + length - 1:04X}] out of range"
        else:
            message = f"Memory access at {address:04X} out of range"
        super().__init__(message, opcode)
        self.address = address
        self.length = length
