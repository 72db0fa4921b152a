"""CHIP-8 emulator package."""

from chix8.state import EmulatorState, create_state
from chix8.emulator import execute, fetch, step, tick_timers, load_program, load_rom
from chix8.decode import Instruction, Op, decode, encode, disassemble
from chix8.machine import Machine
from chix8.config import EmulatorConfig
from chix8.errors import (
    Chix8Error, ChipFault, StackOverflowFault, StackUnderflowFault,
    MemoryAccessFault, ProgramTooLargeError,
)
from chix8.constants import *
from chix8.rendering import chip8_display_to_rgb, create_color_scheme, display_to_text

__all__ = [
    "EmulatorState",
    "create_state",
    "fetch",
    "execute",
    "step",
    "tick_timers",
    "load_program",
    "load_rom",
    "Instruction",
    "Op",
    "decode",
    "encode",
    "disassemble",
    "Machine",
    "EmulatorConfig",
    "Chix8Error",
    "ChipFault",
    "StackOverflowFault",
    "StackUnderflowFault",
    "MemoryAccessFault",
    "ProgramTooLargeError",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "chip8_display_to_rgb",
    "create_color_scheme",
    "display_to_text",
]
