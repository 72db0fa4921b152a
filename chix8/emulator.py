"""Main CHIP-8 emulator execution engine.

All functions here are pure: they take an ``EmulatorState`` and return a new
one. Faults are raised before any new state is returned, so the caller's state
is never half updated.
"""

from typing import Optional, Union

import jax.numpy as jnp
from chix8.state import EmulatorState
from chix8.decode import Instruction, Op, decode
from chix8.constants import PROGRAM_START, MAX_PROGRAM_SIZE, INSTRUCTION_SIZE
from chix8.errors import ProgramTooLargeError
from chix8.instructions.system import (
    no_op, execute_clear_screen, execute_return, execute_system_call
)
from chix8.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
    execute_skip_if_key_pressed, execute_skip_if_key_not_pressed
)
from chix8.instructions.alu import ALU_OPERATIONS, execute_alu_operation
from chix8.instructions.memory import (
    check_memory_range, execute_set, execute_add, execute_set_index, execute_random
)
from chix8.instructions.display import execute_display
from chix8.instructions.misc import (
    execute_get_delay_timer, execute_wait_for_key, execute_set_delay_timer,
    execute_set_sound_timer, execute_add_to_index, execute_font_character,
    execute_bcd_conversion, execute_store_registers, execute_load_registers,
    resolve_key_wait
)


INSTRUCTION_HANDLERS = {
    Op.CLS: execute_clear_screen,
    Op.RET: execute_return,
    Op.SYS: execute_system_call,
    Op.JP: execute_jump,
    Op.CALL: execute_call,
    Op.SE_BYTE: execute_skip_if_equal_immediate,
    Op.SNE_BYTE: execute_skip_if_not_equal_immediate,
    Op.SE_REG: execute_skip_if_equal_register,
    Op.LD_BYTE: execute_set,
    Op.ADD_BYTE: execute_add,
    **{op: execute_alu_operation for op in ALU_OPERATIONS},
    Op.SNE_REG: execute_skip_if_not_equal_register,
    Op.LD_I: execute_set_index,
    Op.JP_V0: execute_jump_with_offset,
    Op.RND: execute_random,
    Op.DRW: execute_display,
    Op.SKP: execute_skip_if_key_pressed,
    Op.SKNP: execute_skip_if_key_not_pressed,
    Op.LD_VX_DT: execute_get_delay_timer,
    Op.LD_VX_K: execute_wait_for_key,
    Op.LD_DT_VX: execute_set_delay_timer,
    Op.LD_ST_VX: execute_set_sound_timer,
    Op.ADD_I: execute_add_to_index,
    Op.LD_F: execute_font_character,
    Op.LD_B: execute_bcd_conversion,
    Op.LD_STORE: execute_store_registers,
    Op.LD_LOAD: execute_load_registers,
    Op.UNKNOWN: no_op,
}


def execute(state: EmulatorState, instruction: Union[int, Instruction]) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    PC is not advanced here; ``fetch`` has already moved it past the opcode.
    """
    if not isinstance(instruction, Instruction):
        instruction = decode(instruction)
    return INSTRUCTION_HANDLERS[instruction.op](state, instruction)


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> int:
    """Pack two bytes into a big-endian 16-bit word."""
    return (int(high) << 8) | int(low)


def fetch(state: EmulatorState) -> tuple[EmulatorState, int]:
    """Fetch next instruction from memory."""
    pc = check_memory_range(state.pc, INSTRUCTION_SIZE)
    instruction = _pack_u16(state.memory[pc], state.memory[pc + 1])
    return state.replace(pc=state.pc + INSTRUCTION_SIZE), instruction


def step(state: EmulatorState) -> tuple[EmulatorState, Optional[Instruction]]:
    """Run one fetch-decode-execute cycle.

    While an ``LD Vx, K`` is pending no instruction is fetched and the
    returned instruction is ``None``.
    """
    if state.awaiting_key:
        return resolve_key_wait(state), None

    state, opcode = fetch(state)
    instruction = decode(opcode)
    return execute(state, instruction), instruction


def tick_timers(state: EmulatorState) -> EmulatorState:
    """Decrement the delay and sound timers once, stopping at zero."""
    delay = int(state.delay_timer)
    sound = int(state.sound_timer)
    return state.replace(
        delay_timer=jnp.asarray(max(delay - 1, 0), dtype=jnp.uint8),
        sound_timer=jnp.asarray(max(sound - 1, 0), dtype=jnp.uint8),
    )


def load_program(state: EmulatorState, program: bytes) -> EmulatorState:
    """Copy a raw program image into memory starting at 0x200."""
    if len(program) > MAX_PROGRAM_SIZE:
        raise ProgramTooLargeError(len(program), MAX_PROGRAM_SIZE)
    if not program:
        return state
    rom_array = jnp.array(list(program), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(program)].set(rom_array)
    return state.replace(memory=new_memory)


def load_rom(state: EmulatorState, filename: str) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200."""
    with open(filename, 'rb') as f:
        rom_data = f.read()
    return load_program(state, rom_data)
