"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp
from chix8.state import EmulatorState
from chix8.decode import Instruction
from chix8.constants import FONT_START, FONT_GLYPH_SIZE
from chix8.instructions.memory import check_memory_range


def execute_get_delay_timer(state: EmulatorState, instruction: Instruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=state.V.at[instruction.x].set(state.delay_timer))


def execute_set_delay_timer(state: EmulatorState, instruction: Instruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: EmulatorState, instruction: Instruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: EmulatorState, instruction: Instruction) -> EmulatorState:
    """FX1E - Add VX to I register. 16-bit wrap, VF untouched."""
    new_i = (int(state.I) + int(state.V[instruction.x])) & 0xFFFF
    return state.replace(I=jnp.astype(new_i, jnp.uint16))


def execute_wait_for_key(state: EmulatorState, instruction: Instruction) -> EmulatorState:
    """FX0A - Wait for key press (blocking).

    Only arms the wait. ``resolve_key_wait`` finishes the instruction once a
    key goes down that was not already held here.
    """
    return state.replace(waiting_register=instruction.x, key_latch=state.keypad)


def resolve_key_wait(state: EmulatorState) -> EmulatorState:
    """Complete a pending FX0A if a key has been freshly pressed."""
    fresh_presses = state.keypad & ~state.key_latch
    if not bool(jnp.any(fresh_presses)):
        # Released keys drop out of the latch so pressing them again counts.
        return state.replace(key_latch=state.key_latch & state.keypad)

    pressed_key = int(jnp.argmax(fresh_presses))
    return state.replace(
        V=state.V.at[int(state.waiting_register)].set(pressed_key),
        waiting_register=-1,
        key_latch=jnp.zeros_like(state.key_latch),
    )


def execute_font_character(state: EmulatorState, instruction: Instruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    digit = int(state.V[instruction.x]) & 0xF
    font_address = FONT_START + digit * FONT_GLYPH_SIZE
    return state.replace(I=jnp.astype(font_address, jnp.uint16))


def execute_bcd_conversion(state: EmulatorState, instruction: Instruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    address = check_memory_range(state.I, 3, instruction.raw)
    value = int(state.V[instruction.x])

    digits = jnp.array([
        value // 100,
        (value // 10) % 10,
        value % 10
    ], dtype=jnp.uint8)

    new_memory = state.memory.at[address:address + 3].set(digits)
    return state.replace(memory=new_memory)


def execute_store_registers(state: EmulatorState, instruction: Instruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I."""
    count = instruction.x + 1
    address = check_memory_range(state.I, count, instruction.raw)
    new_memory = state.memory.at[address:address + count].set(state.V[:count])
    return state.replace(memory=new_memory)


def execute_load_registers(state: EmulatorState, instruction: Instruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I."""
    count = instruction.x + 1
    address = check_memory_range(state.I, count, instruction.raw)
    new_V = state.V.at[:count].set(state.memory[address:address + count])
    return state.replace(V=new_V)
