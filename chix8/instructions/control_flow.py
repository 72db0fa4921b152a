"""CHIP-8 control flow instructions."""

import jax.numpy as jnp
from chix8.state import EmulatorState
from chix8.decode import Instruction
from chix8.constants import INSTRUCTION_SIZE
from chix8.stack import push


def execute_jump(state: EmulatorState, instruction: Instruction) -> EmulatorState:
    """1NNN - Jump to address NNN."""
    return state.replace(pc=jnp.astype(instruction.addr, jnp.uint16))


def execute_call(state: EmulatorState, instruction: Instruction) -> EmulatorState:
    """2NNN - Call subroutine at NNN."""
    state = state.replace(stack=push(state.stack, state.pc))
    return execute_jump(state, instruction)


def execute_jump_with_offset(state: EmulatorState, instruction: Instruction) -> EmulatorState:
    """BNNN - Jump to address NNN + V0."""
    # Not masked: a target past 0xFFF faults on the next fetch.
    jump_address = instruction.addr + int(state.V[0])
    return state.replace(pc=jnp.astype(jump_address, jnp.uint16))


def make_skip_instruction(condition_fn):
    """Factory for skip instructions."""
    def skip_instruction(state: EmulatorState, instruction: Instruction) -> EmulatorState:
        if condition_fn(state, instruction):
            return state.replace(pc=state.pc + INSTRUCTION_SIZE)
        return state
    return skip_instruction


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) == inst.b
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) != inst.b
)

execute_skip_if_equal_register = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) == int(state.V[inst.y])
)

execute_skip_if_not_equal_register = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) != int(state.V[inst.y])
)

# Only the low nibble of Vx names a key.
execute_skip_if_key_pressed = make_skip_instruction(
    lambda state, inst: bool(state.keypad[int(state.V[inst.x]) & 0xF])
)

execute_skip_if_key_not_pressed = make_skip_instruction(
    lambda state, inst: not bool(state.keypad[int(state.V[inst.x]) & 0xF])
)
