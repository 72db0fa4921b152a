"""CHIP-8 system instructions (0x0xxx)."""

import jax.numpy as jnp
from chix8.state import EmulatorState
from chix8.decode import Instruction
from chix8.stack import pop


def no_op(state: EmulatorState, instruction: Instruction) -> EmulatorState:
    """No operation."""
    return state


def execute_clear_screen(state: EmulatorState, instruction: Instruction) -> EmulatorState:
    """00E0 - Clear display."""
    return state.replace(display=jnp.zeros_like(state.display))


def execute_return(state: EmulatorState, instruction: Instruction) -> EmulatorState:
    """00EE - Return from subroutine."""
    stack, address = pop(state.stack)
    return state.replace(stack=stack, pc=address)


def execute_system_call(state: EmulatorState, instruction: Instruction) -> EmulatorState:
    """0NNN - SYS addr.

    Modern interpreters ignore it; legacy ROMs use it as a plain jump, so it
    is executed as one.
    """
    return state.replace(pc=jnp.astype(instruction.addr, jnp.uint16))
