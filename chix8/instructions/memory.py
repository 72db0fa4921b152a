"""CHIP-8 memory and register operations."""

import jax
import jax.numpy as jnp
from chix8.state import EmulatorState
from chix8.decode import Instruction
from chix8.constants import MEMORY_SIZE
from chix8.errors import MemoryAccessFault


def check_memory_range(address: int, length: int = 1, opcode: int = None) -> int:
    """Raise ``MemoryAccessFault`` unless ``[address, address + length)`` is in memory.

    JAX clamps out-of-range indices, so every access that depends on I or PC
    goes through here first.
    """
    address = int(address)
    if address < 0 or address + length > MEMORY_SIZE:
        raise MemoryAccessFault(address, length, opcode)
    return address


def execute_set(state: EmulatorState, instruction: Instruction) -> EmulatorState:
    """6XKK - Set VX = KK."""
    return state.replace(V=state.V.at[instruction.x].set(instruction.b))


def execute_add(state: EmulatorState, instruction: Instruction) -> EmulatorState:
    """7XKK - Add KK to VX. No carry flag."""
    total = (int(state.V[instruction.x]) + instruction.b) & 0xFF
    return state.replace(V=state.V.at[instruction.x].set(total))


def execute_set_index(state: EmulatorState, instruction: Instruction) -> EmulatorState:
    """ANNN - Set I = NNN."""
    return state.replace(I=jnp.astype(instruction.addr, jnp.uint16))


def execute_random(state: EmulatorState, instruction: Instruction) -> EmulatorState:
    """CXKK - Set VX = random & KK."""
    key, subkey = jax.random.split(state.rng)
    random_value = jax.random.randint(subkey, shape=(), minval=0, maxval=256, dtype=jnp.int32)
    masked = int(random_value) & instruction.b
    return state.replace(V=state.V.at[instruction.x].set(masked), rng=key)
