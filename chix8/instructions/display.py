"""CHIP-8 display operations."""

import jax.numpy as jnp
from chix8.state import EmulatorState
from chix8.decode import Instruction
from chix8.constants import SCREEN_WIDTH, SCREEN_HEIGHT, FLAG_REGISTER
from chix8.instructions.memory import check_memory_range

# Bit masks for sprite columns, most significant bit first.
COLUMN_BITS = jnp.array([0x80 >> column for column in range(8)], dtype=jnp.uint8)


def sprite_plane(sprite_bytes: jnp.ndarray, origin_x: int, origin_y: int) -> jnp.ndarray:
    """Place sprite rows on an empty (width, height) plane, wrapping both axes."""
    rows = sprite_bytes.shape[0]
    bits = (sprite_bytes[:, None] & COLUMN_BITS[None, :]) != 0  # (rows, 8)
    xs = (origin_x + jnp.arange(8)) % SCREEN_WIDTH
    ys = (origin_y + jnp.arange(rows)) % SCREEN_HEIGHT
    plane = jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.bool_)
    # A sprite is at most 8 x 15, so wrapped coordinates never coincide.
    return plane.at[xs[None, :], ys[:, None]].set(bits)


def execute_display(state: EmulatorState, instruction: Instruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N, VF = collision."""
    address = check_memory_range(state.I, instruction.n, instruction.raw)
    sprite_bytes = state.memory[address:address + instruction.n]

    sprite = sprite_plane(sprite_bytes, int(state.V[instruction.x]), int(state.V[instruction.y]))
    collision = jnp.any(state.display & sprite)

    return state.replace(
        display=state.display ^ sprite,
        V=state.V.at[FLAG_REGISTER].set(jnp.astype(collision, jnp.uint8))
    )
