"""Tests for system instructions (0xxx)."""

import jax
import jax.numpy as jnp
import pytest
from chix8 import execute, StackUnderflowFault
from chix8.constants import SCREEN_WIDTH, SCREEN_HEIGHT


def test_execute_clear_screen(fresh_state):
    """Test 00E0 - Clear display."""
    state = fresh_state.replace(display=fresh_state.display.at[0, 0].set(True))

    state = execute(state, 0x00E0)

    assert jnp.sum(state.display) == 0


def test_clear_screen_random_content(fresh_state):
    """00E0 - Any prior content ends up all off."""
    noise = jax.random.bernoulli(jax.random.PRNGKey(7), 0.5, (SCREEN_WIDTH, SCREEN_HEIGHT))
    state = fresh_state.replace(display=noise)
    assert jnp.any(state.display)

    state = execute(state, 0x00E0)

    assert not jnp.any(state.display)
    assert state.display.shape == (SCREEN_WIDTH, SCREEN_HEIGHT)


def test_clear_screen_idempotent(fresh_state):
    """00E0 - Clearing an empty display changes nothing."""
    state = execute(fresh_state, 0x00E0)
    state = execute(state, 0x00E0)
    assert jnp.array_equal(state.display, fresh_state.display)


def test_execute_call_and_return(fresh_state):
    """Test 2NNN (call) and 00EE (return) together."""
    state = fresh_state
    initial_pc = state.pc

    # Call subroutine
    state = execute(state, 0x2300)  # Call 0x300
    assert state.pc == 0x300
    assert state.stack.pointer == 1
    assert state.stack.data[state.stack.pointer] == initial_pc

    # Return from subroutine
    state = execute(state, 0x00EE)  # Return
    assert state.pc == initial_pc
    assert state.stack.pointer == 0


def test_return_with_empty_stack(fresh_state):
    """00EE - Return without a call is a fault."""
    with pytest.raises(StackUnderflowFault):
        execute(fresh_state, 0x00EE)


def test_sys_jumps(fresh_state):
    """0NNN - SYS is executed as a jump."""
    state = execute(fresh_state, 0x0345)
    assert state.pc == 0x345
    assert state.stack.pointer == 0
