"""CHIP-8 stack operations."""

import jax.numpy as jnp
from chix8.constants import MAX_STACK_POINTER
from chix8.errors import StackOverflowFault, StackUnderflowFault
from chix8.state import StackState


def push(stack: StackState, address: jnp.ndarray) -> StackState:
    """Push address onto stack. The pointer is incremented before the store.

    The address is stored as given; a return past the end of memory faults on
    the following fetch.
    """
    pointer = int(stack.pointer)
    if pointer >= MAX_STACK_POINTER:
        raise StackOverflowFault(f"Stack overflow: {pointer} return addresses already pending")
    new_pointer = pointer + 1
    new_data = stack.data.at[new_pointer].set(int(address))
    return stack.replace(data=new_data, pointer=new_pointer)


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray]:
    """Pop address from stack."""
    pointer = int(stack.pointer)
    if pointer <= 0:
        raise StackUnderflowFault("Stack underflow: return without a pending call")
    popped_address = stack.data[pointer]
    new_data = stack.data.at[pointer].set(0)
    return stack.replace(data=new_data, pointer=pointer - 1), popped_address
