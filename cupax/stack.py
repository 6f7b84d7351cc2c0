"""CHIP-8 stack operations.

Both operations report whether they could not be performed. A full stack
ignores the push and an empty stack ignores the pop; callers decide what the
instruction does in that case.
"""

import jax.numpy as jnp
from cupax.constants import ADDRESS_MASK, STACK_SIZE
from cupax.state import StackState


def push(stack: StackState, address: jnp.ndarray) -> tuple[StackState, jnp.ndarray]:
    """Push address onto stack."""
    overflow = stack.pointer >= STACK_SIZE
    slot = jnp.minimum(stack.pointer, STACK_SIZE - 1)
    masked_address = address & ADDRESS_MASK
    new_data = jnp.where(overflow, stack.data, stack.data.at[slot].set(masked_address))
    new_pointer = jnp.where(overflow, stack.pointer, stack.pointer + 1)
    return stack.replace(data=new_data, pointer=new_pointer), overflow


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray, jnp.ndarray]:
    """Pop address from stack."""
    underflow = stack.pointer == 0
    new_pointer = jnp.where(underflow, stack.pointer, stack.pointer - 1)
    popped_address = stack.data[new_pointer]
    new_data = jnp.where(underflow, stack.data, stack.data.at[new_pointer].set(0))
    return stack.replace(data=new_data, pointer=new_pointer), popped_address, underflow
