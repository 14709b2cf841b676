"""CHIP-8 stack operations.

The stack pointer wraps modulo the stack size in both directions: a call
beyond sixteen levels overwrites the oldest slot, and a return on an empty
stack reads the top slot.
"""

import jax.numpy as jnp
from chip8vm.constants import ADDRESS_MASK, STACK_SIZE
from chip8vm.state import StackState


def push(stack: StackState, address: jnp.ndarray) -> StackState:
    """Push address onto stack."""
    masked_address = jnp.astype(address & ADDRESS_MASK, jnp.uint16)
    new_data = stack.data.at[stack.pointer].set(masked_address)
    return stack.replace(data=new_data, pointer=(stack.pointer + 1) % STACK_SIZE)


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray]:
    """Pop address from stack."""
    new_pointer = (stack.pointer - 1) % STACK_SIZE
    popped_address = stack.data[new_pointer]
    new_data = stack.data.at[new_pointer].set(0)
    return stack.replace(data=new_data, pointer=new_pointer), popped_address
