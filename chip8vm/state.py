"""CHIP-8 emulator state structures."""

import time
from typing import NamedTuple, Optional

import jax
import jax.numpy as jnp
from flax.struct import dataclass, PyTreeNode, field

from chip8vm.constants import (
    PROGRAM_START, FONT_START, FONT_DATA, SCREEN_WIDTH, SCREEN_HEIGHT, STACK_SIZE,
    MEMORY_SIZE, NUM_REGISTERS, NUM_KEYS,
)


class Quirks(NamedTuple):
    """Legacy-vs-modern behaviour switches, fixed when the state is created.

    Attributes:
        shift_uses_vy: 8XY6/8XYE copy VY into VX before shifting.
        jump_offset_uses_vx: BNNN adds VX instead of V0 to NNN.
    """
    shift_uses_vy: bool = False
    jump_offset_uses_vx: bool = False


@dataclass(frozen=True)
class StackState:
    """Stack state for subroutine calls."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state."""
    rng: jax.Array
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.astype(PROGRAM_START, jnp.uint16))
    display: jnp.ndarray = field(default_factory=lambda: jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.bool_))
    stack: StackState = StackState()
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    quirks: Quirks = field(pytree_node=False, default=Quirks())


def seed_from_clock() -> jax.Array:
    """PRNG key seeded from the wall clock, different on every run."""
    return jax.random.PRNGKey(time.time_ns() & 0xFFFFFFFF)


def create_state(rng: Optional[jax.Array] = None, quirks: Optional[Quirks] = None) -> EmulatorState:
    """Create initial emulator state with font data loaded.

    Args:
        rng: PRNG key for CXNN. Seeded from the clock when omitted.
        quirks: Behaviour switches; defaults to both disabled.
    """
    if rng is None:
        rng = seed_from_clock()
    state = EmulatorState(rng, quirks=quirks if quirks is not None else Quirks())
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(FONT_DATA))
