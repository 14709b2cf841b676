"""Test configuration and fixtures for CHIP-8 emulator tests."""

import pytest
import jax
import jax.numpy as jnp
from chip8vm import create_state, Quirks


@pytest.fixture
def rng():
    """Fixed PRNG key so random instructions are reproducible."""
    return jax.random.PRNGKey(0)


@pytest.fixture
def fresh_state(rng):
    """Provide a fresh emulator state for each test."""
    return create_state(rng)


@pytest.fixture
def shift_quirk_state(rng):
    """Fresh state where shifts read VY."""
    return create_state(rng, Quirks(shift_uses_vy=True))


@pytest.fixture
def jump_quirk_state(rng):
    """Fresh state where BNNN adds VX."""
    return create_state(rng, Quirks(jump_offset_uses_vx=True))


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def set_registers(state, **registers):
    """Helper to set registers by name, e.g. ``set_registers(state, V1=0x10, VF=1)``."""
    V = state.V
    for name, value in registers.items():
        V = V.at[int(name[1:], 16)].set(value)
    return state.replace(V=V)
