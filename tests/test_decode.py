"""Tests for instruction decoding and opcode mapping."""

import jax.numpy as jnp
import pytest
from chip8vm import decode, is_mapped


def test_decode_fields():
    """Each field is sliced from the right nibbles."""
    decoded = decode(0xD12A)
    assert decoded.raw == 0xD12A
    assert decoded.opcode == 0xD
    assert decoded.x == 0x1
    assert decoded.y == 0x2
    assert decoded.n == 0xA
    assert decoded.nn == 0x2A
    assert decoded.nnn == 0x12A


def test_decode_address():
    assert decode(0x1234).nnn == 0x234
    assert decode(0x1234).opcode == 1


@pytest.mark.parametrize("instruction", [
    0x00E0, 0x00EE, 0x1000, 0x2FFF, 0x3000, 0x4000, 0x5120, 0x6000, 0x7000,
    0x8120, 0x8127, 0x812E, 0x9120, 0xA000, 0xB000, 0xC000, 0xD000,
    0xE09E, 0xE0A1, 0xF007, 0xF00A, 0xF015, 0xF018, 0xF01E, 0xF029, 0xF033, 0xF055, 0xF065,
])
def test_mapped_opcodes(instruction):
    assert is_mapped(instruction)


@pytest.mark.parametrize("instruction", [
    0x0000, 0x0123, 0x00E1, 0x8128, 0x812D, 0x812F, 0xE000, 0xE09F, 0xF000, 0xF0FF, 0xF056,
])
def test_unmapped_opcodes(instruction):
    assert not is_mapped(instruction)


def test_is_mapped_accepts_arrays():
    """Works on the uint16 scalars ``peek`` returns."""
    assert is_mapped(jnp.uint16(0xF065))
    assert not is_mapped(jnp.uint16(0xF066))
