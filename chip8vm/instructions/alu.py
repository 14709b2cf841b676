"""CHIP-8 ALU operations (8xxx).

Every operation maps ``(vx, vy, vf)`` to the new ``(vx, vf)``. Operations that
do not document a flag hand ``vf`` back unchanged. Arithmetic is widened to
int32 so carries and borrows are visible before truncation to a byte.
"""

import jax
import jax.lax
import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction
from chip8vm.constants import FLAG_REGISTER


def _byte(value) -> jnp.ndarray:
    return jnp.astype(value & 0xFF, jnp.uint8)


def _flag(condition) -> jnp.ndarray:
    return jnp.astype(condition, jnp.uint8)


def alu_set(vx, vy, vf) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XY0 - Set: VX = VY."""
    return vy, vf


def alu_or(vx, vy, vf) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, vf


def alu_and(vx, vy, vf) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, vf


def alu_xor(vx, vy, vf) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, vf


def alu_add(vx, vy, vf) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XY4 - Add: VX += VY, set carry flag."""
    result = jnp.astype(vx, jnp.int32) + jnp.astype(vy, jnp.int32)
    return _byte(result), _flag(result > 255)


def alu_sub_xy(vx, vy, vf) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XY5 - Subtract: VX -= VY, VF = 1 when VX > VY."""
    result = jnp.astype(vx, jnp.int32) - jnp.astype(vy, jnp.int32)
    return _byte(result), _flag(vx > vy)


def alu_shift_right(vx, vy, vf) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XY6 - Shift right: VX >>= 1."""
    return vx >> 1, vx & 1


def alu_sub_yx(vx, vy, vf) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XY7 - Subtract: VX = VY - VX, VF = 1 when VY > VX."""
    result = jnp.astype(vy, jnp.int32) - jnp.astype(vx, jnp.int32)
    return _byte(result), _flag(vy > vx)


def alu_shift_left(vx, vy, vf) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XYE - Shift left: VX <<= 1."""
    shifted_bit = (vx & 0x80) >> 7
    return _byte(jnp.astype(vx, jnp.int32) << 1), shifted_bit


def alu_undefined(vx, vy, vf) -> tuple[jnp.ndarray, jnp.ndarray]:
    """Undefined ALU operation, leaves both registers alone."""
    return vx, vf


# Low nibble -> branch; 9 is the undefined handler
ALU_BRANCH = jnp.array([0, 1, 2, 3, 4, 5, 6, 7, 9, 9, 9, 9, 9, 9, 8, 9], dtype=jnp.int32)


def execute_alu_operation(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XYN - ALU operations dispatcher."""
    vx = state.V[instruction.x]
    vy = state.V[instruction.y]
    vf = state.V[FLAG_REGISTER]

    def _alu_shift_right(vx, vy, vf):
        if state.quirks.shift_uses_vy:
            vx = vy
        return alu_shift_right(vx, vy, vf)

    def _alu_shift_left(vx, vy, vf):
        if state.quirks.shift_uses_vy:
            vx = vy
        return alu_shift_left(vx, vy, vf)

    result, flag = jax.lax.switch(
        ALU_BRANCH[instruction.n],
        [alu_set, alu_or, alu_and, alu_xor, alu_add,
         alu_sub_xy, _alu_shift_right, alu_sub_yx, _alu_shift_left, alu_undefined],
        vx, vy, vf
    )

    # Flag first, result second: with X = F the result wins
    new_V = state.V.at[FLAG_REGISTER].set(jnp.astype(flag, jnp.uint8))
    new_V = new_V.at[instruction.x].set(jnp.astype(result, jnp.uint8))
    return state.replace(V=new_V)
