"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction
from chip8vm.constants import FONT_START, FONT_CHAR_SIZE, ADDRESS_MASK, FLAG_REGISTER, NUM_REGISTERS
from chip8vm.instructions.system import no_op


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=state.V.at[instruction.x].set(state.delay_timer))


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I register, VF flags a carry out of 12 bits."""
    new_i = jnp.astype(state.I, jnp.int32) + jnp.astype(state.V[instruction.x], jnp.int32)
    overflow_flag = jnp.astype(new_i > ADDRESS_MASK, jnp.uint8)
    return state.replace(
        I=jnp.astype(new_i & ADDRESS_MASK, jnp.uint16),
        V=state.V.at[FLAG_REGISTER].set(overflow_flag)
    )


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for key press (blocking).

    With no key down the pc is rewound so the instruction runs again next cycle.
    """
    def key_pressed_action(state):
        pressed_key = jnp.argmax(state.keypad)
        return state.replace(V=state.V.at[instruction.x].set(jnp.astype(pressed_key, jnp.uint8)))

    def wait_action(state):
        return state.replace(pc=state.pc - 2)

    return jax.lax.cond(jnp.any(state.keypad), key_pressed_action, wait_action, state)


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    font_address = FONT_START + jnp.astype(state.V[instruction.x], jnp.int32) * FONT_CHAR_SIZE
    return state.replace(I=jnp.astype(font_address & ADDRESS_MASK, jnp.uint16))


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = state.V[instruction.x]

    digits = jnp.array([
        value // 100,
        (value // 10) % 10,
        value % 10
    ], dtype=jnp.uint8)

    indices = (jnp.arange(3) + jnp.astype(state.I, jnp.int32)) & ADDRESS_MASK
    new_memory = state.memory.at[indices].set(digits)
    return state.replace(memory=new_memory)


def _register_window(state: EmulatorState, instruction: DecodedInstruction):
    """Register mask for V0..VX and the matching memory addresses from I."""
    register_mask = jnp.arange(NUM_REGISTERS) <= instruction.x
    addresses = (jnp.astype(state.I, jnp.int32) + jnp.arange(NUM_REGISTERS)) & ADDRESS_MASK
    return register_mask, addresses


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I."""
    register_mask, addresses = _register_window(state, instruction)
    current_memory_values = state.memory[addresses]
    new_memory_values = jnp.where(register_mask, state.V, current_memory_values)
    return state.replace(memory=state.memory.at[addresses].set(new_memory_values))


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I."""
    register_mask, addresses = _register_window(state, instruction)
    memory_values = state.memory[addresses]
    return state.replace(V=jnp.where(register_mask, memory_values, state.V))


def execute_misc_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch misc instructions using arithmetic switch."""
    is_0x07 = instruction.nn == 0x07
    is_0x0A = instruction.nn == 0x0A
    is_0x15 = instruction.nn == 0x15
    is_0x18 = instruction.nn == 0x18
    is_0x1E = instruction.nn == 0x1E
    is_0x29 = instruction.nn == 0x29
    is_0x33 = instruction.nn == 0x33
    is_0x55 = instruction.nn == 0x55
    is_0x65 = instruction.nn == 0x65

    switch_index = (
        is_0x07 * 0 +
        is_0x0A * 1 +
        is_0x15 * 2 +
        is_0x18 * 3 +
        is_0x1E * 4 +
        is_0x29 * 5 +
        is_0x33 * 6 +
        is_0x55 * 7 +
        is_0x65 * 8 +
        (~(is_0x07 | is_0x0A | is_0x15 | is_0x18 | is_0x1E | is_0x29 | is_0x33 | is_0x55 | is_0x65)) * 9
    )

    return jax.lax.switch(
        switch_index,
        [
            execute_get_delay_timer,
            execute_wait_for_key,
            execute_set_delay_timer,
            execute_set_sound_timer,
            execute_add_to_index,
            execute_font_character,
            execute_bcd_conversion,
            execute_store_registers,
            execute_load_registers,
            no_op,
        ],
        state, instruction
    )
