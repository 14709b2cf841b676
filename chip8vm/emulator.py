"""Main CHIP-8 emulator execution engine."""

import os
from functools import partial
from typing import Sequence, Union

import jax
import jax.lax
import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import decode
from chip8vm.constants import PROGRAM_START, MAX_PROGRAM_SIZE, ADDRESS_MASK, NUM_KEYS
from chip8vm.errors import ProgramNotFoundError, ProgramTooLargeError
from chip8vm.instructions.system import execute_system_instruction
from chip8vm.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, select_jump_with_offset, execute_skip_if_key
)
from chip8vm.instructions.alu import execute_alu_operation
from chip8vm.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chip8vm.instructions.display import execute_display
from chip8vm.instructions.misc import execute_misc_instruction
from chip8vm.logging import scan_with_progress


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    The pc is expected to already point past the instruction (see ``fetch``).
    """
    decoded_instruction = decode(instruction)

    return jax.lax.switch(
        decoded_instruction.opcode,
        [
            execute_system_instruction,
            execute_jump,
            execute_call,
            execute_skip_if_equal_immediate,
            execute_skip_if_not_equal_immediate,
            execute_skip_if_equal_register,
            execute_set,
            execute_add,
            execute_alu_operation,
            execute_skip_if_not_equal_register,
            execute_set_index,
            select_jump_with_offset(state),
            execute_random,
            execute_display,
            execute_skip_if_key,
            execute_misc_instruction,
        ],
        state, decoded_instruction
    )


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def peek(state: EmulatorState) -> jnp.uint16:
    """Instruction at pc, without advancing."""
    return _pack_u16(
        state.memory[state.pc & ADDRESS_MASK],
        state.memory[(state.pc + 1) & ADDRESS_MASK],
    )


def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Fetch next instruction from memory."""
    instruction = peek(state)
    return state.replace(pc=state.pc + 2), instruction


def cycle(state: EmulatorState) -> EmulatorState:
    """One fetch-decode-execute step."""
    state, instruction = fetch(state)
    return execute(state, instruction)


def tick_timers(state: EmulatorState) -> EmulatorState:
    """Decrement delay and sound timers by one, stopping at zero."""
    return state.replace(
        delay_timer=jnp.where(state.delay_timer > 0, state.delay_timer - 1, state.delay_timer),
        sound_timer=jnp.where(state.sound_timer > 0, state.sound_timer - 1, state.sound_timer),
    )


def set_keypad(state: EmulatorState, keys: Union[Sequence[bool], jnp.ndarray]) -> EmulatorState:
    """Replace the key state with 16 boolean-like values, index i meaning key i."""
    keypad = jnp.asarray(keys, dtype=jnp.bool_)
    if keypad.shape != (NUM_KEYS,):
        raise ValueError(f"Expected {NUM_KEYS} key states, got shape {keypad.shape}")
    return state.replace(keypad=keypad)


def load_program(state: EmulatorState, program: bytes) -> EmulatorState:
    """Copy program bytes into CHIP-8 memory starting at 0x200."""
    program = bytes(program)
    if len(program) > MAX_PROGRAM_SIZE:
        raise ProgramTooLargeError(len(program), MAX_PROGRAM_SIZE)
    if not program:
        return state
    rom_array = jnp.array(list(program), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(program)].set(rom_array)
    return state.replace(memory=new_memory)


def read_rom(filename: Union[str, os.PathLike]) -> bytes:
    """Read a ROM image from disk."""
    if not os.path.isfile(filename):
        raise ProgramNotFoundError(filename)
    try:
        with open(filename, 'rb') as f:
            return f.read()
    except OSError as e:
        raise ProgramNotFoundError(filename, reason=f"could not be read ({e.strerror})") from e


def load_rom(state: EmulatorState, filename: Union[str, os.PathLike]) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200."""
    return load_program(state, read_rom(filename))


def run_instruction(state, _):
    state = cycle(state)
    return state, None


@partial(jax.jit, static_argnums=1)
def run_n_instruction(state: EmulatorState, n: int) -> EmulatorState:
    state, _ = jax.lax.scan(run_instruction, state, length=n)
    return state


def run_cycles(state: EmulatorState, n: int, progress: bool = False, desc: str = "Cycles") -> EmulatorState:
    """Run ``n`` cycles without ticking the timers.

    Args:
        state: Starting state
        n: Number of fetch-decode-execute cycles
        progress: Show a tqdm progress bar while the scan runs
        desc: Progress bar label
    """
    if not progress:
        return run_n_instruction(state, n)

    @scan_with_progress(n, desc=desc)
    def step(state, i):
        return run_instruction(state, i)

    state, _ = jax.jit(lambda s: jax.lax.scan(step, s, jnp.arange(n)))(state)
    return state


@partial(jax.jit, static_argnums=1)
def run_frame(state: EmulatorState, cycles_per_frame: int) -> EmulatorState:
    """Run one 60 Hz frame: ``cycles_per_frame`` cycles followed by a timer tick."""
    state, _ = jax.lax.scan(run_instruction, state, length=cycles_per_frame)
    return tick_timers(state)
