"""CHIP-8 interpreter package."""

from chip8vm.state import EmulatorState, Quirks, create_state
from chip8vm.emulator import (
    execute, fetch, peek, cycle, tick_timers, set_keypad, load_program, load_rom, read_rom,
    run_n_instruction, run_cycles, run_frame,
)
from chip8vm.decode import DecodedInstruction, decode, is_mapped
from chip8vm.constants import *
from chip8vm.errors import (
    Chip8Error, ProgramLoadError, ProgramNotFoundError, ProgramTooLargeError,
    ProgramAlreadyLoadedError, UnmappedOpcodeError,
)
from chip8vm.machine import Chip8
from chip8vm.rendering import chip8_display_to_rgb, create_color_scheme, framebuffer_pixels

__all__ = [
    "EmulatorState",
    "Quirks",
    "create_state",
    "fetch",
    "peek",
    "execute",
    "cycle",
    "tick_timers",
    "set_keypad",
    "load_program",
    "load_rom",
    "read_rom",
    "run_n_instruction",
    "run_cycles",
    "run_frame",
    "DecodedInstruction",
    "decode",
    "is_mapped",
    "Chip8",
    "Chip8Error",
    "ProgramLoadError",
    "ProgramNotFoundError",
    "ProgramTooLargeError",
    "ProgramAlreadyLoadedError",
    "UnmappedOpcodeError",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "chip8_display_to_rgb",
    "create_color_scheme",
    "framebuffer_pixels",
]
