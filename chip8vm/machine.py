"""Stateful CHIP-8 machine wrapping the functional core."""

import os
from typing import Optional, Sequence, Union

import jax
import jax.numpy as jnp
import numpy as np

from chip8vm.state import EmulatorState, Quirks, create_state
from chip8vm.decode import is_mapped
from chip8vm.emulator import cycle, peek, tick_timers, set_keypad, load_program, read_rom, run_frame
from chip8vm.errors import ProgramAlreadyLoadedError, UnmappedOpcodeError
from chip8vm.logging import EmulatorLogger
from chip8vm.rendering import framebuffer_pixels

_jit_cycle = jax.jit(cycle)
_jit_tick_timers = jax.jit(tick_timers)


class Chip8:
    """CHIP-8 interpreter with an imperative load/step/tick interface.

    Holds an ``EmulatorState`` and replaces it on every call. The host decides
    how often ``step`` and ``tick_timers`` run; the machine has no notion of
    wall-clock time.
    """

    def __init__(
        self,
        quirks: Optional[Quirks] = None,
        strict: bool = False,
        rng: Optional[jax.Array] = None,
        logger: Optional[EmulatorLogger] = None,
    ):
        """Create a machine with zeroed registers and the font in memory.

        Args:
            quirks: Shift and jump-offset behaviour, fixed for the machine's lifetime
            strict: Raise ``UnmappedOpcodeError`` instead of ignoring unmapped opcodes
            rng: PRNG key for CXNN; seeded from the clock when omitted
            logger: Logger for load and fault messages
        """
        self.quirks = quirks if quirks is not None else Quirks()
        self.strict = strict
        self.logger = logger if logger is not None else EmulatorLogger(log_level="WARNING")
        self.state: EmulatorState = create_state(rng, self.quirks)
        self._loaded = False

    def load(self, program: bytes, source: str = "program"):
        """Copy a program image to 0x200. A machine accepts a single program."""
        if self._loaded:
            raise ProgramAlreadyLoadedError("A program is already loaded; create a new machine to run another")
        self.state = load_program(self.state, program)
        self._loaded = True
        self.logger.log_program_loaded(source, len(program))

    def load_file(self, path: Union[str, os.PathLike]):
        """Read a ROM file and load it."""
        self.load(read_rom(path), source=os.fspath(path))

    def step(self):
        """Run one fetch-decode-execute cycle."""
        if self.strict:
            opcode = int(peek(self.state))
            if not is_mapped(opcode):
                address = int(self.state.pc)
                self.logger.log_unmapped_opcode(opcode, address)
                raise UnmappedOpcodeError(opcode, address)
        self.state = _jit_cycle(self.state)

    def tick_timers(self):
        """Decrement the delay and sound timers once (host calls this at 60 Hz)."""
        self.state = _jit_tick_timers(self.state)

    def run_frame(self, cycles_per_frame: int):
        """Run a frame worth of cycles then tick the timers, compiled as one scan.

        Strict machines step one cycle at a time so every opcode is checked.
        """
        if self.strict:
            for _ in range(cycles_per_frame):
                self.step()
            self.tick_timers()
        else:
            self.state = run_frame(self.state, cycles_per_frame)

    def set_keys(self, keys: Union[Sequence[bool], jnp.ndarray]):
        """Hand over the 16-entry key state; index i means logical key i."""
        self.state = set_keypad(self.state, keys)

    @property
    def framebuffer(self) -> np.ndarray:
        """Read-only uint32 pixels, row-major 64x32."""
        return framebuffer_pixels(self.state.display)

    @property
    def display(self) -> np.ndarray:
        """Boolean display indexed ``[x, y]``."""
        return np.array(self.state.display, dtype=np.bool_)

    @property
    def sound_timer(self) -> int:
        return int(self.state.sound_timer)

    @property
    def delay_timer(self) -> int:
        return int(self.state.delay_timer)

    @property
    def pc(self) -> int:
        return int(self.state.pc)

    @property
    def registers(self) -> np.ndarray:
        return np.array(self.state.V, dtype=np.uint8)

    @property
    def index(self) -> int:
        return int(self.state.I)
