"""Console output for the CHIP-8 interpreter.

``ConsoleLogger`` prints levelled, optionally coloured lines with a time offset
from logger creation. ``EmulatorLogger`` adds program-load, fault and register
dump messages. ``scan_with_progress`` reports a compiled scan's progress to a
tqdm bar through ordered io_callbacks.
"""

import sys
import time
from typing import Callable

import jax
from jax.experimental import io_callback
from tqdm import tqdm

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}
RESET = "\033[0m"


def level_rank(level: str) -> int:
    """Position of ``level`` in ``LEVELS``; unknown names raise ValueError."""
    level = level.upper()
    if level not in LEVELS:
        raise ValueError(f"Unknown log level '{level}'. Available: {list(LEVELS)}")
    return LEVELS.index(level)


class ConsoleLogger:
    """Prints ``[   1.23s][    INFO][name] message`` lines to stdout."""

    def __init__(
        self,
        name: str = "chip8vm",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
    ):
        self.name = name
        self.log_level = log_level.upper()
        self.threshold = level_rank(log_level)
        isatty = getattr(sys.stdout, "isatty", None)
        self.use_colors = use_colors and isatty is not None and isatty()
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

    def enabled(self, level: str) -> bool:
        return level_rank(level) >= self.threshold

    def log(self, level: str, message: str):
        level = level.upper()
        if not self.enabled(level):
            return
        tag = f"[{level:>8s}]"
        if self.use_colors:
            tag = f"{COLORS[level]}{tag}{RESET}"
        stamp = f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        print(f"{stamp}{tag}[{self.name}] {message}", flush=True)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)

    def critical(self, message: str):
        self.log("CRITICAL", message)


class EmulatorLogger(ConsoleLogger):
    """Logger with helpers for interpreter events."""

    def log_program_loaded(self, source: str, size: int):
        """Log a successful program load."""
        self.info(f"Loaded {source} ({size} bytes at 0x200)")

    def log_unmapped_opcode(self, opcode: int, address: int):
        """Log an opcode that selects no instruction."""
        self.warning(f"Unmapped opcode 0x{opcode:04X} at 0x{address:03X}")

    def log_registers(self, state, level: str = "DEBUG"):
        """Dump pc, I, timers, stack pointer and V0-VF."""
        if not self.enabled(level):
            return
        self.log(
            level,
            f"PC=0x{int(state.pc):03X} I=0x{int(state.I):03X} "
            f"SP={int(state.stack.pointer)} DT={int(state.delay_timer)} ST={int(state.sound_timer)}",
        )
        for row in range(0, 16, 4):
            registers = " ".join(f"V{j:X}={int(state.V[j]):02X}" for j in range(row, row + 4))
            self.log(level, registers)


def scan_with_progress(n: int, desc: str = "Cycles") -> Callable:
    """Decorate a ``jax.lax.scan`` body so a tqdm bar follows it.

    The body must be scanned over ``jnp.arange(n)``. The bar opens on the first
    iteration, is brought up to date every ``n // 20`` iterations and closes on
    the last one.
    """
    stride = max(1, n // 20)
    bars = {}

    def _open():
        bars[desc] = tqdm(total=n, desc=desc, unit="cycle")

    def _update(done):
        bar = bars[desc]
        bar.update(int(done) - bar.n)
        if int(done) == n:
            bars.pop(desc).close()

    def decorator(body):
        def wrapped(carry, i):
            jax.lax.cond(
                i == 0,
                lambda _: io_callback(_open, None, ordered=True),
                lambda _: None,
                operand=None,
            )
            result = body(carry, i)
            done = i + 1
            jax.lax.cond(
                (done % stride == 0) | (done == n),
                lambda d: io_callback(_update, None, d, ordered=True),
                lambda d: None,
                done,
            )
            return result

        return wrapped

    return decorator
