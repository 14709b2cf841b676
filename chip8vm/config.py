"""Structured configuration for the CHIP-8 host shell."""

from dataclasses import dataclass, field
from typing import Optional

from hydra.core.config_store import ConfigStore
from omegaconf import DictConfig, OmegaConf

from chip8vm.state import Quirks
from chip8vm.rendering import create_color_scheme
from chip8vm.logging import level_rank


@dataclass
class QuirkConfig:
    shift_uses_vy: bool = False
    jump_offset_uses_vx: bool = False


@dataclass
class HostConfig:
    """Host shell settings.

    Attributes:
        rom: Path to the program image to run
        cpu_frequency: Instructions executed per second
        timer_frequency: Timer ticks and display refreshes per second
        scale: Window pixels per CHIP-8 pixel
        color_scheme: Name understood by ``create_color_scheme``
        strict: Stop on unmapped opcodes instead of ignoring them
        sound: Play a tone while the sound timer is non-zero
        beep_frequency: Tone pitch in Hz
        seed: Fixed PRNG seed; the clock is used when unset
        log_level: Console logger level
    """
    rom: Optional[str] = None
    cpu_frequency: int = 500
    timer_frequency: int = 60
    scale: int = 20
    color_scheme: str = "white"
    strict: bool = False
    sound: bool = True
    beep_frequency: int = 440
    seed: Optional[int] = None
    log_level: str = "INFO"
    quirks: QuirkConfig = field(default_factory=QuirkConfig)


cs = ConfigStore.instance()
cs.store(name="config", node=HostConfig)


def load_config(overrides: Optional[list] = None) -> DictConfig:
    """Build a config from defaults and ``key=value`` overrides."""
    cfg = OmegaConf.structured(HostConfig)
    if overrides:
        cfg = OmegaConf.merge(cfg, OmegaConf.from_dotlist(list(overrides)))
    return cfg


def validate_config(cfg: DictConfig) -> DictConfig:
    """Reject settings the host cannot run with."""
    if not cfg.rom:
        raise ValueError("No ROM given; pass rom=<path>")
    for key in ("cpu_frequency", "timer_frequency", "scale"):
        if cfg[key] <= 0:
            raise ValueError(f"{key} must be positive, got {cfg[key]}")
    if cfg.sound and cfg.beep_frequency <= 0:
        raise ValueError(f"beep_frequency must be positive, got {cfg.beep_frequency}")
    create_color_scheme(cfg.color_scheme)
    level_rank(cfg.log_level)
    return cfg


def to_quirks(cfg: DictConfig) -> Quirks:
    """Core quirks from the ``quirks`` section."""
    return Quirks(
        shift_uses_vy=bool(cfg.quirks.shift_uses_vy),
        jump_offset_uses_vx=bool(cfg.quirks.jump_offset_uses_vx),
    )
