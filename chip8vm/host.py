"""pygame host shell: window, keyboard, beeper and the real-time loop."""

import jax
import numpy as np
import pygame
from omegaconf import DictConfig

from chip8vm.config import to_quirks, validate_config
from chip8vm.constants import NUM_KEYS, SCREEN_WIDTH, SCREEN_HEIGHT
from chip8vm.errors import Chip8Error
from chip8vm.logging import EmulatorLogger
from chip8vm.machine import Chip8
from chip8vm.pacing import Scheduler
from chip8vm.rendering import chip8_display_to_rgb, create_color_scheme

# Four keyboard rows, left to right, map to keys 0x0-0xF in order
KEY_MAP = {
    pygame.K_1: 0x0, pygame.K_2: 0x1, pygame.K_3: 0x2, pygame.K_4: 0x3,
    pygame.K_q: 0x4, pygame.K_w: 0x5, pygame.K_e: 0x6, pygame.K_r: 0x7,
    pygame.K_a: 0x8, pygame.K_s: 0x9, pygame.K_d: 0xA, pygame.K_f: 0xB,
    pygame.K_z: 0xC, pygame.K_x: 0xD, pygame.K_c: 0xE, pygame.K_v: 0xF,
}

SAMPLE_RATE = 44100


def read_keys(pressed) -> list[bool]:
    """16-entry key state from a pygame key-pressed table."""
    keys = [False] * NUM_KEYS
    for key, index in KEY_MAP.items():
        if pressed[key]:
            keys[index] = True
    return keys


def square_wave(frequency: int, sample_rate: int = SAMPLE_RATE, volume: float = 0.25) -> np.ndarray:
    """One second of a mono int16 square wave."""
    t = np.arange(sample_rate) / sample_rate
    wave = np.sign(np.sin(2 * np.pi * frequency * t))
    return (wave * volume * np.iinfo(np.int16).max).astype(np.int16)


class Beeper:
    """Looping tone that follows the sound timer."""

    def __init__(self, frequency: int = 440):
        pygame.mixer.init(frequency=SAMPLE_RATE, size=-16, channels=1)
        self.sound = pygame.mixer.Sound(buffer=square_wave(frequency).tobytes())
        self.playing = False

    def update(self, sound_timer: int):
        if sound_timer > 0 and not self.playing:
            self.sound.play(loops=-1)
            self.playing = True
        elif sound_timer == 0 and self.playing:
            self.stop()

    def stop(self):
        if self.playing:
            self.sound.stop()
            self.playing = False


def present(screen, machine: Chip8, colors, scale: int):
    """Copy the framebuffer to the window."""
    on_color, off_color = colors
    rgb = chip8_display_to_rgb(machine.state.display, scale, on_color, off_color)
    surface = pygame.surfarray.make_surface(rgb.swapaxes(0, 1))
    screen.blit(surface, (0, 0))
    pygame.display.flip()


def run_host(cfg: DictConfig):
    """Run a ROM in a window until it is closed or ESC is pressed."""
    validate_config(cfg)
    logger = EmulatorLogger(log_level=cfg.log_level)

    rng = jax.random.PRNGKey(cfg.seed) if cfg.seed is not None else None
    machine = Chip8(quirks=to_quirks(cfg), strict=cfg.strict, rng=rng, logger=logger)
    machine.load_file(cfg.rom)

    pygame.init()
    screen = pygame.display.set_mode((SCREEN_WIDTH * cfg.scale, SCREEN_HEIGHT * cfg.scale))
    pygame.display.set_caption("Chip-8 Emulator")
    colors = create_color_scheme(cfg.color_scheme)
    beeper = Beeper(cfg.beep_frequency) if cfg.sound else None
    scheduler = Scheduler(cfg.cpu_frequency, cfg.timer_frequency)

    logger.info(f"CPU {cfg.cpu_frequency} Hz, timers {cfg.timer_frequency} Hz, quirks {machine.quirks}")

    running = True
    clock = pygame.time.Clock()
    try:
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    running = False

            machine.set_keys(read_keys(pygame.key.get_pressed()))

            # Blocks until the next timer period, returns elapsed milliseconds
            cycles, ticks = scheduler.advance(clock.tick(cfg.timer_frequency) / 1000)

            for _ in range(cycles):
                machine.step()
            for _ in range(ticks):
                machine.tick_timers()

            if ticks:
                present(screen, machine, colors, cfg.scale)
                if beeper:
                    beeper.update(machine.sound_timer)
    except Chip8Error as e:
        logger.error(str(e))
        logger.log_registers(machine.state, level="ERROR")
        raise
    finally:
        if beeper:
            beeper.stop()
        pygame.quit()
