"""Command line entry point: ``python -m chip8vm rom=game.ch8 cpu_frequency=700``."""

import hydra
from omegaconf import DictConfig

from chip8vm.config import HostConfig  # noqa: F401  registers the "config" node
from chip8vm.host import run_host


@hydra.main(version_base=None, config_name="config")
def main(cfg: DictConfig) -> None:
    run_host(cfg)


if __name__ == "__main__":
    main()
