"""Wall-clock pacing for the host loop."""


class Scheduler:
    """Turns elapsed time into due CPU cycles and timer ticks.

    Two independent cadences: the CPU rate and the timer rate. Fractions of a
    period carry over between calls so long runs do not drift.
    """

    def __init__(self, cpu_frequency: int = 500, timer_frequency: int = 60, max_catch_up: float = 0.25):
        if cpu_frequency <= 0 or timer_frequency <= 0:
            raise ValueError("Frequencies must be positive")
        self.cpu_frequency = cpu_frequency
        self.timer_frequency = timer_frequency
        self.max_catch_up = max_catch_up
        self._cpu_budget = 0.0
        self._timer_budget = 0.0

    def advance(self, elapsed: float) -> tuple[int, int]:
        """Account for ``elapsed`` seconds.

        Returns:
            (cycles, ticks) due now. Stalls longer than ``max_catch_up`` seconds
            are truncated so a paused window does not replay a burst of cycles.
        """
        if elapsed < 0:
            raise ValueError(f"Elapsed time cannot be negative, got {elapsed}")
        elapsed = min(elapsed, self.max_catch_up)

        self._cpu_budget += elapsed * self.cpu_frequency
        self._timer_budget += elapsed * self.timer_frequency

        cycles = int(self._cpu_budget)
        ticks = int(self._timer_budget)
        self._cpu_budget -= cycles
        self._timer_budget -= ticks
        return cycles, ticks

    def reset(self):
        self._cpu_budget = 0.0
        self._timer_budget = 0.0
