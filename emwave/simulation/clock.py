from typing import Callable
import math

from ..config import MAX_SUBSTEPS


class SimulationClock:
    """
    Converts variable frame times into whole fixed-size steps.

    Elapsed wall-clock time is added to an accumulator and drained in units
    of ``dt``. At most ``max_substeps`` steps run per ``tick``; if more time
    is left after that, the accumulator is capped at ``dt * max_substeps``
    so simulated time lags behind under sustained overload instead of
    catching up in a burst.

    Attributes:
        dt: Fixed step size
        steps: Number of fixed steps taken
        time: Simulated time, ``steps * dt``
        accumulator: Real time not yet converted into steps
    """

    def __init__(self, dt: float, max_substeps: int = MAX_SUBSTEPS):
        self.dt = float(dt)
        self.max_substeps = max(1, int(max_substeps))
        self.steps = 0
        self.time = 0.0
        self.accumulator = 0.0

    def tick(self, elapsed: float, advance: Callable[[], None]) -> int:
        """
        Add ``elapsed`` seconds and run ``advance`` once per whole step.

        Non-finite or non-positive ``elapsed`` is ignored.

        Returns:
            Number of steps run
        """
        try:
            elapsed = float(elapsed)
        except (TypeError, ValueError):
            return 0
        if not math.isfinite(elapsed) or elapsed <= 0:
            return 0

        self.accumulator += elapsed
        dt = self.dt
        count = 0
        while self.accumulator >= dt and count < self.max_substeps:
            advance()
            self.accumulator -= dt
            self.count_step()
            count += 1

        if self.accumulator >= dt and count >= self.max_substeps:
            self.accumulator = min(self.accumulator, dt * self.max_substeps)
        return count

    def count_step(self) -> None:
        """Advance simulated time by one step without touching the accumulator."""
        self.steps += 1
        self.time = self.steps * self.dt

    @property
    def saturated(self) -> bool:
        """True when at least one whole step is still pending."""
        return self.accumulator >= self.dt

    def reset(self) -> None:
        self.steps = 0
        self.time = 0.0
        self.accumulator = 0.0
