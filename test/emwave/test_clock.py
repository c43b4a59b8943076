import math

import pytest

from emwave.simulation import SimulationClock


class Counter:
    def __init__(self):
        self.n = 0

    def __call__(self):
        self.n += 1


class TestSimulationClock:

    def test_whole_steps(self):
        clock = SimulationClock(dt=0.1)
        advance = Counter()
        assert clock.tick(0.35, advance) == 3
        assert advance.n == 3
        assert clock.steps == 3
        assert clock.time == pytest.approx(0.3)
        assert clock.accumulator == pytest.approx(0.05)

        # leftover carries into the next call
        assert clock.tick(0.06, advance) == 1
        assert clock.time == pytest.approx(0.4)
        assert clock.accumulator == pytest.approx(0.01)

    @pytest.mark.parametrize("elapsed", [0.0, -1.0, math.nan, math.inf, -math.inf, None, "x"])
    def test_invalid_elapsed_is_noop(self, elapsed):
        clock = SimulationClock(dt=0.1)
        advance = Counter()
        assert clock.tick(elapsed, advance) == 0
        assert advance.n == 0
        assert clock.time == 0.0
        assert clock.accumulator == 0.0

    def test_substep_cap(self):
        clock = SimulationClock(dt=0.01, max_substeps=8)
        advance = Counter()
        assert clock.tick(1.0, advance) == 8
        assert clock.time == pytest.approx(0.08)
        assert clock.accumulator == pytest.approx(0.08)
        assert clock.saturated

        # the backlog drains at most max_substeps per call
        assert clock.tick(1e-6, advance) == 8
        assert clock.steps == 16

    def test_count_step_and_reset(self):
        clock = SimulationClock(dt=0.25)
        clock.count_step()
        clock.count_step()
        assert clock.time == 0.5
        clock.tick(0.1, Counter())
        clock.reset()
        assert (clock.steps, clock.time, clock.accumulator) == (0, 0.0, 0.0)


if __name__ == '__main__':
    pytest.main(['test/emwave/test_clock.py', '-qs', '--disable-warnings'])
