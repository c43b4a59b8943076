from dataclasses import dataclass
from typing import Optional, Dict, Any, List
import math
import warnings

import numpy as np

from .config import (
    DEFAULT_CFL, CFL_RANGE, DEFAULT_AVG_TAU, MIN_AVG_TAU, MAX_SUBSTEPS,
    DEFAULT_PML_WIDTH, clamp
)
from .model.computational_model import ComputationalModel
from .simulation.clock import SimulationClock
from .simulation.pml import clamp_pml_width, build_pml_profile


@dataclass(frozen=True)
class Stats:
    """
    Summary of the latest step.

    Attributes:
        time: Simulated time
        max_instantaneous: Largest instantaneous magnitude
        mean_instantaneous: Mean instantaneous magnitude over samples
                            outside the absorbing band
    """
    time: float = 0.0
    max_instantaneous: float = 0.0
    mean_instantaneous: float = 0.0


def _finite_or(value: Any, default: float) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError):
        return default
    return value if math.isfinite(value) else default


def _readonly(arr: np.ndarray) -> np.ndarray:
    view = arr.view()
    view.flags.writeable = False
    return view


class FixedStepModel(ComputationalModel):
    """
    Shared machinery of the real-time field models.

    Subclasses own the field state and implement ``_advance`` (one fixed
    step, ending with ``_update_outputs``) and ``_reset_fields``. This class
    derives ``dt`` from the grid, drives ``_advance`` from variable frame
    times through a SimulationClock, builds the absorbing band and keeps the
    instantaneous / averaged magnitude outputs and statistics.

    Options (all optional):
        cfl: Courant safety factor, default 0.45
        avg_tau: Averaging time constant of the magnitude EMA, default 0.35
        pml_width: Absorbing band width in samples, default 24, 0 disables
        max_substeps: Step cap per ``step`` call, default 8
        check_finite: Warn when outputs contain NaN/Inf, default False
        dtype: Field dtype, default 'float64'
        log_every: ``run`` progress logging period in steps, default 100
        log_level: Logger level, applied only when given
    """

    def __init__(self, mesh, wave_speed: float, options: Optional[Dict[str, Any]] = None):
        self.options = dict(options or {})
        super().__init__(log_level=self.options.get('log_level'))

        self.mesh = mesh
        self.wave_speed = wave_speed
        self.dtype = np.dtype(self.options.get('dtype', 'float64'))

        self.cfl = clamp(_finite_or(self.options.get('cfl', DEFAULT_CFL), DEFAULT_CFL), *CFL_RANGE)
        self.avg_tau = max(MIN_AVG_TAU, _finite_or(self.options.get('avg_tau', DEFAULT_AVG_TAU),
                                                   DEFAULT_AVG_TAU))
        self.check_finite = bool(self.options.get('check_finite', False))
        self.log_every = max(1, int(self.options.get('log_every', 100)))

        min_cell = min(mesh.dx, mesh.dy)
        self._dt = self.cfl * min_cell / (wave_speed * math.sqrt(2.0))
        self.clock = SimulationClock(self._dt, self.options.get('max_substeps', MAX_SUBSTEPS))

        self.pml_width = clamp_pml_width(self.options.get('pml_width', DEFAULT_PML_WIDTH),
                                         mesh.nx, mesh.ny)
        self.pml = build_pml_profile(mesh, self.pml_width, wave_speed, dtype=self.dtype)

        self._instantaneous = mesh.init_field_matrix(self.dtype)
        self._avg_power = mesh.init_field_matrix(self.dtype)
        self._avg_magnitude = mesh.init_field_matrix(self.dtype)
        self._max_inst = 0.0
        self._mean_inst = 0.0

    # ---------------- Grid metadata ----------------
    @property
    def nx(self) -> int:
        return self.mesh.nx

    @property
    def ny(self) -> int:
        return self.mesh.ny

    @property
    def dx(self) -> float:
        return self.mesh.dx

    @property
    def dy(self) -> float:
        return self.mesh.dy

    @property
    def dt(self) -> float:
        return self._dt

    @property
    def time(self) -> float:
        return self.clock.time

    @property
    def pml_mask(self) -> Optional[np.ndarray]:
        return None if self.pml is None else self.pml.mask

    # ---------------- Time stepping ----------------
    def step(self, elapsed: float) -> int:
        """
        Advance by the whole fixed steps contained in ``elapsed`` seconds
        plus any time carried over from earlier calls.

        Non-finite or non-positive ``elapsed`` is a no-op.

        Returns:
            Number of fixed steps taken
        """
        count = self.clock.tick(elapsed, self._advance)
        if count and self.clock.saturated:
            self.logger.debug(
                f"Sub-step cap reached ({count} steps), accumulator clamped to "
                f"{self.clock.accumulator:.3e}s")
        return count

    def run_one_step(self) -> None:
        """Advance exactly one fixed step, bypassing the accumulator."""
        self._advance()
        self.clock.count_step()

    def run(self, nt: int, save_every: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Run ``nt`` fixed steps.

        Args:
            nt: Number of steps
            save_every: If given, keep a snapshot of the magnitude outputs
                        every ``save_every`` steps

        Returns:
            List of snapshots ``{'step', 'time', 'instantaneous', 'averaged'}``
        """
        history = []
        for n in range(int(nt)):
            self.run_one_step()

            if save_every and (n + 1) % save_every == 0:
                history.append({
                    'step': self.clock.steps,
                    'time': self.clock.time,
                    'instantaneous': self._instantaneous.copy(),
                    'averaged': self._avg_magnitude.copy(),
                })
            if (n + 1) % self.log_every == 0:
                self.logger.info(f"Step {n + 1}/{nt}, t={self.clock.time:.3e}s")
        return history

    def reset(self) -> None:
        """Zero fields, outputs, statistics and the clock; keep sources and materials."""
        self._reset_fields()
        self._instantaneous.fill(0.0)
        self._avg_power.fill(0.0)
        self._avg_magnitude.fill(0.0)
        self._max_inst = 0.0
        self._mean_inst = 0.0
        self.clock.reset()

    def _advance(self) -> None:
        raise NotImplementedError

    def _reset_fields(self) -> None:
        raise NotImplementedError

    # ---------------- Outputs ----------------
    def _update_outputs(self, magnitude: np.ndarray) -> None:
        """
        Store the instantaneous magnitude, update the power EMA and the
        statistics. Samples in the absorbing band read as zero.
        """
        inst = self._instantaneous
        inst[...] = magnitude

        alpha = min(1.0, self._dt / self.avg_tau)
        self._avg_power += alpha * (inst * inst - self._avg_power)

        mask = self.pml_mask
        if mask is not None:
            inst[mask] = 0.0
            self._avg_power[mask] = 0.0
        np.sqrt(self._avg_power, out=self._avg_magnitude)

        if self.check_finite and not np.all(np.isfinite(inst)):
            warnings.warn(
                f"Non-finite field values at t={self.clock.time:.3e}s", RuntimeWarning)

        self._max_inst = float(np.max(inst))
        if mask is None:
            self._mean_inst = float(np.mean(inst))
        else:
            interior = inst[~mask]
            self._mean_inst = float(np.mean(interior)) if interior.size else 0.0

    def get_instantaneous_magnitude(self) -> np.ndarray:
        """Read-only ``(ny, nx)`` instantaneous magnitude."""
        return _readonly(self._instantaneous)

    def get_averaged_magnitude(self) -> np.ndarray:
        """Read-only ``(ny, nx)`` time-averaged (RMS) magnitude."""
        return _readonly(self._avg_magnitude)

    def get_stats(self) -> Stats:
        return Stats(
            time=self.clock.time,
            max_instantaneous=self._max_inst,
            mean_instantaneous=self._mean_inst,
        )
