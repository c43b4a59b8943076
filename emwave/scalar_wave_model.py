from typing import Optional, Dict, Any, Sequence

import numpy as np

from .config import SCALAR_WAVE_SPEED_RANGE, SCALAR_ATTENUATION_RANGE, clamp
from .fixed_step_model import FixedStepModel, _finite_or, _readonly
from .model.source import SourceManager, Source
from .model.shape import Shape
from .simulation.material_map import build_barrier_mask
from .simulation.step_scalar_wave import StepScalarWave


class ScalarWaveModel(FixedStepModel):
    """
    Simplified real-time model of a single damped scalar wave ``u``.

    Shares the public interface of TEzFDTDModel. Every obstacle shape acts
    as a hard barrier (``u = 0``) whatever its material, and the magnitude
    output is ``|u|``.
    """

    def __init__(self, mesh, wave_speed: float = 1.0, attenuation: float = 0.0,
                 options: Optional[Dict[str, Any]] = None):
        wave_speed = clamp(_finite_or(wave_speed, 1.0), *SCALAR_WAVE_SPEED_RANGE)
        super().__init__(mesh, wave_speed, options)

        self.attenuation = clamp(_finite_or(attenuation, 0.0), *SCALAR_ATTENUATION_RANGE)

        self.stepper = StepScalarWave(mesh, self.dt, wave_speed, dtype=self.dtype)
        self.source_manager = SourceManager(mesh)
        self.barrier = None

        sigma = np.full(mesh.shape, self.attenuation, dtype=self.dtype)
        if self.pml is not None:
            sigma += self.pml.sigma
        # plain leapfrog when lossless
        self.sigma = sigma if np.any(sigma > 0) else None

        self.logger.info(
            f"Scalar wave model: grid {mesh.nx}x{mesh.ny}, dt={self.dt:.4e}, "
            f"pml_width={self.pml_width}")

    def set_sources(self, sources: Optional[Sequence[Source]]) -> int:
        count = self.source_manager.set_sources(sources)
        self.logger.info(f"Set {count} active sources")
        return count

    def set_materials_from_shapes(self, shapes: Optional[Sequence[Shape]]) -> None:
        """Rebuild the barrier mask; an empty list removes all barriers."""
        self.barrier = build_barrier_mask(self.mesh, shapes)
        n = int(np.count_nonzero(self.barrier)) if self.barrier is not None else 0
        self.logger.info(f"Set barrier from {len(shapes) if shapes else 0} shapes ({n} samples)")

    def _zero_edges(self, arr: np.ndarray) -> None:
        arr[0, :] = 0.0
        arr[-1, :] = 0.0
        arr[:, 0] = 0.0
        arr[:, -1] = 0.0

    def _advance(self) -> None:
        t = self.clock.time
        stepper = self.stepper

        for buf in (stepper.prev, stepper.curr):
            self._zero_edges(buf)
        if self.barrier is not None:
            stepper.zero(self.barrier)

        nxt = stepper.update(self.sigma)
        self.source_manager.apply_scalar(t, nxt)

        if self.barrier is not None:
            nxt[self.barrier] = 0.0
        self._zero_edges(nxt)

        stepper.rotate()
        self._update_outputs(np.abs(stepper.curr))

    def _reset_fields(self) -> None:
        self.stepper.reset()

    def field(self, name: str = "u") -> np.ndarray:
        """
        Read-only view of the current scalar field.

        Raises:
            ValueError: For a name other than 'u'
        """
        if name != "u":
            raise ValueError(f"Unknown field component: {name!r}, expected 'u'")
        return _readonly(self.stepper.curr)

    def __str__(self) -> str:
        s = []
        s.append("ScalarWaveModel")
        s.append(f"  Grid               : {self.nx} x {self.ny}, dx={self.dx:.4g}, dy={self.dy:.4g}")
        s.append(f"  Wave speed, loss   : c={self.wave_speed}, attenuation={self.attenuation}")
        s.append(f"  Time step          : dt={self.dt:.4e} (cfl={self.cfl})")
        s.append(f"  PML width          : {self.pml_width}")
        s.append(f"  Sources            : {len(self.source_manager)}")
        s.append(f"  Time               : t={self.time:.4e} ({self.clock.steps} steps)")
        return "\n".join(s)
