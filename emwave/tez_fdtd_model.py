from typing import Optional, Dict, Any, Sequence

import numpy as np

from .config import EM_WAVE_SPEED_RANGE, EM_ATTENUATION_RANGE, clamp
from .fixed_step_model import FixedStepModel, _finite_or, _readonly
from .model.source import SourceManager, Source
from .model.shape import Shape
from .simulation.material_map import build_material_map
from .simulation.step_fdtd_tez import StepFDTDTEz

FIELD_NAMES = ("Ex", "Ey", "Hz")


class TEzFDTDModel(FixedStepModel):
    """
    Real-time 2D TEz FDTD model (Ex, Ey, Hz) with graded absorbing layers,
    rasterized materials and point sources.

    Units are normalised: ``mu = 1`` and ``eps = 1 / c**2`` so that the
    vacuum phase speed equals ``wave_speed``.
    """

    def __init__(self, mesh, wave_speed: float = 1.0, attenuation: float = 0.0,
                 options: Optional[Dict[str, Any]] = None):
        """
        Initialize FDTD model.

        Args:
            mesh: UniformGridMesher
            wave_speed: Vacuum wave speed, clamped to [0.05, 50]
            attenuation: Uniform background loss, clamped to [0, 5]
            options: Configuration options, see FixedStepModel; additionally
                     ``legacy_hz_injection`` (bool, default False) adds every
                     source as a continuous wave into Hz after the H update
        """
        wave_speed = clamp(_finite_or(wave_speed, 1.0), *EM_WAVE_SPEED_RANGE)
        super().__init__(mesh, wave_speed, options)

        self.attenuation = clamp(_finite_or(attenuation, 0.0), *EM_ATTENUATION_RANGE)
        self.legacy_hz_injection = bool(self.options.get('legacy_hz_injection', False))

        self.fdtd = StepFDTDTEz(mesh, self.dt, wave_speed, dtype=self.dtype)
        self.source_manager = SourceManager(mesh)
        self.materials = None

        self._init_fields()
        self._prepare_coefficients()

        self.logger.info(
            f"TEz FDTD model: grid {mesh.nx}x{mesh.ny}, dx={mesh.dx:.4g}, dy={mesh.dy:.4g}, "
            f"dt={self.dt:.4e}, courant={self.fdtd.courant:.3f}, pml_width={self.pml_width}")

    def _init_fields(self):
        """Initialize electromagnetic fields."""
        self.E = {comp: self.mesh.init_field_matrix(self.dtype) for comp in 'xy'}
        self.H = {'z': self.mesh.init_field_matrix(self.dtype)}

    def _prepare_coefficients(self):
        """Total electric loss = absorbing band + material + uniform attenuation."""
        sigma_e = np.full(self.mesh.shape, self.attenuation, dtype=self.dtype)
        if self.pml is not None:
            sigma_e += self.pml.sigma
        eps_r = None
        if self.materials is not None:
            sigma_e += self.materials.sigma
            eps_r = self.materials.eps_r
        self.fdtd.prepare(eps_r, sigma_e)

    @property
    def metal_mask(self) -> Optional[np.ndarray]:
        return None if self.materials is None else self.materials.metal_mask

    # ---------------- Scene updates ----------------
    def set_sources(self, sources: Optional[Sequence[Source]]) -> int:
        """
        Replace the active sources. Grid samples are resolved here once.

        Returns:
            Number of active sources
        """
        count = self.source_manager.set_sources(sources)
        self.logger.info(f"Set {count} active sources")
        return count

    def set_materials_from_shapes(self, shapes: Optional[Sequence[Shape]]) -> None:
        """
        Rasterize ``shapes`` into the material arrays and rebuild the update
        coefficients. An empty list restores uniform free space.

        Field values are kept; metal samples are zeroed on the next step.
        """
        self.materials = build_material_map(self.mesh, shapes, dtype=self.dtype)
        self.fdtd.invalidate()
        self._prepare_coefficients()

        n = len(shapes) if shapes else 0
        metal = self.metal_mask
        n_metal = int(np.count_nonzero(metal)) if metal is not None else 0
        self.logger.info(f"Set materials from {n} shapes ({n_metal} metal samples)")

    # ---------------- One fixed step ----------------
    def _advance(self) -> None:
        t = self.clock.time
        E, H = self.E, self.H
        ex, ey, hz = E['x'], E['y'], H['z']
        metal = self.metal_mask

        if metal is not None:
            ex[metal] = 0.0
            ey[metal] = 0.0
            hz[metal] = 0.0

        self.fdtd.update_h(E, H, metal)

        if self.legacy_hz_injection:
            self.source_manager.apply_legacy_hz(t, H, skip_masks=(metal,))

        self.fdtd.update_e(E, H, metal)

        self.source_manager.apply_all(t, E, H, skip_masks=(self.pml_mask, metal))

        for arr in (ex, ey, hz):
            arr[0, :] = 0.0
            arr[-1, :] = 0.0
            arr[:, 0] = 0.0
            arr[:, -1] = 0.0

        self._update_outputs(np.sqrt(ex * ex + ey * ey))

    def _reset_fields(self) -> None:
        for arr in (self.E['x'], self.E['y'], self.H['z']):
            arr.fill(0.0)

    # ---------------- Field access ----------------
    def field(self, name: str) -> np.ndarray:
        """
        Read-only view of one field component.

        Args:
            name: 'Ex', 'Ey' or 'Hz'

        Raises:
            ValueError: For any other name
        """
        if name == "Ex":
            return _readonly(self.E['x'])
        if name == "Ey":
            return _readonly(self.E['y'])
        if name == "Hz":
            return _readonly(self.H['z'])
        raise ValueError(f"Unknown field component: {name!r}, expected one of {FIELD_NAMES}")

    def __str__(self) -> str:
        s = []
        s.append("TEzFDTDModel")
        s.append(f"  Grid               : {self.nx} x {self.ny}, dx={self.dx:.4g}, dy={self.dy:.4g}")
        s.append(f"  Wave speed, loss   : c={self.wave_speed}, attenuation={self.attenuation}")
        s.append(f"  Time step          : dt={self.dt:.4e} (cfl={self.cfl}, "
                 f"courant={self.fdtd.courant:.3f})")
        s.append(f"  PML width          : {self.pml_width}")
        s.append(f"  Sources            : {len(self.source_manager)}")
        s.append(f"  Materials          : {'uniform' if self.materials is None else 'rasterized'}")
        s.append(f"  Time               : t={self.time:.4e} ({self.clock.steps} steps)")
        return "\n".join(s)
