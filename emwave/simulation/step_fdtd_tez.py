from typing import Optional, Dict, Any, Tuple
import math
import warnings

import numpy as np

from ..config import TINY


class StepFDTDTEz:
    """
    Explicit leapfrog stepper for the 2D TEz Maxwell system (Ex, Ey, Hz).

    All components live on the same ``(ny, nx)`` sample grid. Hz is advanced
    from the forward-difference curl of E on samples ``[0, ny-1) x
    [0, nx-1)``; Ex, Ey are advanced from the backward-difference curl of Hz
    on the interior samples. Losses are applied with the semi-implicit
    (trapezoidal) form

        F_new = c1 * F_old + c2 * curl

    with ``c1 = (1 - s dt/2) / (1 + s dt/2)``, which stays bounded for any
    non-negative loss ``s``.

    The magnetic loss is tied to the electric one by the matched-layer
    approximation ``sigma_m = sigma_e * mu / eps``, applied everywhere the
    electric loss is (absorbing band, lossy materials, uniform attenuation).

    Attributes:
        mesh: UniformGridMesher
        dt: Time step size
        mu: Permeability (normalised to 1)
        eps: Base permittivity ``1 / c**2``
        courant: ``c * dt * sqrt(1/dx**2 + 1/dy**2)``
    """

    def __init__(self, mesh, dt: float, wave_speed: float, dtype: Any = np.float64):
        """
        Initialize stepper.

        Args:
            mesh: UniformGridMesher
            dt: Time step size
            wave_speed: Wave speed in vacuum, sets ``eps = 1 / c**2``
            dtype: Floating point type of the coefficient arrays
        """
        self.mesh = mesh
        self.dt = float(dt)
        self.dtype = dtype
        self.wave_speed = float(wave_speed)

        self.mu = 1.0
        self.eps = 1.0 / (self.wave_speed * self.wave_speed)

        self.inv_dx = 1.0 / max(TINY, mesh.dx)
        self.inv_dy = 1.0 / max(TINY, mesh.dy)
        self.courant = self.wave_speed * self.dt * math.sqrt(
            self.inv_dx * self.inv_dx + self.inv_dy * self.inv_dy)

        self._check_stability()

    def _check_stability(self) -> None:
        """Check the 2D CFL condition of the explicit update."""
        if self.courant >= 1.0:
            warnings.warn(
                f"CFL stability condition violated: courant={self.courant:.3f} >= 1",
                RuntimeWarning)

    # ---------------- Loss coefficients ----------------
    def prepare(self, eps_r: Optional[np.ndarray], sigma_e: np.ndarray) -> None:
        """
        Precompute and cache the update coefficients.

        Args:
            eps_r: Relative permittivity per sample, or None for vacuum
            sigma_e: Total electric loss per sample (absorbing band +
                     material conductivity + uniform attenuation)
        """
        dt, mu = self.dt, self.mu
        if eps_r is None:
            eps_cell = np.full(self.mesh.shape, self.eps, dtype=self.dtype)
        else:
            eps_cell = self.eps * np.asarray(eps_r, dtype=self.dtype)
        eps_cell = np.maximum(eps_cell, TINY)

        sigma_m = sigma_e * (mu / eps_cell)
        sh = sigma_m * dt / (2.0 * mu)
        self.ch1 = ((1.0 - sh) / (1.0 + sh)).astype(self.dtype)
        self.ch2 = ((dt / mu) / (1.0 + sh)).astype(self.dtype)

        se = sigma_e * dt / (2.0 * eps_cell)
        self.ce1 = ((1.0 - se) / (1.0 + se)).astype(self.dtype)
        self.ce2 = ((dt / eps_cell) / (1.0 + se)).astype(self.dtype)

        self._prepared = True

    def invalidate(self) -> None:
        """Drop cached coefficients after a material or loss change."""
        if hasattr(self, "_prepared"):
            delattr(self, "_prepared")

    @property
    def prepared(self) -> bool:
        return getattr(self, "_prepared", False)

    # ---------------- One-step updates ----------------
    def update_h(self, E: Dict[str, np.ndarray], H: Dict[str, np.ndarray],
                 metal: Optional[np.ndarray] = None) -> Dict[str, np.ndarray]:
        """
        Advance Hz from the curl of E. Metal samples keep their value.
        """
        ex, ey, hz = E['x'], E['y'], H['z']

        curl_e = ((ex[1:, :-1] - ex[:-1, :-1]) * self.inv_dy
                  - (ey[:-1, 1:] - ey[:-1, :-1]) * self.inv_dx)
        hz_new = self.ch1[:-1, :-1] * hz[:-1, :-1] + self.ch2[:-1, :-1] * curl_e

        if metal is None:
            hz[:-1, :-1] = hz_new
        else:
            hz[:-1, :-1] = np.where(metal[:-1, :-1], hz[:-1, :-1], hz_new)
        return H

    def update_e(self, E: Dict[str, np.ndarray], H: Dict[str, np.ndarray],
                 metal: Optional[np.ndarray] = None) -> Dict[str, np.ndarray]:
        """
        Advance Ex, Ey on interior samples from the curl of Hz.

        TEz form: ``dEx/dt = (1/eps) dHz/dy``, ``dEy/dt = -(1/eps) dHz/dx``.
        Metal samples keep their value.
        """
        ex, ey, hz = E['x'], E['y'], H['z']
        inner = (slice(1, -1), slice(1, -1))

        dhz_dy = (hz[1:-1, 1:-1] - hz[:-2, 1:-1]) * self.inv_dy
        dhz_dx = (hz[1:-1, 1:-1] - hz[1:-1, :-2]) * self.inv_dx
        ce1 = self.ce1[inner]
        ce2 = self.ce2[inner]

        ex_new = ce1 * ex[inner] + ce2 * dhz_dy
        ey_new = ce1 * ey[inner] - ce2 * dhz_dx

        if metal is None:
            ex[inner] = ex_new
            ey[inner] = ey_new
        else:
            m = metal[inner]
            ex[inner] = np.where(m, ex[inner], ex_new)
            ey[inner] = np.where(m, ey[inner], ey_new)
        return E

    def update(self, E: Dict[str, np.ndarray], H: Dict[str, np.ndarray],
               metal: Optional[np.ndarray] = None) -> Tuple[Dict, Dict]:
        """
        Perform one stencil update (H then E) without sources or boundaries.

        Raises:
            RuntimeError: If ``prepare`` has not been called
        """
        if not self.prepared:
            raise RuntimeError("StepFDTDTEz.update() called before prepare()")
        self.update_h(E, H, metal)
        self.update_e(E, H, metal)
        return E, H
