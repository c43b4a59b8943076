from typing import Any, Optional

import numpy as np


class StepScalarWave:
    """
    Second-order leapfrog stepper for the damped scalar wave equation.

    State is an owned triple buffer ``prev / curr / next``. Each update reads
    ``prev`` and ``curr`` and writes only ``next``; ``rotate`` then shifts the
    roles by one slot, so no array is copied between steps.

    The Laplacian uses mirrored edges (an edge sample is its own outer
    neighbour) and losses enter as

        next = (2 curr - prev (1 - s) + lap) / (1 + s),   s = sigma dt / 2
    """

    def __init__(self, mesh, dt: float, wave_speed: float, dtype: Any = np.float64):
        self.mesh = mesh
        self.dt = float(dt)
        self.dtype = dtype

        c2dt2 = (wave_speed * dt) ** 2
        self.coeff_x = c2dt2 / (mesh.dx * mesh.dx)
        self.coeff_y = c2dt2 / (mesh.dy * mesh.dy)

        self._buffers = [mesh.init_field_matrix(dtype) for _ in range(3)]
        self._head = 0

    @property
    def curr(self) -> np.ndarray:
        return self._buffers[self._head]

    @property
    def prev(self) -> np.ndarray:
        return self._buffers[(self._head - 1) % 3]

    @property
    def next(self) -> np.ndarray:
        return self._buffers[(self._head + 1) % 3]

    def rotate(self) -> None:
        """``next`` becomes ``curr``, ``curr`` becomes ``prev``."""
        self._head = (self._head + 1) % 3

    def update(self, sigma: Optional[np.ndarray] = None) -> np.ndarray:
        """
        Write the next state into ``next`` and return it.

        Args:
            sigma: Loss per sample, or None for the lossless update
        """
        curr, prev, nxt = self.curr, self.prev, self.next

        p = np.pad(curr, 1, mode="edge")
        lap = ((p[1:-1, :-2] - 2.0 * curr + p[1:-1, 2:]) * self.coeff_x
               + (p[:-2, 1:-1] - 2.0 * curr + p[2:, 1:-1]) * self.coeff_y)

        if sigma is None:
            np.subtract(2.0 * curr + lap, prev, out=nxt)
        else:
            s = sigma * (0.5 * self.dt)
            nxt[...] = (2.0 * curr - prev * (1.0 - s) + lap) / (1.0 + s)
        return nxt

    def zero(self, mask: Optional[np.ndarray] = None) -> None:
        """Zero ``prev`` and ``curr`` (all samples, or where ``mask``)."""
        for buf in (self.prev, self.curr):
            if mask is None:
                buf.fill(0.0)
            else:
                buf[mask] = 0.0

    def reset(self) -> None:
        for buf in self._buffers:
            buf.fill(0.0)
        self._head = 0
