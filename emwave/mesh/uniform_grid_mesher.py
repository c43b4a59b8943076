from typing import Tuple, Optional, Sequence, Any
import math

import numpy as np

from ..config import (
    MAX_GRID, DEFAULT_GRID, WORLD_SIZE_RANGE, DEFAULT_WORLD_SIZE, clamp
)


def _finite_or(value: Any, default: float) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError):
        return default
    return value if math.isfinite(value) else default


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class UniformGridMesher:
    """
    Uniform sample grid over a rectangular 2D domain.

    The grid holds ``nx * ny`` samples, the first at ``origin`` and the last
    at ``origin + world_size``, so the cell spacing is
    ``world_size / (n - 1)`` along each axis. Field arrays built on this grid
    have shape ``(ny, nx)`` and the flat offset of sample ``(ix, iy)`` is
    ``iy * nx + ix``.

    Out-of-range construction input is clamped instead of rejected: sample
    counts to ``[2, MAX_GRID]`` and world extents to ``WORLD_SIZE_RANGE``.

    Attributes:
        nx, ny: Sample counts
        dx, dy: Cell spacing
        h: ``(dx, dy)``
        origin: Lower-left corner of the domain
        world_size: Domain extent along x and y
    """

    def __init__(self,
                 origin: Sequence[float] = (0.0, 0.0),
                 world_size: Sequence[float] = (DEFAULT_WORLD_SIZE, DEFAULT_WORLD_SIZE),
                 nx: int = DEFAULT_GRID,
                 ny: int = DEFAULT_GRID):
        """
        Initialize uniform grid.

        Args:
            origin: World coordinates (x0, y0) of sample (0, 0)
            world_size: Domain extent (wx, wy)
            nx: Number of samples in x-direction
            ny: Number of samples in y-direction
        """
        self.nx = self._clamp_count(nx)
        self.ny = self._clamp_count(ny)

        lo, hi = WORLD_SIZE_RANGE
        self.world_size = (
            clamp(_finite_or(world_size[0], DEFAULT_WORLD_SIZE), lo, hi),
            clamp(_finite_or(world_size[1], DEFAULT_WORLD_SIZE), lo, hi),
        )
        self.origin = (_finite_or(origin[0], 0.0), _finite_or(origin[1], 0.0))

        self.dx = self.world_size[0] / (self.nx - 1)
        self.dy = self.world_size[1] / (self.ny - 1)
        self.h = (self.dx, self.dy)

        self._coordinate_cache = {}

    @classmethod
    def from_domain(cls,
                    domain: Sequence[float] = (0.0, 1.0, 0.0, 1.0),
                    nx: int = DEFAULT_GRID,
                    ny: int = DEFAULT_GRID) -> "UniformGridMesher":
        """Build a grid from a flat domain ``(xmin, xmax, ymin, ymax)``."""
        xmin, xmax, ymin, ymax = (float(v) for v in domain)
        return cls(origin=(xmin, ymin), world_size=(xmax - xmin, ymax - ymin), nx=nx, ny=ny)

    @staticmethod
    def _clamp_count(n: Any) -> int:
        n = _finite_or(n, DEFAULT_GRID)
        return int(clamp(math.floor(n), 2, MAX_GRID))

    @property
    def shape(self) -> Tuple[int, int]:
        """Array shape of a field on this grid, ``(ny, nx)``."""
        return (self.ny, self.nx)

    @property
    def size(self) -> int:
        return self.nx * self.ny

    @property
    def domain(self) -> Tuple[float, float, float, float]:
        """Flat domain ``(xmin, xmax, ymin, ymax)``."""
        x0, y0 = self.origin
        wx, wy = self.world_size
        return (x0, x0 + wx, y0, y0 + wy)

    @property
    def x_coords(self) -> np.ndarray:
        """World x coordinate of every column."""
        if 'x' not in self._coordinate_cache:
            self._coordinate_cache['x'] = self.origin[0] + np.arange(self.nx) * self.dx
        return self._coordinate_cache['x']

    @property
    def y_coords(self) -> np.ndarray:
        """World y coordinate of every row."""
        if 'y' not in self._coordinate_cache:
            self._coordinate_cache['y'] = self.origin[1] + np.arange(self.ny) * self.dy
        return self._coordinate_cache['y']

    @property
    def node_coords(self) -> np.ndarray:
        """World coordinates of all samples, shape ``(ny, nx, 2)``."""
        if 'node' not in self._coordinate_cache:
            X, Y = np.meshgrid(self.x_coords, self.y_coords)
            self._coordinate_cache['node'] = np.stack([X, Y], axis=-1)
        return self._coordinate_cache['node']

    def world_to_index(self, position: Sequence[float]) -> Tuple[int, int]:
        """
        Return the nearest sample ``(ix, iy)`` of a world position.

        Positions outside the domain clamp to the nearest edge sample.
        """
        x = _finite_or(position[0], self.origin[0])
        y = _finite_or(position[1], self.origin[1])
        x_norm = (x - self.origin[0]) / self.world_size[0]
        y_norm = (y - self.origin[1]) / self.world_size[1]
        ix = int(clamp(_round_half_up(x_norm * (self.nx - 1)), 0, self.nx - 1))
        iy = int(clamp(_round_half_up(y_norm * (self.ny - 1)), 0, self.ny - 1))
        return ix, iy

    def linear_index(self, ix: int, iy: int) -> int:
        """Flat offset of sample ``(ix, iy)``."""
        return iy * self.nx + ix

    def world_to_linear_index(self, position: Sequence[float]) -> int:
        ix, iy = self.world_to_index(position)
        return self.linear_index(ix, iy)

    def index_to_world(self, ix: int, iy: int) -> Tuple[float, float]:
        return (self.origin[0] + ix * self.dx, self.origin[1] + iy * self.dy)

    def index_range(self, xmin: float, xmax: float,
                    ymin: float, ymax: float) -> Tuple[int, int, int, int]:
        """
        Index-space bounding box ``(ix0, ix1, iy0, iy1)`` (inclusive) that
        covers the world rectangle ``[xmin, xmax] x [ymin, ymax]``.
        """
        x0, y0 = self.origin
        ix0 = int(clamp(math.floor((xmin - x0) / self.dx), 0, self.nx - 1))
        ix1 = int(clamp(math.ceil((xmax - x0) / self.dx), 0, self.nx - 1))
        iy0 = int(clamp(math.floor((ymin - y0) / self.dy), 0, self.ny - 1))
        iy1 = int(clamp(math.ceil((ymax - y0) / self.dy), 0, self.ny - 1))
        return ix0, ix1, iy0, iy1

    def init_field_matrix(self, dtype: Any = np.float64, fill: Optional[float] = None) -> np.ndarray:
        """Return a new field array of grid shape, zero unless ``fill`` is given."""
        if fill is None:
            return np.zeros(self.shape, dtype=dtype)
        return np.full(self.shape, fill, dtype=dtype)

    def __str__(self) -> str:
        return (f"UniformGridMesher(nx={self.nx}, ny={self.ny}, "
                f"dx={self.dx:.4g}, dy={self.dy:.4g}, origin={self.origin}, "
                f"world_size={self.world_size})")


def auto_grid_size(world_size: Sequence[float],
                   wave_speed: float,
                   frequency: float,
                   cells_per_lambda: int = 12,
                   max_grid: int = MAX_GRID) -> Tuple[int, int]:
    """
    Choose sample counts that resolve one wavelength with
    ``cells_per_lambda`` cells, keeping both counts within ``max_grid``.

    If the natural resolution exceeds ``max_grid`` along either axis, both
    counts are scaled down by the same factor so the aspect ratio is kept.
    """
    speed = clamp(_finite_or(wave_speed, 1.0), 0.05, 50.0)
    freq = clamp(_finite_or(frequency, 1.5), 0.01, 50.0)
    wavelength = speed / freq
    h = clamp(wavelength / max(1, int(cells_per_lambda)), 0.01, 10.0)

    nx = max(2, _round_half_up(_finite_or(world_size[0], DEFAULT_WORLD_SIZE) / h) + 1)
    ny = max(2, _round_half_up(_finite_or(world_size[1], DEFAULT_WORLD_SIZE) / h) + 1)

    if nx > max_grid or ny > max_grid:
        scale = max(nx / max_grid, ny / max_grid)
        nx = max(2, _round_half_up(nx / scale))
        ny = max(2, _round_half_up(ny / scale))
    return nx, ny
