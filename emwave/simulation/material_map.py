from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from ..config import EPS_R_RANGE, SIGMA_RANGE, clamp
from ..model.shape import Shape


@dataclass
class MaterialMap:
    """
    Per-sample material arrays, shape ``(ny, nx)``.

    Attributes:
        eps_r: Relative permittivity (>= 1)
        sigma: Conductivity-like loss (>= 0)
        metal_mask: Perfect-conductor samples, or None if no shape is metal
    """
    eps_r: np.ndarray
    sigma: np.ndarray
    metal_mask: Optional[np.ndarray] = None


def rasterize_shape(mesh, shape: Shape):
    """
    Return ``(rows, cols, inside)`` for one shape: the index-space bounding
    box slices and the membership mask over that box.

    Returns None for invalid shapes.
    """
    if not shape.is_valid():
        return None

    cx, cy = shape.center
    r = shape.bounding_radius()
    ix0, ix1, iy0, iy1 = mesh.index_range(cx - r, cx + r, cy - r, cy + r)

    rows = slice(iy0, iy1 + 1)
    cols = slice(ix0, ix1 + 1)
    X, Y = np.meshgrid(mesh.x_coords[cols], mesh.y_coords[rows])
    return rows, cols, shape.contains(X, Y)


def build_material_map(mesh, shapes: Optional[Sequence[Shape]],
                       dtype=np.float64) -> Optional[MaterialMap]:
    """
    Rasterize obstacle shapes into material arrays.

    Only the bounding box of each shape is visited. Shapes are applied in
    order and later shapes overwrite earlier ones where they overlap,
    including the metal bit. Invalid shapes are skipped.

    Args:
        mesh: UniformGridMesher
        shapes: Ordered Rectangle / Circle list

    Returns:
        MaterialMap, or None for an empty list (uniform free space)
    """
    if not shapes:
        return None

    eps_r = mesh.init_field_matrix(dtype, fill=1.0)
    sigma = mesh.init_field_matrix(dtype)
    metal_mask = None
    if any(shape.material.is_metal for shape in shapes):
        metal_mask = np.zeros(mesh.shape, dtype=bool)

    for shape in shapes:
        raster = rasterize_shape(mesh, shape)
        if raster is None:
            continue
        rows, cols, inside = raster
        mat = shape.material

        eps_r[rows, cols][inside] = clamp(mat.eps_r, *EPS_R_RANGE)
        sigma[rows, cols][inside] = clamp(mat.sigma, *SIGMA_RANGE)
        if metal_mask is not None:
            metal_mask[rows, cols][inside] = mat.is_metal

    return MaterialMap(eps_r=eps_r, sigma=sigma, metal_mask=metal_mask)


def build_barrier_mask(mesh, shapes: Optional[Sequence[Shape]]) -> Optional[np.ndarray]:
    """
    Union of all shape footprints, regardless of material.

    Used by the scalar-wave model, where every obstacle is a hard barrier.
    Returns None for an empty list.
    """
    if not shapes:
        return None

    mask = np.zeros(mesh.shape, dtype=bool)
    for shape in shapes:
        raster = rasterize_shape(mesh, shape)
        if raster is None:
            continue
        rows, cols, inside = raster
        mask[rows, cols] |= inside
    return mask
