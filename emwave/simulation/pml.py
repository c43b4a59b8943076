from dataclasses import dataclass
from typing import Optional
import math

import numpy as np

from ..config import (
    DEFAULT_PML_WIDTH, PML_WIDTH_RANGE, PML_ORDER, PML_REFLECTION, clamp
)


@dataclass
class PmlProfile:
    """
    Graded absorbing band around the domain edges.

    Attributes:
        width: Band width in samples
        sigma_max: Loss at the outermost sample
        sigma: Per-sample loss, shape ``(ny, nx)``, zero outside the band
        mask: True inside the band; these samples carry no physical signal
    """
    width: int
    sigma_max: float
    sigma: np.ndarray
    mask: np.ndarray


def clamp_pml_width(requested: Optional[int], nx: int, ny: int) -> int:
    """
    Return the usable band width for an ``nx`` x ``ny`` grid.

    ``None`` selects the default width and a non-positive request disables
    the band. Positive requests are clamped to ``PML_WIDTH_RANGE`` and then
    to ``min(nx, ny)//2 - 1`` so opposite bands never meet.
    """
    if requested is None:
        requested = DEFAULT_PML_WIDTH
    try:
        requested = float(requested)
    except (TypeError, ValueError):
        requested = DEFAULT_PML_WIDTH
    if not math.isfinite(requested):
        requested = DEFAULT_PML_WIDTH
    if requested <= 0:
        return 0

    width = int(clamp(int(requested), *PML_WIDTH_RANGE))
    max_width = min(nx, ny) // 2 - 1
    return max(0, min(width, max_width))


def pml_sigma_max(width: int, cell: float, wave_speed: float,
                  order: int = PML_ORDER, reflection: float = PML_REFLECTION) -> float:
    """
    Peak loss of a polynomially graded layer.

    For a layer of thickness ``d = width * cell`` graded as ``(r/d)**order``
    the normal-incidence reflection is ``R = exp(-2 sigma_max d / ((m+1) c))``;
    solving for ``sigma_max`` gives ``(m+1) ln(1/R) c / (2 d)``.
    """
    thickness = width * cell
    if thickness <= 0:
        return 0.0
    return (order + 1) * math.log(1.0 / reflection) * wave_speed / (2.0 * thickness)


def create_ramp(n: int, width: int) -> np.ndarray:
    """
    Linear ramp along one axis: 1 at the edge samples, falling to 0 at the
    inner edge of the band and 0 beyond it.
    """
    i = np.arange(n)
    dist = np.minimum(i, n - 1 - i)
    return np.where(dist < width, (width - dist) / width, 0.0)


def build_pml_profile(mesh, width: int, wave_speed: float,
                      order: int = PML_ORDER,
                      reflection: float = PML_REFLECTION,
                      dtype=np.float64) -> Optional[PmlProfile]:
    """
    Precompute the absorbing band of ``mesh``.

    Args:
        mesh: UniformGridMesher
        width: Usable band width in samples (see ``clamp_pml_width``)
        wave_speed: Reference wave speed
        order: Polynomial grading exponent
        reflection: Target normal-incidence reflection coefficient

    Returns:
        PmlProfile, or None when ``width`` is 0
    """
    if width <= 0:
        return None

    nx, ny = mesh.nx, mesh.ny
    sigma_max = pml_sigma_max(width, min(mesh.dx, mesh.dy), wave_speed, order, reflection)

    ramp_x = create_ramp(nx, width)
    ramp_y = create_ramp(ny, width)
    sigma = sigma_max * (ramp_x[None, :] ** order + ramp_y[:, None] ** order)

    mask = (ramp_x[None, :] > 0) | (ramp_y[:, None] > 0)

    return PmlProfile(
        width=int(width),
        sigma_max=sigma_max,
        sigma=sigma.astype(dtype),
        mask=mask,
    )
