"""
Numerical limits and defaults shared by the grid, boundary and solver layers.

Values are in normalised simulation units: world units for lengths,
seconds for time and world units per second for wave speed.
"""

# Grid geometry
MAX_GRID = 512
DEFAULT_GRID = 128
WORLD_SIZE_RANGE = (1.0, 500.0)
DEFAULT_WORLD_SIZE = 10.0

# Absorbing boundary
DEFAULT_PML_WIDTH = 24
PML_WIDTH_RANGE = (16, 32)
PML_ORDER = 3
PML_REFLECTION = 1e-6

# Integrator
DEFAULT_CFL = 0.45
CFL_RANGE = (0.05, 0.95)
DEFAULT_AVG_TAU = 0.35
MIN_AVG_TAU = 0.05
MAX_SUBSTEPS = 8
EM_WAVE_SPEED_RANGE = (0.05, 50.0)
EM_ATTENUATION_RANGE = (0.0, 5.0)
SCALAR_WAVE_SPEED_RANGE = (0.05, 20.0)
SCALAR_ATTENUATION_RANGE = (0.0, 2.0)

# Division guard for permittivity and cell spacing
TINY = 1e-9

# Sources
DEFAULT_PULSE_WIDTH = 0.4
MIN_PULSE_WIDTH = 1e-6

# Materials
EPS_R_RANGE = (1.0, 20.0)
SIGMA_RANGE = (0.0, 200.0)


def clamp(value, lo, hi):
    """Clamp ``value`` into ``[lo, hi]``."""
    return min(hi, max(lo, value))
