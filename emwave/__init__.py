"""
emwave: real-time 2D electromagnetic wave simulation on a uniform grid.
"""

__version__ = "0.1.0"

from .logs import logger
from .mesh import UniformGridMesher, auto_grid_size
from .model import (
    Material, Rectangle, Circle, Source, WaveScene, evaluate_signal
)
from .fixed_step_model import Stats
from .tez_fdtd_model import TEzFDTDModel
from .scalar_wave_model import ScalarWaveModel
from .factory import create_model
