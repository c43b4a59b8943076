from .clock import SimulationClock
from .pml import PmlProfile, clamp_pml_width, pml_sigma_max, build_pml_profile
from .material_map import MaterialMap, build_material_map, build_barrier_mask
from .step_fdtd_tez import StepFDTDTEz
from .step_scalar_wave import StepScalarWave
