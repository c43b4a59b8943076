from .computational_model import ComputationalModel
from .material import Material, MATERIAL_PRESETS
from .shape import Rectangle, Circle, Shape
from .source import (
    Source, ActiveSource, SourceManager, evaluate_signal,
    sinusoid, gaussian_enveloped_sine, ricker_wavelet, WAVEFORMS
)
from .wave_scene import WaveScene
