from typing import Optional, Dict, Any

from .model.wave_scene import WaveScene
from .scalar_wave_model import ScalarWaveModel
from .tez_fdtd_model import TEzFDTDModel

MODEL_CLASSES = {
    "em2d": TEzFDTDModel,
    "scalar_wave2d": ScalarWaveModel,
}


def create_model(scene: WaveScene, options: Optional[Dict[str, Any]] = None):
    """
    Build the model selected by ``scene.model`` and load the scene's
    shapes and sources into it.

    Args:
        scene: WaveScene
        options: Model options, see FixedStepModel

    Returns:
        TEzFDTDModel or ScalarWaveModel

    Raises:
        ValueError: If ``scene.model`` is not a known model name
    """
    try:
        cls = MODEL_CLASSES[scene.model]
    except KeyError:
        raise ValueError(
            f"unknown model {scene.model!r}, expected one of {tuple(MODEL_CLASSES)}") from None

    model = cls(scene.build_mesh(), wave_speed=scene.wave_speed,
                attenuation=scene.attenuation, options=options)
    shapes = scene.list_shapes()
    if shapes:
        model.set_materials_from_shapes(shapes)
    model.set_sources(scene.list_sources())
    return model
