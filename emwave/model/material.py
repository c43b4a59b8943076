from dataclasses import dataclass
from typing import Optional, Dict, Any
import math

from ..config import EPS_R_RANGE, SIGMA_RANGE, clamp


# Preset constants in normalised units (sigma in 1/s of simulation time).
MATERIAL_PRESETS: Dict[str, Dict[str, float]] = {
    "air":      {"eps_r": 1.0, "sigma": 0.0},
    "drywall":  {"eps_r": 2.7, "sigma": 0.02},
    "concrete": {"eps_r": 6.0, "sigma": 0.2},
    "metal":    {"eps_r": 1.0, "sigma": 50.0},
    "custom":   {"eps_r": 2.7, "sigma": 0.02},
}

DEFAULT_PRESET = "drywall"


@dataclass(frozen=True)
class Material:
    """
    Obstacle material constants.

    Values are normalised on construction: an unknown preset becomes
    'drywall', a missing or non-finite constant takes the preset value and
    the result is clamped to the valid ranges.

    Attributes:
        preset: Preset name ('air', 'drywall', 'concrete', 'metal', 'custom')
        eps_r: Relative permittivity, within ``EPS_R_RANGE``
        sigma: Conductivity-like loss, within ``SIGMA_RANGE``
    """
    preset: str = DEFAULT_PRESET
    eps_r: Optional[float] = None
    sigma: Optional[float] = None

    def __post_init__(self):
        name = self.preset if self.preset in MATERIAL_PRESETS else DEFAULT_PRESET
        base = MATERIAL_PRESETS[name]

        eps_val = _finite_or_none(self.eps_r)
        sig_val = _finite_or_none(self.sigma)
        eps_val = base["eps_r"] if eps_val is None else eps_val
        sig_val = base["sigma"] if sig_val is None else sig_val

        object.__setattr__(self, "preset", name)
        object.__setattr__(self, "eps_r", clamp(eps_val, *EPS_R_RANGE))
        object.__setattr__(self, "sigma", clamp(sig_val, *SIGMA_RANGE))

    @property
    def is_metal(self) -> bool:
        """Metal cells are treated as perfect electric conductors."""
        return self.preset == "metal"

    @classmethod
    def from_preset(cls,
                    preset: Optional[str] = None,
                    eps_r: Optional[float] = None,
                    sigma: Optional[float] = None) -> "Material":
        """Build a material from a preset, optionally overriding its constants."""
        return cls(preset=DEFAULT_PRESET if preset is None else preset,
                   eps_r=eps_r, sigma=sigma)

    @classmethod
    def coerce(cls, value: Any) -> "Material":
        """Accept a Material, a preset name, a mapping or None."""
        if isinstance(value, Material):
            return cls.from_preset(value.preset, value.eps_r, value.sigma)
        if value is None:
            return cls.from_preset()
        if isinstance(value, str):
            return cls.from_preset(value)
        if isinstance(value, dict):
            return cls.from_preset(value.get("preset"), value.get("eps_r"), value.get("sigma"))
        raise TypeError(f"cannot build a Material from {type(value).__name__}")


def _finite_or_none(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        value = float(value)
    except (TypeError, ValueError):
        return None
    return value if math.isfinite(value) else None
