from dataclasses import dataclass, field
from typing import Tuple, Union
import math

import numpy as np

from .material import Material


def _is_finite(*values: float) -> bool:
    return all(math.isfinite(v) for v in values)


@dataclass(frozen=True)
class Rectangle:
    """
    Rotated rectangle obstacle.

    Attributes:
        center: World coordinates of the center
        width, height: Full extents before rotation
        angle: Counter-clockwise rotation in degrees
        material: Material filling the rectangle
    """
    center: Tuple[float, float]
    width: float
    height: float
    angle: float = 0.0
    material: Material = field(default_factory=Material.from_preset)
    tag: str = ""

    kind = "rectangle"

    def is_valid(self) -> bool:
        return (_is_finite(self.center[0], self.center[1], self.width, self.height, self.angle)
                and self.width > 0 and self.height > 0)

    def bounding_radius(self) -> float:
        return math.hypot(0.5 * self.width, 0.5 * self.height)

    def contains(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        """Membership test via inverse rotation into the local frame."""
        a = math.radians(self.angle)
        cos_a, sin_a = math.cos(a), math.sin(a)
        dxc = x - self.center[0]
        dyc = y - self.center[1]
        local_x = cos_a * dxc + sin_a * dyc
        local_y = -sin_a * dxc + cos_a * dyc
        return (np.abs(local_x) <= 0.5 * self.width) & (np.abs(local_y) <= 0.5 * self.height)


@dataclass(frozen=True)
class Circle:
    """
    Circular obstacle.

    Attributes:
        center: World coordinates of the center
        radius: Circle radius
        material: Material filling the circle
    """
    center: Tuple[float, float]
    radius: float
    material: Material = field(default_factory=Material.from_preset)
    tag: str = ""

    kind = "circle"

    def is_valid(self) -> bool:
        return _is_finite(self.center[0], self.center[1], self.radius) and self.radius > 0

    def bounding_radius(self) -> float:
        return self.radius

    def contains(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        dxc = x - self.center[0]
        dyc = y - self.center[1]
        return dxc * dxc + dyc * dyc <= self.radius * self.radius


Shape = Union[Rectangle, Circle]
