from dataclasses import replace
from typing import Optional, Tuple, List, Dict, Any, Sequence

from ..config import DEFAULT_GRID, DEFAULT_WORLD_SIZE, DEFAULT_PULSE_WIDTH
from ..mesh import UniformGridMesher
from .material import Material
from .shape import Rectangle, Circle, Shape
from .source import Source

MODELS = ("em2d", "scalar_wave2d")


class WaveScene:
    """
    Scene description for the 2D wave models: domain, physics, point
    sources and obstacle shapes.

    The scene only stores metadata; ``create_model`` turns it into a
    running model. Sources and shapes are kept as frozen value objects and
    each carries a unique tag.

    Attributes:
        origin (Tuple[float, float]): Lower-left corner of the domain
        world_size (Tuple[float, float]): Domain extent (wx, wy)
        nx, ny (int): Sample counts
        model (str): 'em2d' (TEz Maxwell) or 'scalar_wave2d'
        wave_speed (float): Vacuum wave speed
        attenuation (float): Uniform background loss
    """

    def __init__(
        self,
        origin: Sequence[float] = (0.0, 0.0),
        world_size: Sequence[float] = (DEFAULT_WORLD_SIZE, DEFAULT_WORLD_SIZE),
        nx: int = DEFAULT_GRID,
        ny: int = DEFAULT_GRID,
        model: str = "em2d",
        wave_speed: float = 1.0,
        attenuation: float = 0.0,
    ) -> None:
        """
        Initialize scene.

        Raises:
            ValueError: If ``model`` is not one of 'em2d', 'scalar_wave2d'
        """
        if model not in MODELS:
            raise ValueError(f"unknown model {model!r}, expected one of {MODELS}")

        self.origin = (float(origin[0]), float(origin[1]))
        self.world_size = (float(world_size[0]), float(world_size[1]))
        self.nx = nx
        self.ny = ny
        self.model = model
        self.wave_speed = float(wave_speed)
        self.attenuation = float(attenuation)

        self._sources: List[Source] = []
        self._shapes: List[Shape] = []

        self._source_counter = 0
        self._shape_counter = 0

    @property
    def domain(self) -> Tuple[float, float, float, float]:
        """Return ``(xmin, xmax, ymin, ymax)``."""
        x0, y0 = self.origin
        return (x0, x0 + self.world_size[0], y0, y0 + self.world_size[1])

    def build_mesh(self) -> UniformGridMesher:
        return UniformGridMesher(origin=self.origin, world_size=self.world_size,
                                 nx=self.nx, ny=self.ny)

    # ---------------- Sources ----------------
    def add_source(
        self,
        position: Optional[Tuple[float, float]] = None,
        amplitude: float = 1.0,
        frequency: float = 1.5,
        phase: float = 0.0,
        waveform: str = "cw",
        pulse_width: float = DEFAULT_PULSE_WIDTH,
        pulse_delay: float = 0.0,
        injection: str = "soft",
        excite: str = "hz",
        polarization_angle: float = 0.0,
        active: bool = True,
        tag: Optional[str] = None,
    ) -> str:
        """
        Add a point source.

        Parameters:
            position: World coordinates (x, y). If None, uses domain center
            waveform: 'cw', 'gaussian' or 'ricker'
            injection: 'soft' (superposition) or 'hard' (overwrite)
            excite: 'hz', 'ex', 'ey' or 'e' (in-plane E at ``polarization_angle`` degrees)
            tag: Unique source tag, auto-generated as 'src_<n>' if None

        Returns:
            tag: Unique source tag
        """
        if position is None:
            position = self._domain_center()
        if tag is None:
            tag = f"src_{self._source_counter}"
            self._source_counter += 1

        self._sources.append(Source(
            position=(float(position[0]), float(position[1])),
            amplitude=float(amplitude),
            phase=float(phase),
            frequency=float(frequency),
            waveform=str(waveform),
            pulse_width=float(pulse_width),
            pulse_delay=float(pulse_delay),
            injection=str(injection),
            excite=str(excite),
            polarization_angle=float(polarization_angle),
            active=bool(active),
            tag=tag,
        ))
        return tag

    def set_sources(self, sources: Sequence[Any]) -> None:
        """
        Replace all sources.

        Parameters:
            sources: Source objects or dicts of ``Source`` fields

        Raises:
            ValueError: When a dict lacks the 'position' key
        """
        new = []
        for i, s in enumerate(sources):
            if isinstance(s, Source):
                src = s
            elif isinstance(s, dict):
                if "position" not in s:
                    raise ValueError("each source dict must contain a 'position' key")
                src = Source(**s)
            else:
                raise ValueError(f"cannot build a Source from {type(s).__name__}")
            if not src.tag:
                src = replace(src, tag=f"src_{i}")
            new.append(src)
        self._sources = new
        self._source_counter = len(new)

    def remove_source(self, tag: str) -> bool:
        for i, s in enumerate(self._sources):
            if s.tag == tag:
                del self._sources[i]
                return True
        return False

    def list_sources(self) -> List[Source]:
        return list(self._sources)

    # ---------------- Shapes ----------------
    def add_rectangle(
        self,
        center: Tuple[float, float],
        width: float,
        height: float,
        angle: float = 0.0,
        material: Any = None,
        tag: Optional[str] = None,
    ) -> str:
        """
        Add a rectangle obstacle.

        Parameters:
            center: World coordinates of the center
            width, height: Extents before rotation
            angle: Counter-clockwise rotation in degrees
            material: Material, preset name, dict of Material fields or None (drywall)
            tag: Unique shape tag, auto-generated as 'obj_<n>' if None

        Returns:
            tag: Shape tag
        """
        tag = self._next_shape_tag(tag)
        self._shapes.append(Rectangle(
            center=(float(center[0]), float(center[1])),
            width=float(width),
            height=float(height),
            angle=float(angle),
            material=Material.coerce(material),
            tag=tag,
        ))
        return tag

    def add_circle(
        self,
        center: Tuple[float, float],
        radius: float,
        material: Any = None,
        tag: Optional[str] = None,
    ) -> str:
        """Add a circle obstacle and return its tag."""
        tag = self._next_shape_tag(tag)
        self._shapes.append(Circle(
            center=(float(center[0]), float(center[1])),
            radius=float(radius),
            material=Material.coerce(material),
            tag=tag,
        ))
        return tag

    def set_shapes(self, shapes: Sequence[Any]) -> None:
        """
        Replace all shapes, keeping their order (later shapes win on overlap).

        Parameters:
            shapes: Rectangle / Circle objects or dicts with a 'type' key
                    ('rectangle' or 'circle') and the shape fields

        Raises:
            ValueError: When a dict has an unknown or missing 'type'
        """
        new = []
        for i, s in enumerate(shapes):
            if isinstance(s, (Rectangle, Circle)):
                shape = s
            elif isinstance(s, dict):
                shape = self._shape_from_dict(s)
            else:
                raise ValueError(f"cannot build a shape from {type(s).__name__}")
            if not shape.tag:
                shape = replace(shape, tag=f"obj_{i}")
            new.append(shape)
        self._shapes = new
        self._shape_counter = len(new)

    @staticmethod
    def _shape_from_dict(cfg: Dict[str, Any]) -> Shape:
        cfg = dict(cfg)
        kind = cfg.pop("type", None)
        cfg["material"] = Material.coerce(cfg.get("material"))
        if kind == "rectangle":
            return Rectangle(**cfg)
        if kind == "circle":
            return Circle(**cfg)
        raise ValueError(f"shape dict must have 'type' 'rectangle' or 'circle', got {kind!r}")

    def remove_shape(self, tag: str) -> bool:
        for i, s in enumerate(self._shapes):
            if s.tag == tag:
                del self._shapes[i]
                return True
        return False

    def list_shapes(self) -> List[Shape]:
        return list(self._shapes)

    def clear_shapes(self) -> None:
        self._shapes.clear()
        self._shape_counter = 0

    def _next_shape_tag(self, tag: Optional[str]) -> str:
        if tag is None:
            tag = f"obj_{self._shape_counter}"
            self._shape_counter += 1
        return tag

    def _domain_center(self) -> Tuple[float, float]:
        x0, x1, y0, y1 = self.domain
        return ((x0 + x1) / 2.0, (y0 + y1) / 2.0)

    def __str__(self) -> str:
        s = []
        s.append("WaveScene (metadata only)")
        s.append(f"  Model              : {self.model}")
        s.append(f"  Domain             : {self.domain}")
        s.append(f"  Grid               : {self.nx} x {self.ny}")
        s.append(f"  Wave speed, loss   : c={self.wave_speed}, attenuation={self.attenuation}")

        s.append("  --- sources ---")
        if not self._sources:
            s.append("  (no sources configured)")
        else:
            for src in self._sources:
                s.append(
                    f"  tag: {src.tag}, pos: {src.position}, waveform: {src.waveform}, "
                    f"f: {src.frequency}, amplitude: {src.amplitude}, excite: {src.excite}, "
                    f"injection: {src.injection}" + ("" if src.active else " (inactive)"))

        s.append("  --- shapes ---")
        if not self._shapes:
            s.append("  (no shapes configured)")
        else:
            for shape in self._shapes:
                if shape.kind == "rectangle":
                    geo = f"center: {shape.center}, size: {shape.width} x {shape.height}, angle: {shape.angle}"
                else:
                    geo = f"center: {shape.center}, radius: {shape.radius}"
                m = shape.material
                s.append(f"  tag: {shape.tag}, {shape.kind}, {geo}, "
                         f"material: {m.preset} (eps_r={m.eps_r}, sigma={m.sigma})")
        return "\n".join(s)
