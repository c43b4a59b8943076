from dataclasses import dataclass
from typing import Tuple, Optional, Callable, Any, List, Dict, Iterable, Sequence
import math

from ..config import DEFAULT_PULSE_WIDTH, MIN_PULSE_WIDTH

TAU = 2.0 * math.pi

INJECTIONS = ("soft", "hard")
EXCITATIONS = ("hz", "ex", "ey", "e")

# ---------------------------
# Time-domain waveforms (callable: t -> amplitude)
# ---------------------------

def sinusoid(t: float, freq: float = 1.0, phase: float = 0.0) -> float:
    """Continuous wave: sin(2*pi*f*t + phase)."""
    return math.sin(TAU * freq * t + phase)


def gaussian_enveloped_sine(t: float, freq: float = 1.0, t0: float = 0.0,
                            tau: float = DEFAULT_PULSE_WIDTH, phase: float = 0.0) -> float:
    """Gaussian pulse: exp(-0.5*((t-t0)/tau)**2) * sin(2*pi*f*(t-t0) + phase)."""
    tau = max(MIN_PULSE_WIDTH, tau)
    s = (t - t0) / tau
    return math.exp(-0.5 * s * s) * math.sin(TAU * freq * (t - t0) + phase)


def ricker_wavelet(t: float, freq: float = 1.0, t0: float = 0.0, phase: float = 0.0) -> float:
    """
    Ricker wavelet (Mexican hat) centered at ``t0``.

    The phase is applied as the equivalent time shift ``phase/(2*pi*f)``
    so that it moves the transient the same way it moves a sinusoid.
    """
    shift = phase / (TAU * freq) if freq > 0 else 0.0
    a = math.pi * freq * (t - t0 + shift)
    a2 = a * a
    return (1.0 - 2.0 * a2) * math.exp(-a2)


WAVEFORMS: Dict[str, Callable[..., float]] = {
    "cw": lambda src, t: sinusoid(t, src.frequency, src.phase),
    "gaussian": lambda src, t: gaussian_enveloped_sine(
        t, src.frequency, src.pulse_delay, src.pulse_width, src.phase),
    "ricker": lambda src, t: ricker_wavelet(t, src.frequency, src.pulse_delay, src.phase),
}


@dataclass(frozen=True)
class _SignalParams:
    frequency: float
    phase: float
    pulse_delay: float
    pulse_width: float


def _finite(value: Any, default: float) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError):
        return default
    return value if math.isfinite(value) else default


def evaluate_signal(source: Any, t: float) -> float:
    """
    Evaluate the unit-amplitude waveform of ``source`` at time ``t``.

    Non-finite parameters are replaced by neutral values (zero frequency,
    phase and delay, default pulse width) and unknown waveform names
    evaluate as a continuous wave.
    """
    params = _SignalParams(
        frequency=max(0.0, _finite(source.frequency, 0.0)),
        phase=_finite(source.phase, 0.0),
        pulse_delay=_finite(source.pulse_delay, 0.0),
        pulse_width=max(MIN_PULSE_WIDTH, _finite(source.pulse_width, DEFAULT_PULSE_WIDTH)),
    )
    waveform = WAVEFORMS.get(source.waveform, WAVEFORMS["cw"])
    return waveform(params, t)


# ---------------------------
# Source description and active (grid-resolved) sources
# ---------------------------

@dataclass(frozen=True)
class Source:
    """
    Point source as described by the caller, in world coordinates.

    Attributes:
        position: World coordinates (x, y)
        amplitude: Peak amplitude
        phase: Phase in radians
        frequency: Frequency in Hz of simulation time
        waveform: 'cw', 'gaussian' or 'ricker'
        pulse_width: Gaussian envelope width (seconds)
        pulse_delay: Pulse center time (seconds)
        injection: 'soft' (accumulate) or 'hard' (overwrite)
        excite: Target component 'hz', 'ex', 'ey' or 'e' (rotated in-plane E)
        polarization_angle: Angle of the 'e' excitation in degrees
        active: Inactive sources are ignored by the solvers
    """
    position: Tuple[float, float]
    amplitude: float = 1.0
    phase: float = 0.0
    frequency: float = 1.5
    waveform: str = "cw"
    pulse_width: float = DEFAULT_PULSE_WIDTH
    pulse_delay: float = 0.0
    injection: str = "soft"
    excite: str = "hz"
    polarization_angle: float = 0.0
    active: bool = True
    tag: str = ""

    def is_valid(self) -> bool:
        """Sources with a non-finite position or amplitude are skipped."""
        try:
            x, y = float(self.position[0]), float(self.position[1])
            amp = float(self.amplitude)
        except (TypeError, ValueError, IndexError):
            return False
        return math.isfinite(x) and math.isfinite(y) and math.isfinite(amp)


@dataclass(frozen=True)
class ActiveSource:
    """
    Source resolved onto a grid; the grid index is fixed at creation.

    Attributes:
        index: Flat grid offset ``iy * nx + ix``
        ix, iy: Grid sample of the source
    """
    index: int
    ix: int
    iy: int
    amplitude: float
    phase: float
    frequency: float
    waveform: str
    pulse_width: float
    pulse_delay: float
    injection: str
    excite: str
    polarization_angle: float

    @classmethod
    def from_source(cls, source: Source, mesh) -> "ActiveSource":
        ix, iy = mesh.world_to_index(source.position)
        return cls(
            index=mesh.linear_index(ix, iy),
            ix=ix,
            iy=iy,
            amplitude=float(source.amplitude),
            phase=_finite(source.phase, 0.0),
            frequency=_finite(source.frequency, 0.0),
            waveform=source.waveform if source.waveform in WAVEFORMS else "cw",
            pulse_width=_finite(source.pulse_width, DEFAULT_PULSE_WIDTH),
            pulse_delay=_finite(source.pulse_delay, 0.0),
            injection=source.injection if source.injection in INJECTIONS else "soft",
            excite=source.excite if source.excite in EXCITATIONS else "hz",
            polarization_angle=_finite(source.polarization_angle, 0.0),
        )

    def signal(self, t: float) -> float:
        """Scaled source value ``amplitude * waveform(t)``."""
        return self.amplitude * evaluate_signal(self, t)

    def _inject(self, arr, value: float) -> None:
        if arr is None:
            return
        if self.injection == "hard":
            arr[self.iy, self.ix] = value
        else:
            arr[self.iy, self.ix] += value

    def apply(self, t: float, E_fields: Dict[str, Any], H_fields: Dict[str, Any]) -> None:
        """
        Inject the source at time ``t`` into E_fields / H_fields in place.

        Args:
            t: Current simulation time
            E_fields: Electric components keyed 'x', 'y'
            H_fields: Magnetic components keyed 'z'
        """
        s = self.signal(t)
        if self.excite == "hz":
            self._inject(H_fields.get("z"), s)
        elif self.excite == "ex":
            self._inject(E_fields.get("x"), s)
        elif self.excite == "ey":
            self._inject(E_fields.get("y"), s)
        else:
            a = math.radians(self.polarization_angle)
            self._inject(E_fields.get("x"), s * math.cos(a))
            self._inject(E_fields.get("y"), s * math.sin(a))


class SourceManager:
    """
    Container for the grid-resolved sources of one solver.

    The source list is replaced wholesale by ``set_sources``; world
    positions are resolved to grid samples only there, so moving a source
    means submitting the list again.
    """

    def __init__(self, mesh):
        self.mesh = mesh
        self.sources: List[ActiveSource] = []

    def set_sources(self, sources: Optional[Iterable[Source]]) -> int:
        """
        Replace the active sources.

        Inactive and malformed sources are dropped silently.

        Returns:
            Number of active sources kept
        """
        active = []
        for src in sources or ():
            if not src.active or not src.is_valid():
                continue
            active.append(ActiveSource.from_source(src, self.mesh))
        self.sources = active
        return len(active)

    def clear(self) -> None:
        self.sources = []

    def __len__(self) -> int:
        return len(self.sources)

    def __iter__(self):
        return iter(self.sources)

    @staticmethod
    def _skipped(src: ActiveSource, skip_masks: Sequence[Any]) -> bool:
        return any(mask is not None and mask[src.iy, src.ix] for mask in skip_masks)

    def apply_all(self, t: float, E_fields: Dict[str, Any], H_fields: Dict[str, Any],
                  skip_masks: Sequence[Any] = ()) -> None:
        """
        Apply all sources at time ``t``.

        Sources whose sample is flagged in any of ``skip_masks`` (absorbing
        band, metal) are not injected.
        """
        for src in self.sources:
            if self._skipped(src, skip_masks):
                continue
            src.apply(t, E_fields, H_fields)

    def apply_legacy_hz(self, t: float, H_fields: Dict[str, Any],
                        skip_masks: Sequence[Any] = ()) -> None:
        """
        Single-field injection of the scalar-wave model: every source adds a
        continuous wave ``amplitude * sin(2*pi*f*t + phase)`` into Hz.
        """
        hz = H_fields.get("z")
        if hz is None:
            return
        for src in self.sources:
            if self._skipped(src, skip_masks):
                continue
            hz[src.iy, src.ix] += src.amplitude * sinusoid(t, src.frequency, src.phase)

    def apply_scalar(self, t: float, field, skip_masks: Sequence[Any] = ()) -> None:
        """
        Inject every source into a single scalar field, honouring its
        waveform and injection mode. The excited component is irrelevant.
        """
        for src in self.sources:
            if self._skipped(src, skip_masks):
                continue
            src._inject(field, src.signal(t))
