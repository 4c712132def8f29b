# FILE : foilpanel/utils/classes.py
"""
Data containers shared by the solver stages.

All records are frozen; numpy arrays are flagged read-only on construction so
one geometry / panel system can be shared by many solves without copying.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import numpy as np

from .config import DEFAULT_FORCED_TRANSITION_X, STALL_SEPARATION_X


def _readonly(obj, *names):
    for name in names:
        arr = np.array(getattr(obj, name), dtype=float)
        arr.setflags(write=False)
        object.__setattr__(obj, name, arr)


class TransitionMode(str, Enum):
    AUTO   = "auto"
    FORCED = "forced"


class LiftModel(str, Enum):
    """Source of the reported CL / CM."""
    PANEL_INTEGRATED = "PanelIntegrated"
    ANALYTIC_BLEND   = "AnalyticBlend"


class FlowState(str, Enum):
    ATTACHED_LAMINAR   = "attached-laminar"
    ATTACHED_TURBULENT = "attached-turbulent"
    SEPARATED          = "separated"


# ======================================
## Geometry / panels
# ======================================
@dataclass(frozen=True)
class AirfoilGeometry:
    """
    Closed NACA 4-digit loop in Selig order (TE -> upper -> LE -> lower -> TE).
    The first and last nodes are the same trailing-edge point.
    """
    m: float
    p: float
    t: float
    points_per_surface: int
    chord: float
    x: np.ndarray
    y: np.ndarray

    def __post_init__(self):
        _readonly(self, "x", "y")

    @property
    def code(self) -> str:
        return f"{int(round(self.m*100))}{int(round(self.p*10))}{int(round(self.t*100)):02d}"

    @property
    def n_points(self) -> int:
        return len(self.x)

    @property
    def n_panels(self) -> int:
        return len(self.x) - 1

    @property
    def coordinates(self):
        return np.column_stack((self.x, self.y))


@dataclass(frozen=True)
class Panel:
    index: int
    start: Tuple[float, float]
    end: Tuple[float, float]
    midpoint: Tuple[float, float]
    normal: Tuple[float, float]
    tangent: Tuple[float, float]
    length: float


@dataclass(frozen=True)
class PanelSystem:
    """
    Panelled geometry plus the assembled influence matrices.

    Unknowns are [sigma_0 .. sigma_N-1, gamma]: a source strength per panel and
    one vortex strength shared by every panel.

    influence  : (N+1, N+1), rows 0..N-1 flow tangency, row N the Kutta closure
    tangential : (N, N+1), tangential velocity at each control point per unit unknown
    """
    geometry: AirfoilGeometry
    x: np.ndarray
    y: np.ndarray
    xmid: np.ndarray
    ymid: np.ndarray
    ds: np.ndarray
    sine: np.ndarray
    cosine: np.ndarray
    slope: np.ndarray
    nx: np.ndarray
    ny: np.ndarray
    influence: np.ndarray
    tangential: np.ndarray

    def __post_init__(self):
        _readonly(self, "x", "y", "xmid", "ymid", "ds", "sine", "cosine", "slope",
                  "nx", "ny", "influence", "tangential")

    @property
    def n_panels(self) -> int:
        return len(self.ds)

    @property
    def n_unknowns(self) -> int:
        return len(self.ds) + 1

    @property
    def n_upper(self) -> int:
        """Panels 0..n_upper-1 lie on the upper surface."""
        return self.geometry.points_per_surface - 1

    @property
    def te_upper(self) -> int:
        return 0

    @property
    def te_lower(self) -> int:
        return self.n_panels - 1

    @property
    def chord(self) -> float:
        return self.geometry.chord

    def __len__(self):
        return self.n_panels

    def panel(self, i: int) -> Panel:
        i = range(self.n_panels)[i]
        return Panel(
            index=i,
            start=(float(self.x[i]), float(self.y[i])),
            end=(float(self.x[i+1]), float(self.y[i+1])),
            midpoint=(float(self.xmid[i]), float(self.ymid[i])),
            normal=(float(self.nx[i]), float(self.ny[i])),
            tangent=(float(self.cosine[i]), float(self.sine[i])),
            length=float(self.ds[i]),
        )


# ======================================
## Flow / solution
# ======================================
@dataclass(frozen=True)
class FlowConditions:
    alpha: float = 0.0                       # [rad]
    reynolds: float = 1.0e6
    mach: float = 0.0
    viscous: bool = True
    transition_mode: TransitionMode = TransitionMode.AUTO
    forced_transition_x: float = DEFAULT_FORCED_TRANSITION_X

    def __post_init__(self):
        if not np.isfinite(self.alpha):
            raise ValueError("alpha must be finite.")
        if not (self.reynolds > 0.0 and np.isfinite(self.reynolds)):
            raise ValueError(f"reynolds must be positive, got {self.reynolds}.")
        if not (0.0 <= self.mach < 1.0):
            raise ValueError(f"mach must lie in [0, 1), got {self.mach}.")
        if not (0.0 < self.forced_transition_x <= 1.0):
            raise ValueError("forced_transition_x must lie in (0, 1].")
        object.__setattr__(self, "transition_mode", TransitionMode(self.transition_mode))

    @classmethod
    def from_degrees(cls, alpha_deg: float, **kwargs):
        return cls(alpha=float(np.deg2rad(alpha_deg)), **kwargs)

    @property
    def alpha_deg(self) -> float:
        return float(np.rad2deg(self.alpha))

    @property
    def freestream(self):
        """Unit freestream velocity (U, V)."""
        return float(np.cos(self.alpha)), float(np.sin(self.alpha))


@dataclass(frozen=True)
class SolveResult:
    """
    gamma : vortex strength of each panel (uniform over the loop)
    sigma : source strength of each panel
    """
    gamma: np.ndarray
    sigma: np.ndarray
    vt: np.ndarray
    cp: np.ndarray
    cl: float
    cm: float
    circulation: float
    lift_model: LiftModel
    flow: FlowConditions
    kutta_residual: float
    xmid: np.ndarray
    ymid: np.ndarray
    ds: np.ndarray
    chord: float = 1.0

    def __post_init__(self):
        _readonly(self, "gamma", "sigma", "vt", "cp", "xmid", "ymid", "ds")

    @property
    def n_panels(self) -> int:
        return len(self.gamma)

    @property
    def speed(self):
        return np.abs(self.vt)


# ======================================
## Boundary layer
# ======================================
@dataclass(frozen=True)
class SurfaceBoundaryLayer:
    """Stations of one surface, ordered from the stagnation point to the TE."""
    surface: str
    panel_indices: np.ndarray
    s: np.ndarray
    x: np.ndarray
    ue: np.ndarray
    theta: np.ndarray
    H: np.ndarray
    cf: np.ndarray
    state: Tuple[FlowState, ...]
    transition_index: Optional[int]
    separation_index: Optional[int]
    cd: float
    cd_friction: float
    degraded: bool = False

    def __post_init__(self):
        _readonly(self, "s", "x", "ue", "theta", "H", "cf")
        idx = np.array(self.panel_indices, dtype=int)
        idx.setflags(write=False)
        object.__setattr__(self, "panel_indices", idx)
        object.__setattr__(self, "state", tuple(FlowState(s) for s in self.state))

    @property
    def n_stations(self) -> int:
        return len(self.panel_indices)

    @property
    def transition_x(self) -> Optional[float]:
        if self.transition_index is None:
            return None
        return float(self.x[self.transition_index])

    @property
    def separation_x(self) -> Optional[float]:
        if self.separation_index is None:
            return None
        return float(self.x[self.separation_index])


@dataclass(frozen=True)
class BoundaryLayerResult:
    upper: SurfaceBoundaryLayer
    lower: SurfaceBoundaryLayer
    cdp: float
    stagnation_index: int
    degraded: bool = False
    message: str = ""
    stall_window: Tuple[float, float] = STALL_SEPARATION_X

    @property
    def n_panels(self) -> int:
        return self.upper.n_stations + self.lower.n_stations

    def _per_panel(self, name):
        out = np.full(self.n_panels, np.nan)
        for surf in (self.upper, self.lower):
            out[surf.panel_indices] = getattr(surf, name)
        return out

    @property
    def theta(self):
        return self._per_panel("theta")

    @property
    def shape_factor(self):
        return self._per_panel("H")

    @property
    def skin_friction(self):
        return self._per_panel("cf")

    @property
    def state(self):
        out = np.empty(self.n_panels, dtype=object)
        for surf in (self.upper, self.lower):
            for i, s in zip(surf.panel_indices, surf.state):
                out[i] = s
        return out

    @property
    def separated_mask(self):
        return np.array([s is FlowState.SEPARATED for s in self.state])

    @property
    def separated(self) -> bool:
        return self.upper.separation_index is not None or self.lower.separation_index is not None

    @property
    def transition_x_upper(self):
        return self.upper.transition_x

    @property
    def transition_x_lower(self):
        return self.lower.transition_x

    @property
    def separation_x_upper(self):
        return self.upper.separation_x

    @property
    def separation_x_lower(self):
        return self.lower.separation_x

    @property
    def probable_stall(self) -> bool:
        lo, hi = self.stall_window
        for x_sep in (self.separation_x_upper, self.separation_x_lower):
            if x_sep is not None and lo < x_sep < hi:
                return True
        return False


@dataclass(frozen=True)
class SurfaceDistribution:
    x: np.ndarray
    y: np.ndarray
    vt: np.ndarray
    cp: np.ndarray
    cp_inviscid: np.ndarray
    separated: np.ndarray
    n_upper: int
    chord: float = 1.0

    def __post_init__(self):
        _readonly(self, "x", "y", "vt", "cp", "cp_inviscid")
        mask = np.array(self.separated, dtype=bool)
        mask.setflags(write=False)
        object.__setattr__(self, "separated", mask)

    def upper(self):
        """(x/c, Cp) on the upper surface, LE -> TE."""
        k = self.n_upper
        return self.x[:k][::-1] / self.chord, self.cp[:k][::-1]

    def lower(self):
        """(x/c, Cp) on the lower surface, LE -> TE."""
        k = self.n_upper
        return self.x[k:] / self.chord, self.cp[k:]


# ======================================
## Polar
# ======================================
@dataclass(frozen=True)
class PolarPoint:
    alpha: float                             # [deg]
    cl: float
    cdp: Optional[float]
    cm: float = 0.0
    probable_stall: bool = False
    xtr_upper: Optional[float] = None
    xtr_lower: Optional[float] = None


@dataclass(frozen=True)
class PolarFailure:
    alpha: float                             # [deg]
    reason: str


@dataclass(frozen=True)
class PolarSweep:
    points: Tuple[PolarPoint, ...]
    failures: Tuple[PolarFailure, ...] = ()
    requested: int = 0
    code: str = ""
    flow: Optional[FlowConditions] = None

    def __post_init__(self):
        object.__setattr__(self, "points", tuple(self.points))
        object.__setattr__(self, "failures", tuple(self.failures))

        alphas = np.array([p.alpha for p in self.points], dtype=float)
        if alphas.size > 1 and not np.all(np.diff(alphas) > 0.0):
            raise ValueError("Polar points must have strictly increasing alpha.")

    def __len__(self):
        return len(self.points)

    def __iter__(self):
        return iter(self.points)

    @property
    def is_complete(self) -> bool:
        return len(self.points) == self.requested and not self.failures

    @property
    def alpha(self):
        return np.array([p.alpha for p in self.points], dtype=float)

    @property
    def cl(self):
        return np.array([p.cl for p in self.points], dtype=float)

    @property
    def cm(self):
        return np.array([p.cm for p in self.points], dtype=float)

    @property
    def cdp(self):
        return np.array([np.nan if p.cdp is None else p.cdp for p in self.points], dtype=float)
