# FILE : foilpanel/utils/config.py
"""
Named solver constants and the settings container built from them.

Every tunable threshold of the solver lives here. Overrides are read from a
plain Python-literal dict file (see `solverparams.txt`), the same way the
flow-plot parameters are read from `plotparams_flow.txt`.
"""

import ast
from dataclasses import dataclass, fields, replace

# ======================================
## Geometry
# ======================================
DEFAULT_POINTS_PER_SURFACE = 160
MIN_POINTS_PER_SURFACE     = 10
MIN_THICKNESS              = 0.01
MAX_THICKNESS              = 0.40
MAX_CAMBER                 = 0.10
MIN_PANEL_LENGTH           = 1e-9          # relative to chord

# closed trailing-edge thickness law (last coefficient closes the TE)
THICKNESS_COEFFS = (0.2969, -0.1260, -0.3516, 0.2843, -0.1036)

# ======================================
## Panel system / linear solve
# ======================================
MAX_CONDITION_NUMBER = 1.0e12
PIVOT_TOLERANCE      = 1.0e-12             # relative to the largest pivot
KUTTA_CHECK_TOL      = 1.0e-3

# ======================================
## Surface / field sampling
# ======================================
MIN_PG_BETA_SQUARED     = 0.05             # floor on 1 - M^2
SEPARATED_CP_DAMPING    = 0.25
FIELD_SURFACE_TOLERANCE = 1.0e-6           # relative to chord

# ======================================
## Lift models
# ======================================
ANALYTIC_CL_SLOPE_SCALE     = 1.27         # multiplies 2*pi per radian
ANALYTIC_ALPHA0_PER_CAMBER  = -92.0        # zero-lift angle [deg] per unit camber
ANALYTIC_CM_PER_CAMBER      = -2.5
ANALYTIC_BLEND_WEIGHT       = 1.0          # 1.0 -> analytic fit only

# ======================================
## Boundary layer
# ======================================
MIN_EDGE_VELOCITY = 1.0e-4
MIN_ARC_LENGTH    = 1.0e-7                 # relative to chord
MIN_RE_THETA      = 10.0

# a march past these bounds is treated as diverged
MAX_MOMENTUM_THICKNESS = 0.1             # relative to chord
MAX_SURFACE_DRAG       = 0.5             # Squire-Young CD of one surface

# Thwaites
THWAITES_COEFF = 0.45
HIEMENZ_COEFF  = 0.075
LAMBDA_MIN     = -0.1
LAMBDA_MAX     = 0.25

# Michel transition: Re_theta >= c (1 + offset/Re_x) Re_x^n
MICHEL_COEFF    = 1.174
MICHEL_RE_X_OFF = 22400.0
MICHEL_EXPONENT = 0.46

# Head / Ludwieg-Tillmann
TURBULENT_START_H = 1.4

# separation
LAMINAR_SEPARATION_H   = 3.55              # lambda = -0.09 in the Thwaites fit
TURBULENT_SEPARATION_H = 2.4
STALL_SEPARATION_X     = (0.2, 0.95)

DEFAULT_FORCED_TRANSITION_X = 0.05

# ======================================
## Polar sweep
# ======================================
DEFAULT_ALPHA_MIN    = -10.0
DEFAULT_ALPHA_MAX    = 15.0
DEFAULT_ALPHA_STEP   = 0.5
DEFAULT_REYNOLDS     = 1.0e6
DEFAULT_MACH         = 0.10
ALPHA_STEP_TOLERANCE = 1.0e-9


@dataclass(frozen=True)
class SolverSettings:
    """Tunable solver thresholds. Defaults are the module constants above."""

    max_condition_number: float = MAX_CONDITION_NUMBER
    pivot_tolerance: float      = PIVOT_TOLERANCE

    min_pg_beta_squared: float  = MIN_PG_BETA_SQUARED
    separated_cp_damping: float = SEPARATED_CP_DAMPING
    field_surface_tolerance: float = FIELD_SURFACE_TOLERANCE

    analytic_blend_weight: float = ANALYTIC_BLEND_WEIGHT

    michel_coeff: float           = MICHEL_COEFF
    laminar_separation_h: float   = LAMINAR_SEPARATION_H
    turbulent_separation_h: float = TURBULENT_SEPARATION_H
    turbulent_start_h: float      = TURBULENT_START_H
    stall_separation_x: tuple     = STALL_SEPARATION_X
    max_momentum_thickness: float = MAX_MOMENTUM_THICKNESS
    max_surface_drag: float       = MAX_SURFACE_DRAG

    def __post_init__(self):
        if self.max_condition_number <= 1.0:
            raise ValueError("max_condition_number must be greater than 1.")
        if not (0.0 < self.min_pg_beta_squared <= 1.0):
            raise ValueError("min_pg_beta_squared must lie in (0, 1].")
        if not (0.0 <= self.separated_cp_damping <= 1.0):
            raise ValueError("separated_cp_damping must lie in [0, 1].")
        if not (0.0 <= self.analytic_blend_weight <= 1.0):
            raise ValueError("analytic_blend_weight must lie in [0, 1].")
        if self.turbulent_start_h >= self.turbulent_separation_h:
            raise ValueError("turbulent_start_h must be below turbulent_separation_h.")
        if not (self.max_momentum_thickness > 0.0 and self.max_surface_drag > 0.0):
            raise ValueError("max_momentum_thickness and max_surface_drag must be positive.")

        lo, hi = self.stall_separation_x
        if not (0.0 <= lo < hi <= 1.0):
            raise ValueError("stall_separation_x must be an increasing pair inside [0, 1].")
        object.__setattr__(self, "stall_separation_x", (float(lo), float(hi)))

    def replace(self, **changes):
        return replace(self, **changes)


DEFAULT_SETTINGS = SolverSettings()


def _read_literal_dict(path: str) -> dict:
    with open(path, "r") as f:
        params = ast.literal_eval(f.read())

    if not isinstance(params, dict):
        raise ValueError(f"{path} must contain a Python dict literal.")

    return params


def load_settings(path: str, base: SolverSettings = DEFAULT_SETTINGS) -> SolverSettings:
    """
    Read solver overrides from a dict-literal file, e.g.

        {"michel_coeff": 1.2, "turbulent_separation_h": 2.6}
    """
    params = _read_literal_dict(path)

    known = {f.name for f in fields(SolverSettings)}
    unknown = sorted(set(params) - known)
    if unknown:
        raise ValueError(f"Unknown solver settings in {path}: {', '.join(unknown)}")

    return base.replace(**params)


def load_plot_params(path: str) -> dict:
    """Read the flow-plot grid parameters (np_x, np_y, ...) from a dict-literal file."""
    params = _read_literal_dict(path)

    for key in ("np_x", "np_y"):
        if key not in params:
            raise ValueError(f"{path} is missing '{key}'.")
        if int(params[key]) < 2:
            raise ValueError(f"'{key}' must be at least 2.")

    return params
