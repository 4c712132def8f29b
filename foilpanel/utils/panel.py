# FILE : foilpanel/utils/panel.py

import numpy as np

from .classes import AirfoilGeometry, PanelSystem
from .errors import GeometryError
from .geometry import check_panel_loop
from .vortex_kernels import influence_coefficients


def data_preparation(x, y) -> dict:
    """
    Panel lengths, tangent components, slope and control points of a closed
    node loop. Panel n runs from node n to node n+1.
    """
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)

    dx = np.diff(x)
    dy = np.diff(y)

    ds = np.hypot(dx, dy)
    if np.any(ds <= 0.0):
        raise GeometryError("Zero-length panel in node loop.")

    sine   = dy / ds
    cosine = dx / ds
    slope  = np.arctan2(sine, cosine)       # angle of ds wrt horizontal axis

    # --- pivotal (control) points ---
    xmid = 0.5 * (x[:-1] + x[1:])
    ymid = 0.5 * (y[:-1] + y[1:])

    geom = dict()
    geom["ds"    ] = ds
    geom["sine"  ] = sine
    geom["cosine"] = cosine
    geom["slope" ] = slope
    geom["xmid"  ] = xmid
    geom["ymid"  ] = ymid
    # outward normal of a counter-clockwise loop
    geom["nx"    ] = sine
    geom["ny"    ] = -cosine

    return geom


def kutta_row(tangential, te_upper: int, te_lower: int):
    """
    Trailing-edge closure: tangential velocities on the two TE panels equal and
    opposite along their tangents, i.e. equal speed leaving the trailing edge.
    """
    return tangential[te_upper, :] + tangential[te_lower, :]


def build_panel_system(geometry: AirfoilGeometry) -> PanelSystem:
    """
    Panel the geometry and assemble the alpha-independent influence matrix.

    Unknowns are one source strength per panel followed by a single vortex
    strength shared by all panels, N+1 in total. Rows 0..N-1 enforce zero
    normal velocity at the control points, row N is the Kutta closure.
    """
    x, y = geometry.x, geometry.y
    check_panel_loop(x, y, geometry.chord)

    geom = data_preparation(x, y)
    n    = len(geom["ds"])

    coeffs = influence_coefficients(x, y, geom["xmid"], geom["ymid"],
                                    geom["cosine"], geom["sine"], geom["ds"],
                                    geom["nx"], geom["ny"])

    # Fail fast if something is off
    if not all(np.all(np.isfinite(c)) for c in coeffs.values()):
        raise GeometryError("Non-finite influence coefficients (coincident panel nodes?).")

    # --- [sources | vortex] columns ---
    normal     = np.c_[coeffs["source_normal"],     coeffs["vortex_normal"].sum(axis=1)]
    tangential = np.c_[coeffs["source_tangential"], coeffs["vortex_tangential"].sum(axis=1)]

    A = np.zeros((n+1, n+1))
    A[:n, :] = normal
    A[n, :]  = kutta_row(tangential, 0, n-1)

    return PanelSystem(
        geometry=geometry,
        x=x, y=y,
        xmid=geom["xmid"], ymid=geom["ymid"],
        ds=geom["ds"], sine=geom["sine"], cosine=geom["cosine"], slope=geom["slope"],
        nx=geom["nx"], ny=geom["ny"],
        influence=A, tangential=tangential,
    )
