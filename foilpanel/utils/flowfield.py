# FILE : foilpanel/utils/flowfield.py

import numpy as np
from matplotlib.path import Path

from .classes import PanelSystem, SolveResult
from .config import DEFAULT_SETTINGS, SolverSettings
from .performance import prandtl_glauert_factor
from .vortex_kernels import panel_velocities


def make_airfoil_path(panel_system: PanelSystem) -> Path:
    """Matplotlib Path for point-in-polygon tests."""
    # np.c_ --> horizontally concatenate x and y
    return Path(np.c_[panel_system.x, panel_system.y], closed=True)


def distance_to_surface(panel_system: PanelSystem, px, py):
    """Shortest distance from each point to the panel loop."""
    px = np.atleast_1d(np.asarray(px, dtype=float)).ravel()
    py = np.atleast_1d(np.asarray(py, dtype=float)).ravel()

    x0, y0 = panel_system.x[:-1], panel_system.y[:-1]
    dx, dy = np.diff(panel_system.x), np.diff(panel_system.y)
    S      = panel_system.ds

    # vector from each start-of-panel to each point
    rx = px[:, None] - x0[None, :]
    ry = py[:, None] - y0[None, :]

    # param along segment, clamped [0,1]
    t = np.clip((rx*dx + ry*dy) / (S*S), 0.0, 1.0)

    # closest points on segments
    cx = x0 + t*dx
    cy = y0 + t*dy

    d2 = (px[:, None] - cx)**2 + (py[:, None] - cy)**2

    return np.sqrt(d2.min(axis=1))


def induced_velocity(panel_system: PanelSystem, sigma, gamma, px, py):
    """Velocity (/V_inf) induced by the source and vortex sheets at the given points."""
    with np.errstate(divide="ignore", invalid="ignore"):
        us, vs, uv, vv = panel_velocities(px, py, panel_system.x[:-1], panel_system.y[:-1],
                                                  panel_system.cosine, panel_system.sine, panel_system.ds)
    return us @ sigma + uv @ gamma, vs @ sigma + vv @ gamma


def _excluded_points(panel_system, px, py, settings):
    inside = make_airfoil_path(panel_system).contains_points(np.c_[px, py])
    near   = distance_to_surface(panel_system, px, py) <= settings.field_surface_tolerance * panel_system.chord
    return inside | near


def sample_field_points(panel_system: PanelSystem, solve_result: SolveResult, px, py,
                        settings: SolverSettings = DEFAULT_SETTINGS):
    """
    Velocity (u, v) at arbitrary points: freestream + induced/beta.
    Points inside the body or on its surface are NaN.
    """
    px = np.atleast_1d(np.asarray(px, dtype=float)).ravel()
    py = np.atleast_1d(np.asarray(py, dtype=float)).ravel()

    flow = solve_result.flow
    beta = prandtl_glauert_factor(flow.mach, settings)
    U, V = flow.freestream

    u = np.full(px.shape, np.nan)
    v = np.full(px.shape, np.nan)

    keep = ~_excluded_points(panel_system, px, py, settings)
    if np.any(keep):
        ui, vi = induced_velocity(panel_system, solve_result.sigma, solve_result.gamma, px[keep], py[keep])
        u[keep] = U + ui / beta
        v[keep] = V + vi / beta

    return u, v


def sample_field(panel_system: PanelSystem, solve_result: SolveResult, point,
                 settings: SolverSettings = DEFAULT_SETTINGS):
    """Velocity vector at one field point; [nan, nan] inside or on the body."""
    px, py = point
    u, v = sample_field_points(panel_system, solve_result, [px], [py], settings)
    return np.array([u[0], v[0]])


def sample_field_grid(panel_system: PanelSystem, solve_result: SolveResult, X, Y,
                      settings: SolverSettings = DEFAULT_SETTINGS):
    """Velocity on a meshgrid; returns (U, V) shaped like X."""
    X = np.asarray(X, dtype=float)
    Y = np.asarray(Y, dtype=float)

    u, v = sample_field_points(panel_system, solve_result, X.ravel(), Y.ravel(), settings)

    return u.reshape(X.shape), v.reshape(X.shape)


def field_grid(panel_system: PanelSystem, alpha: float, np_x: int, np_y: int):
    """
    Plot window around the airfoil, enlarged on the side the freestream
    is deflected toward.
    """
    x, y  = panel_system.x, panel_system.y
    chord = panel_system.chord

    # --- enlarge computational field (initial) ---
    x_min, x_max = np.min(x) - chord*0.5, np.max(x) + chord*0.75
    y_min, y_max = np.min(y) - chord*0.4, np.max(y) + chord*0.4

    # --- (account for) airflow angle ---
    y_delta = abs(np.tan(alpha) * (x_max - x_min))
    if alpha > 0.0:
        y_max += y_delta
    elif alpha < 0.0:
        y_min -= y_delta

    return np.meshgrid(np.linspace(x_min, x_max, np_x),
                       np.linspace(y_min, y_max, np_y))
