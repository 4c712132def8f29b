# FILE : foilpanel/utils/vortex_kernels.py

import numpy as np

inv2pi = 1.0 / (2.0*np.pi)
inv4pi = 1.0 / (4.0*np.pi)


def panel_velocities(px, py, x0, y0, cosine, sine, ds):
    """
    Velocity induced at points (px, py) by unit-strength constant source and
    vortex panels.

    Panels start at (x0, y0) with unit tangent (cosine, sine) and length ds.
    Vortex strength is positive clockwise. Returns (us, vs, uv, vv), each
    shaped (n_points, n_panels).

    In panel-local coordinates (xl along the panel, zl to its left):
        source : u_l = ln(r1^2 / r2^2) / 4pi      w_l = (theta2 - theta1) / 2pi
        vortex : u_l = (theta2 - theta1) / 2pi    w_l = ln(r2^2 / r1^2) / 4pi
    """
    px = np.atleast_1d(np.asarray(px, dtype=float)).ravel()
    py = np.atleast_1d(np.asarray(py, dtype=float)).ravel()

    # --- vector from each panel start to each field point ---
    dx = px[:, None] - x0[None, :]
    dy = py[:, None] - y0[None, :]

    tx = cosine[None, :]
    ty = sine[None, :]
    L  = ds[None, :]

    # --- panel-local coordinates ---
    xl =  dx*tx + dy*ty
    zl = -dx*ty + dy*tx

    theta1 = np.arctan2(zl, xl)
    theta2 = np.arctan2(zl, xl - L)

    r1_sq = xl**2 + zl**2
    r2_sq = (xl - L)**2 + zl**2

    dtheta = (theta2 - theta1) * inv2pi
    dlog   = np.log(r2_sq / r1_sq) * inv4pi

    # --- vortex, back to global axes ---
    uv = dtheta*tx - dlog*ty
    vv = dtheta*ty + dlog*tx

    # source field is the vortex field turned 90 deg counter-clockwise
    us = -vv
    vs =  uv

    return us, vs, uv, vv


def vortex_panel_velocity(px, py, x0, y0, cosine, sine, ds):
    """(u, v) induced by unit clockwise vortex panels."""
    _, _, uv, vv = panel_velocities(px, py, x0, y0, cosine, sine, ds)
    return uv, vv


def source_panel_velocity(px, py, x0, y0, cosine, sine, ds):
    """(u, v) induced by unit source panels."""
    us, vs, _, _ = panel_velocities(px, py, x0, y0, cosine, sine, ds)
    return us, vs


def influence_coefficients(x, y, xmid, ymid, cosine, sine, ds, nx, ny):
    """
    Normal and tangential influence matrices at the panel control points.

    Returns a dict with, for control point i and unit strength on panel j,
        "source_normal", "source_tangential", "vortex_normal", "vortex_tangential"
    Normal components are along the outward normal, tangential ones along
    panel i's tangent.

    Self terms are the exterior limits of the panel's own sheet:
        source : +1/2 normal, 0 tangential
        vortex : 0 normal, -1/2 tangential
    """
    with np.errstate(divide="ignore", invalid="ignore"):
        us, vs, uv, vv = panel_velocities(xmid, ymid, x[:-1], y[:-1], cosine, sine, ds)

    nx_, ny_ = nx[:, None], ny[:, None]
    tx_, ty_ = cosine[:, None], sine[:, None]

    coeffs = dict()
    coeffs["source_normal"    ] = us*nx_ + vs*ny_
    coeffs["source_tangential"] = us*tx_ + vs*ty_
    coeffs["vortex_normal"    ] = uv*nx_ + vv*ny_
    coeffs["vortex_tangential"] = uv*tx_ + vv*ty_

    diag = np.diag_indices(len(ds))
    coeffs["source_normal"    ][diag] = 0.5
    coeffs["source_tangential"][diag] = 0.0
    coeffs["vortex_normal"    ][diag] = 0.0
    coeffs["vortex_tangential"][diag] = -0.5

    return coeffs
