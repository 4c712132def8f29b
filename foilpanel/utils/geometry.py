# FILE : foilpanel/utils/geometry.py

import numpy as np

from .classes import AirfoilGeometry
from .config import (
    DEFAULT_POINTS_PER_SURFACE, MIN_POINTS_PER_SURFACE, MIN_THICKNESS, MAX_THICKNESS, MAX_CAMBER,
    MIN_PANEL_LENGTH, THICKNESS_COEFFS,
)
from .errors import GeometryError


def parse_naca4(code) -> tuple:
    """
    Convert a NACA 4-digit designation ("2412", "NACA 0012") to (m, p, t)
    as fractions of chord.
    """
    digits = str(code).upper().replace("NACA", "").strip()
    if len(digits) != 4 or not digits.isdigit():
        raise GeometryError(f"'{code}' is not a NACA 4-digit designation.")

    m = int(digits[0]) / 100.0
    p = int(digits[1]) / 10.0
    t = int(digits[2:]) / 100.0

    return m, p, t


def cosine_spacing(n_points: int):
    """Chordwise stations x/c in [0, 1], clustered at both LE and TE."""
    beta = np.linspace(0.0, 1.0, n_points)
    return 0.5 * (1.0 - np.cos(np.pi * beta))


def thickness_distribution(xc, t: float):
    a0, a1, a2, a3, a4 = THICKNESS_COEFFS
    return 5.0 * t * (a0*np.sqrt(xc) + a1*xc + a2*xc**2 + a3*xc**3 + a4*xc**4)


def camber_line(xc, m: float, p: float):
    xc = np.asarray(xc, dtype=float)
    if m == 0.0 or p == 0.0:
        return np.zeros_like(xc)

    fore = m / p**2 * (2.0*p*xc - xc**2)
    aft  = m / (1.0 - p)**2 * ((1.0 - 2.0*p) + 2.0*p*xc - xc**2)

    return np.where(xc <= p, fore, aft)


def camber_slope(xc, m: float, p: float):
    xc = np.asarray(xc, dtype=float)
    if m == 0.0 or p == 0.0:
        return np.zeros_like(xc)

    fore = 2.0*m / p**2 * (p - xc)
    aft  = 2.0*m / (1.0 - p)**2 * (p - xc)

    return np.where(xc <= p, fore, aft)


def polygon_signed_area(x, y) -> float:
    """Shoelace area of a closed loop (first == last node); positive for CCW."""
    return 0.5 * float(np.sum(x[:-1]*y[1:] - x[1:]*y[:-1]))


def find_self_intersections(x, y):
    """
    Return (i, j) index pairs of loop segments that cross each other.
    Segments sharing a node (neighbours, and first/last through the TE) are skipped.
    """
    ax, ay = x[:-1], y[:-1]
    bx, by = x[1:] , y[1:]
    k = len(ax)

    ex, ey = bx - ax, by - ay

    # orientation of segment j end points relative to segment i (rows i, columns j)
    d1 = ex[:, None]*(ay[None, :] - ay[:, None]) - ey[:, None]*(ax[None, :] - ax[:, None])
    d2 = ex[:, None]*(by[None, :] - ay[:, None]) - ey[:, None]*(bx[None, :] - ax[:, None])
    # orientation of segment i end points relative to segment j
    d3 = ex[None, :]*(ay[:, None] - ay[None, :]) - ey[None, :]*(ax[:, None] - ax[None, :])
    d4 = ex[None, :]*(by[:, None] - ay[None, :]) - ey[None, :]*(bx[:, None] - ax[None, :])

    candidates = np.triu(np.ones((k, k), dtype=bool), k=2)
    candidates[0, k-1] = False

    crossing = candidates & (d1*d2 < 0.0) & (d3*d4 < 0.0)

    return np.argwhere(crossing)


def check_panel_loop(x, y, chord: float = 1.0):
    """Raise GeometryError if the closed loop cannot be panelled."""
    ds = np.hypot(np.diff(x), np.diff(y))

    if not np.all(np.isfinite(ds)):
        raise GeometryError("Non-finite coordinates in airfoil loop.")

    short = np.flatnonzero(ds <= MIN_PANEL_LENGTH * chord)
    if short.size:
        raise GeometryError(f"Zero-length panel(s) at index {short.tolist()}.")

    if polygon_signed_area(x, y) <= 0.0:
        raise GeometryError("Airfoil loop encloses no area or is not counter-clockwise.")

    crossings = find_self_intersections(x, y)
    if crossings.size:
        i, j = crossings[0]
        raise GeometryError(f"Self-intersecting airfoil loop (panels {i} and {j} cross).")


def generate_geometry(naca_digits, points_per_surface: int = DEFAULT_POINTS_PER_SURFACE,
                      chord: float = 1.0) -> AirfoilGeometry:
    """
    Build the closed NACA 4-digit loop.

    Parameters
    ----------
    naca_digits : str | tuple
        "2412" style code, or (m, p, t) as fractions of chord.
    points_per_surface : int
        Cosine-spaced stations per surface, LE and TE included.
    chord : float
        Chord length; the LE sits at the origin.

    Returns
    -------
    AirfoilGeometry with 2*points_per_surface - 1 nodes, TE node repeated at both ends.
    """
    if isinstance(naca_digits, str):
        m, p, t = parse_naca4(naca_digits)
    else:
        try:
            m, p, t = (float(v) for v in naca_digits)
        except (TypeError, ValueError) as exc:
            raise GeometryError(f"Expected a NACA code or (m, p, t), got {naca_digits!r}.") from exc

    # --- parameter checks ---
    if not (t > 0.0):
        raise GeometryError(f"Thickness must be positive, got t={t}.")
    if t < MIN_THICKNESS:
        raise GeometryError(f"Thickness t={t} is below {MIN_THICKNESS}.")
    if t > MAX_THICKNESS:
        raise GeometryError(f"Thickness t={t} exceeds {MAX_THICKNESS}.")
    if not (0.0 <= m <= MAX_CAMBER):
        raise GeometryError(f"Camber m={m} outside [0, {MAX_CAMBER}].")
    if m > 0.0 and not (0.0 < p < 1.0):
        raise GeometryError(f"Cambered section needs 0 < p < 1, got p={p}.")
    if not (0.0 <= p < 1.0):
        raise GeometryError(f"Camber position p={p} outside [0, 1).")
    if not (chord > 0.0 and np.isfinite(chord)):
        raise GeometryError(f"Chord must be positive, got {chord}.")
    if int(points_per_surface) != points_per_surface or points_per_surface < MIN_POINTS_PER_SURFACE:
        raise GeometryError(
            f"points_per_surface must be an integer >= {MIN_POINTS_PER_SURFACE}, got {points_per_surface}."
        )
    n = int(points_per_surface)

    # --- camber + thickness ---
    xc    = cosine_spacing(n)
    yt    = thickness_distribution(xc, t)
    yc    = camber_line(xc, m, p)
    theta = np.arctan(camber_slope(xc, m, p))

    xu = xc - yt*np.sin(theta); yu = yc + yt*np.cos(theta)
    xl = xc + yt*np.sin(theta); yl = yc - yt*np.cos(theta)

    # --- Selig loop: TE -> upper -> LE -> lower -> TE ---
    x = np.r_[xu[::-1], xl[1:]] * chord
    y = np.r_[yu[::-1], yl[1:]] * chord

    # close the TE exactly
    x[-1], y[-1] = x[0], y[0]

    check_panel_loop(x, y, chord)

    return AirfoilGeometry(m=m, p=p, t=t, points_per_surface=n, chord=float(chord), x=x, y=y)
