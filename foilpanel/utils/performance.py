# FILE : foilpanel/utils/performance.py

import numpy as np

from .classes import LiftModel, PanelSystem, SolveResult, SurfaceDistribution
from .config import (
    DEFAULT_SETTINGS, SolverSettings,
    ANALYTIC_CL_SLOPE_SCALE, ANALYTIC_ALPHA0_PER_CAMBER, ANALYTIC_CM_PER_CAMBER,
)
from .rhs import freestream_tangential


def prandtl_glauert_factor(mach: float, settings: SolverSettings = DEFAULT_SETTINGS) -> float:
    """beta = sqrt(1 - M^2), floored so the correction stays bounded near M = 1."""
    return float(np.sqrt(np.clip(1.0 - mach**2, settings.min_pg_beta_squared, 1.0)))


def surface_velocity(panel_system: PanelSystem, flow, strengths):
    """
    Signed tangential velocity (/V_inf) at each control point, positive along
    the panel tangent. strengths is the [sigma, gamma] solution vector.
    """
    return freestream_tangential(panel_system, flow) + panel_system.tangential @ strengths


def pressure_coefficient(vt, mach: float = 0.0, settings: SolverSettings = DEFAULT_SETTINGS):
    cp0 = 1.0 - np.asarray(vt)**2
    return cp0 / prandtl_glauert_factor(mach, settings)


def pressure_forces(panel_system: PanelSystem, cp, alpha: float, x_ref: float = 0.25):
    """
    Integrate Cp over the panels.

    Returns (cl, cd, cm) with cm about (x_ref * chord, 0), nose-up positive.
    """
    chord = panel_system.chord
    ds    = panel_system.ds

    # --- panel force per unit dynamic pressure (pressure acts along -n) ---
    fx = -cp * panel_system.nx * ds
    fy = -cp * panel_system.ny * ds

    Fx, Fy = np.sum(fx) / chord, np.sum(fy) / chord

    cl = Fy*np.cos(alpha) - Fx*np.sin(alpha)
    cd = Fx*np.cos(alpha) + Fy*np.sin(alpha)

    rx = panel_system.xmid - x_ref*chord
    ry = panel_system.ymid
    cm = -np.sum(rx*fy - ry*fx) / chord**2

    return float(cl), float(cd), float(cm)


def analytic_section_coeffs(m: float, alpha: float, mach: float = 0.0,
                            settings: SolverSettings = DEFAULT_SETTINGS):
    """
    Thin-airfoil fit tuned against reference polars: (cl, cm).

    Only cl carries the Prandtl-Glauert factor; cm is the incompressible fit.
    """
    beta   = prandtl_glauert_factor(mach, settings)
    alpha0 = np.deg2rad(ANALYTIC_ALPHA0_PER_CAMBER * m)

    cl = ANALYTIC_CL_SLOPE_SCALE * 2.0*np.pi * (alpha - alpha0)
    cm = ANALYTIC_CM_PER_CAMBER * m

    return float(cl / beta), float(cm)


def section_coefficients(panel_system: PanelSystem, flow, gamma, cp,
                         lift_model=LiftModel.PANEL_INTEGRATED,
                         settings: SolverSettings = DEFAULT_SETTINGS):
    """
    Returns (cl, cm, circulation) for the requested lift model.

    PanelIntegrated : cl = 2*Gamma/(V c) / beta, cm from the corrected Cp
    AnalyticBlend   : w*analytic + (1-w)*panel with w = settings.analytic_blend_weight
    """
    lift_model  = LiftModel(lift_model)
    beta        = prandtl_glauert_factor(flow.mach, settings)
    circulation = float(np.sum(gamma * panel_system.ds))

    cl = 2.0 * circulation / panel_system.chord / beta
    _, _, cm = pressure_forces(panel_system, cp, flow.alpha)

    if lift_model is LiftModel.ANALYTIC_BLEND:
        cl_a, cm_a = analytic_section_coeffs(panel_system.geometry.m, flow.alpha, flow.mach, settings)
        w  = settings.analytic_blend_weight
        cl = w*cl_a + (1.0 - w)*cl
        cm = w*cm_a + (1.0 - w)*cm

    return float(cl), float(cm), circulation


def damp_separated_cp(cp, boundary_layer, damping: float):
    """
    Relax Cp on separated stations toward the plateau value found at the
    separation station of each surface.
    """
    cp = np.array(cp, dtype=float)
    separated = np.zeros(len(cp), dtype=bool)

    for surf in (boundary_layer.upper, boundary_layer.lower):
        if surf.separation_index is None:
            continue

        idx     = surf.panel_indices[surf.separation_index:]
        plateau = cp[idx[0]]

        cp[idx] = plateau + damping*(cp[idx] - plateau)
        separated[idx] = True

    return cp, separated


def sample_surface(panel_system: PanelSystem, solve_result: SolveResult, boundary_layer=None,
                   settings: SolverSettings = DEFAULT_SETTINGS) -> SurfaceDistribution:
    """
    Surface x, y, tangential velocity and Cp at the control points.

    With a viscous flow and a boundary-layer result the separated region gets
    the plateau damping; otherwise Cp is the inviscid (compressibility
    corrected) value.
    """
    cp_inviscid = np.array(solve_result.cp)

    if boundary_layer is not None and solve_result.flow.viscous:
        cp, separated = damp_separated_cp(cp_inviscid, boundary_layer, settings.separated_cp_damping)
    else:
        cp, separated = cp_inviscid.copy(), np.zeros(len(cp_inviscid), dtype=bool)

    return SurfaceDistribution(
        x=panel_system.xmid, y=panel_system.ymid,
        vt=solve_result.vt, cp=cp, cp_inviscid=cp_inviscid,
        separated=separated, n_upper=panel_system.n_upper, chord=panel_system.chord,
    )


def display_airfoil_performance(result: SolveResult, code: str = "", boundary_layer=None):

    flow = result.flow

    print(f"\n-- -- -- -- -- -- -- -- -- -- -- -- -- -- -- -- -- -- -- -- -- -- -- -- -- -- -- --")
    print(f"Results : AIRFOIL NACA {code}\n" \
          "Solver  : Source-Vortex Panel Method (Hess-Smith)\n" \
          f"Flow    : {'Viscous (integral BL)' if flow.viscous else 'Inviscid'}\n")

    print(
        f"alpha = {flow.alpha_deg:2.2f} deg  |  "
        f"Re = {flow.reynolds:.3e}  |  "
        f"M = {flow.mach:.2f}  |  "
        f"transition = {flow.transition_mode.value}"
    )
    print(f"Lift model       = {result.lift_model.value}\n")

    print(f"Circulation      = {result.circulation:.4f} (per V_inf c)")
    print(f"Lift coefficient = {result.cl:.4f}")
    print(f"CM (c/4)         = {result.cm:.4f}")
    print(f"Kutta residual   = {result.kutta_residual:.3e}")

    if boundary_layer is not None:
        def fmt(x):
            return "-" if x is None else f"{x:.3f}"

        print(f"CDp              = {boundary_layer.cdp:.5f}")
        print(f"x_tr (up | low)  = {fmt(boundary_layer.transition_x_upper)} | {fmt(boundary_layer.transition_x_lower)}")
        print(f"x_sep (up | low) = {fmt(boundary_layer.separation_x_upper)} | {fmt(boundary_layer.separation_x_lower)}")
        print(f"Probable stall   = {boundary_layer.probable_stall}")
        if boundary_layer.degraded:
            print(f"Boundary layer degraded: {boundary_layer.message}")

    print(f"-- -- -- -- -- -- -- -- -- -- -- -- -- -- -- -- -- -- -- -- -- -- -- -- -- -- -- --\n")
