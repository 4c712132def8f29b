# FILE : foilpanel/utils/polar.py

from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace

import numpy as np

from .classes import (
    AirfoilGeometry, FlowConditions, LiftModel, PolarFailure, PolarPoint, PolarSweep,
)
from .config import (
    DEFAULT_SETTINGS, SolverSettings, DEFAULT_POINTS_PER_SURFACE,
    DEFAULT_ALPHA_MIN, DEFAULT_ALPHA_MAX, DEFAULT_ALPHA_STEP, ALPHA_STEP_TOLERANCE,
)
from .errors import SingularSystem
from .geometry import generate_geometry
from .panel import build_panel_system
from .solver_inviscid import PanelSolver
from .solver_viscous import estimate_boundary_layer


def default_polar_sweep():
    """(alpha_min, alpha_max, alpha_step) in degrees."""
    return DEFAULT_ALPHA_MIN, DEFAULT_ALPHA_MAX, DEFAULT_ALPHA_STEP


def alpha_samples(alpha_min: float, alpha_max: float, alpha_step: float):
    """
    Integer-indexed alpha grid [deg]: alpha_i = alpha_min + i*step.
    Reversed bounds are swapped; the last value never exceeds alpha_max.
    """
    if not (alpha_step > 0.0 and np.isfinite(alpha_step)):
        raise ValueError(f"alpha_step must be positive, got {alpha_step}.")
    if not (np.isfinite(alpha_min) and np.isfinite(alpha_max)):
        raise ValueError("alpha bounds must be finite.")

    a0, a1 = sorted((float(alpha_min), float(alpha_max)))

    n = int(np.floor((a1 - a0) / alpha_step + ALPHA_STEP_TOLERANCE)) + 1
    alphas = a0 + alpha_step*np.arange(n)

    return np.minimum(alphas, a1)


def _as_geometry(geometry, points_per_surface):
    if isinstance(geometry, AirfoilGeometry):
        return geometry
    return generate_geometry(geometry, points_per_surface)


def _polar_point(solver: PanelSolver, flow: FlowConditions, alpha_deg: float, lift_model, settings):

    flow_i = replace(flow, alpha=float(np.deg2rad(alpha_deg)))
    result = solver.solve(flow_i, lift_model)

    if not flow_i.viscous:
        return PolarPoint(alpha=float(alpha_deg), cl=result.cl, cdp=None, cm=result.cm)

    bl = estimate_boundary_layer(result, flow_i, settings)
    return PolarPoint(
        alpha=float(alpha_deg), cl=result.cl, cdp=bl.cdp, cm=result.cm,
        probable_stall=bl.probable_stall,
        xtr_upper=bl.transition_x_upper, xtr_lower=bl.transition_x_lower,
    )


def _run_sweep(solver, panel_system, flow, alphas, lift_model, settings, workers, verbose):

    def evaluate(alpha_deg):
        try:
            return _polar_point(solver, flow, alpha_deg, lift_model, settings)
        except SingularSystem as exc:
            return PolarFailure(alpha=float(alpha_deg), reason=str(exc))

    if workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            outcomes = list(pool.map(evaluate, alphas))
    else:
        outcomes = [evaluate(a) for a in alphas]

    points   = [o for o in outcomes if isinstance(o, PolarPoint)]
    failures = [o for o in outcomes if isinstance(o, PolarFailure)]

    if verbose:
        for fail in failures:
            print(f"    --> alpha = {fail.alpha:+.2f} deg skipped: {fail.reason}")

    return PolarSweep(points=points, failures=failures, requested=len(alphas),
                      code=panel_system.geometry.code, flow=flow)


def _factor(panel_system, flow, alphas, settings):
    """PanelSolver for the sweep, or a fully failed sweep if the matrix is singular."""
    try:
        return PanelSolver(panel_system, settings), None
    except SingularSystem as exc:
        failures = [PolarFailure(alpha=float(a), reason=str(exc)) for a in alphas]
        return None, PolarSweep(points=(), failures=failures, requested=len(alphas),
                                code=panel_system.geometry.code, flow=flow)


def sweep_polar(geometry, flow_template: FlowConditions,
                alpha_min: float = DEFAULT_ALPHA_MIN, alpha_max: float = DEFAULT_ALPHA_MAX,
                alpha_step: float = DEFAULT_ALPHA_STEP, *,
                lift_model=LiftModel.PANEL_INTEGRATED,
                points_per_surface: int = DEFAULT_POINTS_PER_SURFACE,
                settings: SolverSettings = DEFAULT_SETTINGS,
                workers: int = 1, verbose: bool = False) -> PolarSweep:
    """
    Polar over an alpha range [deg] for one flow template (its alpha is ignored).

    The panel system and its LU factors are built once and shared by every
    alpha. An alpha whose solve fails is skipped and recorded in `failures`.
    """
    alphas = alpha_samples(alpha_min, alpha_max, alpha_step)

    geometry     = _as_geometry(geometry, points_per_surface)
    panel_system = build_panel_system(geometry)

    if verbose:
        print(f"Starting polar sweep: NACA {geometry.code} | {len(alphas)} alphas "
              f"[{alphas[0]:.2f}, {alphas[-1]:.2f}] deg | Re = {flow_template.reynolds:.3e} | "
              f"M = {flow_template.mach:.2f} | {'viscous' if flow_template.viscous else 'inviscid'}")

    solver, failed = _factor(panel_system, flow_template, alphas, settings)
    if failed is not None:
        if verbose:
            print("    --> panel system is singular, no alphas solved.")
        return failed

    sweep = _run_sweep(solver, panel_system, flow_template, alphas, lift_model, settings,
                       max(int(workers), 1), verbose)

    if verbose:
        print(f"    --> {len(sweep)}/{sweep.requested} alphas solved.")
        print("Polar sweep completed.\n")

    return sweep


def sweep_polars(geometry, flows, alpha_min: float = DEFAULT_ALPHA_MIN,
                 alpha_max: float = DEFAULT_ALPHA_MAX, alpha_step: float = DEFAULT_ALPHA_STEP, *,
                 lift_model=LiftModel.PANEL_INTEGRATED,
                 points_per_surface: int = DEFAULT_POINTS_PER_SURFACE,
                 settings: SolverSettings = DEFAULT_SETTINGS,
                 workers: int = 1, verbose: bool = False):
    """
    One polar per flow template (e.g. a Reynolds x Mach matrix), all sharing a
    single panel system. Returns a list of (flow, PolarSweep).
    """
    alphas = alpha_samples(alpha_min, alpha_max, alpha_step)

    geometry     = _as_geometry(geometry, points_per_surface)
    panel_system = build_panel_system(geometry)

    flows  = list(flows)
    out    = []
    solver = None
    for flow in flows:
        if solver is None:
            solver, failed = _factor(panel_system, flow, alphas, settings)
            if failed is not None:
                # the matrix does not depend on the flow, so every curve fails
                return [(f, replace(failed, flow=f)) for f in flows]

        if verbose:
            print(f"Starting polar: Re = {flow.reynolds:.3e} | M = {flow.mach:.2f}")

        out.append((flow, _run_sweep(solver, panel_system, flow, alphas, lift_model, settings,
                                     max(int(workers), 1), verbose)))

    return out


def flow_matrix(reynolds_values, mach_values, **flow_kwargs):
    """Flow templates for every (Re, M) pair, Reynolds-major."""
    return [FlowConditions(reynolds=float(re), mach=float(mach), **flow_kwargs)
            for re in reynolds_values for mach in mach_values]
